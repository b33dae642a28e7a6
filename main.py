"""
JobTracker - Main Entry Point

Usage:
    # Start the API server
    python main.py api

    # Create the database
    python main.py init

    # Any CLI command
    python main.py cli seed jane@example.com --count 50

    # Show analytics for a user
    python main.py stats jane@example.com
"""

import sys


def main():
    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()

    if command == "api":
        from jobtracker.cli import app
        sys.argv = [sys.argv[0], "serve", *sys.argv[2:]]
        app()

    elif command == "cli":
        from jobtracker.cli import app
        sys.argv = sys.argv[1:]  # Remove 'cli' from args
        if len(sys.argv) == 1:
            sys.argv.append("--help")
        app()

    elif command in ["init", "stats", "users"]:
        from jobtracker.cli import app
        app()

    elif command in ["help", "-h", "--help"]:
        print_help()

    else:
        print(f"Unknown command: {command}")
        print_help()


def print_help():
    print("""
JobTracker
==========

Commands:
    api             Start the FastAPI server
    init            Create the database schema
    stats EMAIL     Show analytics for a user
    users           List users and their AI usage
    cli ...         Run any CLI command
    help            Show this help message

Examples:
    python main.py init
    python main.py cli create-user jane@example.com "Jane Doe"
    python main.py cli seed jane@example.com --count 50
    python main.py stats jane@example.com
    python main.py api

For CLI subcommands, run:
    python -m jobtracker.cli --help
""")


if __name__ == "__main__":
    main()
