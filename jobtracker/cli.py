"""
Command-Line Interface for JobTracker

Usage:
    python -m jobtracker.cli init
    python -m jobtracker.cli create-user jane@example.com "Jane Doe" --admin
    python -m jobtracker.cli seed jane@example.com --count 50
    python -m jobtracker.cli stats jane@example.com
    python -m jobtracker.cli purge jane@example.com
    python -m jobtracker.cli serve
"""

import random
import shutil
from datetime import datetime, timedelta
from typing import Optional
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from jobtracker.api.config import get_settings
from jobtracker.api.database.job_database import JobDatabase, utcnow
from jobtracker.api.services.analytics_service import AnalyticsService, percentage

app = typer.Typer(
    name="jobtracker",
    help="Job application tracker with analytics and an AI assistant",
    add_completion=False
)
console = Console()

# Sample data for seeding
COMPANIES = [
    "Google", "Microsoft", "Amazon", "Apple", "Meta", "Netflix", "Spotify",
    "Airbnb", "Uber", "Adobe", "Salesforce", "Nvidia", "Stripe", "Shopify",
    "Atlassian", "Datadog", "Snowflake", "Cloudflare", "MongoDB",
]

POSITIONS = {
    "software-engineering": [
        "Software Engineer", "Senior Software Engineer", "Backend Developer",
        "Frontend Developer", "DevOps Engineer", "Site Reliability Engineer",
    ],
    "data-science": [
        "Data Scientist", "Senior Data Scientist", "Machine Learning Engineer",
        "Data Engineer", "Data Analyst",
    ],
    "product-management": ["Product Manager", "Senior Product Manager", "Technical Product Manager"],
    "design": ["UX Designer", "Product Designer", "UX Researcher", "Design Lead"],
    "marketing": ["Marketing Manager", "Growth Marketing Manager", "SEO Specialist"],
    "sales": ["Account Executive", "Sales Engineer", "Business Development Manager"],
}

LOCATIONS = [
    "San Francisco, CA", "New York, NY", "Seattle, WA", "Austin, TX",
    "Boston, MA", "Remote", "Remote (US)", "Hybrid - New York",
]

TAGS = [
    ["startup", "fast-paced"],
    ["enterprise", "stable"],
    ["remote-first", "flexible"],
    ["equity"],
    ["mentorship", "growth"],
    ["work-life-balance"],
]


def get_db() -> JobDatabase:
    return JobDatabase(get_settings().database_path)


def _require_user(db: JobDatabase, email: str) -> dict:
    user = db.get_user_by_email(email)
    if not user:
        console.print(f"[red]User with email {email} not found[/red]")
        raise typer.Exit(1)
    return user


def generate_job(rng: random.Random, days_back: int = 180) -> tuple[dict, datetime]:
    """Build one plausible job record and its creation time"""
    now = utcnow()
    category = rng.choice(list(POSITIONS))
    company = rng.choice(COMPANIES)
    position = rng.choice(POSITIONS[category])

    senior = any(word in position for word in ("Senior", "Lead"))
    salary_min = rng.randint(120_000, 170_000) if senior else rng.randint(70_000, 110_000)
    salary_max = salary_min + rng.randint(20_000, 60_000)

    created_at = now - timedelta(days=rng.randint(0, days_back - 1), minutes=rng.randint(0, 1439))
    job = {
        "company": company,
        "position": position,
        "status": rng.choice(["pending", "interview", "declined"]),
        "job_type": rng.choice(["full-time", "part-time", "remote", "internship"]),
        "job_location": rng.choice(LOCATIONS),
        "application_date": created_at,
        "application_deadline": now + timedelta(days=rng.randint(1, 30)) if rng.random() > 0.5 else None,
        "salary": {"min": salary_min, "max": salary_max, "currency": "USD"},
        "job_description": f"Join {company} as a {position}.",
        "application_method": rng.choice(["email", "website", "linkedin", "recruiter", "other"]),
        "category": category,
        "tags": rng.choice(TAGS),
        "priority": rng.choice(["low", "medium", "high"]),
    }
    return job, created_at


@app.command()
def init():
    """Create the database and a .env file"""
    env_example = Path(".env.example")
    env_file = Path(".env")
    if not env_file.exists() and env_example.exists():
        shutil.copy(env_example, env_file)
        console.print("[green]✓ Created .env from .env.example[/green]")
        get_settings.cache_clear()
    elif env_file.exists():
        console.print("[green]✓ .env already exists[/green]")

    settings = get_settings()
    db = get_db()
    console.print(f"[green]✓ Database ready at {db.db_path}[/green]")

    if not (settings.openai_api_key or settings.groq_api_key):
        console.print("[yellow]No LLM API key configured; AI endpoints will fail until one is set in .env[/yellow]")


@app.command("create-user")
def create_user(
    email: str = typer.Argument(..., help="Email address"),
    name: str = typer.Argument(..., help="Display name"),
    location: str = typer.Option("my city", "--location", "-l", help="User location"),
    admin: bool = typer.Option(False, "--admin", help="Grant admin role (no AI limit)"),
):
    """Create a user and print their id"""
    db = get_db()
    if db.get_user_by_email(email):
        console.print(f"[red]A user with email {email} already exists[/red]")
        raise typer.Exit(1)

    user_id = db.create_user(name, email, role="admin" if admin else "user", location=location)
    console.print(f"[green]✓ Created {'admin' if admin else 'user'} {user_id}[/green]")
    console.print("Send it as the X-User-Id header when calling the API.")


@app.command()
def users():
    """List users and their AI usage"""
    db = get_db()
    limit = get_settings().ai_request_limit

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Email", style="white")
    table.add_column("Role", style="yellow")
    table.add_column("AI Requests", style="green")
    table.add_column("Window Start", style="white")

    for user in db.list_users():
        used = f"{user['ai_request_count']}" if user["role"] == "admin" else f"{user['ai_request_count']}/{limit}"
        table.add_row(
            user["id"],
            user["email"],
            user["role"],
            used,
            user["ai_request_reset_date"].strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command()
def seed(
    email: str = typer.Argument(..., help="Email of the user to seed"),
    count: int = typer.Option(50, "--count", "-n", min=1, max=1000, help="Number of jobs to create"),
    days: int = typer.Option(180, "--days", "-d", min=1, help="Spread jobs over this many past days"),
    seed_value: Optional[int] = typer.Option(None, "--seed", help="Random seed for repeatable data"),
):
    """Create sample job applications for a user"""
    db = get_db()
    user = _require_user(db, email)
    rng = random.Random(seed_value)

    with console.status(f"[bold green]Creating {count} jobs..."):
        for _ in range(count):
            job, created_at = generate_job(rng, days_back=days)
            db.insert_job(user["id"], job, created_at=created_at)

    console.print(f"[green]✓ Created {count} jobs for {user['email']}[/green]")


@app.command()
def purge(
    email: str = typer.Argument(..., help="Email of the user whose jobs are deleted"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete every job owned by a user"""
    db = get_db()
    user = _require_user(db, email)

    if not yes:
        typer.confirm(f"Delete all jobs for {user['email']}?", abort=True)

    removed = db.delete_jobs_for_user(user["id"])
    console.print(f"[green]✓ Deleted {removed} jobs for {user['email']}[/green]")


@app.command()
def stats(email: str = typer.Argument(..., help="Email of the user")):
    """Show the analytics summary for a user"""
    db = get_db()
    user = _require_user(db, email)
    snapshot = AnalyticsService(db).get_advanced_analytics(user["id"])

    table = Table(title=f"Analytics for {user['email']}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Total Jobs", str(snapshot.total_jobs))
    table.add_row("Pending", f"{snapshot.status_distribution.pending} ({snapshot.status_percentages.pending}%)")
    table.add_row("Interview", f"{snapshot.status_distribution.interview} ({snapshot.status_percentages.interview}%)")
    table.add_row("Declined", f"{snapshot.status_distribution.declined} ({snapshot.status_percentages.declined}%)")
    table.add_row("Response Rate", f"{snapshot.response_rate}%")
    table.add_row("Success Rate", f"{snapshot.success_rate}%")
    table.add_row("Avg. per Week", str(snapshot.avg_apps_per_week))
    table.add_row("Last 7 Days", str(snapshot.recent_applications.last_7_days))
    table.add_row("Last 30 Days", str(snapshot.recent_applications.last_30_days))

    console.print(table)

    if snapshot.category_performance:
        categories = Table(title="Category Performance")
        categories.add_column("Category", style="cyan")
        categories.add_column("Total", style="white")
        categories.add_column("Interview Rate", style="green")
        for row in snapshot.category_performance:
            categories.add_row(row.category, str(row.total), f"{row.interview_rate}%")
        console.print(categories)

    if snapshot.monthly_trend:
        trend = Table(title="Monthly Trend")
        trend.add_column("Month", style="cyan")
        trend.add_column("Total", style="white")
        trend.add_column("Pending", style="yellow")
        trend.add_column("Interview", style="green")
        trend.add_column("Declined", style="red")
        for entry in snapshot.monthly_trend:
            trend.add_row(entry.date, str(entry.total), str(entry.pending), str(entry.interview), str(entry.declined))
        console.print(trend)

    funnel = snapshot.conversion_funnel
    funnel_table = Table(title="Conversion Funnel")
    funnel_table.add_column("Stage", style="cyan")
    funnel_table.add_column("Count", style="white")
    funnel_table.add_column("Of Applied", style="green")
    for stage, count in (
        ("Applied", funnel.applied),
        ("Responded", funnel.responded),
        ("Interviewing", funnel.interviewing),
    ):
        funnel_table.add_row(stage, str(count), f"{percentage(count, funnel.applied)}%")
    console.print(funnel_table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API server"""
    import uvicorn

    settings = get_settings()
    console.print(Panel(
        f"{settings.app_name} v{settings.app_version}\n"
        f"Database: {Path(settings.database_path)}\n"
        f"AI limit: {settings.ai_request_limit} per {settings.ai_window_hours}h",
        title="Starting API",
        border_style="green",
    ))

    uvicorn.run(
        "jobtracker.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    app()
