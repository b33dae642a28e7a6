"""JobTracker - job application tracking with analytics and an AI assistant"""

__version__ = "1.0.0"
