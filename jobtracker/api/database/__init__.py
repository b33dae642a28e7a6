"""Database module for job applications and users"""

from .job_database import JobDatabase, get_job_database

__all__ = ["JobDatabase", "get_job_database"]
