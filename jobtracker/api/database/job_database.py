"""SQLite database for users, job applications, activities, templates and AI usage counters"""

import sqlite3
import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict, Any, Callable, Iterable
from contextlib import contextmanager
import logging

from ..models.activity_models import ActivityType
from ..models.template_models import TemplateType
from ..models.user_models import AIUsageCounter

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = [t.value for t in ActivityType]
TEMPLATE_TYPES = [t.value for t in TemplateType]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as ISO-8601; naive values are taken as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def to_sql(value: Any) -> Any:
    """Convert enums and datetimes to the plain values stored in sqlite"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return to_iso(value)
    return value


def from_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sql_list(values: Iterable[str]) -> str:
    return ", ".join(f"'{v}'" for v in values)


def _dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, default=to_sql)


class JobDatabase:
    """SQLite database manager for users, their job applications and everything attached to them"""

    SCHEMA_VERSION = 2

    # Columns a job update may touch (salary and tags are handled separately)
    UPDATABLE_JOB_COLUMNS = (
        "company", "position", "status", "job_type", "job_location",
        "application_date", "application_deadline", "job_description",
        "company_website", "job_posting_url", "application_method",
        "notes", "category", "priority",
    )

    UPDATABLE_ACTIVITY_COLUMNS = (
        "type", "title", "description", "scheduled_date", "completed_date",
        "priority", "reminder_date",
    )

    # Activities are always read with a summary of their job
    _ACTIVITY_SELECT = """
        SELECT a.*, j.position AS job_position, j.company AS job_company, j.status AS job_status
        FROM activities a JOIN jobs j ON j.id = a.job_id
    """

    SORT_ORDERS = {
        "latest": "created_at DESC",
        "oldest": "created_at ASC",
        "a-z": "position ASC",
        "z-a": "position DESC",
    }

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else Path("data/jobtracker.db")
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    @contextmanager
    def get_connection(self, immediate: bool = False):
        """Get database connection with automatic cleanup

        With immediate=True the write lock is taken up front, so a
        read-modify-write inside the block cannot interleave with another writer.
        """
        conn = sqlite3.connect(str(self.db_path), timeout=10)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """Initialize database schema"""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("SELECT version FROM schema_version")
            row = cursor.fetchone()
            current_version = row[0] if row else 0

            if current_version < self.SCHEMA_VERSION:
                self._create_schema(cursor)
                cursor.execute("DELETE FROM schema_version")
                cursor.execute("INSERT INTO schema_version (version) VALUES (?)",
                               (self.SCHEMA_VERSION,))
                logger.info(f"Database schema updated to version {self.SCHEMA_VERSION}")

    def _create_schema(self, cursor):
        """Create all database tables"""

        # Users, with the embedded AI usage counter
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                location TEXT DEFAULT 'my city',
                role TEXT NOT NULL DEFAULT 'user' CHECK(role IN ('user', 'admin')),
                ai_request_count INTEGER NOT NULL DEFAULT 0 CHECK(ai_request_count >= 0),
                ai_request_reset_date TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_users_email ON users(email)")

        # Job applications
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS jobs (
                id TEXT PRIMARY KEY,
                company TEXT NOT NULL,
                position TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('pending', 'interview', 'declined')),
                job_type TEXT CHECK(job_type IN ('full-time', 'part-time', 'remote', 'internship')),
                job_location TEXT NOT NULL DEFAULT 'my city',
                application_date TEXT NOT NULL,
                application_deadline TEXT,
                salary_min INTEGER,
                salary_max INTEGER,
                salary_currency TEXT,
                job_description TEXT,
                company_website TEXT,
                job_posting_url TEXT,
                application_method TEXT NOT NULL DEFAULT 'website',
                notes TEXT,
                category TEXT,
                tags TEXT NOT NULL DEFAULT '[]',
                priority TEXT CHECK(priority IN ('low', 'medium', 'high')),
                created_by TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_jobs_owner ON jobs(created_by)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_jobs_owner_status ON jobs(created_by, status)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_jobs_created ON jobs(created_at DESC)")

        # Activities logged against a job (schema v2)
        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS activities (
                id TEXT PRIMARY KEY,
                job_id TEXT NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
                type TEXT NOT NULL CHECK(type IN ({_sql_list(ACTIVITY_TYPES)})),
                title TEXT NOT NULL,
                description TEXT,
                scheduled_date TEXT,
                completed_date TEXT,
                is_completed INTEGER NOT NULL DEFAULT 0,
                priority TEXT NOT NULL DEFAULT 'medium' CHECK(priority IN ('low', 'medium', 'high')),
                reminder_date TEXT,
                contact_person TEXT,
                attachments TEXT NOT NULL DEFAULT '[]',
                created_by TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_activities_owner_job ON activities(created_by, job_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_activities_owner_completed ON activities(created_by, is_completed)")

        # Reusable message templates (schema v2)
        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS templates (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                type TEXT NOT NULL DEFAULT 'email' CHECK(type IN ({_sql_list(TEMPLATE_TYPES)})),
                subject TEXT,
                content TEXT NOT NULL,
                description TEXT,
                variables TEXT NOT NULL DEFAULT '[]',
                is_favorite INTEGER NOT NULL DEFAULT 0,
                usage_count INTEGER NOT NULL DEFAULT 0,
                created_by TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_templates_owner_type ON templates(created_by, type)")

    # ============== User Operations ==============

    def create_user(
        self,
        name: str,
        email: str,
        role: str = "user",
        location: str = "my city",
        now: Optional[datetime] = None,
    ) -> str:
        """Create a user with a fresh AI usage counter, returns user ID"""
        now_iso = to_iso(now or utcnow())
        user_id = f"user_{uuid.uuid4().hex[:12]}"

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO users (id, name, email, location, role,
                                   ai_request_count, ai_request_reset_date, created_at)
                VALUES (?, ?, ?, ?, ?, 0, ?, ?)
            """, (user_id, name, email.lower().strip(), location, role, now_iso, now_iso))

        return user_id

    def get_user(self, user_id: str) -> Optional[Dict]:
        """Get user by ID"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cursor.fetchone()
            return self._row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[Dict]:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE email = ?", (email.lower().strip(),))
            row = cursor.fetchone()
            return self._row_to_user(row) if row else None

    def list_users(self) -> List[Dict]:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users ORDER BY created_at")
            return [self._row_to_user(r) for r in cursor.fetchall()]

    def _row_to_user(self, row: sqlite3.Row) -> Dict:
        user = dict(row)
        user["ai_request_reset_date"] = from_iso(user["ai_request_reset_date"])
        user["created_at"] = from_iso(user["created_at"])
        return user

    # ============== AI Usage Counter ==============

    def get_ai_usage(self, user_id: str) -> Optional[AIUsageCounter]:
        """Load a user's AI usage counter"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT ai_request_count, ai_request_reset_date FROM users WHERE id = ?",
                (user_id,)
            )
            row = cursor.fetchone()

            if not row:
                return None

            return AIUsageCounter(
                ai_request_count=row["ai_request_count"],
                ai_request_reset_date=from_iso(row["ai_request_reset_date"]),
            )

    def update_ai_usage(
        self,
        user_id: str,
        update: Callable[[AIUsageCounter], AIUsageCounter],
    ) -> AIUsageCounter:
        """
        Read, transform and write a user's AI usage counter in one transaction.

        The write lock is held from the read to the commit, so concurrent
        callers are serialized. An exception raised by `update` rolls back
        and leaves the stored counter unchanged.

        Raises:
            LookupError: no user with this id
        """
        with self.get_connection(immediate=True) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT ai_request_count, ai_request_reset_date FROM users WHERE id = ?",
                (user_id,)
            )
            row = cursor.fetchone()
            if not row:
                raise LookupError(f"No user with id {user_id}")

            current = AIUsageCounter(
                ai_request_count=row["ai_request_count"],
                ai_request_reset_date=from_iso(row["ai_request_reset_date"]),
            )
            updated = update(current)

            if updated != current:
                cursor.execute("""
                    UPDATE users SET ai_request_count = ?, ai_request_reset_date = ?
                    WHERE id = ?
                """, (updated.ai_request_count, to_iso(updated.ai_request_reset_date), user_id))

            return updated

    # ============== Job Operations ==============

    def insert_job(self, user_id: str, job_data: Dict, created_at: Optional[datetime] = None) -> str:
        """Insert a new job owned by user_id, returns job ID"""
        now = created_at or utcnow()
        job_id = f"job_{uuid.uuid4().hex[:12]}"
        salary = job_data.get("salary") or {}

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO jobs (
                    id, company, position, status, job_type, job_location,
                    application_date, application_deadline,
                    salary_min, salary_max, salary_currency,
                    job_description, company_website, job_posting_url,
                    application_method, notes, category, tags, priority,
                    created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                job_id,
                job_data["company"],
                job_data["position"],
                to_sql(job_data.get("status", "pending")),
                to_sql(job_data.get("job_type")),
                job_data.get("job_location", "my city"),
                to_iso(job_data.get("application_date") or now),
                to_iso(job_data.get("application_deadline")),
                salary.get("min"),
                salary.get("max"),
                to_sql(salary.get("currency", "USD")) if salary else None,
                job_data.get("job_description"),
                job_data.get("company_website"),
                job_data.get("job_posting_url"),
                to_sql(job_data.get("application_method", "website")),
                job_data.get("notes"),
                to_sql(job_data.get("category")),
                json.dumps(job_data.get("tags", [])),
                to_sql(job_data.get("priority")),
                user_id,
                to_iso(now),
                to_iso(now),
            ))

        return job_id

    def get_job(self, job_id: str) -> Optional[Dict]:
        """Get job by ID"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM jobs WHERE id = ?", (job_id,))
            row = cursor.fetchone()
            return self._row_to_job(row) if row else None

    def update_job(self, job_id: str, changes: Dict) -> Optional[Dict]:
        """Apply a partial update, returns the updated job or None if missing"""
        assignments = []
        params: List[Any] = []

        for column in self.UPDATABLE_JOB_COLUMNS:
            if column in changes:
                assignments.append(f"{column} = ?")
                params.append(to_sql(changes[column]))

        if "salary" in changes:
            salary = changes["salary"] or {}
            assignments.extend(["salary_min = ?", "salary_max = ?", "salary_currency = ?"])
            params.extend([
                salary.get("min"),
                salary.get("max"),
                to_sql(salary.get("currency", "USD")) if salary else None,
            ])

        if "tags" in changes:
            assignments.append("tags = ?")
            params.append(json.dumps(changes["tags"] or []))

        assignments.append("updated_at = ?")
        params.append(to_iso(utcnow()))

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE jobs SET {', '.join(assignments)} WHERE id = ?",
                params + [job_id]
            )
            if cursor.rowcount == 0:
                return None

            cursor.execute("SELECT * FROM jobs WHERE id = ?", (job_id,))
            return self._row_to_job(cursor.fetchone())

    def delete_job(self, job_id: str) -> bool:
        """Delete a job"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM jobs WHERE id = ?", (job_id,))
            return cursor.rowcount > 0

    def search_jobs(
        self,
        user_id: str,
        status: str = None,
        job_type: str = None,
        category: str = None,
        priority: str = None,
        search: str = None,
        sort: str = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[List[Dict], int]:
        """Search a user's jobs with filters, returns (jobs, total_count)"""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            conditions = ["created_by = ?"]
            params: List[Any] = [user_id]

            for column, value in (
                ("status", status),
                ("job_type", job_type),
                ("category", category),
                ("priority", priority),
            ):
                if value:
                    conditions.append(f"{column} = ?")
                    params.append(value)

            if search:
                escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
                conditions.append("position LIKE ? ESCAPE '\\'")
                params.append(f"%{escaped}%")

            where_clause = " AND ".join(conditions)
            order_by = self.SORT_ORDERS.get(sort, "rowid ASC")

            cursor.execute(f"SELECT COUNT(*) FROM jobs WHERE {where_clause}", params)
            total = cursor.fetchone()[0]

            cursor.execute(f"""
                SELECT * FROM jobs
                WHERE {where_clause}
                ORDER BY {order_by}
                LIMIT ? OFFSET ?
            """, params + [limit, offset])

            return [self._row_to_job(r) for r in cursor.fetchall()], total

    def get_jobs_for_user(self, user_id: str) -> List[Dict]:
        """Get every job owned by a user"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM jobs WHERE created_by = ? ORDER BY created_at",
                (user_id,)
            )
            return [self._row_to_job(r) for r in cursor.fetchall()]

    def delete_jobs_for_user(self, user_id: str) -> int:
        """Delete every job owned by a user, returns the number removed"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM jobs WHERE created_by = ?", (user_id,))
            return cursor.rowcount

    def _row_to_job(self, row: sqlite3.Row) -> Dict:
        job = dict(row)

        salary_min = job.pop("salary_min")
        salary_max = job.pop("salary_max")
        salary_currency = job.pop("salary_currency")
        if salary_min is None and salary_max is None and salary_currency is None:
            job["salary"] = None
        else:
            job["salary"] = {
                "min": salary_min,
                "max": salary_max,
                "currency": salary_currency or "USD",
            }

        job["tags"] = json.loads(job.get("tags") or "[]")
        for field in ("application_date", "application_deadline", "created_at", "updated_at"):
            job[field] = from_iso(job.get(field))
        return job

    # ============== Activity Operations ==============

    def insert_activity(self, user_id: str, data: Dict, created_at: Optional[datetime] = None) -> str:
        """Insert an activity for data["job_id"], returns activity ID"""
        now = to_iso(created_at or utcnow())
        activity_id = f"act_{uuid.uuid4().hex[:12]}"

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO activities (
                    id, job_id, type, title, description,
                    scheduled_date, completed_date, is_completed, priority, reminder_date,
                    contact_person, attachments, created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                activity_id,
                data["job_id"],
                to_sql(data["type"]),
                data["title"],
                data.get("description"),
                to_iso(data.get("scheduled_date")),
                to_iso(data.get("completed_date")),
                int(bool(data.get("is_completed", False))),
                to_sql(data.get("priority") or "medium"),
                to_iso(data.get("reminder_date")),
                _dump_json(data.get("contact_person")),
                _dump_json(data.get("attachments") or []),
                user_id,
                now,
                now,
            ))

        return activity_id

    def get_activity(self, activity_id: str) -> Optional[Dict]:
        """Get activity by ID, with a summary of its job"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"{self._ACTIVITY_SELECT} WHERE a.id = ?", (activity_id,))
            row = cursor.fetchone()
            return self._row_to_activity(row) if row else None

    def update_activity(self, activity_id: str, changes: Dict) -> Optional[Dict]:
        """Apply a partial update, returns the updated activity or None if missing"""
        assignments = []
        params: List[Any] = []

        for column, value in changes.items():
            if column in ("contact_person", "attachments"):
                value = _dump_json(value)
            elif column == "is_completed":
                value = int(bool(value))
            elif column in self.UPDATABLE_ACTIVITY_COLUMNS:
                value = to_sql(value)
            else:
                continue
            assignments.append(f"{column} = ?")
            params.append(value)

        with self.get_connection() as conn:
            if not self._apply_update(conn, "activities", activity_id, assignments, params):
                return None
            row = conn.execute(f"{self._ACTIVITY_SELECT} WHERE a.id = ?", (activity_id,)).fetchone()
            return self._row_to_activity(row)

    def delete_activity(self, activity_id: str) -> bool:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM activities WHERE id = ?", (activity_id,))
            return cursor.rowcount > 0

    def search_activities(
        self,
        user_id: str,
        job_id: str = None,
        activity_type: str = None,
        is_completed: Optional[bool] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[List[Dict], int]:
        """Search a user's activities, newest first, returns (activities, total_count)"""
        conditions = ["a.created_by = ?"]
        params: List[Any] = [user_id]

        if job_id:
            conditions.append("a.job_id = ?")
            params.append(job_id)
        if activity_type:
            conditions.append("a.type = ?")
            params.append(activity_type)
        if is_completed is not None:
            conditions.append("a.is_completed = ?")
            params.append(int(is_completed))

        where_clause = " AND ".join(conditions)

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT COUNT(*) FROM activities a WHERE {where_clause}", params)
            total = cursor.fetchone()[0]

            cursor.execute(f"""
                {self._ACTIVITY_SELECT}
                WHERE {where_clause}
                ORDER BY a.created_at DESC, a.rowid DESC
                LIMIT ? OFFSET ?
            """, params + [limit, offset])

            return [self._row_to_activity(r) for r in cursor.fetchall()], total

    def get_activities_for_job(self, job_id: str) -> List[Dict]:
        """Every activity of a job, newest first"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"{self._ACTIVITY_SELECT} WHERE a.job_id = ? ORDER BY a.created_at DESC, a.rowid DESC",
                (job_id,)
            )
            return [self._row_to_activity(r) for r in cursor.fetchall()]

    def get_upcoming_activities(self, user_id: str, start: datetime, end: datetime) -> List[Dict]:
        """
        Open activities whose scheduled or reminder date falls in [start, end].

        Ordered by scheduled date, then reminder date; activities without a
        scheduled date come after the scheduled ones.
        """
        start_iso, end_iso = to_iso(start), to_iso(end)

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                {self._ACTIVITY_SELECT}
                WHERE a.created_by = ?
                  AND a.is_completed = 0
                  AND ((a.scheduled_date >= ? AND a.scheduled_date <= ?)
                       OR (a.reminder_date >= ? AND a.reminder_date <= ?))
                ORDER BY a.scheduled_date IS NULL, a.scheduled_date, a.reminder_date
            """, (user_id, start_iso, end_iso, start_iso, end_iso))
            return [self._row_to_activity(r) for r in cursor.fetchall()]

    def _row_to_activity(self, row: sqlite3.Row) -> Dict:
        activity = dict(row)
        activity["job"] = {
            "id": activity["job_id"],
            "position": activity.pop("job_position"),
            "company": activity.pop("job_company"),
            "status": activity.pop("job_status"),
        }
        activity["is_completed"] = bool(activity["is_completed"])
        activity["contact_person"] = json.loads(activity["contact_person"]) if activity["contact_person"] else None
        activity["attachments"] = json.loads(activity.get("attachments") or "[]")
        for field in ("scheduled_date", "completed_date", "reminder_date", "created_at", "updated_at"):
            activity[field] = from_iso(activity.get(field))
        return activity

    # ============== Template Operations ==============

    def insert_template(self, user_id: str, data: Dict, created_at: Optional[datetime] = None) -> str:
        """Insert a template owned by user_id, returns template ID"""
        now = to_iso(created_at or utcnow())
        template_id = f"tpl_{uuid.uuid4().hex[:12]}"

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO templates (
                    id, name, type, subject, content, description, variables,
                    is_favorite, usage_count, created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                template_id,
                data["name"],
                to_sql(data.get("type") or "email"),
                data.get("subject"),
                data["content"],
                data.get("description"),
                json.dumps(data.get("variables") or []),
                int(bool(data.get("is_favorite", False))),
                data.get("usage_count", 0),
                user_id,
                now,
                now,
            ))

        return template_id

    def get_template(self, template_id: str) -> Optional[Dict]:
        with self.get_connection() as conn:
            row = conn.execute("SELECT * FROM templates WHERE id = ?", (template_id,)).fetchone()
            return self._row_to_template(row) if row else None

    def update_template(self, template_id: str, changes: Dict) -> Optional[Dict]:
        """Apply a partial update, returns the updated template or None if missing"""
        assignments = []
        params: List[Any] = []

        for column in ("name", "type", "subject", "content", "description", "variables"):
            if column in changes:
                assignments.append(f"{column} = ?")
                value = changes[column]
                params.append(json.dumps(value or []) if column == "variables" else to_sql(value))

        with self.get_connection() as conn:
            if not self._apply_update(conn, "templates", template_id, assignments, params):
                return None
            row = conn.execute("SELECT * FROM templates WHERE id = ?", (template_id,)).fetchone()
            return self._row_to_template(row)

    def delete_template(self, template_id: str) -> bool:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM templates WHERE id = ?", (template_id,))
            return cursor.rowcount > 0

    def list_templates(
        self,
        user_id: str,
        template_type: str = None,
        favorites_only: bool = False,
    ) -> List[Dict]:
        """A user's templates, favorites first, then newest first"""
        conditions = ["created_by = ?"]
        params: List[Any] = [user_id]
        if template_type:
            conditions.append("type = ?")
            params.append(template_type)
        if favorites_only:
            conditions.append("is_favorite = 1")

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                SELECT * FROM templates
                WHERE {' AND '.join(conditions)}
                ORDER BY is_favorite DESC, created_at DESC, rowid DESC
            """, params)
            return [self._row_to_template(r) for r in cursor.fetchall()]

    def toggle_template_favorite(self, template_id: str) -> Optional[Dict]:
        """Flip is_favorite, returns the updated template or None if missing"""
        with self.get_connection() as conn:
            if not self._apply_update(conn, "templates", template_id, ["is_favorite = 1 - is_favorite"], []):
                return None
            row = conn.execute("SELECT * FROM templates WHERE id = ?", (template_id,)).fetchone()
            return self._row_to_template(row)

    def increment_template_usage(self, template_id: str) -> Optional[int]:
        """Add one to usage_count, returns the new count or None if missing"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE templates SET usage_count = usage_count + 1 WHERE id = ?",
                (template_id,)
            )
            if cursor.rowcount == 0:
                return None
            cursor.execute("SELECT usage_count FROM templates WHERE id = ?", (template_id,))
            return cursor.fetchone()[0]

    def _row_to_template(self, row: sqlite3.Row) -> Dict:
        template = dict(row)
        template["variables"] = json.loads(template.get("variables") or "[]")
        template["is_favorite"] = bool(template["is_favorite"])
        template["created_at"] = from_iso(template["created_at"])
        template["updated_at"] = from_iso(template["updated_at"])
        return template

    def _apply_update(self, conn, table: str, row_id: str, assignments: List[str], params: List[Any]) -> bool:
        """Run an UPDATE that also stamps updated_at; False if the row does not exist"""
        cursor = conn.execute(
            f"UPDATE {table} SET {', '.join(assignments + ['updated_at = ?'])} WHERE id = ?",
            params + [to_iso(utcnow()), row_id]
        )
        return cursor.rowcount > 0


# Singleton instance
_db_instance: Optional[JobDatabase] = None


def get_job_database() -> JobDatabase:
    """Get or create database instance"""
    global _db_instance
    if _db_instance is None:
        from ..config import get_settings
        _db_instance = JobDatabase(get_settings().database_path)
    return _db_instance
