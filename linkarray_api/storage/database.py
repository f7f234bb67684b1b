"""Database management with SQLite via aiosqlite."""

import logging
import sqlite3
import uuid
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from ..config import settings

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, username, email, role, created_at, updated_at"
LINK_COLUMNS = "id, user_id, title, url, is_visible, created_at, updated_at"

# Fields a user may be looked up by
LOOKUP_FIELDS = {"id", "username", "email"}


class DuplicateError(Exception):
    """Raised when a unique column (username, email) already holds the value."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} already in use")


def _timestamp(value: datetime | None = None) -> str:
    """Serialize an instant as a UTC ISO-8601 string."""
    value = value or datetime.now(UTC)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def _duplicate_field(error: sqlite3.IntegrityError) -> str:
    # e.g. "UNIQUE constraint failed: users.email"
    message = str(error)
    if "UNIQUE" in message and "." in message:
        return message.rsplit(".", 1)[-1]
    return "value"


def _user_from_row(row: aiosqlite.Row) -> dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "username": row["username"],
        "email": row["email"],
        "role": row["role"],
        "created_at": datetime.fromisoformat(row["created_at"]),
        "updated_at": datetime.fromisoformat(row["updated_at"]),
    }


def _link_from_row(row: aiosqlite.Row) -> dict[str, Any]:
    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "title": row["title"],
        "url": row["url"],
        "is_visible": bool(row["is_visible"]),
        "created_at": datetime.fromisoformat(row["created_at"]),
        "updated_at": datetime.fromisoformat(row["updated_at"]),
    }


class Database:
    """Async SQLite database manager using aiosqlite."""

    def __init__(self, db_path: str | Path):
        """Initialize database with a file path."""
        self.db_path = str(db_path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the connection and initialize schema."""
        if self._connection is not None:
            return

        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row

        from .schema import INIT_SCHEMA

        await self._connection.executescript(INIT_SCHEMA)
        await self._connection.commit()

        logger.info(f"Database connected: {self.db_path}")

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.info("Database disconnected")

    def _conn(self) -> aiosqlite.Connection:
        if not self._connection:
            raise RuntimeError("Database not connected")
        return self._connection

    # User operations
    async def create_user(
        self,
        name: str,
        username: str,
        email: str,
        password_hash: str,
        role: str = "user",
        created_at: datetime | None = None,
    ) -> dict[str, Any]:
        """Create a new user and return it (without the password hash).

        Raises:
            DuplicateError: If the username or email is already registered
        """
        conn = self._conn()
        user_id = str(uuid.uuid4())
        now = _timestamp(created_at)

        try:
            await conn.execute(
                """
                INSERT INTO users
                (id, name, username, email, password_hash, role, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, name, username, email, password_hash, role, now, now),
            )
            await conn.commit()
        except sqlite3.IntegrityError as e:
            await conn.rollback()
            raise DuplicateError(_duplicate_field(e)) from e

        logger.debug(f"Created user: {user_id}")
        user = await self.get_user(user_id)
        if user is None:
            raise RuntimeError(f"User {user_id} not found after insert")
        return user

    async def get_user(self, user_id: str, with_links: bool = False) -> dict[str, Any] | None:
        """Get user by ID."""
        return await self.get_user_by_field("id", user_id, with_links=with_links)

    async def get_user_by_field(
        self, field: str, value: str, with_links: bool = False
    ) -> dict[str, Any] | None:
        """Get user by one of the unique lookup fields (id, username, email)."""
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Cannot look up users by '{field}'")

        conn = self._conn()
        async with conn.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE {field} = ?", (value,)
        ) as cursor:
            row = await cursor.fetchone()

        if not row:
            return None

        user = _user_from_row(row)
        if with_links:
            user["links"] = await self.list_links(user["id"])
        return user

    async def get_password_hash(self, user_id: str) -> str | None:
        """Get the stored password hash for a user."""
        conn = self._conn()
        async with conn.execute(
            "SELECT password_hash FROM users WHERE id = ?", (user_id,)
        ) as cursor:
            row = await cursor.fetchone()
        return row["password_hash"] if row else None

    async def list_users(self, limit: int = 50, offset: int = 0) -> list[dict[str, Any]]:
        """List users, newest first."""
        conn = self._conn()
        async with conn.execute(
            f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC LIMIT ? OFFSET ?",
            (limit, offset),
        ) as cursor:
            rows = await cursor.fetchall()
        return [_user_from_row(row) for row in rows]

    async def count_users(self) -> int:
        """Count registered users."""
        conn = self._conn()
        async with conn.execute("SELECT COUNT(*) FROM users") as cursor:
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def update_user(
        self,
        user_id: str,
        name: str | None = None,
        username: str | None = None,
        email: str | None = None,
        role: str | None = None,
    ) -> dict[str, Any] | None:
        """Update the given user fields.

        Returns:
            The updated user, or None if it does not exist

        Raises:
            DuplicateError: If the new username or email belongs to another user
        """
        conn = self._conn()

        updates = ["updated_at = ?"]
        params: list[Any] = [_timestamp()]

        fields = {"name": name, "username": username, "email": email, "role": role}
        for column, value in fields.items():
            if value is not None:
                updates.append(f"{column} = ?")
                params.append(value)

        params.append(user_id)

        try:
            cursor = await conn.execute(
                f"UPDATE users SET {', '.join(updates)} WHERE id = ?", params
            )
            await conn.commit()
        except sqlite3.IntegrityError as e:
            await conn.rollback()
            raise DuplicateError(_duplicate_field(e)) from e

        if cursor.rowcount == 0:
            return None

        logger.debug(f"Updated user: {user_id}")
        return await self.get_user(user_id, with_links=True)

    async def delete_user(self, user_id: str) -> tuple[dict[str, Any] | None, int]:
        """Delete a user and all of their links.

        Returns:
            Tuple of (deleted user or None if absent, number of deleted links)
        """
        conn = self._conn()
        user = await self.get_user(user_id)
        if not user:
            return None, 0

        links_cursor = await conn.execute("DELETE FROM links WHERE user_id = ?", (user_id,))
        deleted_links = links_cursor.rowcount
        await conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        await conn.commit()

        logger.info(f"Deleted user {user_id} and {deleted_links} links")
        return user, deleted_links

    async def count_registrations_by_day(self, start: date, end: date) -> dict[str, int]:
        """Count users created per UTC calendar day within [start, end].

        Returns:
            Mapping of ISO day string (YYYY-MM-DD) to count; days without
            registrations are absent.
        """
        conn = self._conn()
        async with conn.execute(
            """
            SELECT date(created_at) AS day, COUNT(*) AS count
            FROM users
            WHERE date(created_at) BETWEEN ? AND ?
            GROUP BY day
            ORDER BY day
            """,
            (start.isoformat(), end.isoformat()),
        ) as cursor:
            rows = await cursor.fetchall()
        return {row["day"]: row["count"] for row in rows}

    # Link operations
    async def create_link(
        self, user_id: str, title: str, url: str, is_visible: bool = True
    ) -> dict[str, Any]:
        """Create a link owned by a user."""
        conn = self._conn()
        link_id = str(uuid.uuid4())
        now = _timestamp()

        await conn.execute(
            """
            INSERT INTO links (id, user_id, title, url, is_visible, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (link_id, user_id, title, url, int(is_visible), now, now),
        )
        await conn.commit()

        logger.debug(f"Created link {link_id} for user {user_id}")
        link = await self.get_link(link_id)
        if link is None:
            raise RuntimeError(f"Link {link_id} not found after insert")
        return link

    async def get_link(self, link_id: str) -> dict[str, Any] | None:
        """Get link by ID."""
        conn = self._conn()
        async with conn.execute(
            f"SELECT {LINK_COLUMNS} FROM links WHERE id = ?", (link_id,)
        ) as cursor:
            row = await cursor.fetchone()
        return _link_from_row(row) if row else None

    async def list_links(self, user_id: str, visible_only: bool = False) -> list[dict[str, Any]]:
        """List a user's links in creation order."""
        conn = self._conn()
        query = f"SELECT {LINK_COLUMNS} FROM links WHERE user_id = ?"
        if visible_only:
            query += " AND is_visible = 1"
        query += " ORDER BY created_at ASC, rowid ASC"

        async with conn.execute(query, (user_id,)) as cursor:
            rows = await cursor.fetchall()
        return [_link_from_row(row) for row in rows]

    async def count_links(self) -> int:
        """Count all links."""
        conn = self._conn()
        async with conn.execute("SELECT COUNT(*) FROM links") as cursor:
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def update_link(
        self,
        link_id: str,
        title: str | None = None,
        url: str | None = None,
        is_visible: bool | None = None,
    ) -> dict[str, Any] | None:
        """Update the given link fields and return the link, or None if absent."""
        conn = self._conn()

        updates = ["updated_at = ?"]
        params: list[Any] = [_timestamp()]

        if title is not None:
            updates.append("title = ?")
            params.append(title)
        if url is not None:
            updates.append("url = ?")
            params.append(url)
        if is_visible is not None:
            updates.append("is_visible = ?")
            params.append(int(is_visible))

        params.append(link_id)

        cursor = await conn.execute(f"UPDATE links SET {', '.join(updates)} WHERE id = ?", params)
        await conn.commit()

        if cursor.rowcount == 0:
            return None

        logger.debug(f"Updated link: {link_id}")
        return await self.get_link(link_id)

    async def delete_link(self, link_id: str) -> dict[str, Any] | None:
        """Delete a link and return it, or None if absent."""
        conn = self._conn()
        link = await self.get_link(link_id)
        if not link:
            return None

        await conn.execute("DELETE FROM links WHERE id = ?", (link_id,))
        await conn.commit()

        logger.debug(f"Deleted link: {link_id}")
        return link


# Global database instance
_db: Database | None = None


async def init_database() -> Database:
    """Initialize and return global database instance."""
    global _db
    if _db is None:
        _db = Database(settings.database_path)
        await _db.connect()

    return _db


async def get_db() -> Database:
    """Get database instance (dependency injection).

    Auto-initializes if not already initialized.
    """
    global _db
    if _db is None:
        _db = await init_database()
    return _db
