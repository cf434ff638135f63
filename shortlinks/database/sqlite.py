"""SQLite implementation of the link store."""

import os
import sqlite3
import logging
from datetime import datetime, timezone
from typing import List, Optional

import aiosqlite

from ..errors import CollisionError, LinkNotFoundError
from .base import LinkStore
from .models import Link


class SQLiteLinkStore(LinkStore):
    """SQLite link store on a single autocommit connection.

    Each operation is one SQL statement, so SQLite's own locking makes it
    atomic; the UNIQUE constraint on ``short_code`` rejects duplicates.
    """

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS links (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        original_url TEXT NOT NULL,
        short_code TEXT NOT NULL UNIQUE,
        owner_id TEXT NOT NULL,
        click_count INTEGER NOT NULL DEFAULT 0 CHECK (click_count >= 0),
        created_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_links_owner_id ON links (owner_id, id);
    """

    SELECT_COLUMNS = "id, original_url, short_code, owner_id, click_count, created_at"

    def __init__(
        self,
        db_config: str,
        operation_timeout: float = 5.0,
        create_tables: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite store.

        Args:
            db_config: Connection string (sqlite:///relative/path.db,
                sqlite:////absolute/path.db or sqlite://:memory:)
            operation_timeout: Seconds before an operation is abandoned
            create_tables: Create the schema on ``connect`` if missing
            logger: Optional logger instance
        """
        super().__init__(db_config, operation_timeout, create_tables, logger)
        self.path = self._parse_connection_string(db_config)
        self._conn: Optional[aiosqlite.Connection] = None

    @staticmethod
    def _parse_connection_string(db_config: str) -> str:
        """Extract the database file path from a sqlite:// URL."""
        if not db_config.startswith("sqlite://"):
            raise ValueError(f"Not a SQLite connection string: {db_config}")
        path = db_config[len("sqlite://"):]
        if path.startswith("/"):
            path = path[1:]
        return path or ":memory:"

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("SQLiteLinkStore is not connected")
        return self._conn

    async def connect(self) -> None:
        """Open the connection and create the schema if enabled."""
        if self._conn is not None:
            return

        if self.path != ":memory:":
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)

        # isolation_level=None: every statement commits on its own
        self._conn = await aiosqlite.connect(
            self.path,
            isolation_level=None,
            timeout=self.operation_timeout,
        )
        self._conn.row_factory = aiosqlite.Row
        self.logger.info(f"Connected to SQLite database: {self.path}")

        if self.create_tables:
            await self._conn.executescript(self.CREATE_TABLE_SQL)
            self.logger.debug("Ensured links table exists")

    def _is_transient(self, error: Exception) -> bool:
        if isinstance(error, sqlite3.OperationalError):
            message = str(error).lower()
            return "locked" in message or "busy" in message
        return super()._is_transient(error)

    @staticmethod
    def _row_to_link(row) -> Link:
        return Link(
            id=row["id"],
            original_url=row["original_url"],
            short_code=row["short_code"],
            owner_id=row["owner_id"],
            click_count=row["click_count"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    async def insert(self, original_url: str, short_code: str, owner_id: str) -> Link:
        created_at = datetime.now(timezone.utc)

        async def _insert() -> Link:
            try:
                cursor = await self.connection.execute(
                    """
                    INSERT INTO links (original_url, short_code, owner_id, click_count, created_at)
                    VALUES (?, ?, ?, 0, ?)
                    """,
                    (original_url, short_code, owner_id, created_at.isoformat()),
                )
            except sqlite3.IntegrityError as e:
                if "short_code" in str(e):
                    raise CollisionError(short_code) from e
                raise
            link_id = cursor.lastrowid
            await cursor.close()
            return Link(
                id=link_id,
                original_url=original_url,
                short_code=short_code,
                owner_id=owner_id,
                click_count=0,
                created_at=created_at,
            )

        link = await self._run(_insert())
        self.logger.debug(f"Inserted link {link.id}: {short_code} -> {original_url}")
        return link

    async def find_by_code(self, short_code: str) -> Optional[Link]:
        async def _find() -> Optional[Link]:
            async with self.connection.execute(
                f"SELECT {self.SELECT_COLUMNS} FROM links WHERE short_code = ?",
                (short_code,),
            ) as cursor:
                row = await cursor.fetchone()
            return self._row_to_link(row) if row else None

        return await self._run(_find())

    async def list_by_owner(self, owner_id: str) -> List[Link]:
        async def _list() -> List[Link]:
            async with self.connection.execute(
                f"SELECT {self.SELECT_COLUMNS} FROM links WHERE owner_id = ? ORDER BY id",
                (owner_id,),
            ) as cursor:
                rows = await cursor.fetchall()
            return [self._row_to_link(row) for row in rows]

        return await self._run(_list())

    async def increment_clicks(self, link_id: int) -> None:
        async def _increment() -> int:
            cursor = await self.connection.execute(
                "UPDATE links SET click_count = click_count + 1 WHERE id = ?",
                (link_id,),
            )
            updated = cursor.rowcount
            await cursor.close()
            return updated

        if await self._run(_increment()) == 0:
            raise LinkNotFoundError(link_id)

    async def health_check(self) -> bool:
        async def _ping() -> None:
            async with self.connection.execute("SELECT 1") as cursor:
                await cursor.fetchone()

        try:
            await self._run(_ping())
            return True
        except Exception as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close the SQLite connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            self.logger.debug(f"Closed SQLite database: {self.path}")
