"""
Base Repository - Mentor Reputation Service
mentor_reputation/repositories/base.py

Shared Snowflake plumbing for the review and mentor repositories: one
connection per call, DictCursor rows, connector errors mapped onto the
repository exception family, and UTC normalisation of TIMESTAMP_NTZ values.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional
from uuid import UUID

import snowflake.connector
from snowflake.connector import DictCursor
from snowflake.connector.errors import DatabaseError, InterfaceError, ProgrammingError

from mentor_reputation.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    ForeignKeyViolationException,
    RepositoryException,
)
from mentor_reputation.services.snowflake import get_snowflake_connection

logger = logging.getLogger(__name__)


class BaseRepository:
    """Snowflake access helpers shared by every repository."""

    @contextmanager
    def get_connection(self) -> Iterator[snowflake.connector.SnowflakeConnection]:
        conn = None
        try:
            conn = get_snowflake_connection()
            yield conn
        except InterfaceError as e:
            logger.error(f"Snowflake connection failed: {e}")
            raise DatabaseConnectionException(f"Failed to connect to Snowflake: {e}")
        finally:
            if conn:
                conn.close()

    @contextmanager
    def get_cursor(self) -> Iterator[Any]:
        """DictCursor on a fresh connection; both are closed on exit."""
        with self.get_connection() as conn:
            cursor = conn.cursor(DictCursor)
            try:
                yield cursor
            finally:
                cursor.close()

    def execute_query(
        self,
        sql: str,
        params: Optional[tuple] = None,
        fetch_one: bool = False,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Optional[Any]:
        """
        Run one statement.

        Returns:
            The first row (fetch_one), every row (fetch_all), otherwise the
            affected row count; MentorRepository.save_reputation relies on
            the count to detect a lost VERSION race.

        Raises:
            DuplicateEntityException: unique constraint violated.
            ForeignKeyViolationException: referenced mentor/user missing.
            RepositoryException: any other connector error.
        """
        with self.get_cursor() as cursor:
            try:
                cursor.execute(sql, params or ())
                if commit:
                    cursor.connection.commit()

                if fetch_one:
                    return cursor.fetchone()
                if fetch_all:
                    return cursor.fetchall()
                return cursor.rowcount

            except ProgrammingError as e:
                message = str(e).upper()
                if "UNIQUE" in message or "DUPLICATE" in message:
                    raise DuplicateEntityException(str(e))
                if "FOREIGN KEY" in message:
                    raise ForeignKeyViolationException(str(e))
                logger.error(f"Snowflake query failed: {e}")
                raise RepositoryException(f"Query error: {e}")
            except DatabaseError as e:
                logger.error(f"Snowflake database error: {e}")
                raise RepositoryException(f"Database error: {e}")

    def fetch_count(self, sql: str, params: tuple) -> int:
        """Run a `SELECT COUNT(*) AS CNT ...` statement and return the number."""
        row = self.execute_query(sql, params, fetch_one=True)
        return int(self.row_to_dict(row).get("cnt") or 0)

    def str_to_uuid(self, uuid_str: Optional[str]) -> Optional[UUID]:
        return UUID(str(uuid_str)) if uuid_str else None

    def normalize_timestamp(self, dt: Optional[datetime]) -> Optional[datetime]:
        """TIMESTAMP_NTZ columns hold UTC; attach the zone, convert anything else."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    def row_to_dict(self, row: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Snowflake returns uppercase column names; lower them for mapping."""
        if row is None:
            return {}
        return {k.lower(): v for k, v in row.items()}
