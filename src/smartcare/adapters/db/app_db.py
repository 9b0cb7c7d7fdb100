"""Application database adapter using asyncpg."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

import asyncpg
import structlog

from smartcare.core.auth.types import Principal
from smartcare.core.exceptions import QueryExecutionError
from smartcare.core.query import compile_where
from smartcare.core.tickets import TicketFilters, TicketRecord, build_ticket_query
from smartcare.core.users import (
    UserFilters,
    UserRecord,
    build_user_query,
    visibility_predicate,
)

logger = structlog.get_logger()

# Failures raised by the driver or the transport while running a query
DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class AppDatabase:
    """Application database holding users, partners and tickets."""

    def __init__(self, dsn: str):
        """Initialize the app database adapter."""
        self.dsn = dsn
        self.pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Create connection pool."""
        self.pool = await asyncpg.create_pool(
            self.dsn,
            min_size=2,
            max_size=10,
            command_timeout=60,
        )
        logger.info("app_database_connected", dsn=self.dsn.split("@")[-1])

    async def close(self) -> None:
        """Close connection pool."""
        if self.pool:
            await self.pool.close()
            logger.info("app_database_disconnected")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection from the pool."""
        if self.pool is None:
            raise RuntimeError("Database pool not initialized")
        async with self.pool.acquire() as conn:
            yield conn

    async def fetch_one(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Fetch a single row."""
        async with self.acquire() as conn:
            row = await conn.fetchrow(query, *args)
            if row:
                return dict(row)
            return None

    async def fetch_all(self, query: str, *args: Any) -> list[dict[str, Any]]:
        """Fetch all rows."""
        async with self.acquire() as conn:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]

    async def execute_returning(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Execute a query with RETURNING clause."""
        async with self.acquire() as conn:
            row = await conn.fetchrow(query, *args)
            if row:
                return dict(row)
            return None

    # Profile operations
    async def get_user_profile(self, user_id: UUID) -> dict[str, Any] | None:
        """Get the profile fields that make up a principal.

        Raises:
            QueryExecutionError: If the lookup fails.
        """
        try:
            return await self.fetch_one(
                """SELECT id, email, role, is_client, partner_id, is_active
                   FROM users
                   WHERE id = $1""",
                user_id,
            )
        except DB_ERRORS as e:
            raise QueryExecutionError(str(e)) from e

    # User operations
    async def list_users(self, principal: Principal, filters: UserFilters) -> list[UserRecord]:
        """List users visible to the principal, newest first.

        Raises:
            QueryExecutionError: If the query fails.
        """
        query, params = build_user_query(principal, filters)
        try:
            rows = await self.fetch_all(query, *params)
        except DB_ERRORS as e:
            raise QueryExecutionError(str(e)) from e
        return [UserRecord.from_row(row) for row in rows]

    async def deactivate_user(self, principal: Principal, user_id: UUID) -> UserRecord | None:
        """Mark a user inactive if the principal can see it.

        Returns:
            The updated user, or None when it is outside the principal's scope.

        Raises:
            QueryExecutionError: If the update fails.
        """
        scope = visibility_predicate(principal)
        where_clause, params = compile_where([scope] if scope else [], start=2)
        query = f"""
            WITH updated AS (
                UPDATE users u SET is_active = false
                WHERE u.id = $1 AND {where_clause}
                RETURNING u.*
            )
            SELECT u.id, u.first_name, u.last_name, u.email, u.is_client, u.tel_contact,
                   u.partner_id, u.role, u.created_at, u.is_active,
                   p.partner_desc AS partner_desc
            FROM updated u
            LEFT JOIN partners p ON p.id = u.partner_id
        """
        try:
            row = await self.execute_returning(query, user_id, *params)
        except DB_ERRORS as e:
            raise QueryExecutionError(str(e)) from e
        return UserRecord.from_row(row) if row else None

    # Partner operations
    async def list_partners(self, principal: Principal) -> list[dict[str, Any]]:
        """List partners the principal may assign users to.

        Raises:
            QueryExecutionError: If the query fails.
        """
        if principal.is_unrestricted_admin:
            query = "SELECT id, partner_desc FROM partners ORDER BY partner_desc"
            params: tuple[Any, ...] = ()
        elif principal.partner_id is not None:
            query = "SELECT id, partner_desc FROM partners WHERE id = $1"
            params = (principal.partner_id,)
        else:
            return []
        try:
            return await self.fetch_all(query, *params)
        except DB_ERRORS as e:
            raise QueryExecutionError(str(e)) from e

    # Ticket operations
    async def list_tickets(
        self, principal: Principal, filters: TicketFilters
    ) -> list[TicketRecord]:
        """List tickets visible to the principal, newest first.

        Raises:
            QueryExecutionError: If the query fails.
        """
        query, params = build_ticket_query(principal, filters)
        try:
            rows = await self.fetch_all(query, *params)
        except DB_ERRORS as e:
            raise QueryExecutionError(str(e)) from e
        return [TicketRecord.from_row(row) for row in rows]
