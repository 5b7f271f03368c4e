# database/executor.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import insert
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql import Executable

from errors import QueryError


@dataclass
class QueryResult:
    """Résultat matérialisé : la connexion est déjà rendue au pool."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    inserted_id: int | None = None

    def first(self) -> dict[str, Any] | None:
        return self.rows[0] if self.rows else None


class QueryExecutor:
    """
    Une requête = une connexion empruntée au pool, rendue quoi qu'il arrive.
    Les valeurs passent toujours en paramètres liés, jamais concaténées.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def checked_out(self) -> int:
        pool = self.engine.sync_engine.pool
        return pool.checkedout() if hasattr(pool, "checkedout") else 0

    async def execute(self, statement: Executable) -> QueryResult:
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(statement)
                out = QueryResult(rowcount=max(result.rowcount or 0, 0))
                if result.returns_rows:
                    out.rows = [dict(r) for r in result.mappings().all()]
                elif result.is_insert and result.inserted_primary_key:
                    out.inserted_id = result.inserted_primary_key[0]
                return out
        except (SQLAlchemyError, OSError) as e:
            logging.warning("Query failed: %s", e)
            raise QueryError() from e

    def insert_ignore(self, model, **values):
        """INSERT qui ignore silencieusement un doublon de clé unique."""
        if self.dialect == "sqlite":
            return sqlite.insert(model).values(**values).on_conflict_do_nothing()
        if self.dialect == "postgresql":
            return postgresql.insert(model).values(**values).on_conflict_do_nothing()
        if self.dialect in ("mysql", "mariadb"):
            return mysql.insert(model).values(**values).prefix_with("IGNORE")
        return insert(model).values(**values)

    async def dispose(self) -> None:
        await self.engine.dispose()
