import logging
from typing import TypedDict

import asyncpg

logger = logging.getLogger(__name__)


class ReferenceDocument(TypedDict):
    title: str
    url: str
    excerpt: str


REFERENCE_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS reference_documents (
    id              UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title           TEXT NOT NULL,
    url             TEXT NOT NULL DEFAULT '',
    excerpt         TEXT NOT NULL,
    search_vector   tsvector GENERATED ALWAYS AS (
        to_tsvector('english', title || ' ' || excerpt)
    ) STORED,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_reference_documents_search
    ON reference_documents USING GIN (search_vector);
"""


class ReferenceStore:
    """Postgres full-text retrieval of citation-worthy medical references."""

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        self._pool = await asyncpg.create_pool(self._dsn, min_size=1, max_size=5)
        logger.info("ReferenceStore connected")

    async def retrieve(self, query: str, top_k: int = 5) -> list[ReferenceDocument]:
        """Return up to ``top_k`` references matching ``query``, best match first."""
        if not self._pool or not query.strip():
            return []

        rows = await self._pool.fetch(
            """
            SELECT title, url, excerpt,
                   ts_rank(search_vector, plainto_tsquery('english', $1)) AS rank
            FROM reference_documents
            WHERE search_vector @@ plainto_tsquery('english', $1)
            ORDER BY rank DESC
            LIMIT $2
            """,
            query,
            top_k,
        )
        return [
            ReferenceDocument(
                title=r["title"] or "Medical Reference",
                url=r["url"] or "",
                excerpt=r["excerpt"] or "",
            )
            for r in rows
        ]

    async def health_check(self) -> bool:
        if not self._pool:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception:
            return False

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            logger.info("ReferenceStore connection closed")
