"""Load the reference corpus used for triage citations.

Usage:
    python -m scripts.ingest_references [path/to/references.json]

Requires REFERENCE_DSN. Creates the reference_documents table if needed
and replaces rows whose title already exists.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import asyncpg

from medix.config import get_settings
from medix.services.reference_store import REFERENCE_TABLE_DDL

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_SOURCE = Path(__file__).parent / "data" / "references.json"


def load_documents(path: Path) -> list[dict]:
    documents = json.loads(path.read_text(encoding="utf-8"))
    return [d for d in documents if d.get("title") and d.get("excerpt")]


async def main(source: Path) -> None:
    settings = get_settings()

    if not settings.reference_dsn:
        logger.error("REFERENCE_DSN is not set — cannot connect to database")
        return

    documents = load_documents(source)
    logger.info("Found %d documents in %s", len(documents), source)

    conn = await asyncpg.connect(settings.reference_dsn)
    try:
        await conn.execute(REFERENCE_TABLE_DDL)
        async with conn.transaction():
            for i, doc in enumerate(documents):
                await conn.execute(
                    "DELETE FROM reference_documents WHERE title = $1", doc["title"]
                )
                await conn.execute(
                    "INSERT INTO reference_documents (title, url, excerpt) VALUES ($1, $2, $3)",
                    doc["title"],
                    doc.get("url", ""),
                    doc["excerpt"],
                )
                logger.info("Ingested %d/%d: %s", i + 1, len(documents), doc["title"])

        logger.info("Done — %d reference documents loaded.", len(documents))
    finally:
        await conn.close()


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SOURCE
    asyncio.run(main(path))
