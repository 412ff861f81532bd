from unittest.mock import AsyncMock, MagicMock

import pytest

from medix.services.reference_store import ReferenceStore


@pytest.fixture
def store():
    store = ReferenceStore("postgresql://test")
    store._pool = AsyncMock()
    return store


class TestReferenceStore:
    @pytest.mark.asyncio
    async def test_retrieve_maps_rows(self, store):
        store._pool.fetch.return_value = [
            {"title": "WHO Fever", "url": "https://who.int", "excerpt": "Rest.", "rank": 0.4},
            {"title": None, "url": None, "excerpt": "Fluids.", "rank": 0.1},
        ]

        docs = await store.retrieve("fever", top_k=2)

        assert docs[0] == {"title": "WHO Fever", "url": "https://who.int", "excerpt": "Rest."}
        assert docs[1]["title"] == "Medical Reference"
        assert docs[1]["url"] == ""
        args = store._pool.fetch.call_args.args
        assert "plainto_tsquery" in args[0]
        assert args[1:] == ("fever", 2)

    @pytest.mark.asyncio
    async def test_blank_query_skips_database(self, store):
        assert await store.retrieve("   ") == []
        store._pool.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_connected(self):
        store = ReferenceStore("postgresql://test")
        assert await store.retrieve("fever") == []
        assert await store.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_failure(self, store):
        store._pool = MagicMock()
        store._pool.acquire.side_effect = OSError("connection refused")
        assert await store.health_check() is False
