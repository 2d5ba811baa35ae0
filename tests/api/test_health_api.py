"""API tests for health endpoints."""


class TestHealth:
    async def test_basic(self, client, stocked_store):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["ledger_revision"] == stocked_store.revision

    async def test_root(self, client):
        resp = await client.get("/health")
        assert resp.json()["status"] == "healthy"

    async def test_llm_disabled(self, client):
        resp = await client.get("/api/health/llm")
        assert resp.status_code == 200
        assert resp.json()["llm"] == {
            "name": "disabled",
            "available": False,
            "latency_ms": None,
            "error": None,
        }

    async def test_db(self, client):
        resp = await client.get("/api/health/db")
        assert resp.status_code == 200
        assert resp.json()["database"]["available"] is True
