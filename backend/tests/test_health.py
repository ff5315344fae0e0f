from __future__ import annotations

import pytest


@pytest.mark.asyncio
async def test_health(catalog) -> None:
    r = await catalog.client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


@pytest.mark.asyncio
async def test_health_db(catalog) -> None:
    r = await catalog.client.get("/health/db")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


@pytest.mark.asyncio
async def test_unknown_route_uses_message_body(catalog) -> None:
    r = await catalog.client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"message": "Not Found"}
