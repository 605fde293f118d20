"""Integration tests: Theme endpoints."""

import pytest
from httpx import AsyncClient

from tests.conftest import login_headers


@pytest.mark.asyncio
async def test_default_theme_is_automatic(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(f"{api_base}/theme")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["source"] == "auto"
    assert data["theme"] in ("light", "dark")


@pytest.mark.asyncio
async def test_set_confirm_theme_for_logged_in_user(async_client: AsyncClient, api_base: str):
    headers = await login_headers(async_client, api_base, "lecturer@ono.ac.il")

    resp = await async_client.post(f"{api_base}/theme", json={"theme": "dark"}, headers=headers)
    assert resp.json()["data"] == {"theme": "dark", "source": "session", "pending_confirmation": True}

    resp = await async_client.post(f"{api_base}/theme/confirm", headers=headers)
    assert resp.json()["data"]["source"] == "user"

    resp = await async_client.get(f"{api_base}/auth/me", headers=headers)
    assert resp.json()["data"]["theme_preference"] == "dark"


@pytest.mark.asyncio
async def test_cancel_keeps_theme_for_session(async_client: AsyncClient, api_base: str):
    headers = {"X-Client-ID": "kiosk"}
    await async_client.post(f"{api_base}/theme", json={"theme": "light"}, headers=headers)

    resp = await async_client.post(f"{api_base}/theme/cancel", headers=headers)

    data = resp.json()["data"]
    assert data["source"] == "session"
    assert data["pending_confirmation"] is False


@pytest.mark.asyncio
async def test_forget_preference(async_client: AsyncClient, api_base: str):
    headers = {"X-Client-ID": "kiosk"}
    await async_client.post(f"{api_base}/theme", json={"theme": "dark"}, headers=headers)
    await async_client.post(f"{api_base}/theme/confirm", headers=headers)

    resp = await async_client.delete(f"{api_base}/theme", headers=headers)

    assert resp.json()["data"]["source"] == "auto"


@pytest.mark.asyncio
async def test_invalid_theme_value(async_client: AsyncClient, api_base: str):
    resp = await async_client.post(f"{api_base}/theme", json={"theme": "sepia"})
    assert resp.status_code == 422
