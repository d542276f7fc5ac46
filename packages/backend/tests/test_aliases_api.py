"""Alias and domain routes over HTTP.

Learn: tokens are minted with the app's own codec (see conftest.bearer)
so these tests run the real authorization pipeline without logging in.
"""

from datetime import datetime, timedelta, timezone

import pytest

from opendydns.auth.jwt import TokenCodec

from conftest import ALICE_PASSWORD, TEST_SECRET

HOME = {"host": "home", "domain": "example.com", "value": "1.2.3.4"}


# ═══════════════════════════════════════════════════════════
# Authorization
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/aliases"),
        ("POST", "/aliases"),
        ("PUT", "/aliases"),
        ("DELETE", "/aliases/home.example.com"),
        ("GET", "/domains"),
    ],
)
async def test_requires_token(client, method, path):
    r = await client.request(method, path, json=HOME)
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"
    assert "message" in r.json()


@pytest.mark.asyncio
async def test_invalid_token(client):
    r = await client.get("/aliases", headers={"Authorization": "Bearer invalid_token_here"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_expired_token(client, alice):
    past = datetime.now(timezone.utc) - timedelta(days=3)
    stale = TokenCodec(TEST_SECRET, ttl=timedelta(hours=24), clock=lambda: past)
    r = await client.get(
        "/aliases",
        headers={"Authorization": f"Bearer {stale.issue(alice).token}"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_token_from_other_key(client, alice):
    foreign = TokenCodec("someone-elses-signing-key-0123456789abcdef-012")
    r = await client.get(
        "/aliases",
        headers={"Authorization": f"Bearer {foreign.issue(alice).token}"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_login_then_use_token(client, alice):
    """Full flow: login → bearer token → alias routes."""
    r = await client.post(
        "/sessions", json={"email": "alice@example.com", "password": ALICE_PASSWORD}
    )
    headers = {"Authorization": f"Bearer {r.json()['token']}"}

    r = await client.post("/aliases", json=HOME, headers=headers)
    assert r.status_code == 201
    r = await client.get("/aliases", headers=headers)
    assert r.json() == [HOME]


# ═══════════════════════════════════════════════════════════
# Register / list
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_and_list(client, alice_headers):
    r = await client.post("/aliases", json=HOME, headers=alice_headers)
    assert r.status_code == 201
    assert r.json() == HOME

    r = await client.get("/aliases", headers=alice_headers)
    assert r.status_code == 200
    assert r.json() == [HOME]


@pytest.mark.asyncio
async def test_register_conflict_across_users(client, alice_headers, bob_headers):
    await client.post("/aliases", json=HOME, headers=alice_headers)

    r = await client.post("/aliases", json={**HOME, "value": "5.6.7.8"}, headers=bob_headers)
    assert r.status_code == 409
    assert r.json() == {"message": "Alias already registered"}

    r = await client.get("/aliases", headers=bob_headers)
    assert r.json() == []


@pytest.mark.asyncio
async def test_register_ipv6_normalized(client, alice_headers):
    r = await client.post(
        "/aliases",
        json={"host": "v6", "domain": "example.com", "value": "2001:DB8:0:0::1"},
        headers=alice_headers,
    )
    assert r.status_code == 201
    assert r.json()["value"] == "2001:db8::1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {**HOME, "value": "not-an-ip"},
        {**HOME, "value": "999.1.1.1"},
        {**HOME, "host": "two.labels"},
        {**HOME, "host": "-bad"},
        {**HOME, "domain": "exa mple.com"},
        {"host": "home", "domain": "example.com"},
    ],
)
async def test_register_malformed(client, alice_headers, body):
    r = await client.post("/aliases", json=body, headers=alice_headers)
    assert r.status_code == 422
    assert "message" in r.json()


# ═══════════════════════════════════════════════════════════
# Update
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_update_by_owner(client, alice_headers):
    await client.post("/aliases", json=HOME, headers=alice_headers)

    r = await client.put("/aliases", json={**HOME, "value": "4.3.2.1"}, headers=alice_headers)
    assert r.status_code == 200
    assert r.json() == {**HOME, "value": "4.3.2.1"}


@pytest.mark.asyncio
async def test_update_by_other_user_forbidden(client, alice_headers, bob_headers):
    await client.post("/aliases", json=HOME, headers=alice_headers)

    r = await client.put("/aliases", json={**HOME, "value": "6.6.6.6"}, headers=bob_headers)
    assert r.status_code == 403

    r = await client.get("/aliases", headers=alice_headers)
    assert r.json() == [HOME]


@pytest.mark.asyncio
async def test_update_missing(client, alice_headers):
    r = await client.put("/aliases", json=HOME, headers=alice_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_update_new_domain(client, alice_headers):
    await client.post("/aliases", json=HOME, headers=alice_headers)
    r = await client.put(
        "/aliases",
        json={**HOME, "new_domain": "dyn.example.org"},
        headers=alice_headers,
    )
    assert r.status_code == 200
    assert r.json()["domain"] == "dyn.example.org"


# ═══════════════════════════════════════════════════════════
# Delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_delete_lifecycle(client, alice_headers, bob_headers):
    await client.post("/aliases", json=HOME, headers=alice_headers)

    r = await client.delete("/aliases/home.example.com", headers=bob_headers)
    assert r.status_code == 403

    r = await client.delete("/aliases/home.example.com", headers=alice_headers)
    assert r.status_code == 200

    r = await client.delete("/aliases/home.example.com", headers=alice_headers)
    assert r.status_code == 404

    r = await client.get("/aliases", headers=alice_headers)
    assert r.json() == []


@pytest.mark.asyncio
async def test_delete_name_without_domain(client, alice_headers):
    r = await client.delete("/aliases/localhost", headers=alice_headers)
    assert r.status_code == 422


# ═══════════════════════════════════════════════════════════
# Domains
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_domains(client, alice_headers):
    r = await client.get("/domains", headers=alice_headers)
    assert r.status_code == 200
    assert r.json() == ["dyn.example.org", "example.com"]

    await client.post(
        "/aliases",
        json={"host": "home", "domain": "my.example.net", "value": "1.2.3.4"},
        headers=alice_headers,
    )
    r = await client.get("/domains", headers=alice_headers)
    assert r.json() == ["dyn.example.org", "example.com", "my.example.net"]
