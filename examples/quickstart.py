#!/usr/bin/env python3
"""
OpenDyDNS Quickstart: login → register → update → list → delete.

Run with: python examples/quickstart.py EMAIL PASSWORD

Requires: pip install httpx
Daemon must be running (opendydnsd serve) and the account provisioned
(opendydnsd create-user EMAIL).
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8888"


def main():
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)
    email, password = sys.argv[1:]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking daemon health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Daemon not reachable at {BASE}")
        sys.exit(1)
    health = resp.json()
    print(f"  Store: {'✓' if health['store'] == 'ok' else '✗'}")

    # ── Login ─────────────────────────────────────────────────────
    print("\n1. Logging in...")
    resp = client.post("/sessions", json={"email": email, "password": password})
    if resp.status_code != 200:
        print(f"   Login failed: {resp.json()['message']}")
        sys.exit(1)
    client.headers["Authorization"] = f"Bearer {resp.json()['token']}"
    print("   ✓ token received")

    # ── Pick a domain ─────────────────────────────────────────────
    domains = client.get("/domains").json()
    domain = domains[0] if domains else "example.com"
    host = f"demo-{uuid.uuid4().hex[:6]}"
    name = f"{host}.{domain}"

    # ── Register ──────────────────────────────────────────────────
    print(f"\n2. Registering {name}...")
    resp = client.post("/aliases", json={"host": host, "domain": domain, "value": "192.0.2.10"})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    print(f"   {name} -> {resp.json()['value']}")

    # ── Update ────────────────────────────────────────────────────
    print("\n3. Updating IP...")
    resp = client.put("/aliases", json={"host": host, "domain": domain, "value": "192.0.2.20"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   {name} -> {resp.json()['value']}")

    # ── List ──────────────────────────────────────────────────────
    print("\n4. Listing aliases...")
    for alias in client.get("/aliases").json():
        print(f"   {alias['host']}.{alias['domain']:<40} {alias['value']}")

    # ── Delete ────────────────────────────────────────────────────
    print(f"\n5. Deleting {name}...")
    resp = client.delete(f"/aliases/{name}")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print("   ✓ deleted")


if __name__ == "__main__":
    main()
