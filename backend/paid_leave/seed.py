"""Seed script for development data.

Start the API first, then run:  python -m paid_leave.seed
"""

from __future__ import annotations

import asyncio
import sys

import httpx

BASE_URL = "http://localhost:8000"

HEADERS = {"Content-Type": "application/json"}

EMPLOYEES = [
    {"name": "Taro Yamada", "email": "taro@example.com", "hire_date": "2023-01-01"},
    {"name": "Hanako Suzuki", "email": "hanako@example.com", "hire_date": "2020-01-01"},
    {"name": "Jiro Tanaka", "email": "jiro@example.com", "hire_date": "2025-01-01"},
]

# Leaves of absence: (employee email, start_date, end_date, reason)
ABSENCES = [
    ("hanako@example.com", "2021-04-01", "2021-10-01", "Childcare leave"),
]

# Days taken: (employee email, date, reason)
LEAVE_REQUESTS = [
    ("taro@example.com", "2025-08-12", "Summer holiday"),
    ("taro@example.com", "2025-08-13", "Summer holiday"),
    ("hanako@example.com", "2025-05-02", None),
]


async def _safe_post(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """POST with 409-conflict tolerance for reruns."""
    resp = await client.post(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} (conflicts with existing data)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> dict[str, str]:
    """Seed employees (skipping emails that already exist) and return an email->id mapping."""
    print("\n--- Seeding employees ---")
    resp = await client.get(f"{BASE_URL}/employees", headers=HEADERS)
    resp.raise_for_status()
    employee_ids = {e["email"]: e["id"] for e in resp.json()["items"]}

    for emp in EMPLOYEES:
        if emp["email"] in employee_ids:
            print(f"  [SKIP] {emp['name']} (already exists)")
            continue
        result = await _safe_post(client, f"{BASE_URL}/employees", emp, emp["name"])
        if result:
            employee_ids[emp["email"]] = result["id"]
    return employee_ids


async def seed_absences(client: httpx.AsyncClient, employee_ids: dict[str, str]) -> None:
    """Seed leaves of absence; overlaps from a previous run are skipped."""
    print("\n--- Seeding leaves of absence ---")
    for email, start_date, end_date, reason in ABSENCES:
        employee_id = employee_ids.get(email)
        if employee_id is None:
            continue
        await _safe_post(
            client,
            f"{BASE_URL}/leave-of-absences",
            {"employee_id": employee_id, "start_date": start_date, "end_date": end_date, "reason": reason},
            f"Absence: {email} {start_date} to {end_date}",
        )


async def seed_leave_requests(client: httpx.AsyncClient, employee_ids: dict[str, str]) -> None:
    """Seed days of leave taken."""
    print("\n--- Seeding leave requests ---")
    for email, day, reason in LEAVE_REQUESTS:
        employee_id = employee_ids.get(email)
        if employee_id is None:
            continue
        await _safe_post(
            client,
            f"{BASE_URL}/leave-requests",
            {"employee_id": employee_id, "date": day, "reason": reason},
            f"Leave: {email} on {day}",
        )


async def print_balances(client: httpx.AsyncClient) -> None:
    """Print every employee's balance."""
    print("\n--- Balances ---")
    resp = await client.get(f"{BASE_URL}/employees", headers=HEADERS)
    resp.raise_for_status()
    for emp in resp.json()["items"]:
        print(
            f"  {emp['name']}: granted={emp['total_granted']} used={emp['total_used']} remaining={emp['remaining']}"
        )


async def main() -> None:
    print("=" * 60)
    print("  Paid Leave Ledger - Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        # Health check
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running")
            sys.exit(1)

        employee_ids = await seed_employees(client)
        await seed_absences(client, employee_ids)
        await seed_leave_requests(client, employee_ids)
        await print_balances(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
