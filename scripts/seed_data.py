#!/usr/bin/env python3
"""
Seed script: creates users, folders, items and stock movements via the API (no direct DB).
Every write goes through the event pipeline, so activities and low-stock alerts
are populated the same way real traffic would populate them.
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --users 10 --items-per-user 40
"""

import argparse
import random

import httpx

API_BASE = "http://localhost:8000/api/v1"

FOLDERS = ["Warehouse A", "Warehouse B", "Office", "Workshop", "Returns"]

ITEMS = [
    ("Laptop stand", "pcs"), ("USB-C cable", "pcs"), ("Mechanical keyboard", "pcs"),
    ("Wireless mouse", "pcs"), ("Bluetooth headphones", "pcs"), ("27 inch monitor", "pcs"),
    ("HD webcam", "pcs"), ("Power bank", "pcs"), ("External drive", "pcs"),
    ("Printer paper", "box"), ("Packing tape", "roll"), ("Shipping boxes", "pcs"),
    ("Coffee beans", "kg"), ("Cleaning spray", "bottle"), ("Cable ties", "bag"),
    ("Screws M4", "box"), ("Wood glue", "bottle"), ("Safety gloves", "pair"),
]

TAGS = ["electronics", "office", "consumables", "tools", "fragile", "reorder"]


def _data(r: httpx.Response) -> dict:
    return r.json().get("data") or {}


def random_item(folder_id: str | None) -> dict:
    name, unit = random.choice(ITEMS)
    return {
        "name": name + (" " + str(random.randint(1, 999)) if random.random() > 0.5 else ""),
        "quantity": random.randint(0, 120),
        "unit": unit,
        "min_level": random.choice([0, 5, 10, 20]),
        "price": round(random.uniform(0.5, 500), 2),
        "tags": random.sample(TAGS, k=random.randint(0, 2)),
        "folder_id": folder_id,
    }


def main():
    ap = argparse.ArgumentParser(description="Seed inventory data via API")
    ap.add_argument("--users", type=int, default=5, help="Number of users to create")
    ap.add_argument("--items-per-user", type=int, default=25, help="Items per user")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    created_items = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        for i in range(args.users):
            email = f"user{i+1}@example.com"
            password = "password123"
            item_ids = []
            try:
                r = client.post("/auth/register", json={"email": email, "password": password, "name": f"User {i+1}"})
                if r.status_code == 409:
                    # Already exists - log in with the same credentials
                    r = client.post("/auth/login", json={"email": email, "password": password})
                if r.status_code not in (200, 201):
                    errors.append(f"Auth {email}: {r.status_code} {r.text[:80]}")
                    continue
                headers = {"Authorization": f"Bearer {_data(r)['access_token']}"}

                folder_ids = []
                for name in FOLDERS:
                    r = client.post("/folders", headers=headers, json={"name": name})
                    if r.status_code == 201:
                        folder_ids.append(_data(r)["folder"]["id"])

                for _ in range(args.items_per_user):
                    folder_id = random.choice(folder_ids + [None]) if folder_ids else None
                    r = client.post("/items", headers=headers, json=random_item(folder_id))
                    if r.status_code == 201:
                        item_ids.append(_data(r)["item"]["id"])
                        created_items += 1
                    else:
                        errors.append(f"Item {email}: {r.status_code}")

                # A few stock movements so some items cross their thresholds
                for item_id in random.sample(item_ids, k=min(5, len(item_ids))):
                    r = client.patch(
                        f"/items/{item_id}/quantity",
                        headers=headers,
                        json={"change": -random.randint(1, 30), "reason": "sale"},
                    )
                    if r.status_code not in (200, 400):
                        errors.append(f"Quantity {item_id}: {r.status_code}")
            except httpx.HTTPError as e:
                errors.append(f"User {email}: {e}")
            print(f"  {email}: {len(item_ids)} items")

    print(f"\nDone. Users: {args.users}, Items created: {created_items}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")


if __name__ == "__main__":
    main()
