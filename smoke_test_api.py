"""
Smoke Test for the Project Tracker API

Tests:
1. Register (or log in) two users A and B
2. Create projects for A and page through them
3. Verify B cannot see, update or delete A's project (404)
4. Verify bad input and missing tokens get the error envelope

Run: python smoke_test_api.py [base_url]

Requirements:
- Backend running (default http://localhost:8000)
"""

import sys
import uuid
from typing import Any, Dict, Optional

import requests

BASE_URL = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else "http://localhost:8000"
TIMEOUT = 10


class TestResult:
    def __init__(self):
        self.passed = 0
        self.failed = 0

    def check(self, name: str, ok: bool, detail: str = ""):
        if ok:
            self.passed += 1
            print(f"PASS: {name}")
        else:
            self.failed += 1
            print(f"FAIL: {name}")
        if detail:
            print(f"  - {detail}")

    def summary(self) -> bool:
        print("\n" + "=" * 60)
        print(f"SMOKE TEST SUMMARY: {self.passed} passed, {self.failed} failed")
        print("=" * 60)
        return self.failed == 0


def register(email: str, password: str, name: str) -> Optional[Dict[str, Any]]:
    """Register a new user and return {token, user, headers}."""
    resp = requests.post(
        f"{BASE_URL}/auth/register",
        json={"email": email, "password": password, "name": name},
        timeout=TIMEOUT,
    )
    if resp.status_code != 201:
        print(f"  register {email}: HTTP {resp.status_code} {resp.text[:200]}")
        return None
    data = resp.json()["data"]
    return {
        "token": data["token"],
        "user": data["user"],
        "headers": {"Authorization": f"Bearer {data['token']}"},
    }


def create_project(headers: Dict[str, str], name: str) -> Optional[Dict[str, Any]]:
    resp = requests.post(
        f"{BASE_URL}/projects",
        json={"name": name, "teamMember": "Smoke", "deadline": "2030-01-01", "budget": 1000},
        headers=headers,
        timeout=TIMEOUT,
    )
    if resp.status_code != 201:
        return None
    return resp.json()["data"]


def main() -> int:
    print("=" * 60)
    print(f"PROJECT TRACKER SMOKE TEST against {BASE_URL}")
    print("=" * 60 + "\n")

    result = TestResult()
    run_id = uuid.uuid4().hex[:8]

    resp = requests.get(f"{BASE_URL}/health", timeout=TIMEOUT)
    result.check("Health", resp.status_code == 200, f"HTTP {resp.status_code}")

    user_a = register(f"smoke_a_{run_id}@example.com", "secret123", "Smoke A")
    user_b = register(f"smoke_b_{run_id}@example.com", "secret123", "Smoke B")
    if not user_a or not user_b:
        result.check("Setup - register users", False)
        result.summary()
        return 1
    result.check("Setup - register users", True)

    # Auth
    resp = requests.post(
        f"{BASE_URL}/auth/register",
        json={"email": f"smoke_a_{run_id}@example.com", "password": "secret123", "name": "Dup"},
        timeout=TIMEOUT,
    )
    result.check("Duplicate email is 400", resp.status_code == 400, resp.text[:100])

    bad_password = requests.post(
        f"{BASE_URL}/auth/login",
        json={"email": f"smoke_a_{run_id}@example.com", "password": "wrong-password"},
        timeout=TIMEOUT,
    )
    unknown = requests.post(
        f"{BASE_URL}/auth/login",
        json={"email": f"nobody_{run_id}@example.com", "password": "wrong-password"},
        timeout=TIMEOUT,
    )
    result.check(
        "Login failures are indistinguishable",
        bad_password.status_code == unknown.status_code == 401 and bad_password.json() == unknown.json(),
    )

    resp = requests.get(f"{BASE_URL}/projects", timeout=TIMEOUT)
    result.check("Missing token is 401", resp.status_code == 401)

    # Pagination
    created = [create_project(user_a["headers"], f"Smoke project {i}") for i in range(12)]
    result.check("Create 12 projects", all(created))

    resp = requests.get(f"{BASE_URL}/projects", params={"page": 2, "limit": 5}, headers=user_a["headers"], timeout=TIMEOUT)
    data = resp.json().get("data", {})
    result.check(
        "Pagination",
        data.get("total") == 12 and data.get("totalPages") == 3 and len(data.get("projects", [])) == 5,
        f"total={data.get('total')}, totalPages={data.get('totalPages')}",
    )

    resp = requests.get(f"{BASE_URL}/projects", params={"limit": 101}, headers=user_a["headers"], timeout=TIMEOUT)
    result.check("limit=101 is 400", resp.status_code == 400, resp.json().get("error", ""))

    # Isolation
    target = created[0]
    if target:
        url = f"{BASE_URL}/projects/{target['id']}"
        result.check("B cannot read A's project", requests.get(url, headers=user_b["headers"], timeout=TIMEOUT).status_code == 404)
        result.check(
            "B cannot update A's project",
            requests.put(url, json={"name": "x"}, headers=user_b["headers"], timeout=TIMEOUT).status_code == 404,
        )
        result.check("B cannot delete A's project", requests.delete(url, headers=user_b["headers"], timeout=TIMEOUT).status_code == 404)

        resp = requests.get(f"{BASE_URL}/projects", headers=user_b["headers"], timeout=TIMEOUT)
        result.check("B's list is empty", resp.json()["data"]["total"] == 0)

        # Cleanup
        for project in created:
            if project:
                requests.delete(f"{BASE_URL}/projects/{project['id']}", headers=user_a["headers"], timeout=TIMEOUT)

    return 0 if result.summary() else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nTest interrupted by user")
        sys.exit(1)
    except requests.exceptions.ConnectionError:
        print(f"\n\nERROR: cannot connect to {BASE_URL}")
        sys.exit(1)
