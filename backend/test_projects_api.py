"""
Project endpoint tests: CRUD, filtering, search, pagination and validation.

Run: pytest backend/test_projects_api.py -v
"""

import pytest


@pytest.fixture
def owner(register_user):
    _, user, headers = register_user("owner@x.com")
    return user, headers


class TestCreateAndRead:

    def test_create_defaults_to_active(self, client, owner, create_project):
        user, headers = owner
        project = create_project(headers, name="P1", teamMember="A", deadline="2025-01-01", budget=1000)

        assert project["status"] == "ACTIVE"
        assert project["userId"] == user["id"]
        assert project["budget"] == 1000
        assert project["deadline"] == "2025-01-01"
        assert project["teamMember"] == "A"
        assert project["description"] is None
        assert project["createdAt"] and project["updatedAt"]

        resp = client.get("/projects", headers=headers)
        data = resp.json()["data"]
        assert data["total"] == 1
        assert data["totalPages"] == 1
        assert data["projects"][0]["id"] == project["id"]

    def test_owner_id_in_body_is_ignored(self, client, owner, register_user):
        user, headers = owner
        _, other, _ = register_user("other@x.com")
        resp = client.post(
            "/projects",
            json={"name": "P", "teamMember": "A", "deadline": "2025-01-01", "budget": 1, "userId": other["id"]},
            headers=headers,
        )
        assert resp.status_code == 201
        assert resp.json()["data"]["userId"] == user["id"]

    def test_get_by_id(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers, description="Landing page")
        resp = client.get(f"/projects/{project['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": project}

    def test_unknown_id_is_404(self, client, owner):
        _, headers = owner
        resp = client.get("/projects/does-not-exist", headers=headers)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Project not found"}

    def test_datetime_deadline_is_stored_as_date(self, owner, create_project):
        _, headers = owner
        project = create_project(headers, deadline="2025-03-04T12:00:00.000Z")
        assert project["deadline"] == "2025-03-04"

    def test_requires_auth(self, client):
        assert client.get("/projects").status_code == 401
        assert client.post("/projects", json={}).status_code == 401
        assert client.get("/projects/x").status_code == 401
        assert client.put("/projects/x", json={}).status_code == 401
        assert client.delete("/projects/x").status_code == 401


class TestValidation:

    @pytest.mark.parametrize("override,message", [
        ({"name": ""}, "Project name is required"),
        ({"budget": -1}, "Budget must be positive"),
        ({"budget": 10_000_001}, "Budget too high"),
        ({"status": "DONE"}, "Status must be one of ACTIVE, ON_HOLD, COMPLETED"),
        ({"deadline": "soon"}, "Invalid date format"),
    ])
    def test_create_rules(self, client, owner, override, message):
        _, headers = owner
        payload = {"name": "P1", "teamMember": "A", "deadline": "2025-01-01", "budget": 1000, **override}
        resp = client.post("/projects", json=payload, headers=headers)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": message}

    def test_nothing_is_written_on_rejection(self, client, owner):
        _, headers = owner
        client.post("/projects", json={"name": "", "teamMember": "A"}, headers=headers)
        assert client.get("/projects", headers=headers).json()["data"]["total"] == 0

    def test_nan_budget_is_rejected_on_create(self, client, owner):
        _, headers = owner
        resp = client.post(
            "/projects",
            content=b'{"name": "P", "teamMember": "A", "deadline": "2025-01-01", "budget": NaN}',
            headers={**headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Budget must be a number"}
        assert client.get("/projects", headers=headers).json()["data"]["total"] == 0

    def test_nan_budget_is_rejected_on_update(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers)
        resp = client.put(
            f"/projects/{project['id']}",
            content=b'{"budget": NaN}',
            headers={**headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Budget must be a number"
        assert client.get(f"/projects/{project['id']}", headers=headers).json()["data"]["budget"] == 1000

    def test_query_rules(self, client, owner):
        _, headers = owner
        assert client.get("/projects?page=0", headers=headers).json()["error"] == "Page must be at least 1"
        assert client.get("/projects?limit=101", headers=headers).json()["error"] == "Limit must be between 1 and 100"
        assert client.get("/projects?status=nope", headers=headers).status_code == 400


class TestListing:

    def test_newest_first(self, client, owner, create_project):
        _, headers = owner
        names = ["first", "second", "third"]
        for name in names:
            create_project(headers, name=name)
        listed = [p["name"] for p in client.get("/projects", headers=headers).json()["data"]["projects"]]
        assert listed == list(reversed(names))

    def test_status_filter(self, client, owner, create_project):
        _, headers = owner
        create_project(headers, name="a", status="ACTIVE")
        create_project(headers, name="b", status="ON_HOLD")
        create_project(headers, name="c", status="COMPLETED")
        create_project(headers, name="d", status="ON_HOLD")

        data = client.get("/projects?status=ON_HOLD", headers=headers).json()["data"]
        assert data["total"] == 2
        assert {p["name"] for p in data["projects"]} == {"b", "d"}

    def test_search_is_case_insensitive_across_fields(self, client, owner, create_project):
        _, headers = owner
        create_project(headers, name="Website Redesign", teamMember="Alice")
        create_project(headers, name="Mobile", teamMember="WebOps Team")
        create_project(headers, name="Backend", teamMember="Bob", description="Rebuild the website API")
        create_project(headers, name="Unrelated", teamMember="Carol")

        data = client.get("/projects?search=WEB", headers=headers).json()["data"]
        assert data["total"] == 3
        assert "Unrelated" not in {p["name"] for p in data["projects"]}

    def test_search_matches_non_ascii_text(self, client, owner, create_project):
        _, headers = owner
        create_project(headers, name="Éclair rollout")
        create_project(headers, name="Plain rollout", teamMember="Zoë")
        create_project(headers, name="Other")

        exact = client.get("/projects", params={"search": "Éclair"}, headers=headers).json()["data"]
        assert [p["name"] for p in exact["projects"]] == ["Éclair rollout"]

        folded = client.get("/projects", params={"search": "éCLAIR"}, headers=headers).json()["data"]
        assert [p["name"] for p in folded["projects"]] == ["Éclair rollout"]

        member = client.get("/projects", params={"search": "ZOË"}, headers=headers).json()["data"]
        assert [p["name"] for p in member["projects"]] == ["Plain rollout"]

    def test_search_wildcards_are_literal(self, client, owner, create_project):
        _, headers = owner
        create_project(headers, name="100% done")
        create_project(headers, name="1000 units")
        create_project(headers, name="snake_case")
        create_project(headers, name="snakeXcase")

        percent = client.get("/projects", params={"search": "0%"}, headers=headers).json()["data"]
        assert [p["name"] for p in percent["projects"]] == ["100% done"]

        underscore = client.get("/projects", params={"search": "e_c"}, headers=headers).json()["data"]
        assert [p["name"] for p in underscore["projects"]] == ["snake_case"]

    def test_search_combined_with_status(self, client, owner, create_project):
        _, headers = owner
        create_project(headers, name="Web A", status="ACTIVE")
        create_project(headers, name="Web B", status="COMPLETED")
        data = client.get("/projects?search=web&status=COMPLETED", headers=headers).json()["data"]
        assert [p["name"] for p in data["projects"]] == ["Web B"]

    def test_pagination(self, client, owner, create_project):
        _, headers = owner
        for i in range(25):
            create_project(headers, name=f"P{i:02d}")

        page1 = client.get("/projects?page=1&limit=10", headers=headers).json()["data"]
        assert (page1["total"], page1["totalPages"], page1["page"], page1["limit"]) == (25, 3, 1, 10)
        assert len(page1["projects"]) == 10
        assert page1["projects"][0]["name"] == "P24"

        page3 = client.get("/projects?page=3&limit=10", headers=headers).json()["data"]
        assert len(page3["projects"]) == 5
        assert page3["projects"][-1]["name"] == "P00"

        beyond = client.get("/projects?page=4&limit=10", headers=headers).json()["data"]
        assert beyond["projects"] == []
        assert beyond["total"] == 25

    def test_empty_list(self, client, owner):
        _, headers = owner
        data = client.get("/projects", headers=headers).json()["data"]
        assert data == {"projects": [], "total": 0, "page": 1, "limit": 10, "totalPages": 0}


class TestUpdate:

    def test_partial_update_leaves_other_fields(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers, description="keep me")
        resp = client.put(f"/projects/{project['id']}", json={"budget": 500}, headers=headers)
        assert resp.status_code == 200
        updated = resp.json()["data"]
        assert updated["budget"] == 500
        for field in ("name", "description", "status", "deadline", "teamMember", "createdAt"):
            assert updated[field] == project[field]
        assert updated["updatedAt"] >= project["updatedAt"]

    def test_status_and_team_member(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers)
        resp = client.put(
            f"/projects/{project['id']}",
            json={"status": "COMPLETED", "teamMember": "Zed"},
            headers=headers,
        )
        data = resp.json()["data"]
        assert (data["status"], data["teamMember"]) == ("COMPLETED", "Zed")

    def test_null_description_clears_it(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers, description="temporary")
        resp = client.put(f"/projects/{project['id']}", json={"description": None}, headers=headers)
        assert resp.json()["data"]["description"] is None

    def test_empty_body_is_a_no_op(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers)
        resp = client.put(f"/projects/{project['id']}", json={}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["data"] == project

    def test_invalid_update(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers)
        resp = client.put(f"/projects/{project['id']}", json={"budget": 20_000_000}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Budget too high"

    def test_missing_project_wins_over_invalid_body(self, client, owner):
        _, headers = owner
        resp = client.put("/projects/nope", json={"budget": -1}, headers=headers)
        assert resp.status_code == 404


class TestDelete:

    def test_delete_then_get_is_404(self, client, owner, create_project):
        _, headers = owner
        project = create_project(headers)
        resp = client.delete(f"/projects/{project['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "data": {"message": "Project deleted successfully"}}

        assert client.get(f"/projects/{project['id']}", headers=headers).status_code == 404
        assert client.delete(f"/projects/{project['id']}", headers=headers).status_code == 404


def test_unknown_route_uses_envelope(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["success"] is False
