"""
Validation layer tests: first-message policy, coercion rules and bounds.
"""

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from backend.models import ProjectStatus
from backend.schemas import (
    LoginRequest,
    ProjectCreateRequest,
    ProjectQuery,
    ProjectUpdateRequest,
    RegisterRequest,
    all_errors,
    first_error,
    parse_deadline,
    parse_or_400,
)

VALID_PROJECT = {
    "name": "P1",
    "teamMember": "A",
    "deadline": "2025-01-01",
    "budget": 1000,
}


def _first_message(schema, data):
    with pytest.raises(HTTPException) as exc_info:
        parse_or_400(schema, data)
    assert exc_info.value.status_code == 400
    return exc_info.value.detail


class TestAuthSchemas:

    def test_email_is_normalized(self):
        req = LoginRequest.model_validate({"email": "  A@X.com ", "password": "secret1"})
        assert req.email == "a@x.com"

    def test_invalid_email(self):
        assert _first_message(LoginRequest, {"email": "nope", "password": "secret1"}) == "Invalid email address"

    def test_short_password(self):
        msg = _first_message(LoginRequest, {"email": "a@x.com", "password": "123"})
        assert msg == "Password must be at least 6 characters"

    def test_register_requires_name(self):
        msg = _first_message(RegisterRequest, {"email": "a@x.com", "password": "secret1", "name": "  "})
        assert msg == "Name is required"

    def test_register_name_too_long(self):
        msg = _first_message(RegisterRequest, {"email": "a@x.com", "password": "secret1", "name": "n" * 101})
        assert msg == "Name too long"

    def test_missing_field(self):
        assert _first_message(RegisterRequest, {"email": "a@x.com", "password": "secret1"}) == "Name is required"

    def test_first_violation_wins(self):
        msg = _first_message(RegisterRequest, {"email": "bad", "password": "1", "name": ""})
        assert msg == "Invalid email address"

    def test_aggregate_errors_are_available(self):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest.model_validate({"email": "bad", "password": "1", "name": ""})
        grouped = all_errors(exc_info.value)
        assert grouped == {
            "email": ["Invalid email address"],
            "password": ["Password must be at least 6 characters"],
            "name": ["Name is required"],
        }
        assert first_error(exc_info.value) == "Invalid email address"

    def test_non_object_body(self):
        assert _first_message(LoginRequest, ["a@x.com"]) == "Request body must be a JSON object"
        assert _first_message(LoginRequest, None) == "Request body must be a JSON object"


class TestProjectCreate:

    def test_defaults(self):
        req = ProjectCreateRequest.model_validate(VALID_PROJECT)
        assert req.status == ProjectStatus.ACTIVE
        assert req.description is None
        assert req.team_member == "A"
        assert req.budget == 1000.0

    @pytest.mark.parametrize("override,message", [
        ({"name": ""}, "Project name is required"),
        ({"name": "x" * 101}, "Name too long"),
        ({"description": "d" * 501}, "Description too long"),
        ({"teamMember": ""}, "Team member is required"),
        ({"deadline": "not a date"}, "Invalid date format"),
        ({"budget": -1}, "Budget must be positive"),
        ({"budget": 10_000_001}, "Budget too high"),
        ({"budget": "1000"}, "Budget must be a number"),
        ({"budget": float("nan")}, "Budget must be a number"),
        ({"status": "DONE"}, "Status must be one of ACTIVE, ON_HOLD, COMPLETED"),
    ])
    def test_rules(self, override, message):
        assert _first_message(ProjectCreateRequest, {**VALID_PROJECT, **override}) == message

    def test_budget_bounds_are_inclusive(self):
        assert ProjectCreateRequest.model_validate({**VALID_PROJECT, "budget": 0}).budget == 0
        assert ProjectCreateRequest.model_validate({**VALID_PROJECT, "budget": 10_000_000}).budget == 10_000_000

    def test_missing_team_member(self):
        data = {k: v for k, v in VALID_PROJECT.items() if k != "teamMember"}
        assert _first_message(ProjectCreateRequest, data) == "Team member is required"


class TestDeadline:

    @pytest.mark.parametrize("raw,expected", [
        ("2025-01-01", "2025-01-01"),
        ("2025-01-01T10:30:00", "2025-01-01"),
        ("2025-01-01T10:30:00Z", "2025-01-01"),
        ("2025-01-01T10:30:00.000Z", "2025-01-01"),
        ("2025-01-01T23:00:00+02:00", "2025-01-01"),
    ])
    def test_parseable(self, raw, expected):
        assert parse_deadline(raw) == expected

    @pytest.mark.parametrize("raw", ["", "tomorrow", "2025-13-01", "01/02/2025"])
    def test_unparseable(self, raw):
        with pytest.raises(ValueError):
            parse_deadline(raw)


class TestProjectUpdate:

    def test_only_supplied_fields(self):
        req = ProjectUpdateRequest.model_validate({"budget": 500})
        assert req.changes() == {"budget": 500.0}

    def test_empty_body_changes_nothing(self):
        assert ProjectUpdateRequest.model_validate({}).changes() == {}

    def test_null_description_clears_but_other_nulls_are_ignored(self):
        req = ProjectUpdateRequest.model_validate({"description": None, "name": None})
        assert req.changes() == {"description": None}

    def test_team_member_alias(self):
        assert ProjectUpdateRequest.model_validate({"teamMember": "Bob"}).changes() == {"team_member": "Bob"}

    def test_rules_still_apply(self):
        assert _first_message(ProjectUpdateRequest, {"budget": -5}) == "Budget must be positive"
        assert _first_message(ProjectUpdateRequest, {"name": ""}) == "Project name is required"


class TestProjectQuery:

    def test_defaults(self):
        query = ProjectQuery.model_validate({})
        assert (query.page, query.limit, query.status, query.search) == (1, 10, None, None)

    def test_string_coercion(self):
        query = ProjectQuery.model_validate({"page": "3", "limit": "25", "status": "ON_HOLD"})
        assert query.page == 3
        assert query.limit == 25
        assert query.status == ProjectStatus.ON_HOLD

    def test_empty_strings_are_absent(self):
        query = ProjectQuery.model_validate({"page": "", "limit": "", "status": "", "search": ""})
        assert (query.page, query.limit, query.status, query.search) == (1, 10, None, None)

    def test_search_is_trimmed(self):
        assert ProjectQuery.model_validate({"search": "  web  "}).search == "web"
        assert ProjectQuery.model_validate({"search": "   "}).search is None

    @pytest.mark.parametrize("params,message", [
        ({"page": "0"}, "Page must be at least 1"),
        ({"limit": "0"}, "Limit must be between 1 and 100"),
        ({"limit": "101"}, "Limit must be between 1 and 100"),
        ({"page": "abc"}, "Page must be a number"),
        ({"status": "archived"}, "Status must be one of ACTIVE, ON_HOLD, COMPLETED"),
    ])
    def test_rules(self, params, message):
        assert _first_message(ProjectQuery, params) == message
