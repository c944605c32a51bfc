# frontend/formatting.py
# Display and form helpers for the projects dashboard (no Streamlit calls)

from __future__ import annotations

import math
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

STATUS_OPTIONS = ["ACTIVE", "ON_HOLD", "COMPLETED"]
STATUS_LABELS = {
    "ACTIVE": "Active",
    "ON_HOLD": "On hold",
    "COMPLETED": "Completed",
}

TABLE_COLUMNS = ["Name", "Status", "Team member", "Deadline", "Budget", "Description"]


def format_money(value: Optional[float]) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "n/a"
    return f"${value:,.0f}"


def status_label(status: Optional[str]) -> str:
    return STATUS_LABELS.get(status or "", status or "n/a")


def projects_to_frame(projects: List[Dict[str, Any]]) -> pd.DataFrame:
    """Table view of one page of projects, in the order the API returned them."""
    rows = [
        {
            "Name": p.get("name", ""),
            "Status": status_label(p.get("status")),
            "Team member": p.get("teamMember", ""),
            "Deadline": p.get("deadline", ""),
            "Budget": format_money(p.get("budget")),
            "Description": p.get("description") or "",
        }
        for p in projects
    ]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def summarize_page(projects: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Counts per status and the budget total for the projects on screen."""
    counts = {status: 0 for status in STATUS_OPTIONS}
    budget = 0.0
    for p in projects:
        if p.get("status") in counts:
            counts[p["status"]] += 1
        budget += float(p.get("budget") or 0)
    return {"count": len(projects), "budget": budget, "by_status": counts}


def build_project_payload(
    name: str,
    description: str,
    status: str,
    deadline: date,
    team_member: str,
    budget: float,
) -> Dict[str, Any]:
    """
    Request body for create/update. A blank description is sent as null,
    which clears it on update.
    """
    return {
        "name": name.strip(),
        "description": description.strip() or None,
        "status": status,
        "deadline": deadline.isoformat(),
        "teamMember": team_member.strip(),
        "budget": float(budget),
    }


def parse_deadline(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
