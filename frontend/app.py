# frontend/app.py
# Project Tracker - sign in, then manage your projects
#
# Run from repo root: streamlit run frontend/app.py
# Or from frontend folder: streamlit run app.py

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import streamlit as st

# Import environment config (robust fallback for different run contexts)
try:
    from frontend.config import BACKEND_URL, DEFAULT_PAGE_SIZE, ENABLE_DEBUG_UI, ENV, PAGE_SIZE_OPTIONS
except ModuleNotFoundError:
    from config import BACKEND_URL, DEFAULT_PAGE_SIZE, ENABLE_DEBUG_UI, ENV, PAGE_SIZE_OPTIONS

try:
    from frontend.auth import clear_auth, get_current_user, init_auth_state, is_authenticated, require_auth, set_auth
except ModuleNotFoundError:
    from auth import clear_auth, get_current_user, init_auth_state, is_authenticated, require_auth, set_auth

try:
    from frontend.api_client import api_request, build_project_query, unwrap_envelope
except ModuleNotFoundError:
    from api_client import api_request, build_project_query, unwrap_envelope

try:
    from frontend.formatting import (
        STATUS_OPTIONS, build_project_payload, format_money, parse_deadline,
        projects_to_frame, status_label, summarize_page,
    )
except ModuleNotFoundError:
    from formatting import (
        STATUS_OPTIONS, build_project_payload, format_money, parse_deadline,
        projects_to_frame, status_label, summarize_page,
    )

st.set_page_config(page_title="Project Tracker", layout="wide")

# --------------------------------------------------------------------
# State helpers
# --------------------------------------------------------------------


def init_state() -> None:
    ss = st.session_state
    init_auth_state()

    ss.setdefault("nav_page", None)

    # List controls
    ss.setdefault("search", "")
    ss.setdefault("status_filter", "All")
    ss.setdefault("page", 1)
    ss.setdefault("limit", DEFAULT_PAGE_SIZE)

    # One-shot message shown after the next rerun
    ss.setdefault("_toast", None)


init_state()

ss = st.session_state


def go_to(page: str) -> None:
    """Set the current page and rerun."""
    ss["nav_page"] = page
    st.rerun()


def reset_page() -> None:
    """Filters changed; start again from the first page."""
    ss["page"] = 1


def notify_after_rerun(message: str) -> None:
    ss["_toast"] = message


def show_pending_toast() -> None:
    message = ss.pop("_toast", None)
    if message:
        st.toast(message)


# --------------------------------------------------------------------
# Auth pages
# --------------------------------------------------------------------


def _sign_in(resp) -> bool:
    ok, data, error = unwrap_envelope(resp)
    if not ok:
        st.error(error)
        return False
    set_auth(data["token"], data["user"])
    print(f"[ROUTING] signed in, role={data['user'].get('role')}")
    return True


def render_login() -> None:
    st.title("Project Tracker")
    login_tab, register_tab = st.tabs(["Login", "Register"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            submitted = st.form_submit_button("Login", type="primary")

        if submitted:
            if not email or not password:
                st.error("Please enter email and password.")
                return
            resp = api_request("POST", "/auth/login", json={"email": email, "password": password})
            if resp is not None and _sign_in(resp):
                notify_after_rerun("Welcome back!")
                reset_page()
                go_to("Projects")

    with register_tab:
        with st.form("register_form"):
            name = st.text_input("Name", key="register_name")
            reg_email = st.text_input("Email", key="register_email")
            reg_password = st.text_input(
                "Password", type="password", key="register_password",
                help="At least 6 characters",
            )
            reg_submitted = st.form_submit_button("Create account", type="primary")

        if reg_submitted:
            if not name or not reg_email or not reg_password:
                st.error("Please fill in all registration fields.")
                return
            resp = api_request(
                "POST",
                "/auth/register",
                json={"email": reg_email, "password": reg_password, "name": name},
            )
            if resp is not None and _sign_in(resp):
                notify_after_rerun("Account created")
                reset_page()
                go_to("Projects")


def logout() -> None:
    clear_auth()
    ss["search"] = ""
    ss["status_filter"] = "All"
    reset_page()
    notify_after_rerun("Signed out")
    go_to("Login")


def render_sidebar() -> None:
    with st.sidebar:
        st.markdown("### Project Tracker")
        user = get_current_user()
        if user:
            st.markdown(f"**{user.get('name', '')}**")
            st.caption(user.get("email", ""))
            if user.get("role") == "ADMIN":
                st.caption("Administrator")
            if st.button("Logout", width="stretch"):
                logout()

        if ENABLE_DEBUG_UI:
            st.divider()
            st.caption(f"ENV: {ENV}")
            st.caption(f"Backend: {BACKEND_URL}")


# --------------------------------------------------------------------
# Project dialogs
# --------------------------------------------------------------------


@st.dialog("Project")
def project_dialog(project: Optional[Dict[str, Any]] = None) -> None:
    """Create form when project is None, edit form otherwise."""
    editing = project is not None
    current = project or {}
    default_deadline = parse_deadline(current.get("deadline")) or (date.today() + timedelta(days=30))
    current_status = current.get("status", "ACTIVE")

    with st.form("project_form"):
        name = st.text_input("Name", value=current.get("name", ""), max_chars=100)
        description = st.text_area("Description", value=current.get("description") or "", max_chars=500)
        status = st.selectbox(
            "Status",
            STATUS_OPTIONS,
            index=STATUS_OPTIONS.index(current_status) if current_status in STATUS_OPTIONS else 0,
            format_func=status_label,
        )
        deadline = st.date_input("Deadline", value=default_deadline)
        team_member = st.text_input("Team member", value=current.get("teamMember", ""), max_chars=100)
        budget = st.number_input(
            "Budget",
            min_value=0.0,
            max_value=10_000_000.0,
            value=float(current.get("budget", 0.0)),
            step=100.0,
        )
        submitted = st.form_submit_button("Save changes" if editing else "Create project", type="primary")

    if not submitted:
        return

    payload = build_project_payload(name, description, status, deadline, team_member, budget)
    if editing:
        resp = api_request("PUT", f"/projects/{project['id']}", json=payload)
    else:
        resp = api_request("POST", "/projects", json=payload)
    if resp is None:
        return

    ok, data, error = unwrap_envelope(resp)
    if not ok:
        st.error(error)
        return

    notify_after_rerun(f"Updated {data['name']}" if editing else f"Created {data['name']}")
    st.rerun()


@st.dialog("Delete project")
def confirm_delete_dialog(project: Dict[str, Any]) -> None:
    st.write(f"Delete **{project['name']}**? This cannot be undone.")
    cols = st.columns(2)
    if cols[0].button("Delete", type="primary", width="stretch"):
        resp = api_request("DELETE", f"/projects/{project['id']}")
        if resp is None:
            return
        ok, _, error = unwrap_envelope(resp)
        if not ok:
            st.error(error)
            return
        notify_after_rerun(f"Deleted {project['name']}")
        st.rerun()
    if cols[1].button("Cancel", width="stretch"):
        st.rerun()


# --------------------------------------------------------------------
# Projects page
# --------------------------------------------------------------------


def load_projects() -> Optional[Dict[str, Any]]:
    params = build_project_query(ss["search"], ss["status_filter"], ss["page"], ss["limit"])
    resp = api_request("GET", "/projects", params=params)
    if resp is None:
        return None
    ok, data, error = unwrap_envelope(resp)
    if not ok:
        st.error(error)
        return None
    return data


def render_filters() -> None:
    cols = st.columns([4, 2, 1])
    cols[0].text_input("Search", key="search", placeholder="Name, team member or description", on_change=reset_page)
    cols[1].selectbox(
        "Status",
        ["All"] + STATUS_OPTIONS,
        key="status_filter",
        format_func=lambda s: "All" if s == "All" else status_label(s),
        on_change=reset_page,
    )
    cols[2].selectbox("Per page", PAGE_SIZE_OPTIONS, key="limit", on_change=reset_page)


def render_summary(data: Dict[str, Any]) -> None:
    summary = summarize_page(data["projects"])
    cols = st.columns(4)
    cols[0].metric("Matching projects", data["total"])
    cols[1].metric("On this page", summary["count"])
    cols[2].metric("Budget (this page)", format_money(summary["budget"]))
    cols[3].metric("Active (this page)", summary["by_status"]["ACTIVE"])


def render_project_actions(projects: List[Dict[str, Any]]) -> None:
    by_id = {p["id"]: p for p in projects}
    cols = st.columns([4, 1, 1])
    selected_id = cols[0].selectbox(
        "Select a project",
        list(by_id),
        format_func=lambda pid: by_id[pid]["name"],
        label_visibility="collapsed",
    )
    if cols[1].button("Edit", width="stretch"):
        project_dialog(by_id[selected_id])
    if cols[2].button("Delete", width="stretch"):
        confirm_delete_dialog(by_id[selected_id])


def render_pagination(data: Dict[str, Any]) -> None:
    total_pages = max(data["totalPages"], 1)
    cols = st.columns([1, 2, 1])
    if cols[0].button("Previous", disabled=ss["page"] <= 1, width="stretch"):
        ss["page"] -= 1
        st.rerun()
    cols[1].markdown(f"<div style='text-align:center'>Page {ss['page']} of {total_pages}</div>", unsafe_allow_html=True)
    if cols[2].button("Next", disabled=ss["page"] >= total_pages, width="stretch"):
        ss["page"] += 1
        st.rerun()


def render_projects() -> None:
    if not require_auth():
        return

    header = st.columns([5, 1])
    header[0].title("Projects")
    if header[1].button("New project", type="primary", width="stretch"):
        project_dialog()

    render_filters()

    data = load_projects()
    if data is None:
        return

    # A delete can empty the last page; step back to one that exists
    if not data["projects"] and ss["page"] > 1 and ss["page"] > data["totalPages"]:
        ss["page"] = max(data["totalPages"], 1)
        st.rerun()

    render_summary(data)

    if not data["projects"]:
        st.info("No projects match. Create one with the New project button.")
        return

    st.dataframe(projects_to_frame(data["projects"]), hide_index=True, width="stretch")
    render_project_actions(data["projects"])
    render_pagination(data)


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------


def main() -> None:
    init_auth_state()
    show_pending_toast()

    if not ss.get("nav_page"):
        ss["nav_page"] = "Projects" if is_authenticated() else "Login"
    if ss["nav_page"] != "Login" and not is_authenticated():
        ss["nav_page"] = "Login"

    print(f"[ROUTING] page={ss['nav_page']} | token_present={is_authenticated()}")

    render_sidebar()

    if ss["nav_page"] == "Projects":
        render_projects()
    else:
        render_login()


if __name__ == "__main__":
    main()
