"""
frontend/auth.py
Authentication state for the project tracker frontend.

The bearer token and the signed-in user live in st.session_state, which is
held server-side by Streamlit for the browser session and never written to
browser storage. Every rerun starts by calling init_auth_state() so the keys
always exist, and every API call takes its header from get_auth_header().
"""

from typing import Any, Dict, Optional

import streamlit as st


def init_auth_state() -> None:
    """Ensure auth keys exist. Idempotent; call at the top of every rerun."""
    ss = st.session_state
    ss.setdefault("auth_token", None)
    ss.setdefault("current_user", None)


def set_auth(auth_token: str, current_user: Dict[str, Any]) -> None:
    """Store credentials after a successful login or registration."""
    ss = st.session_state
    ss["auth_token"] = auth_token
    ss["current_user"] = current_user


def clear_auth() -> None:
    """
    Clear all authentication state (logout or rejected token).

    Safe to call multiple times.
    """
    ss = st.session_state
    ss["auth_token"] = None
    ss["current_user"] = None


def is_authenticated() -> bool:
    return bool(st.session_state.get("auth_token"))


def get_current_user() -> Optional[Dict[str, Any]]:
    return st.session_state.get("current_user")


def get_auth_header() -> Dict[str, str]:
    """
    Authorization header for protected API requests.

    Returns:
        {"Authorization": "Bearer <token>"} if authenticated, {} otherwise
    """
    token = st.session_state.get("auth_token")
    if token:
        return {"Authorization": f"Bearer {token}"}
    return {}


def require_auth() -> bool:
    """
    Guard for protected pages.

    Usage at top of page render functions:
        if not require_auth():
            return
    """
    if not is_authenticated():
        st.warning("You must be logged in to access this page.")
        if st.button("Go to Login", type="primary"):
            st.session_state["nav_page"] = "Login"
            st.rerun()
        return False
    return True
