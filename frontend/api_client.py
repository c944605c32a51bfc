"""
frontend/api_client.py
Centralized API client for all backend requests.

This module ensures:
1. Protected calls always carry the Authorization header
2. A 401 on a protected call clears stored credentials and returns to login
3. The {success, data | error} envelope is unwrapped in one place
"""

from typing import Any, Dict, Literal, Optional, Tuple

import requests
import streamlit as st

# Import config (robust fallback for different run contexts)
try:
    from frontend.config import IS_DEV, REQUEST_TIMEOUT, get_api_base_url
except ModuleNotFoundError:
    from config import IS_DEV, REQUEST_TIMEOUT, get_api_base_url

try:
    from frontend.auth import clear_auth, get_auth_header
except ModuleNotFoundError:
    from auth import clear_auth, get_auth_header


__all__ = ["api_request", "unwrap_envelope", "build_project_query", "get_api_base_url"]

PUBLIC_PATHS = ("/auth/login", "/auth/register", "/health")


def is_public_endpoint(path: str) -> bool:
    """
    Check if endpoint is public (doesn't require authentication).

    Args:
        path: API endpoint path (e.g., "/auth/login")
    """
    return path in PUBLIC_PATHS


def error_from_response(resp: requests.Response) -> str:
    """Server error message from an error envelope, or a generic one."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Request failed ({resp.status_code})"


def unwrap_envelope(resp: requests.Response) -> Tuple[bool, Any, Optional[str]]:
    """
    Split a backend response into (ok, data, error).

    Returns:
        (True, data, None) on a success envelope, (False, None, message) otherwise
    """
    try:
        body = resp.json()
    except ValueError:
        return False, None, f"Unexpected response ({resp.status_code})"

    if resp.ok and isinstance(body, dict) and body.get("success"):
        return True, body.get("data"), None
    return False, None, error_from_response(resp)


def build_project_query(
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    """
    Query params for GET /projects; blank search and the "All" status are omitted.
    """
    params: Dict[str, Any] = {"page": page, "limit": limit}
    if search and search.strip():
        params["search"] = search.strip()
    if status and status != "All":
        params["status"] = status
    return params


def api_request(
    method: Literal["GET", "POST", "PUT", "DELETE"],
    path: str,
    json: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: int = REQUEST_TIMEOUT,
) -> Optional[requests.Response]:
    """
    Make an API request with auth header attachment and error handling.

    Security:
    - Never logs or prints tokens/auth headers

    Returns:
        Response object, or None on connection/config errors (already shown to the user)
    """
    try:
        base_url = get_api_base_url()
    except (RuntimeError, ValueError) as e:
        st.error(f"Configuration error: {e}")
        return None

    url = f"{base_url}{path}"
    headers = {"Accept": "application/json"}
    if not is_public_endpoint(path):
        headers.update(get_auth_header())

    try:
        resp = requests.request(method, url, json=json, params=params, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout:
        if IS_DEV:
            print(f"[API] Timeout on {method} {path}")
        st.error(f"Request timed out after {timeout}s. Please try again.")
        return None
    except requests.exceptions.ConnectionError:
        if IS_DEV:
            print(f"[API] Connection error on {method} {path}")
        st.error(f"Cannot connect to backend at {base_url}. Is it running?")
        return None
    except requests.exceptions.RequestException as e:
        if IS_DEV:
            print(f"[API] Unexpected error on {method} {path}: {type(e).__name__}")
        st.error("Unexpected error talking to the backend.")
        return None

    if resp.status_code == 401 and not is_public_endpoint(path):
        if IS_DEV:
            print(f"[API] 401 on {path}, clearing session")
        _handle_session_expired()
        return None

    return resp


def _handle_session_expired() -> None:
    """Clear auth and go back to the login page."""
    clear_auth()
    st.session_state["nav_page"] = "Login"
    st.session_state["_toast"] = "Your session has expired. Please log in again."
    st.rerun()
