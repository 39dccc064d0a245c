"""
Session state management for Streamlit app.
"""
import streamlit as st
from typing import Any, Optional, Sequence


# =============================================================================
# STATE KEYS
# =============================================================================

STATE_KEYS = {
    # Individual tab
    "selected_member": "selected_member",
    "compare_role": "compare_role",  # None = member's own role

    # Team tab
    "selected_team_role": "selected_team_role",

    # Category averages page
    "category_search": "category_search",
}


# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULTS = {
    "selected_member": None,
    "compare_role": None,
    "selected_team_role": None,
    "category_search": "",
}


# =============================================================================
# STATE HELPERS
# =============================================================================

def init_state():
    """Initialize all session state keys with defaults."""
    for key, default in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default


def get_state(key: str) -> Any:
    """Get state value with default fallback."""
    init_state()
    return st.session_state.get(key, DEFAULTS.get(key))


def set_state(key: str, value: Any):
    """Set state value."""
    st.session_state[key] = value


# =============================================================================
# SELECTION HELPERS
# =============================================================================

def ensure_selection(key: str, options: Sequence[str]) -> Optional[str]:
    """
    Keep a selection valid against the current options.

    Falls back to the first option when the stored value is missing or stale.
    """
    current = get_state(key)
    if current in options:
        return current
    fallback = options[0] if options else None
    set_state(key, fallback)
    return fallback
