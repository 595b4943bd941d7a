"""Messages shown above the current screen."""
from typing import List, Optional
import streamlit as st

_RENDERERS = {
    "success": st.success,
    "error": st.error,
    "warning": st.warning,
    "info": st.info,
}


def render_feedback(
    message: str,
    type_: str = "info",
    suggestions: Optional[List[str]] = None
) -> None:
    """
    Show a message box, with hints listed underneath.

    Args:
        message: Text of the message
        type_: 'success', 'error', 'warning' or 'info'
        suggestions: Hints from a failed Result or a ShopListError
    """
    _RENDERERS.get(type_, st.info)(message)
    for suggestion in suggestions or []:
        st.caption(f"💡 {suggestion}")


def flash(message: str, type_: str = "success") -> None:
    """Queue a message to show after the next rerun."""
    st.session_state.setdefault("flash_messages", []).append((message, type_))


def render_flashes() -> None:
    for message, type_ in st.session_state.pop("flash_messages", []):
        render_feedback(message, type_=type_)
