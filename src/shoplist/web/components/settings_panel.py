"""Sidebar with model choice, auto-hide switch and API key management."""
import streamlit as st

from shoplist.config.settings import AVAILABLE_MODELS
from shoplist.services.app_settings import AppSettingsService
from shoplist.services.credentials import Credentials
from .feedback import flash, render_feedback


def render_settings_panel(app_settings: AppSettingsService, credentials: Credentials) -> None:
    """
    Render the settings sidebar.

    Args:
        app_settings: Stored user preferences
        credentials: The API key holder
    """
    with st.sidebar:
        st.title("🛒 Settings")

        models = list(AVAILABLE_MODELS)
        selected = st.selectbox(
            "AI model",
            options=models,
            format_func=lambda m: AVAILABLE_MODELS[m],
            index=models.index(app_settings.selected_model),
            key="selected_model"
        )
        if selected != app_settings.selected_model:
            result = app_settings.select_model(selected)
            if not result.success:
                render_feedback(result.error, type_="error", suggestions=result.suggestions)

        auto_hide = st.toggle(
            "Hide wishlist items when added to the shopping list",
            value=app_settings.auto_hide_wishlist_on_add,
            key="auto_hide"
        )
        if auto_hide != app_settings.auto_hide_wishlist_on_add:
            app_settings.toggle_auto_hide()

        st.divider()
        render_api_key_form(credentials)


def render_api_key_form(credentials: Credentials) -> None:
    """Set or remove the Gemini API key."""
    if credentials.is_configured:
        st.caption("Gemini API key is set")
        if st.button("Remove Gemini API Key", type="secondary"):
            result = credentials.clear()
            if result.success:
                flash("API key removed. You can add it again later.", type_="info")
                st.rerun()
            render_feedback(result.error, type_="error")
        return

    with st.form("api_key", clear_on_submit=True):
        key = st.text_input("Gemini API Key", type="password")
        submit = st.form_submit_button("Save")
        if submit:
            result = credentials.set(key)
            if result.success:
                flash("API key saved")
                st.rerun()
            render_feedback(result.error, type_="error", suggestions=result.suggestions)
