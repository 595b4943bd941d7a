"""Main Streamlit application for shoplist."""
import uuid
import streamlit as st

from shoplist.db.session import get_session, init_db
from shoplist.services.context import AppContext, create_app_context
from shoplist.services.screens import LLM_CHAT, SCREEN_TITLES, SHOPPING_LIST, WISHLIST
from shoplist.services.add_items import SHOPPING, WISHLIST as WISHLIST_TARGET
from shoplist.utils.logger import get_logger
from shoplist.web.components import (
    render_add_item,
    render_chat,
    render_feedback,
    render_flashes,
    render_item_list,
    render_settings_panel,
)

# Initialize logger
logger = get_logger(__name__)


def init_session_state() -> None:
    """Initialize session state variables."""
    if 'session_id' not in st.session_state:
        st.session_state.session_id = str(uuid.uuid4())
        logger.info("New session started", session_id=st.session_state.session_id)

    if 'app' not in st.session_state:
        init_db()
        st.session_state.app = create_app_context(get_session())

    if 'chat' not in st.session_state:
        st.session_state.chat = st.session_state.app.new_chat()


def render_header(app: AppContext) -> None:
    """Screen tabs plus previous/next buttons."""
    screens = app.screens
    cols = st.columns(len(screens.screens) + 2)
    if cols[0].button("◀", disabled=screens.active == screens.screens[0]):
        screens.previous()
        st.rerun()
    for col, screen in zip(cols[1:], screens.screens):
        label = SCREEN_TITLES[screen]
        if col.button(label, type="primary" if screen == screens.active else "secondary"):
            screens.select(screen)
            st.rerun()
    if cols[-1].button("▶", disabled=screens.active == screens.screens[-1]):
        screens.next()
        st.rerun()


def render_shopping_list(app: AppContext) -> None:
    st.header("Shopping List")
    render_item_list(app.shopping, prefix="shopping")
    st.metric("Total", f"$ {app.shopping.total():.2f}")
    render_add_item(app.flow, SHOPPING)


def render_wishlist(app: AppContext) -> None:
    st.header("Wishlist")
    render_item_list(app.wishlist, prefix="wishlist")
    render_add_item(app.flow, WISHLIST_TARGET)


def main() -> None:
    """Main application entry point."""
    st.set_page_config(page_title="shoplist", page_icon="🛒")
    try:
        init_session_state()
        app: AppContext = st.session_state.app

        render_settings_panel(app.app_settings, app.credentials)
        if not app.credentials.is_configured:
            render_feedback(
                "Set your Gemini API key in the sidebar to use voice and AI features",
                type_="info"
            )

        render_header(app)
        render_flashes()

        chat = st.session_state.chat
        chat.model_id = app.app_settings.selected_model

        if app.screens.active == SHOPPING_LIST:
            render_shopping_list(app)
        elif app.screens.active == WISHLIST:
            render_wishlist(app)
        elif app.screens.active == LLM_CHAT:
            render_chat(chat)
    except Exception:
        logger.exception(
            "Unhandled error in main application",
            session_id=st.session_state.get('session_id', 'error')
        )
        st.error("Something went wrong. Please try again.")


if __name__ == "__main__":
    main()
