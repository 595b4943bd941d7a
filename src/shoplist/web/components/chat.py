"""Chat screen component."""
import asyncio
import streamlit as st

from shoplist.ai.chat import ChatSession
from shoplist.ai.errors import MissingCredential
from .feedback import render_feedback


def render_chat(chat: ChatSession) -> None:
    """Render the conversation and the input box."""
    for message in chat.messages:
        with st.chat_message(message.role):
            st.write(message.content)

    prompt = st.chat_input("Ask anything")
    if prompt:
        with st.spinner("Loading..."):
            try:
                asyncio.run(chat.send(prompt))
            except MissingCredential as e:
                render_feedback(e.message, type_="error", suggestions=e.suggestions)
                return
        st.rerun()
