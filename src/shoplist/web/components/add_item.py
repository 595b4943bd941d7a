"""Forms for adding items by hand, by text or by voice."""
import asyncio
import streamlit as st

from shoplist.ai.errors import MissingCredential
from shoplist.domain.types import AudioBlob
from shoplist.services.add_items import AddItemsFlow, SHOPPING
from shoplist.services.base_service import Result
from .feedback import flash, render_feedback


async def _run(flow: AddItemsFlow, operation) -> Result:
    result = await operation
    await flow.drain()
    return result


def _report(result: Result, generic_error: str) -> None:
    if result.success:
        count = len(result.data) if isinstance(result.data, list) else 1
        flash(f"Added {count} item(s)")
        st.rerun()
    render_feedback(result.error or generic_error, type_="error", suggestions=result.suggestions)


def render_add_item(flow: AddItemsFlow, target: str) -> None:
    """
    Render the add forms for one list.

    Args:
        flow: Add-items flow shared by both lists
        target: "shopping" or "wishlist"
    """
    priced = target == SHOPPING

    with st.form(f"{target}_add_item", clear_on_submit=True):
        product = st.text_input("Product", key=f"{target}_add_product")
        quantity = price = None
        if priced:
            col1, col2 = st.columns(2)
            quantity = col1.text_input("Quantity", placeholder="1", key=f"{target}_add_quantity")
            price = col2.text_input("Price", placeholder="0", key=f"{target}_add_price")
        submit = st.form_submit_button("Add")
        if submit:
            result = asyncio.run(_run(flow, flow.add_manual(product, quantity, price, target=target)))
            if result.success:
                st.rerun()
            render_feedback(result.error, type_="error", suggestions=result.suggestions)

    text = st.text_input(
        "Or describe what you need",
        placeholder="2 desodorantes de 45 pesos y uno de 25 pesos",
        key=f"{target}_free_text"
    )
    if st.button("✨ Add from text", key=f"{target}_add_text") and text:
        with st.spinner("Reading your list..."):
            try:
                result = asyncio.run(_run(flow, flow.add_from_text(text, target=target)))
            except MissingCredential as e:
                render_feedback(e.message, type_="error", suggestions=e.suggestions)
                return
        _report(result, "Failed to parse the response")

    recording = st.audio_input("🎤 Record", key=f"{target}_voice")
    if recording is not None and st.button("Add from recording", key=f"{target}_add_voice"):
        audio = AudioBlob(data=recording.getvalue(), mime_type=recording.type or "audio/wav")
        with st.spinner("Listening..."):
            try:
                result = asyncio.run(_run(flow, flow.add_from_voice(audio, target=target)))
            except MissingCredential as e:
                render_feedback(e.message, type_="error", suggestions=e.suggestions)
                return
        _report(result, "Failed to process voice command")
