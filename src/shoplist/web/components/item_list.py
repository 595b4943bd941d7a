"""Item list component with per-item actions."""
from typing import Optional
import streamlit as st

from shoplist.domain.types import Item
from shoplist.services.item_store import ItemStore, ShoppingListStore
from .feedback import flash, render_feedback


def _label(item: Item, priced: bool) -> str:
    text = item.product
    if priced:
        uncertain = " (?)" if item.price_uncertain else ""
        text = f"{item.product} · {item.quantity} × $ {item.price}{uncertain}"
    return text if item.visible else f"~~{text}~~"


def render_item_list(store: ItemStore, prefix: str) -> None:
    """
    Render items with visibility, edit, move and delete buttons.

    Args:
        store: The list to show
        prefix: Widget key prefix, unique per screen
    """
    priced = isinstance(store, ShoppingListStore)
    items = store.items
    if not items:
        st.info("The list is empty")
        return

    editing: Optional[str] = st.session_state.get(f"{prefix}_editing")
    for index, item in enumerate(items):
        cols = st.columns([6, 1, 1, 1, 1, 1] if priced else [6, 1, 1, 1, 1])
        cols[0].markdown(_label(item, priced))
        if cols[1].button("👁" if item.visible else "🙈", key=f"{prefix}_vis_{item.id}"):
            store.toggle_visible(item.id)
            st.rerun()
        if cols[2].button("✏️", key=f"{prefix}_edit_{item.id}"):
            st.session_state[f"{prefix}_editing"] = item.id
            st.rerun()
        if cols[3].button("⬆", key=f"{prefix}_up_{item.id}", disabled=index == 0):
            order = [i.id for i in items]
            order[index - 1], order[index] = order[index], order[index - 1]
            store.reorder(order)
            st.rerun()
        if cols[4].button("🗑", key=f"{prefix}_del_{item.id}"):
            store.remove(item.id)
            flash(f"Removed {item.product}", type_="info")
            st.rerun()
        if priced and cols[5].button("❓", key=f"{prefix}_unc_{item.id}", help="Price not confirmed"):
            store.toggle_price_uncertain(item.id)
            st.rerun()

        if editing == item.id:
            render_edit_form(store, item, prefix, priced)

    if st.button("Clear all", key=f"{prefix}_clear"):
        result = store.clear()
        if not result.success:
            render_feedback(result.error, type_="info")
        else:
            st.rerun()


def render_edit_form(store: ItemStore, item: Item, prefix: str, priced: bool) -> None:
    """Inline edit form for one item."""
    with st.form(f"{prefix}_edit_form_{item.id}"):
        product = st.text_input("Product", value=item.product, key=f"{prefix}_edit_product_{item.id}")
        fields = {"product": product}
        if priced:
            col1, col2 = st.columns(2)
            fields["quantity"] = col1.text_input(
                "Quantity", value=item.quantity or "", key=f"{prefix}_edit_quantity_{item.id}"
            )
            fields["price"] = col2.text_input(
                "Price", value=item.price or "", key=f"{prefix}_edit_price_{item.id}"
            )
        save, cancel = st.columns(2)
        if save.form_submit_button("Save"):
            result = store.update(item.id, **fields)
            if result.success:
                st.session_state.pop(f"{prefix}_editing", None)
                st.rerun()
            render_feedback(result.error, type_="error", suggestions=result.suggestions)
        if cancel.form_submit_button("Cancel"):
            st.session_state.pop(f"{prefix}_editing", None)
            st.rerun()
