"""Tests for the add-items flow and wishlist follow-up."""
import pytest
from unittest.mock import AsyncMock, Mock

from shoplist.ai.errors import ExtractionParseError, MissingCredential, NetworkError
from shoplist.domain.types import AudioBlob, CandidateItem
from shoplist.services.add_items import SHOPPING, WISHLIST, AddItemsFlow


@pytest.fixture
def extraction():
    client = Mock()
    client.extract_items = AsyncMock(return_value=[
        CandidateItem(product="Desodorante", quantity="2", price="45"),
        CandidateItem(product="Desodorante", quantity="1", price="25"),
    ])
    client.extract_items_from_text = AsyncMock(return_value=[
        CandidateItem(product="Tomate", quantity="0.323", price="80"),
    ])
    return client


@pytest.fixture
def reconciler():
    """Reconciler that hides every wishlist entry."""
    client = Mock()

    async def hide_all(wishlist, newly_added, model_id):
        return [i.model_copy(update={"visible": False}) for i in wishlist]

    client.reconcile = AsyncMock(side_effect=hide_all)
    return client


@pytest.fixture
def llm_with_answer():
    """Build a client whose model always gives the same answer."""
    def build(content):
        llm = Mock()
        llm.generate = AsyncMock(return_value=content)
        return llm
    return build


@pytest.fixture
def flow(shopping, wishlist, extraction, reconciler, app_settings):
    return AddItemsFlow(
        shopping=shopping,
        wishlist=wishlist,
        extraction=extraction,
        reconciler=reconciler,
        app_settings=app_settings,
    )


@pytest.fixture
def audio():
    return AudioBlob(data=b"RIFF")


@pytest.mark.asyncio
async def test_voice_add_to_shopping(flow, shopping, extraction, audio, app_settings):
    """Test extracted items are prepended in order with fresh ids."""
    result = await flow.add_from_voice(audio)

    assert result.success
    assert [(i.product, i.quantity, i.price) for i in shopping.items] == [
        ("Desodorante", "2", "45"),
        ("Desodorante", "1", "25"),
    ]
    assert shopping.total() == 115.0
    extraction.extract_items.assert_awaited_once_with(
        audio, app_settings.selected_model, wishlist=False
    )


@pytest.mark.asyncio
async def test_voice_add_to_wishlist(flow, wishlist, extraction, reconciler, audio):
    """Test wishlist adds use the wishlist prompt and never reconcile."""
    extraction.extract_items.return_value = [CandidateItem(product="Servilleta")]
    result = await flow.add_from_voice(audio, target=WISHLIST)
    await flow.drain()

    assert result.success
    assert [i.product for i in wishlist.items] == ["Servilleta"]
    assert wishlist.items[0].price is None
    assert extraction.extract_items.call_args.kwargs["wishlist"] is True
    reconciler.reconcile.assert_not_called()


@pytest.mark.asyncio
async def test_shopping_add_reconciles_wishlist(flow, wishlist, reconciler, audio):
    """Test matching wishlist entries end up hidden after a shopping add."""
    entry = wishlist.add("Desodorantes").data

    result = await flow.add_from_voice(audio)
    await flow.drain()

    assert result.success
    reconciler.reconcile.assert_awaited_once()
    snapshot, added, _ = reconciler.reconcile.call_args.args
    assert [i.id for i in snapshot] == [entry.id]
    assert [i.product for i in added] == ["Desodorante", "Desodorante"]
    assert wishlist.get(entry.id).visible is False


@pytest.mark.asyncio
async def test_no_reconcile_when_auto_hide_off(flow, wishlist, reconciler, app_settings, audio):
    wishlist.add("Desodorantes")
    app_settings.toggle_auto_hide()

    await flow.add_from_voice(audio)
    await flow.drain()

    reconciler.reconcile.assert_not_called()
    assert wishlist.items[0].visible is True


@pytest.mark.asyncio
async def test_no_reconcile_when_wishlist_empty(flow, reconciler, audio):
    await flow.add_from_voice(audio)
    await flow.drain()
    reconciler.reconcile.assert_not_called()


@pytest.mark.asyncio
async def test_reconcile_keeps_edits_made_meanwhile(flow, wishlist, reconciler, audio):
    """Test only changed flags are applied to the live wishlist."""
    entry = wishlist.add("Desodorantes").data

    async def rename_then_hide(snapshot, newly_added, model_id):
        wishlist.update(entry.id, product="Desodorante roll-on")
        return [i.model_copy(update={"visible": False}) for i in snapshot]

    reconciler.reconcile.side_effect = rename_then_hide
    await flow.add_from_voice(audio)
    await flow.drain()

    current = wishlist.get(entry.id)
    assert current.product == "Desodorante roll-on"
    assert current.visible is False


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    ExtractionParseError("Failed to parse the response", suggestions=["Try again"]),
    NetworkError("Could not reach the server"),
])
async def test_extraction_failure_becomes_result(flow, shopping, extraction, audio, error):
    """Test parse and network errors leave the list untouched."""
    extraction.extract_items.side_effect = error
    result = await flow.add_from_voice(audio)

    assert not result.success
    assert result.error == error.message
    assert result.metadata["error_type"] == error.__class__.__name__
    assert len(shopping) == 0


@pytest.mark.asyncio
async def test_missing_credential_propagates(flow, extraction, audio):
    extraction.extract_items.side_effect = MissingCredential("No API key configured")
    with pytest.raises(MissingCredential):
        await flow.add_from_voice(audio)


@pytest.mark.asyncio
async def test_empty_extraction(flow, shopping, extraction, reconciler, wishlist, audio):
    """Test an empty answer adds nothing and skips reconciliation."""
    wishlist.add("Pan")
    extraction.extract_items.return_value = []
    result = await flow.add_from_voice(audio)
    await flow.drain()

    assert result.success
    assert result.data == []
    assert len(shopping) == 0
    reconciler.reconcile.assert_not_called()


@pytest.mark.asyncio
async def test_add_from_text(flow, shopping, extraction):
    result = await flow.add_from_text("323 gramos de tomate a 80 el kilo", target=SHOPPING)
    assert result.success
    assert shopping.items[0].quantity == "0.323"
    assert extraction.extract_items_from_text.call_args.kwargs["wishlist"] is False


@pytest.mark.asyncio
async def test_add_manual_reconciles(flow, shopping, wishlist):
    entry = wishlist.add("Pan").data
    result = await flow.add_manual("Pan", "2", "15")
    await flow.drain()

    assert result.success
    assert shopping.items[0].product == "Pan"
    assert wishlist.get(entry.id).visible is False


@pytest.mark.asyncio
async def test_add_manual_invalid(flow, shopping, reconciler, wishlist):
    wishlist.add("Pan")
    result = await flow.add_manual("Pan", "dos")
    await flow.drain()

    assert not result.success
    assert len(shopping) == 0
    reconciler.reconcile.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_target(flow):
    with pytest.raises(ValueError):
        await flow.add_manual("Pan", target="pantry")


@pytest.mark.asyncio
async def test_failed_reconciliation_does_not_fail_drain(flow, shopping, wishlist, reconciler):
    """Test a crashing background reconciliation is logged and swallowed."""
    entry = wishlist.add("Tomates").data
    reconciler.reconcile.side_effect = TypeError("unhashable type: 'dict'")

    result = await flow.add_manual("Tomate", "1", "10")
    await flow.drain()

    assert result.success
    assert shopping.items[0].product == "Tomate"
    assert wishlist.get(entry.id).visible is True


@pytest.mark.asyncio
async def test_malformed_model_ids_keep_wishlist(shopping, wishlist, app_settings, extraction, llm_with_answer):
    """Test model answers with non-string ids leave the wishlist as it was."""
    from shoplist.ai.reconcile import WishlistReconciler

    entry = wishlist.add("Tomates").data
    flow = AddItemsFlow(
        shopping=shopping,
        wishlist=wishlist,
        extraction=extraction,
        reconciler=WishlistReconciler(llm_with_answer('[{"id": {"x": 1}, "visible": false}]'), use_mock=False),
        app_settings=app_settings,
    )

    result = await flow.add_manual("Tomate", "1", "10")
    await flow.drain()

    assert result.success
    assert wishlist.get(entry.id).visible is True
