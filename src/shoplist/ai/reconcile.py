"""Hiding wishlist entries that were just added to the shopping list."""
from typing import Any, Dict, List, Optional

from shoplist.config.settings import get_settings
from shoplist.domain.types import Item
from shoplist.utils.logger import get_logger
from . import mock
from .client import LLMClient
from .errors import ShopListError
from .extraction import parse_json_array
from .prompts import build_reconciliation_prompt


def visibility_from_response(
    response: List[Any],
    wishlist: List[Item],
    logger=None
) -> Dict[str, bool]:
    """
    Read the per-id visibility the model proposes.

    The answer is untrusted: elements that are not objects, ids that are not
    in the wishlist, non-boolean flags and ids given conflicting values are
    all ignored.

    Returns:
        Mapping of wishlist id to proposed visibility
    """
    known_ids = {item.id for item in wishlist}
    proposed: Dict[str, bool] = {}
    conflicting = set()
    for element in response:
        if not isinstance(element, dict):
            continue
        item_id = element.get('id')
        visible = element.get('visible')
        if not isinstance(item_id, str) or item_id not in known_ids:
            continue
        if not isinstance(visible, bool):
            continue
        if item_id in proposed and proposed[item_id] != visible:
            conflicting.add(item_id)
        proposed[item_id] = visible

    for item_id in conflicting:
        del proposed[item_id]

    if logger is not None:
        returned_ids = {
            e.get('id') for e in response
            if isinstance(e, dict) and isinstance(e.get('id'), str)
        }
        if len(response) != len(wishlist) or returned_ids != known_ids:
            logger.warning(
                "Model changed the wishlist shape",
                expected=len(wishlist),
                returned=len(response),
                conflicting=sorted(conflicting)
            )
    return proposed


def apply_visibility(wishlist: List[Item], visibility: Dict[str, bool]) -> List[Item]:
    """Copy of the wishlist with only the visible flags replaced."""
    return [
        item.model_copy(update={'visible': visibility[item.id]}) if item.id in visibility else item
        for item in wishlist
    ]


class WishlistReconciler:
    """Asks the remote model which wishlist entries a shopping add covers.

    Best effort: any failure leaves the wishlist as it was and is only logged.
    """

    def __init__(self, llm: LLMClient, use_mock: Optional[bool] = None):
        settings = get_settings()
        self.llm = llm
        self.use_mock = settings.USE_MOCK_AI if use_mock is None else use_mock
        self.logger = get_logger(self.__class__.__name__)

    async def reconcile(
        self,
        wishlist: List[Item],
        newly_added: List[Item],
        model_id: str
    ) -> List[Item]:
        """
        Return the wishlist with matching entries marked invisible.

        Length, order and every field other than ``visible`` are kept.

        Args:
            wishlist: Current wishlist entries
            newly_added: Items just added to the shopping list
            model_id: Remote model to ask

        Returns:
            The updated wishlist, or the original one on any failure
        """
        if not wishlist or not newly_added:
            return list(wishlist)

        prompt = build_reconciliation_prompt(wishlist, newly_added)
        try:
            if self.use_mock:
                response = mock.reconcile_wishlist(wishlist, newly_added)
            else:
                self.logger.info(
                    "Reconciling wishlist",
                    model=model_id,
                    wishlist=len(wishlist),
                    added=len(newly_added)
                )
                response = await self.llm.generate(prompt, model_id)
            parsed = parse_json_array(response)
            visibility = visibility_from_response(parsed, wishlist, self.logger)
            updated = apply_visibility(wishlist, visibility)
        except ShopListError as e:
            self.logger.error(
                "Wishlist reconciliation failed, keeping wishlist",
                error_type=e.__class__.__name__,
                error=e.message
            )
            return list(wishlist)
        except Exception:
            self.logger.exception("Unexpected error during wishlist reconciliation")
            return list(wishlist)

        hidden = sum(1 for old, new in zip(wishlist, updated) if old.visible and not new.visible)
        self.logger.info("Wishlist reconciled", hidden=hidden)
        return updated
