"""Turning spoken or typed requests into candidate items."""
import json
import re
from typing import Any, List, Optional

from shoplist.config.settings import get_settings
from shoplist.domain.types import AudioBlob, CandidateItem, format_amount
from shoplist.utils.logger import get_logger
from . import mock
from .client import LLMClient
from .errors import ExtractionParseError
from .prompts import SHOPPING_EXTRACTION_PROMPT, WISHLIST_EXTRACTION_PROMPT

logger = get_logger(__name__)

CODE_FENCE = re.compile(r"```(?:json)?\n?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences around a model answer."""
    return CODE_FENCE.sub("", text).strip()


def parse_json_array(text: Optional[str]) -> List[Any]:
    """
    Parse a model answer that should be a JSON array.

    Raises:
        ExtractionParseError: If the answer is empty, not JSON, or not an array
    """
    if not text or not text.strip():
        raise ExtractionParseError(
            "No response from the model",
            suggestions=["Try again"]
        )
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionParseError(
            "Failed to parse the response",
            suggestions=["Try again", "Speak a little slower"],
            metadata={'response': text[:500]}
        ) from e
    if not isinstance(parsed, list):
        raise ExtractionParseError(
            "Invalid response format - expected an array",
            suggestions=["Try again"],
            metadata={'response': text[:500]}
        )
    return parsed


def _field_text(value: Any) -> str:
    """Render a JSON field as the string stored on candidates."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return format_amount(value) if value >= 0 else str(value)
    return str(value).strip()


def parse_items_response(text: Optional[str]) -> List[CandidateItem]:
    """
    Turn a model answer into candidate items.

    Elements that are not objects are skipped; missing fields become "".

    Raises:
        ExtractionParseError: If the answer is not a JSON array
    """
    candidates = []
    for element in parse_json_array(text):
        if not isinstance(element, dict):
            logger.warning("Skipping extracted element that is not an object", element=repr(element))
            continue
        candidates.append(CandidateItem(
            product=_field_text(element.get('product')),
            quantity=_field_text(element.get('quantity')),
            price=_field_text(element.get('price')),
        ))
    return candidates


class ExtractionClient:
    """Asks the remote model which items a request mentions."""

    def __init__(
        self,
        llm: LLMClient,
        backend: Optional[str] = None,
        use_mock: Optional[bool] = None
    ):
        settings = get_settings()
        self.llm = llm
        self.backend = backend or settings.EXTRACTION_BACKEND
        self.use_mock = settings.USE_MOCK_AI if use_mock is None else use_mock
        self.logger = get_logger(self.__class__.__name__)

    @staticmethod
    def _prompt(wishlist: bool) -> str:
        return WISHLIST_EXTRACTION_PROMPT if wishlist else SHOPPING_EXTRACTION_PROMPT

    async def extract_items(
        self,
        audio: AudioBlob,
        model_id: str,
        wishlist: bool = False
    ) -> List[CandidateItem]:
        """
        Extract items from a recording.

        Args:
            audio: The recording
            model_id: Remote model to ask
            wishlist: Use the product-only wishlist instructions

        Returns:
            One candidate per array element in the answer

        Raises:
            MissingCredential: If no key is configured
            NetworkError: On any transport or API failure
            ExtractionParseError: If the answer is not a JSON array
        """
        if self.use_mock:
            self.logger.warning("Mock mode cannot listen to audio, returning no items")
            return []

        self.logger.info(
            "Extracting items from audio",
            model=model_id,
            backend=self.backend,
            wishlist=wishlist,
            size=len(audio.data)
        )
        if self.backend == "transcribe":
            transcript = await self.llm.transcribe(audio)
            self.logger.info("Transcribed audio", transcript=transcript)
            response = await self.llm.generate(transcript, model_id, system=self._prompt(wishlist))
        else:
            response = await self.llm.generate(self._prompt(wishlist), model_id, audio=audio)
        return self._parse(response)

    async def extract_items_from_text(
        self,
        text: str,
        model_id: str,
        wishlist: bool = False
    ) -> List[CandidateItem]:
        """
        Extract items from a typed or transcribed request.

        Raises:
            MissingCredential: If no key is configured
            NetworkError: On any transport or API failure
            ExtractionParseError: If the answer is not a JSON array
        """
        if not text or not text.strip():
            return []

        if self.use_mock:
            self.logger.info("Using mock extraction", text=text, mock_mode=True)
            response = mock.extract_wishlist_items(text) if wishlist else mock.extract_shopping_items(text)
        else:
            self.logger.info("Extracting items from text", model=model_id, wishlist=wishlist)
            response = await self.llm.generate(text, model_id, system=self._prompt(wishlist))
        return self._parse(response)

    def _parse(self, response: str) -> List[CandidateItem]:
        try:
            candidates = parse_items_response(response)
        except ExtractionParseError:
            self.logger.exception("Parse error", response=response)
            raise
        self.logger.info("Extracted items", count=len(candidates))
        return candidates
