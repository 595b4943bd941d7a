"""Fixtures for remote model tests."""
import httpx
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

from shoplist.ai.client import LLMClient
from shoplist.ai.extraction import ExtractionClient
from shoplist.ai.reconcile import WishlistReconciler
from shoplist.config.settings import LLMSettings


def completion(content):
    """Build an object shaped like a chat completion."""
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_request():
    return httpx.Request("POST", "https://example.test/v1/chat/completions")


@pytest.fixture
def mock_openai():
    """Mock AsyncOpenAI client."""
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=completion("[]"))
    client.audio.transcriptions.create = AsyncMock(
        return_value=SimpleNamespace(text="2 desodorantes de 45 pesos")
    )
    return client


@pytest.fixture
def respond(mock_openai):
    """Set the text of the next chat completion."""
    def _respond(content):
        mock_openai.chat.completions.create.return_value = completion(content)
    return _respond


@pytest.fixture
def client_factory(mock_openai):
    """Factory handing out the mock client."""
    return Mock(return_value=mock_openai)


@pytest.fixture
def llm_settings():
    return LLMSettings(API_KEY=None, TEMPERATURE=0.0, TIMEOUT=None)


@pytest.fixture
def llm(credentials, llm_settings, client_factory):
    """LLM client backed by the mock SDK client."""
    return LLMClient(credentials, settings=llm_settings, client_factory=client_factory)


@pytest.fixture
def extraction(llm):
    return ExtractionClient(llm, backend="inline_audio", use_mock=False)


@pytest.fixture
def reconciler(llm):
    return WishlistReconciler(llm, use_mock=False)
