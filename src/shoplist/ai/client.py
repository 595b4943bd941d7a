"""Remote language model client."""
import asyncio
from typing import Any, Callable, Dict, List, Optional
from openai import (
    AsyncOpenAI,
    APIError as OpenAIAPIError,
    APIConnectionError,
    APITimeoutError,
    AuthenticationError,
    RateLimitError,
)
from openai.types.chat import ChatCompletionMessageParam

from shoplist.config.settings import AVAILABLE_MODELS, LLMSettings, get_llm_settings
from shoplist.domain.types import AudioBlob, ChatMessage
from shoplist.services.credentials import Credentials
from shoplist.utils.logger import get_logger
from .errors import NetworkError


def supports_thinking_config(model: str) -> bool:
    """Whether the model accepts a thinking budget."""
    return not model.startswith('gemini-2.0') and not model.startswith('gemma')


class LLMClient:
    """Thin wrapper around the OpenAI-compatible chat and audio endpoints.

    Every call is a single request: no retries, and the timeout is the SDK
    default unless configured.
    """

    def __init__(
        self,
        credentials: Credentials,
        settings: Optional[LLMSettings] = None,
        client_factory: Callable[..., AsyncOpenAI] = AsyncOpenAI
    ):
        self.credentials = credentials
        self.settings = settings or get_llm_settings()
        self.logger = get_logger(self.__class__.__name__)
        self._client_factory = client_factory
        self._client: Optional[AsyncOpenAI] = None
        self._client_key: Optional[str] = None
        self._client_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def client(self) -> AsyncOpenAI:
        """SDK client for the current key and event loop, rebuilt when either changes.

        Raises:
            MissingCredential: If no key is configured
        """
        api_key = self.credentials.require()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if self._client is None or self._client_key != api_key or self._client_loop is not loop:
            kwargs: Dict[str, Any] = {
                'api_key': api_key,
                'base_url': self.settings.BASE_URL,
                'max_retries': 0,
            }
            if self.settings.TIMEOUT is not None:
                kwargs['timeout'] = self.settings.TIMEOUT
            self._client = self._client_factory(**kwargs)
            self._client_key = api_key
            self._client_loop = loop
        return self._client

    def _request_options(self, model: str) -> Dict[str, Any]:
        if model not in AVAILABLE_MODELS:
            self.logger.warning("Model is not in the known list", model=model)
        options: Dict[str, Any] = {'temperature': self.settings.TEMPERATURE}
        if supports_thinking_config(model):
            # Thinking budget 0
            options['reasoning_effort'] = 'none'
        return options

    def _translate_error(self, e: OpenAIAPIError) -> NetworkError:
        """Map SDK errors to the single network error type."""
        self.logger.exception("Remote model call failed")
        if isinstance(e, RateLimitError):
            return NetworkError(
                "Too many requests, try again in a few seconds",
                suggestions=["Wait a moment and try again"],
                metadata={'status': 429}
            )
        if isinstance(e, APITimeoutError):
            return NetworkError(
                "The server did not respond in time",
                suggestions=["Try again", "Check your internet connection"]
            )
        if isinstance(e, AuthenticationError):
            return NetworkError(
                "The API key was rejected",
                suggestions=["Check the API key in settings"],
                metadata={'status': 401}
            )
        if isinstance(e, APIConnectionError):
            return NetworkError(
                "Could not reach the server",
                suggestions=["Check your internet connection"]
            )
        return NetworkError(
            "Error talking to the server",
            suggestions=["Try again in a few seconds"],
            metadata={'status': getattr(e, 'status_code', None)}
        )

    async def _complete(self, model: str, messages: List[ChatCompletionMessageParam]) -> str:
        client = self.client
        self.logger.info("Calling remote model", model=model, messages=len(messages))
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=messages,
                **self._request_options(model)
            )
        except OpenAIAPIError as e:
            raise self._translate_error(e) from e

        if not response.choices:
            raise NetworkError("The server returned no answer", suggestions=["Try again"])
        content = response.choices[0].message.content or ""
        self.logger.debug("Remote model answered", model=model, length=len(content))
        return content

    async def generate(
        self,
        prompt: str,
        model: str,
        audio: Optional[AudioBlob] = None,
        system: Optional[str] = None
    ) -> str:
        """
        Send one user message made of the prompt text and optional audio.

        Args:
            prompt: Text part of the user message
            model: Remote model id
            audio: Audio inlined after the text
            system: Optional system instruction

        Returns:
            The model's text answer

        Raises:
            MissingCredential: If no key is configured
            NetworkError: On any transport or API failure
        """
        messages: List[ChatCompletionMessageParam] = []
        if system:
            messages.append({'role': 'system', 'content': system})
        if audio is None:
            messages.append({'role': 'user', 'content': prompt})
        else:
            messages.append({
                'role': 'user',
                'content': [
                    {'type': 'text', 'text': prompt},
                    {
                        'type': 'input_audio',
                        'input_audio': {'data': audio.to_base64(), 'format': audio.format}
                    },
                ]
            })
        return await self._complete(model, messages)

    async def chat(
        self,
        history: List[ChatMessage],
        model: str,
        system: Optional[str] = None
    ) -> str:
        """Send a whole conversation and return the assistant's reply."""
        messages: List[ChatCompletionMessageParam] = []
        if system:
            messages.append({'role': 'system', 'content': system})
        messages.extend({'role': m.role, 'content': m.content} for m in history)
        return await self._complete(model, messages)

    async def transcribe(self, audio: AudioBlob) -> str:
        """
        Upload audio and return its transcript.

        Raises:
            MissingCredential: If no key is configured
            NetworkError: On any transport or API failure
        """
        client = self.client
        self.logger.info(
            "Transcribing audio",
            model=self.settings.TRANSCRIPTION_MODEL,
            size=len(audio.data)
        )
        try:
            transcription = await client.audio.transcriptions.create(
                model=self.settings.TRANSCRIPTION_MODEL,
                file=(f"recording.{audio.format}", audio.data, audio.mime_type),
            )
        except OpenAIAPIError as e:
            raise self._translate_error(e) from e
        return transcription.text or ""
