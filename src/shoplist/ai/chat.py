"""Free-form chat with the remote model."""
from typing import List, Optional

from shoplist.config.settings import get_settings
from shoplist.domain.types import ChatMessage
from shoplist.utils.logger import get_logger
from . import mock
from .client import LLMClient
from .errors import MissingCredential, ShopListError
from .prompts import CHAT_SYSTEM_INSTRUCTION

FAILED_REPLY = "Failed to get response."


class ChatSession:
    """One conversation: the history plus the model it is sent to."""

    def __init__(
        self,
        llm: LLMClient,
        model_id: str,
        use_mock: Optional[bool] = None
    ):
        self.llm = llm
        self.model_id = model_id
        self.use_mock = get_settings().USE_MOCK_AI if use_mock is None else use_mock
        self.messages: List[ChatMessage] = []
        self.logger = get_logger(self.__class__.__name__)

    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Send a user message and append the reply.

        Blank input is ignored. A failed call appends a fixed failure reply
        instead of raising, except for a missing key, which the caller turns
        into a prompt.

        Raises:
            MissingCredential: If no key is configured
        """
        if not text or not text.strip():
            return None

        self.messages.append(ChatMessage(role='user', content=text))
        try:
            if self.use_mock:
                content = mock.chat_reply(text)
            else:
                content = await self.llm.chat(
                    self.messages,
                    self.model_id,
                    system=CHAT_SYSTEM_INSTRUCTION
                )
        except MissingCredential:
            self.messages.pop()
            raise
        except ShopListError as e:
            self.logger.error("Error sending message", error=e.message)
            content = FAILED_REPLY
        except Exception:
            self.logger.exception("Error sending message")
            content = FAILED_REPLY

        reply = ChatMessage(role='assistant', content=content)
        self.messages.append(reply)
        return reply

    def reset(self) -> None:
        """Forget the conversation."""
        self.messages = []
