"""Tests for the chat session."""
import pytest

from shoplist.ai.chat import FAILED_REPLY, ChatSession
from shoplist.ai.errors import MissingCredential, NetworkError
from shoplist.ai.prompts import CHAT_SYSTEM_INSTRUCTION


@pytest.fixture
def chat(llm):
    return ChatSession(llm, "gemini-2.5-flash", use_mock=False)


@pytest.mark.asyncio
async def test_send_appends_reply(chat, mock_openai, respond):
    """Test a message and its reply are kept in order."""
    respond("Hola 🙂")
    reply = await chat.send("hola")

    assert reply.role == "assistant"
    assert reply.content == "Hola 🙂"
    assert [(m.role, m.content) for m in chat.messages] == [
        ("user", "hola"),
        ("assistant", "Hola 🙂"),
    ]
    messages = mock_openai.chat.completions.create.call_args.kwargs["messages"]
    assert messages[0] == {"role": "system", "content": CHAT_SYSTEM_INSTRUCTION}


@pytest.mark.asyncio
async def test_history_is_sent(chat, mock_openai, respond):
    respond("first")
    await chat.send("one")
    respond("second")
    await chat.send("two")
    messages = mock_openai.chat.completions.create.call_args.kwargs["messages"]
    assert [m["content"] for m in messages[1:]] == ["one", "first", "two"]


@pytest.mark.asyncio
async def test_blank_message_ignored(chat, mock_openai):
    assert await chat.send("   ") is None
    assert chat.messages == []
    mock_openai.chat.completions.create.assert_not_called()


@pytest.mark.asyncio
async def test_failure_appends_fixed_reply(chat, mock_openai):
    """Test a failed call shows the failure reply instead of raising."""
    mock_openai.chat.completions.create.side_effect = NetworkError("down")
    reply = await chat.send("hola")
    assert reply.content == FAILED_REPLY == "Failed to get response."
    assert len(chat.messages) == 2


@pytest.mark.asyncio
async def test_missing_key_raises_and_drops_message(storage, llm_settings, client_factory):
    from shoplist.ai.client import LLMClient
    from shoplist.services.credentials import Credentials

    creds = Credentials(storage, env_key="")
    creds.load()
    chat = ChatSession(
        LLMClient(creds, settings=llm_settings, client_factory=client_factory),
        "gemini-2.5-flash",
        use_mock=False
    )
    with pytest.raises(MissingCredential):
        await chat.send("hola")
    assert chat.messages == []


@pytest.mark.asyncio
async def test_mock_mode_and_reset(llm, mock_openai):
    chat = ChatSession(llm, "gemini-2.5-flash", use_mock=True)
    reply = await chat.send("hola")
    assert "hola" in reply.content
    mock_openai.chat.completions.create.assert_not_called()
    chat.reset()
    assert chat.messages == []
