"""Tests for screen switching."""
import pytest
from unittest.mock import Mock

from shoplist.services.screens import LLM_CHAT, SHOPPING_LIST, WISHLIST, ScreenController


@pytest.fixture
def dismiss():
    return Mock()


@pytest.fixture
def screens(dismiss):
    return ScreenController(chat_enabled=True, dismiss_keyboard=dismiss, swipe_threshold=50)


def test_screen_order():
    """Test the chat screen only exists when enabled."""
    assert ScreenController(chat_enabled=False).screens == [SHOPPING_LIST, WISHLIST]
    assert ScreenController(chat_enabled=True).screens == [SHOPPING_LIST, WISHLIST, LLM_CHAT]


def test_starts_on_shopping_list(screens):
    assert screens.active == SHOPPING_LIST


def test_next_clamps_at_end(screens):
    """Test cycling forward stops at the last screen."""
    assert screens.next() == WISHLIST
    assert screens.next() == LLM_CHAT
    assert screens.next() == LLM_CHAT


def test_previous_clamps_at_start(screens):
    """Test cycling back stops at the first screen."""
    assert screens.previous() == SHOPPING_LIST
    screens.select(LLM_CHAT)
    assert screens.previous() == WISHLIST


def test_select_unknown_screen():
    """Test selecting a disabled screen fails."""
    controller = ScreenController(chat_enabled=False)
    with pytest.raises(ValueError):
        controller.select(LLM_CHAT)


@pytest.mark.parametrize("dx,dy,expected", [
    (-80, 10, WISHLIST),       # left swipe moves forward
    (80, 10, SHOPPING_LIST),   # right swipe at the start stays put
    (-40, 0, SHOPPING_LIST),   # too short
    (-80, 120, SHOPPING_LIST), # mostly vertical
])
def test_swipe(screens, dx, dy, expected):
    """Test swipe gestures."""
    assert screens.on_swipe(dx, dy) == expected


def test_swipe_back(screens):
    """Test a right swipe goes to the previous screen."""
    screens.select(WISHLIST)
    assert screens.on_swipe(60, 0) == SHOPPING_LIST


def test_keyboard_dismissed_on_every_switch(screens, dismiss):
    """Test every switch and backgrounding hides the keyboard."""
    screens.next()
    screens.previous()
    screens.previous()
    screens.select(WISHLIST)
    screens.on_background()
    assert dismiss.call_count == 5
