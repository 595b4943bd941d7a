"""UI components for shoplist."""
from .add_item import render_add_item
from .chat import render_chat
from .feedback import render_feedback, render_flashes
from .item_list import render_item_list
from .settings_panel import render_settings_panel

__all__ = [
    'render_add_item',
    'render_chat',
    'render_feedback',
    'render_flashes',
    'render_item_list',
    'render_settings_panel'
]
