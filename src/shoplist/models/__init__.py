"""Models package for shoplist."""
from .base import Base
from .entry import KeyValueEntry

__all__ = ['Base', 'KeyValueEntry']
