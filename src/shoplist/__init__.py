"""shoplist - shopping list and wishlist with voice entry."""

__version__ = "0.1.0"
