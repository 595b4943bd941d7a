"""Utility helpers for shoplist."""
