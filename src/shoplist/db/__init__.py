"""Database access for shoplist."""
