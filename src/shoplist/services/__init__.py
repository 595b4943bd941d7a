"""Services for shoplist."""
