"""Remote model integration for shoplist."""
