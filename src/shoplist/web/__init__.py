"""Streamlit view for shoplist."""
