"""Local library catalog web application."""
