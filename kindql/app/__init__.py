"""kindql FastAPI application."""
