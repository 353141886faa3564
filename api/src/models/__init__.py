"""Data models for the FastAPI service.

This package contains Pydantic models for request/response validation,
repository row models, and the SQLAlchemy table definitions.
"""
