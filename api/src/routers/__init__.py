"""API routers for users, contacts and addresses."""

from api.src.routers import addresses, contacts, users

__all__ = ["addresses", "contacts", "users"]
