"""FastAPI service for contact management.

This package provides REST API endpoints for users to manage their
contacts and each contact's addresses.
"""

__version__ = "1.0.0"
