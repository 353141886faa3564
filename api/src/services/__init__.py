"""Business logic services.

This package contains service classes that implement business logic,
enforce the user→contact→address ownership chain, and provide high-level
functionality to API endpoints.
"""
