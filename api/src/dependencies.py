"""
FastAPI dependency injection for database, repositories, services and
authentication.

Provides injectable dependencies for:
- Settings and the asyncpg pool held on ``app.state``
- Repository instances
- Service instances
- The authenticated user (``X-API-TOKEN`` header lookup)
- Contact search parameters

Tests replace repositories through ``app.dependency_overrides``.
"""

from typing import Optional

import asyncpg
import structlog
from fastapi import Depends, Query, Request

from api.src.config import Settings
from api.src.exceptions import BadRequestError, UnauthorizedError
from api.src.models.contact import SearchContactRequest
from api.src.models.user import UserDB
from api.src.repositories.address_repo import AddressRepository
from api.src.repositories.contact_repo import ContactRepository
from api.src.repositories.user_repo import UserRepository
from api.src.services.address_service import AddressService
from api.src.services.contact_service import ContactService
from api.src.services.user_service import UserService

logger = structlog.get_logger(__name__)


# ============================================================================
# SETTINGS AND DATABASE
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_db_pool(request: Request) -> asyncpg.Pool:
    """
    Get database connection pool.

    Returns:
        asyncpg connection pool

    Raises:
        RuntimeError: If pool is not initialized
    """
    pool = getattr(request.app.state, "db_pool", None)
    if pool is None:
        logger.error("database_pool_not_initialized")
        raise RuntimeError(
            "Database pool not initialized. The application lifespan has not run."
        )
    return pool


# ============================================================================
# REPOSITORY DEPENDENCIES
# ============================================================================


def get_user_repository(pool: asyncpg.Pool = Depends(get_db_pool)) -> UserRepository:
    return UserRepository(pool)


def get_contact_repository(pool: asyncpg.Pool = Depends(get_db_pool)) -> ContactRepository:
    return ContactRepository(pool)


def get_address_repository(pool: asyncpg.Pool = Depends(get_db_pool)) -> AddressRepository:
    return AddressRepository(pool)


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings)
) -> UserService:
    return UserService(user_repo, settings)


def get_contact_service(
    contact_repo: ContactRepository = Depends(get_contact_repository)
) -> ContactService:
    return ContactService(contact_repo)


def get_address_service(
    contact_repo: ContactRepository = Depends(get_contact_repository),
    address_repo: AddressRepository = Depends(get_address_repository)
) -> AddressService:
    return AddressService(contact_repo, address_repo)


# ============================================================================
# AUTHENTICATION DEPENDENCIES
# ============================================================================


async def get_current_user(
    request: Request,
    user_service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings)
) -> UserDB:
    """
    Get current authenticated user from the API token header.

    Binds the user to ``request.state.user`` for downstream handlers.

    Raises:
        UnauthorizedError: If the header is missing or matches no user

    Example:
        @router.get("/contacts")
        async def search(user: UserDB = Depends(get_current_user)):
            ...
    """
    token: Optional[str] = request.headers.get(settings.token_header)

    if not token:
        logger.warning(
            "auth_missing_token",
            path=request.url.path,
            method=request.method
        )
        raise UnauthorizedError()

    user = await user_service.get_current_user(token)

    if not user:
        logger.warning(
            "auth_invalid_token",
            path=request.url.path,
            method=request.method
        )
        raise UnauthorizedError()

    request.state.user = user
    logger.debug("request_authenticated", username=user.username, path=request.url.path)

    return user


# ============================================================================
# PAGINATION DEPENDENCIES
# ============================================================================


async def get_contact_search_params(
    name: Optional[str] = Query(None, description="Substring of first or last name"),
    email: Optional[str] = Query(None, description="Substring of e-mail"),
    phone: Optional[str] = Query(None, description="Substring of phone"),
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    size: Optional[int] = Query(None, ge=1, description="Page size"),
    settings: Settings = Depends(get_app_settings)
) -> SearchContactRequest:
    """
    Get contact search parameters from the query string.

    ``size`` defaults to ``pagination_default_size`` and may not exceed
    ``pagination_max_size``.
    """
    if size is None:
        size = settings.pagination_default_size

    if size > settings.pagination_max_size:
        raise BadRequestError([{
            "field": "size",
            "message": f"Input should be less than or equal to {settings.pagination_max_size}",
        }])

    return SearchContactRequest(
        name=name,
        email=email,
        phone=phone,
        page=page,
        size=size
    )
