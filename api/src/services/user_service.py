"""
User service for registration, login and API token management.

Provides:
- Password hashing and verification (passlib + bcrypt)
- Static API token issuing (login) and revocation (logout)
- Token lookup for the authentication check
- Profile retrieval and update
"""

import uuid
from typing import Optional

import structlog
from passlib.context import CryptContext

from api.src.config import Settings
from api.src.exceptions import BadRequestError, UnauthorizedError
from api.src.models.user import (
    LoginUserRequest,
    RegisterUserRequest,
    UpdateUserRequest,
    UserDB,
    UserResponse,
)
from api.src.repositories.user_repo import UserRepository

logger = structlog.get_logger(__name__)


class UserService:
    """Service for user account operations."""

    def __init__(self, user_repo: UserRepository, settings: Settings):
        """
        Initialize user service.

        Args:
            user_repo: User repository
            settings: Application settings
        """
        self.user_repo = user_repo
        self.settings = settings

        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.password_bcrypt_rounds
        )

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password
        """
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password

        Returns:
            True if password matches, False otherwise
        """
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except ValueError as e:
            logger.warning("password_verify_failed", error=str(e))
            return False

    async def register(self, request: RegisterUserRequest) -> UserResponse:
        """
        Register a new user.

        Raises:
            BadRequestError: If the username is taken
        """
        try:
            user = await self.user_repo.create_user(
                username=request.username,
                password_hash=self.hash_password(request.password),
                name=request.name
            )
        except ValueError:
            raise BadRequestError("Username already exists")

        return UserResponse.from_db(user)

    async def login(self, request: LoginUserRequest) -> UserResponse:
        """
        Check credentials and issue a fresh API token.

        Raises:
            UnauthorizedError: If the username is unknown or the password wrong
        """
        user = await self.user_repo.get_user_by_username(request.username)

        if not user:
            logger.warning("login_failed_user_not_found", username=request.username)
            raise UnauthorizedError("Username or password is wrong")

        if not self.verify_password(request.password, user.password):
            logger.warning("login_failed_invalid_password", username=request.username)
            raise UnauthorizedError("Username or password is wrong")

        user = await self.user_repo.set_token(user.username, str(uuid.uuid4()))
        if not user:
            raise UnauthorizedError("Username or password is wrong")

        logger.info("login_success", username=user.username)
        return UserResponse.from_db(user, include_token=True)

    async def get_current_user(self, token: Optional[str]) -> Optional[UserDB]:
        """
        Resolve the user holding ``token``.

        Args:
            token: Value of the token header (may be None or blank)

        Returns:
            User or None if the token is missing or unknown
        """
        if not token or not token.strip():
            return None

        return await self.user_repo.get_user_by_token(token.strip())

    async def get(self, user: UserDB) -> UserResponse:
        return UserResponse.from_db(user)

    async def update(self, user: UserDB, request: UpdateUserRequest) -> UserResponse:
        """Apply the supplied profile fields; the password is re-hashed."""
        password_hash = None
        if request.password is not None:
            password_hash = self.hash_password(request.password)

        updated = await self.user_repo.update_user(
            user.username,
            name=request.name,
            password_hash=password_hash
        )
        if not updated:
            raise UnauthorizedError()

        return UserResponse.from_db(updated)

    async def logout(self, user: UserDB) -> str:
        """Revoke the user's API token."""
        await self.user_repo.set_token(user.username, None)
        logger.info("logout_success", username=user.username)
        return "OK"
