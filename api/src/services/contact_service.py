"""
Contact service.

Ownership-scoped CRUD and the paginated contact search. Request payloads
arrive already validated by the Pydantic request models.
"""

import math
from typing import List, Tuple

import structlog

from api.src.exceptions import ContactNotFoundError
from api.src.models.common import Paging
from api.src.models.contact import (
    ContactResponse,
    CreateContactRequest,
    SearchContactRequest,
    UpdateContactRequest,
)
from api.src.models.user import UserDB
from api.src.repositories.contact_repo import ContactRepository

logger = structlog.get_logger(__name__)


def total_pages(total: int, size: int) -> int:
    """Number of pages needed for ``total`` rows; 0 when there are none."""
    return math.ceil(total / size) if total > 0 else 0


class ContactService:
    """Service for contact operations."""

    def __init__(self, contact_repo: ContactRepository):
        self.contact_repo = contact_repo

    async def create(self, user: UserDB, request: CreateContactRequest) -> ContactResponse:
        contact = await self.contact_repo.create_contact(
            username=user.username,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone
        )
        return ContactResponse.from_db(contact)

    async def get(self, user: UserDB, contact_id: int) -> ContactResponse:
        """
        Raises:
            ContactNotFoundError: If the contact is missing or not owned by user
        """
        contact = await self.contact_repo.get_contact(user.username, contact_id)
        if not contact:
            raise ContactNotFoundError()
        return ContactResponse.from_db(contact)

    async def update(
        self,
        user: UserDB,
        contact_id: int,
        request: UpdateContactRequest
    ) -> ContactResponse:
        contact = await self.contact_repo.update_contact(
            user.username,
            contact_id,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone
        )
        if not contact:
            raise ContactNotFoundError()
        return ContactResponse.from_db(contact)

    async def remove(self, user: UserDB, contact_id: int) -> str:
        deleted = await self.contact_repo.delete_contact(user.username, contact_id)
        if not deleted:
            raise ContactNotFoundError()
        return "OK"

    async def search(
        self,
        user: UserDB,
        request: SearchContactRequest
    ) -> Tuple[List[ContactResponse], Paging]:
        """
        Search the user's contacts.

        A page past the end yields no rows but still echoes the requested
        page and size.

        Returns:
            Tuple of (contacts on the requested page, paging block)
        """
        filters = {
            "name": request.name,
            "email": request.email,
            "phone": request.phone,
        }

        total = await self.contact_repo.count_contacts(user.username, **filters)
        contacts = await self.contact_repo.search_contacts(
            user.username,
            limit=request.size,
            offset=(request.page - 1) * request.size,
            **filters
        )

        paging = Paging(
            current_page=request.page,
            total_page=total_pages(total, request.size),
            size=request.size
        )

        logger.debug(
            "contact_search",
            username=user.username,
            total=total,
            page=request.page,
            size=request.size
        )

        return [ContactResponse.from_db(contact) for contact in contacts], paging
