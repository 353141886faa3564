"""
Address service.

Every operation first resolves the user→contact link; only then is the
address looked up under that contact.
"""

from typing import List

import structlog

from api.src.exceptions import AddressNotFoundError, ContactNotFoundError
from api.src.models.address import (
    AddressResponse,
    CreateAddressRequest,
    UpdateAddressRequest,
)
from api.src.models.contact import ContactDB
from api.src.models.user import UserDB
from api.src.repositories.address_repo import AddressRepository
from api.src.repositories.contact_repo import ContactRepository

logger = structlog.get_logger(__name__)


class AddressService:
    """Service for address operations."""

    def __init__(self, contact_repo: ContactRepository, address_repo: AddressRepository):
        self.contact_repo = contact_repo
        self.address_repo = address_repo

    async def _check_contact(self, user: UserDB, contact_id: int) -> ContactDB:
        contact = await self.contact_repo.get_contact(user.username, contact_id)
        if not contact:
            logger.warning(
                "address_contact_not_found",
                username=user.username,
                contact_id=contact_id
            )
            raise ContactNotFoundError()
        return contact

    async def create(
        self,
        user: UserDB,
        contact_id: int,
        request: CreateAddressRequest
    ) -> AddressResponse:
        contact = await self._check_contact(user, contact_id)
        address = await self.address_repo.create_address(
            contact.id,
            street=request.street,
            city=request.city,
            province=request.province,
            country=request.country,
            postal_code=request.postal_code
        )
        return AddressResponse.from_db(address)

    async def get(self, user: UserDB, contact_id: int, address_id: int) -> AddressResponse:
        contact = await self._check_contact(user, contact_id)
        address = await self.address_repo.get_address(contact.id, address_id)
        if not address:
            raise AddressNotFoundError()
        return AddressResponse.from_db(address)

    async def update(
        self,
        user: UserDB,
        contact_id: int,
        address_id: int,
        request: UpdateAddressRequest
    ) -> AddressResponse:
        contact = await self._check_contact(user, contact_id)
        address = await self.address_repo.update_address(
            contact.id,
            address_id,
            street=request.street,
            city=request.city,
            province=request.province,
            country=request.country,
            postal_code=request.postal_code
        )
        if not address:
            raise AddressNotFoundError()
        return AddressResponse.from_db(address)

    async def remove(self, user: UserDB, contact_id: int, address_id: int) -> str:
        contact = await self._check_contact(user, contact_id)
        deleted = await self.address_repo.delete_address(contact.id, address_id)
        if not deleted:
            raise AddressNotFoundError()
        return "OK"

    async def list_addresses(self, user: UserDB, contact_id: int) -> List[AddressResponse]:
        contact = await self._check_contact(user, contact_id)
        addresses = await self.address_repo.list_addresses(contact.id)
        return [AddressResponse.from_db(address) for address in addresses]
