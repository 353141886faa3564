"""
Address router.

Addresses are nested under a contact; the contact must belong to the
authenticated user and the address to the contact, otherwise 404.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.src.dependencies import get_address_service, get_current_user
from api.src.models.address import (
    AddressResponse,
    CreateAddressRequest,
    UpdateAddressRequest,
)
from api.src.models.common import DataResponse, ErrorResponse
from api.src.models.user import UserDB
from api.src.services.address_service import AddressService

router = APIRouter(
    prefix="/contacts/{contact_id}/addresses",
    tags=["Addresses"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    }
)


@router.post("", response_model=DataResponse[AddressResponse], summary="Create Address")
async def create_address(
    contact_id: int,
    request: CreateAddressRequest,
    user: UserDB = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service)
) -> DataResponse[AddressResponse]:
    address = await address_service.create(user, contact_id, request)
    return DataResponse(data=address)


@router.get("", response_model=DataResponse[List[AddressResponse]], summary="List Addresses")
async def list_addresses(
    contact_id: int,
    user: UserDB = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service)
) -> DataResponse[List[AddressResponse]]:
    """All addresses of the contact, unpaginated."""
    addresses = await address_service.list_addresses(user, contact_id)
    return DataResponse(data=addresses)


@router.get("/{address_id}", response_model=DataResponse[AddressResponse], summary="Get Address")
async def get_address(
    contact_id: int,
    address_id: int,
    user: UserDB = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service)
) -> DataResponse[AddressResponse]:
    address = await address_service.get(user, contact_id, address_id)
    return DataResponse(data=address)


@router.put("/{address_id}", response_model=DataResponse[AddressResponse], summary="Update Address")
async def update_address(
    contact_id: int,
    address_id: int,
    request: UpdateAddressRequest,
    user: UserDB = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service)
) -> DataResponse[AddressResponse]:
    address = await address_service.update(user, contact_id, address_id, request)
    return DataResponse(data=address)


@router.delete("/{address_id}", response_model=DataResponse[str], summary="Delete Address")
async def delete_address(
    contact_id: int,
    address_id: int,
    user: UserDB = Depends(get_current_user),
    address_service: AddressService = Depends(get_address_service)
) -> DataResponse[str]:
    result = await address_service.remove(user, contact_id, address_id)
    return DataResponse(data=result)
