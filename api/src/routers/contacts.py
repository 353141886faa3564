"""
Contact router.

Provides REST API endpoints for:
- Contact creation, retrieval, full update and deletion
- Contact search with name/email/phone filters and paging

All endpoints require the ``X-API-TOKEN`` header and only ever see the
authenticated user's contacts.
"""

import structlog
from fastapi import APIRouter, Depends, status

from api.src.dependencies import (
    get_contact_search_params,
    get_contact_service,
    get_current_user,
)
from api.src.models.common import DataResponse, ErrorResponse, PageResponse
from api.src.models.contact import (
    ContactResponse,
    CreateContactRequest,
    SearchContactRequest,
    UpdateContactRequest,
)
from api.src.models.user import UserDB
from api.src.services.contact_service import ContactService

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/contacts",
    tags=["Contacts"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    }
)


@router.post(
    "",
    response_model=DataResponse[ContactResponse],
    status_code=status.HTTP_200_OK,
    summary="Create Contact"
)
async def create_contact(
    request: CreateContactRequest,
    user: UserDB = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service)
) -> DataResponse[ContactResponse]:
    """Create a contact owned by the authenticated user."""
    contact = await contact_service.create(user, request)
    return DataResponse(data=contact)


@router.get(
    "",
    response_model=PageResponse[ContactResponse],
    summary="Search Contacts",
    description="""
    Search the authenticated user's contacts.

    **Query Parameters:**
    - name: substring of first or last name (case-insensitive)
    - email: substring of e-mail (case-insensitive)
    - phone: substring of phone
    - page: page number (default 1)
    - size: page size (default 10)

    Filters combine with AND. A page past the end returns no rows and
    echoes the requested page and size.
    """
)
async def search_contacts(
    search: SearchContactRequest = Depends(get_contact_search_params),
    user: UserDB = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service)
) -> PageResponse[ContactResponse]:
    contacts, paging = await contact_service.search(user, search)
    return PageResponse(data=contacts, paging=paging)


@router.get(
    "/{contact_id}",
    response_model=DataResponse[ContactResponse],
    summary="Get Contact"
)
async def get_contact(
    contact_id: int,
    user: UserDB = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service)
) -> DataResponse[ContactResponse]:
    contact = await contact_service.get(user, contact_id)
    return DataResponse(data=contact)


@router.put(
    "/{contact_id}",
    response_model=DataResponse[ContactResponse],
    summary="Update Contact"
)
async def update_contact(
    contact_id: int,
    request: UpdateContactRequest,
    user: UserDB = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service)
) -> DataResponse[ContactResponse]:
    """Replace every field of the contact; omitted e-mail/phone are cleared."""
    contact = await contact_service.update(user, contact_id, request)
    return DataResponse(data=contact)


@router.delete(
    "/{contact_id}",
    response_model=DataResponse[str],
    summary="Delete Contact"
)
async def delete_contact(
    contact_id: int,
    user: UserDB = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service)
) -> DataResponse[str]:
    """Delete the contact together with its addresses."""
    result = await contact_service.remove(user, contact_id)
    return DataResponse(data=result)
