"""
Contact models.

Request schemas carry the validation rules (required names, bounded
lengths, e-mail format); ``ContactDB`` is the row returned by the
repository and ``ContactResponse`` the shape sent to clients.
"""

from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

EMAIL_MAX_LENGTH = 100


class ContactDB(BaseModel):
    """Contact row as stored in the ``contacts`` table."""
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    username: str


class CreateContactRequest(BaseModel):
    """Create contact request schema."""
    first_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="First name"
    )
    last_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Last name"
    )
    email: Optional[str] = Field(
        None,
        max_length=EMAIL_MAX_LENGTH,
        description="E-mail address"
    )
    phone: Optional[str] = Field(
        None,
        max_length=20,
        description="Phone number"
    )

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: Optional[str]) -> Optional[str]:
        """Check the address format; the submitted string is stored as-is."""
        if v is None:
            return v
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"value is not a valid email address: {e}")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "first_name": "edo",
                "last_name": "sibua",
                "email": "edosibua@example.com",
                "phone": "09876577455"
            }
        }
    }


class UpdateContactRequest(CreateContactRequest):
    """Full-record contact update; omitted optional fields are cleared."""


class SearchContactRequest(BaseModel):
    """Contact search filters and paging."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    page: int = Field(1, ge=1)
    size: int = Field(10, ge=1)


class ContactResponse(BaseModel):
    """Contact information response schema."""
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_db(cls, contact: ContactDB) -> "ContactResponse":
        return cls(**contact.model_dump(exclude={"username"}))
