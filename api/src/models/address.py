"""Address models."""

from pydantic import BaseModel, Field


class AddressDB(BaseModel):
    """Address row as stored in the ``addresses`` table."""
    id: int
    street: str
    city: str
    province: str
    country: str
    postal_code: str
    contact_id: int


class CreateAddressRequest(BaseModel):
    """Create address request schema. All fields are required."""
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    province: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=10)

    model_config = {
        "json_schema_extra": {
            "example": {
                "street": "Jl. Jendral Sudirman",
                "city": "Yogyakarta",
                "province": "D.I. Yogyakarta",
                "country": "Indonesia",
                "postal_code": "97762"
            }
        }
    }


class UpdateAddressRequest(CreateAddressRequest):
    """Full-record address update."""


class AddressResponse(BaseModel):
    """Address information response schema."""
    id: int
    street: str
    city: str
    province: str
    country: str
    postal_code: str

    @classmethod
    def from_db(cls, address: AddressDB) -> "AddressResponse":
        return cls(**address.model_dump(exclude={"contact_id"}))
