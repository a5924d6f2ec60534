from pydantic import BaseModel, Field, field_validator

from poisedms.utils.field_validators import (
    ENTITY_ID_MAX_LENGTH,
    NAME_MAX_LENGTH,
    parse_email,
    parse_physical_address,
    parse_telephone,
)


class EntityCreate(BaseModel):
    """Architect, Contractor or Customer details collected before the insert."""

    id: str = Field(..., min_length=1, max_length=ENTITY_ID_MAX_LENGTH, description="Prefixed ID, e.g. ARC101")
    first_name: str = Field(..., max_length=NAME_MAX_LENGTH)
    surname: str = Field(..., max_length=NAME_MAX_LENGTH)
    telephone: str
    email: str
    physical_address: str

    @field_validator("telephone")
    @classmethod
    def check_telephone(cls, value: str) -> str:
        return parse_telephone(value)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return parse_email(value)

    @field_validator("physical_address")
    @classmethod
    def check_physical_address(cls, value: str) -> str:
        return parse_physical_address(value)
