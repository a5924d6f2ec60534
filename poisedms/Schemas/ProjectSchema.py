from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from poisedms.utils.field_validators import (
    BUILDING_TYPE_MAX_LENGTH,
    ENTITY_ID_MAX_LENGTH,
    ERF_MAX_LENGTH,
    PROJECT_NAME_MAX_LENGTH,
    PROJECT_NUMBER_MAX_LENGTH,
    parse_erf_number,
    parse_physical_address,
    parse_project_number,
)


class ProjectCreate(BaseModel):
    project_number: str = Field(..., max_length=PROJECT_NUMBER_MAX_LENGTH)
    project_name: str = Field(..., min_length=1, max_length=PROJECT_NAME_MAX_LENGTH)
    deadline: date
    building_type: str = Field("", max_length=BUILDING_TYPE_MAX_LENGTH)
    physical_address: str
    erf_number: str = Field(..., max_length=ERF_MAX_LENGTH)
    total_fee: Decimal = Field(..., ge=0, description="Total fee in rand")
    total_paid: Decimal = Field(..., ge=0, description="Amount paid so far in rand")
    architect_id: str = Field(..., max_length=ENTITY_ID_MAX_LENGTH)
    contractor_id: str = Field(..., max_length=ENTITY_ID_MAX_LENGTH)
    customer_id: str = Field(..., max_length=ENTITY_ID_MAX_LENGTH)

    @field_validator("project_number")
    @classmethod
    def check_project_number(cls, value: str) -> str:
        return parse_project_number(value)

    @field_validator("deadline")
    @classmethod
    def check_deadline(cls, value: date) -> date:
        if value <= date.today():
            raise ValueError("Deadline must be after today")
        return value

    @field_validator("physical_address")
    @classmethod
    def check_physical_address(cls, value: str) -> str:
        return parse_physical_address(value)

    @field_validator("erf_number")
    @classmethod
    def check_erf_number(cls, value: str) -> str:
        return parse_erf_number(value)

    @model_validator(mode="after")
    def check_paid_within_fee(self):
        if self.total_paid > self.total_fee:
            raise ValueError("Total paid cannot exceed the total fee")
        return self


class ProjectUpdate(BaseModel):
    project_name: str = Field(..., min_length=1, max_length=PROJECT_NAME_MAX_LENGTH)
    deadline: date
    total_paid: Decimal = Field(..., ge=0)


def validation_message(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one line for the terminal."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
        for err in error.errors()
    )
