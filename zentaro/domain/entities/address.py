"""Delivery address entity models."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from zentaro.core.constants import (
    ADDRESS_LINE_MAX,
    ADDRESS_LINE_MIN,
    CITY_MAX,
    CITY_MIN,
    FULL_NAME_MAX,
    FULL_NAME_MIN,
    PHONE_MAX,
    PHONE_MIN,
    POSTAL_CODE_MAX,
    POSTAL_CODE_MIN,
    SUPPORTED_COUNTRY,
)
from zentaro.core.exceptions import ValidationException


class AddressCreate(BaseModel):
    """Address form input, validated before any write."""

    label: str = Field(..., min_length=1, description="Home / Work / Other or free text")
    full_name: str = Field(..., min_length=FULL_NAME_MIN, max_length=FULL_NAME_MAX)
    phone_number: str = Field(..., min_length=PHONE_MIN, max_length=PHONE_MAX)
    address_line1: str = Field(..., min_length=ADDRESS_LINE_MIN, max_length=ADDRESS_LINE_MAX)
    address_line2: Optional[str] = Field(None, max_length=ADDRESS_LINE_MAX)
    city: str = Field(..., min_length=CITY_MIN, max_length=CITY_MAX)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=POSTAL_CODE_MIN, max_length=POSTAL_CODE_MAX)
    country: str = Field(SUPPORTED_COUNTRY, min_length=1)
    is_default: bool = False

    class Config:
        """Pydantic config."""

        str_strip_whitespace = True

    @field_validator("address_line2", mode="before")
    @classmethod
    def blank_line2_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def parse(cls, fields: dict[str, Any]) -> AddressCreate:
        """Validate raw form fields.

        Raises:
            ValidationException: with one message per invalid field
        """
        try:
            return cls.model_validate(fields)
        except ValidationError as exc:
            errors: dict[str, str] = {}
            for error in exc.errors():
                field_name = ".".join(str(part) for part in error.get("loc", ())) or "address"
                errors.setdefault(field_name, error.get("msg", "Invalid value"))
            raise ValidationException("Invalid address", errors) from exc


class Address(AddressCreate):
    """Stored address row."""

    id: str = Field(..., description="Address identifier")
    user_id: str = Field(..., description="Owner identity")
    created_at: Optional[datetime] = None

    class Config:
        """Pydantic config."""

        from_attributes = True
        str_strip_whitespace = True

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return str(v) if v is not None else v

    @field_validator("is_default", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return bool(v)

    def is_in_country(self, country: str) -> bool:
        return self.country.strip().lower() == country.strip().lower()
