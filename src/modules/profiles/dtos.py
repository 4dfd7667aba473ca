"""Profile DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONTACT_PATTERN = re.compile(r"^09\d{9}$")


class UpdateProfileDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    contact: str = ""
    house_no: str = Field(default="", max_length=50)
    street: str = Field(default="", max_length=255)
    barangay: str = Field(default="", max_length=255)
    city: str = Field(default="", max_length=128)
    province: str = Field(default="", max_length=128)
    zip_code: str = Field(default="", max_length=16)

    @field_validator("first_name", "last_name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("This field is required.")
        return v.strip()

    @field_validator("contact")
    @classmethod
    def contact_format(cls, v: str) -> str:
        v = (v or "").strip()
        if v and not CONTACT_PATTERN.match(v):
            raise ValueError("Contact number must start with 09 and have 11 digits.")
        return v

    @field_validator("house_no", "street", "barangay", "city", "province", "zip_code")
    @classmethod
    def strip(cls, v: str) -> str:
        return (v or "").strip()


class DeliveryPrefillDTO(BaseModel):
    """Best-effort defaults for the checkout delivery step."""

    model_config = ConfigDict(frozen=True)

    full_name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""
