"""Buyer profile: contact data, a structured home address, and the
delivery details used at the last successful checkout."""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class UserProfile(BaseModel):
    user_id = models.CharField(max_length=128, unique=True)
    first_name = models.CharField(max_length=100, blank=True, default="")
    last_name = models.CharField(max_length=100, blank=True, default="")
    contact = models.CharField(max_length=11, blank=True, default="")

    house_no = models.CharField(max_length=50, blank=True, default="")
    street = models.CharField(max_length=255, blank=True, default="")
    barangay = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=128, blank=True, default="")
    province = models.CharField(max_length=128, blank=True, default="")
    zip_code = models.CharField(max_length=16, blank=True, default="")

    last_delivery = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "user_profiles"

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p).strip()

    @property
    def has_address(self) -> bool:
        return any(
            (self.house_no, self.street, self.barangay, self.city, self.province, self.zip_code)
        )

    def formatted_address(self) -> str:
        """``houseNo, street, Brgy. X, city, province, zip`` without empty parts."""
        parts = [
            self.house_no,
            self.street,
            f"Brgy. {self.barangay}" if self.barangay else "",
            self.city,
            self.province,
            self.zip_code,
        ]
        return ", ".join(p.strip() for p in parts if p and p.strip())

    def __str__(self) -> str:
        return self.full_name or self.user_id
