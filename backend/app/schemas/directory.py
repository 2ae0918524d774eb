"""Pydantic schemas for clients, suppliers, service packages and the business profile."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field, validator

from eventdesk.models import BusinessProfile, MessageTemplates


class ClientSchema(BaseModel):
    id: str
    name: str
    phone: str = ""
    email: str = ""

    class Config:
        from_attributes = True


class ClientCreateRequest(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""


class SupplierSchema(BaseModel):
    id: str
    name: str
    category: str = ""
    phone: str = ""

    class Config:
        from_attributes = True


class SupplierCreateRequest(BaseModel):
    name: str = ""
    category: str = ""
    phone: str = ""


class ServicePackageSchema(BaseModel):
    id: str
    name: str
    description: str = ""
    price: float

    class Config:
        from_attributes = True


class ServicePackageCreateRequest(BaseModel):
    name: str = ""
    description: str = ""
    price: Decimal = Decimal("0")


class MessageTemplatesSchema(BaseModel):
    proposal_send: str = ""
    review_request: str = ""
    timeline_share: str = ""

    class Config:
        from_attributes = True


class BusinessProfileSchema(BaseModel):
    """Whole-profile payload; saving replaces every field."""

    name: str = ""
    category: str = ""
    phone: str = ""
    email: str = ""
    pix_key_type: str = ""
    pix_key: str = ""
    monthly_goal: Decimal | None = Field(default=None, description="Revenue goal for the month")
    contract_terms: str = ""
    bio: str = ""
    instagram: str = ""
    website: str = ""
    message_templates: MessageTemplatesSchema = Field(default_factory=MessageTemplatesSchema)

    class Config:
        from_attributes = True

    def to_domain(self) -> BusinessProfile:
        data = self.model_dump(exclude={"message_templates"})
        return BusinessProfile(**data, message_templates=MessageTemplates(**self.message_templates.model_dump()))


class MonthlyGoalUpdateRequest(BaseModel):
    monthly_goal: Decimal

    @validator("monthly_goal")
    def _goal_not_negative(cls, value: Decimal) -> Decimal:  # noqa: B902
        if value < 0:
            raise ValueError("Monthly goal cannot be negative")
        return value


__all__ = [
    "BusinessProfileSchema",
    "ClientCreateRequest",
    "ClientSchema",
    "MessageTemplatesSchema",
    "MonthlyGoalUpdateRequest",
    "ServicePackageCreateRequest",
    "ServicePackageSchema",
    "SupplierCreateRequest",
    "SupplierSchema",
]
