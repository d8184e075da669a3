"""
Pydantic schemas for Settings endpoints.

Rules:
- ALWAYS use Pydantic models for request/response
- Fee percentages are validated here, before they reach the store
"""
from __future__ import annotations
from typing import Optional
from pydantic import Field
from .common import CamelModel


class SettingUpdate(CamelModel):
    """Request schema for writing one setting."""
    value: str = Field(..., min_length=1, description="Setting value")
    description: Optional[str] = Field(default=None, max_length=255, description="Human-readable description")


class SettingOut(CamelModel):
    key: str
    value: str


class SettingUpdated(CamelModel):
    status: str = "success"
    message: str = "Setting updated successfully"
    key: str
    value: str


class PaymentConfig(CamelModel):
    """Fee percentages applied to rent payments."""
    platform_fee: float = Field(..., ge=0, le=100, description="Platform fee percentage")
    agency_fee: float = Field(..., ge=0, le=100, description="Agency commission percentage")


class PaymentConfigUpdated(CamelModel):
    status: str = "success"
    message: str = "Payment configuration updated successfully"
    config: PaymentConfig
