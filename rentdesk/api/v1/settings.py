"""
Platform settings endpoints.

Follows Layer 2, Layer 3, and Layer 4 rules:
- Payment config read → any authenticated user
- Payment config write → CEO / ADMIN / AGENCY_ADMIN
- Raw key/value access → CEO / ADMIN
- ALWAYS use Pydantic models for request/response
"""
from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ...core.auth import Authed, auth_required
from ...core.db import get_session
from ...core.errors import NotFoundError
from ...core.redis import get_redis
from ...core.roles import PAYMENT_CONFIG_ROLES, SETTINGS_ADMIN_ROLES, require_roles
from ...schemas.settings import (
    PaymentConfig, PaymentConfigUpdated, SettingOut, SettingUpdate, SettingUpdated,
)
from ...services.settings_service import SettingsStore

router = APIRouter(prefix="/settings", tags=["settings"])


def get_settings_store(db: Session = Depends(get_session)) -> SettingsStore:
    """FastAPI dependency building a SettingsStore for the request."""
    return SettingsStore(db, cache=get_redis())


@router.get("/payment-config", response_model=PaymentConfig)
def get_payment_config(
    auth: Authed = Depends(auth_required),
    store: SettingsStore = Depends(get_settings_store),
) -> PaymentConfig:
    """
    Get platform and agency fee percentages.

    Missing keys (or a missing settings table) yield the defaults.
    """
    return store.get_payment_config()


@router.put("/payment-config", response_model=PaymentConfigUpdated)
def update_payment_config(
    data: PaymentConfig,
    auth: Authed = Depends(require_roles(*PAYMENT_CONFIG_ROLES)),
    store: SettingsStore = Depends(get_settings_store),
) -> PaymentConfigUpdated:
    """
    Update fee percentages (each 0-100).

    Raises:
        ConfigurationUnavailableError: 503 when the settings table is missing
    """
    config = store.update_payment_config(data, user_id=auth.user_id)
    return PaymentConfigUpdated(config=config)


@router.get("", response_model=dict[str, str])
def list_settings(
    auth: Authed = Depends(require_roles(*SETTINGS_ADMIN_ROLES)),
    store: SettingsStore = Depends(get_settings_store),
) -> dict[str, str]:
    return store.get_all()


@router.get("/{key}", response_model=SettingOut)
def get_setting(
    key: str,
    auth: Authed = Depends(require_roles(*SETTINGS_ADMIN_ROLES)),
    store: SettingsStore = Depends(get_settings_store),
) -> SettingOut:
    value = store.get(key)
    if value is None:
        raise NotFoundError("Setting not found", meta={"key": key})
    return SettingOut(key=key, value=value)


@router.put("/{key}", response_model=SettingUpdated)
def update_setting(
    key: str,
    data: SettingUpdate,
    auth: Authed = Depends(require_roles(*SETTINGS_ADMIN_ROLES)),
    store: SettingsStore = Depends(get_settings_store),
) -> SettingUpdated:
    store.set(key, data.value, data.description, user_id=auth.user_id)
    return SettingUpdated(key=key, value=data.value)
