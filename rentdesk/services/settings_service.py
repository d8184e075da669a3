"""
Service layer for platform Settings operations.

Follows Layer 4 rules:
- Data access MUST be routed through repository/service layers
- Keep clean separation: API → service → repository → DB

A database that has not been migrated yet (no platform_settings table) is not
fatal: reads come back empty, writes fail with ConfigurationUnavailableError.
Every other persistence error propagates unchanged.
"""
from __future__ import annotations
from typing import Optional
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session
from ..core.config import settings
from ..core.errors import ConfigurationUnavailableError
from ..core.logger import logger, log_security_event
from ..repositories import settings_repo
from ..schemas.settings import PaymentConfig

PLATFORM_FEE_KEY = "payment.platformFee"
AGENCY_FEE_KEY = "payment.agencyFee"
DEFAULT_PLATFORM_FEE = 2.0
DEFAULT_AGENCY_FEE = 8.0

SETTINGS_TABLE_MISSING = "Settings table not found. Please contact administrator."

_MISSING_TABLE_MARKERS = ("does not exist", "no such table", "doesn't exist")


def is_missing_table(exc: Exception) -> bool:
    """True when a driver error reports that the settings relation is absent."""
    if not isinstance(exc, (ProgrammingError, OperationalError)):
        return False
    message = str(getattr(exc, "orig", None) or exc).lower()
    return any(marker in message for marker in _MISSING_TABLE_MARKERS)


class SettingsStore:
    """
    Key/value settings backed by platform_settings, with an optional redis cache.

    Args:
        db: Database session
        cache: Optional redis client (see core.redis.get_redis)
        ttl: Cache TTL in seconds
    """

    def __init__(self, db: Session, cache=None, ttl: int = settings.SETTINGS_CACHE_TTL):
        self.db = db
        self.cache = cache
        self.ttl = ttl

    def get(self, key: str) -> Optional[str]:
        try:
            return settings_repo.get_setting_value(self.db, key, cache=self.cache, ttl=self.ttl)
        except (ProgrammingError, OperationalError) as exc:
            if not is_missing_table(exc):
                raise
            self.db.rollback()
            logger.warning("Settings table not found, returning no value", extra={"meta": {"key": key}})
            return None

    def get_all(self) -> dict[str, str]:
        try:
            return settings_repo.get_all_settings(self.db, cache=self.cache, ttl=self.ttl)
        except (ProgrammingError, OperationalError) as exc:
            if not is_missing_table(exc):
                raise
            self.db.rollback()
            logger.warning("Settings table not found, returning empty settings")
            return {}

    def set(
        self,
        key: str,
        value: str,
        description: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
    ) -> None:
        """
        Create or update a setting.

        Raises:
            ConfigurationUnavailableError: the settings table does not exist
        """
        try:
            settings_repo.upsert_setting(self.db, key, value, description, cache=self.cache)
        except (ProgrammingError, OperationalError) as exc:
            if not is_missing_table(exc):
                raise
            self.db.rollback()
            log_security_event(
                action="settings_update",
                result="failure",
                user_id=user_id,
                meta={"key": key, "reason": "table_missing"},
                level="error",
            )
            raise ConfigurationUnavailableError(SETTINGS_TABLE_MISSING)

        log_security_event(
            action="settings_update",
            result="success",
            user_id=user_id,
            meta={"key": key},
        )

    def _fee(self, key: str, default: float) -> float:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            value = float(raw)
        except ValueError:
            value = None
        if value is None or value != value or not 0 <= value <= 100:
            logger.warning(
                "Malformed payment setting, using default",
                extra={"meta": {"key": key, "default": default}},
            )
            return default
        return value

    def get_payment_config(self) -> PaymentConfig:
        return PaymentConfig(
            platform_fee=self._fee(PLATFORM_FEE_KEY, DEFAULT_PLATFORM_FEE),
            agency_fee=self._fee(AGENCY_FEE_KEY, DEFAULT_AGENCY_FEE),
        )

    def update_payment_config(self, data: PaymentConfig, *, user_id: Optional[str] = None) -> PaymentConfig:
        """
        Write both fee keys and return the refreshed configuration.

        Range checks (0-100) are enforced by the PaymentConfig schema.
        """
        self.set(PLATFORM_FEE_KEY, str(data.platform_fee), "Platform fee percentage", user_id=user_id)
        self.set(AGENCY_FEE_KEY, str(data.agency_fee), "Agency commission fee percentage", user_id=user_id)
        return self.get_payment_config()
