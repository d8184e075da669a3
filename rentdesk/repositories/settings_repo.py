"""
Repository for platform_settings database operations.

Rules:
- Data access MUST be routed through repository layer
- Reads may be served from the redis cache; every write invalidates it
"""
from __future__ import annotations
from typing import Optional
import json
from sqlalchemy import select
from sqlalchemy.orm import Session
from ..domain.sqlalchemy_models import PlatformSetting

ALL_SETTINGS_KEY = "settings:all"


def _cache_key(key: str) -> str:
    return f"settings:{key}"


def get_setting_value(db: Session, key: str, cache=None, ttl: int = 300) -> Optional[str]:
    """
    Get the stored value for a key.

    Args:
        db: Database session
        key: Setting key
        cache: Optional redis client used as read-through cache
        ttl: Cache TTL in seconds

    Returns:
        Stored value or None if the row does not exist
    """
    if cache is not None:
        hit = cache.get(_cache_key(key))
        if hit is not None:
            return hit

    row = db.get(PlatformSetting, key)
    if row is None:
        return None

    if cache is not None:
        cache.setex(_cache_key(key), ttl, row.value)
    return row.value


def get_all_settings(db: Session, cache=None, ttl: int = 300) -> dict[str, str]:
    if cache is not None:
        hit = cache.get(ALL_SETTINGS_KEY)
        if hit is not None:
            return json.loads(hit)

    rows = db.execute(select(PlatformSetting).order_by(PlatformSetting.key)).scalars().all()
    data = {row.key: row.value for row in rows}

    if cache is not None:
        cache.setex(ALL_SETTINGS_KEY, ttl, json.dumps(data))
    return data


def upsert_setting(
    db: Session,
    key: str,
    value: str,
    description: Optional[str] = None,
    cache=None,
) -> PlatformSetting:
    """
    Create or update a setting row.

    Args:
        db: Database session
        key: Setting key
        value: New value
        description: Optional human-readable description
        cache: Optional redis client to invalidate

    Returns:
        The persisted row
    """
    row = db.get(PlatformSetting, key)
    if row is None:
        row = PlatformSetting(key=key, value=value, description=description)
        db.add(row)
    else:
        row.value = value
        if description is not None:
            row.description = description
    db.commit()
    db.refresh(row)

    if cache is not None:
        cache.delete(_cache_key(key), ALL_SETTINGS_KEY)
    return row
