from __future__ import annotations
from enum import Enum


class UserRole(str, Enum):
    CEO = "CEO"
    ADMIN = "ADMIN"
    AGENCY_ADMIN = "AGENCY_ADMIN"
    AGENCY_MANAGER = "AGENCY_MANAGER"
    BROKER = "BROKER"
    PROPRIETARIO = "PROPRIETARIO"
    INDEPENDENT_OWNER = "INDEPENDENT_OWNER"
    INQUILINO = "INQUILINO"
    BUILDING_MANAGER = "BUILDING_MANAGER"
    LEGAL_AUDITOR = "LEGAL_AUDITOR"
    REPRESENTATIVE = "REPRESENTATIVE"
    API_CLIENT = "API_CLIENT"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INVITED = "INVITED"
    SUSPENDED = "SUSPENDED"


class TemplateType(str, Enum):
    CTR = "CTR"  # lease contract
    ACD = "ACD"  # agreement
    VST = "VST"  # inspection


PLATFORM_ROLES = frozenset({UserRole.CEO, UserRole.ADMIN})
OWNER_ROLES = frozenset({UserRole.PROPRIETARIO, UserRole.INDEPENDENT_OWNER})
