"""
Contract template catalog endpoints (read-only, any authenticated user).
"""
from __future__ import annotations
from fastapi import APIRouter, Depends
from ...core.auth import Authed, auth_required
from ...schemas.contract_templates import ContractTemplateOut
from ...services import contract_templates

router = APIRouter(prefix="/contract-templates", tags=["contract-templates"])


@router.get("", response_model=list[ContractTemplateOut])
def list_templates(auth: Authed = Depends(auth_required)):
    return contract_templates.list_templates()


@router.get("/type/{template_type}", response_model=list[ContractTemplateOut])
def list_templates_by_type(template_type: str, auth: Authed = Depends(auth_required)):
    """
    Templates of one type.

    Raises:
        ValidationError: 400 when the type is not CTR, ACD or VST
    """
    return contract_templates.templates_by_type(template_type)


@router.get("/{template_id}", response_model=ContractTemplateOut)
def get_template(template_id: str, auth: Authed = Depends(auth_required)):
    return contract_templates.get_template(template_id)
