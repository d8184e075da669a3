from __future__ import annotations
from .common import CamelModel
from ..domain.models import TemplateType


class ContractTemplateOut(CamelModel):
    """Document template; placeholders in content use [[variable]]."""
    id: str
    type: TemplateType
    name: str
    description: str
    content: str
    variables: list[str]
