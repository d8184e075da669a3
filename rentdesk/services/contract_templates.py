"""
Static catalog of contract document templates.

Templates are immutable and never persisted. Placeholders use the
`[[variable]]` syntax and every placeholder is listed in `variables`.
"""
from __future__ import annotations
from dataclasses import dataclass
from ..core.errors import NotFoundError, ValidationError
from ..domain.models import TemplateType


@dataclass(frozen=True)
class ContractTemplate:
    id: str
    type: TemplateType
    name: str
    description: str
    content: str
    variables: tuple[str, ...]


_LEASE_PARTIES = (
    "LESSOR: [[owner_name]], document [[owner_document]], address [[owner_address]].\n"
    "LESSEE: [[tenant_name]], document [[tenant_document]], address [[tenant_address]].\n"
)

TEMPLATES: tuple[ContractTemplate, ...] = (
    ContractTemplate(
        id="ctr-residential-standard",
        type=TemplateType.CTR,
        name="Residential lease contract",
        description="Standard residential lease with a fixed term and monthly rent.",
        content=(
            "RESIDENTIAL LEASE CONTRACT\n\n"
            + _LEASE_PARTIES
            + "PROPERTY: [[property_address]].\n"
            "TERM: [[term_months]] months starting on [[start_date]].\n"
            "RENT: [[rent_amount]] per month, due on day [[due_day]].\n"
            "ADJUSTMENT: yearly by [[adjustment_index]].\n"
            "DEPOSIT: [[deposit_amount]].\n"
        ),
        variables=(
            "owner_name", "owner_document", "owner_address",
            "tenant_name", "tenant_document", "tenant_address",
            "property_address", "term_months", "start_date",
            "rent_amount", "due_day", "adjustment_index", "deposit_amount",
        ),
    ),
    ContractTemplate(
        id="ctr-commercial-standard",
        type=TemplateType.CTR,
        name="Commercial lease contract",
        description="Lease for commercial premises, with permitted business use.",
        content=(
            "COMMERCIAL LEASE CONTRACT\n\n"
            + _LEASE_PARTIES
            + "PROPERTY: [[property_address]].\n"
            "PERMITTED USE: [[business_activity]].\n"
            "TERM: [[term_months]] months starting on [[start_date]].\n"
            "RENT: [[rent_amount]] per month, due on day [[due_day]].\n"
        ),
        variables=(
            "owner_name", "owner_document", "owner_address",
            "tenant_name", "tenant_document", "tenant_address",
            "property_address", "business_activity", "term_months",
            "start_date", "rent_amount", "due_day",
        ),
    ),
    ContractTemplate(
        id="acd-debt-settlement",
        type=TemplateType.ACD,
        name="Debt settlement agreement",
        description="Instalment agreement for overdue rent.",
        content=(
            "DEBT SETTLEMENT AGREEMENT\n\n"
            "CREDITOR: [[owner_name]].\n"
            "DEBTOR: [[tenant_name]], document [[tenant_document]].\n"
            "OUTSTANDING AMOUNT: [[debt_amount]] related to [[property_address]].\n"
            "PAYMENT: [[installments]] instalments of [[installment_amount]], first due on [[first_due_date]].\n"
        ),
        variables=(
            "owner_name", "tenant_name", "tenant_document", "debt_amount",
            "property_address", "installments", "installment_amount", "first_due_date",
        ),
    ),
    ContractTemplate(
        id="acd-early-termination",
        type=TemplateType.ACD,
        name="Early termination agreement",
        description="Mutual agreement to end a lease before its term.",
        content=(
            "EARLY TERMINATION AGREEMENT\n\n"
            + _LEASE_PARTIES
            + "The parties agree to terminate the lease of [[property_address]] on [[termination_date]].\n"
            "PENALTY: [[penalty_amount]].\n"
        ),
        variables=(
            "owner_name", "owner_document", "owner_address",
            "tenant_name", "tenant_document", "tenant_address",
            "property_address", "termination_date", "penalty_amount",
        ),
    ),
    ContractTemplate(
        id="vst-move-in",
        type=TemplateType.VST,
        name="Move-in inspection report",
        description="Condition report signed when the tenant receives the keys.",
        content=(
            "MOVE-IN INSPECTION REPORT\n\n"
            "PROPERTY: [[property_address]].\n"
            "DATE: [[inspection_date]]. INSPECTOR: [[inspector_name]].\n"
            "ROOMS AND CONDITION:\n[[rooms_condition]]\n"
            "METER READINGS: [[meter_readings]].\n"
        ),
        variables=(
            "property_address", "inspection_date", "inspector_name",
            "rooms_condition", "meter_readings",
        ),
    ),
    ContractTemplate(
        id="vst-move-out",
        type=TemplateType.VST,
        name="Move-out inspection report",
        description="Condition report compared against the move-in inspection.",
        content=(
            "MOVE-OUT INSPECTION REPORT\n\n"
            "PROPERTY: [[property_address]].\n"
            "DATE: [[inspection_date]]. INSPECTOR: [[inspector_name]].\n"
            "DIFFERENCES FROM MOVE-IN:\n[[differences]]\n"
            "REPAIRS CHARGED: [[repair_amount]].\n"
        ),
        variables=(
            "property_address", "inspection_date", "inspector_name",
            "differences", "repair_amount",
        ),
    ),
)

_BY_ID = {t.id: t for t in TEMPLATES}


def list_templates() -> list[ContractTemplate]:
    return list(TEMPLATES)


def get_template(template_id: str) -> ContractTemplate:
    template = _BY_ID.get(template_id)
    if template is None:
        raise NotFoundError("Template not found")
    return template


def templates_by_type(template_type: str) -> list[ContractTemplate]:
    """
    Templates of one type.

    Raises:
        ValidationError: type is not CTR, ACD or VST
    """
    try:
        wanted = TemplateType(template_type.upper())
    except ValueError:
        raise ValidationError("Invalid template type. Must be CTR, ACD, or VST")
    return [t for t in TEMPLATES if t.type == wanted]
