"""
Document Template Service

Fixed catalog of legal/compliance HTML templates with {{variable}}
placeholders and the signature fields an e-signature flow overlays on them.
Placeholders without a value are left in the output so reviewers see them.
"""

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

import template_content

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


class TemplateNotFoundError(LookupError):
    def __init__(self, template_id: str):
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class TemplateCategory(str, Enum):
    AUTHORIZATION = "authorization"
    AGREEMENT = "agreement"
    GUIDE = "guide"
    FORM = "form"
    DISCLOSURE = "disclosure"


class SignatureFieldKind(str, Enum):
    SIGNATURE = "signature"
    INITIAL = "initial"
    DATE = "date"
    TEXT = "text"


class SignatureField(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: SignatureFieldKind
    required: bool = True
    page: int = 1
    x: int
    y: int


class DocumentTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: TemplateCategory
    content_type: str = "html"
    content: str
    variables: Tuple[str, ...] = ()
    requires_signature: bool = False
    signature_fields: Tuple[SignatureField, ...] = ()
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def required_field_ids(self) -> List[str]:
        return [field.id for field in self.signature_fields if field.required]


def _signature(field_id: str, name: str, y: int, x: int = 100,
               kind: SignatureFieldKind = SignatureFieldKind.SIGNATURE) -> SignatureField:
    return SignatureField(id=field_id, name=name, kind=kind, required=True, page=1, x=x, y=y)


def default_templates() -> List[DocumentTemplate]:
    return [
        DocumentTemplate(
            id="credit_auth_form",
            name="Credit Report Authorization Form",
            category=TemplateCategory.AUTHORIZATION,
            content=template_content.CREDIT_AUTH_FORM_HTML,
            variables=("borrowerName", "ssn", "dateOfBirth", "address", "phone", "email", "currentDate"),
            requires_signature=True,
            signature_fields=(
                _signature("borrower_signature", "Borrower Signature", y=500),
                _signature("signature_date", "Date", y=500, x=300, kind=SignatureFieldKind.DATE),
            ),
        ),
        DocumentTemplate(
            id="broker_fee_agreement",
            name="Broker Fee Agreement",
            category=TemplateCategory.AGREEMENT,
            content=template_content.BROKER_FEE_AGREEMENT_HTML,
            variables=("borrowerName", "loanAmount", "feePercentage", "feeAmount", "propertyAddress", "currentDate"),
            requires_signature=True,
            signature_fields=(
                _signature("borrower_signature", "Borrower Signature", y=600),
                _signature("broker_signature", "Broker Signature", y=650),
            ),
        ),
        DocumentTemplate(
            id="dscr_loan_guide",
            name="DSCR Loan Guide",
            category=TemplateCategory.GUIDE,
            content=template_content.DSCR_LOAN_GUIDE_HTML,
            variables=("borrowerName",),
        ),
        DocumentTemplate(
            id="personal_financial_statement",
            name="Personal Financial Statement",
            category=TemplateCategory.FORM,
            content=template_content.PERSONAL_FINANCIAL_STATEMENT_HTML,
            variables=("borrowerName", "spouseName", "currentDate"),
            requires_signature=True,
            signature_fields=(
                _signature("borrower_signature", "Borrower Signature", y=800),
            ),
        ),
        DocumentTemplate(
            id="rent_roll",
            name="Rent Roll Form",
            category=TemplateCategory.FORM,
            content=template_content.RENT_ROLL_HTML,
            variables=("propertyAddress", "borrowerName", "currentDate"),
            requires_signature=True,
            signature_fields=(
                _signature("owner_signature", "Property Owner Signature", y=600),
            ),
        ),
        DocumentTemplate(
            id="vom_form",
            name="Verification of Mortgage (VOM)",
            category=TemplateCategory.DISCLOSURE,
            content=template_content.VOM_FORM_HTML,
            variables=("borrowerName", "propertyAddress", "lenderName", "currentDate"),
        ),
    ]


def find_placeholders(content: str) -> List[str]:
    """Placeholder names in order of first appearance."""
    seen = []
    for match in PLACEHOLDER_PATTERN.finditer(content):
        if match.group(1) not in seen:
            seen.append(match.group(1))
    return seen


def find_unresolved_placeholders(rendered: str) -> List[str]:
    """Placeholders still present after rendering."""
    return find_placeholders(rendered)


def render_content(content: str, variables: Dict[str, str]) -> str:
    """Single-pass literal substitution; substituted values are never re-scanned."""
    def replace(match):
        key = match.group(1)
        if key in variables:
            return str(variables[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, content)


class DocumentTemplateService:
    """Read-only template catalog, built once when the service is constructed."""

    def __init__(self, templates: Iterable[DocumentTemplate] = None):
        self._templates: Dict[str, DocumentTemplate] = {}
        for template in (default_templates() if templates is None else templates):
            self._templates[template.id] = template
        logger.info("Loaded %d document templates", len(self._templates))

    def get_template(self, template_id: str) -> Optional[DocumentTemplate]:
        return self._templates.get(template_id)

    def require_template(self, template_id: str) -> DocumentTemplate:
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    def get_all_templates(self) -> List[DocumentTemplate]:
        return list(self._templates.values())

    def get_templates_by_category(self, category: str) -> List[DocumentTemplate]:
        return [t for t in self._templates.values() if t.category == category]

    def missing_variables(self, template_id: str, variables: Dict[str, str]) -> List[str]:
        """Placeholders in the template that `variables` does not cover."""
        template = self.require_template(template_id)
        return [name for name in find_placeholders(template.content) if name not in variables]

    def generate_document(self, template_id: str, variables: Dict[str, str]) -> str:
        template = self.require_template(template_id)
        content = render_content(template.content, variables or {})
        unresolved = find_unresolved_placeholders(content)
        if unresolved:
            logger.info("Template %s rendered with unresolved placeholders: %s",
                        template_id, ", ".join(unresolved))
        return content
