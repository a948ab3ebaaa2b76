"""
Document Pre-Fill Service

Maps loan form submissions (short application, URLA long form, customer
portal) into one consolidated borrower record per session, and projects that
record back into the shape each form binds to.

Adapters never raise on malformed input: anything they cannot read is left
empty. Projections never emit None; every leaf is a display string.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from canonical import (
    ASSET_CLASSES,
    Address,
    AssetAccount,
    Assets,
    CanonicalBorrowerRecord,
    Employer,
    Income,
    LoanInfo,
    PreFillSession,
    PropertyInfo,
    is_blank,
    merge_records,
)
from record_store import InMemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)

SHORT_APPLICATION = "shortApplication"
URLA = "urla"
CUSTOMER_PORTAL = "customerPortal"

# Account slots per asset class on the URLA form (checkingInstitution1..3, ...)
URLA_ACCOUNT_SLOTS = 3

Adapter = Callable[[Any], CanonicalBorrowerRecord]
Projection = Callable[[CanonicalBorrowerRecord], Dict[str, Any]]


# =============================================================================
# Payload helpers
# =============================================================================
def _text(data: Any, key: str) -> Optional[str]:
    """Read a scalar from a loosely-typed payload as a trimmed display string."""
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    value = str(value).strip()
    return value or None


def _section(data: Any, key: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _display(value: Optional[str], default: str = "") -> str:
    return default if is_blank(value) else value


def split_name(full_name: Optional[str]) -> tuple:
    """First whitespace token is the first name, the rest is the last name."""
    parts = (full_name or "").split()
    if not parts:
        return None, None
    return parts[0], " ".join(parts[1:]) or None


def parse_address(address: Optional[str]) -> Dict[str, str]:
    """
    Best-effort split of "street, city, STATE ZIP".

    Not a validated parser: non-US formats, multi-word states and unit
    suffixes come out wrong. Missing parts are empty strings.
    """
    result = {"address": "", "city": "", "state": "", "zip_code": ""}
    if not address or not address.strip():
        return result
    parts = [part.strip() for part in address.split(",", 2)]
    result["address"] = parts[0] or address.strip()
    if len(parts) > 1:
        result["city"] = parts[1]
    if len(parts) > 2:
        state_zip = parts[2].split(" ", 1)
        result["state"] = state_zip[0].strip()
        if len(state_zip) > 1:
            result["zip_code"] = state_zip[1].strip()
    return result


def format_address(street: Optional[str], city: Optional[str],
                   state: Optional[str], zip_code: Optional[str]) -> str:
    state_zip = f"{state or ''} {zip_code or ''}".strip()
    parts = [part.strip() for part in (street or "", city or "", state_zip) if part and part.strip()]
    return ", ".join(parts)


# =============================================================================
# Adapters: form payload -> canonical record
# =============================================================================
def map_short_application(data: Any) -> CanonicalBorrowerRecord:
    if not isinstance(data, dict):
        return CanonicalBorrowerRecord()
    first_name, last_name = split_name(_text(data, "borrowerName"))
    address = parse_address(_text(data, "propertyAddress"))
    return CanonicalBorrowerRecord(
        first_name=first_name,
        last_name=last_name,
        email=_text(data, "email"),
        phone=_text(data, "phone"),
        property=PropertyInfo(
            address=address["address"] or None,
            city=address["city"] or None,
            state=address["state"] or None,
            zip_code=address["zip_code"] or None,
            property_type=_text(data, "propertyType"),
            property_value=_text(data, "estimatedValue"),
            purchase_price=_text(data, "purchasePrice"),
        ),
        loan=LoanInfo(
            type=_text(data, "loanType"),
            requested_amount=_text(data, "loanAmount"),
            exit_strategy=_text(data, "exitStrategy"),
        ),
    )


def _urla_accounts(data: Dict[str, Any], asset_class: str) -> List[AssetAccount]:
    accounts = []
    for slot in range(1, URLA_ACCOUNT_SLOTS + 1):
        account = AssetAccount(
            institution=_text(data, f"{asset_class}Institution{slot}"),
            account_number=_text(data, f"{asset_class}AccountNumber{slot}"),
            balance=_text(data, f"{asset_class}Value{slot}"),
        )
        if not account.is_empty():
            accounts.append(account)
    return accounts


def map_urla(data: Any) -> CanonicalBorrowerRecord:
    if not isinstance(data, dict):
        return CanonicalBorrowerRecord()
    return CanonicalBorrowerRecord(
        first_name=_text(data, "firstName"),
        middle_name=_text(data, "middleName"),
        last_name=_text(data, "lastName"),
        ssn=_text(data, "ssn"),
        date_of_birth=_text(data, "dateOfBirth"),
        email=_text(data, "email"),
        phone=_text(data, "cellPhone"),
        current_address=Address(
            street=_text(data, "currentStreet"),
            city=_text(data, "currentCity"),
            state=_text(data, "currentState"),
            zip_code=_text(data, "currentZip"),
            country=_text(data, "currentCountry"),
        ),
        employer=Employer(
            name=_text(data, "employerName"),
            position=_text(data, "position"),
            phone=_text(data, "employerPhone"),
            start_date=_text(data, "startDate"),
            years_in_field=_text(data, "workYears"),
        ),
        income=Income(
            base=_text(data, "baseIncome"),
            overtime=_text(data, "overtimeIncome"),
            bonus=_text(data, "bonusIncome"),
            commission=_text(data, "commissionIncome"),
            other=_text(data, "otherIncome"),
        ),
        assets=Assets(**{asset_class: _urla_accounts(data, asset_class) for asset_class in ASSET_CLASSES}),
    )


def _portal_accounts(assets: Dict[str, Any], asset_class: str) -> List[AssetAccount]:
    entries = assets.get(asset_class)
    if not isinstance(entries, list):
        return []
    accounts = []
    for entry in entries:
        account = AssetAccount(
            institution=_text(entry, "institution"),
            account_number=_text(entry, "accountNumber"),
            balance=_text(entry, "balance"),
        )
        if not account.is_empty():
            accounts.append(account)
    return accounts


def map_customer_portal(data: Any) -> CanonicalBorrowerRecord:
    """
    Accepts the portal's grouped shape (personalInfo / propertyInfo / loanInfo)
    as well as a flat camelCase record. Grouped values win when both are sent.
    """
    if not isinstance(data, dict):
        return CanonicalBorrowerRecord()
    personal = _section(data, "personalInfo")
    current = _section(data, "currentAddress")
    employer = _section(data, "employer")
    income = _section(data, "income")
    prop = _section(data, "propertyInfo") or _section(data, "property")
    loan = _section(data, "loanInfo") or _section(data, "loan")
    assets = _section(data, "assets")

    def pick(key):
        return _text(personal, key) or _text(data, key)

    return CanonicalBorrowerRecord(
        first_name=pick("firstName"),
        middle_name=pick("middleName"),
        last_name=pick("lastName"),
        ssn=pick("ssn"),
        date_of_birth=pick("dateOfBirth"),
        email=pick("email"),
        phone=pick("phone"),
        current_address=Address(
            street=_text(current, "street"),
            city=_text(current, "city"),
            state=_text(current, "state"),
            zip_code=_text(current, "zipCode"),
            country=_text(current, "country"),
        ),
        employer=Employer(
            name=_text(employer, "name"),
            position=_text(employer, "position"),
            phone=_text(employer, "phone"),
            address=_text(employer, "address"),
            start_date=_text(employer, "startDate"),
            years_in_field=_text(employer, "yearsInField"),
        ),
        income=Income(**{field: _text(income, field) for field in Income.model_fields}),
        property=PropertyInfo(
            address=_text(prop, "address"),
            city=_text(prop, "city"),
            state=_text(prop, "state"),
            zip_code=_text(prop, "zipCode"),
            property_type=_text(prop, "propertyType"),
            property_value=_text(prop, "propertyValue"),
            purchase_price=_text(prop, "purchasePrice"),
        ),
        loan=LoanInfo(
            type=_text(loan, "type"),
            requested_amount=_text(loan, "requestedAmount"),
            purpose=_text(loan, "purpose"),
            exit_strategy=_text(loan, "exitStrategy"),
        ),
        assets=Assets(**{asset_class: _portal_accounts(assets, asset_class) for asset_class in ASSET_CLASSES}),
    )


# =============================================================================
# Projections: canonical record -> form shape
# =============================================================================
def project_short_application(record: CanonicalBorrowerRecord) -> Dict[str, Any]:
    prop = record.property
    loan = record.loan
    return {
        "borrowerName": f"{record.first_name or ''} {record.last_name or ''}".strip(),
        "email": _display(record.email),
        "phone": _display(record.phone),
        "propertyAddress": format_address(prop.address, prop.city, prop.state, prop.zip_code),
        "loanType": _display(loan.type, "purchase"),
        "loanAmount": _display(loan.requested_amount),
        "estimatedValue": _display(prop.property_value),
        "purchasePrice": _display(prop.purchase_price),
        "exitStrategy": _display(loan.exit_strategy),
        "propertyType": _display(prop.property_type, "sfr"),
        # Fields only the short form asks for
        "creditScore": "",
        "flipsCompleted": "0",
        "rentalsOwned": "0",
        "isExperienced": "no",
    }


def _account_slot(accounts: List[AssetAccount], index: int) -> AssetAccount:
    return accounts[index] if index < len(accounts) else AssetAccount()


def project_urla(record: CanonicalBorrowerRecord) -> Dict[str, Any]:
    current = record.current_address
    prop = record.property
    employer = record.employer
    income = record.income
    form = {
        "firstName": _display(record.first_name),
        "middleName": _display(record.middle_name),
        "lastName": _display(record.last_name),
        "ssn": _display(record.ssn),
        "dateOfBirth": _display(record.date_of_birth),
        "email": _display(record.email),
        "cellPhone": _display(record.phone),

        # Current address falls back to the subject property
        "currentStreet": _display(current.street) or _display(prop.address),
        "currentCity": _display(current.city) or _display(prop.city),
        "currentState": _display(current.state) or _display(prop.state),
        "currentZip": _display(current.zip_code) or _display(prop.zip_code),
        "currentCountry": _display(current.country, "US"),

        "employerName": _display(employer.name),
        "position": _display(employer.position),
        "employerPhone": _display(employer.phone),
        "startDate": _display(employer.start_date),
        "workYears": _display(employer.years_in_field, "0"),

        "baseIncome": _display(income.base, "0"),
        "overtimeIncome": _display(income.overtime, "0"),
        "bonusIncome": _display(income.bonus, "0"),
        "commissionIncome": _display(income.commission, "0"),
        "otherIncome": _display(income.other, "0"),
    }
    for asset_class in ASSET_CLASSES:
        accounts = getattr(record.assets, asset_class)
        for slot in range(1, URLA_ACCOUNT_SLOTS + 1):
            account = _account_slot(accounts, slot - 1)
            form[f"{asset_class}Institution{slot}"] = _display(account.institution)
            form[f"{asset_class}AccountNumber{slot}"] = _display(account.account_number)
            form[f"{asset_class}Value{slot}"] = _display(account.balance)
    form.update({
        "citizenship": "us_citizen",
        "creditType": "individual",
        "maritalStatus": "unmarried",
        "currentHousing": "own",
        "selfEmployed": "false",
        "familyEmployed": "false",
    })
    return form


def project_customer_portal(record: CanonicalBorrowerRecord) -> Dict[str, Any]:
    prop = record.property
    loan = record.loan
    return {
        "personalInfo": {
            "firstName": _display(record.first_name),
            "lastName": _display(record.last_name),
            "email": _display(record.email),
            "phone": _display(record.phone),
        },
        "propertyInfo": {
            "address": _display(prop.address),
            "city": _display(prop.city),
            "state": _display(prop.state),
            "zipCode": _display(prop.zip_code),
            "propertyType": _display(prop.property_type),
            "propertyValue": _display(prop.property_value, "0"),
            "purchasePrice": _display(prop.purchase_price, "0"),
        },
        "loanInfo": {
            "type": _display(loan.type),
            "requestedAmount": _display(loan.requested_amount, "0"),
            "purpose": _display(loan.purpose),
            "exitStrategy": _display(loan.exit_strategy),
        },
    }


DEFAULT_ADAPTERS: Dict[str, Adapter] = {
    SHORT_APPLICATION: map_short_application,
    URLA: map_urla,
    CUSTOMER_PORTAL: map_customer_portal,
}

DEFAULT_PROJECTIONS: Dict[str, Projection] = {
    SHORT_APPLICATION: project_short_application,
    URLA: project_urla,
    CUSTOMER_PORTAL: project_customer_portal,
}


# =============================================================================
# Completeness
# =============================================================================
# Fixed checklist of high-value fields; keep in this order and size.
COMPLETENESS_CHECKLIST = (
    ("firstName", lambda r: r.first_name),
    ("lastName", lambda r: r.last_name),
    ("email", lambda r: r.email),
    ("phone", lambda r: r.phone),
    ("ssn", lambda r: r.ssn),
    ("dateOfBirth", lambda r: r.date_of_birth),
    ("currentAddress.street", lambda r: r.current_address.street),
    ("currentAddress.city", lambda r: r.current_address.city),
    ("currentAddress.state", lambda r: r.current_address.state),
    ("currentAddress.zipCode", lambda r: r.current_address.zip_code),
    ("employer.name", lambda r: r.employer.name),
    ("employer.position", lambda r: r.employer.position),
    ("income.base", lambda r: r.income.base),
    ("property.address", lambda r: r.property.address),
    ("property.propertyValue", lambda r: r.property.property_value),
    ("loan.type", lambda r: r.loan.type),
    ("loan.requestedAmount", lambda r: r.loan.requested_amount),
    ("assets.checking[0].institution", lambda r: _account_slot(r.assets.checking, 0).institution),
    ("assets.savings[0].institution", lambda r: _account_slot(r.assets.savings, 0).institution),
    ("assets.retirement[0].institution", lambda r: _account_slot(r.assets.retirement, 0).institution),
)


def missing_checklist_fields(record: CanonicalBorrowerRecord) -> List[str]:
    return [name for name, getter in COMPLETENESS_CHECKLIST if is_blank(getter(record))]


def completeness_percent(record: CanonicalBorrowerRecord) -> int:
    total = len(COMPLETENESS_CHECKLIST)
    present = total - len(missing_checklist_fields(record))
    return int(round(100 * present / total))


def completeness_label(percent: int) -> str:
    if percent >= 80:
        return "Excellent"
    if percent >= 60:
        return "Good"
    return "Needs Work"


# =============================================================================
# Service
# =============================================================================
class DocumentPreFillService:
    """
    Holds one consolidated record per session id.

    The application constructs one instance and passes it where it is needed;
    the store decides where sessions live.
    """

    def __init__(self, store: RecordStore = None,
                 adapters: Dict[str, Adapter] = None,
                 projections: Dict[str, Projection] = None):
        self.store = store or InMemoryRecordStore()
        self.adapters = dict(DEFAULT_ADAPTERS if adapters is None else adapters)
        self.projections = dict(DEFAULT_PROJECTIONS if projections is None else projections)

    def register_form_type(self, form_type: str, adapter: Adapter, projection: Projection) -> None:
        self.adapters[form_type] = adapter
        self.projections[form_type] = projection

    @property
    def form_types(self) -> List[str]:
        return sorted(set(self.adapters) | set(self.projections))

    def map_form_data(self, form_type: str, payload: Any) -> CanonicalBorrowerRecord:
        """Run the adapter for form_type. Unknown form types yield an empty record."""
        adapter = self.adapters.get(form_type)
        if adapter is None:
            logger.warning("No adapter for form type %r; submission ignored", form_type)
            return CanonicalBorrowerRecord()
        return adapter(payload)

    def store_form_data(self, session_id: str, form_type: str, payload: Any) -> CanonicalBorrowerRecord:
        """Merge a form submission into the session's consolidated record and return the result."""
        mapped = self.map_form_data(form_type, payload)
        with self.store.lock(session_id):
            session = self.store.get(session_id) or PreFillSession()
            session.consolidated = merge_records(session.consolidated, mapped)
            session.forms[form_type] = mapped
            self.store.put(session_id, session)
        logger.info("Stored %s data for session %s (completeness %d%%)",
                    form_type, session_id, completeness_percent(session.consolidated))
        return session.consolidated

    def get_consolidated_record(self, session_id: str) -> CanonicalBorrowerRecord:
        session = self.store.get(session_id)
        return session.consolidated if session is not None else CanonicalBorrowerRecord()

    def get_form_snapshot(self, session_id: str, form_type: str) -> Optional[CanonicalBorrowerRecord]:
        """Last adapter output stored for form_type, if any."""
        session = self.store.get(session_id)
        if session is None:
            return None
        return session.forms.get(form_type)

    def get_prefilled_data(self, session_id: str, target_form_type: str) -> Dict[str, Any]:
        projection = self.projections.get(target_form_type)
        if projection is None:
            logger.warning("No projection for form type %r", target_form_type)
            return {}
        return projection(self.get_consolidated_record(session_id))

    def get_data_completeness(self, session_id: str) -> int:
        return completeness_percent(self.get_consolidated_record(session_id))

    def get_completeness_report(self, session_id: str) -> Dict[str, Any]:
        record = self.get_consolidated_record(session_id)
        percent = completeness_percent(record)
        return {
            "completeness": percent,
            "label": completeness_label(percent),
            "missing_fields": missing_checklist_fields(record),
            "tracked_fields": len(COMPLETENESS_CHECKLIST),
        }

    def get_template_variables(self, session_id: str, today: date = None) -> Dict[str, str]:
        return template_variables(self.get_consolidated_record(session_id), today=today)

    def clear_data(self, session_id: str) -> None:
        with self.store.lock(session_id):
            self.store.delete(session_id)
        logger.info("Cleared pre-fill data for session %s", session_id)


def template_variables(record: CanonicalBorrowerRecord, today: date = None) -> Dict[str, str]:
    """Flat variables for document templates, taken from a consolidated record."""
    today = today or date.today()
    current = record.current_address
    prop = record.property
    values = {
        "borrowerName": " ".join(
            part for part in (record.first_name, record.middle_name, record.last_name) if not is_blank(part)
        ),
        "firstName": _display(record.first_name),
        "lastName": _display(record.last_name),
        "ssn": _display(record.ssn),
        "dateOfBirth": _display(record.date_of_birth),
        "email": _display(record.email),
        "phone": _display(record.phone),
        "address": format_address(current.street, current.city, current.state, current.zip_code),
        "propertyAddress": format_address(prop.address, prop.city, prop.state, prop.zip_code),
        "loanAmount": _display(record.loan.requested_amount),
        "currentDate": today.strftime("%B %d, %Y"),
    }
    # Empty values stay out so the placeholder remains visible in the document
    return {key: value for key, value in values.items() if value}
