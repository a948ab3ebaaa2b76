"""
Canonical borrower record shared by every loan form.

All leaves are optional display strings. Merging is value-wise: a non-blank
incoming value wins, a blank one never erases what is already known.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Form UIs bind "0" as the default for top-level inputs, so there it carries no information.
UNSET_SCALARS = ("", "0")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_unset(value: Any) -> bool:
    """Blank, or the "0" a form sends for an untouched top-level field."""
    if isinstance(value, str):
        return value.strip() in UNSET_SCALARS
    return is_blank(value)


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class Employer(BaseModel):
    name: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    start_date: Optional[str] = None
    years_in_field: Optional[str] = None


class Income(BaseModel):
    base: Optional[str] = None
    overtime: Optional[str] = None
    bonus: Optional[str] = None
    commission: Optional[str] = None
    other: Optional[str] = None


class PropertyInfo(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    property_type: Optional[str] = None
    property_value: Optional[str] = None
    purchase_price: Optional[str] = None


class LoanInfo(BaseModel):
    type: Optional[str] = None
    requested_amount: Optional[str] = None
    purpose: Optional[str] = None
    exit_strategy: Optional[str] = None


class AssetAccount(BaseModel):
    institution: Optional[str] = None
    account_number: Optional[str] = None
    balance: Optional[str] = None

    def is_empty(self) -> bool:
        return is_blank(self.institution) and is_blank(self.account_number) and is_unset(self.balance)

    def identity(self) -> tuple:
        return (self.institution or "", self.account_number or "")


class Assets(BaseModel):
    checking: List[AssetAccount] = Field(default_factory=list)
    savings: List[AssetAccount] = Field(default_factory=list)
    retirement: List[AssetAccount] = Field(default_factory=list)


ASSET_CLASSES = ("checking", "savings", "retirement")
IDENTITY_FIELDS = ("first_name", "middle_name", "last_name", "ssn", "date_of_birth", "email", "phone")
GROUP_FIELDS = ("current_address", "employer", "income", "property", "loan")


class CanonicalBorrowerRecord(BaseModel):
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    ssn: Optional[str] = None
    date_of_birth: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    current_address: Address = Field(default_factory=Address)
    employer: Employer = Field(default_factory=Employer)
    income: Income = Field(default_factory=Income)
    property: PropertyInfo = Field(default_factory=PropertyInfo)
    loan: LoanInfo = Field(default_factory=LoanInfo)
    assets: Assets = Field(default_factory=Assets)


class PreFillSession(BaseModel):
    """Everything kept for one session: the consolidated record and the last output per form."""
    consolidated: CanonicalBorrowerRecord = Field(default_factory=CanonicalBorrowerRecord)
    forms: Dict[str, CanonicalBorrowerRecord] = Field(default_factory=dict)


# =============================================================================
# Merge
# =============================================================================
def _merge_model(existing: BaseModel, incoming: BaseModel, fields=None, skip=is_blank) -> BaseModel:
    """Value-wise merge of the scalar fields of two models of the same type."""
    updates = {}
    for name in fields or type(incoming).model_fields:
        value = getattr(incoming, name)
        if not skip(value):
            updates[name] = value
    return existing.model_copy(update=updates)


def merge_accounts(existing: List[AssetAccount], incoming: List[AssetAccount]) -> List[AssetAccount]:
    """
    Merge account lists by (institution, account_number). A "0" balance is kept.

    A matching entry is updated in place, any other non-empty entry is
    appended, and empty entries are dropped.
    """
    merged = [account.model_copy() for account in existing]
    for account in incoming:
        if account is None or account.is_empty():
            continue
        for index, current in enumerate(merged):
            if current.identity() == account.identity():
                merged[index] = _merge_model(current, account)
                break
        else:
            merged.append(_merge_model(AssetAccount(), account))
    return merged


def merge_records(existing: CanonicalBorrowerRecord,
                  incoming: CanonicalBorrowerRecord) -> CanonicalBorrowerRecord:
    """Return a new record with incoming merged over existing. Neither argument is mutated."""
    merged = _merge_model(existing, incoming, IDENTITY_FIELDS, skip=is_unset)
    for group in GROUP_FIELDS:
        setattr(merged, group, _merge_model(getattr(existing, group), getattr(incoming, group)))
    merged.assets = Assets(**{
        asset_class: merge_accounts(getattr(existing.assets, asset_class),
                                    getattr(incoming.assets, asset_class))
        for asset_class in ASSET_CLASSES
    })
    return merged
