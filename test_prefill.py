"""Tests for form adapters, record merging, projections and completeness."""

from datetime import date

import pytest

from canonical import AssetAccount, CanonicalBorrowerRecord, Income, PreFillSession, merge_accounts, merge_records
from prefill import (
    COMPLETENESS_CHECKLIST,
    CUSTOMER_PORTAL,
    DEFAULT_PROJECTIONS,
    SHORT_APPLICATION,
    URLA,
    DocumentPreFillService,
    completeness_label,
    map_customer_portal,
    map_short_application,
    map_urla,
    parse_address,
    project_customer_portal,
    project_short_application,
    project_urla,
    split_name,
    template_variables,
)

SESSION = "session-1"

# Fields each form carries, as (canonical getter) paths, for round-trip checks
COVERED_FIELDS = {
    SHORT_APPLICATION: [
        "first_name", "last_name", "email", "phone",
        "property.address", "property.city", "property.state", "property.zip_code",
        "property.property_type", "property.property_value", "property.purchase_price",
        "loan.type", "loan.requested_amount", "loan.exit_strategy",
    ],
    URLA: [
        "first_name", "middle_name", "last_name", "ssn", "date_of_birth", "email", "phone",
        "current_address.street", "current_address.city", "current_address.state",
        "current_address.zip_code", "current_address.country",
        "employer.name", "employer.position", "employer.phone", "employer.start_date",
        "employer.years_in_field",
        "income.base", "income.overtime", "income.bonus", "income.commission", "income.other",
        "assets.checking", "assets.savings", "assets.retirement",
    ],
    CUSTOMER_PORTAL: [
        "first_name", "last_name", "email", "phone",
        "property.address", "property.city", "property.state", "property.zip_code",
        "property.property_type", "property.property_value", "property.purchase_price",
        "loan.type", "loan.requested_amount", "loan.purpose", "loan.exit_strategy",
    ],
}


def _get(record, path):
    value = record
    for part in path.split("."):
        value = getattr(value, part)
    return value


def _leaves(data):
    if isinstance(data, dict):
        for value in data.values():
            yield from _leaves(value)
    else:
        yield data


# =============================================================================
# Scenarios
# =============================================================================
def test_short_application_prefills_itself(service):
    service.store_form_data(SESSION, SHORT_APPLICATION, {
        "borrowerName": "John Smith",
        "propertyAddress": "123 Main St, Austin, TX 78701",
        "loanAmount": "500000",
    })
    data = service.get_prefilled_data(SESSION, SHORT_APPLICATION)
    assert data["borrowerName"] == "John Smith"
    assert data["propertyAddress"] == "123 Main St, Austin, TX 78701"
    assert data["loanAmount"] == "500000"


def test_urla_submission_adds_to_short_application(service):
    service.store_form_data(SESSION, SHORT_APPLICATION, {
        "borrowerName": "John Smith",
        "propertyAddress": "123 Main St, Austin, TX 78701",
        "loanAmount": "500000",
    })
    before = service.get_data_completeness(SESSION)
    service.store_form_data(SESSION, URLA, {"firstName": "John", "lastName": "Smith", "ssn": "123-45-6789"})

    record = service.get_consolidated_record(SESSION)
    assert record.ssn == "123-45-6789"
    assert record.property.address == "123 Main St"
    assert record.property.city == "Austin"
    assert record.loan.requested_amount == "500000"
    assert service.get_data_completeness(SESSION) > before


def test_blank_income_does_not_erase_existing():
    existing = CanonicalBorrowerRecord(income=Income(base="5000"))
    merged = merge_records(existing, CanonicalBorrowerRecord(income=Income(base="")))
    assert merged.income.base == "5000"


def test_same_account_is_updated_not_duplicated():
    accounts = merge_accounts([], [AssetAccount(institution="Chase", account_number="1111", balance="100")])
    accounts = merge_accounts(accounts, [AssetAccount(institution="Chase", account_number="1111", balance="200")])
    assert len(accounts) == 1
    assert accounts[0].balance == "200"


# =============================================================================
# Merge properties
# =============================================================================
def test_merge_is_idempotent(full_record):
    once = merge_records(CanonicalBorrowerRecord(), full_record)
    twice = merge_records(once, full_record)
    assert twice == once


def test_merge_never_blanks_existing_values(full_record):
    merged = merge_records(full_record, CanonicalBorrowerRecord(
        first_name="", email=None, ssn="   ", phone="0", income=Income(base=" "),
    ))
    assert merged == full_record


def test_zero_income_replaces_previous_amount(service):
    service.store_form_data(SESSION, URLA, {"bonusIncome": "1000"})
    service.store_form_data(SESSION, URLA, {"bonusIncome": "0"})
    assert service.get_consolidated_record(SESSION).income.bonus == "0"
    assert service.get_prefilled_data(SESSION, URLA)["bonusIncome"] == "0"


def test_zero_balance_account_is_kept():
    accounts = merge_accounts([], [AssetAccount(institution="Chase", account_number="1", balance="0")])
    assert [(a.institution, a.account_number, a.balance) for a in accounts] == [("Chase", "1", "0")]
    assert merge_accounts([], [AssetAccount(balance="0")]) == []


def test_merge_does_not_mutate_inputs(full_record):
    snapshot = full_record.model_copy(deep=True)
    incoming = CanonicalBorrowerRecord(first_name="Jane", income=Income(base="1"))
    merge_records(full_record, incoming)
    assert full_record == snapshot


def test_account_merge_drops_empty_and_appends_new():
    existing = [AssetAccount(institution="Chase", account_number="1111", balance="100")]
    merged = merge_accounts(existing, [
        AssetAccount(),
        AssetAccount(institution="Chase", account_number="9999", balance="5"),
        AssetAccount(institution="Chase", account_number="1111", balance=""),
    ])
    assert [(a.institution, a.account_number, a.balance) for a in merged] == [
        ("Chase", "1111", "100"),
        ("Chase", "9999", "5"),
    ]


# =============================================================================
# Adapters
# =============================================================================
@pytest.mark.parametrize("address,expected", [
    ("123 Main St, Austin, TX 78701", ("123 Main St", "Austin", "TX", "78701")),
    ("123 Main St, Austin", ("123 Main St", "Austin", "", "")),
    ("123 Main St", ("123 Main St", "", "", "")),
    ("123 Main St, Austin, TX", ("123 Main St", "Austin", "TX", "")),
    ("", ("", "", "", "")),
    (None, ("", "", "", "")),
])
def test_parse_address(address, expected):
    parsed = parse_address(address)
    assert (parsed["address"], parsed["city"], parsed["state"], parsed["zip_code"]) == expected


def test_split_name_keeps_multiword_last_name():
    assert split_name("John  Van Dyke") == ("John", "Van Dyke")
    assert split_name("Cher") == ("Cher", None)
    assert split_name("   ") == (None, None)


@pytest.mark.parametrize("adapter", [map_short_application, map_urla, map_customer_portal])
@pytest.mark.parametrize("payload", [None, "text", 42, [], {"borrowerName": {"nested": 1}}, {"email": ["a"]}])
def test_adapters_are_total(adapter, payload):
    record = adapter(payload)
    assert isinstance(record, CanonicalBorrowerRecord)


def test_urla_reads_numeric_values_as_strings():
    record = map_urla({"baseIncome": 5000, "overtimeIncome": 250.0, "checkingInstitution1": "Chase",
                       "checkingValue1": 1200.5})
    assert record.income.base == "5000"
    assert record.income.overtime == "250"
    assert record.assets.checking[0].balance == "1200.5"


def test_urla_reads_extra_account_slots():
    record = map_urla({
        "savingsInstitution1": "Ally", "savingsAccountNumber1": "1",
        "savingsInstitution2": "Marcus", "savingsAccountNumber2": "2",
    })
    assert [a.institution for a in record.assets.savings] == ["Ally", "Marcus"]
    assert record.assets.checking == []


def test_customer_portal_accepts_flat_record_shape():
    record = map_customer_portal({
        "firstName": "Jane",
        "currentAddress": {"street": "1 Elm", "zipCode": "10001"},
        "assets": {"checking": [{"institution": "Chase", "accountNumber": "1", "balance": "10"}]},
    })
    assert record.first_name == "Jane"
    assert record.current_address.zip_code == "10001"
    assert record.assets.checking[0].account_number == "1"


def test_unknown_form_type_is_a_no_op(service):
    service.store_form_data(SESSION, URLA, {"firstName": "John"})
    before = service.get_consolidated_record(SESSION)
    service.store_form_data(SESSION, "mysteryForm", {"firstName": "Someone Else"})
    assert service.get_consolidated_record(SESSION) == before
    assert service.get_prefilled_data(SESSION, "mysteryForm") == {}


def test_form_snapshot_keeps_last_adapter_output(service):
    service.store_form_data(SESSION, URLA, {"firstName": "John"})
    service.store_form_data(SESSION, URLA, {"lastName": "Smith"})
    snapshot = service.get_form_snapshot(SESSION, URLA)
    assert snapshot.first_name is None
    assert snapshot.last_name == "Smith"
    assert service.get_form_snapshot(SESSION, SHORT_APPLICATION) is None


# =============================================================================
# Projections
# =============================================================================
@pytest.mark.parametrize("form_type", sorted(DEFAULT_PROJECTIONS))
def test_projection_of_empty_record_has_no_nulls(service, form_type):
    data = service.get_prefilled_data("empty-session", form_type)
    assert data
    for value in _leaves(data):
        assert isinstance(value, str)


def test_projection_defaults():
    short = project_short_application(CanonicalBorrowerRecord())
    assert short["loanType"] == "purchase"
    assert short["propertyType"] == "sfr"
    assert short["flipsCompleted"] == "0"
    assert short["borrowerName"] == ""

    urla = project_urla(CanonicalBorrowerRecord())
    assert urla["baseIncome"] == "0"
    assert urla["workYears"] == "0"
    assert urla["currentCountry"] == "US"
    assert urla["checkingInstitution1"] == ""

    portal = project_customer_portal(CanonicalBorrowerRecord())
    assert portal["loanInfo"]["requestedAmount"] == "0"
    assert portal["personalInfo"]["firstName"] == ""


def test_urla_current_address_falls_back_to_property(service):
    service.store_form_data(SESSION, SHORT_APPLICATION, {"propertyAddress": "123 Main St, Austin, TX 78701"})
    urla = service.get_prefilled_data(SESSION, URLA)
    assert urla["currentStreet"] == "123 Main St"
    assert urla["currentCity"] == "Austin"
    assert urla["currentState"] == "TX"
    assert urla["currentZip"] == "78701"


@pytest.mark.parametrize("form_type", [SHORT_APPLICATION, URLA, CUSTOMER_PORTAL])
def test_projection_round_trip(full_record, form_type):
    source = DocumentPreFillService()
    with source.store.lock(SESSION):
        source.store.put(SESSION, PreFillSession(consolidated=full_record))
    projected = source.get_prefilled_data(SESSION, form_type)

    target = DocumentPreFillService()
    target.store_form_data(SESSION, form_type, projected)
    restored = target.get_consolidated_record(SESSION)

    for path in COVERED_FIELDS[form_type]:
        assert _get(restored, path) == _get(full_record, path), path


# =============================================================================
# Completeness
# =============================================================================
def test_checklist_has_twenty_fields():
    assert len(COMPLETENESS_CHECKLIST) == 20


def test_completeness_rises_five_points_per_field(service):
    assert service.get_data_completeness(SESSION) == 0
    steps = [
        {"firstName": "John"},
        {"lastName": "Smith"},
        {"ssn": "123-45-6789"},
        {"currentCity": "Austin"},
        {"checkingInstitution1": "Chase"},
    ]
    for index, payload in enumerate(steps, start=1):
        service.store_form_data(SESSION, URLA, payload)
        assert service.get_data_completeness(SESSION) == 5 * index


def test_full_record_is_complete(service):
    service.store_form_data(SESSION, CUSTOMER_PORTAL, {
        "firstName": "x", "lastName": "x", "email": "x", "phone": "x", "ssn": "x", "dateOfBirth": "x",
        "currentAddress": {"street": "x", "city": "x", "state": "x", "zipCode": "x"},
        "employer": {"name": "x", "position": "x"},
        "income": {"base": "1"},
        "property": {"address": "x", "propertyValue": "1"},
        "loan": {"type": "x", "requestedAmount": "1"},
        "assets": {asset_class: [{"institution": "x"}] for asset_class in ("checking", "savings", "retirement")},
    })
    report = service.get_completeness_report(SESSION)
    assert report["completeness"] == 100
    assert report["label"] == "Excellent"
    assert report["missing_fields"] == []


def test_completeness_labels():
    assert completeness_label(80) == "Excellent"
    assert completeness_label(60) == "Good"
    assert completeness_label(55) == "Needs Work"


def test_clear_data_is_idempotent(service):
    service.store_form_data(SESSION, URLA, {"firstName": "John"})
    service.clear_data(SESSION)
    service.clear_data(SESSION)
    assert service.get_data_completeness(SESSION) == 0
    assert service.get_form_snapshot(SESSION, URLA) is None


def test_sessions_are_isolated(service):
    service.store_form_data("a", URLA, {"firstName": "Alice"})
    service.store_form_data("b", URLA, {"firstName": "Bob"})
    assert service.get_consolidated_record("a").first_name == "Alice"
    assert service.get_consolidated_record("b").first_name == "Bob"


def test_registered_form_type_is_used(service):
    service.register_form_type(
        "leadCapture",
        lambda data: CanonicalBorrowerRecord(email=(data or {}).get("contact")),
        lambda record: {"contact": record.email or ""},
    )
    service.store_form_data(SESSION, "leadCapture", {"contact": "lead@example.com"})
    assert service.get_prefilled_data(SESSION, "leadCapture") == {"contact": "lead@example.com"}
    assert service.get_prefilled_data(SESSION, SHORT_APPLICATION)["email"] == "lead@example.com"


# =============================================================================
# Template variables
# =============================================================================
def test_template_variables_from_record(full_record):
    variables = template_variables(full_record, today=date(2024, 3, 5))
    assert variables["borrowerName"] == "John Quincy Smith"
    assert variables["propertyAddress"] == "123 Main St, Austin, TX 78701"
    assert variables["address"] == "9 Oak Ln, Round Rock, TX 78664"
    assert variables["loanAmount"] == "500000"
    assert variables["currentDate"] == "March 05, 2024"


def test_template_variables_skip_missing_values():
    variables = template_variables(CanonicalBorrowerRecord(first_name="John"))
    assert variables["borrowerName"] == "John"
    assert "ssn" not in variables
    assert "propertyAddress" not in variables
