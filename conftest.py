"""Shared test fixtures for the loan document service."""

import base64
import struct
import zlib
from io import BytesIO

import pytest
from botocore.exceptions import ClientError
from PIL import Image

from canonical import (
    Address,
    AssetAccount,
    Assets,
    CanonicalBorrowerRecord,
    Employer,
    Income,
    LoanInfo,
    PropertyInfo,
)
from prefill import DocumentPreFillService
from record_store import InMemoryRecordStore


class FakeS3Client:
    """Just enough of the boto3 S3 client for the storage helpers."""

    def __init__(self):
        self.objects = {}

    def _missing(self, operation):
        return ClientError({"Error": {"Code": "NoSuchKey", "Message": "Not Found"}}, operation)

    def head_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {"ContentLength": len(self.objects[(Bucket, Key)]["Body"])}

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise self._missing("GetObject")
        return {"Body": BytesIO(self.objects[(Bucket, Key)]["Body"])}

    def put_object(self, Bucket, Key, Body, ContentType=None):
        self.objects[(Bucket, Key)] = {"Body": Body, "ContentType": ContentType}
        return {}

    def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)
        return {}


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def service():
    return DocumentPreFillService(InMemoryRecordStore())


@pytest.fixture
def full_record():
    """A consolidated record with every canonical field populated."""
    return CanonicalBorrowerRecord(
        first_name="John",
        middle_name="Quincy",
        last_name="Smith",
        ssn="123-45-6789",
        date_of_birth="1980-04-12",
        email="john@example.com",
        phone="512-555-0101",
        current_address=Address(street="9 Oak Ln", city="Round Rock", state="TX", zip_code="78664", country="US"),
        employer=Employer(name="Acme Corp", position="Engineer", phone="512-555-0199",
                          address="1 Acme Way", start_date="2015-06-01", years_in_field="12"),
        income=Income(base="9000", overtime="500", bonus="1000", commission="250", other="100"),
        property=PropertyInfo(address="123 Main St", city="Austin", state="TX", zip_code="78701",
                              property_type="sfr", property_value="650000", purchase_price="600000"),
        loan=LoanInfo(type="purchase", requested_amount="500000", purpose="investment", exit_strategy="refinance"),
        assets=Assets(
            checking=[AssetAccount(institution="Chase", account_number="1111", balance="25000")],
            savings=[AssetAccount(institution="Ally", account_number="2222", balance="40000")],
            retirement=[AssetAccount(institution="Vanguard", account_number="3333", balance="150000")],
        ),
    )


@pytest.fixture
def signature_png():
    """Base64 PNG large enough to pass signature image validation."""
    image = Image.new("RGB", (120, 40), color="white")
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture
def huge_png_header():
    """Base64 PNG declaring 60000x60000 pixels with no pixel data behind it."""
    def chunk(kind, body):
        crc = zlib.crc32(kind + body) & 0xFFFFFFFF
        return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", 60000, 60000, 8, 0, 0, 0, 0)
    png = b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")
    return base64.b64encode(png).decode("ascii")
