"""
Signing requests for generated documents.

A request starts `pending` and moves once, either to `signed` (every
required signature field captured, signer/time/IP recorded) or to `expired`.
Signed documents are never modified again.
"""

import base64
import binascii
import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from io import BytesIO
from typing import Dict, List, Optional

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

import config
from canonical import is_blank
from document_templates import DocumentTemplate, SignatureFieldKind

logger = logging.getLogger(__name__)

# Accepted signature image size, in pixels
MIN_SIGNATURE_WIDTH = 20
MIN_SIGNATURE_HEIGHT = 10
MAX_SIGNATURE_WIDTH = 4000
MAX_SIGNATURE_HEIGHT = 2000


class SigningError(Exception):
    pass


class SigningRequestNotFoundError(SigningError, LookupError):
    pass


class InvalidSigningTransitionError(SigningError):
    pass


class MissingSignatureFieldsError(SigningError):
    def __init__(self, field_ids: List[str]):
        super().__init__(f"Missing required signature fields: {', '.join(field_ids)}")
        self.field_ids = field_ids


class InvalidSignatureImageError(SigningError):
    pass


class SigningStatus(str, Enum):
    PENDING = "pending"
    SIGNED = "signed"
    EXPIRED = "expired"


class CapturedField(BaseModel):
    field_id: str
    value: str = ""
    signature_image: Optional[str] = None  # base64 PNG/JPEG


class SignedDocument(BaseModel):
    id: str = Field(default_factory=lambda: f"sign_{uuid.uuid4().hex[:12]}")
    template_id: str
    borrower_id: Optional[int] = None
    loan_application_id: Optional[int] = None
    content: str
    status: SigningStatus = SigningStatus.PENDING
    signed_by: Optional[str] = None
    signed_at: Optional[datetime] = None
    ip_address: Optional[str] = None
    signature_data: List[CapturedField] = Field(default_factory=list)
    document_url: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None

    def is_past_expiry(self, now: datetime = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.expires_at is not None and now > self.expires_at


def decode_signature_image(data: str) -> tuple:
    """Decode a base64 (optionally data-URL) signature image and return its size."""
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSignatureImageError(f"Signature image is not valid base64: {e}") from e
    try:
        # Image.open only reads the header, so the size is known before any pixel data
        with Image.open(BytesIO(image_bytes)) as image:
            width, height = image.size
            if width > MAX_SIGNATURE_WIDTH or height > MAX_SIGNATURE_HEIGHT:
                raise InvalidSignatureImageError(f"Signature image too large: {width}x{height}")
            image.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise InvalidSignatureImageError(f"Signature image could not be read: {e}") from e
    if width < MIN_SIGNATURE_WIDTH or height < MIN_SIGNATURE_HEIGHT:
        raise InvalidSignatureImageError(f"Signature image too small: {width}x{height}")
    return width, height


def create_signing_request(template: DocumentTemplate, content: str,
                           borrower_id: int = None, loan_application_id: int = None,
                           expires_in_days: int = None, now: datetime = None) -> SignedDocument:
    now = now or datetime.now(timezone.utc)
    days = config.SIGNING_EXPIRATION_DAYS if expires_in_days is None else expires_in_days
    return SignedDocument(
        template_id=template.id,
        borrower_id=borrower_id,
        loan_application_id=loan_application_id,
        content=content,
        created_at=now,
        expires_at=now + timedelta(days=days) if days > 0 else None,
    )


def sign_document(document: SignedDocument, template: DocumentTemplate, signed_by: str,
                  ip_address: str, captured: List[CapturedField],
                  now: datetime = None) -> SignedDocument:
    """Return the signed copy of a pending document."""
    now = now or datetime.now(timezone.utc)
    if document.status != SigningStatus.PENDING:
        raise InvalidSigningTransitionError(f"Cannot sign a document that is {document.status.value}")
    if document.is_past_expiry(now):
        raise InvalidSigningTransitionError("Signing request has expired")
    if is_blank(signed_by):
        raise MissingSignatureFieldsError(["signed_by"])

    by_id: Dict[str, CapturedField] = {field.field_id: field for field in captured}
    missing = [
        field_id for field_id in template.required_field_ids
        if field_id not in by_id
        or (is_blank(by_id[field_id].value) and not by_id[field_id].signature_image)
    ]
    if missing:
        raise MissingSignatureFieldsError(missing)

    kinds = {field.id: field.kind for field in template.signature_fields}
    for field in captured:
        if field.signature_image:
            if kinds.get(field.field_id) not in (SignatureFieldKind.SIGNATURE, SignatureFieldKind.INITIAL):
                raise InvalidSignatureImageError(f"Field {field.field_id} does not take an image")
            decode_signature_image(field.signature_image)

    known = [field for field in captured if field.field_id in kinds]
    return document.model_copy(update={
        "status": SigningStatus.SIGNED,
        "signed_by": signed_by,
        "signed_at": now,
        "ip_address": ip_address,
        "signature_data": [field.model_copy() for field in known],
    })


def expire_document(document: SignedDocument) -> SignedDocument:
    if document.status != SigningStatus.PENDING:
        raise InvalidSigningTransitionError(f"Cannot expire a document that is {document.status.value}")
    return document.model_copy(update={"status": SigningStatus.EXPIRED})


class SignedDocumentStore:
    """In-memory signing requests. Persistence proper belongs to the host application."""

    def __init__(self):
        self._lock = threading.Lock()
        self._documents: Dict[str, SignedDocument] = {}

    def add(self, document: SignedDocument) -> SignedDocument:
        with self._lock:
            self._documents[document.id] = document
        logger.info("Created signing request %s for template %s", document.id, document.template_id)
        return document

    def get(self, document_id: str) -> SignedDocument:
        with self._lock:
            document = self._documents.get(document_id)
        if document is None:
            raise SigningRequestNotFoundError(f"Signing request not found: {document_id}")
        return document

    def sign(self, document_id: str, template: DocumentTemplate, signed_by: str,
             ip_address: str, captured: List[CapturedField], now: datetime = None) -> SignedDocument:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                raise SigningRequestNotFoundError(f"Signing request not found: {document_id}")
            if document.status == SigningStatus.PENDING and document.is_past_expiry(now):
                self._documents[document_id] = expire_document(document)
                logger.info("Signing request %s expired before it was signed", document_id)
                raise InvalidSigningTransitionError("Signing request has expired")
            signed = sign_document(document, template, signed_by, ip_address, captured, now=now)
            self._documents[document_id] = signed
        logger.info("Signing request %s signed by %s from %s", document_id, signed_by, ip_address)
        return signed

    def expire(self, document_id: str) -> SignedDocument:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                raise SigningRequestNotFoundError(f"Signing request not found: {document_id}")
            expired = expire_document(document)
            self._documents[document_id] = expired
        logger.info("Signing request %s expired", document_id)
        return expired

    def list_documents(self, status: SigningStatus = None) -> List[SignedDocument]:
        with self._lock:
            documents = list(self._documents.values())
        if status is not None:
            documents = [d for d in documents if d.status == status]
        return documents
