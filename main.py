"""
Loan Document Service - Form Pre-Fill & Document Templates

FastAPI service that consolidates loan form submissions into one borrower
record per session, pre-fills other forms from it, and renders the
compliance document templates (optionally uploading them to S3 and opening
an e-signature request).

Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

import config
import storage
from document_templates import DocumentTemplate, DocumentTemplateService, TemplateNotFoundError, find_unresolved_placeholders
from prefill import DocumentPreFillService
from record_store import create_record_store
from signatures import (
    CapturedField,
    InvalidSignatureImageError,
    InvalidSigningTransitionError,
    MissingSignatureFieldsError,
    SignedDocumentStore,
    SigningRequestNotFoundError,
    SigningStatus,
    create_signing_request,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Request/Response Models
# =============================================================================
class GenerateRequest(BaseModel):
    variables: Dict[str, str] = {}


class GenerateAndUploadRequest(BaseModel):
    variables: Dict[str, str] = {}
    output_key: Optional[str] = None


class SessionDocumentRequest(BaseModel):
    """Variables here override the ones taken from the session record."""
    variables: Dict[str, str] = {}


class SigningRequestCreate(BaseModel):
    template_id: str
    variables: Dict[str, str] = {}
    session_id: Optional[str] = None
    borrower_id: Optional[int] = None
    loan_application_id: Optional[int] = None
    expires_in_days: Optional[int] = None


class SignRequest(BaseModel):
    signed_by: str
    fields: List[CapturedField]


class HealthResponse(BaseModel):
    status: str
    version: str
    templates: int
    form_types: List[str]


# =============================================================================
# Helpers
# =============================================================================
def template_summary(template: DocumentTemplate, include_content: bool = False) -> Dict[str, Any]:
    return template.model_dump(mode="json", exclude=None if include_content else {"content"})


def render_or_404(templates: DocumentTemplateService, template_id: str, variables: Dict[str, str]) -> str:
    try:
        return templates.generate_document(template_id, variables)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def document_response(template: DocumentTemplate, content: str) -> Dict[str, Any]:
    return {
        "template_id": template.id,
        "content_type": template.content_type,
        "content": content,
        "unresolved_placeholders": find_unresolved_placeholders(content),
        "requires_signature": template.requires_signature,
        "signature_fields": [field.model_dump(mode="json") for field in template.signature_fields],
    }


# =============================================================================
# App factory
# =============================================================================
def create_app(prefill_service: DocumentPreFillService = None,
               template_service: DocumentTemplateService = None,
               signing_store: SignedDocumentStore = None,
               s3_client=None) -> FastAPI:
    app = FastAPI(title="Loan Document Service", version=config.SERVICE_VERSION)
    app.state.prefill = prefill_service or DocumentPreFillService(create_record_store())
    app.state.templates = template_service or DocumentTemplateService()
    app.state.signing = signing_store or SignedDocumentStore()
    app.state.s3_client = s3_client

    @app.exception_handler(storage.StorageError)
    async def storage_error_handler(request: Request, exc: storage.StorageError):
        """Any object store failure surfaces as a bad gateway, whichever endpoint hit it."""
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    def get_prefill(request: Request) -> DocumentPreFillService:
        return request.app.state.prefill

    def get_templates(request: Request) -> DocumentTemplateService:
        return request.app.state.templates

    def get_signing(request: Request) -> SignedDocumentStore:
        return request.app.state.signing

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------
    @app.get("/health", response_model=HealthResponse)
    async def health_check(prefill: DocumentPreFillService = Depends(get_prefill),
                           templates: DocumentTemplateService = Depends(get_templates)):
        return {
            "status": "ok",
            "version": config.SERVICE_VERSION,
            "templates": len(templates.get_all_templates()),
            "form_types": prefill.form_types,
        }

    # -------------------------------------------------------------------------
    # Form pre-fill
    # -------------------------------------------------------------------------
    @app.post("/sessions/{session_id}/forms/{form_type}")
    async def store_form_data_endpoint(session_id: str, form_type: str, request: Request,
                                       prefill: DocumentPreFillService = Depends(get_prefill)):
        """
        Merge a form submission into the session record.

        Unknown form types are accepted and change nothing; the response
        reports `recognized: false` so callers can notice.
        """
        try:
            payload = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Request body must be valid JSON")
        prefill.store_form_data(session_id, form_type, payload)
        return {
            "success": True,
            "session_id": session_id,
            "form_type": form_type,
            "recognized": form_type in prefill.adapters,
            "completeness": prefill.get_data_completeness(session_id),
        }

    @app.get("/sessions/{session_id}/forms/{form_type}")
    async def form_snapshot_endpoint(session_id: str, form_type: str,
                                     prefill: DocumentPreFillService = Depends(get_prefill)):
        """Debug: the canonical record produced by the last submission of form_type."""
        snapshot = prefill.get_form_snapshot(session_id, form_type)
        if snapshot is None:
            raise HTTPException(status_code=404, detail=f"No {form_type} submission for session {session_id}")
        return snapshot.model_dump()

    @app.get("/sessions/{session_id}/record")
    async def consolidated_record_endpoint(session_id: str,
                                           prefill: DocumentPreFillService = Depends(get_prefill)):
        return prefill.get_consolidated_record(session_id).model_dump()

    @app.get("/sessions/{session_id}/prefill/{form_type}")
    async def prefill_endpoint(session_id: str, form_type: str,
                               prefill: DocumentPreFillService = Depends(get_prefill)):
        return prefill.get_prefilled_data(session_id, form_type)

    @app.get("/sessions/{session_id}/completeness")
    async def completeness_endpoint(session_id: str,
                                    prefill: DocumentPreFillService = Depends(get_prefill)):
        return prefill.get_completeness_report(session_id)

    @app.delete("/sessions/{session_id}")
    async def clear_session_endpoint(session_id: str,
                                     prefill: DocumentPreFillService = Depends(get_prefill)):
        prefill.clear_data(session_id)
        return {"success": True, "session_id": session_id}

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------
    @app.get("/templates")
    async def list_templates_endpoint(category: Optional[str] = None,
                                      templates: DocumentTemplateService = Depends(get_templates)):
        found = templates.get_templates_by_category(category) if category else templates.get_all_templates()
        return [template_summary(t) for t in found]

    @app.get("/templates/{template_id}")
    async def get_template_endpoint(template_id: str,
                                    templates: DocumentTemplateService = Depends(get_templates)):
        template = templates.get_template(template_id)
        if template is None:
            raise HTTPException(status_code=404, detail=f"Template not found: {template_id}")
        return template_summary(template, include_content=True)

    @app.post("/templates/{template_id}/generate")
    async def generate_endpoint(template_id: str, request: GenerateRequest,
                                templates: DocumentTemplateService = Depends(get_templates)):
        content = render_or_404(templates, template_id, request.variables)
        return document_response(templates.get_template(template_id), content)

    @app.post("/templates/{template_id}/preview", response_class=HTMLResponse)
    async def preview_endpoint(template_id: str, request: GenerateRequest,
                               templates: DocumentTemplateService = Depends(get_templates)):
        return render_or_404(templates, template_id, request.variables)

    @app.post("/templates/{template_id}/generate-and-upload")
    async def generate_and_upload_endpoint(template_id: str, request: GenerateAndUploadRequest, http_request: Request,
                                           templates: DocumentTemplateService = Depends(get_templates)):
        """Render a template and upload the HTML to S3 under a free key."""
        content = render_or_404(templates, template_id, request.variables)
        output_key = request.output_key or f"{config.GENERATED_DOCUMENT_PREFIX}/{template_id}.html"
        client = http_request.app.state.s3_client
        out_key = storage.get_unique_output_key(output_key, client=client)
        output_url = storage.upload_document(content.encode("utf-8"), out_key, client=client)
        return {
            "success": True,
            "template_id": template_id,
            "output_key": out_key,
            "output_url": output_url,
            "original_key": output_key,
            "unresolved_placeholders": find_unresolved_placeholders(content),
        }

    @app.post("/sessions/{session_id}/documents/{template_id}")
    async def session_document_endpoint(session_id: str, template_id: str, request: SessionDocumentRequest,
                                        prefill: DocumentPreFillService = Depends(get_prefill),
                                        templates: DocumentTemplateService = Depends(get_templates)):
        """Render a template from the session record, with request variables taking precedence."""
        variables = {**prefill.get_template_variables(session_id), **request.variables}
        content = render_or_404(templates, template_id, variables)
        return document_response(templates.get_template(template_id), content)

    # -------------------------------------------------------------------------
    # Signing
    # -------------------------------------------------------------------------
    @app.post("/signing-requests")
    async def create_signing_request_endpoint(request: SigningRequestCreate,
                                              prefill: DocumentPreFillService = Depends(get_prefill),
                                              templates: DocumentTemplateService = Depends(get_templates),
                                              signing: SignedDocumentStore = Depends(get_signing)):
        template = templates.get_template(request.template_id)
        if template is None:
            raise HTTPException(status_code=404, detail=f"Template not found: {request.template_id}")
        if not template.requires_signature:
            raise HTTPException(status_code=422, detail=f"Template {template.id} does not take signatures")
        variables = dict(request.variables)
        if request.session_id:
            variables = {**prefill.get_template_variables(request.session_id), **variables}
        content = templates.generate_document(template.id, variables)
        document = create_signing_request(
            template, content,
            borrower_id=request.borrower_id,
            loan_application_id=request.loan_application_id,
            expires_in_days=request.expires_in_days,
        )
        signing.add(document)
        return {
            **document.model_dump(mode="json"),
            "unresolved_placeholders": find_unresolved_placeholders(content),
            "signature_fields": [field.model_dump(mode="json") for field in template.signature_fields],
        }

    @app.get("/signing-requests")
    async def list_signing_requests_endpoint(status: Optional[SigningStatus] = None,
                                             signing: SignedDocumentStore = Depends(get_signing)):
        """Signing requests, optionally only those in one status."""
        return [document.model_dump(mode="json") for document in signing.list_documents(status)]

    @app.get("/signing-requests/{document_id}")
    async def get_signing_request_endpoint(document_id: str, signing: SignedDocumentStore = Depends(get_signing)):
        try:
            return signing.get(document_id).model_dump(mode="json")
        except SigningRequestNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.post("/signing-requests/{document_id}/sign")
    async def sign_endpoint(document_id: str, request: SignRequest, http_request: Request,
                            templates: DocumentTemplateService = Depends(get_templates),
                            signing: SignedDocumentStore = Depends(get_signing)):
        ip_address = http_request.client.host if http_request.client else ""
        try:
            document = signing.get(document_id)
            template = templates.require_template(document.template_id)
            signed = signing.sign(document_id, template, request.signed_by, ip_address, request.fields)
        except (SigningRequestNotFoundError, TemplateNotFoundError) as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidSigningTransitionError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except (MissingSignatureFieldsError, InvalidSignatureImageError) as e:
            raise HTTPException(status_code=422, detail=str(e))
        return signed.model_dump(mode="json")

    @app.post("/signing-requests/{document_id}/expire")
    async def expire_endpoint(document_id: str, signing: SignedDocumentStore = Depends(get_signing)):
        try:
            return signing.expire(document_id).model_dump(mode="json")
        except SigningRequestNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidSigningTransitionError as e:
            raise HTTPException(status_code=409, detail=str(e))

    return app


app = create_app()


# =============================================================================
# Main
# =============================================================================
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
