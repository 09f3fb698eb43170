"""Report upload endpoints."""

import logging

from fastapi import APIRouter, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from webx_crm.core.config import settings
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.services.reports import ReportError, parse_seo_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _failure(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@router.post("/seo/preview")
@limiter.limit(DEFAULT_LIMIT)
async def preview_seo_report(
    request: Request,
    file: UploadFile | None = File(None),
) -> JSONResponse:
    """Parse an uploaded SEO CSV and return its report sections."""
    if file is None:
        return _failure("No file uploaded")

    content = await file.read(settings.REPORT_UPLOAD_MAX_BYTES + 1)
    if len(content) > settings.REPORT_UPLOAD_MAX_BYTES:
        return _failure("File too large", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)

    try:
        report = parse_seo_csv(content)
    except ReportError as e:
        logger.warning("Rejected SEO upload %s: %s", file.filename, e)
        return _failure(str(e))

    return JSONResponse(content={"success": True, "report": report.to_dict()})
