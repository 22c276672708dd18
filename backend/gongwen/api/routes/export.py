"""Export endpoint: plain text to a formatted Word document."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field, field_validator

from ...config import get_settings
from ...core import get_logger
from ...document import DOCX_MEDIA_TYPE, content_disposition, derive_export_basename, transcode_to_docx

logger = get_logger(__name__)

router = APIRouter(tags=["Export"])

EXPORT_FAILED = "生成 Word 文件失败"


class ExportRequest(BaseModel):
    content: str = Field(..., min_length=1)
    filename: str | None = None

    @field_validator("content")
    @classmethod
    def _check_content_length(cls, value: str) -> str:
        limit = get_settings().max_export_chars
        if len(value) > limit:
            raise ValueError(f"content exceeds {limit} characters")
        return value


@router.post("/export-docx")
def export_docx(req: ExportRequest) -> Response:
    """Convert finished plain text to .docx and return it as a download.

    Runs in the threadpool: transcoding is synchronous CPU work.
    """
    settings = get_settings()
    basename = derive_export_basename(req.content, req.filename, settings.default_export_name)

    try:
        document, data = transcode_to_docx(req.content)
    except Exception as e:
        logger.error("Export failed", exc_info=True, error=e.__class__.__name__)
        raise HTTPException(status_code=500, detail=EXPORT_FAILED) from e

    logger.audit(
        action="export_completed",
        resource_type="document",
        content_length=len(req.content),
        paragraphs=len(document.paragraphs),
        size_bytes=len(data),
        has_title=document.title is not None,
    )

    return Response(
        content=data,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(basename)},
    )
