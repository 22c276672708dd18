"""Generation endpoints: streaming and one-shot."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from ...core import UpstreamError
from ...models import GenerationRequest, GenerationResponse
from ...services import get_generation_service

router = APIRouter(tags=["Generation"])

NDJSON_MEDIA_TYPE = "application/x-ndjson; charset=utf-8"
UPSTREAM_FAILED = "调用上游模型接口失败"


def _upstream_message(error: UpstreamError) -> str:
    if error.body:
        return error.body
    if error.status_code is not None:
        return f"{UPSTREAM_FAILED}，状态码 {error.status_code}"
    return UPSTREAM_FAILED


@router.post("/generate-stream")
async def generate_stream(request: GenerationRequest):
    """Stream a generation as NDJSON.

    Each line is ``{"type": "reasoning"|"content", "delta": "..."}``. Deltas
    of the same type concatenate, in arrival order, to the full text.

    An upstream failure before the first byte is answered with 502 and the
    upstream's error text. A failure mid-stream simply ends the stream.
    """
    service = get_generation_service()

    try:
        events = await service.open_event_stream(request)
    except UpstreamError as e:
        return PlainTextResponse(_upstream_message(e), status_code=502)

    return StreamingResponse(
        events,
        media_type=NDJSON_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/generate", response_model=GenerationResponse)
async def generate(request: GenerationRequest):
    """Generate without streaming; returns the final text only."""
    service = get_generation_service()

    try:
        content = await service.generate(request)
    except UpstreamError as e:
        return JSONResponse(
            status_code=502,
            content={
                "error": UPSTREAM_FAILED,
                "status": e.status_code,
                "details": e.body,
            },
        )

    return GenerationResponse(content=content)
