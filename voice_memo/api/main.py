import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from voice_memo.api.models import ErrorResponse
from voice_memo.api.routes.analyze import router as analyze_router
from voice_memo.api.routes.jobs import router as jobs_router
from voice_memo.config import get_settings
from voice_memo.errors import ErrorCode, VoiceMemoError

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Voice Memo Intelligence API",
    description="Task extraction and chunked summarization for voice memo transcripts",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyze_router)
app.include_router(jobs_router)

_STATUS_BY_CODE = {
    ErrorCode.INVALID_INPUT: 422,
    ErrorCode.QUEUE_FULL: 429,
    ErrorCode.SUMMARIZATION_UNAVAILABLE: 503,
    ErrorCode.UPSTREAM_TRANSCRIPTION_FAILED: 502,
}


@app.exception_handler(VoiceMemoError)
async def handle_voice_memo_error(request: Request, exc: VoiceMemoError) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 500),
        content=ErrorResponse(error=exc.message, code=exc.code).model_dump(mode="json"),
    )


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
