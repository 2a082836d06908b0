"""FastAPI application with subtitle API routes and OpenAPI docs.

WHY: External clients need an HTTP API to submit audio for subtitling,
poll for status, and download the results, plus a synchronous endpoint
for turning an existing transcript into subtitles. FastAPI provides
automatic OpenAPI documentation, request validation, and background
task support.

HOW: create_app() builds a FastAPI app with its own JobStore and a
transcription client factory on app.state, and mounts the module-level
router. POST /subtitles accepts a multipart upload plus layout fields,
creates a job, and runs transcription + formatting in the background.
POST /subtitles/render runs the core directly on a JSON transcript.

RULES:
- No module-level clients or stores; everything lives on app.state
- InvalidConfiguration → 400, InvalidTranscriptFormat → 422
- Uploaded file extensions are checked against SUPPORTED_FORMATS
- Background jobs catch all exceptions and mark the job failed
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, Any, Callable, Dict, List, Optional

from fastapi import (
    APIRouter,
    BackgroundTasks,
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
)
from fastapi.responses import Response

from whisper_srt import __version__
from whisper_srt.api.client import WhisperClient
from whisper_srt.config import SUPPORTED_FORMATS, Settings
from whisper_srt.core.compare import DEFAULT_COMPARER, get_comparer
from whisper_srt.core.errors import InvalidConfiguration, InvalidTranscriptFormat
from whisper_srt.core.generator import build_cues
from whisper_srt.core.ir import LayoutRules
from whisper_srt.core.schema import parse_transcript
from whisper_srt.core.segmenter import render_cues
from whisper_srt.formatters import DEFAULT_FORMATS, FORMATTERS
from whisper_srt.server.jobs import Job, JobStatus, JobStore
from whisper_srt.server.models import (
    ErrorResponse,
    FileInfo,
    FileListResponse,
    FormatInfo,
    HealthResponse,
    JobCreatedResponse,
    JobResponse,
    RenderRequest,
    RenderResponse,
)
from whisper_srt.timing import timed

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], WhisperClient]

_CLEANUP_INTERVAL_S = 300

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _job_to_response(job: Job) -> JobResponse:
    """Convert an internal Job dataclass to a JobResponse Pydantic model."""
    return JobResponse(
        id=job.id,
        status=job.status.value,
        filename=job.filename,
        created_at=job.created_at,
        config=job.config,
        error=job.error,
        output_files=job.output_files if job.output_files else None,
    )


def _store(request: Request) -> JobStore:
    return request.app.state.job_store


def _get_job_or_404(request: Request, job_id: str) -> Job:
    job = _store(request).get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return job


def _require_completed(job: Job) -> None:
    if job.status != JobStatus.COMPLETED:
        raise HTTPException(
            status_code=409,
            detail="Job is not completed (current status: {}).".format(job.status.value),
        )


def _validate_file_extension(filename: str) -> None:
    """Raise HTTPException if the file extension is not supported."""
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_FORMATS))
            ),
        )


def _build_rules(words_per_line: int, punctuation: bool, consider_punctuation: bool) -> LayoutRules:
    """Build LayoutRules, turning InvalidConfiguration into a 400."""
    try:
        return LayoutRules(
            max_words_per_cue=words_per_line,
            break_on_punctuation=consider_punctuation,
            align_punctuation=punctuation,
        )
    except InvalidConfiguration as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _parse_output_formats(output_formats: Optional[str]) -> Optional[List[str]]:
    if not output_formats:
        return None
    format_keys = [f.strip() for f in output_formats.split(",") if f.strip()]
    for key in format_keys:
        if key not in FORMATTERS:
            raise HTTPException(
                status_code=400,
                detail="Unknown output format '{}'. Available: {}".format(
                    key, ", ".join(sorted(FORMATTERS))
                ),
            )
    return format_keys


def _infer_media_type(filename: str) -> str:
    """Infer MIME type from filename extension."""
    ext = Path(filename).suffix.lower()
    mapping = {
        ".srt": "application/x-subrip",
        ".json": "application/json",
        ".txt": "text/plain",
    }
    return mapping.get(ext, "application/octet-stream")


# ---------------------------------------------------------------------------
# Background pipeline
# ---------------------------------------------------------------------------


async def _run_subtitle_job(
    job_id: str,
    store: JobStore,
    client_factory: ClientFactory,
) -> None:
    """Transcribe a job's upload and write its output files.

    RULES:
    - Status goes pending → transcribing → generating → completed
    - Any exception marks the job failed with the error message
    - Output files are named {stem}{suffix} inside the job's output_dir
    """
    job = store.get_job(job_id)
    if job is None:
        return

    config = job.config
    try:
        rules = LayoutRules(
            max_words_per_cue=config["words_per_line"],
            break_on_punctuation=config["consider_punctuation"],
            align_punctuation=config["punctuation"],
        )
        comparer = get_comparer(config.get("compare") or DEFAULT_COMPARER)
        format_keys = config.get("output_formats") or DEFAULT_FORMATS

        store.update_job(job_id, status=JobStatus.TRANSCRIBING)
        with timed("Transcription for job {}".format(job_id), logger):
            async with client_factory() as client:
                response = await client.transcribe(job.output_dir / job.filename)

        store.update_job(job_id, status=JobStatus.GENERATING)
        transcript = response.to_transcript()
        stem = Path(job.filename).stem
        output_filenames = []
        with timed("Subtitle generation for job {}".format(job_id), logger):
            for key in format_keys:
                formatter = FORMATTERS[key](comparer=comparer)
                for output in formatter.format(transcript, rules):
                    out_filename = "{}{}".format(stem, output.suffix)
                    (job.output_dir / out_filename).write_text(output.content, encoding="utf-8")
                    output_filenames.append(out_filename)

        store.update_job(job_id, status=JobStatus.COMPLETED, output_files=output_filenames)

    except Exception as exc:
        logger.exception("Subtitle pipeline failed for job %s", job_id)
        store.update_job(job_id, status=JobStatus.FAILED, error=str(exc))


def _run_subtitle_job_sync(job_id: str, store: JobStore, client_factory: ClientFactory) -> None:
    """Synchronous wrapper so BackgroundTasks can run the async pipeline."""
    asyncio.run(_run_subtitle_job(job_id, store, client_factory))


# ---------------------------------------------------------------------------
# Endpoints: Subtitles
# ---------------------------------------------------------------------------


@router.post(
    "/subtitles",
    response_model=JobCreatedResponse,
    status_code=201,
    tags=["subtitles"],
    summary="Submit a subtitle job",
    description=(
        "Upload an audio or video file with layout settings. Returns a job ID "
        "immediately; transcription and subtitle generation run in the background. "
        "Poll GET /subtitles/{id} for status updates."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid file type or layout settings"},
        429: {"model": ErrorResponse, "description": "Too many concurrent jobs"},
    },
)
async def create_subtitle_job(
    request: Request,
    background_tasks: BackgroundTasks,
    file: Annotated[UploadFile, File(description="Audio or video file (.mp3, .mp4, .wav).")],
    words_per_line: Annotated[int, Form(description="Maximum words per cue (1-5).")],
    punctuation: Annotated[
        bool,
        Form(description="Align transcript words (with punctuation) against word tokens."),
    ] = False,
    consider_punctuation: Annotated[
        bool,
        Form(description="Close a cue after '.', '!' or '?'. Requires punctuation."),
    ] = False,
    compare: Annotated[
        str,
        Form(description="Comparison strategy for alignment: 'normalized' or 'raw'."),
    ] = DEFAULT_COMPARER,
    output_formats: Annotated[
        Optional[str],
        Form(description="Comma-separated output formats (srt, plain_text, word_timings). Defaults to srt."),
    ] = None,
) -> JobCreatedResponse:
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "upload").name
    _validate_file_extension(filename)
    _build_rules(words_per_line, punctuation, consider_punctuation)
    try:
        get_comparer(compare)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    format_keys = _parse_output_formats(output_formats)

    config: Dict[str, Any] = {
        "words_per_line": words_per_line,
        "punctuation": punctuation,
        "consider_punctuation": consider_punctuation,
        "compare": compare,
        "output_formats": format_keys,
    }

    store = _store(request)
    try:
        job = store.create_job(filename=filename, config=config)
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc))

    (job.output_dir / filename).write_bytes(await file.read())

    background_tasks.add_task(
        _run_subtitle_job_sync,
        job.id,
        store,
        request.app.state.client_factory,
    )

    return JobCreatedResponse(id=job.id, status=job.status.value, filename=job.filename)


@router.post(
    "/subtitles/render",
    response_model=RenderResponse,
    tags=["subtitles"],
    summary="Render subtitles from a transcript",
    description=(
        "Turn a transcript with word timestamps (Whisper verbose_json) into a "
        "subtitle body synchronously. No audio, no background job."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid layout settings"},
        422: {"model": ErrorResponse, "description": "Invalid transcript format"},
    },
)
async def render_subtitles(body: RenderRequest) -> RenderResponse:
    rules = _build_rules(body.words_per_line, body.punctuation, body.consider_punctuation)
    try:
        transcript = parse_transcript(body.transcript)
    except InvalidTranscriptFormat as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    cues = build_cues(transcript, rules, comparer=get_comparer(body.compare.value))
    return RenderResponse(content=render_cues(cues), cue_count=len(cues))


@router.get(
    "/subtitles/{job_id}",
    response_model=JobResponse,
    tags=["subtitles"],
    summary="Get subtitle job status",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def get_subtitle_job(request: Request, job_id: str) -> JobResponse:
    return _job_to_response(_get_job_or_404(request, job_id))


@router.get(
    "/subtitles/{job_id}/files",
    response_model=FileListResponse,
    tags=["subtitles"],
    summary="List output files for a completed job",
    responses={
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Job not yet completed"},
    },
)
async def list_subtitle_files(request: Request, job_id: str) -> FileListResponse:
    job = _get_job_or_404(request, job_id)
    _require_completed(job)

    files = []
    for fname in job.output_files:
        fpath = job.output_dir / fname
        if fpath.exists():
            files.append(FileInfo(
                filename=fname,
                media_type=_infer_media_type(fname),
                size=fpath.stat().st_size,
            ))

    return FileListResponse(job_id=job.id, files=files)


@router.get(
    "/subtitles/{job_id}/files/{filename}",
    tags=["subtitles"],
    summary="Download a single output file",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid filename"},
        404: {"model": ErrorResponse, "description": "Job or file not found"},
        409: {"model": ErrorResponse, "description": "Job not yet completed"},
    },
)
async def download_subtitle_file(request: Request, job_id: str, filename: str) -> Response:
    if "/" in filename or "\\" in filename or ".." in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    job = _get_job_or_404(request, job_id)
    _require_completed(job)

    fpath = job.output_dir / filename
    if filename not in job.output_files or not fpath.exists():
        raise HTTPException(
            status_code=404,
            detail="File '{}' not found in job output files.".format(filename),
        )

    return Response(
        content=fpath.read_bytes(),
        media_type=_infer_media_type(filename),
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


@router.delete(
    "/subtitles/{job_id}",
    status_code=204,
    tags=["subtitles"],
    summary="Delete a subtitle job",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def delete_subtitle_job(request: Request, job_id: str) -> Response:
    if not _store(request).delete_job(job_id):
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Formats and health
# ---------------------------------------------------------------------------


@router.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
)
async def list_formats() -> List[FormatInfo]:
    return [
        FormatInfo(key=key, name=formatter_cls().name, suffix=formatter_cls.suffix)
        for key, formatter_cls in sorted(FORMATTERS.items())
    ]


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    settings: Optional[Settings] = None,
    client_factory: Optional[ClientFactory] = None,
    job_store: Optional[JobStore] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Connection settings for the default client factory.
            Loaded from the environment on first use when omitted.
        client_factory: Zero-argument callable returning a WhisperClient.
            Tests pass a fake here.
        job_store: Store to use; a fresh JobStore by default.
    """
    store = job_store or JobStore()

    if client_factory is None:
        client_factory = functools.partial(WhisperClient, settings)

    async def _periodic_cleanup() -> None:
        while True:
            await asyncio.sleep(_CLEANUP_INTERVAL_S)
            store.cleanup_expired()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = asyncio.create_task(_periodic_cleanup())
        yield
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        store.clear()

    app = FastAPI(
        lifespan=lifespan,
        title="Whisper SRT API",
        description=(
            "Generate word-aligned subtitle files from audio/video via Whisper, "
            "or from an existing transcript with word timestamps."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.job_store = store
    app.state.client_factory = client_factory
    app.include_router(router)
    return app


def run_api() -> None:
    """Entry point for the whisper-srt-api console script."""
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
