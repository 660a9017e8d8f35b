from fastapi import FastAPI, File, HTTPException, UploadFile

from upload_analyzer.config import settings_from_env
from upload_analyzer.input.uploaded_file import UploadedFile
from upload_analyzer.router import analyze, analyze_full, next_status
from upload_analyzer.utils.exceptions import (
    AnalysisError,
    FileTooLargeError,
    UnsupportedFormatError,
)

app = FastAPI(
    title="Upload Analyzer",
    version="1.0.0"
)


def _status_code(error: AnalysisError) -> int:
    if isinstance(error, UnsupportedFormatError):
        return 415
    if isinstance(error, FileTooLargeError):
        return 413
    return 400


async def _to_upload(file: UploadFile) -> UploadedFile:
    content = await file.read()
    return UploadedFile(
        name=file.filename or "",
        content=content,
        content_type=file.content_type,
    )


def _respond(result) -> dict:
    return {
        "success": True,
        "status": next_status(result),
        "result": result.to_dict(),
    }


def _fail(error: AnalysisError):
    # Analysis failures are client errors, not server crashes
    raise HTTPException(
        status_code=_status_code(error),
        detail={
            "status": "ERROR",
            "error": type(error).__name__,
            "message": str(error),
        }
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/upload/analyze")
async def analyze_upload(file: UploadFile = File(...)):
    upload = await _to_upload(file)
    try:
        return _respond(analyze(upload, settings_from_env()))
    except AnalysisError as e:
        _fail(e)


@app.post("/upload/analyze-full")
async def analyze_full_upload(file: UploadFile = File(...)):
    upload = await _to_upload(file)
    try:
        return _respond(analyze_full(upload, settings_from_env()))
    except AnalysisError as e:
        _fail(e)
