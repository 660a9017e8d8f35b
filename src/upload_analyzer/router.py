from typing import List, Mapping, Optional, Sequence

# ---------------- Input dispatch ----------------
from upload_analyzer.input.format_detector import FormatDetector
from upload_analyzer.input.uploaded_file import UploadedFile
from upload_analyzer.governance.adapter_registry import AdapterRegistry

# ---------------- Pipeline steps ----------------
from upload_analyzer.pipeline.column_analyzer import analyze_columns
from upload_analyzer.pipeline.integrity_validator import validate_data_integrity
from upload_analyzer.pipeline.adjustments import build_column_definitions

# ---------------- Governance ----------------
from upload_analyzer.governance.dataset_lifecycle import (
    DatasetStatus,
    ensure_transition,
    status_after_analysis,
)

# ---------------- Outputs ----------------
from upload_analyzer.canonical.field import ColumnReport, DataTypeAdjustment
from upload_analyzer.canonical.schema import AnalysisResult
from upload_analyzer.config import AnalyzerSettings
from upload_analyzer.outputs.dataset_sink import DatasetSink, iter_row_batches

# ---------------- Observability ----------------
from upload_analyzer.observability.logger import (log_event, generate_request_id, RequestTimer,)
from upload_analyzer.observability.audit_logger import AuditLogger
from upload_analyzer.utils.exceptions import AnalysisError

PREVIEW = "preview"
FULL = "full"


# ==========================================================
# ANALYSIS
# ==========================================================
def _run_analysis(upload: UploadedFile, settings: AnalyzerSettings, mode: str) -> AnalysisResult:
    """
    Format detection -> Row Parser -> Column Analyzer -> Integrity Validator
    """
    request_id = generate_request_id()
    timer = RequestTimer()

    log_event("ANALYSIS_STARTED", {
        "request_id": request_id,
        "file_name": upload.name,
        "file_size": upload.size,
        "mode": mode,
    })

    try:
        # --------------------------------------------------
        # Phase 1 – Format detection + Adapter dispatch
        # --------------------------------------------------
        input_format = FormatDetector(upload, max_file_size=settings.max_file_size).detect()
        adapter = AdapterRegistry.build(input_format, sample_size=settings.sample_size)

        # --------------------------------------------------
        # Phase 2 – Row parsing
        # --------------------------------------------------
        content = upload.read()
        if mode == FULL:
            table = adapter.parse_full(content)
        else:
            table = adapter.parse_bounded(content)

        # --------------------------------------------------
        # Phase 3 – Column analysis
        # --------------------------------------------------
        column_reports = analyze_columns(
            table.headers,
            table.rows,
            min_confidence=settings.min_confidence,
            review_confidence=settings.review_confidence,
            sample_values_limit=settings.sample_values_limit,
        )

        # --------------------------------------------------
        # Phase 4 – Integrity checks
        # --------------------------------------------------
        integrity_issues = validate(
            column_reports,
            table.rows,
            sparse_threshold=settings.sparse_row_threshold,
        )

    except AnalysisError as e:
        log_event("ANALYSIS_FAILED", {
            "request_id": request_id,
            "file_name": upload.name,
            "mode": mode,
            "error": type(e).__name__,
            "message": str(e),
        })
        raise

    for issue in integrity_issues:
        log_event("INTEGRITY_WARNING", {"request_id": request_id, "issue": issue})

    result = AnalysisResult(
        headers=table.headers,
        column_reports=tuple(column_reports),
        sample_rows=table.rows[: settings.preview_rows],
        total_rows=table.total_rows,
        total_columns=table.total_columns,
        rows=table.rows,
        integrity_issues=tuple(integrity_issues),
        warnings=table.warnings,
        source_format=table.source_format,
        file_name=upload.name,
        mode=mode,
        adjustment_threshold=settings.adjustment_confidence,
    )

    log_event("ANALYSIS_COMPLETED", {
        "request_id": request_id,
        "file_name": upload.name,
        "mode": mode,
        "format": table.source_format,
        "total_rows": result.total_rows,
        "total_columns": result.total_columns,
        "skipped_rows": len(table.warnings),
        "needs_adjustment": result.needs_adjustment,
        "duration_seconds": timer.duration(),
    })
    return result


def analyze(upload: UploadedFile, settings: Optional[AnalyzerSettings] = None) -> AnalysisResult:
    """
    Preview analysis: classify a bounded sample.
    total_rows / total_columns still describe the whole file.
    """
    return _run_analysis(upload, settings or AnalyzerSettings(), PREVIEW)


def analyze_full(upload: UploadedFile, settings: Optional[AnalyzerSettings] = None) -> AnalysisResult:
    """
    Full analysis: every row parsed and classified.
    """
    return _run_analysis(upload, settings or AnalyzerSettings(), FULL)


def validate(
    column_reports: Sequence[ColumnReport],
    rows: Sequence[Mapping[str, str]],
    sparse_threshold: Optional[float] = None,
) -> List[str]:
    """
    Structural integrity issues for an existing report.
    """
    if sparse_threshold is None:
        return validate_data_integrity(column_reports, rows)
    return validate_data_integrity(column_reports, rows, sparse_threshold=sparse_threshold)


def next_status(result: AnalysisResult) -> str:
    """
    Dataset status once analysis finishes.
    """
    return status_after_analysis(result.needs_adjustment)


# ==========================================================
# COMMIT
# ==========================================================
def _advance(sink: DatasetSink, dataset_id: str, current: str, target: str) -> str:
    status = ensure_transition(current, target)
    sink.update_status(dataset_id, status)
    return status


def commit(
    upload: UploadedFile,
    sink: DatasetSink,
    adjustments: Optional[Sequence[DataTypeAdjustment]] = None,
    settings: Optional[AnalyzerSettings] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> str:
    """
    Full analysis handed to the persistence boundary.

    Flow:
    create dataset -> analyzing -> (pending_adjustment | analyzed)
    -> save columns -> save rows in batches -> confirmed

    Any failure marks the dataset as error and re-raises.
    """
    settings = settings or AnalyzerSettings()
    adjustments = list(adjustments or [])
    request_id = generate_request_id()
    timer = RequestTimer()
    audit_logger = AuditLogger()

    dataset_id = sink.create_dataset(
        name=name or upload.name,
        file_name=upload.name,
        file_size=upload.size,
        total_rows=0,
        total_columns=0,
        description=description,
    )
    status = DatasetStatus.PENDING

    log_event("COMMIT_STARTED", {
        "request_id": request_id,
        "dataset_id": dataset_id,
        "file_name": upload.name,
    })
    sink.log(dataset_id, "info", "Starting file analysis")

    try:
        status = _advance(sink, dataset_id, status, DatasetStatus.ANALYZING)

        result = analyze_full(upload, settings)
        sink.update_totals(dataset_id, result.total_rows, result.total_columns)
        sink.log(
            dataset_id,
            "info",
            f"File analyzed: {result.total_rows} rows, {result.total_columns} columns",
        )
        for warning in result.warnings:
            sink.log(dataset_id, "warning", warning)
        for issue in result.integrity_issues:
            sink.log(dataset_id, "warning", issue)

        status = _advance(sink, dataset_id, status, next_status(result))

        columns = build_column_definitions(result.column_reports, adjustments)
        if adjustments:
            sink.log(dataset_id, "info", f"Applied adjustments to {len(adjustments)} columns")
        sink.save_columns(dataset_id, columns)

        sink.log(dataset_id, "info", f"Saving {len(result.rows)} rows...")
        start_index = 0
        for batch in iter_row_batches(result.rows, settings.row_batch_size):
            sink.save_rows(dataset_id, batch, start_index)
            start_index += len(batch)

        status = _advance(sink, dataset_id, status, DatasetStatus.CONFIRMED)
        sink.log(dataset_id, "info", "Dataset processed successfully")

    except Exception as e:
        sink.log(dataset_id, "error", f"Processing error: {e}")
        sink.update_status(dataset_id, ensure_transition(status, DatasetStatus.ERROR))
        log_event("COMMIT_FAILED", {
            "request_id": request_id,
            "dataset_id": dataset_id,
            "error": type(e).__name__,
            "message": str(e),
        })
        audit_logger.persist(audit_logger.build_record(
            request_id=request_id,
            action="DATASET_COMMIT_FAILED",
            dataset_id=dataset_id,
            file_name=upload.name,
            status=DatasetStatus.ERROR,
            error=str(e),
        ))
        raise

    log_event("COMMIT_COMPLETED", {
        "request_id": request_id,
        "dataset_id": dataset_id,
        "total_rows": len(result.rows),
        "duration_seconds": timer.duration(),
    })
    audit_logger.persist(audit_logger.build_record(
        request_id=request_id,
        action="DATASET_COMMIT",
        dataset_id=dataset_id,
        file_name=upload.name,
        status=status,
        total_rows=len(result.rows),
        total_columns=result.total_columns,
        adjusted_columns=len(adjustments),
    ))
    return dataset_id
