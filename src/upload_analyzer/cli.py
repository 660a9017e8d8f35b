import argparse
import json
import os
import shutil
from typing import List

from upload_analyzer.canonical.field import DataTypeAdjustment
from upload_analyzer.canonical.schema import AnalysisResult
from upload_analyzer.config import AnalyzerSettings, load_settings, settings_from_env
from upload_analyzer.input.uploaded_file import UploadedFile
from upload_analyzer.outputs.analysis_json_exporter import AnalysisJSONExporter
from upload_analyzer.outputs.dataset_sink import FileDatasetSink
from upload_analyzer.router import analyze, analyze_full, commit, next_status
from upload_analyzer.utils.exceptions import AnalysisError


class C:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    MAGENTA = "\033[35m"


def cprint(text: str, color: str = C.RESET, bold: bool = False):
    prefix = (C.BOLD if bold else "") + color
    print(f"{prefix}{text}{C.RESET}")


def _clean_output_dir(path: str) -> None:
    if not os.path.isdir(path):
        return
    for name in os.listdir(path):
        full = os.path.join(path, name)
        if os.path.isfile(full) or os.path.islink(full):
            os.remove(full)
        elif os.path.isdir(full):
            shutil.rmtree(full)


def _load_adjustments(path: str) -> List[DataTypeAdjustment]:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, list):
        raise ValueError("Adjustments file must contain a JSON list")
    return [DataTypeAdjustment.from_dict(item) for item in payload]


def _build_settings(args: argparse.Namespace) -> AnalyzerSettings:
    settings = load_settings(args.config) if args.config else AnalyzerSettings()
    settings = settings_from_env(settings)
    if args.sample_size is not None:
        settings = settings.merge({"sample_size": args.sample_size})
    return settings


def _print_summary(result: AnalysisResult) -> None:
    cprint(
        f"[INFO] Format={result.source_format}  Rows={result.total_rows}  "
        f"Columns={result.total_columns}  Mode={result.mode}",
        C.DIM,
    )
    print()
    cprint("[COLUMNS]", C.MAGENTA, bold=True)
    for report in result.column_reports:
        color = C.GREEN if report.confidence >= result.adjustment_threshold and not report.issues else C.YELLOW
        cprint(
            f"  {report.index:>3}  {report.name:<30} {report.suggested_type.value:<8} "
            f"{report.confidence:>6.0%}  nulls={report.null_count} unique={report.unique_count}",
            color,
        )
        for issue in report.issues:
            cprint(f"         - {issue}", C.DIM)

    if result.integrity_issues:
        print()
        cprint("[WARNING] Integrity issues", C.YELLOW, bold=True)
        for issue in result.integrity_issues:
            cprint(f"  - {issue}", C.YELLOW)

    if result.warnings:
        print()
        cprint("[WARNING] Skipped rows", C.YELLOW, bold=True)
        for warning in result.warnings:
            cprint(f"  - {warning}", C.YELLOW)

    print()
    status = next_status(result)
    cprint(f"[STATUS] {status}", C.YELLOW if result.needs_adjustment else C.GREEN, bold=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload Analyzer CLI")

    parser.add_argument("--file", required=True, help="CSV / Excel file to analyze")
    parser.add_argument("--config", help="Path to YAML settings file")
    parser.add_argument(
        "--mode",
        default="preview",
        choices=["preview", "full"],
        help="Sampled preview or full-file analysis",
    )
    parser.add_argument("--sample-size", type=int, help="Rows sampled in preview mode")
    parser.add_argument("--output-dir", default="artifacts")
    parser.add_argument("--clean-output-dir", action="store_true")
    parser.add_argument("--include-rows", action="store_true", help="Write parsed rows to analysis.json")
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Persist the dataset under <output-dir>/datasets",
    )
    parser.add_argument("--adjustments", help="JSON file with column type adjustments (used with --commit)")
    parser.add_argument("--name", help="Dataset name (used with --commit)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)
        if args.clean_output_dir:
            _clean_output_dir(args.output_dir)

    try:
        settings = _build_settings(args)
        upload = UploadedFile.from_path(args.file)

        cprint("\n[START] Analysis started", C.BLUE, bold=True)
        cprint(f"[INFO] File={upload.name}  Size={upload.size} bytes", C.DIM)

        if args.mode == "full":
            result = analyze_full(upload, settings)
        else:
            result = analyze(upload, settings)
        _print_summary(result)

        if args.output_dir:
            target = os.path.join(args.output_dir, "analysis.json")
            AnalysisJSONExporter(result, include_rows=args.include_rows).export_to_file(target)
            cprint(f"\n[DONE] Analysis written to: {target}", C.GREEN, bold=True)

        if args.commit:
            adjustments = _load_adjustments(args.adjustments) if args.adjustments else []
            sink = FileDatasetSink(os.path.join(args.output_dir or ".", "datasets"))
            dataset_id = commit(upload, sink, adjustments=adjustments, settings=settings, name=args.name)
            cprint(f"[COMMIT] Dataset {dataset_id} confirmed", C.CYAN, bold=True)

        cprint("[COMPLETE] Analysis completed", C.GREEN, bold=True)

    except (AnalysisError, ValueError, OSError) as e:
        cprint("\n[FAILED] Analysis failed.", C.RED, bold=True)
        cprint(f"{type(e).__name__}: {e}", C.RED)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
