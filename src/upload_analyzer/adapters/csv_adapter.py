from typing import List, Optional, Tuple

from upload_analyzer.canonical.table import RawTable, RowRecord
from upload_analyzer.observability.logger import log_event
from upload_analyzer.standards.analysis_thresholds import SAMPLE_SIZE
from upload_analyzer.utils.exceptions import (
    EmptyFileError,
    MalformedRowError,
    NoColumnsError,
)

CANDIDATE_DELIMITERS = [",", ";", "\t", "|"]
QUOTE = '"'
NUL = "\x00"


# ------------------------------------------------------------------
# Delimiter detection
# ------------------------------------------------------------------
def detect_delimiter(line: str) -> str:
    """
    Pick the candidate separator occurring most often in the line.
    Ties keep the earlier candidate, so comma wins; empty input -> comma.
    """
    best = ","
    best_count = 0
    for candidate in CANDIDATE_DELIMITERS:
        count = (line or "").count(candidate)
        if count > best_count:
            best = candidate
            best_count = count
    return best


# ------------------------------------------------------------------
# Quote-aware tokenizer
# ------------------------------------------------------------------
def tokenize_line(line: str, delimiter: str, line_number: Optional[int] = None) -> List[str]:
    """
    Split one CSV line into trimmed fields.

    - '"' toggles a quoted region
    - '""' inside a quoted region is a literal quote
    - the delimiter only separates fields outside quotes
    - a quoted region still open at end of line closes with the line

    Raises MalformedRowError when the line carries a NUL byte.
    """
    if NUL in line:
        where = f" at line {line_number}" if line_number is not None else ""
        raise MalformedRowError(
            f"Malformed CSV: line contains NUL{where}",
            line_number=line_number,
        )

    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


# ------------------------------------------------------------------
# CSV Adapter
# ------------------------------------------------------------------
class CSVAdapter:
    """
    CSV row parser.
    Responsibilities:
    - Decode bytes and drop blank lines
    - Detect delimiter from the header line
    - Tokenize header and data lines (quote aware)
    - Skip malformed data lines with a logged warning
    - Bounded (sampled) and full parsing
    DOES NOT:
    - Infer types
    - Deduplicate or repair column names
    """

    FORMAT = "csv"

    def __init__(self, sample_size: int = SAMPLE_SIZE):
        if sample_size < 0:
            raise ValueError("sample_size must be >= 0")
        self.sample_size = sample_size

    # --------------------------------------------------
    # REQUIRED BY ROUTER
    # --------------------------------------------------
    def parse_bounded(self, content: bytes) -> RawTable:
        """
        Header plus at most sample_size data lines.
        total_rows still counts every data line in the file.
        """
        lines = self._read_clean_lines(content)
        headers, delimiter = self._parse_header(lines)
        data_lines = lines[1:]
        rows, warnings = self._parse_rows(
            headers, data_lines[: self.sample_size], delimiter
        )
        log_event("CSV_PARSED", {
            "mode": "bounded",
            "columns": len(headers),
            "sampled_rows": len(rows),
            "total_rows": len(data_lines),
        })
        return RawTable(
            headers=tuple(headers),
            rows=tuple(rows),
            total_rows=len(data_lines),
            source_format=self.FORMAT,
            delimiter=delimiter,
            warnings=tuple(warnings),
        )

    def parse_full(self, content: bytes) -> RawTable:
        """
        Every data line; total_rows is the number of rows parsed.
        """
        lines = self._read_clean_lines(content)
        headers, delimiter = self._parse_header(lines)
        rows, warnings = self._parse_rows(headers, lines[1:], delimiter)
        log_event("CSV_PARSED", {
            "mode": "full",
            "columns": len(headers),
            "total_rows": len(rows),
            "skipped_rows": len(warnings),
        })
        return RawTable(
            headers=tuple(headers),
            rows=tuple(rows),
            total_rows=len(rows),
            source_format=self.FORMAT,
            delimiter=delimiter,
            warnings=tuple(warnings),
        )

    # --------------------------------------------------
    # Internal helpers
    # --------------------------------------------------
    def _read_clean_lines(self, content: bytes) -> List[str]:
        text = content.decode("utf-8-sig", errors="replace")
        lines = [line.strip() for line in text.split("\n")]
        lines = [line for line in lines if line]
        if not lines:
            raise EmptyFileError("CSV file is empty")
        return lines

    def _parse_header(self, lines: List[str]) -> Tuple[List[str], str]:
        delimiter = detect_delimiter(lines[0])
        try:
            headers = tokenize_line(lines[0], delimiter, line_number=1)
        except MalformedRowError as e:
            raise NoColumnsError(f"Could not read the CSV header: {e}") from e
        if not any(headers):
            raise NoColumnsError("Could not identify any columns in the CSV header")
        return headers, delimiter

    def _parse_rows(
        self,
        headers: List[str],
        data_lines: List[str],
        delimiter: str,
    ) -> Tuple[List[RowRecord], List[str]]:
        rows: List[RowRecord] = []
        warnings: List[str] = []

        for offset, line in enumerate(data_lines):
            line_number = offset + 2  # header is line 1
            try:
                values = tokenize_line(line, delimiter, line_number=line_number)
            except MalformedRowError as e:
                message = f"Skipped line {line_number}: {e}"
                warnings.append(message)
                log_event("ROW_PARSE_WARNING", {
                    "line_number": line_number,
                    "message": str(e),
                })
                continue
            rows.append(RowRecord(headers, values))

        return rows, warnings
