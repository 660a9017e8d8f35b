from datetime import datetime, timezone
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple
import re

from upload_analyzer.canonical.field import TypeTag
from upload_analyzer.standards.analysis_thresholds import (
    MIN_CONFIDENCE,
    REVIEW_CONFIDENCE,
)

EMPTY_COLUMN_ISSUE = "Empty column"
LOW_CONFIDENCE_ISSUE = "Low confidence for automatic type detection"

NUMBER_PATTERN = re.compile(r"^-?\d+(\.\d+)?$", re.ASCII)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[1-9]\d{0,15}$", re.ASCII)
PHONE_FILLER_PATTERN = re.compile(r"[\s\-()]")

BOOLEAN_TOKENS = {"true", "false", "0", "1", "sim", "não", "yes", "no"}

DATE_FORMATS = (
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%b %d %Y",
    "%b %d, %Y",
    "%d %b %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%d %B %Y",
    "%a %b %d %Y",
)


class TypeInference(NamedTuple):
    type: TypeTag
    confidence: float
    issues: List[str]


def _is_number(value: str) -> bool:
    """
    Optional leading minus, integer or decimal. No exponent, no separators.
    """
    return NUMBER_PATTERN.fullmatch(value) is not None


def parse_datetime(value: str) -> Optional[datetime]:
    """
    Generic date/time parser.
    ISO-8601 first, then common day/month/year and month-name layouts.
    Returns None when nothing matches.
    """
    v = value.strip()
    if not v:
        return None

    iso = v[:-1] + "+00:00" if v.endswith(("Z", "z")) else v
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(v, fmt)
        except ValueError:
            continue
    return None


def _is_date(value: str) -> bool:
    """
    True when the value parses to a valid, non-zero timestamp.
    Naive values are read as UTC.
    """
    parsed = parse_datetime(value)
    if parsed is None:
        return False
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.timestamp() != 0
    except (OverflowError, OSError, ValueError):
        return False


def _is_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def _is_phone(value: str) -> bool:
    """
    Digits with optional leading '+', ignoring spaces, hyphens and parentheses.
    """
    cleaned = PHONE_FILLER_PATTERN.sub("", value)
    return bool(cleaned) and PHONE_PATTERN.fullmatch(cleaned) is not None


def _is_boolean(value: str) -> bool:
    return value.lower() in BOOLEAN_TOKENS


# Evaluation order doubles as the tie-break order
CANDIDATES: Tuple[Tuple[TypeTag, Callable[[str], bool]], ...] = (
    (TypeTag.NUMBER, _is_number),
    (TypeTag.DATE, _is_date),
    (TypeTag.EMAIL, _is_email),
    (TypeTag.PHONE, _is_phone),
    (TypeTag.BOOLEAN, _is_boolean),
)


def score_candidates(values: Sequence[str]) -> List[Tuple[TypeTag, float]]:
    """
    Ratio of values matching each candidate type, in evaluation order.
    """
    total = len(values)
    if total == 0:
        return [(tag, 0.0) for tag, _ in CANDIDATES]
    return [
        (tag, sum(1 for v in values if matcher(v)) / total)
        for tag, matcher in CANDIDATES
    ]


def classify_values(
    values: Sequence[str],
    min_confidence: float = MIN_CONFIDENCE,
    review_confidence: float = REVIEW_CONFIDENCE,
) -> TypeInference:
    """
    Suggest a column type from its non-empty values.

    - Each candidate scores matches / total
    - Highest score wins; earlier candidate wins ties
    - Winner below min_confidence -> TEXT at confidence 1.0 with an issue
    - Winner below review_confidence keeps its type but gets a review note
    - No values at all -> TEXT at confidence 1.0, "Empty column"
    """
    values = [str(v).strip() for v in values if v is not None]
    values = [v for v in values if v]

    if not values:
        return TypeInference(TypeTag.TEXT, 1.0, [EMPTY_COLUMN_ISSUE])

    scores = score_candidates(values)
    best_tag, best_confidence = scores[0]
    for tag, confidence in scores[1:]:
        if confidence > best_confidence:
            best_tag, best_confidence = tag, confidence

    issues: List[str] = []

    if best_confidence < min_confidence:
        issues.append(LOW_CONFIDENCE_ISSUE)
        return TypeInference(TypeTag.TEXT, 1.0, issues)

    if best_confidence < review_confidence:
        percent = int(best_confidence * 100 + 0.5)
        issues.append(f"Confidence {percent}% for type {best_tag.value}")

    return TypeInference(best_tag, best_confidence, issues)
