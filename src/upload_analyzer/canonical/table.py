from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple


class RowRecord(Mapping):
    """
    Ordered header -> raw string mapping for one parsed row.

    Values are stored positionally next to the header tuple, so a column
    can always be read by its index even when header names repeat.
    Lookup by name returns the first column carrying that name.
    """

    __slots__ = ("_headers", "_values")

    def __init__(self, headers: Sequence[str], values: Sequence[str]):
        headers = tuple(headers)
        values = tuple(values)
        if len(values) < len(headers):
            values = values + ("",) * (len(headers) - len(values))
        self._headers = headers
        self._values = values[: len(headers)]

    @property
    def headers(self) -> Tuple[str, ...]:
        return self._headers

    @property
    def values_list(self) -> Tuple[str, ...]:
        return self._values

    def value_at(self, index: int) -> str:
        return self._values[index]

    def __getitem__(self, key: str) -> str:
        for idx, header in enumerate(self._headers):
            if header == key:
                return self._values[idx]
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        seen = set()
        for header in self._headers:
            if header not in seen:
                seen.add(header)
                yield header

    def __len__(self) -> int:
        return len(set(self._headers))

    def __eq__(self, other) -> bool:
        if isinstance(other, RowRecord):
            return self._headers == other._headers and self._values == other._values
        return super().__eq__(other)

    def __hash__(self):
        return hash((self._headers, self._values))

    def __repr__(self) -> str:
        return f"RowRecord({dict(self)!r})"

    def to_dict(self) -> Dict[str, str]:
        return dict(self.items())


@dataclass(frozen=True)
class RawTable:
    """
    Parsed file content: headers plus row records.

    Produced fresh by an adapter for every analysis call and never
    mutated afterwards.

    total_rows:
    - bounded parse: number of data rows in the whole file
    - full parse: number of successfully parsed rows
    """
    headers: Tuple[str, ...]
    rows: Tuple[RowRecord, ...]
    total_rows: int
    source_format: str
    delimiter: Optional[str] = None
    # Messages for data rows skipped during parsing
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_columns(self) -> int:
        return len(self.headers)

    def column_values(self, index: int) -> List[str]:
        return [row.value_at(index) for row in self.rows]
