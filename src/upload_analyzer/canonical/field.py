from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Dict, Any, List


class TypeTag(str, Enum):
    """
    Closed set of column types the classifier can suggest.
    TEXT is the universal fallback.
    """
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    EMAIL = "email"
    PHONE = "phone"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in {tag.value for tag in cls}


@dataclass(frozen=True)
class ColumnReport:
    """
    Analysis of a single column.
    Index-aligned with RawTable.headers; immutable once produced.
    """
    name: str
    index: int
    suggested_type: TypeTag
    confidence: float           # 0..1
    sample_values: Tuple[str, ...] = ()
    null_count: int = 0
    unique_count: int = 0
    issues: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "index": self.index,
            "suggested_type": self.suggested_type.value,
            "confidence": self.confidence,
            "sample_values": list(self.sample_values),
            "null_count": self.null_count,
            "unique_count": self.unique_count,
            "issues": list(self.issues),
        }


@dataclass(frozen=True)
class DataTypeAdjustment:
    """
    User override of a column's suggested type, sent back at confirm time.
    """
    column_index: int
    column_name: str
    data_type: TypeTag
    is_required: bool = False

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DataTypeAdjustment":
        data_type = str(payload.get("data_type", "")).lower()
        if not TypeTag.is_valid(data_type):
            raise ValueError(
                f"Invalid data_type '{payload.get('data_type')}'. "
                f"Allowed: {[t.value for t in TypeTag]}"
            )
        return cls(
            column_index=int(payload["column_index"]),
            column_name=str(payload.get("column_name", "")),
            data_type=TypeTag(data_type),
            is_required=bool(payload.get("is_required", False)),
        )


@dataclass
class ColumnDefinition:
    """
    Column metadata record handed to the persistence layer.
    """
    name: str
    index: int
    data_type: TypeTag
    is_required: bool = False
    sample_values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "index": self.index,
            "data_type": self.data_type.value,
            "is_required": self.is_required,
            "sample_values": list(self.sample_values),
        }
