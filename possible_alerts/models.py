"""
Data Models

Elements discovered from the query service and the per-element results
returned by the alert discovery endpoint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# Element fields copied into every report record, keyed by report column name
RECORD_FIELDS = {
    "NodeID": "node_id",
    "Caption": "caption",
    "IPAddress": "ip_address",
    "Vendor": "vendor",
    "SubElementID": "sub_element_id",
    "SubElementName": "sub_element_name",
    "SubElementType": "sub_element_type",
    "SubElementTypeDescription": "sub_element_type_description",
}


class ElementState(str, Enum):
    """Processing state of one element during a report run."""

    PENDING = "pending"
    QUERIED = "queried"
    HAS_ALERTS = "has_alerts"
    NO_ALERTS = "no_alerts"
    FAILED = "failed"


def _text(value: Any) -> Any:
    return "" if value is None else value


@dataclass(frozen=True)
class Element:
    """A monitorable node, interface or volume."""

    node_id: Any
    caption: str
    ip_address: str
    vendor: str
    uri: str
    instance_type: str
    sub_element_id: Any = ""
    sub_element_name: str = ""
    sub_element_type: str = ""
    sub_element_type_description: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Element":
        """Build an element from a discovery query row."""
        return cls(
            node_id=row["NodeID"],
            caption=_text(row.get("Caption")),
            ip_address=_text(row.get("IPAddress")),
            vendor=_text(row.get("Vendor")),
            uri=row["Uri"],
            instance_type=row["InstanceType"],
            sub_element_id=_text(row.get("SubElementID")),
            sub_element_name=_text(row.get("SubElementName")),
            sub_element_type=_text(row.get("SubElementType")),
            sub_element_type_description=_text(row.get("SubElementTypeDescription")),
        )

    @property
    def is_node(self) -> bool:
        return self.sub_element_type == ""

    def to_record(self) -> dict[str, Any]:
        """Identity and sub-element fields, in report column order."""
        return {name: getattr(self, attr) for name, attr in RECORD_FIELDS.items()}


@dataclass
class AlertLookupResult:
    """Tabular response of the alert discovery endpoint."""

    total_rows: int
    columns: list[str] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def has_alerts(self) -> bool:
        return self.total_rows > 0

    def iter_rows(self):
        """Yield each alert row as a column-name -> value mapping."""
        for values in self.rows:
            yield {
                column: values[index] if index < len(values) else None
                for index, column in enumerate(self.columns)
            }


@dataclass
class ElementOutcome:
    """Terminal state of one element after its lookup."""

    uri: str
    state: ElementState
    record_count: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "state": self.state.value,
            "record_count": self.record_count,
            "error": self.error,
        }
