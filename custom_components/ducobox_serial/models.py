"""Entity tree produced by one scan of a Ducobox controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Sequence, Union

MeasurementValue = Union[str, int, Decimal]


@dataclass(frozen=True)
class Measurement:
    """One timestamped observation."""

    timestamp: datetime
    value: MeasurementValue

    def as_dict(self) -> Dict[str, Any]:
        value: Any = self.value
        if isinstance(value, Decimal):
            value = float(value)
        return {"timestamp": self.timestamp.isoformat(), "value": value}


@dataclass
class Thing:
    """A device or one of its measurable channels.

    Children are owned exclusively by their parent and live only as long as
    the scan result that produced them.
    """

    id: str
    type: str
    measurement_unit: str | None = None
    measurement_possible_values: Sequence[str] | None = None
    measurements: List[Measurement] = field(default_factory=list)
    children: List["Thing"] = field(default_factory=list)

    def add_child(self, child: "Thing") -> "Thing":
        self.children.append(child)
        return child

    def record(self, timestamp: datetime, value: MeasurementValue) -> None:
        self.measurements.append(Measurement(timestamp, value))

    @property
    def latest(self) -> MeasurementValue | None:
        if not self.measurements:
            return None
        return self.measurements[-1].value

    def walk(self) -> Iterator["Thing"]:
        """Yield this thing and all of its descendants depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type}
        if self.measurement_unit is not None:
            data["measurementUnit"] = self.measurement_unit
        if self.measurement_possible_values is not None:
            data["measurementPossibleValues"] = list(self.measurement_possible_values)
        data["measurements"] = [m.as_dict() for m in self.measurements]
        data["children"] = [child.as_dict() for child in self.children]
        return data
