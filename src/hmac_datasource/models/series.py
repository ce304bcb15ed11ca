"""
Output series model.

A flat, time-indexed series handed back to the caller for charting.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Tuple

from ..core import constants
from ..core.date_utils import DateUtils


@dataclass
class OutputSeries:
    """Named series of (timestamp, value) points held as parallel lists."""

    name: str
    timestamps: List[datetime] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def __post_init__(self):
        if len(self.timestamps) != len(self.values):
            raise ValueError(
                f"Series '{self.name}' has {len(self.timestamps)} timestamps "
                f"but {len(self.values)} values"
            )

    def __len__(self) -> int:
        return len(self.values)

    def append(self, timestamp: datetime, value: float) -> None:
        self.timestamps.append(timestamp)
        self.values.append(value)

    def points(self) -> List[Tuple[datetime, float]]:
        return list(zip(self.timestamps, self.values))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with epoch-millisecond timestamps, keyed by field name."""
        return {
            "name": self.name,
            "fields": {
                constants.TIME_FIELD: [DateUtils.to_epoch_millis(t) for t in self.timestamps],
                constants.VALUE_FIELD: list(self.values),
            },
        }
