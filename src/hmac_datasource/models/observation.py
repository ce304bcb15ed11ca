"""
Observation data models.

Contains the leaf datum of the resource hierarchy and the mapping shape of
the batch observations response.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

from ..core.date_utils import DateUtils
from ..exceptions import DecodeError
from .fields import get_float, get_int, require_list, require_object

# Batch observations response: datastream id -> undecoded observation array.
# Keys are opaque identifier strings; never assume they are numeric or
# ordered. Values stay raw so one malformed entry can be skipped on its own.
ObservationsByDatastream = Dict[str, Any]


@dataclass(frozen=True)
class Observation:
    """One timestamped sample of a datastream."""

    value: float
    phenomenon_time: int  # epoch milliseconds

    @classmethod
    def from_dict(cls, data: Any) -> "Observation":
        """
        Decode an observation.

        A null value decodes as NaN so it is dropped like any other
        non-numeric sample.

        Raises:
            DecodeError: If a field has the wrong type, or phenomenonTime is
                         missing or outside the representable range
        """
        data = require_object(data, "observation")
        phenomenon_time = get_int(data, "phenomenonTime")
        try:
            DateUtils.from_epoch_millis(phenomenon_time)
        except ValueError as e:
            raise DecodeError(f"field 'phenomenonTime': {e}") from e
        return cls(
            value=get_float(data, "value", default=math.nan),
            phenomenon_time=phenomenon_time,
        )

    @property
    def is_valid(self) -> bool:
        return not math.isnan(self.value)

    @property
    def timestamp(self) -> datetime:
        return DateUtils.from_epoch_millis(self.phenomenon_time)


def decode_observations(data: Any) -> List[Observation]:
    """
    Decode one datastream's observation array.

    Raises:
        DecodeError: If the array or any element is malformed
    """
    return [Observation.from_dict(item) for item in require_list(data, "observations")]
