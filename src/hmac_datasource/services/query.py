"""
Observation query service.

Resolves a thing's datastreams, fetches their observations in one batch, and
folds them into named output series.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..exceptions import DecodeError
from ..models.observation import decode_observations
from ..models.query import TimeRange
from ..models.series import OutputSeries

if TYPE_CHECKING:
    from ..api import SensorAPI
    from ..core.cancellation import CancellationToken


def build_series(name: str, raw_observations: Any) -> Optional[OutputSeries]:
    """
    Build one output series from a datastream's raw observation array.

    NaN values are skipped. A series without any valid value is not a
    series at all.

    Args:
        name: Display name of the datastream
        raw_observations: Undecoded observation array

    Returns:
        The series, or None when no valid observation remains

    Raises:
        DecodeError: If the array is malformed
    """
    series = OutputSeries(name=name)
    for observation in decode_observations(raw_observations):
        if not observation.is_valid:
            continue
        series.append(observation.timestamp, observation.value)
    if not series:
        return None
    return series


class QueryPipeline:
    """Turn a thing id and a time range into output series."""

    def __init__(
        self,
        api_client: "SensorAPI",
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize query pipeline.

        Args:
            api_client: API client instance
            logger: Logger instance
        """
        self.api_client = api_client
        self.logger = logger or logging.getLogger(__name__)

    def run(
        self,
        thing_id: str,
        time_range: TimeRange,
        token: Optional["CancellationToken"] = None
    ) -> List[OutputSeries]:
        """
        Run the query for one thing.

        The logic is:
        1. Get the thing's datastreams and build an id -> name lookup
        2. Get observations for all of those ids in one call, even when there
           are none
        3. Build one series per entry, skipping entries that fail to decode
           and dropping series with no valid value

        The order of the returned series is not defined.

        Args:
            thing_id: Thing ID selected in the query editor
            time_range: Absolute range to query
            token: Cancellation token

        Returns:
            List of output series

        Raises:
            DatasourceError: If either remote call fails; QueryCancelled when
                             the token is cancelled
        """
        data_streams = self.api_client.get_datastreams(thing_id, token=token)

        # Rebuilt on every run
        lookup: Dict[str, str] = {}
        datastream_ids: List[str] = []
        for ds in data_streams:
            datastream_ids.append(ds.id)
            lookup[ds.id] = ds.name

        if not datastream_ids:
            self.logger.warning(
                f"Thing {thing_id} has no datastreams, querying observations with an empty filter"
            )

        observations = self.api_client.get_observations(
            datastream_ids,
            time_range.start,
            time_range.end,
            token=token
        )

        result: List[OutputSeries] = []
        for ds_id, raw in observations.items():
            if token:
                token.raise_if_cancelled()
            try:
                series = build_series(lookup.get(ds_id, ""), raw)
            except DecodeError as e:
                self.logger.warning(f"Skipping observations for datastream {ds_id}: {e}")
                continue
            if series is None:
                self.logger.debug(f"No valid observations for datastream {ds_id}")
                continue
            if ds_id not in lookup:
                self.logger.debug(f"Datastream {ds_id} is not listed for thing {thing_id}")
            result.append(series)

        self.logger.info(
            f"Query for thing {thing_id} returned {len(result)} of {len(observations)} series"
        )
        return result
