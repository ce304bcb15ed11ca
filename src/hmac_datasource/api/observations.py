"""
Observation operations for the remote sensor API.

Handles batch retrieval of observations for several datastreams.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, Optional, TYPE_CHECKING
from urllib.parse import quote

from ..core import constants
from ..core.date_utils import DateUtils
from ..models.fields import require_object
from ..models.observation import ObservationsByDatastream

if TYPE_CHECKING:
    from ..core.cancellation import CancellationToken


def observations_path(
    base_path: str,
    datastream_ids: Iterable[str],
    start: datetime,
    end: datetime
) -> str:
    """
    Path of the batch observations query.

    Ids are percent-encoded one by one, so a comma inside an id never reads
    as a separator. An empty id list still yields 'datastreamIds='.
    """
    tags = ",".join(quote(ds_id, safe="") for ds_id in datastream_ids)
    return (
        f"{base_path}{constants.QUERY_PATH}"
        f"?{constants.QUERY_START}={DateUtils.format_iso(start)}"
        f"&{constants.QUERY_END}={DateUtils.format_iso(end)}"
        f"&{constants.QUERY_TAGS}={tags}"
    )


class ObservationsAPI:
    """Mixin for observation-related API operations."""

    logger: logging.Logger
    base_path: str

    def get(self, path: str, token: Optional["CancellationToken"] = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def get_observations(
        self,
        datastream_ids: Iterable[str],
        start: datetime,
        end: datetime,
        token: Optional["CancellationToken"] = None
    ) -> ObservationsByDatastream:
        """
        Get observations for several datastreams in one call.

        Entries are returned undecoded so the caller can decide how to treat
        a malformed one.

        Args:
            datastream_ids: Datastream IDs to include
            start: Start of the time range
            end: End of the time range
            token: Cancellation token

        Returns:
            Mapping of datastream id to its raw observation array

        Raises:
            DecodeError: If the response is not a JSON object
        """
        path = observations_path(self.base_path, datastream_ids, start, end)
        self.logger.debug(f"Fetching observations: {path}")
        result = self.get(path, token)
        return require_object(result, f"GET {path}")
