"""
Datastream operations for the remote sensor API.

Handles retrieval of the datastreams attached to one thing.
"""

import logging
from typing import Any, List, Optional, TYPE_CHECKING
from urllib.parse import quote

from ..core import constants
from ..models.datastream import DataStream
from ..models.fields import require_list

if TYPE_CHECKING:
    from ..core.cancellation import CancellationToken


def datastreams_path(base_path: str, thing_id: str) -> str:
    """Path of a thing's datastreams. The API uses singular 'site' here."""
    return "/".join([
        base_path,
        constants.QUERY_ROOT,
        quote(thing_id, safe=""),
        constants.QUERY_COLLECTION,
    ])


class DataStreamsAPI:
    """Mixin for datastream-related API operations."""

    logger: logging.Logger
    base_path: str

    def get(self, path: str, token: Optional["CancellationToken"] = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def get_datastreams(
        self,
        thing_id: str,
        token: Optional["CancellationToken"] = None
    ) -> List[DataStream]:
        """
        Get all datastreams of a thing.

        Args:
            thing_id: Thing ID
            token: Cancellation token

        Returns:
            List of datastreams

        Raises:
            DecodeError: If the response is not a list of datastream objects
        """
        self.logger.debug(f"Fetching datastreams for thing {thing_id}")
        path = datastreams_path(self.base_path, thing_id)
        result = require_list(self.get(path, token), f"GET {path}")
        return [DataStream.from_dict(item) for item in result]
