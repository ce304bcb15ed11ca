"""
Resource aggregation service.

Joins things with their datastreams for the query editor.
"""

import logging
from typing import List, Optional, Sequence, TYPE_CHECKING

from ..models.thing import Thing, ThingWithDataStreams

if TYPE_CHECKING:
    from ..api import SensorAPI
    from ..core.cancellation import CancellationToken


class ResourceAggregator:
    """Fetch each thing's datastreams and pair them up."""

    def __init__(
        self,
        api_client: "SensorAPI",
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize aggregator.

        Args:
            api_client: API client instance
            logger: Logger instance
        """
        self.api_client = api_client
        self.logger = logger or logging.getLogger(__name__)

    def aggregate(
        self,
        things: Sequence[Thing],
        token: Optional["CancellationToken"] = None
    ) -> List[ThingWithDataStreams]:
        """
        Pair every thing with its datastreams, keeping the input order.

        Browsing is all or nothing: the first failing datastream fetch
        aborts the whole aggregation.

        Args:
            things: Things to expand
            token: Cancellation token

        Returns:
            List of things with their datastreams
        """
        resource: List[ThingWithDataStreams] = []
        for thing in things:
            data_streams = self.api_client.get_datastreams(thing.id, token=token)
            resource.append(ThingWithDataStreams(thing=thing, data_streams=data_streams))

        self.logger.info(f"Aggregated datastreams for {len(resource)} things")
        return resource
