"""
Site (thing) operations for the remote sensor API.

Handles retrieval of the top-level resource index.
"""

import logging
from typing import Any, List, Optional, TYPE_CHECKING

from ..core import constants
from ..models.fields import require_list
from ..models.thing import Thing

if TYPE_CHECKING:
    from ..core.cancellation import CancellationToken


class SitesAPI:
    """Mixin for site-related API operations."""

    logger: logging.Logger
    base_path: str

    def get(self, path: str, token: Optional["CancellationToken"] = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def get_things(
        self,
        index: str = constants.INDEX_NAME,
        token: Optional["CancellationToken"] = None
    ) -> List[Thing]:
        """
        Get the things listed at an index below the base path.

        Args:
            index: Path below the base path (the sites index by default)
            token: Cancellation token

        Returns:
            List of things

        Raises:
            DecodeError: If the response is not a list of thing objects
        """
        path = f"{self.base_path}/{index}"
        self.logger.info(f"Fetching things from {path}")
        result = require_list(self.get(path, token), f"GET {path}")
        return [Thing.from_dict(item) for item in result]
