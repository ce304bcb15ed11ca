"""
Command line entry point for the HMAC sensor datasource.

Plays the host role for manual use: health checks, resource listing and
observation queries against a configured server.
"""

import json
import sys
from datetime import datetime
from typing import List, Optional

from .core import CancellationToken, Config, DateUtils, LoggerContext, setup_logger
from .datasource import Datasource
from .exceptions import ConfigurationError, QueryCancelled
from .models.query import DataQuery, TimeRange


class DatasourceApp:
    """Command line application wrapping one datasource instance."""

    def __init__(self, config_file: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
            timeout: Overall deadline in seconds for a query
        """
        self.config = Config(config_file)
        self.timeout = timeout

        self.logger = setup_logger(
            log_file=self.config.log_file,
            log_level=self.config.log_level,
            secrets=[self.config.secret_key, self.config.client_id]
        )
        self.logger.info(f"Configuration: {self.config}")

        self.date_utils = DateUtils(self.logger)
        self.datasource = Datasource.from_config(self.config, logger=self.logger)

    def health(self) -> int:
        """Run the health check; returns the process exit code."""
        result = self.datasource.check_health()
        print(f"{result.status.value}: {result.message}")
        return 0 if result.healthy else 1

    def resources(self, path: str) -> int:
        """Print the things below a path with their datastreams."""
        with LoggerContext(self.logger, f"resource listing for {path}"):
            response = self.datasource.call_resource(path)
        if response.status != 200:
            print(f"HTTP {response.status}: {response.body.decode('utf-8', errors='replace')}")
            return 1
        print(json.dumps(response.json(), indent=2))
        return 0

    def query(
        self,
        thing_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        hours: float = 24
    ) -> int:
        """Print the series for one thing as JSON."""
        if start is None or end is None:
            default_start, default_end = self.date_utils.get_trailing_range(hours, end)
            start = start or default_start
            end = end or default_end

        query = DataQuery(
            ref_id="A",
            json={"thingId": thing_id},
            time_range=TimeRange(start=start, end=end),
        )
        token = CancellationToken(timeout=self.timeout) if self.timeout else None

        with LoggerContext(self.logger, f"query for thing {thing_id}"):
            response = self.datasource.query_data([query], token=token)["A"]

        if not response.ok:
            print(response.error)
            return 1
        print(json.dumps([s.to_dict() for s in response.series], indent=2))
        return 0

    def close(self) -> None:
        self.datasource.dispose()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="HMAC-signed sensor API datasource"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall deadline in seconds"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("health", help="Check configuration and connectivity")

    resources = commands.add_parser("resources", help="List things and their datastreams")
    resources.add_argument("--path", default="sites", help="Index below the base path")

    query = commands.add_parser("query", help="Query observations of a thing")
    query.add_argument("--thing-id", required=True, help="Thing ID")
    query.add_argument("--from", dest="start", default=None, help="Range start (ISO 8601)")
    query.add_argument("--until", dest="end", default=None, help="Range end (ISO 8601)")
    query.add_argument("--hours", type=float, default=24, help="Range length when --from is omitted")

    args = parser.parse_args(argv)

    try:
        app = DatasourceApp(config_file=args.config, timeout=args.timeout)
    except (FileNotFoundError, ConfigurationError) as e:
        print(f"Configuration error: {e}")
        return 1

    try:
        if args.command == "health":
            return app.health()
        if args.command == "resources":
            return app.resources(args.path)

        try:
            start = DateUtils.parse_iso(args.start) if args.start else None
            end = DateUtils.parse_iso(args.end) if args.end else None
        except ValueError as e:
            print(f"Invalid date: {e}")
            return 1
        return app.query(args.thing_id, start, end, hours=args.hours)
    except QueryCancelled as e:
        print(f"Query aborted: {e}")
        return 1
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
