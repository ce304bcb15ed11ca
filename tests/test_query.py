"""
Query pipeline tests.

Tests the datastreams -> observations -> series transform, its partial
failure policy, and the full pipeline over mocked HTTP.
"""

import math
import unittest
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import responses

from src.hmac_datasource.api import SensorAPI
from src.hmac_datasource.core.cancellation import CancellationToken
from src.hmac_datasource.core.date_utils import DateUtils
from src.hmac_datasource.exceptions import DecodeError, QueryCancelled, RemoteError
from src.hmac_datasource.models import DataStream, TimeRange
from src.hmac_datasource.services.query import QueryPipeline, build_series

from conftest import BASE_PATH, SERVER_URL

TIME_RANGE = TimeRange(
    start=datetime(2023, 11, 14, tzinfo=timezone.utc),
    end=datetime(2023, 11, 15, tzinfo=timezone.utc),
)


def by_name(series_list):
    return {s.name: s for s in series_list}


class TestBuildSeries(unittest.TestCase):
    """Test the per-datastream transform."""

    def test_drops_nan_values(self):
        raw = [
            {"value": 1.0, "phenomenonTime": 1700000000000},
            {"value": float("nan"), "phenomenonTime": 1700000060000},
            {"value": 3.0, "phenomenonTime": 1700000120000},
        ]

        series = build_series("Temp", raw)

        self.assertEqual(series.values, [1.0, 3.0])
        self.assertEqual(len(series.timestamps), len(series.values))
        self.assertEqual(series.timestamps[1], DateUtils.from_epoch_millis(1700000120000))

    def test_null_value_counts_as_missing(self):
        raw = [
            {"value": None, "phenomenonTime": 1700000000000},
            {"value": 2, "phenomenonTime": 1700000060000},
        ]

        series = build_series("Temp", raw)

        self.assertEqual(series.values, [2.0])

    def test_all_nan_gives_no_series(self):
        raw = [{"value": float("nan"), "phenomenonTime": 1700000000000}]
        self.assertIsNone(build_series("Flow", raw))

    def test_empty_array_gives_no_series(self):
        self.assertIsNone(build_series("Flow", []))

    def test_malformed_array_raises(self):
        with self.assertRaises(DecodeError):
            build_series("Flow", {"value": 1})
        with self.assertRaises(DecodeError):
            build_series("Flow", [{"value": "high", "phenomenonTime": 1}])
        with self.assertRaises(DecodeError):
            build_series("Flow", [{"value": 1.0}])


class TestQueryPipeline(unittest.TestCase):
    """Test the pipeline against a mocked API client."""

    def setUp(self):
        """Set up test fixtures."""
        self.api_client = Mock()
        self.api_client.get_datastreams = Mock(return_value=[
            DataStream(id="A", name="Temp"),
            DataStream(id="B", name="Flow"),
        ])
        self.pipeline = QueryPipeline(api_client=self.api_client, logger=Mock())

    def test_end_to_end_scenario(self):
        self.api_client.get_observations = Mock(return_value={
            "A": [{"value": 10.5, "phenomenonTime": 1700000000000}],
            "B": [{"value": float("nan"), "phenomenonTime": 1700000000000}],
        })

        result = self.pipeline.run("thing-1", TIME_RANGE)

        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].name, "Temp")
        self.assertEqual(result[0].points(), [(DateUtils.from_epoch_millis(1700000000000), 10.5)])

    def test_requests_observations_for_all_ids(self):
        self.api_client.get_observations = Mock(return_value={})

        self.pipeline.run("thing-1", TIME_RANGE)

        self.api_client.get_datastreams.assert_called_once_with("thing-1", token=None)
        self.api_client.get_observations.assert_called_once_with(
            ["A", "B"], TIME_RANGE.start, TIME_RANGE.end, token=None
        )

    def test_one_malformed_entry_is_skipped(self):
        self.api_client.get_observations = Mock(return_value={
            "A": [{"value": 1.5, "phenomenonTime": 1700000000000}],
            "B": "not an array",
            "C": [{"value": 2.5, "phenomenonTime": 1700000000000}],
        })

        result = by_name(self.pipeline.run("thing-1", TIME_RANGE))

        self.assertEqual(sorted(result), ["", "Temp"])
        self.assertEqual(result["Temp"].values, [1.5])
        self.assertEqual(result[""].values, [2.5])

    def test_out_of_range_time_is_skipped(self):
        self.api_client.get_observations = Mock(return_value={
            "A": [{"value": 1.0, "phenomenonTime": 1700000000000}],
            "B": [{"value": 2.0, "phenomenonTime": 10 ** 20}],
        })

        result = self.pipeline.run("thing-1", TIME_RANGE)

        self.assertEqual([s.name for s in result], ["Temp"])
        self.assertEqual(result[0].values, [1.0])

    def test_datastream_failure_aborts(self):
        self.api_client.get_datastreams = Mock(side_effect=RemoteError(500, "boom"))
        self.api_client.get_observations = Mock()

        with self.assertRaises(RemoteError):
            self.pipeline.run("thing-1", TIME_RANGE)

        self.api_client.get_observations.assert_not_called()

    def test_observations_failure_aborts(self):
        self.api_client.get_observations = Mock(side_effect=DecodeError("not an object"))

        with self.assertRaises(DecodeError):
            self.pipeline.run("thing-1", TIME_RANGE)

    def test_no_datastreams_still_queries(self):
        self.api_client.get_datastreams = Mock(return_value=[])
        self.api_client.get_observations = Mock(return_value={})

        result = self.pipeline.run("thing-1", TIME_RANGE)

        self.assertEqual(result, [])
        self.api_client.get_observations.assert_called_once_with(
            [], TIME_RANGE.start, TIME_RANGE.end, token=None
        )

    def test_lookup_does_not_leak_between_runs(self):
        self.api_client.get_observations = Mock(return_value={
            "A": [{"value": 1.0, "phenomenonTime": 1700000000000}],
        })
        self.pipeline.run("thing-1", TIME_RANGE)

        self.api_client.get_datastreams = Mock(return_value=[DataStream(id="Z", name="Other")])
        result = self.pipeline.run("thing-2", TIME_RANGE)

        self.assertEqual(result[0].name, "")

    def test_cancellation_discards_partial_work(self):
        token = CancellationToken()
        self.api_client.get_observations = Mock(side_effect=lambda *a, **kw: token.cancel() or {
            "A": [{"value": 1.0, "phenomenonTime": 1700000000000}],
        })

        with self.assertRaises(QueryCancelled):
            self.pipeline.run("thing-1", TIME_RANGE, token=token)


class TestPipelineOverHttp:
    """Test the full pipeline with mocked HTTP responses."""

    @responses.activate
    def test_two_datastreams_over_http(self, settings):
        responses.add(
            responses.GET,
            f"{SERVER_URL}{BASE_PATH}/site/thing-1/datastreams",
            json=[{"id": "A", "name": "Temp"}, {"id": "B", "name": "Flow"}],
        )
        responses.add(
            responses.GET,
            f"{SERVER_URL}{BASE_PATH}/observations",
            body='{"A":[{"value":10.5,"phenomenonTime":1700000000000}],'
                 '"B":[{"value":NaN,"phenomenonTime":1700000000000}]}',
            content_type="application/json",
        )
        api = SensorAPI(settings)

        result = QueryPipeline(api).run("thing-1", TIME_RANGE)

        assert [s.name for s in result] == ["Temp"]
        assert result[0].values == [10.5]
        assert result[0].timestamps == [DateUtils.from_epoch_millis(1700000000000)]
        assert not any(math.isnan(v) for v in result[0].values)

        observations_url = responses.calls[1].request.url
        assert observations_url == (
            f"{SERVER_URL}{BASE_PATH}/observations"
            "?from=2023-11-14T00:00:00.000Z&until=2023-11-15T00:00:00.000Z&datastreamIds=A,B"
        )

    @responses.activate
    def test_remote_500_on_datastreams_aborts(self, settings):
        responses.add(
            responses.GET,
            f"{SERVER_URL}{BASE_PATH}/site/thing-1/datastreams",
            body="internal error",
            status=500,
        )

        with pytest.raises(RemoteError) as exc_info:
            QueryPipeline(SensorAPI(settings)).run("thing-1", TIME_RANGE)

        assert exc_info.value.body == "internal error"
        assert len(responses.calls) == 1
