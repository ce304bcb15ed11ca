"""
Request signing tests.

Tests the timestamp format, the string to sign, the HMAC digest and the
signed request built from them.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone

import pytest

from src.hmac_datasource.api.signing import (
    HmacSigner,
    authorization_header,
    build_signed_get,
    string_to_sign,
    string_to_sign_fields,
)
from src.hmac_datasource.core.date_utils import DateUtils
from src.hmac_datasource.exceptions import ConfigurationError

from conftest import CLIENT_ID, SECRET_KEY

REFERENCE_DATE = "2025-05-25T13:24:56.789Z"
REFERENCE_ENDPOINT = "/xcloud/data-export/sites"


@pytest.fixture
def reference_time():
    return DateUtils.parse_iso(REFERENCE_DATE)


@pytest.fixture
def signer():
    return HmacSigner(SECRET_KEY)


class TestTimestampFormat:
    """Test the ISO format shared by signature, Date header and query range."""

    def test_round_trip(self, reference_time):
        assert DateUtils.format_iso(reference_time) == REFERENCE_DATE

    def test_truncates_to_milliseconds(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, 678999, tzinfo=timezone.utc)
        assert DateUtils.format_iso(dt) == "2024-01-02T03:04:05.678Z"

    def test_pads_milliseconds(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, 7000, tzinfo=timezone.utc)
        assert DateUtils.format_iso(dt) == "2024-01-02T03:04:05.007Z"

    def test_converts_offsets_to_utc(self):
        dt = DateUtils.parse_iso("2025-05-25T15:24:56.789+02:00")
        assert DateUtils.format_iso(dt) == REFERENCE_DATE

    def test_naive_datetime_is_utc(self):
        assert DateUtils.format_iso(datetime(2025, 5, 25, 13, 24, 56, 789000)) == REFERENCE_DATE

    def test_epoch_millis_round_trip(self):
        instant = DateUtils.from_epoch_millis(1700000000123)
        assert DateUtils.format_iso(instant) == "2023-11-14T22:13:20.123Z"
        assert DateUtils.to_epoch_millis(instant) == 1700000000123


class TestStringToSign:
    """Test the canonical string to sign."""

    def test_seven_fields_in_order(self, reference_time):
        fields = string_to_sign_fields(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
        assert fields == ["GET", "", REFERENCE_DATE, REFERENCE_ENDPOINT, "", "", CLIENT_ID]

    def test_newline_delimited(self, reference_time):
        message = string_to_sign(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
        assert message == (
            "GET\n\n2025-05-25T13:24:56.789Z\n/xcloud/data-export/sites\n\n\n" + CLIENT_ID
        )
        assert message.count("\n") == 6

    def test_reference_length(self, reference_time):
        # 36-character client id, reference date and endpoint
        assert len(string_to_sign(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)) == 94


class TestHmacSigner:
    """Test the HMAC-SHA256 digest."""

    def test_matches_independent_hmac(self, signer, reference_time):
        message = string_to_sign(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
        expected = hmac.new(base64.b64decode(SECRET_KEY), message.encode(), hashlib.sha256).digest()
        assert signer.compute_signature(reference_time, CLIENT_ID, REFERENCE_ENDPOINT) == expected

    def test_deterministic(self, signer, reference_time):
        first = signer.compute_signature(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
        second = HmacSigner(SECRET_KEY).compute_signature(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
        assert first == second
        assert len(first) == 32

    def test_different_keys_give_different_digests(self, signer, reference_time):
        other = HmacSigner(base64.b64encode(b"another-signing-key").decode())
        assert (
            signer.compute_signature(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
            != other.compute_signature(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
        )

    @pytest.mark.parametrize("client_id,path", [
        (CLIENT_ID + "x", REFERENCE_ENDPOINT),
        (CLIENT_ID, REFERENCE_ENDPOINT + "?a=1"),
        ("abc\ndef", REFERENCE_ENDPOINT),
        (CLIENT_ID, "/xcloud/data-export\n/sites"),
    ])
    def test_any_field_change_changes_digest(self, signer, reference_time, client_id, path):
        base = signer.compute_signature(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
        assert signer.compute_signature(reference_time, client_id, path) != base

    def test_timestamp_change_changes_digest(self, signer, reference_time):
        later = DateUtils.parse_iso("2025-05-25T13:24:56.790Z")
        assert (
            signer.compute_signature(reference_time, CLIENT_ID, REFERENCE_ENDPOINT)
            != signer.compute_signature(later, CLIENT_ID, REFERENCE_ENDPOINT)
        )

    @pytest.mark.parametrize("bad_key", ["", "not base64!", "abc"])
    def test_malformed_key_is_configuration_error(self, bad_key):
        with pytest.raises(ConfigurationError):
            HmacSigner(bad_key)

    def test_repr_hides_key(self, signer):
        assert SECRET_KEY not in repr(signer)


class TestSignedRequest:
    """Test the signed GET request."""

    def test_authorization_header_layout(self):
        header = authorization_header("xCloud", "client", b"\x01\x02\x03")
        assert header == "xCloud Y2xpZW50:AQID"

    def test_headers_share_one_timestamp(self, signer, reference_time):
        request = build_signed_get(
            "https://sensors.example.com", REFERENCE_ENDPOINT, CLIENT_ID, signer, "xCloud",
            now=reference_time
        )
        assert request.method == "GET"
        assert request.body is None
        assert request.headers["Date"] == REFERENCE_DATE

        scheme, credentials = request.headers["Authorization"].split(" ", 1)
        encoded_client, encoded_digest = credentials.split(":")
        assert scheme == "xCloud"
        assert base64.b64decode(encoded_client).decode() == CLIENT_ID

        signed_at = DateUtils.parse_iso(request.headers["Date"])
        expected = signer.compute_signature(signed_at, CLIENT_ID, REFERENCE_ENDPOINT)
        assert base64.b64decode(encoded_digest) == expected

    def test_url_is_plain_concatenation(self, signer, reference_time):
        request = build_signed_get(
            "https://sensors.example.com", "/a/b?from=2025-05-25T13:24:56.789Z&ids=1,2",
            CLIENT_ID, signer, "xCloud", now=reference_time
        )
        assert request.url == "https://sensors.example.com/a/b?from=2025-05-25T13:24:56.789Z&ids=1,2"

    def test_current_time_used_by_default(self, signer):
        before = DateUtils.now_utc().replace(microsecond=0)
        request = build_signed_get("https://h.example", "/p", CLIENT_ID, signer, "xCloud")
        assert DateUtils.parse_iso(request.headers["Date"]) >= before

    def test_signed_path_matches_sent_path(self, signer, reference_time):
        request = build_signed_get(
            "https://sensors.example.com", "/data export/sites", CLIENT_ID, signer, "xCloud",
            now=reference_time
        )

        assert request.path_url == "/data%20export/sites"
        encoded_digest = request.headers["Authorization"].split(":")[1]
        expected = signer.compute_signature(reference_time, CLIENT_ID, request.path_url)
        assert base64.b64decode(encoded_digest) == expected

    def test_encoded_path_is_signed_unchanged(self, signer, reference_time):
        path = "/x/observations?from=a&datastreamIds=a%2Cb,c%20d"
        request = build_signed_get(
            "https://sensors.example.com", path, CLIENT_ID, signer, "xCloud", now=reference_time
        )

        assert request.path_url == path
        encoded_digest = request.headers["Authorization"].split(":")[1]
        assert base64.b64decode(encoded_digest) == signer.compute_signature(reference_time, CLIENT_ID, path)

    def test_malformed_url_is_rejected(self, signer):
        with pytest.raises(ConfigurationError):
            build_signed_get("sensors.example.com", "/p", CLIENT_ID, signer, "xCloud")
