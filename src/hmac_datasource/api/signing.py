"""
HMAC request signing for the remote sensor API.

The server recomputes the signature from the request it receives, so the
string to sign, its field order, the timestamp format and the header layout
must match byte for byte. Only GET requests are supported.
"""

import base64
import binascii
import hashlib
import hmac
from datetime import datetime
from typing import List, Optional

import requests  # type: ignore
from requests.utils import requote_uri  # type: ignore

from ..core import constants
from ..core.date_utils import DateUtils
from ..exceptions import ConfigurationError


def string_to_sign_fields(timestamp: datetime, client_id: str, path: str) -> List[str]:
    """
    Fields of the string to sign, in the order the server expects.

    Args:
        timestamp: Signature time
        client_id: API key identifying the multi-tenant client
        path: Request path including the query string, without the host

    Returns:
        The seven fields
    """
    return [
        constants.HTTP_METHOD,
        "",  # content type of GET is empty
        DateUtils.format_iso(timestamp),
        path,
        "",  # service-specific headers are not supported
        "",  # content checksum is empty for GET
        client_id,
    ]


def string_to_sign(timestamp: datetime, client_id: str, path: str) -> str:
    """Canonical string to sign: the seven fields joined by newlines."""
    return constants.SIGNATURE_DELIMITER.join(string_to_sign_fields(timestamp, client_id, path))


class HmacSigner:
    """Computes HMAC-SHA256 signatures with a base64-encoded secret key."""

    def __init__(self, secret_key: str):
        """
        Initialize signer.

        Args:
            secret_key: Secret key in standard base64

        Raises:
            ConfigurationError: If the key is empty or not valid base64
        """
        if not secret_key:
            raise ConfigurationError("HMAC signing key is missing")
        try:
            self._key = base64.b64decode(secret_key, validate=True)
        except (binascii.Error, ValueError):
            # The error text may echo the key, so it is not chained
            raise ConfigurationError("HMAC signing key is not valid base64") from None

    def __repr__(self) -> str:
        return "HmacSigner(key=***)"

    def sign(self, message: str) -> bytes:
        """HMAC-SHA256 digest of a UTF-8 message."""
        return hmac.new(self._key, message.encode("utf-8"), hashlib.sha256).digest()

    def compute_signature(self, timestamp: datetime, client_id: str, path: str) -> bytes:
        """
        Sign a GET request.

        Args:
            timestamp: Signature time, also sent as the Date header
            client_id: Client identifier
            path: Request path including the query string

        Returns:
            Raw digest bytes
        """
        return self.sign(string_to_sign(timestamp, client_id, path))


def authorization_header(auth_method: str, client_id: str, digest: bytes) -> str:
    """Compose '<scheme> <base64(client id)>:<base64(digest)>'."""
    encoded_client_id = base64.b64encode(client_id.encode("utf-8")).decode("ascii")
    encoded_digest = base64.b64encode(digest).decode("ascii")
    return f"{auth_method} {encoded_client_id}:{encoded_digest}"


def build_signed_get(
    server_url: str,
    path: str,
    client_id: str,
    signer: HmacSigner,
    auth_method: str,
    now: Optional[datetime] = None
) -> requests.PreparedRequest:
    """
    Produce a GET request carrying the HMAC signature.

    The URL is server_url + path; no slashes are added or removed. The path
    is percent-encoded the way requests encodes URLs before it is signed, so
    the signed path is the path sent. One timestamp is used for both the
    signature and the Date header.

    Args:
        server_url: Scheme and host of the remote API
        path: Path including query string
        client_id: Client identifier
        signer: Signer holding the decoded secret key
        auth_method: Scheme name for the Authorization header
        now: Signature time (defaults to the current UTC time)

    Returns:
        Prepared request ready to send

    Raises:
        ConfigurationError: If the URL is malformed
    """
    path = requote_uri(path)
    url = server_url + path
    request = requests.Request(constants.HTTP_METHOD, url, headers={"Accept": "application/json"})
    try:
        prepared = request.prepare()
    except (requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL) as e:
        raise ConfigurationError(f"Invalid request URL {url}: {e}") from e

    timestamp = DateUtils.to_utc(now) if now else DateUtils.now_utc()
    digest = signer.compute_signature(timestamp, client_id, path)
    prepared.headers["Authorization"] = authorization_header(auth_method, client_id, digest)
    prepared.headers["Date"] = DateUtils.format_iso(timestamp)
    return prepared
