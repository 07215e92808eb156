"""
Core HTTP client for the eero cloud API.

Handles the session cookie, request/response, envelope decoding and
error unification.
"""

import json
import os
import urllib.error
import urllib.request
from collections.abc import Callable
from typing import Any, TypeVar

from eero_cli.core.errors import APIError, NoSessionFound, TransportError, ValidationError
from eero_cli.core.logging import get_logger
from eero_cli.core.types import Envelope

# Configuration
DEFAULT_BASE_URL = "https://api-user.e2ro.com/2.2"
DEFAULT_TIMEOUT = 30
SESSION_COOKIE = "s"

T = TypeVar("T")

logger = get_logger(__name__)


def _resolve_timeout(timeout: int | None) -> int:
    """Pick the explicit timeout, else EERO_TIMEOUT, else the default; it must be positive."""
    if timeout is None:
        raw = os.environ.get("EERO_TIMEOUT")
        if not raw:
            return DEFAULT_TIMEOUT
        try:
            timeout = int(raw)
        except ValueError:
            raise ValidationError(f"EERO_TIMEOUT must be an integer, got {raw!r}")
    if timeout <= 0:
        raise ValidationError(f"Timeout must be a positive number of seconds, got {timeout}")
    return timeout


class APIClient:
    """
    Low-level HTTP client for the eero API.

    Handles:
    - The session token, sent as cookie "s"
    - HTTP methods (GET, POST)
    - Envelope decoding and error handling
    """

    def __init__(
        self,
        session_token: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
    ):
        """
        Initialize the API client.

        Args:
            session_token: Authenticated session token, if already known
            base_url: API base URL (or EERO_BASE_URL env var)
            timeout: Request timeout in seconds (or EERO_TIMEOUT env var)

        """
        self.session_token = session_token or None
        env_base_url = os.environ.get("EERO_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = (base_url or env_base_url).rstrip("/")
        self.timeout = _resolve_timeout(timeout)

    def _ensure_session_token(self) -> str:
        """Ensure a session token is attached."""
        if not self.session_token:
            raise NoSessionFound("No session token. Run 'eero auth' to log in")
        return self.session_token

    def _build_url(self, path: str) -> str:
        """Build full URL from path."""
        if path.startswith("http"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _decode(
        self,
        payload: bytes,
        status: int,
        parser: Callable[[Any], T] | None,
        fallback_message: str | None = None,
    ) -> Envelope[T]:
        """Turn a raw body into a successful envelope or raise its error."""
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            if fallback_message:
                raise APIError(fallback_message, status=status)
            raise APIError(f"Invalid response body: {e}", status=status)

        try:
            body = json.loads(text) if text else {}
        except json.JSONDecodeError as e:
            # Non-JSON error pages (proxies, 502s) carry no envelope
            if fallback_message:
                raise APIError(fallback_message, status=status)
            raise APIError(f"Invalid JSON response: {e}", status=status)

        envelope = Envelope.from_dict(body, parser, transport_status=status)
        if not envelope.is_success:
            logger.warning(envelope.error_message)
            raise envelope.to_error()
        return envelope

    def request(
        self,
        method: str,
        path: str,
        data: dict | None = None,
        parser: Callable[[Any], T] | None = None,
        token: str | None = None,
        require_session: bool = True,
        timeout: int | None = None,
    ) -> Envelope[T]:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST)
            path: API path relative to the base URL (e.g., "account")
            data: Request body, sent as JSON
            parser: Optional function turning the payload into its type
            token: Cookie value overriding the session token for this call
            require_session: Fail fast when no session token is attached
            timeout: Request timeout override

        Returns:
            The successful envelope

        Raises:
            TransportError: When the server could not be reached
            APIError: When the envelope reports a failure
            NoSessionFound: When a session is required but missing

        """
        if token is None and require_session:
            token = self._ensure_session_token()
        elif token is None:
            token = self.session_token

        url = self._build_url(path)
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            headers["Cookie"] = f"{SESSION_COOKIE}={token}"

        body = json.dumps(data).encode("utf-8") if data is not None else None
        request_timeout = timeout if timeout is not None else self.timeout

        logger.debug("%s %s", method, url)
        fallback_message = None
        try:
            req = urllib.request.Request(url, data=body, headers=headers, method=method)
            with urllib.request.urlopen(req, timeout=request_timeout) as response:
                status = response.status
                payload = response.read()

        except urllib.error.HTTPError as e:
            # The API sends its envelope on error statuses too
            status = e.code
            fallback_message = str(e)
            try:
                payload = e.read()
            except OSError:
                payload = b""
            if not payload:
                raise APIError(fallback_message, status=status)

        except urllib.error.URLError as e:
            logger.warning("Connection error for %s %s: %s", method, url, e.reason)
            raise TransportError(f"Connection error: {e.reason}")

        except TimeoutError:
            logger.warning("Timeout for %s %s", method, url)
            raise TransportError(f"Request timed out after {request_timeout} seconds")

        except OSError as e:
            logger.warning("Connection error for %s %s: %s", method, url, e)
            raise TransportError(f"Connection error: {e}")

        logger.debug("%s %s -> %s", method, url, status)
        return self._decode(payload, status, parser, fallback_message)

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str, parser: Callable[[Any], T] | None = None) -> Envelope[T]:
        """Make an authenticated GET request."""
        return self.request("GET", path, parser=parser)

    def post(
        self,
        path: str,
        data: dict | None = None,
        parser: Callable[[Any], T] | None = None,
        token: str | None = None,
        require_session: bool = True,
    ) -> Envelope[T]:
        """Make a POST request."""
        return self.request("POST", path, data, parser=parser, token=token, require_session=require_session)
