"""
Eero SDK - High-level client with nice ergonomics.

This layer provides a clean, typed interface for the eero cloud API.
Built on top of the core APIClient.
"""

from eero_cli.core.client import APIClient
from eero_cli.core.errors import CLIError, ValidationError
from eero_cli.core.logging import get_logger
from eero_cli.core.types import (
    Account,
    Device,
    DeviceScan,
    LoginAttempt,
    Network,
    SessionState,
    extract_network_id,
)

logger = get_logger(__name__)


class EeroClient:
    """
    High-level eero API client with typed methods.

    Example:
        client = EeroClient()

        # Log in with a one-time code
        attempt = client.auth.login("user@example.com")
        token = client.auth.verify(attempt.user_token, "123456")

        # Read account data
        networks = client.networks.list()
        devices = client.devices.list()

    """

    def __init__(
        self,
        session_token: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
    ):
        """
        Initialize the eero client.

        Args:
            session_token: Stored session token; starts the client authenticated
            base_url: API base URL (or EERO_BASE_URL env var)
            timeout: Request timeout in seconds (or EERO_TIMEOUT env var)

        """
        self._client = APIClient(
            session_token=session_token,
            base_url=base_url,
            timeout=timeout,
        )
        self.state = SessionState.AUTHENTICATED if self._client.session_token else SessionState.UNAUTHENTICATED

        # Sub-clients for different domains
        self.auth = AuthOperations(self)
        self.account = AccountOperations(self._client)
        self.networks = NetworkOperations(self.account)
        self.devices = DeviceOperations(self._client, self.networks)

    @property
    def session_token(self) -> str | None:
        """Get the current session token."""
        return self._client.session_token

    @property
    def is_authenticated(self) -> bool:
        """Check if the client holds a verified session."""
        return self.state is SessionState.AUTHENTICATED


# =============================================================================
# Auth Operations
# =============================================================================


class AuthOperations:
    """The one-time-code login flow."""

    def __init__(self, owner: EeroClient):
        self._owner = owner
        self._client = owner._client

    def login(self, identifier: str) -> LoginAttempt:
        """
        Start a login; the server sends a one-time code to the identifier.

        Args:
            identifier: Phone number or email address

        Returns:
            LoginAttempt holding the pre-verify token

        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValidationError("Login identifier (phone or email) is required")

        envelope = self._client.post(
            "login",
            {"login": identifier},
            parser=lambda data: LoginAttempt.from_dict(identifier, data),
            require_session=False,
        )
        attempt = envelope.data or LoginAttempt(identifier=identifier, user_token="")
        if not attempt.user_token:
            raise CLIError("Login response did not include a user token")

        self._owner.state = SessionState.PENDING_VERIFICATION
        logger.debug("Login started, waiting for verification")
        return attempt

    def verify(self, pre_verify_token: str, code: str) -> str:
        """
        Complete a login with the one-time code.

        On success the pre-verify token becomes the client's session token.
        On failure the client drops back to unauthenticated; start again
        from login().

        Args:
            pre_verify_token: user_token from login()
            code: One-time code from email or SMS

        Returns:
            The session token to persist

        """
        code = (code or "").strip()
        try:
            if not pre_verify_token:
                raise ValidationError("Pre-verify token is required; call login() first")
            if not code:
                raise ValidationError("Verification code is required")
            self._client.post("login/verify", {"code": code}, token=pre_verify_token)
        except CLIError:
            self._owner.state = SessionState.UNAUTHENTICATED
            self._client.session_token = None
            raise

        self._client.session_token = pre_verify_token
        self._owner.state = SessionState.AUTHENTICATED
        logger.debug("Login verified")
        return pre_verify_token


# =============================================================================
# Account Operations
# =============================================================================


class AccountOperations:
    """Operations on the authenticated account."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self) -> Account:
        """Get the account profile, including its networks."""
        envelope = self._client.get("account", parser=Account.from_dict)
        return envelope.data or Account()


# =============================================================================
# Network Operations
# =============================================================================


class NetworkOperations:
    """Networks, read from the account (there is no list endpoint)."""

    def __init__(self, account: AccountOperations):
        self._account = account

    def list(self) -> list[Network]:
        """
        List the account's networks.

        The explicit count wins over the embedded list: when count is 0
        the result is empty even if the list has entries.
        """
        account = self._account.get()
        if account.networks.count == 0:
            return []
        return list(account.networks.data)


# =============================================================================
# Device Operations
# =============================================================================


class DeviceOperations:
    """Devices, fetched per network."""

    def __init__(self, client: APIClient, networks: NetworkOperations):
        self._client = client
        self._networks = networks

    def list_for_network(self, network_id: str) -> list[Device]:
        """List devices on a single network."""
        envelope = self._client.get(
            f"networks/{network_id}/devices",
            parser=lambda data: [Device.from_dict(d) for d in data],
        )
        return envelope.data or []

    def list(self) -> list[Device]:
        """
        List devices across all networks, in network order.

        All-or-nothing: the first network that fails (including one whose
        URL has no ID) aborts the call and its error propagates.
        """
        devices: list[Device] = []
        for network in self._networks.list():
            devices.extend(self.list_for_network(extract_network_id(network.url)))
        return devices

    def scan(self) -> DeviceScan:
        """
        List devices across all networks, continuing past failures.

        Errors from a single network are recorded against its URL instead
        of aborting. Failure to read the account still raises.
        """
        result = DeviceScan()
        for network in self._networks.list():
            try:
                result.devices.extend(self.list_for_network(extract_network_id(network.url)))
            except CLIError as e:
                logger.warning("Skipping network %s: %s", network.url, e)
                result.errors[network.url] = e
        return result
