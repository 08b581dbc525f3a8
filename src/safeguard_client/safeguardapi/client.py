"""Safeguard REST API client.

Provides the authenticated HTTP transport used by every resource module:
bearer-token authentication, thread safety, request logging with masked
credentials, and translation of non-2xx answers into :class:`ApiError`.
"""

import base64
import json
import threading
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx
import pydantic
import structlog

from .. import metrics
from .decoding import decode_model
from .errors import ApiError, ExpiredTokenError
from .types import LoginResponse, RstsTokenResponse

logger = structlog.get_logger(__name__)

DEFAULT_API_VERSION = "v4"

DEFAULT_TIMEOUT = 30.0

# Seconds between re-fetches while a checkout waits for approval
DEFAULT_CHECKOUT_POLL_INTERVAL = 1.0

# Seconds between report queries while waiting for an account task
DEFAULT_TASK_POLL_INTERVAL = 0.5

# Tokens this short are fully hidden when logged
_MIN_MASKABLE_TOKEN = 10


def mask_token(token: str) -> str:
    """Hide the middle of a token, keeping enough to tell tokens apart."""
    if len(token) <= _MIN_MASKABLE_TOKEN:
        return "***"
    return f"{token[:6]}***{token[-4:]}"


def safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` safe to log.

    The bearer token in ``Authorization`` is masked; other headers are kept.
    """
    masked = {}
    for name, value in headers.items():
        if name.lower() == "authorization":
            scheme, _, token = value.partition(" ")
            value = f"{scheme} {mask_token(token)}" if token else "***"
        masked[name] = value
    return masked


def validate_jwt_not_expired(token: str) -> None:
    """Check that a JWT token has not expired.

    Decodes the JWT payload without verifying the signature and checks
    the ``exp`` claim against the current time. Safeguard user tokens are
    usually opaque; anything that is not a JWT, or has no ``exp`` claim, is
    logged and accepted.

    Args:
        token: The raw token string.

    Raises:
        ExpiredTokenError: If the token's ``exp`` claim is in the past.
    """
    parts = token.split(".")
    if len(parts) != 3:  # noqa: PLR2004
        logger.debug("Token does not appear to be a JWT, skipping expiry check")
        return

    try:
        # JWT base64url encoding omits padding; restore it
        payload_b64 = parts[1]
        padding = 4 - len(payload_b64) % 4
        if padding != 4:  # noqa: PLR2004
            payload_b64 += "=" * padding

        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
    except (ValueError, json.JSONDecodeError):
        logger.warning("Failed to decode JWT payload, skipping expiry check")
        return

    exp = payload.get("exp") if isinstance(payload, dict) else None
    if exp is None:
        logger.warning("JWT has no 'exp' claim, skipping expiry check")
        return

    now = time.time()
    if now >= exp:
        msg = f"Access token has expired (exp={exp}, now={int(now)})"
        raise ExpiredTokenError(msg)

    logger.info("JWT expiry validated", expires_in_seconds=int(exp - now))


def _to_wire(body: Any) -> Any:
    """Convert models (or lists of them) into their JSON wire form."""
    if isinstance(body, pydantic.BaseModel):
        return body.model_dump(by_alias=True, mode="json", exclude_none=True)
    if isinstance(body, list):
        return [_to_wire(item) for item in body]
    return body


class SafeguardClient:
    """HTTP client for the Safeguard REST API.

    Issues authenticated GET/POST/PUT/DELETE requests relative to
    ``{appliance_url}/service/core/{api_version}/`` and returns the raw
    response body. Decoding into typed records is left to the resource
    modules.

    Thread-safe through thread-local storage of httpx.Client instances.
    Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        appliance_url: str,
        access_token: str | None = None,
        token_file: str | Path | None = None,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
        checkout_poll_interval: float = DEFAULT_CHECKOUT_POLL_INTERVAL,
        task_poll_interval: float = DEFAULT_TASK_POLL_INTERVAL,
    ):
        """Initialize the REST API client.

        Args:
            appliance_url: Appliance base URL (e.g., "https://safeguard.example.com").
            access_token: API user token. Takes precedence over token_file.
            token_file: Path to a file containing the API user token.
            api_version: Core API version (default: v4).
            timeout: Request timeout in seconds (default: 30.0).
            verify: Whether to verify the appliance's TLS certificate.
            transport: Optional httpx transport, e.g. for tests.
            checkout_poll_interval: Default wait between re-fetches of a
                pending access request during checkout.
            task_poll_interval: Default wait between report queries while
                tracking an account task.

        Raises:
            ValueError: If appliance_url is empty, or timeout or a poll
                interval is not positive.
            FileNotFoundError: If token_file is specified but doesn't exist.
            ExpiredTokenError: If the token is a JWT past its expiry.
        """
        if not appliance_url:
            msg = "appliance_url cannot be empty"
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        if checkout_poll_interval <= 0 or task_poll_interval <= 0:
            msg = "poll intervals must be positive"
            raise ValueError(msg)

        self.appliance_url = appliance_url.rstrip("/")
        self.api_version = api_version
        self.api_url = f"{self.appliance_url}/service/core/{api_version}/"
        self._timeout = timeout
        self._verify = verify
        self._transport = transport
        self.checkout_poll_interval = checkout_poll_interval
        self.task_poll_interval = task_poll_interval

        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        self._access_token = access_token
        if access_token is None and token_file:
            token_path = Path(token_file)
            if not token_path.exists():
                msg = f"Token file not found: {token_file}"
                raise FileNotFoundError(msg)
            self._access_token = token_path.read_text().strip()
        if self._access_token:
            validate_jwt_not_expired(self._access_token)

        # Use thread-local storage for httpx.Client (thread safety)
        self._local = threading.local()

    @property
    def client(self) -> httpx.Client:
        """Get or create thread-local httpx client.

        Each thread gets its own httpx.Client instance for thread safety.
        Clients are created lazily and reused within the same thread.

        Returns:
            Thread-local httpx.Client instance.
        """
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            self._local.client = httpx.Client(
                base_url=self.api_url,
                headers=self._headers,
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            )
        return self._local.client

    @property
    def is_authenticated(self) -> bool:
        return bool(self._access_token)

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the thread-local HTTP client if open."""
        if hasattr(self._local, "client") and not self._local.client.is_closed:
            self._local.client.close()

    def _auth_headers(self) -> dict[str, str]:
        if not self._access_token:
            return {}
        return {"Authorization": f"Bearer {self._access_token}"}

    def _make_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        **kwargs: Any,
    ) -> bytes:
        """Make HTTP request to the Safeguard API.

        Handles request execution and status checking. Logs request details
        and duration with the Authorization header masked.

        Args:
            method: HTTP method.
            path: Path relative to the API root, query string included; an
                absolute URL is used as-is.
            body: Optional JSON body; pydantic models are sent by alias.
            **kwargs: Extra arguments passed to ``httpx.Client.request``.

        Returns:
            Raw response body.

        Raises:
            httpx.TransportError: If the request could not be sent.
            ApiError: If the appliance answers with a non-2xx status.
        """
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        if body is not None:
            kwargs["json"] = _to_wire(body)

        start_time = time.time()
        logger.debug(
            "Making API request",
            method=method,
            path=path,
            headers=safe_headers(headers),
        )
        try:
            response = self.client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError:
            duration = time.time() - start_time
            metrics.record_request(method, "error", duration)
            logger.exception(
                "API request failed",
                method=method,
                path=path,
                duration_seconds=round(duration, 3),
            )
            raise

        duration = time.time() - start_time
        metrics.record_request(method, response.status_code, duration)
        logger.debug(
            "API request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )

        if not response.is_success:
            logger.error(
                "API error response",
                method=method,
                url=str(response.request.url),
                status_code=response.status_code,
            )
            raise ApiError(
                method,
                str(response.request.url),
                response.status_code,
                response.text,
            )
        return response.content

    def get(self, path: str) -> bytes:
        return self._make_request("GET", path)

    def post(self, path: str, body: Any = None) -> bytes:
        return self._make_request("POST", path, body)

    def put(self, path: str, body: Any) -> bytes:
        return self._make_request("PUT", path, body)

    def delete(self, path: str) -> bytes:
        return self._make_request("DELETE", path)

    def login_with_password(
        self,
        username: str,
        password: str,
        provider: str = "local",
    ) -> None:
        """Log in with a username and password and keep the user token.

        The appliance's STS issues an access token that is then exchanged
        for an API user token.

        Raises:
            ApiError: If either step is rejected.
            DecodeError: If either response cannot be decoded.
        """
        logger.info("Logging in", username=username, provider=provider)
        raw = self._make_request(
            "POST",
            f"{self.appliance_url}/RSTS/oauth2/token",
            data={
                "grant_type": "password",
                "username": username,
                "password": password,
                "scope": f"rsts:sts:primaryproviderid:{provider}",
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        sts_token = decode_model(raw, RstsTokenResponse)

        raw = self.post("Token/LoginResponse", {"StsAccessToken": sts_token.access_token})
        login = decode_model(raw, LoginResponse)
        self._access_token = login.user_token
        logger.info("Login succeeded", username=username, status=login.status)

    def validate_access_token(self) -> bool:
        """Return True if the current token is accepted by the appliance.

        Raises:
            ApiError: For any rejection other than 401 Unauthorized.
        """
        try:
            self.get("Me?fields=Id")
        except ApiError as e:
            if e.status_code == httpx.codes.UNAUTHORIZED:
                logger.warning("Access token rejected")
                return False
            raise
        return True
