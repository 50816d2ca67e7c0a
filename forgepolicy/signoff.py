"""
Merge request signoff consumer.

Projects that require contributors to sign off on merge requests delegate
the signoff to an external site through the OAuth 1.0 token handshake,
signed with the PLAINTEXT method.
"""

import random
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlencode

import httpx

from forgepolicy.exceptions import ConfigurationError, SignoffError
from forgepolicy.logging import log_signoff_request, log_signoff_response
from forgepolicy.types.projects import SignoffSettings

DEFAULT_PATH_PREFIX = "oauth"
TOKEN_ENDPOINTS = ("request_token", "authorize", "access_token")


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 2
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [502, 503, 504])
    max_backoff: float = 10.0
    jitter: float = 0.1


@dataclass
class RequestToken:
    """Unauthorized token returned by the signoff site."""

    key: str
    secret: str


@dataclass
class AccessToken:
    """Token proving the user signed off."""

    key: str
    secret: str


def consumer_options(settings: SignoffSettings) -> dict[str, str]:
    """
    Site and endpoint paths of a signoff consumer.

    Paths live under ``/<path_prefix>`` when a prefix is configured and
    under ``/oauth`` otherwise.
    """
    prefix = (settings.path_prefix or "").strip("/") or DEFAULT_PATH_PREFIX
    options = {"site": (settings.site or "").rstrip("/")}
    for endpoint in TOKEN_ENDPOINTS:
        options[f"{endpoint}_path"] = f"/{prefix}/{endpoint}"
    return options


class SignoffConsumer:
    """
    OAuth 1.0 consumer for one project's signoff site.

    Example:
        ```python
        consumer = SignoffConsumer(project.signoff)
        request_token, authorize_url = consumer.get_request_token()
        # send the user to authorize_url, then
        access_token = consumer.exchange_access_token(request_token)
        ```
    """

    def __init__(
        self,
        settings: SignoffSettings,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the consumer.

        Args:
            settings: Site, path prefix, key and secret of the signoff site
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior

        Raises:
            ConfigurationError: If no site or consumer key is configured
        """
        if not settings.needs_signoff:
            raise ConfigurationError("Signoff site is not configured")
        if not settings.signoff_key:
            raise ConfigurationError("Signoff consumer key is not configured")

        self.settings = settings
        self.options = consumer_options(settings)
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.options["site"],
            timeout=timeout,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "SignoffConsumer":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def site(self) -> str:
        return self.options["site"]

    def authorize_url(self, request_token: RequestToken) -> str:
        query = urlencode({"oauth_token": request_token.key})
        return f"{self.site}{self.options['authorize_path']}?{query}"

    def get_request_token(self) -> tuple[RequestToken, str]:
        """
        Ask the signoff site for a request token.

        Returns:
            The request token and the URL where the user authorizes it

        Raises:
            SignoffError: On a refused request or a malformed answer
        """
        form = self._signed_form(token_secret="")
        content = self._post(self.options["request_token_path"], form)
        key, secret = self._parse_token(content)
        request_token = RequestToken(key=key, secret=secret)
        return request_token, self.authorize_url(request_token)

    def exchange_access_token(
        self, request_token: RequestToken, verifier: str | None = None
    ) -> AccessToken:
        """
        Trade an authorized request token for an access token.

        Raises:
            SignoffError: On a refused request or a malformed answer
        """
        form = self._signed_form(token_secret=request_token.secret)
        form["oauth_token"] = request_token.key
        if verifier:
            form["oauth_verifier"] = verifier
        content = self._post(self.options["access_token_path"], form)
        key, secret = self._parse_token(content)
        return AccessToken(key=key, secret=secret)

    def _signed_form(self, token_secret: str) -> dict[str, str]:
        # PLAINTEXT signature: consumer secret and token secret joined by "&"
        return {
            "oauth_consumer_key": self.settings.signoff_key or "",
            "oauth_signature_method": "PLAINTEXT",
            "oauth_signature": f"{self.settings.signoff_secret or ''}&{token_secret}",
            "oauth_timestamp": str(int(time.time())),
            "oauth_nonce": uuid.uuid4().hex,
            "oauth_version": "1.0",
        }

    @staticmethod
    def _parse_token(content: str) -> tuple[str, str]:
        values = parse_qs(content)
        try:
            return values["oauth_token"][0], values["oauth_token_secret"][0]
        except (KeyError, IndexError):
            raise SignoffError(
                "INVALID_RESPONSE", "Signoff site answered without a token"
            ) from None

    def _post(self, path: str, form: dict[str, str]) -> str:
        def make_request() -> httpx.Response:
            log_signoff_request("POST", f"{self.site}{path}", form)
            return self._client.request("POST", path, content=urlencode(form))

        return self._execute_with_retry(make_request)

    def _execute_with_retry(self, request_fn: Callable[[], httpx.Response]) -> str:
        for attempt in range(self.retry_config.max_retries + 1):
            started = time.monotonic()
            try:
                response = request_fn()
            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise SignoffError("CONNECTION_ERROR", str(e)) from e
                time.sleep(self._get_backoff_time(attempt))
                continue

            elapsed_ms = (time.monotonic() - started) * 1000
            log_signoff_response(response.status_code, str(response.url), response.text, elapsed_ms)

            if response.status_code < 400:
                return response.text

            if (
                response.status_code in self.retry_config.retry_on
                and attempt < self.retry_config.max_retries
            ):
                time.sleep(self._get_backoff_time(attempt))
                continue

            raise self._parse_error_response(response)

        raise SignoffError("MAX_RETRIES_EXCEEDED", "Signoff request failed")

    def _get_backoff_time(self, attempt: int) -> float:
        """Exponential backoff with jitter, capped at max_backoff."""
        base_wait = self.retry_config.backoff_factor ** attempt
        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)
        return min(wait_time, self.retry_config.max_backoff)

    @staticmethod
    def _parse_error_response(response: httpx.Response) -> SignoffError:
        status_code = response.status_code
        if status_code == 401:
            code = "UNAUTHORIZED"
        elif status_code == 403:
            code = "FORBIDDEN"
        elif status_code == 404:
            code = "NOT_FOUND"
        elif status_code >= 500:
            code = "SERVER_ERROR"
        else:
            code = "BAD_REQUEST"
        message = response.text.strip()[:200] or f"HTTP {status_code}"
        return SignoffError(code, message, status_code=status_code)
