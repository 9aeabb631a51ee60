"""
Jolokia HTTP Client.

Provides a synchronous client for a Jolokia agent, the HTTP/JSON bridge
exposing a JVM's MBean server. Every request is a JSON document POSTed to
the agent URL; the agent answers with `value`, `status` and, on failure,
`error_type` and `error`.

Request types used by the probe:
    version  - liveness and authentication check
    search   - list MBean names matching a pattern
    exec     - invoke an operation on one MBean

Transport and protocol failures are translated into the probe's exception
hierarchy here, so callers never handle httpx exceptions directly.
"""

from typing import Any

import httpx

from jmxcheck.core.exceptions import (
    AuthenticationError,
    EndpointConnectionError,
    InstanceNotFoundError,
    InvocationError,
    MalformedInputError,
)
from jmxcheck.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

INSTANCE_NOT_FOUND = "javax.management.InstanceNotFoundException"
MALFORMED_OBJECT_NAME = "javax.management.MalformedObjectNameException"


class JolokiaClient:
    """
    HTTP client for one Jolokia agent.

    Features:
    - Basic authentication when credentials are given
    - Keep-alive expiry set to the liveness-check period for anonymous sessions
    - Structured logging of requests/responses
    - Error translation into probe exceptions

    Usage:
        client = JolokiaClient("http://localhost:8778/jolokia")
        client.version()
        value = client.execute("java.lang:type=Memory", "gc")
        client.close()
    """

    def __init__(
        self,
        url: str,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 10.0,
        check_period: float | None = None,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the Jolokia client.

        Args:
            url: Jolokia agent URL.
            username: Basic auth username. Used only together with password.
            password: Basic auth password. Used only together with username.
            timeout: Timeout in seconds for connect, read and write.
            check_period: Keep-alive expiry in seconds for anonymous sessions.
            verify: Verify TLS certificates for https URLs.
            transport: Optional httpx transport, mainly for tests.
        """
        self.url = url
        self.timeout = timeout
        self.verify = verify
        self._auth = (username, password) if username is not None and password is not None else None
        self._check_period = check_period
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def authenticated(self) -> bool:
        return self._auth is not None

    @property
    def is_closed(self) -> bool:
        return self._client is None or self._client.is_closed

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            kwargs: dict[str, Any] = {
                "timeout": self.timeout,
                "verify": self.verify,
                "headers": {"Content-Type": "application/json"},
            }
            if self._auth is not None:
                kwargs["auth"] = httpx.BasicAuth(*self._auth)
            elif self._check_period is not None:
                kwargs["limits"] = httpx.Limits(keepalive_expiry=self._check_period)
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.Client(**kwargs)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()
        self._client = None

    def request(self, payload: dict[str, Any]) -> Any:
        """
        Send one Jolokia request and return its `value`.

        Args:
            payload: Jolokia request document (must carry `type`).

        Returns:
            The decoded `value` field of the response.

        Raises:
            EndpointConnectionError: On transport failure or a non-Jolokia response.
            AuthenticationError: When the agent rejects the credentials.
            InstanceNotFoundError: When the addressed MBean is not registered.
            MalformedInputError: When the agent rejects the object name.
            InvocationError: On any other error reported by the agent.
        """
        client = self._get_client()
        request_type = payload.get("type")

        log_with_source(logger, "probe", "debug", "Jolokia request", url=self.url, type=request_type)

        try:
            response = client.post(self.url, json=payload)
        except httpx.TimeoutException as e:
            log_with_source(logger, "probe", "error", "Jolokia request timed out", url=self.url, error=str(e))
            raise EndpointConnectionError(f"Timed out after {self.timeout}s talking to {self.url}") from e
        except httpx.HTTPError as e:
            log_with_source(logger, "probe", "error", "Jolokia request failed", url=self.url, error=str(e))
            raise EndpointConnectionError(f"{type(e).__name__}: {e}") from e

        log_with_source(
            logger, "probe", "debug", "Jolokia response",
            url=self.url, type=request_type, status_code=response.status_code,
        )

        if response.status_code in (401, 403):
            raise AuthenticationError(f"Authentication failed (HTTP {response.status_code})")
        if response.status_code >= 400:
            raise EndpointConnectionError(f"Unexpected HTTP status {response.status_code} from {self.url}")

        try:
            body = response.json()
        except ValueError as e:
            raise EndpointConnectionError(f"Response from {self.url} is not a Jolokia response") from e

        if not isinstance(body, dict) or "status" not in body:
            raise EndpointConnectionError(f"Response from {self.url} is not a Jolokia response")

        return self._unwrap(body)

    def _unwrap(self, body: dict[str, Any]) -> Any:
        status = body["status"]
        if status == 200:
            return body.get("value")

        error_type = body.get("error_type") or ""
        message = body.get("error") or f"Jolokia request failed with status {status}"

        log_with_source(
            logger, "probe", "warning", "Jolokia error response",
            status=status, error_type=error_type, error=message,
        )

        if status in (401, 403):
            raise AuthenticationError(message)
        if error_type == INSTANCE_NOT_FOUND:
            raise InstanceNotFoundError(message)
        if error_type == MALFORMED_OBJECT_NAME:
            raise MalformedInputError(message)
        raise InvocationError(message, error_type=error_type or None)

    def version(self) -> dict[str, Any]:
        """Fetch agent version information."""
        return self.request({"type": "version"})

    def search(self, pattern: str) -> list[str]:
        """Return the names of all MBeans matching the pattern."""
        return list(self.request({"type": "search", "mbean": pattern}) or [])

    def execute(self, mbean: str, operation: str) -> Any:
        """Invoke a zero-argument operation on an MBean."""
        return self.request({
            "type": "exec",
            "mbean": mbean,
            "operation": operation,
            "arguments": [],
        })
