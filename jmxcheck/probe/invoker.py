"""
Remote Invoker.

Connects to a management endpoint, resolves the target MBean and invokes
one zero-argument operation on it. The connection is a scoped resource:
`open_connection` releases it on every exit path, and releasing is
idempotent so the session is closed exactly once.

Usage:
    from jmxcheck.probe.invoker import invoke, open_connection

    with open_connection(url, username, password, timeout=10.0) as connection:
        value = invoke(connection, "java.lang:type=Memory", "gc")
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from urllib.parse import urlsplit

import httpx

from jmxcheck.core.exceptions import (
    AmbiguousTargetError,
    ApplicationError,
    AuthenticationError,
    EndpointConnectionError,
    InstanceNotFoundError,
    InvocationError,
    MalformedInputError,
    NotFoundError,
)
from jmxcheck.core.logging import get_logger, log_with_source
from jmxcheck.probe.client import JolokiaClient
from jmxcheck.probe.object_name import ObjectName

logger = get_logger(__name__)


class JmxConnection:
    """An open session to one management endpoint."""

    def __init__(self, client: JolokiaClient) -> None:
        self.client = client
        self.agent: dict[str, Any] = {}
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def close(self) -> None:
        """Release the session. Later calls are no-ops."""
        if self._released:
            return
        self._released = True
        self.client.close()
        log_with_source(logger, "probe", "debug", "Connection released", url=self.client.url)

    def __enter__(self) -> "JmxConnection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def validate_service_url(url: str) -> str:
    """
    Check that the service URL can address a Jolokia agent.

    Raises:
        MalformedInputError: If the URL is not http(s) with a host and a
            numeric port.
    """
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a non-numeric port
        httpx.URL(url)
    except (ValueError, httpx.InvalidURL) as e:
        raise MalformedInputError(f"Malformed service URL [{url}]") from e

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise MalformedInputError(f"Malformed service URL [{url}]")
    return url


def connect(
    url: str,
    username: str | None = None,
    password: str | None = None,
    *,
    timeout: float = 10.0,
    check_period: float | None = 5.0,
    verify: bool = True,
    transport: httpx.BaseTransport | None = None,
) -> JmxConnection:
    """
    Open a session to the management endpoint.

    With both credentials present they are sent as basic auth; otherwise
    the liveness-check period is applied to the session instead. The agent
    version request confirms the endpoint is reachable and accepts us.

    Raises:
        MalformedInputError: If the service URL is malformed.
        AuthenticationError: If the endpoint rejects the credentials.
        EndpointConnectionError: If the endpoint cannot be reached.
    """
    validate_service_url(url)
    if username is None or password is None:
        username = password = None

    client = JolokiaClient(
        url,
        username=username,
        password=password,
        timeout=timeout,
        check_period=check_period,
        verify=verify,
        transport=transport,
    )
    connection = JmxConnection(client)

    try:
        agent = client.version()
    except AuthenticationError as e:
        connection.close()
        raise AuthenticationError(f"Error opening connection: {e.message}") from e
    except ApplicationError as e:
        connection.close()
        raise EndpointConnectionError(f"Error opening connection: {e.message}") from e
    except Exception:
        connection.close()
        raise

    connection.agent = agent if isinstance(agent, dict) else {}
    log_with_source(
        logger, "probe", "info", "Connection opened",
        url=url, authenticated=client.authenticated, agent=connection.agent.get("agent"),
    )
    return connection


def disconnect(connection: JmxConnection) -> None:
    """Release the session."""
    connection.close()


@contextmanager
def open_connection(
    url: str,
    username: str | None = None,
    password: str | None = None,
    **kwargs: Any,
) -> Iterator[JmxConnection]:
    """Connect and guarantee the session is released when the block exits."""
    connection = connect(url, username, password, **kwargs)
    try:
        yield connection
    finally:
        disconnect(connection)


def resolve_target(connection: JmxConnection, identifier: str) -> str:
    """
    Resolve an object name or pattern to exactly one MBean name.

    Raises:
        MalformedInputError: If the identifier is not a valid object name.
        NotFoundError: If a pattern matches no MBean.
        AmbiguousTargetError: If a pattern matches more than one MBean.
    """
    name = ObjectName.parse(identifier)
    if not name.is_pattern:
        return identifier

    try:
        matches = connection.client.search(identifier)
    except InstanceNotFoundError:
        matches = []

    log_with_source(
        logger, "probe", "debug", "Pattern resolved",
        pattern=name.canonical_name, matches=len(matches),
    )

    if not matches:
        raise NotFoundError(f"No MBean matches objectName pattern [{identifier}]")
    if len(matches) > 1:
        raise AmbiguousTargetError(
            f"Object name not unique: objectName pattern matches {len(matches)} MBeans."
        )
    return matches[0]


def invoke(connection: JmxConnection, identifier: str, operation: str) -> Any:
    """
    Invoke a zero-argument operation on the MBean the identifier resolves to.

    Errors keep their type; their message is prefixed with the operation so
    the operator sees what failed.

    Raises:
        InstanceNotFoundError: If the MBean is not registered.
        InvocationError: If the operation fails on the endpoint.
    """
    try:
        target = resolve_target(connection, identifier)
        value = connection.client.execute(target, operation)
    except InvocationError as e:
        raise InvocationError(
            f"Error invoking operation [{operation}]: {e.message}", error_type=e.error_type,
        ) from e
    except ApplicationError as e:
        e.message = f"Error invoking operation [{operation}]: {e.message}"
        e.args = (e.message,)
        raise

    log_with_source(
        logger, "probe", "info", "Operation invoked",
        mbean=target, operation=operation, result_type=type(value).__name__,
    )
    return value
