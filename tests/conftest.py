"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Remote endpoints are simulated in-process: FakeJolokiaAgent answers Jolokia
request documents through an httpx.MockTransport, so no JVM is needed.
"""

import base64
import json
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from jmxcheck.core.config import get_app_config, get_settings
from jmxcheck.core.logging import setup_logging

AGENT_URL = "http://jvm.example:8778/jolokia"


# =============================================================================
# Configuration and Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Use the bundled settings and no credentials from the environment."""
    for name in ("JMXCHECK_CONFIG_DIR", "JMXCHECK_USERNAME", "JMXCHECK_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    """Route structlog through stdlib logging without console output."""
    setup_logging(level="DEBUG", enable_console=False, enable_file_logging=False)


# =============================================================================
# Fake Jolokia Agent
# =============================================================================


class RemoteFailure:
    """Operation result marker: the operation throws on the endpoint."""

    def __init__(self, error_type: str = "javax.management.MBeanException", message: str = "boom") -> None:
        self.error_type = error_type
        self.message = message


class FakeJolokiaAgent:
    """
    Minimal Jolokia agent answering version, search and exec requests.

    Usage:
        agent.register("com.example:type=Health", health={"status": "UP"})
        agent.search_results["com.example:type=*"] = ["com.example:type=Health"]
        client = JolokiaClient(AGENT_URL, transport=agent.transport)
    """

    def __init__(self) -> None:
        self.mbeans: dict[str, dict[str, Any]] = {}
        self.search_results: dict[str, list[str]] = {}
        self.credentials: tuple[str, str] | None = None
        self.requests: list[dict[str, Any]] = []
        self.transport = httpx.MockTransport(self.handle)

    def register(self, name: str, **operations: Any) -> None:
        self.mbeans[name] = operations

    def require_credentials(self, username: str, password: str) -> None:
        self.credentials = (username, password)

    @staticmethod
    def _reply(body: dict[str, Any]) -> httpx.Response:
        return httpx.Response(200, json=body)

    @staticmethod
    def _error(status: int, error_type: str, message: str) -> httpx.Response:
        return httpx.Response(200, json={"status": status, "error_type": error_type, "error": message})

    def _authorized(self, request: httpx.Request) -> bool:
        if self.credentials is None:
            return True
        token = base64.b64encode(":".join(self.credentials).encode()).decode()
        return request.headers.get("Authorization") == f"Basic {token}"

    def handle(self, request: httpx.Request) -> httpx.Response:
        if not self._authorized(request):
            return httpx.Response(401, text="Unauthorized")

        payload = json.loads(request.content)
        self.requests.append(payload)
        request_type = payload["type"]

        if request_type == "version":
            return self._reply({"status": 200, "value": {"agent": "2.0.2", "protocol": "8.0"}})

        if request_type == "search":
            return self._reply({"status": 200, "value": self.search_results.get(payload["mbean"], [])})

        if request_type == "exec":
            mbean = payload["mbean"]
            if mbean not in self.mbeans:
                return self._error(404, "javax.management.InstanceNotFoundException", mbean)
            operations = self.mbeans[mbean]
            operation = payload["operation"]
            if operation not in operations:
                return self._error(
                    400, "java.lang.IllegalArgumentException",
                    f"No operation {operation} found on MBean {mbean}",
                )
            result = operations[operation]
            if isinstance(result, RemoteFailure):
                return self._error(500, result.error_type, result.message)
            return self._reply({"status": 200, "value": result})

        return self._error(400, "java.lang.IllegalArgumentException", f"Unknown type {request_type}")

    def count(self, request_type: str) -> int:
        return sum(1 for r in self.requests if r["type"] == request_type)


@pytest.fixture
def agent() -> FakeJolokiaAgent:
    """Provide a fresh fake Jolokia agent."""
    return FakeJolokiaAgent()


@pytest.fixture
def agent_url() -> str:
    return AGENT_URL


@pytest.fixture
def remote_failure() -> type[RemoteFailure]:
    """Provide the RemoteFailure marker class for operation results."""
    return RemoteFailure
