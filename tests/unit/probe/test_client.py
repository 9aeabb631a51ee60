"""Unit tests for the Jolokia HTTP client."""

import httpx
import pytest

from jmxcheck.core.exceptions import (
    AuthenticationError,
    EndpointConnectionError,
    InstanceNotFoundError,
    InvocationError,
    MalformedInputError,
)
from jmxcheck.probe.client import JolokiaClient


def _transport_returning(response: httpx.Response) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: response)


class TestJolokiaClient:
    """Tests for JolokiaClient requests."""

    @pytest.fixture
    def client(self, agent, agent_url) -> JolokiaClient:
        return JolokiaClient(agent_url, transport=agent.transport)

    def test_version(self, client, agent):
        assert client.version()["agent"] == "2.0.2"
        assert agent.requests == [{"type": "version"}]
        client.close()

    def test_search_returns_names(self, client, agent):
        agent.search_results["com.example:*"] = ["com.example:type=Health"]

        assert client.search("com.example:*") == ["com.example:type=Health"]
        client.close()

    def test_search_without_matches(self, client):
        assert client.search("com.example:*") == []
        client.close()

    def test_execute_sends_empty_arguments(self, client, agent):
        agent.register("com.example:type=Health", health={"status": "UP"})

        assert client.execute("com.example:type=Health", "health") == {"status": "UP"}
        assert agent.requests[-1] == {
            "type": "exec",
            "mbean": "com.example:type=Health",
            "operation": "health",
            "arguments": [],
        }
        client.close()

    def test_execute_null_value(self, client, agent):
        agent.register("com.example:type=Health", health=None)

        assert client.execute("com.example:type=Health", "health") is None
        client.close()

    def test_instance_not_found(self, client):
        with pytest.raises(InstanceNotFoundError):
            client.execute("com.example:type=Missing", "health")
        client.close()

    def test_remote_exception(self, client, agent, remote_failure):
        agent.register(
            "com.example:type=Health",
            health=remote_failure("javax.management.MBeanException", "disk on fire"),
        )

        with pytest.raises(InvocationError) as exc_info:
            client.execute("com.example:type=Health", "health")

        assert exc_info.value.message == "disk on fire"
        assert exc_info.value.error_type == "javax.management.MBeanException"
        client.close()

    def test_malformed_object_name_from_agent(self, agent_url):
        transport = _transport_returning(httpx.Response(200, json={
            "status": 400,
            "error_type": "javax.management.MalformedObjectNameException",
            "error": "Key properties cannot be empty",
        }))
        client = JolokiaClient(agent_url, transport=transport)

        with pytest.raises(MalformedInputError):
            client.execute("com.example:", "health")
        client.close()


class TestJolokiaClientTransportErrors:
    """Tests for translation of HTTP-level failures."""

    def test_unauthorized(self, agent, agent_url):
        agent.require_credentials("monitor", "s3cret")
        client = JolokiaClient(agent_url, transport=agent.transport)

        with pytest.raises(AuthenticationError) as exc_info:
            client.version()

        assert "401" in exc_info.value.message
        client.close()

    def test_basic_auth_sent(self, agent, agent_url):
        agent.require_credentials("monitor", "s3cret")
        client = JolokiaClient(agent_url, "monitor", "s3cret", transport=agent.transport)

        assert client.authenticated
        assert client.version()["protocol"] == "8.0"
        client.close()

    def test_half_credentials_are_ignored(self, agent_url):
        assert not JolokiaClient(agent_url, username="monitor").authenticated
        assert not JolokiaClient(agent_url, password="s3cret").authenticated

    def test_connection_refused(self, agent_url):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = JolokiaClient(agent_url, transport=httpx.MockTransport(refuse))

        with pytest.raises(EndpointConnectionError) as exc_info:
            client.version()

        assert "Connection refused" in exc_info.value.message
        client.close()

    def test_timeout(self, agent_url):
        def stall(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = JolokiaClient(agent_url, timeout=1.5, transport=httpx.MockTransport(stall))

        with pytest.raises(EndpointConnectionError) as exc_info:
            client.version()

        assert "1.5s" in exc_info.value.message
        client.close()

    def test_http_error_status(self, agent_url):
        client = JolokiaClient(agent_url, transport=_transport_returning(httpx.Response(502)))

        with pytest.raises(EndpointConnectionError) as exc_info:
            client.version()

        assert "502" in exc_info.value.message
        client.close()

    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>not jolokia</html>"),
        httpx.Response(200, json=["not", "a", "document"]),
        httpx.Response(200, json={"value": 1}),
    ])
    def test_not_a_jolokia_response(self, agent_url, response):
        client = JolokiaClient(agent_url, transport=_transport_returning(response))

        with pytest.raises(EndpointConnectionError) as exc_info:
            client.version()

        assert "not a Jolokia response" in exc_info.value.message
        client.close()


class TestJolokiaClientLifecycle:
    """Tests for client creation and release."""

    def test_close_is_idempotent(self, agent, agent_url):
        client = JolokiaClient(agent_url, transport=agent.transport)
        client.version()
        assert not client.is_closed

        client.close()
        client.close()

        assert client.is_closed

    def test_anonymous_session_uses_check_period(self, agent_url):
        client = JolokiaClient(agent_url, check_period=5.0)

        http_client = client._get_client()

        assert http_client.auth is None
        client.close()
