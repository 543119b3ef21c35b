"""Tests for the OTRS SOAP gateway adapter."""

import io
import socket
import urllib.error
from unittest.mock import MagicMock, patch

import pytest
from otrs_bridge.domain.entities.ticket import TicketOperation, TicketPayload
from otrs_bridge.domain.errors import ApplicationError, RemoteFault, ResolutionError
from otrs_bridge.domain.ports.ticket_gateway_port import TicketGatewayPort
from otrs_bridge.domain.value_objects.server_address import Credentials, ServerAddress
from otrs_bridge.infrastructure.adapters.otrs_soap_adapter import (
    OTRSSoapAdapter,
    resolve_host,
)
from otrs_bridge.infrastructure.adapters.soap_codec import SOAP_ENV_NS

CREDENTIALS = Credentials(user="nagios", password="s3cret")
SERVER = ServerAddress("otrs.example.com", 80)

CREATE_RESPONSE = (
    f'<soap:Envelope xmlns:soap="{SOAP_ENV_NS}"><soap:Body>'
    "<TicketCreateResponse>"
    "<ArticleID>1</ArticleID><TicketID>100</TicketID>"
    "<TicketNumber>2024010100001</TicketNumber>"
    "</TicketCreateResponse>"
    "</soap:Body></soap:Envelope>"
).encode()

FAULT_RESPONSE = (
    f'<soap:Envelope xmlns:soap="{SOAP_ENV_NS}"><soap:Body>'
    "<soap:Fault><faultcode>Server</faultcode>"
    "<faultstring>Operation not found</faultstring></soap:Fault>"
    "</soap:Body></soap:Envelope>"
).encode()


def _payload():
    return TicketPayload(
        operation=TicketOperation.CREATE,
        ticket={"Title": "web1 disk", "Queue": "Ops"},
        article={"Body": "line one\nline two"},
        dynamic_fields={"ProblemID": "42"},
    )


def _adapter(**kwargs):
    kwargs.setdefault("resolver", lambda host: "192.0.2.10")
    return OTRSSoapAdapter(**kwargs)


def _urlopen_returning(content):
    urlopen = MagicMock()
    urlopen.return_value.__enter__.return_value.read.return_value = content
    return urlopen


def _http_error(code, body):
    return urllib.error.HTTPError(
        "http://otrs.example.com", code, "Internal Server Error", {}, io.BytesIO(body)
    )


class TestEndpoint:
    def test_default_url(self):
        adapter = _adapter()
        assert adapter.endpoint_url(SERVER) == (
            "http://otrs.example.com:80"
            "/otrs/nph-genericinterface.pl/Webservice/GenericTicketConnector"
        )

    def test_custom_scheme_and_path(self):
        adapter = _adapter(scheme="https", webservice_path="otrs/ws/Tickets")
        assert adapter.endpoint_url(ServerAddress("otrs")) == "https://otrs/otrs/ws/Tickets"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError, match="timeout_seconds"):
            OTRSSoapAdapter(timeout_seconds=0)

    def test_implements_port(self):
        assert isinstance(_adapter(), TicketGatewayPort)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_successful_create(self):
        urlopen = _urlopen_returning(CREATE_RESPONSE)
        with patch("urllib.request.urlopen", urlopen):
            result = await _adapter(timeout_seconds=5).submit(_payload(), CREDENTIALS, SERVER)

        assert result.ticket_id == 100
        assert result.ticket_number == "2024010100001"
        assert result.article_id == 1

        request = urlopen.call_args.args[0]
        assert urlopen.call_args.kwargs["timeout"] == 5
        assert request.get_method() == "POST"
        assert request.get_header("Soapaction") == (
            '"http://www.otrs.org/TicketConnector/#TicketCreate"'
        )
        assert request.get_header("Content-type").startswith("text/xml")
        assert b"<UserLogin>nagios</UserLogin>" in request.data

    @pytest.mark.asyncio
    async def test_resolution_failure_stops_before_post(self):
        def failing_resolver(host):
            raise ResolutionError(host, "Name or service not known")

        urlopen = _urlopen_returning(CREATE_RESPONSE)
        with patch("urllib.request.urlopen", urlopen):
            with pytest.raises(ResolutionError, match="otrs.example.com"):
                await _adapter(resolver=failing_resolver).submit(
                    _payload(), CREDENTIALS, SERVER
                )
        urlopen.assert_not_called()

    @pytest.mark.asyncio
    async def test_http_error_with_fault_body(self):
        urlopen = MagicMock(side_effect=_http_error(500, FAULT_RESPONSE))
        with patch("urllib.request.urlopen", urlopen):
            with pytest.raises(RemoteFault) as exc_info:
                await _adapter().submit(_payload(), CREDENTIALS, SERVER)
        assert exc_info.value.code == "Server"
        assert exc_info.value.message == "Operation not found"

    @pytest.mark.asyncio
    async def test_http_error_without_fault(self):
        urlopen = MagicMock(side_effect=_http_error(503, b"Service Unavailable"))
        with patch("urllib.request.urlopen", urlopen):
            with pytest.raises(RemoteFault) as exc_info:
                await _adapter().submit(_payload(), CREDENTIALS, SERVER)
        assert exc_info.value.code == "503"

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        urlopen = MagicMock(side_effect=urllib.error.URLError("Connection refused"))
        with patch("urllib.request.urlopen", urlopen):
            with pytest.raises(RemoteFault, match="Transport: Connection refused"):
                await _adapter().submit(_payload(), CREDENTIALS, SERVER)

    @pytest.mark.asyncio
    async def test_timeout(self):
        urlopen = MagicMock(side_effect=TimeoutError("timed out"))
        with patch("urllib.request.urlopen", urlopen):
            with pytest.raises(RemoteFault, match="timed out"):
                await _adapter().submit(_payload(), CREDENTIALS, SERVER)

    @pytest.mark.asyncio
    async def test_embedded_error_is_application_error(self):
        content = (
            f'<soap:Envelope xmlns:soap="{SOAP_ENV_NS}"><soap:Body>'
            "<TicketCreateResponse><Error>"
            "<ErrorCode>TicketCreate.InvalidParameter</ErrorCode>"
            "<ErrorMessage>Queue not found</ErrorMessage>"
            "</Error></TicketCreateResponse>"
            "</soap:Body></soap:Envelope>"
        ).encode()
        with patch("urllib.request.urlopen", _urlopen_returning(content)):
            with pytest.raises(ApplicationError, match="Queue not found"):
                await _adapter().submit(_payload(), CREDENTIALS, SERVER)

    @pytest.mark.asyncio
    async def test_password_not_logged(self, caplog):
        with patch("urllib.request.urlopen", _urlopen_returning(CREATE_RESPONSE)):
            with caplog.at_level("DEBUG", logger="otrs_bridge"):
                await _adapter().submit(_payload(), CREDENTIALS, SERVER)
        assert "s3cret" not in caplog.text
        assert "ArticleData Body = line two" in caplog.text


class TestResolveHost:
    def test_resolves_first_address(self):
        infos = [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.10", 0))]
        with patch("socket.getaddrinfo", return_value=infos):
            assert resolve_host("otrs.example.com") == "192.0.2.10"

    def test_unknown_host(self):
        with patch("socket.getaddrinfo", side_effect=socket.gaierror("not known")):
            with pytest.raises(ResolutionError, match="Failed to resolve IP of nowhere"):
                resolve_host("nowhere")
