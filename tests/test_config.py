"""Tests for transport configuration and the transport factory."""
import pytest
from fastapi import APIRouter, FastAPI
from pydantic import ValidationError

from ht_jsonrpc_http import (
    ConfigurationError,
    HTTPTransport,
    JSONRPCClient,
    JSONRPCServer,
    SSLOptions,
    TransportConfig,
    create_transport,
    load_config,
)
from ht_jsonrpc_http.config import DEFAULT_PATH


class TestTransportFactory:
    """Test create_transport validation and defaults."""

    def test_create_transport(self):
        transport = create_transport(host="127.0.0.1", port=8080)

        assert isinstance(transport, HTTPTransport)
        assert transport.config.host == "127.0.0.1"
        assert transport.config.port == 8080

    def test_requires_configuration(self):
        with pytest.raises(ConfigurationError):
            create_transport()

    def test_requires_port_with_host(self):
        with pytest.raises(ConfigurationError):
            create_transport(host="0.0.0.0")

    def test_requires_host_with_port(self):
        with pytest.raises(ConfigurationError):
            create_transport(port=80)

    def test_rejects_non_mapping(self):
        with pytest.raises(ConfigurationError):
            create_transport("127.0.0.1:8080")

    def test_invalid_field_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            create_transport(host="127.0.0.1", port="not-a-port")

    def test_defaults(self):
        transport = create_transport({"host": "127.0.0.1", "port": 8080})

        assert transport.config.ssl is False
        assert transport.config.path == "/ht-jsonrpc"
        assert transport.config.cors is False

    def test_explicit_values_override_defaults(self):
        transport = create_transport(host="127.0.0.1", port=8080, ssl=True, path="/other")

        assert transport.config.ssl is True
        assert transport.config.path == "/other"

    def test_none_falls_back_to_defaults(self):
        transport = create_transport(host="127.0.0.1", port=8080, ssl=None, path=None)

        assert transport.config.ssl is False
        assert transport.config.path == DEFAULT_PATH

    def test_app_replaces_host_and_port(self):
        transport = create_transport(app=FastAPI())

        assert transport.config.shared_app is True
        assert transport.config.host is None

    def test_router_is_accepted_as_app(self):
        transport = create_transport(app=APIRouter())

        assert transport.config.shared_app is True

    def test_constructors_share_config(self):
        transport = create_transport(host="127.0.0.1", port=8080)

        server = transport.Server()
        client = transport.Client()

        assert isinstance(server, JSONRPCServer)
        assert isinstance(client, JSONRPCClient)
        assert server.config is transport.config
        assert client.config is transport.config

    def test_keywords_override_config_instance(self):
        config = TransportConfig(host="127.0.0.1", port=8080)

        transport = create_transport(config, path="/rpc")

        assert transport.config.path == "/rpc"
        assert transport.config.port == 8080
        assert config.path == DEFAULT_PATH


class TestTransportConfig:
    """Test the config model itself."""

    def test_direct_construction_validates(self):
        with pytest.raises(ConfigurationError):
            TransportConfig(host="127.0.0.1")

    def test_config_is_frozen(self):
        config = TransportConfig(host="127.0.0.1", port=8080)

        with pytest.raises(ValidationError):
            config.port = 9090

    def test_ssl_mapping_becomes_options(self):
        config = TransportConfig(
            host="127.0.0.1",
            port=8443,
            ssl={"certfile": "cert.pem", "keyfile": "key.pem"},
        )

        assert isinstance(config.ssl, SSLOptions)
        assert config.ssl.certfile == "cert.pem"
        assert config.ssl.verify is True
        assert config.scheme == "https"

    def test_plain_scheme(self):
        config = TransportConfig(host="127.0.0.1", port=8080)

        assert config.scheme == "http"


class TestConfigSources:
    """Test loading configuration from the environment and YAML."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HT_JSONRPC_HOST", "127.0.0.1")
        monkeypatch.setenv("HT_JSONRPC_PORT", "9000")
        monkeypatch.setenv("HT_JSONRPC_PATH", "/env-rpc")
        monkeypatch.setenv("HT_JSONRPC_CORS", "true")

        config = TransportConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 9000
        assert config.path == "/env-rpc"
        assert config.cors is True
        assert config.ssl is False

    def test_from_env_ssl_options(self, monkeypatch):
        monkeypatch.setenv("HT_JSONRPC_HOST", "127.0.0.1")
        monkeypatch.setenv("HT_JSONRPC_PORT", "9443")
        monkeypatch.setenv("HT_JSONRPC_SSL_CA_CERTS", "/etc/ca.pem")
        monkeypatch.setenv("HT_JSONRPC_SSL_VERIFY", "0")

        config = TransportConfig.from_env()

        assert config.ssl.ca_certs == "/etc/ca.pem"
        assert config.ssl.verify is False

    def test_from_env_missing_address(self, monkeypatch):
        monkeypatch.delenv("HT_JSONRPC_HOST", raising=False)
        monkeypatch.delenv("HT_JSONRPC_PORT", raising=False)

        with pytest.raises(ConfigurationError):
            TransportConfig.from_env()

    def test_from_env_override_with_app(self, monkeypatch):
        monkeypatch.delenv("HT_JSONRPC_HOST", raising=False)
        monkeypatch.delenv("HT_JSONRPC_PORT", raising=False)
        app = FastAPI()

        config = TransportConfig.from_env(app=app)

        assert config.app is app

    def test_load_config(self, tmp_path):
        config_file = tmp_path / "transport.yaml"
        config_file.write_text(
            "host: 127.0.0.1\n"
            "port: 8088\n"
            "path: /yaml-rpc\n"
            "ssl:\n"
            "  ca_certs: ca.pem\n"
        )

        config = load_config(config_file)

        assert config.port == 8088
        assert config.path == "/yaml-rpc"
        assert config.ssl.ca_certs == "ca.pem"

    def test_load_config_requires_mapping(self, tmp_path):
        config_file = tmp_path / "transport.yaml"
        config_file.write_text("- not\n- a mapping\n")

        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_load_empty_config(self, tmp_path):
        config_file = tmp_path / "transport.yaml"
        config_file.write_text("")

        with pytest.raises(ConfigurationError):
            load_config(config_file)
