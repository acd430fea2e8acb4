"""Tests for environment configuration."""

import os
from unittest.mock import patch

import pytest

from storefront_client.config import DEFAULT_API_URL, StorefrontConfig
from storefront_client.errors import InvalidArgumentError


class TestFromEnv:
    @patch.dict(os.environ, {}, clear=False)
    def test_defaults(self) -> None:
        for name in (
            "STOREFRONT_API_URL",
            "STOREFRONT_API_TOKEN",
            "STOREFRONT_REQUEST_TIMEOUT",
            "RAZORPAY_KEY_ID",
            "GOOGLE_CLIENT_ID",
            "STOREFRONT_COLLECTOR_TIMEOUT",
            "STOREFRONT_REFETCH_AFTER_WRITE",
            "STOREFRONT_LOG_LEVEL",
        ):
            os.environ.pop(name, None)
        config = StorefrontConfig.from_env()
        assert config.api_url == DEFAULT_API_URL
        assert config.api_token is None
        assert config.request_timeout == 10.0
        assert config.collector_timeout is None
        assert config.refetch_after_write is False
        assert config.log_level == "INFO"

    @patch.dict(
        os.environ,
        {
            "STOREFRONT_API_URL": "https://shop.example",
            "STOREFRONT_API_TOKEN": "tok",
            "STOREFRONT_REQUEST_TIMEOUT": "2.5",
            "RAZORPAY_KEY_ID": "rzp_test_key",
            "GOOGLE_CLIENT_ID": "client.apps",
            "STOREFRONT_COLLECTOR_TIMEOUT": "300",
            "STOREFRONT_REFETCH_AFTER_WRITE": "true",
            "STOREFRONT_LOG_LEVEL": "debug",
        },
    )
    def test_reads_every_variable(self) -> None:
        config = StorefrontConfig.from_env()
        assert config.api_url == "https://shop.example"
        assert config.api_token == "tok"
        assert config.request_timeout == 2.5
        assert config.gateway_key == "rzp_test_key"
        assert config.identity_client_id == "client.apps"
        assert config.collector_timeout == 300.0
        assert config.refetch_after_write is True
        assert config.log_level == "DEBUG"

    @patch.dict(os.environ, {"STOREFRONT_COLLECTOR_TIMEOUT": "soon"})
    def test_bad_number(self) -> None:
        with pytest.raises(InvalidArgumentError):
            StorefrontConfig.from_env()
