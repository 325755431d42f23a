import pytest

from chat_core.providers import create_provider
from chat_core.providers.custom_client import CustomEndpointClient
from chat_core.providers.openai_client import OpenAIClient
from chat_core.relay.service import RelayService


class DummySettings:
    openai_api_key = "sk-0123456789"
    api_base_url = "https://llm.example.com"
    api_token = "tok"
    http_timeout = 1.0


def test_create_provider_by_name():
    assert isinstance(create_provider("custom", DummySettings()), CustomEndpointClient)
    assert isinstance(create_provider("OpenAI", DummySettings()), OpenAIClient)


def test_create_provider_unknown():
    with pytest.raises(KeyError):
        create_provider("kimi", DummySettings())


def test_relay_service_default_clients():
    service = RelayService(DummySettings())
    assert service.has_api_key
    assert service.has_custom_endpoint
    assert service._custom_client.url == "https://llm.example.com/v1/chat/completions"
