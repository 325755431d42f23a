import pytest

from chat_core.relay.service import RelayService, augment_system_message
from chat_core.prompts import assistant_persona, formatting_instructions
from chat_core.domain.exceptions import ConfigurationError, NetworkError, UpstreamError


class SettingsStub:
    def __init__(self, openai_api_key=None, api_base_url="/api"):
        self.openai_api_key = openai_api_key
        self.api_base_url = api_base_url
        self.api_token = "tok"
        self.http_timeout = 1.0


class FakeProvider:
    def __init__(self, name, reply="ok", error=None):
        self.name = name
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, messages):
        self.calls.append(messages)
        if self.error:
            raise self.error
        return self.reply


def _system_messages(messages):
    return [m for m in messages if m["role"] == "system"]


def test_augment_inserts_system_message():
    out = augment_system_message([{"role": "user", "content": "hi"}])
    assert out[0]["role"] == "system"
    assert out[0]["content"] == f"{assistant_persona()} {formatting_instructions()}"
    assert out[1] == {"role": "user", "content": "hi"}


def test_augment_appends_to_existing_system_message_without_mutation():
    original = [
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "hi", "timestamp": 1},
    ]
    out = augment_system_message(original)
    assert len(_system_messages(out)) == 1
    assert out[0]["content"] == f"Be brief. {formatting_instructions()}"
    assert out[1] == {"role": "user", "content": "hi"}
    assert original[0]["content"] == "Be brief."


def test_relay_without_configuration_fails():
    service = RelayService(SettingsStub(), FakeProvider("custom"), FakeProvider("openai"))
    with pytest.raises(ConfigurationError) as exc:
        service.relay([{"role": "user", "content": "hi"}])
    assert exc.value.http_status == 500


def test_relay_uses_openai_when_only_key():
    custom, official = FakeProvider("custom"), FakeProvider("openai", reply="from openai")
    service = RelayService(SettingsStub(openai_api_key="sk-0123456789"), custom, official)
    res = service.relay([{"role": "user", "content": "hi"}])
    assert res.to_dict() == {"message": "from openai", "status": "success"}
    assert custom.calls == []
    assert len(_system_messages(official.calls[0])) == 1


def test_relay_prefers_custom_endpoint():
    custom, official = FakeProvider("custom", reply="from custom"), FakeProvider("openai")
    settings = SettingsStub(openai_api_key="sk-0123456789", api_base_url="https://llm.example.com")
    res = RelayService(settings, custom, official).relay([{"role": "user", "content": "hi"}])
    assert res.message == "from custom"
    assert official.calls == []
    sys_msgs = _system_messages(custom.calls[0])
    assert len(sys_msgs) == 1
    assert formatting_instructions() in sys_msgs[0]["content"]


def test_relay_falls_back_on_upstream_5xx():
    custom = FakeProvider("custom", error=UpstreamError(code="UPSTREAM_ERROR", message="boom", http_status=503))
    official = FakeProvider("openai", reply="rescued")
    settings = SettingsStub(openai_api_key="sk-0123456789", api_base_url="https://llm.example.com")
    res = RelayService(settings, custom, official).relay([{"role": "user", "content": "hi"}])
    assert res.message == "rescued"
    assert official.calls == custom.calls


def test_relay_surfaces_custom_failure_without_key():
    custom = FakeProvider("custom", error=UpstreamError(code="UPSTREAM_ERROR", message="boom", http_status=503))
    official = FakeProvider("openai")
    settings = SettingsStub(api_base_url="https://llm.example.com")
    with pytest.raises(UpstreamError) as exc:
        RelayService(settings, custom, official).relay([{"role": "user", "content": "hi"}])
    assert exc.value.http_status == 503
    assert official.calls == []


def test_relay_fallback_failure_propagates():
    custom = FakeProvider("custom", error=NetworkError(code="NETWORK_ERROR", message="down", http_status=500))
    official = FakeProvider("openai", error=NetworkError(code="NETWORK_ERROR", message="also down", http_status=500))
    settings = SettingsStub(openai_api_key="sk-0123456789", api_base_url="https://llm.example.com")
    with pytest.raises(NetworkError) as exc:
        RelayService(settings, custom, official).relay([{"role": "user", "content": "hi"}])
    assert exc.value.message == "also down"
    assert len(official.calls) == 1
