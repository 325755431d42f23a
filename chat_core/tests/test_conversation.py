from chat_core.domain.models import ChatMessage
from chat_core.domain.conversation import StoredConversation, derive_title


def test_models_round_trip():
    conv = StoredConversation(
        id="lq3k9x0abc",
        title="Hello",
        messages=[ChatMessage(role="user", content="Hello", timestamp=1), ChatMessage(role="assistant", content="Hi!", timestamp=2)],
        timestamp=3,
    )
    assert StoredConversation.from_dict(conv.to_dict()) == conv


def test_derive_title():
    assert derive_title([]) == "New Conversation"
    assert derive_title([ChatMessage(role="assistant", content="hello")]) == "New Conversation"
    assert derive_title([ChatMessage(role="user", content="  short  ")]) == "short"
    long_text = "x" * 31
    assert derive_title([ChatMessage(role="user", content=long_text)]) == "x" * 30 + "..."
    assert derive_title([ChatMessage(role="user", content="y" * 30)]) == "y" * 30


def test_chat_message_payload_drops_timestamp():
    msg = ChatMessage(role="user", content="hi", timestamp=5)
    assert msg.to_payload() == {"role": "user", "content": "hi"}
    assert ChatMessage.from_dict({"role": "user", "content": "hi"}).timestamp is None
