"""Unit tests for assistant message assembly."""

from backend.app.api.chat import SYSTEM_PROMPT, ChatMessage, build_messages


def test_history_is_normalised() -> None:
    history = [
        ChatMessage(role="user", parts=[{"text": "Where is Victoria Memorial?"}]),
        ChatMessage(role="model", parts=[{"text": "Near the Maidan."}]),
        ChatMessage(role="assistant", content=""),
        ChatMessage(role="user", content="Is it open on Mondays?"),
    ]

    messages = build_messages("And the entry fee?", history)

    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1:] == [
        {"role": "user", "content": "Where is Victoria Memorial?"},
        {"role": "assistant", "content": "Near the Maidan."},
        {"role": "user", "content": "Is it open on Mondays?"},
        {"role": "user", "content": "And the entry fee?"},
    ]
