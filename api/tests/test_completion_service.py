from unittest.mock import MagicMock

import pytest
import requests

from coach_api.core.exceptions import ExternalServiceError
from coach_api.schemas.conversation import TranscriptTurn
from coach_api.services.completion_service import CompletionGateway, build_messages


def _gateway(body=None, api_key="sk-test"):
    http = MagicMock()
    response = MagicMock()
    response.json.return_value = body
    http.post.return_value = response
    return CompletionGateway(api_key, "https://llm.example.com/v1/", "gpt-4o-mini", timeout=5, http=http), http


def _completion(content):
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 3},
    }


def test_build_messages_maps_roles_and_windows_history():
    history = [TranscriptTurn(role="user", text="u1"), {"role": "tutor", "text": "t1"}, {"role": "assistant", "text": "a1"}]

    messages = build_messages("system", history, "now", window=2)

    assert messages == [
        {"role": "system", "content": "system"},
        {"role": "assistant", "content": "t1"},
        {"role": "assistant", "content": "a1"},
        {"role": "user", "content": "now"},
    ]


def test_complete_posts_chat_completion():
    gateway, http = _gateway(_completion("  Hello there!  "))

    text = gateway.complete([{"role": "user", "content": "hi"}], temperature=0.8, max_tokens=200)

    assert text == "Hello there!"
    args, kwargs = http.post.call_args
    assert args[0] == "https://llm.example.com/v1/chat/completions"
    assert kwargs["json"] == {
        "model": "gpt-4o-mini",
        "messages": [{"role": "user", "content": "hi"}],
        "temperature": 0.8,
        "max_tokens": 200,
    }
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["timeout"] == 5


def test_complete_returns_empty_string_for_null_content():
    gateway, _ = _gateway(_completion(None))
    assert gateway.complete([]) == ""


def test_complete_without_api_key_fails():
    gateway, http = _gateway(_completion("x"), api_key="")
    with pytest.raises(ExternalServiceError):
        gateway.complete([])
    http.post.assert_not_called()


def test_complete_transport_error():
    gateway, http = _gateway()
    http.post.side_effect = requests.exceptions.ConnectionError("connection refused")
    with pytest.raises(ExternalServiceError) as exc_info:
        gateway.complete([])
    assert "connection refused" in exc_info.value.details


def test_complete_http_error_includes_status():
    gateway, http = _gateway()
    failed = MagicMock(status_code=429)
    http.post.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("Too Many Requests", response=failed)
    with pytest.raises(ExternalServiceError) as exc_info:
        gateway.complete([])
    assert "Status: 429" in exc_info.value.details


def test_complete_bad_response_shape():
    gateway, _ = _gateway({"unexpected": True})
    with pytest.raises(ExternalServiceError):
        gateway.complete([])


def test_complete_json_strips_fences_and_sets_json_mode():
    gateway, http = _gateway(_completion('```json\n{"actions": []}\n```'))

    assert gateway.complete_json([]) == {"actions": []}
    assert http.post.call_args.kwargs["json"]["response_format"] == {"type": "json_object"}


@pytest.mark.parametrize("content", ["", "not json", "[1, 2]"])
def test_complete_json_rejects_unusable_output(content):
    gateway, _ = _gateway(_completion(content))
    with pytest.raises(ExternalServiceError):
        gateway.complete_json([])
