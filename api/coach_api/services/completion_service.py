"""
Completion gateway: the single client handle for the hosted chat-completions API.
"""
import json
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence

import requests

from coach_api.core.config import settings
from coach_api.core.exceptions import ExternalServiceError
from coach_api.utils.text_utils import strip_code_fences

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 10

REPLY_FALLBACK = "I'm sorry, I didn't quite catch that. Could you say that again?"
FEEDBACK_FALLBACK = (
    "Great conversation practice! Keep working on your focus areas and you'll see improvement."
)


def build_messages(
    system_prompt: str,
    history: Sequence[Any],
    current_input: str,
    window: int = HISTORY_WINDOW,
) -> List[Dict[str, str]]:
    """
    Build a chat message list for the completion API.

    Args:
        system_prompt: Instantiated system prompt
        history: Prior turns, objects or dicts with `role` and `text`
        current_input: The learner's new utterance
        window: How many of the most recent prior turns to keep

    Returns:
        [system] + last `window` turns + [current user input]. Learner turns map
        to role "user"; every other role maps to "assistant".
    """
    messages = [{"role": "system", "content": system_prompt}]
    recent = list(history)[-window:] if window > 0 else []
    for turn in recent:
        role = turn["role"] if isinstance(turn, dict) else turn.role
        text = turn["text"] if isinstance(turn, dict) else turn.text
        messages.append({
            "role": "user" if role == "user" else "assistant",
            "content": text,
        })
    messages.append({"role": "user", "content": current_input})
    return messages


class CompletionGateway:
    """Thin synchronous wrapper over `POST {base_url}/chat/completions`. No retries, no streaming."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        default_model: str,
        timeout: float = 60.0,
        http: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self.timeout = timeout
        self.http = http or requests.Session()

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """
        Run one completion and return the trimmed text ("" when the model produced nothing).

        Raises:
            ExternalServiceError: If the API key is missing, the request fails,
                or the response body is not a chat completion
        """
        if not self.api_key:
            raise ExternalServiceError("Completion service not configured", details="OPENAI_API_KEY is not set")

        model_name = model or self.default_model
        payload: Dict[str, Any] = {"model": model_name, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = self.http.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            error_msg = f"Completion request failed: {str(e)}"
            if getattr(e, "response", None) is not None:
                error_msg += f" - Status: {e.response.status_code}"
            logger.error(error_msg)
            raise ExternalServiceError("Completion request failed", details=error_msg) from e
        except ValueError as e:
            logger.error(f"Completion response was not JSON: {str(e)}")
            raise ExternalServiceError("Completion request failed", details="Response was not JSON") from e

        try:
            content = data["choices"][0]["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            logger.error(f"Unexpected completion response shape: {str(data)[:500]}")
            raise ExternalServiceError("Completion request failed", details="Response missing choices") from e

        usage = data.get("usage") or {}
        logger.info(
            f"Completion via {model_name}: "
            f"{usage.get('prompt_tokens', 0)} prompt / {usage.get('completion_tokens', 0)} output tokens"
        )
        return (content or "").strip()

    def complete_json(self, messages: List[Dict[str, str]], **kwargs) -> Dict[str, Any]:
        """
        Run a JSON-mode completion and parse the reply into a dict.

        Raises:
            ExternalServiceError: If the reply is empty or not a JSON object
        """
        text = self.complete(messages, json_mode=True, **kwargs)
        if not text:
            raise ExternalServiceError("Completion request failed", details="Empty response from model")
        text = strip_code_fences(text)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse model JSON response: {e}")
            logger.error(f"Response text: {text[:500]}")
            raise ExternalServiceError("Completion request failed", details=f"Model returned invalid JSON: {str(e)}") from e
        if not isinstance(parsed, dict):
            raise ExternalServiceError("Completion request failed", details="Model returned a non-object JSON value")
        return parsed

    def close(self) -> None:
        self.http.close()


@lru_cache
def get_completion_gateway() -> CompletionGateway:
    """Dependency returning the process-wide gateway."""
    return CompletionGateway(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        default_model=settings.openai_chat_model,
        timeout=settings.openai_timeout_seconds,
    )
