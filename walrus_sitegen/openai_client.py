"""A small synchronous client for the OpenAI chat and embedding endpoints."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

DEFAULT_BASE_URL = "https://api.openai.com/v1"

GPT4O = "gpt-4o"
GPT4O_LATEST = "chatgpt-4o-latest"

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

RESPONSE_FORMAT_JSON_OBJECT = "json_object"


class APIError(Exception):
    """An error response returned by the API."""

    def __init__(self, http_status_code: int, message: str, status: str = "") -> None:
        self.http_status_code = http_status_code
        self.message = message
        self.status = status
        super().__init__(
            f"error, status code: {http_status_code}, status: {status}, message: {message}"
        )


@dataclass(frozen=True)
class ChatCompletion:
    """The message contents of a chat completion, in choice order."""

    choices: tuple[str, ...] = ()
    usage: dict[str, Any] = field(default_factory=dict)
    model: str = ""

    @property
    def content(self) -> str:
        """Content of the first choice, or an empty string when there is none."""
        return self.choices[0] if self.choices else ""

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "ChatCompletion":
        choices = []
        for choice in payload.get("choices") or []:
            message = choice.get("message") or {}
            choices.append(message.get("content") or "")
        return cls(
            choices=tuple(choices),
            usage=dict(payload.get("usage") or {}),
            model=payload.get("model") or "",
        )


class OpenAIClient:
    """Calls the chat completion and embedding endpoints over HTTP."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else httpx.Client(timeout=timeout)

    def __enter__(self) -> "OpenAIClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self._http.close()

    def create_chat_completion(
        self,
        model: str,
        messages: Iterable[Mapping[str, str]],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
        response_format: str | None = None,
    ) -> ChatCompletion:
        """Request a chat completion and return its choices."""
        body: dict[str, Any] = {
            "model": model,
            "messages": [dict(message) for message in messages],
        }
        if max_tokens:
            body["max_tokens"] = max_tokens
        if temperature is not None:
            body["temperature"] = temperature
        if response_format:
            body["response_format"] = {"type": response_format}
        return ChatCompletion.from_response(self._post("/chat/completions", body))

    def create_embeddings(self, model: str, inputs: Sequence[str]) -> list[list[float]]:
        """Return one embedding vector per input, in input order."""
        payload = self._post("/embeddings", {"input": list(inputs), "model": model})
        data = sorted(payload.get("data") or [], key=lambda item: item.get("index", 0))
        return [[float(value) for value in item.get("embedding") or []] for item in data]

    def _post(self, path: str, body: Mapping[str, Any]) -> dict[str, Any]:
        response = self._http.post(
            self._base_url + path,
            json=body,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
        )
        if response.status_code >= 400:
            raise APIError(
                response.status_code,
                _error_message(response),
                response.reason_phrase,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise APIError(
                response.status_code, f"invalid JSON in response: {exc}", response.reason_phrase
            ) from exc
        if not isinstance(payload, dict):
            raise APIError(
                response.status_code, "response is not a JSON object", response.reason_phrase
            )
        return payload


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.text