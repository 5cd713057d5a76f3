"""Site and code generation through a chat completion service."""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

import httpx

from walrus_sitegen.models import GeneratedFile
from walrus_sitegen.openai_client import (
    GPT4O,
    GPT4O_LATEST,
    RESPONSE_FORMAT_JSON_OBJECT,
    ROLE_SYSTEM,
    ROLE_USER,
    APIError,
    ChatCompletion,
    OpenAIClient,
)
from walrus_sitegen.prompts import code_change_prompt, site_generation_prompt
from walrus_sitegen.storage import DEFAULT_ROOT, save_files_to_disk
from walrus_sitegen.utils import should_retry

logger = logging.getLogger(__name__)

SITE_SYSTEM_PROMPT = (
    "Role: code generator. Produce code that follows the user's prompt "
    "and the formatting rules given."
)

_CODE_CHANGE_KEYS = ("files", "changes", "result", "code", "output")
_SITE_KEYS = ("files", "result", "code", "data", "output")

_CLIENT_ERRORS = (APIError, httpx.HTTPError)

T = TypeVar("T")


class GenerationError(Exception):
    """The completion service could not be reached or its answer was unusable."""


class _ModelClient(Protocol):
    def create_chat_completion(
        self,
        model: str,
        messages: Any,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
        response_format: str | None = None,
    ) -> ChatCompletion: ...

    def create_embeddings(self, model: str, inputs: Any) -> list[list[float]]: ...


def _reject_constant(name: str) -> None:
    raise ValueError(f"invalid JSON literal {name}")


def _loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def _file_list(value: Any) -> list[GeneratedFile]:
    """Decode a JSON value into a list of files; null is an empty list."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"cannot decode {type(value).__name__} into a list of files")
    return [GeneratedFile() if item is None else GeneratedFile.from_dict(item) for item in value]


def clean_llm_output(text: str) -> str:
    """Strip whitespace and a surrounding ```json fence from model output."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    if cleaned.endswith("```"):
        cleaned = cleaned[: -len("```")]
    return cleaned.strip()


def parse_code_changes(output: str) -> list[GeneratedFile]:
    """Parse a list of changed files, bare or wrapped under a common key."""
    cleaned = clean_llm_output(output)
    try:
        return _file_list(_loads(cleaned))
    except ValueError as array_error:
        try:
            wrapper = _loads(cleaned)
        except ValueError:
            wrapper = None
        if isinstance(wrapper, dict):
            for key in _CODE_CHANGE_KEYS:
                if key not in wrapper:
                    continue
                try:
                    files = _file_list(wrapper[key])
                except ValueError:
                    continue
                logger.info(
                    "Parsed LLM output for code changes assuming wrapped array "
                    "structure with key '%s'.",
                    key,
                )
                return files
        logger.error(
            "Failed to parse LLM JSON output for code changes. Original array error: %s. "
            "Cleaned output: %s",
            array_error,
            cleaned,
        )
        raise GenerationError(
            f"failed to parse LLM JSON output for code changes: {array_error}"
        ) from array_error


def parse_generated_files(output: str) -> list[GeneratedFile]:
    """Parse generated files as an array, a single object, or a wrapped array."""
    cleaned = clean_llm_output(output)
    try:
        decoded = _loads(cleaned)
    except ValueError as exc:
        raise GenerationError(
            "failed to parse LLM JSON output (tried array, single object, and common "
            f"wrapped keys): {exc}"
        ) from exc

    try:
        return _file_list(decoded)
    except ValueError as exc:
        array_error = exc
        logger.info("Failed to parse as array (%s), trying single object.", exc)

    try:
        return [GeneratedFile.from_dict(decoded)]
    except ValueError as exc:
        logger.info("Failed to parse as single object (%s), trying wrapped keys.", exc)

    if isinstance(decoded, dict):
        for key in _SITE_KEYS:
            if key not in decoded:
                continue
            try:
                files = _file_list(decoded[key])
            except ValueError as exc:
                logger.debug("Wrapped key '%s' found, but inner decode failed: %s", key, exc)
                continue
            if files:
                logger.info("Parsed LLM output assuming wrapped array structure with key '%s'.", key)
                return files

    raise GenerationError(
        "failed to parse LLM JSON output (tried array, single object, and common "
        f"wrapped keys): {array_error}"
    )


class Generator:
    """Produces sites, code changes, answers and embeddings via the completion service."""

    def __init__(
        self,
        api_key: str = "",
        embedding_model_id: str = "",
        client: _ModelClient | None = None,
        output_dir: str | os.PathLike[str] = DEFAULT_ROOT,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.embedding_model_id = embedding_model_id
        self.client = client if client is not None else OpenAIClient(api_key)
        self.output_dir = output_dir
        self._sleep = sleep

    def _call(
        self,
        first: Callable[[], T],
        retry: Callable[[], T] | None,
        delay: float,
        failure: str,
    ) -> T:
        try:
            return first()
        except _CLIENT_ERRORS as exc:
            if not should_retry(exc):
                raise GenerationError(f"{failure}: {exc}") from exc
            logger.warning("%s, retrying... Error: %s", failure, exc)
            self._sleep(delay)
            if retry is None:
                raise GenerationError(f"{failure}: {exc}") from exc
        try:
            return retry()
        except _CLIENT_ERRORS as exc:
            raise GenerationError(f"{failure}: {exc}") from exc

    def generate_code_changes(self, user_query: str, context_files: str) -> list[GeneratedFile]:
        """Ask for edits to an existing project and return the changed files."""
        full_prompt, system_prompt = code_change_prompt(user_query, context_files)

        def request() -> ChatCompletion:
            return self.client.create_chat_completion(
                GPT4O,
                [
                    {"role": ROLE_SYSTEM, "content": system_prompt},
                    {"role": ROLE_USER, "content": full_prompt},
                ],
                max_tokens=4096,
                temperature=0.3,
                response_format=RESPONSE_FORMAT_JSON_OBJECT,
            )

        completion = self._call(
            request, request, 2, "openai chat completion for code changes failed"
        )
        if not completion.content:
            logger.error("OpenAI usage for failed code change request: %s", completion.usage)
            raise GenerationError("openai returned empty response for code changes")

        logger.debug("LLM raw output for code changes: %s", completion.content)
        files = parse_code_changes(completion.content)
        logger.info("LLM suggested %d file changes/additions.", len(files))
        return files

    def generate_embedding(self, text: str) -> list[float]:
        """Return the embedding vector of ``text``; empty text gives an empty vector."""
        if not self.embedding_model_id:
            raise GenerationError("embedding model ID is not configured")
        if not text:
            return []

        def request() -> list[list[float]]:
            return self.client.create_embeddings(self.embedding_model_id, [text])

        vectors = self._call(request, request, 1, "openai embedding failed")
        if not vectors or not vectors[0]:
            raise GenerationError("openai returned empty embedding")
        return vectors[0]

    def generate_site_and_store(self, user_prompt: str, wallet_address: str) -> str:
        """Generate a project, write its files and return the new project ID."""
        project_id = str(uuid.uuid4())
        logger.info("Generating site for project %s, wallet %s", project_id, wallet_address)
        full_prompt = site_generation_prompt() % user_prompt
        messages = [
            {"role": ROLE_SYSTEM, "content": SITE_SYSTEM_PROMPT},
            {"role": ROLE_USER, "content": full_prompt},
        ]

        def first() -> ChatCompletion:
            return self.client.create_chat_completion(GPT4O_LATEST, messages, temperature=0.3)

        def retry() -> ChatCompletion:
            return self.client.create_chat_completion(
                GPT4O,
                messages,
                max_tokens=4096,
                temperature=0.3,
                response_format=RESPONSE_FORMAT_JSON_OBJECT,
            )

        completion = self._call(first, retry, 2, "openai chat completion failed")
        if not completion.content:
            logger.error("OpenAI usage for failed request: %s", completion.usage)
            raise GenerationError("openai returned empty response")

        logger.debug("LLM raw output for project %s: %s", project_id, completion.content)
        try:
            files = parse_generated_files(completion.content)
        except GenerationError as exc:
            logger.error("Error generating site for project %s: %s", project_id, exc)
            files = []

        if not files:
            logger.error("LLM output parsed, but resulted in zero files for project %s.", project_id)
            raise GenerationError("LLM did not generate any files or parsing failed silently")

        logger.info("Successfully parsed %d files from LLM for project %s", len(files), project_id)
        save_files_to_disk(project_id, files, self.output_dir)
        return project_id

    def generate_with_context(
        self, system_prompt: str, user_prompt: str, context_text: str
    ) -> str:
        """Answer a question about a project from the given context text."""
        full_prompt = (
            f"User Query: {user_prompt}\n\nRelevant Context from Project Files:\n{context_text}"
        )

        def request() -> ChatCompletion:
            return self.client.create_chat_completion(
                GPT4O,
                [
                    {"role": ROLE_SYSTEM, "content": system_prompt},
                    {"role": ROLE_USER, "content": full_prompt},
                ],
                max_tokens=1500,
                temperature=0.7,
            )

        completion = self._call(
            request, None, 1, "openai chat completion with context failed"
        )
        if not completion.content:
            logger.error("OpenAI usage for failed context query: %s", completion.usage)
            raise GenerationError("openai returned empty response for context query")
        return completion.content