import pytest

from walrus_sitegen.openai_client import APIError
from walrus_sitegen.utils import determine_file_type, should_retry


def test_none_is_not_retried():
    assert should_retry(None) is False


@pytest.mark.parametrize(
    "message",
    [
        "Rate limit reached for requests",
        "502 Bad Gateway",
        "request TIMEOUT",
        "read: connection reset by peer",
        "context deadline exceeded",
    ],
)
def test_transient_messages_are_retried(message):
    assert should_retry(RuntimeError(message)) is True


def test_plain_error_is_not_retried():
    assert should_retry(ValueError("invalid api key")) is False


@pytest.mark.parametrize("code, expected", [(429, True), (500, True), (503, True), (400, False), (401, False)])
def test_api_error_status_codes(code, expected):
    assert should_retry(APIError(code, "failure")) is expected


def test_wrapped_api_error_is_found():
    try:
        try:
            raise APIError(500, "boom")
        except APIError as inner:
            raise RuntimeError("call failed") from inner
    except RuntimeError as outer:
        assert should_retry(outer) is True


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("index.html", "HTML"),
        ("src/App.TSX", "TSX"),
        ("styles/main.css", "CSS"),
        ("config.yml", "YAML"),
        (".gitignore", "GitIgnore"),
        (".env", "Env"),
        ("logo.webp", "Image"),
        ("vite.config.ts", "TypeScript"),
        ("Dockerfile", "Dockerfile"),
        ("tailwind.config", "Config"),
        ("LICENSE", "Unknown"),
        ("archive.tar.gz", "Unknown"),
    ],
)
def test_determine_file_type(filename, expected):
    assert determine_file_type(filename) == expected