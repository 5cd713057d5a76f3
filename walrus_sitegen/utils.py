"""Retry classification and file type detection."""

from __future__ import annotations

from walrus_sitegen.openai_client import APIError

_RETRYABLE_MESSAGES = (
    "rate limit",
    "500 internal server error",
    "502 bad gateway",
    "503 service unavailable",
    "504 gateway timeout",
    "timeout",
    "connection reset by peer",
    "context deadline exceeded",
)

_TYPES_BY_EXTENSION = {
    ".html": "HTML",
    ".css": "CSS",
    ".js": "JavaScript",
    ".jsx": "JSX",
    ".ts": "TypeScript",
    ".tsx": "TSX",
    ".json": "JSON",
    ".md": "Markdown",
    ".txt": "Text",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".toml": "TOML",
    ".sh": "Shell",
    ".py": "Python",
    ".go": "Go",
    ".env": "Env",
    ".gitignore": "GitIgnore",
    ".svg": "SVG",
    ".png": "Image",
    ".jpg": "Image",
    ".jpeg": "Image",
    ".gif": "Image",
    ".webp": "Image",
}

_TYPES_BY_NAME = (
    ("dockerfile", "Dockerfile"),
    ("vite.config", "Config"),
    ("tailwind.config", "Config"),
    ("package.json", "JSON"),
    ("tsconfig.json", "JSON"),
)


def _error_chain(err: BaseException):
    seen = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def should_retry(err: BaseException | None) -> bool:
    """Tell whether an error looks transient enough to try once more."""
    if err is None:
        return False
    message = str(err).lower()
    if any(fragment in message for fragment in _RETRYABLE_MESSAGES):
        return True
    return any(
        isinstance(link, APIError)
        and (link.http_status_code >= 500 or link.http_status_code == 429)
        for link in _error_chain(err)
    )


def _extension(path: str) -> str:
    base = path.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def _base(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return "/" if path else "."
    return stripped.rsplit("/", 1)[-1]


def determine_file_type(filename: str) -> str:
    """Guess a display type for a file from its name."""
    lower = filename.lower()
    known = _TYPES_BY_EXTENSION.get(_extension(lower))
    if known is not None:
        return known
    base = _base(lower)
    for fragment, file_type in _TYPES_BY_NAME:
        if fragment in base:
            return file_type
    return "Unknown"