"""Data structures for the files of a generated project."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass
class GeneratedFile:
    """One file of a generated project, as returned by the model."""

    filename: str = ""
    type: str = ""
    content: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "GeneratedFile":
        """Build a file from a decoded JSON object.

        Keys are matched case-insensitively and the last match wins. Unknown
        keys are ignored, and null values leave the field empty. Anything
        other than an object, or a non-string field value, raises ValueError.
        """
        if not isinstance(data, Mapping):
            raise ValueError(
                f"cannot decode {type(data).__name__} into a generated file"
            )
        names = {field.name for field in fields(cls)}
        values: dict[str, str] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            name = key.lower()
            if name not in names or value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(
                    f"field {key!r} must be a string, not {type(value).__name__}"
                )
            values[name] = value
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        """Return the JSON object form of the file."""
        return asdict(self)