import codecs
import logging
import os

from pydantic import BaseModel, Field, field_validator

DEFAULT_BUFFER_LENGTH = 2048


def resolve_level(level: int | str) -> int:
    """
    Resolve a logging level given as an int or a level name.

    :param level: the level, e.g. ``logging.WARNING``, ``"WARN"`` or ``"info"``
    :return: the numeric level
    """
    if level is None:
        raise ValueError("level is None")

    if isinstance(level, bool):
        raise ValueError(f"Invalid logging level: {level!r}")

    if isinstance(level, int):
        return level

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved

    raise ValueError(f"Invalid logging level: {level!r}")


class LogWriterSettings(BaseModel):
    buffer_length: int = Field(
        DEFAULT_BUFFER_LENGTH,
        gt=0,
        description="Initial buffer capacity in bytes, also used as the growth increment",
        examples=[2048, 8192]
    )

    line_separator: str = Field(
        default_factory=lambda: os.linesep,
        min_length=1,
        description="Line separator used to detect blank-line-only flushes",
        examples=["\n", "\r\n"]
    )

    encoding: str = Field(
        "utf-8",
        description="Encoding used to decode flushed bytes and encode text input",
        examples=["utf-8", "latin-1"]
    )

    errors: str = Field(
        "replace",
        description="Codec error handler",
        examples=["replace", "strict", "backslashreplace"]
    )

    @field_validator("encoding")
    @classmethod
    def check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {value}") from e
        return value

    @field_validator("errors")
    @classmethod
    def check_errors(cls, value: str) -> str:
        try:
            codecs.lookup_error(value)
        except LookupError as e:
            raise ValueError(f"Unknown codec error handler: {value}") from e
        return value
