import logging

import pytest
from pydantic import ValidationError

from prefect_logwriter.settings import DEFAULT_BUFFER_LENGTH, LogWriterSettings, resolve_level


class TestLogWriterSettings:
    """Unit tests for LogWriterSettings model."""

    def test_defaults(self, monkeypatch):
        """Test the default values."""
        monkeypatch.setattr("os.linesep", "\n")

        settings = LogWriterSettings()

        assert settings.buffer_length == DEFAULT_BUFFER_LENGTH == 2048
        assert settings.line_separator == "\n"
        assert settings.encoding == "utf-8"
        assert settings.errors == "replace"

    def test_model_validate(self):
        """Test that settings validate from a dict."""
        settings = LogWriterSettings.model_validate({
            "buffer_length": 512,
            "line_separator": "\r\n",
            "encoding": "latin-1",
            "errors": "strict",
        })

        assert settings.buffer_length == 512
        assert settings.line_separator == "\r\n"
        assert settings.encoding == "latin-1"
        assert settings.errors == "strict"

    @pytest.mark.parametrize("buffer_length", [0, -1])
    def test_invalid_buffer_length(self, buffer_length):
        """Test that the buffer length must be positive."""
        with pytest.raises(ValidationError):
            LogWriterSettings(buffer_length=buffer_length)

    def test_empty_line_separator(self):
        """Test that the line separator must not be empty."""
        with pytest.raises(ValidationError):
            LogWriterSettings(line_separator="")

    def test_unknown_encoding(self):
        """Test that unknown encodings are rejected."""
        with pytest.raises(ValidationError, match="Unknown encoding"):
            LogWriterSettings(encoding="no-such-codec")

    def test_unknown_error_handler(self):
        """Test that unknown codec error handlers are rejected."""
        with pytest.raises(ValidationError, match="Unknown codec error handler"):
            LogWriterSettings(errors="explode")


class TestResolveLevel:
    """Unit tests for resolve_level function."""

    @pytest.mark.parametrize("level, expected", [
        (logging.DEBUG, logging.DEBUG),
        (25, 25),
        ("INFO", logging.INFO),
        ("warning", logging.WARNING),
        ("WARN", logging.WARNING),
        (" error ", logging.ERROR),
        ("CRITICAL", logging.CRITICAL),
    ])
    def test_valid_levels(self, level, expected):
        """Test resolving ints and level names."""
        assert resolve_level(level) == expected

    @pytest.mark.parametrize("level", [None, "LOUD", "", True, 1.5])
    def test_invalid_levels(self, level):
        """Test that invalid levels are rejected."""
        with pytest.raises(ValueError):
            resolve_level(level)
