import contextlib
import io
import logging
from typing import Callable, Iterator

from prefect_logwriter.settings import LogWriterSettings
from prefect_logwriter.writer import LineBufferedLogWriter

logger = logging.getLogger(__name__)

# newline values io.TextIOWrapper accepts for translation on write
_TRANSLATABLE_SEPARATORS = ("\n", "\r", "\r\n")


def open_text_stream(writer: LineBufferedLogWriter, line_buffering: bool = True) -> io.TextIOWrapper:
    """
    Wrap a log writer in a text stream.

    With ``line_buffering`` every write containing a newline flushes the
    writer, so each printed line becomes a log record. Newlines are
    translated to the writer's line separator, which keeps the bare newline
    flushes produced by ``print()`` out of the log.

    :param writer: the writer to wrap; closing the text stream closes it
    :param line_buffering: flush on every newline
    :return: the text stream
    """
    separator = writer.line_separator
    newline = separator if separator in _TRANSLATABLE_SEPARATORS else None

    return io.TextIOWrapper(
        writer,
        encoding=writer.encoding,
        errors=writer.errors,
        newline=newline,
        line_buffering=line_buffering,
        write_through=True,
    )


@contextlib.contextmanager
def _redirect(
    redirector: Callable,
    stream_name: str,
    target_logger: logging.Logger | logging.LoggerAdapter | str,
    level: int | str,
    settings: LogWriterSettings | None,
) -> Iterator[LineBufferedLogWriter]:
    if isinstance(target_logger, str):
        target_logger = logging.getLogger(target_logger)

    writer = LineBufferedLogWriter(target_logger, level, settings)
    stream = open_text_stream(writer)

    logger.debug("Redirecting %s to logger %s at level %s",
                 stream_name, getattr(target_logger, "name", target_logger),
                 logging.getLevelName(writer.level))
    try:
        with redirector(stream):
            yield writer
    finally:
        # the original stream is back in place before the final flush
        stream.close()
        logger.debug("Restored %s", stream_name)


@contextlib.contextmanager
def redirect_stdout(
    target_logger: logging.Logger | logging.LoggerAdapter | str,
    level: int | str = logging.INFO,
    settings: LogWriterSettings | None = None,
) -> Iterator[LineBufferedLogWriter]:
    """
    Send everything written to ``sys.stdout`` to a logger.

    The handlers of ``target_logger`` must not write to ``sys.stdout``
    themselves, use a handler bound to the original stream instead.

    :param target_logger: the logger, or the name of the logger, to write to
    :param level: the level of the emitted records
    :param settings: optional writer settings
    :return: the underlying writer
    """
    with _redirect(contextlib.redirect_stdout, "stdout", target_logger, level, settings) as writer:
        yield writer


@contextlib.contextmanager
def redirect_stderr(
    target_logger: logging.Logger | logging.LoggerAdapter | str,
    level: int | str = logging.WARNING,
    settings: LogWriterSettings | None = None,
) -> Iterator[LineBufferedLogWriter]:
    """
    Send everything written to ``sys.stderr`` to a logger.

    See :func:`redirect_stdout`.
    """
    with _redirect(contextlib.redirect_stderr, "stderr", target_logger, level, settings) as writer:
        yield writer
