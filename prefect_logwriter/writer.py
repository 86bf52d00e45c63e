import io
import logging

from prefect_logwriter.exceptions import StreamClosedError
from prefect_logwriter.settings import DEFAULT_BUFFER_LENGTH, LogWriterSettings, resolve_level


class LineBufferedLogWriter(io.RawIOBase):
    """
    A binary stream that forwards its output to a logger.

    Nothing is logged until the stream is flushed or closed. Each flush emits
    the buffered bytes as a single record at ``level``, except when the buffer
    holds nothing but the line separator: print-style wrappers flush after
    emitting a bare newline, and those flushes would otherwise show up as
    blank log lines.

    Zero bytes are dropped on write so they never end up in a log message.

    ``close()`` flushes once and closes the writer; later writes raise
    :class:`StreamClosedError` and closing again has no effect.

    Example::

        sys.stderr = io.TextIOWrapper(
            LineBufferedLogWriter(logging.getLogger(), logging.WARNING),
            line_buffering=True,
        )

    The writer is not thread-safe; use one instance per stream.
    """

    DEFAULT_BUFFER_LENGTH = DEFAULT_BUFFER_LENGTH

    # io.IOBase.__del__ may call close() on a partially initialised instance
    _count = 0

    def __init__(
        self,
        logger: logging.Logger | logging.LoggerAdapter,
        level: int | str,
        settings: LogWriterSettings | None = None,
    ):
        """
        :param logger: the logger to write to, anything with ``log(level, msg)``
        :param level: the level to use for every record
        :param settings: optional buffer and decoding settings
        """
        super().__init__()

        if logger is None:
            raise ValueError("logger is None")
        if level is None:
            raise ValueError("level is None")

        settings = settings or LogWriterSettings()

        self._logger = logger
        self._level = resolve_level(level)
        self._line_separator = settings.line_separator
        self._increment = settings.buffer_length
        self.encoding = settings.encoding
        self.errors = settings.errors

        self._buf = bytearray(self._increment)
        self._count = 0

    @property
    def logger(self) -> logging.Logger | logging.LoggerAdapter:
        return self._logger

    @property
    def level(self) -> int:
        return self._level

    @property
    def line_separator(self) -> str:
        return self._line_separator

    @property
    def count(self) -> int:
        """Number of bytes currently buffered."""
        return self._count

    @property
    def capacity(self) -> int:
        """Current size of the internal buffer; it only ever grows."""
        return len(self._buf)

    def writable(self) -> bool:
        return True

    def write_byte(self, b: int) -> None:
        """
        Buffer a single byte.

        Only the eight low-order bits of ``b`` are used. A zero byte is
        discarded.

        :param b: the byte to write
        :raises StreamClosedError: if the writer has been closed
        """
        self._check_open()

        b &= 0xFF
        if b == 0:
            return

        if self._count == len(self._buf):
            self._grow()

        self._buf[self._count] = b
        self._count += 1

    def write(self, data) -> int:
        """
        Buffer a sequence of bytes, with the same rules as :meth:`write_byte`.

        Text is accepted too and encoded with the configured encoding.

        :param data: a bytes-like object or a str
        :return: the length of ``data`` consumed
        :raises StreamClosedError: if the writer has been closed
        """
        self._check_open()

        if isinstance(data, str):
            chunk = data.encode(self.encoding, self.errors)
            consumed = len(data)
        else:
            with memoryview(data) as view:
                chunk = view.tobytes()
                consumed = view.nbytes

        self._append(chunk.replace(b"\x00", b""))

        return consumed

    def flush(self) -> None:
        """
        Emit the buffered bytes as one log record.

        Does nothing if the buffer is empty, and drops the buffer without
        logging if it holds exactly the line separator.
        """
        if self._count == 0:
            return

        if self._is_blank_line():
            self._reset()
            return

        message = self._buf[:self._count].decode(self.encoding, self.errors)

        self._logger.log(self._level, message)
        self._reset()

    def _check_open(self) -> None:
        if self.closed:
            raise StreamClosedError()

    def _is_blank_line(self) -> bool:
        separator = self._line_separator

        if self._count != len(separator):
            return False

        return self._buf[0] == ord(separator[0]) and (
            self._count == 1
            or (self._count == 2 and self._buf[1] == ord(separator[1]))
        )

    def _append(self, chunk: bytes) -> None:
        end = self._count + len(chunk)

        while end > len(self._buf):
            self._grow()

        self._buf[self._count:end] = chunk
        self._count = end

    def _grow(self) -> None:
        self._buf.extend(bytes(self._increment))

    def _reset(self) -> None:
        # capacity is kept
        self._count = 0
