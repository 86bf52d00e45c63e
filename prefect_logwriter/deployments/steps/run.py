import logging
import shlex
from typing import List

from prefect.utilities.processutils import run_process

from prefect_logwriter.settings import LogWriterSettings
from prefect_logwriter.writer import LineBufferedLogWriter

logger = logging.getLogger(__name__)


class LineSink:
    """
    Text sink that hands complete lines to a log writer.

    prefect calls ``flush()`` after every chunk it reads from a pipe, and
    chunks do not follow line boundaries. Lines are therefore flushed as they
    complete, and ``flush()`` leaves a trailing partial line buffered until
    the next newline or ``close()``.
    """

    def __init__(self, writer: LineBufferedLogWriter):
        self.writer = writer

    @property
    def closed(self) -> bool:
        return self.writer.closed

    def write(self, text: str) -> int:
        start = 0
        end = text.find("\n")

        while end != -1:
            self.writer.write(text[start:end + 1])
            self.writer.flush()
            start = end + 1
            end = text.find("\n", start)

        if start < len(text):
            self.writer.write(text[start:])

        return len(text)

    def flush(self):
        pass

    def close(self):
        self.writer.close()


async def run_logged_process(
        command: str | List[str],
        stdout_level: int | str = logging.INFO,
        stderr_level: int | str = logging.ERROR,
        logger_name: str | None = None,
        cwd: str | None = None,
        env: dict | None = None,
        settings: LogWriterSettings | dict | None = None,
        check: bool = True,
) -> dict:
    """
    Run a command and send its output to a logger.

    Each line of output becomes one log record, newline included. Lines
    holding only the line separator are dropped, and a final line without a
    newline is logged when the process ends.

    :param command: The command to run, as a list of arguments or a single string.
    :param stdout_level: The level of records built from stdout.
    :param stderr_level: The level of records built from stderr.
    :param logger_name: The logger to write to. Defaults to this module's logger.
    :param cwd: Optional working directory for the process.
    :param env: Optional environment for the process.
    :param settings: Optional writer settings, as a model or a dict.
    :param check: Raise if the process exits with a non-zero code.
    :return: The command and its return code.
    """
    command = shlex.split(command) if isinstance(command, str) else list(command)

    if isinstance(settings, dict):
        settings = LogWriterSettings.model_validate(settings)

    process_logger = logging.getLogger(logger_name) if logger_name else logger

    stdout = LineSink(LineBufferedLogWriter(process_logger, stdout_level, settings))
    stderr = LineSink(LineBufferedLogWriter(process_logger, stderr_level, settings))

    logger.info("Running command: %s", " ".join(command))
    logger.debug("Streaming stdout at %s and stderr at %s to logger %s",
                 logging.getLevelName(stdout.writer.level), logging.getLevelName(stderr.writer.level),
                 process_logger.name)

    try:
        process = await run_process(
            command,
            stream_output=(stdout, stderr),
            cwd=cwd,
            env=env,
        )
    finally:
        stdout.close()
        stderr.close()

    if process.returncode != 0:
        logger.error("Command exited with code %d: %s", process.returncode, " ".join(command))
        if check:
            raise RuntimeError(
                f"Command {' '.join(command)!r} exited with code {process.returncode}"
            )
    else:
        logger.info("Command completed successfully")

    return {
        "command": command,
        "returncode": process.returncode
    }
