"""
External converter invocation.

``ConverterInvoker`` runs the configured converter as
``<tool> -s <source> -o <target>`` with the server's stdout/stderr inherited,
so converter diagnostics end up in the server log stream.

``run_command`` is the general form: a whitespace-separated command line run
in a working directory, with stdout/stderr forwarded by two copy tasks.
"""

import asyncio
import codecs
import sys
from pathlib import Path
from typing import IO, List, Optional, Union

from config.logging_config import get_logger

from .exceptions import ConverterExitError, ConverterLaunchError, ConverterTimeoutError

logger = get_logger(__name__)

COPY_CHUNK_SIZE = 4096


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass


async def _wait_for_exit(
    proc: asyncio.subprocess.Process, program: str, timeout_seconds: Optional[float]
) -> int:
    """Wait for *proc*; kill and reap it on timeout or cancellation."""
    try:
        return await asyncio.wait_for(proc.wait(), timeout_seconds)
    except asyncio.TimeoutError:
        _kill(proc)
        await proc.wait()
        raise ConverterTimeoutError(program, timeout_seconds, proc.returncode)
    except asyncio.CancelledError:
        _kill(proc)
        raise


class ConverterInvoker:
    """Runs the configured converter tool against two files."""

    def __init__(self, tool: str, timeout_seconds: Optional[float] = None):
        self.tool = tool
        self.timeout_seconds = timeout_seconds

    def build_args(self, source: Path, target: Path) -> List[str]:
        return [self.tool, "-s", str(source), "-o", str(target)]

    async def convert(self, source: Path, target: Path) -> None:
        """Convert *source* into *target*.

        Raises:
            ConverterLaunchError: The tool could not be started.
            ConverterExitError: The tool exited with a non-zero status.
            ConverterTimeoutError: The tool ran past the timeout.
        """
        args = self.build_args(source, target)
        logger.info("Running converter: %s", " ".join(args))

        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ConverterLaunchError(self.tool, e) from e

        returncode = await _wait_for_exit(proc, self.tool, self.timeout_seconds)
        if returncode != 0:
            raise ConverterExitError(self.tool, returncode)


async def _copy_stream(reader: asyncio.StreamReader, writer: IO[str]) -> None:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await reader.read(COPY_CHUNK_SIZE)
        if not chunk:
            break
        writer.write(decoder.decode(chunk))
        writer.flush()
    tail = decoder.decode(b"", final=True)
    if tail:
        writer.write(tail)
    writer.flush()


async def run_command(
    directory: Union[str, Path],
    command_text: str,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
    timeout_seconds: Optional[float] = None,
) -> int:
    """Run a command line in *directory* and forward its output.

    The command is split on whitespace (no quoting). Standard input is
    inherited; standard output and error are copied to *stdout*/*stderr*
    (default: this process's streams) while the command runs. Both copy
    tasks are drained before the function returns.

    Returns:
        The exit status (always 0; failures raise).

    Raises:
        ValueError: Empty command line.
        ConverterLaunchError: The program could not be started.
        ConverterExitError: Non-zero exit status.
        ConverterTimeoutError: The program ran past *timeout_seconds*.
    """
    components = command_text.split()
    if not components:
        raise ValueError("Command text is empty")

    program, arguments = components[0], components[1:]
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    logger.info("Running %r in %s", command_text, directory)
    try:
        proc = await asyncio.create_subprocess_exec(
            program, *arguments,
            cwd=str(directory),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ConverterLaunchError(program, e) from e

    copy_tasks = [
        asyncio.ensure_future(_copy_stream(proc.stdout, stdout)),
        asyncio.ensure_future(_copy_stream(proc.stderr, stderr)),
    ]

    try:
        returncode = await _wait_for_exit(proc, program, timeout_seconds)
    except BaseException:
        for task in copy_tasks:
            task.cancel()
        await asyncio.gather(*copy_tasks, return_exceptions=True)
        raise

    # Pipes close when the process exits; let trailing output drain.
    await asyncio.gather(*copy_tasks)

    if returncode != 0:
        raise ConverterExitError(program, returncode)
    return returncode
