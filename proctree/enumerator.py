"""Run the platform process listing and fold its rows into an accumulator."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable
from typing import Any, TypeVar

from proctree.config import Config
from proctree.errors import (
    ListingExitError,
    ListingSignalError,
    ListingStderrError,
    ProcessLaunchError,
)
from proctree.lines import LineReassembler
from proctree.models import ProcessRecord
from proctree.platforms import ListingPlatform, select_platform

log = logging.getLogger(__name__)

T = TypeVar("T")

READ_CHUNK = 4096


async def get_processes(
    combine: Callable[[ProcessRecord, T], T],
    accumulator: T,
    *,
    platform: ListingPlatform | None = None,
    config: Config | None = None,
) -> T:
    """Fold every process on this host into ``accumulator``.

    ``combine(record, accumulator)`` is called once per decoded row, in output
    order, and must return the new accumulator.  Rows that do not parse
    (headers, blank lines) are skipped.

    Raises:
        ProcessLaunchError: the listing command could not be started.
        ListingStderrError: the command wrote to stderr, whatever its exit status.
        ListingSignalError: the command was killed by a signal.
        ListingExitError: the command exited with a non-zero status.
    """
    config = config or Config.from_env()
    platform = platform or select_platform(config)

    log.debug("Listing processes with %s: %s", platform.name, " ".join(platform.argv))
    try:
        process = await asyncio.create_subprocess_exec(
            *platform.argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ProcessLaunchError(platform.argv[0], exc) from exc

    reassembler = LineReassembler(encoding=config.encoding)

    def on_chunk(chunk: bytes) -> None:
        nonlocal accumulator
        for line in reassembler.feed(chunk):
            record = platform.parse_line(line)
            if record is None:
                log.debug("Skipping unparseable listing row: %r", line)
                continue
            accumulator = combine(record, accumulator)

    errors: list[str] = []
    stderr_seen = asyncio.Event()

    def on_error(chunk: bytes) -> None:
        errors.append(chunk.decode(config.encoding, errors="replace"))
        stderr_seen.set()

    name = platform.name
    stdout_task = asyncio.create_task(
        _read_stream(process.stdout, on_chunk),  # type: ignore[arg-type]
        name=f"{name}-stdout",
    )
    stderr_task = asyncio.create_task(
        _read_stream(process.stderr, on_error),  # type: ignore[arg-type]
        name=f"{name}-stderr",
    )
    exit_task = asyncio.create_task(process.wait(), name=f"{name}-waiter")
    seen_task = asyncio.create_task(stderr_seen.wait(), name=f"{name}-stderr-seen")

    try:
        # Stderr output fails the call as soon as it shows up
        pending: set[asyncio.Task[Any]] = {stdout_task, stderr_task, exit_task}
        while pending and not errors:
            done, _ = await asyncio.wait(
                pending | {seen_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
            pending -= done
            if stdout_task in done:
                # Surfaces an exception raised by combine
                stdout_task.result()

        if errors:
            raise ListingStderrError("".join(errors))

        code = exit_task.result()
    finally:
        await _shutdown(process, (stdout_task, stderr_task, exit_task, seen_task))

    if code < 0:
        raise ListingSignalError(_signal_name(-code))
    if code > 0:
        raise ListingExitError(code)

    if reassembler.unfinished:
        log.debug("Dropping unterminated trailing output: %r", reassembler.unfinished)
    return accumulator


async def list_processes(
    *,
    platform: ListingPlatform | None = None,
    config: Config | None = None,
) -> list[ProcessRecord]:
    """Return every process on this host as a list, in listing order."""

    def append(record: ProcessRecord, records: list[ProcessRecord]) -> list[ProcessRecord]:
        records.append(record)
        return records

    return await get_processes(append, [], platform=platform, config=config)


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------

async def _read_stream(
    stream: asyncio.StreamReader,
    callback: Callable[[bytes], None],
) -> None:
    """Pass every chunk read from an async stream to ``callback``."""
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            break
        callback(chunk)


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


async def _shutdown(
    process: asyncio.subprocess.Process,
    tasks: tuple[asyncio.Task[Any], ...],
) -> None:
    """Reap the listing command and its reader tasks, killing it if still running."""
    if process.returncode is None:
        log.debug("Killing listing command (pid=%s)", process.pid)
        try:
            process.kill()
        except ProcessLookupError:
            pass

    for task in tasks:
        task.cancel()

    await process.wait()
    # Retrieve results and exceptions so none is reported as never retrieved
    await asyncio.gather(*tasks, return_exceptions=True)
