"""Subprocess helpers.

All process spawning for git, the build command and the managed
application goes through this module.
"""

from __future__ import annotations

import asyncio
import re
import subprocess
from collections.abc import Mapping
from pathlib import Path

from branch_updater.constants import COMMAND_NOT_STARTED
from branch_updater.logging import get_logger
from branch_updater.models import CommandResult, DetachedProcess

log = get_logger("branch_updater.process")

# Read size for streamed output; also the longest run logged as one line.
STREAM_CHUNK_SIZE = 65536

# Progress bars redraw with a bare carriage return.
_LINE_BREAK_RE = re.compile(rb"[\r\n]")


async def run_command(
    cmd: str,
    cwd: str | Path = ".",
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run a shell command to completion and capture its output."""
    try:
        proc = await asyncio.create_subprocess_shell(
            cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=env,
        )
        stdout, stderr = await proc.communicate()
    except OSError as exc:
        log.warning("command_not_started", cmd=cmd, error=str(exc))
        return CommandResult(returncode=COMMAND_NOT_STARTED, stderr=str(exc))

    result = CommandResult(
        returncode=proc.returncode if proc.returncode is not None else COMMAND_NOT_STARTED,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )
    if not result.ok:
        log.debug(
            "command_failed",
            cmd=cmd,
            returncode=result.returncode,
            stderr=result.stderr[:500],
        )
    return result


def _log_line(cmd: str, raw: bytes) -> None:
    text = raw.decode(errors="replace").rstrip()
    if text:
        log.error("command_stderr", cmd=cmd, line=text)


async def _drain(stream: asyncio.StreamReader, cmd: str) -> None:
    """Log *stream* line by line as data arrives.

    Reads fixed-size chunks rather than lines so output with no line break
    (or an endless ``\\r`` progress bar) cannot overflow the reader's buffer.
    """
    pending = b""
    while chunk := await stream.read(STREAM_CHUNK_SIZE):
        *lines, pending = _LINE_BREAK_RE.split(pending + chunk)
        while len(pending) >= STREAM_CHUNK_SIZE:
            lines.append(pending[:STREAM_CHUNK_SIZE])
            pending = pending[STREAM_CHUNK_SIZE:]
        for line in lines:
            _log_line(cmd, line)
    _log_line(cmd, pending)


async def run_streaming(
    cmd: str,
    cwd: str | Path = ".",
    env: Mapping[str, str] | None = None,
) -> int:
    """Run a shell command, streaming its stderr into the log.

    Returns the exit code once the process has exited. No timeout is applied.
    """
    try:
        proc = await asyncio.create_subprocess_shell(
            cmd,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=env,
        )
    except OSError as exc:
        log.error("command_not_started", cmd=cmd, error=str(exc))
        return COMMAND_NOT_STARTED

    try:
        if proc.stderr is not None:
            await _drain(proc.stderr, cmd)
    finally:
        returncode = await proc.wait()
    return returncode


def launch_detached(cmd: str, cwd: str | Path = ".") -> DetachedProcess | None:
    """Start *cmd* in its own session and return without waiting on it.

    The ``Popen`` object rides along on the handle so it is not collected
    (and reported as still running) while the agent is alive.
    """
    try:
        proc = subprocess.Popen(
            cmd,
            shell=True,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        log.error("launch_failed", cmd=cmd, error=str(exc))
        return None

    log.info("launched", cmd=cmd, pid=proc.pid)
    return DetachedProcess(pid=proc.pid, command=cmd, process=proc)
