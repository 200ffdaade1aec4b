"""Minimal FFmpeg runner.

ffmpeg is treated as an opaque engine: a command goes in, an exit status and
a stderr transcript come out. Callers translate the errors raised here into
their own failure type.
"""

import os
import signal
import subprocess

from shorts_factory.core.logging_config import get_logger

logger = get_logger(__name__)

# Tail of stderr kept on failure for diagnosis.
_STDERR_TAIL_CHARS = 3000


class FFmpegError(Exception):
    """FFmpeg subprocess exited with a non-zero return code."""

    def __init__(self, message: str, returncode: int, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class FFmpegNotFound(Exception):
    """ffmpeg binary is not available on PATH."""


class FFmpegTimeout(Exception):
    """FFmpeg exceeded its wall-clock allowance and was killed."""


def run_ffmpeg(cmd: list[str], timeout: int = 600) -> str:
    """
    Run an FFmpeg command synchronously in its own process group.

    Args:
        cmd: Complete FFmpeg command as a list of strings.
        timeout: Maximum wall-clock seconds to allow (default 600 = 10 min).

    Returns:
        The stderr transcript (ffmpeg logs progress there).

    Raises:
        FFmpegNotFound: if the ffmpeg binary is missing.
        FFmpegError:    if FFmpeg exits with a non-zero return code.
        FFmpegTimeout:  if FFmpeg exceeds *timeout* seconds.
    """
    logger.debug(f"ffmpeg cmd: {' '.join(cmd)}")

    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            start_new_session=True,  # own process group -> clean kill on timeout
        )
    except FileNotFoundError:
        raise FFmpegNotFound(f"ffmpeg not found: {cmd[0]!r} is not on PATH")

    try:
        _, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(process)
        process.communicate()
        raise FFmpegTimeout(f"FFmpeg exceeded timeout of {timeout}s and was killed")

    if process.returncode != 0:
        tail = stderr[-_STDERR_TAIL_CHARS:]
        raise FFmpegError(
            f"FFmpeg exited {process.returncode}",
            returncode=process.returncode,
            stderr=tail,
        )

    logger.debug("FFmpeg finished OK (rc=0)")
    return stderr


def _kill_group(process: subprocess.Popen) -> None:
    """Kill the process and its entire process group (SIGKILL)."""
    try:
        os.killpg(os.getpgid(process.pid), signal.SIGKILL)
    except ProcessLookupError:
        pass  # already dead
    except OSError as exc:
        logger.warning(f"Could not kill ffmpeg process group: {exc}")
        process.kill()
