"""Site generator process runner.

Runs the generator CLI (``hugo`` by default) and hands its output back
unparsed. A missing binary is reported as a failed run with exit code
127, the same code a shell uses for "command not found".
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of one generator invocation."""

    success: bool
    stdout: str
    stderr: str
    exit_code: int


def _text(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_command(
    args: Sequence[str],
    cwd: Path,
    binary: str = "hugo",
    *,
    timeout: float | None = None,
) -> CommandOutput:
    """Run ``<binary> *args`` in *cwd* and capture its output."""
    argv = [binary, *args]
    logger.debug("Running %s in %s", argv, cwd)
    try:
        proc = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        logger.warning("Generator binary not found: %s", binary)
        return CommandOutput(success=False, stdout="", stderr=str(exc), exit_code=EXIT_NOT_FOUND)
    except subprocess.TimeoutExpired as exc:
        logger.warning("%s timed out after %ss", argv, timeout)
        return CommandOutput(
            success=False,
            stdout=_text(exc.stdout),
            stderr=_text(exc.stderr) or f"Timed out after {timeout}s",
            exit_code=EXIT_TIMEOUT,
        )

    return CommandOutput(
        success=proc.returncode == 0,
        stdout=proc.stdout,
        stderr=proc.stderr,
        exit_code=proc.returncode,
    )


class DevServer:
    """Handle around a long-running ``<binary> server`` process."""

    def __init__(
        self,
        cwd: Path,
        binary: str = "hugo",
        args: Sequence[str] = ("server", "-D"),
    ) -> None:
        self.cwd = cwd
        self.binary = binary
        self.args = list(args)
        self._proc: subprocess.Popen[str] | None = None

    @property
    def running(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    @property
    def pid(self) -> int | None:
        return self._proc.pid if self._proc is not None else None

    def output(self) -> Iterator[str]:
        """Yield the server's combined stdout/stderr line by line until it exits."""
        if self._proc is None or self._proc.stdout is None:
            return
        yield from self._proc.stdout

    def start(self) -> None:
        """Start the server.

        Raises:
            RuntimeError: If the server is already running.
            FileNotFoundError: If the binary does not exist.
        """
        if self.running:
            raise RuntimeError("Dev server is already running")
        argv = [self.binary, *self.args]
        logger.info("Starting dev server: %s", " ".join(argv))
        self._proc = subprocess.Popen(
            argv,
            cwd=self.cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )

    def stop(self, timeout: float = 5.0) -> int | None:
        """Terminate the server, killing it if it ignores SIGTERM.

        Returns the exit code, or None if it was not running.
        """
        proc = self._proc
        if proc is None:
            return None
        self._proc = None
        if proc.poll() is None:
            proc.terminate()
            try:
                proc.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning("Dev server did not exit after %.1fs; killing", timeout)
                proc.kill()
                proc.wait()
        if proc.stdout is not None:
            proc.stdout.close()
        logger.info("Dev server stopped (exit %s)", proc.returncode)
        return proc.returncode

    def __enter__(self) -> DevServer:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
