"""
Execution of the cached tailwindcss binary.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from .exceptions import ProcessInvocationError
from .retry import Deadline

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Captured output of a finished process."""

    stdout: str
    stderr: str
    returncode: int = 0


class ProcessRunner(Protocol):
    """Runs an executable with arguments and captures its output."""

    def run(
        self,
        executable: Union[str, Path],
        args: Sequence[str],
        deadline: Optional[Deadline] = None,
    ) -> ProcessResult: ...


class SubprocessRunner:
    """ProcessRunner backed by subprocess.run."""

    def run(
        self,
        executable: Union[str, Path],
        args: Sequence[str],
        deadline: Optional[Deadline] = None,
    ) -> ProcessResult:
        """
        Run an executable to completion.

        Args:
            executable: Path to the binary
            args: Arguments passed verbatim
            deadline: Shared cancellation signal bounding the run time

        Returns:
            ProcessResult with captured stdout and stderr

        Raises:
            ProcessInvocationError: If the process cannot start, times out or
                exits with a non-zero status
        """
        deadline = deadline or Deadline.never()
        command: List[str] = [str(executable), *args]
        logger.debug(f"Running command: {command}")

        if deadline.expired:
            raise ProcessInvocationError("deadline exceeded before running command")

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=deadline.remaining(),
            )
        except subprocess.TimeoutExpired as e:
            raise ProcessInvocationError(
                f"command timed out after {e.timeout:g}s"
            ) from e
        except OSError as e:
            raise ProcessInvocationError(f"failed to start {executable}: {e}") from e

        logger.debug(f"Command output: out={result.stdout!r} err={result.stderr!r}")

        if result.returncode != 0:
            detail = result.stderr.strip()
            message = f"exit status {result.returncode}"
            if detail:
                message = f"{message}: {detail}"
            raise ProcessInvocationError(
                message,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        return ProcessResult(
            stdout=result.stdout, stderr=result.stderr, returncode=result.returncode
        )


__all__ = ["ProcessResult", "ProcessRunner", "SubprocessRunner"]
