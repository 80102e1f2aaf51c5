"""
Recording ProcessRunner.
"""

from typing import List, Optional

from twlauncher.core.runner import ProcessResult


class FakeRunner:
    """ProcessRunner that records calls and returns a canned result."""

    def __init__(
        self,
        stdout: str = "",
        stderr: str = "",
        error: Optional[Exception] = None,
    ):
        self.result = ProcessResult(stdout=stdout, stderr=stderr)
        self.error = error
        self.calls: List[tuple] = []

    def run(self, executable, args, deadline=None) -> ProcessResult:
        self.calls.append((executable, list(args)))
        if self.error is not None:
            raise self.error
        return self.result
