"""GeneratorService — run the site generator CLI."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from sitectl.infrastructure.process import EXIT_NOT_FOUND, run_command
from sitectl.services.base import BaseService
from sitectl.services.result import ServiceResult

if TYPE_CHECKING:
    from sitectl.infrastructure.project import ProjectContext
    from sitectl.infrastructure.repository import ContentRepository


class GeneratorService(BaseService):
    """Pass-through wrapper: output is returned unparsed."""

    def __init__(
        self,
        project: ProjectContext,
        repository: ContentRepository | None = None,
        *,
        binary: str = "hugo",
        timeout: float | None = None,
    ) -> None:
        super().__init__(project, repository)
        self._binary = binary
        self._timeout = timeout

    def run(self, args: Sequence[str]) -> ServiceResult:
        op = "run_generator"
        output = run_command(args, self._project.root, self._binary, timeout=self._timeout)
        data = {
            "command": [self._binary, *args],
            "exit_code": output.exit_code,
            "stdout": output.stdout,
            "stderr": output.stderr,
        }
        if output.success:
            return ServiceResult(ok=True, op=op, data=data)

        if output.exit_code == EXIT_NOT_FOUND:
            message = f"Generator binary not found: {self._binary}"
        else:
            message = f"{self._binary} exited with code {output.exit_code}"
        return ServiceResult.failure(op, "GENERATOR_FAILED", message, detail=data)
