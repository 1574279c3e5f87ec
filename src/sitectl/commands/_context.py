"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Builds the project context and repository lazily
so ``--help`` never touches the file system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.config.logging import configure_logging
from sitectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sitectl.config.settings import SiteSettings
    from sitectl.infrastructure.project import ProjectContext
    from sitectl.infrastructure.repository import ContentRepository
    from sitectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: SiteSettings) -> None:
        self.settings = settings
        self._project: ProjectContext | None = None
        self._repository: ContentRepository | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def project(self) -> ProjectContext:
        if self._project is None:
            from sitectl.infrastructure.project import ProjectContext

            self._project = ProjectContext.from_settings(self.settings)
        return self._project

    @property
    def repository(self) -> ContentRepository:
        if self._repository is None:
            from sitectl.infrastructure.repository import ContentRepository

            self._repository = ContentRepository(self.project)
        return self._repository

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
