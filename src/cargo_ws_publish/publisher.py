"""
Sequential dry-run and publish of workspace packages.

Every package is validated before the operator is asked about it, and the
first failing cargo command aborts the run: a half-published workspace is
left as it is rather than pushed further. Each package is processed from
inside its own directory, and the previous working directory is restored
afterwards even when cargo fails.
"""

import contextlib
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import typer
from rich.console import Console

from cargo_ws_publish.config import DEFAULT_REGISTRY, get_logger
from cargo_ws_publish.utils import cargo
from cargo_ws_publish.utils.common import console as default_console
from cargo_ws_publish.workspace import WorkspacePackage

logger = get_logger("publisher")


class PackageOutcome(str, Enum):
    """What happened to a package during a run."""

    VALIDATED = "validated"
    PUBLISHED = "published"
    SKIPPED = "skipped"
    UNPUBLISHABLE = "unpublishable"


@dataclass
class PublishOptions:
    """Per-run settings for the publish flow."""

    registry: str = DEFAULT_REGISTRY
    allow_dirty: bool = False
    no_verify: bool = False
    validate_only: bool = False
    sync_wait: float = 10.0


@dataclass
class PublishReport:
    """Ordered record of package outcomes."""

    results: list[tuple[WorkspacePackage, PackageOutcome]] = field(default_factory=list)

    def add(self, package: WorkspacePackage, outcome: PackageOutcome) -> None:
        self.results.append((package, outcome))

    def count(self, outcome: PackageOutcome) -> int:
        return sum(1 for _, result in self.results if result is outcome)

    @property
    def published(self) -> list[WorkspacePackage]:
        return [p for p, result in self.results if result is PackageOutcome.PUBLISHED]

    @property
    def skipped(self) -> list[WorkspacePackage]:
        return [p for p, result in self.results if result is PackageOutcome.SKIPPED]


def confirm_publish(prompt: str) -> bool:
    """Ask on stdin; anything but an explicit yes declines.

    Unrecognised answers decline instead of re-prompting, so piped answers
    stay aligned with their crates. EOF still aborts the run.
    """
    answer = typer.prompt(f"{prompt} [y/N]", default="", show_default=False)
    return answer.strip().lower() in {"y", "yes"}


class WorkspacePublisher:
    """Runs the validate, confirm, publish sequence over workspace packages."""

    def __init__(
        self,
        options: PublishOptions | None = None,
        confirm: Callable[[str], bool] = confirm_publish,
        sleep: Callable[[float], None] = time.sleep,
        console: Console | None = None,
    ):
        self.options = options or PublishOptions()
        self.confirm = confirm
        self.sleep = sleep
        self.console = console or default_console

    def run(self, packages: list[WorkspacePackage]) -> PublishReport:
        """Process packages in order, stopping at the first cargo failure.

        Raises:
            DryRunError: validation failed for a package
            PublishError: the real publish failed for a package
            CommandNotFoundError: cargo is not installed
        """
        report = PublishReport()

        for index, package in enumerate(packages):
            outcome = self.process(package)
            report.add(package, outcome)

            is_last = index == len(packages) - 1
            if outcome is PackageOutcome.PUBLISHED and not is_last and self.options.sync_wait > 0:
                self.console.print(
                    f"[dim]⏳ Waiting {self.options.sync_wait:g}s for "
                    f"{self.options.registry} to sync...[/dim]"
                )
                self.sleep(self.options.sync_wait)

        return report

    def process(self, package: WorkspacePackage) -> PackageOutcome:
        """Validate one package and publish it if the operator agrees."""
        options = self.options
        name = package.display_name
        log = logger.bind(package=name, path=str(package.directory))

        self.console.print("\n" + "=" * 50)
        self.console.print(f"[bold]📦 crate:[/bold] [cyan]{name}[/cyan] {package.version}")
        self.console.print(f"[bold]📁 path :[/bold] {package.directory}")
        self.console.print("=" * 50)

        if not package.is_publishable(options.registry):
            self.console.print(
                f"[yellow]⊘ {name} cannot be published to {options.registry} "
                f"(package.publish), skipping[/yellow]"
            )
            log.info("Package not publishable", registry=options.registry)
            return PackageOutcome.UNPUBLISHABLE

        with contextlib.chdir(package.directory):
            with self.console.status("Running dry-run..."):
                cargo.dry_run_publish(
                    package.name,
                    package.directory,
                    registry=options.registry,
                    allow_dirty=options.allow_dirty,
                    no_verify=options.no_verify,
                )
            self.console.print(f"[green]✓ dry-run passed: {name}[/green]")

            if options.validate_only:
                return PackageOutcome.VALIDATED

            if not self.confirm(f"Publish {name} to {options.registry}?"):
                self.console.print(f"[dim]⊘ Skipping publish of {name}[/dim]")
                log.info("Publish declined")
                return PackageOutcome.SKIPPED

            with self.console.status(f"Publishing {name}..."):
                cargo.publish(
                    package.name,
                    package.directory,
                    registry=options.registry,
                    allow_dirty=options.allow_dirty,
                    no_verify=options.no_verify,
                )
            self.console.print(f"[green]✓ Published {name} {package.version}[/green]")
            log.info("Package published", version=package.version)
            return PackageOutcome.PUBLISHED
