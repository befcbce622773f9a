"""CLI entrypoints for foliosite."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .builder import BuildResult, build_site, validate_only
from .config import Config, load_config
from .errors import SiteBuildError
from .verify import IssueSeverity, VerificationReport, verify_site

console = Console()
app = typer.Typer(help="Static site builder for a personal portfolio.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to a foliosite.yml file or a project directory."),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log each step of the build."),
]


@app.command()
def build(
    config_path: ConfigPathOption = ".",
    report: Annotated[
        Path | None,
        typer.Option("--report", help="Write a JSON build report to this path."),
    ] = None,
    run_verify: Annotated[
        bool,
        typer.Option("--verify/--no-verify", help="Verify generated pages after writing them."),
    ] = False,
    verbose: VerboseFlag = False,
) -> None:
    """Validate content and regenerate every configured page."""
    _configure_logging(verbose)
    config: Config = _load(config_path)

    try:
        result = build_site(config, report_path=report)
    except SiteBuildError as exc:
        console.print(f"[bold red]Build failed[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _print_build_summary(config, result)

    if run_verify:
        verification = verify_site(config.output_dir, result.written)
        _print_verification_report(config, verification)
        if verification.error_count:
            raise typer.Exit(code=1)


@app.command()
def validate(
    config_path: ConfigPathOption = ".",
    verbose: VerboseFlag = False,
) -> None:
    """Check content files without rendering anything."""
    _configure_logging(verbose)
    config: Config = _load(config_path)

    try:
        data = validate_only(config)
    except SiteBuildError as exc:
        console.print(f"[bold red]Validation failed[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    counts = ", ".join(f"{name} {count}" for name, count in data.counts().items())
    console.print(f"[bold green]Content valid[/]: {counts}")


@app.command()
def verify(
    config_path: ConfigPathOption = ".",
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Treat warnings as errors."),
    ] = False,
) -> None:
    """Scan generated pages for unsafe links, placeholders, and broken references."""
    config: Config = _load(config_path)
    pages = [config.output_dir / page.name for page in config.pages]
    absent = [path for path in pages if not path.exists()]
    if absent:
        names = ", ".join(path.name for path in absent)
        console.print(f"[bold red]Generated page(s) not found[/]: {names}")
        console.print("Run 'foliosite build' before verifying.")
        raise typer.Exit(code=1)

    report = verify_site(config.output_dir, pages)
    _print_verification_report(config, report)

    exit_code = 0
    if report.error_count > 0 or (strict and report.warning_count > 0):
        exit_code = 1
    raise typer.Exit(code=exit_code)


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def _print_build_summary(config: Config, result: BuildResult) -> None:
    stats = result.report.collections
    console.print(
        "[bold green]Content[/]: "
        f"{stats.featured} project(s), {stats.skills} skill group(s), "
        f"{stats.experience} role(s), {stats.certifications} certification(s), "
        f"{stats.reading} book(s)"
    )
    for path in result.written:
        console.print(f"[bold green]Generated[/]: {config.display_path(path)}")
    if result.report_path is not None:
        console.print(f"[bold green]Report written[/]: {config.display_path(result.report_path)}")
    if result.report.missing_assets:
        console.print("[bold yellow]Missing assets (placeholders rendered):[/]")
        for entry in result.report.missing_assets:
            console.print(f"- {escape(entry)}")
    names = ", ".join(path.name for path in result.written)
    console.print(f"[bold green]Build complete[/]: generated {names}")


def _print_verification_report(config: Config, report: VerificationReport) -> None:
    if not report.issues:
        console.print(f"[bold green]Verification passed[/]: {report.scanned_files} page(s) scanned.")
        return

    for issue in report.issues:
        style = "red" if issue.severity is IssueSeverity.ERROR else "yellow"
        console.print(
            f"[bold {style}]{issue.kind}[/] {config.display_path(issue.source)} - {escape(issue.message)}"
        )
    console.print(
        f"[bold blue]Summary[/]: {report.error_count} error(s), {report.warning_count} warning(s) "
        f"across {report.scanned_files} page(s)."
    )
