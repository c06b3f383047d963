"""Typer CLI: ``uxlens metrics``, ``analyze``, ``ingest``, ``render`` and ``validate``."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from uxlens.config import load_settings
from uxlens.errors import AnalysisInputError
from uxlens.schemas.config import ServiceSettings
from uxlens.schemas.metrics import MetricResult
from uxlens.schemas.pipeline import AnalysisReport

# Load .env file from project root (if it exists)
load_dotenv()

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="uxlens",
    help="uxlens: human-centered accessibility scores and recommendations for UI screens.",
    no_args_is_help=True,
)
console = Console()

EXIT_INPUT_ERROR = 1
EXIT_INTERNAL_ERROR = 2


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load_settings_or_exit(config: Path | None) -> ServiceSettings:
    try:
        return load_settings(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)


def _read_html(path: Path | None) -> str | None:
    if path is None:
        return None
    if not path.exists():
        console.print(f"[red]HTML file not found:[/] {path}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    return path.read_text(encoding="utf-8", errors="replace")


def _read_screenshot(path: Path | None) -> str | None:
    from uxlens.ingest import to_data_url

    if path is None:
        return None
    if not path.exists():
        console.print(f"[red]Screenshot not found:[/] {path}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    content_type, _ = mimetypes.guess_type(path.name)
    return to_data_url(path.read_bytes(), content_type)


def _print_metrics(metrics: list[MetricResult]) -> None:
    table = Table(title="Heuristic metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Verdict")
    for m in metrics:
        style = "green" if m.score >= 70 else "yellow" if m.score >= 50 else "red"
        table.add_row(m.label, f"[{style}]{m.score}[/]", m.summary)
    console.print(table)


@app.command()
def metrics(
    html: Path = typer.Option(..., "--html", help="Path to an HTML file to score."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Score a page with the local heuristics only (no API calls)."""
    from uxlens.heuristics.metrics import score_markup

    _setup_logging(verbose)
    markup = _read_html(html)

    try:
        report = score_markup(markup)
    except AnalysisInputError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)

    if as_json:
        typer.echo(report.model_dump_json(by_alias=True, indent=2))
        return

    _print_metrics(report.metrics)
    for m in report.metrics:
        for rec in m.recommendations:
            console.print(f"  [dim]{m.label}:[/] {rec}")


@app.command()
def analyze(
    html: Path = typer.Option(None, "--html", help="Path to an HTML file to analyze."),
    screenshot: Path = typer.Option(None, "--screenshot", "-s", help="Path to a screenshot image."),
    url: str = typer.Option(None, "--url", "-u", help="URL of the page being analyzed."),
    fetch: bool = typer.Option(False, "--fetch", help="Fetch the URL (HTML + screenshot) before analyzing."),
    config: Path = typer.Option(None, "--config", "-c", help="Optional YAML settings file."),
    output: Path = typer.Option(Path("./output"), "--output", "-o", help="Directory for report.json and report.md."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Run the full pipeline with mock data (no API calls)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run the full analysis: heuristics, visual analysis and recommendations."""
    _setup_logging(verbose)
    settings = _load_settings_or_exit(config)
    markup = _read_html(html)
    image = _read_screenshot(screenshot)

    if dry_run:
        console.print("[yellow]DRY-RUN mode: no API calls will be made.[/]\n")
    elif not settings.is_configured:
        console.print("[yellow]GREENPT_API_KEY not set, using heuristics and local recommendations only.[/]\n")

    try:
        report = asyncio.run(
            _run_analysis(settings, html=markup, screenshot=image, url=url, fetch=fetch, dry_run=dry_run)
        )
    except AnalysisInputError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    except Exception:
        logger.exception("Analysis failed")
        console.print("[red]Failed to complete analysis.[/]")
        raise typer.Exit(code=EXIT_INTERNAL_ERROR)

    _write_report(report, output, source=url or (html.name if html else ""))

    if report.metrics:
        _print_metrics(report.metrics)
    console.print(f"\n[bold]Overall score:[/] {report.analysis.overall_score}/100")
    console.print(report.analysis.summary)


async def _run_analysis(
    settings: ServiceSettings,
    *,
    html: str | None,
    screenshot: str | None,
    url: str | None,
    fetch: bool,
    dry_run: bool,
) -> AnalysisReport:
    """Optionally ingest the URL, then run the orchestrator."""
    from uxlens.agents.orchestrator.agent import AnalysisOrchestrator
    from uxlens.ingest import ingest
    from uxlens.shared.progress import PipelineProgress

    orchestrator = AnalysisOrchestrator.from_settings(settings, dry_run=dry_run)

    with PipelineProgress() as progress:
        if fetch and url:
            progress.start_stage("Ingestion")
            ingested = await ingest(url=url)
            for warning in ingested.warnings:
                progress.print_warning(warning)
            if ingested.error:
                progress.fail_stage("Ingestion", ingested.error)
            else:
                progress.finish_stage("Ingestion")
            html = html or ingested.fetched_html
            screenshot = screenshot or ingested.screenshot_data_url

        return await orchestrator.run(html=html, screenshot=screenshot, url=url, progress=progress)


def _write_report(report: AnalysisReport, out_dir: Path, *, source: str = "") -> None:
    from uxlens.output.markdown import render_markdown_report

    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / "report.json"
    json_path.write_text(report.to_json())
    console.print(f"[green]JSON report written to:[/] {json_path}")

    md_path = out_dir / "report.md"
    md_path.write_text(render_markdown_report(report, source=source))
    console.print(f"[green]Markdown report written to:[/] {md_path}")


@app.command()
def ingest(
    url: str = typer.Option(None, "--url", "-u", help="URL to fetch and screenshot."),
    screenshot: Path = typer.Option(None, "--screenshot", "-s", help="Path to an uploaded screenshot."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the ingestion payload to this JSON file."),
    no_browser: bool = typer.Option(False, "--no-browser", help="Skip the headless-browser screenshot."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fetch a URL and/or load a screenshot, ready for ``analyze``."""
    from uxlens import ingest as ingestion

    _setup_logging(verbose)
    if screenshot is not None and not screenshot.exists():
        console.print(f"[red]Screenshot not found:[/] {screenshot}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)

    screenshotter = None if no_browser else ingestion.capture_screenshot
    try:
        result = asyncio.run(
            ingestion.ingest(url=url, screenshot_path=screenshot, screenshotter=screenshotter)
        )
    except AnalysisInputError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    except Exception:
        logger.exception("Ingestion failed")
        console.print("[red]Failed to process ingestion request.[/]")
        raise typer.Exit(code=EXIT_INTERNAL_ERROR)

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/] {warning}")
    if result.note:
        console.print(f"[dim]{result.note}[/]")
    if result.fetched_html:
        console.print(f"Fetched HTML: {len(result.fetched_html)} characters")
    if result.screenshot_data_url:
        console.print("Screenshot captured")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.to_json())
        console.print(f"[green]Ingestion payload written to:[/] {output}")


@app.command()
def render(
    output: Path = typer.Option(..., "--output", "-o", help="Output directory from a previous run (must contain report.json)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Re-render report.md from a saved report.json (no API calls)."""
    from uxlens.output.markdown import render_markdown_report

    _setup_logging(verbose)

    report_path = output / "report.json"
    if not report_path.exists():
        console.print(f"[red]No report.json found in {output}[/]")
        console.print("Run [bold]uxlens analyze[/] first; it saves report.json at the end.")
        raise typer.Exit(code=EXIT_INPUT_ERROR)

    report = AnalysisReport.model_validate_json(report_path.read_text())
    md_path = output / "report.md"
    md_path.write_text(render_markdown_report(report))
    console.print(f"[green]Markdown report written to:[/] {md_path}")


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to a YAML settings file."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a settings file without running an analysis."""
    _setup_logging(verbose)
    settings = _load_settings_or_exit(config)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Base URL:    {settings.base_url}")
    console.print(f"  Model:       {settings.model}")
    console.print(f"  API key:     {'set' if settings.is_configured else '(not set, remote stages disabled)'}")
    console.print(f"  HTML prompt: first {settings.html_prompt_chars} chars")
