"""
MarketLens command line dashboard
"""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from marketlens.cli import migrate
from marketlens.cli.client import APIError, MarketLensClient
from marketlens.cli.dashboard import PLATFORM_LABELS, STATUS_STYLES, Tab, render_dashboard
from marketlens.core.config import settings
from marketlens.models.enums import Platform, SessionStatus
from marketlens.schemas.session import SessionStatusResponse

app = typer.Typer(help="Search marketplaces and explore review analysis", no_args_is_help=True)
app.add_typer(migrate.app, name="db")
console = Console()

ApiUrlOption = typer.Option(
    None, "--api-url", envvar="MARKETLENS_API_URL", help="Base URL of the MarketLens API"
)


def build_client(api_url: Optional[str] = None) -> MarketLensClient:
    return MarketLensClient(base_url=api_url)


def fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    raise typer.Exit(code=1)


def print_status(status: SessionStatusResponse) -> None:
    style = STATUS_STYLES[SessionStatus(status.status)]
    console.print(
        f"Session [bold]{escape(status.session_id)}[/bold]: [{style}]{status.status.value}[/] ({status.progress}%)"
    )
    if status.message:
        console.print(f"  {status.message}", markup=False)


def wait_with_progress(
    client: MarketLensClient, session_id: str, interval: Optional[float], timeout: Optional[float]
) -> SessionStatusResponse:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Waiting for analysis...", total=100)

        def on_update(status: SessionStatusResponse) -> None:
            progress.update(task, completed=status.progress, description=escape(status.message or "Working..."))

        return client.wait_for_completion(session_id, interval=interval, timeout=timeout, on_update=on_update)


def show_analysis(client: MarketLensClient, session_id: str, tab: Tab) -> None:
    result = client.analysis(session_id)
    if result.summary.total_products == 0:
        console.print(f"[yellow]No analysis data for session {escape(session_id)}[/yellow]")
        return
    render_dashboard(console, result, tab)


@app.command()
def search(
    query: str = typer.Argument(..., help="Product search query"),
    platforms: List[Platform] = typer.Option(
        [Platform.SHOPEE], "--platform", "-p", help="Marketplace to search (repeatable)"
    ),
    session_id: Optional[str] = typer.Option(None, "--session-id", help="Reuse or name a session"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Poll until the analysis finishes"),
    tab: Tab = typer.Option(Tab.OVERVIEW, "--tab", help="Dashboard section to show when done"),
    interval: Optional[float] = typer.Option(None, "--interval", help="Seconds between status polls"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Give up waiting after this many seconds"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Start a search and show the analysis dashboard"""
    try:
        with build_client(api_url) as client:
            response = client.search(query, platforms, session_id=session_id)
            labels = ", ".join(PLATFORM_LABELS[Platform(p)] for p in platforms)
            console.print(f"[bold]{escape(response.session_id)}[/bold] ({labels})")
            if response.message:
                console.print(response.message, markup=False)

            if not wait:
                return

            status = wait_with_progress(client, response.session_id, interval, timeout)
            print_status(status)
            if status.status == SessionStatus.FAILED:
                raise typer.Exit(code=1)

            show_analysis(client, response.session_id, tab)
    except APIError as e:
        fail(str(e))


@app.command()
def status(
    session_id: str = typer.Argument(..., help="Session identifier"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Show the processing status of a session"""
    try:
        with build_client(api_url) as client:
            result = client.status(session_id)
    except APIError as e:
        fail(str(e))
        return

    print_status(result)
    if result.status == SessionStatus.FAILED:
        raise typer.Exit(code=1)


@app.command()
def show(
    session_id: str = typer.Argument(..., help="Session identifier"),
    tab: Tab = typer.Option(Tab.ALL, "--tab", help="Dashboard section to show"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Render the analysis dashboard for a session"""
    try:
        with build_client(api_url) as client:
            show_analysis(client, session_id, tab)
    except APIError as e:
        fail(str(e))


@app.command()
def cleanup(
    session_id: str = typer.Argument(..., help="Session identifier"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Delete all data stored for a session"""
    if not yes:
        typer.confirm(f"Delete all data for session {session_id}?", abort=True)

    try:
        with build_client(api_url) as client:
            result = client.cleanup(session_id)
    except APIError as e:
        fail(str(e))
        return

    if result.success:
        console.print(f"[green]✓[/green] Deleted data for session {escape(session_id)}", highlight=False)


@app.command()
def serve(
    host: str = typer.Option(settings.HOST, help="Bind address"),
    port: int = typer.Option(settings.PORT, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the API server"""
    import uvicorn

    uvicorn.run(
        "marketlens.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
        server_header=False,
    )


@app.command("init-db")
def init_database():
    """Create database tables"""
    from marketlens.core.database import init_db
    from marketlens.core.logging import setup_logging

    setup_logging()
    asyncio.run(init_db())
    console.print("[green]✓[/green] Database tables created")


if __name__ == "__main__":
    app()
