"""Server management commands."""

from pathlib import Path

import httpx
from rich.console import Console

console = Console()


def server_url(config_path: str | None = None) -> str:
    """Base URL of the configured server, falling back to the defaults."""
    from loka.config.loader import load_config
    from loka.config.schema import LokaConfig

    try:
        config = load_config(Path(config_path) if config_path else None)
    except Exception:
        config = LokaConfig()
    return f"http://{config.server.host}:{config.server.port}"


def start_command(config_path: str | None = None) -> None:
    """Start the loka API server in the foreground.

    Args:
        config_path: Optional path to config file
    """
    import uvicorn

    from loka.config.loader import load_config
    from loka.server.app import create_app

    path = Path(config_path) if config_path else None
    try:
        config = load_config(path)
    except Exception as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        return

    app = create_app(config)

    console.print(
        f"[green]Starting loka server on {config.server.host}:{config.server.port}[/green]"
    )
    console.print(f"Storage: {config.storage.path}")
    console.print(f"Agent:   {config.agent.base_url}")
    console.print("\nPress Ctrl+C to stop")

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="info",
    )


def status_command(config_path: str | None = None) -> None:
    """Check loka server status."""
    url = server_url(config_path)
    try:
        resp = httpx.get(f"{url}/health", timeout=3.0)
        data = resp.json()
        console.print("[green]Server is running[/green]")
        console.print(f"  URL:     {url}")
        console.print(f"  Version: {data.get('version', 'unknown')}")
    except (httpx.HTTPError, ValueError):
        console.print("[yellow]Server is not running.[/yellow]")
        console.print("Start with: [bold]loka start[/bold]")
