"""Main CLI application using Typer."""

import sys
from typing import List, Optional

import typer
from rich.console import Console

from loka import __version__

app = typer.Typer(
    name="loka",
    help="Loka - product-description translation assistant",
    no_args_is_help=True,
)

console = Console()

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file (default: ~/.loka/loka.yaml)",
)
ServerOption = typer.Option(
    None,
    "--server",
    "-s",
    help="Loka server URL (default: from config)",
)
TenantOption = typer.Option(None, "--tenant", "-t", help="Tenant id")


@app.command()
def version():
    """Show loka version."""
    console.print(f"loka version {__version__}")


@app.command()
def start(config_path: Optional[str] = ConfigOption):
    """Start loka API server."""
    from loka.cli.server_cmd import start_command

    start_command(config_path=config_path)


@app.command()
def status(config_path: Optional[str] = ConfigOption):
    """Check loka server status."""
    from loka.cli.server_cmd import status_command

    status_command(config_path=config_path)


@app.command()
def translate(
    text: str = typer.Argument(..., help="Product description to translate"),
    languages: Optional[List[str]] = typer.Option(
        None, "--lang", "-l", help="Target locale (repeatable; default: configured defaults)"
    ),
    approve_all: bool = typer.Option(
        False, "--approve", "-a", help="Save every completed translation to history"
    ),
    server: Optional[str] = ServerOption,
    tenant: Optional[str] = TenantOption,
    config_path: Optional[str] = ConfigOption,
):
    """Translate text into the selected locales."""
    from pathlib import Path

    from loka.cli.server_cmd import server_url
    from loka.cli.translate_cmd import translate_command
    from loka.config.loader import load_config

    if not languages:
        config = load_config(Path(config_path) if config_path else None)
        languages = config.translator.default_languages

    failures = translate_command(
        text,
        list(languages),
        base_url=server or server_url(config_path),
        approve_all=approve_all,
        tenant=tenant,
    )
    if failures:
        raise typer.Exit(code=1)


@app.command()
def terms(
    server: Optional[str] = ServerOption,
    tenant: Optional[str] = TenantOption,
    config_path: Optional[str] = ConfigOption,
):
    """List brand terms."""
    from loka.cli.records_cmd import terms_command
    from loka.cli.server_cmd import server_url

    terms_command(server or server_url(config_path), tenant=tenant)


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of jobs to show"),
    server: Optional[str] = ServerOption,
    tenant: Optional[str] = TenantOption,
    config_path: Optional[str] = ConfigOption,
):
    """Show translation history and analytics."""
    from loka.cli.records_cmd import history_command
    from loka.cli.server_cmd import server_url

    history_command(server or server_url(config_path), tenant=tenant, limit=limit)


# Language commands
languages_app = typer.Typer(help="Manage target languages")
app.add_typer(languages_app, name="languages")


@languages_app.command("list")
def languages_list(config_path: Optional[str] = ConfigOption):
    """List available locales and the default selection."""
    from loka.cli.records_cmd import languages_command

    languages_command(config_path=config_path)


@languages_app.command("toggle")
def languages_toggle(
    lang_id: str = typer.Argument(..., help="Locale code, e.g. zh-TW"),
    config_path: Optional[str] = ConfigOption,
):
    """Add or remove a locale from the default selection."""
    from loka.cli.records_cmd import toggle_language_command

    if not toggle_language_command(lang_id, config_path=config_path):
        raise typer.Exit(code=1)


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
