"""Command Line Interface for the Referral Registry.

This module provides a CLI using Typer for running the HTTP server and
exporting the API description.
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from referral_registry import __version__
from referral_registry.api.openapi_spec import build_openapi_schema
from referral_registry.domain.ports import ConfigurationError
from referral_registry.infrastructure.config_manager import ConfigManager, ServerConfig

# Initialize Typer app and Rich console
app = typer.Typer(
    name="referral-registry",
    help="Referral Registry: in-memory HTTP service for medical referrals",
    add_completion=False
)
console = Console()


def load_config(**overrides) -> ServerConfig:
    """Environment configuration with non-None CLI options applied on top."""
    try:
        config = ConfigManager.from_environment().get_server_config()
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return config
        return ServerConfig(**{**config.model_dump(), **updates})
    except ConfigurationError as e:
        console.print(f"[red]✗[/red] {str(e)}")
        raise typer.Exit(code=1)
    except ValueError as e:
        console.print(f"[red]✗[/red] Invalid option: {str(e)}")
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: $HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listening port (default: $PORT or 3000)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development only)"),
) -> None:
    """Run the referral HTTP server.

    Examples:
        referral-registry serve
        referral-registry serve --port 8080
        PORT=8080 referral-registry serve --reload
    """
    config = load_config(host=host, port=port, log_level=log_level)

    console.print("[bold blue]Referral Registry[/bold blue]")
    console.print(f"Server is running on port {config.port}")
    console.print(f"[dim]Docs:[/dim] http://{config.host}:{config.port}/api-docs")

    if reload:
        # The reloader re-imports the app in a child process, which reads the environment
        os.environ["HOST"] = config.host
        os.environ["PORT"] = str(config.port)
        os.environ["LOG_LEVEL"] = config.log_level
        uvicorn.run(
            "referral_registry.api.main:create_app",
            factory=True,
            host=config.host,
            port=config.port,
            reload=True,
            log_level=config.log_level.lower()
        )
        return

    from referral_registry.api.main import create_app

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower()
    )


@app.command()
def openapi(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
) -> None:
    """Print the OpenAPI description of the referral API as JSON."""
    document = json.dumps(build_openapi_schema(), indent=2)
    if output is None:
        typer.echo(document)
        return

    output.write_text(document + "\n", encoding="utf-8")
    console.print(f"[green]✓[/green] OpenAPI document written to {output}")


@app.command()
def info() -> None:
    """Display effective server configuration."""
    config = load_config()

    console.print("[bold blue]Referral Registry Configuration[/bold blue]\n")

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_column("Setting", style="cyan")
    info_table.add_column("Value")

    info_table.add_row("Version:", __version__)
    info_table.add_row("Host:", config.host)
    info_table.add_row("Port:", str(config.port))
    info_table.add_row("Log Level:", config.log_level)
    info_table.add_row("JSON Logs:", "Enabled" if config.json_logs else "Disabled")
    info_table.add_row("CORS Origins:", ", ".join(config.cors_origins))
    info_table.add_row("Storage:", "In-memory (cleared on restart)")

    console.print(info_table)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version information")
) -> None:
    """Referral Registry: in-memory HTTP service for medical referrals."""
    if version:
        console.print(f"Referral Registry v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
