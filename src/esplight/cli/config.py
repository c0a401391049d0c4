from __future__ import annotations

from typing import Annotated

import typer

from esplight.config import ApiConfig, Settings, render_settings_toml, write_settings

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True, help="Show or create the config file.")


@app.command("show")
def show_config() -> None:
    """Print the effective settings as TOML."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    typer.echo(f"Config source: {path if exists else 'defaults'}")
    typer.echo(render_settings_toml(settings))


@app.command("init")
def init_config(
    password: Annotated[
        str, typer.Option(help="ESPHome API password for legacy devices")
    ] = "",
    noise_psk: Annotated[
        str | None,
        typer.Option("--noise-psk", help="Base64 API encryption key"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write a config file with default discovery settings."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)
    if exists and not force:
        typer.echo(f"Config already exists at {path} (use --force to overwrite)")
        raise typer.Exit(1)

    settings = Settings(api=ApiConfig(password=password, noise_psk=noise_psk))
    write_settings(settings, path)
    typer.echo(f"Wrote config to {path}")
