import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich import print

from canreg import __version__
from canreg.cli.canisters import canisters_cli
from canreg.config import APP_CFG, Settings, config_path

cli = typer.Typer(pretty_exceptions_show_locals=False)

cli.add_typer(canisters_cli, name="canisters")


log_levels = {0: "ERROR", 1: "WARNING", 2: "INFO", 3: "DEBUG"}


def configure_logging(verbose: int):
    """Configure loguru logging based on verbosity level."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_levels[verbose],
        colorize=True,
        backtrace=True,
        diagnose=True,
    )
    logger.info(f"Logging configured at level: {log_levels[verbose]}")


def version_info(value: bool):
    if not value:
        return
    typer.echo(__version__)
    raise typer.Exit()


def error(msg: str, exit_code: int = 1):
    print(f"[bold red]ERROR: {msg}")
    raise typer.Exit(exit_code)


def ensure_config(ctx, option, cfg_file):
    """Ensure the config path and directory and inject the config into the context"""
    path = config_path(cfg_file)

    if not path.parent.is_dir():
        if not cfg_file == APP_CFG:
            error(f"{path.parent} does not exist")
        print(f"Creating app config folder {path.parent}")
        path.parent.mkdir(parents=True)
    if not path.is_file():
        print(f"Creating default config {path}")
        path.write_text(Settings().dump())
    cfg = Settings.from_file(path)

    # Write the new version if cli was updated
    if cfg.version != __version__:
        cfg.version = __version__
        cfg.save()

    # Use this option to avoid having a global cfg object
    ctx.meta["cfg"] = cfg
    return path


@cli.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(None, "--version", callback=version_info),
    cfg_file: Path = typer.Option(APP_CFG, callback=ensure_config),
    verbose: Annotated[
        int, typer.Option("--verbose", "-v", count=True, max=3, min=0)
    ] = 0,
):
    """canreg command line interface for the canister registration API"""
    configure_logging(verbose)


@cli.command()
def open_config(ctx: typer.Context):
    """Open the place where the config is stored"""
    cfg = ctx.meta["cfg"]
    print(f"Opening config {cfg.file_path}")
    typer.launch(str(cfg.file_path.resolve()), locate=True)


@cli.command()
def show_config(ctx: typer.Context):
    """Print the active configuration"""
    cfg = ctx.meta["cfg"]
    print(cfg.dump())
