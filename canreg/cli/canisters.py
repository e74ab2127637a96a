"""Canister commands for canreg CLI."""

import typer
from rich import print_json

from canreg.cli.base import run_sync
from canreg.client import RegistrationClient
from canreg.contracts import ApiCanisterType, CanisterType, RegistrationResult
from canreg.config import Settings

canisters_cli = typer.Typer(name="canisters", help="Canister registration API")


def report(result: RegistrationResult | None):
    if result is None:
        raise typer.Exit(130)
    print_json(data=result.to_dict())
    if not result.success:
        raise typer.Exit(1)


@canisters_cli.command()
def register(
    ctx: typer.Context,
    principal: str,
    canister_id: str,
    canister_type: CanisterType = typer.Option(
        CanisterType.TOKEN_BACKEND, "--type", "-t", help="Kind of canister"
    ),
):
    """Register a canister created by PRINCIPAL"""
    cfg: Settings = ctx.meta["cfg"]
    client = RegistrationClient.from_settings(cfg)
    report(run_sync(client.register_canister(principal, canister_id, canister_type)))


@canisters_cli.command()
def get(ctx: typer.Context, canister_id: str):
    """Show a registered canister"""
    cfg: Settings = ctx.meta["cfg"]
    client = RegistrationClient.from_settings(cfg)
    report(run_sync(client.get_canister(canister_id)))


@canisters_cli.command(name="list")
def list_(
    ctx: typer.Context,
    canister_type: ApiCanisterType | None = typer.Option(
        None, "--type", "-t", help="Only list canisters of this type"
    ),
):
    """List registered canisters"""
    cfg: Settings = ctx.meta["cfg"]
    client = RegistrationClient.from_settings(cfg)
    report(run_sync(client.list_canisters(canister_type)))
