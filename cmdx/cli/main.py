import logging

import click
import typer
from typer.core import TyperGroup

from cmdx import __version__, api, config
from cmdx.cli import output
from cmdx.cli.errors import error_feedback, report
from cmdx.errors import CmdError
from cmdx.lib.context import Snapshot


def snapshot(ctx: click.Context) -> Snapshot:
    """Load both scopes once per invocation and keep them on the root context."""
    obj = ctx.find_root().ensure_object(dict)
    if "snapshot" not in obj:
        try:
            obj["snapshot"] = Snapshot.load()
        except CmdError as e:
            report(e)
            raise
    return obj["snapshot"]


def _alias_command(name: str, description: str) -> click.Command:
    @click.command(
        name=name,
        help=description,
        context_settings={"ignore_unknown_options": True, "help_option_names": []},
    )
    @click.argument("args", nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    @error_feedback
    def run_alias(ctx: click.Context, args):
        code = api.run(snapshot(ctx), name, list(args))
        if code != 0:
            typer.echo(f"INFO: Program exited with code: {code}")
            if config.load_config()["propagate_exit_code"]:
                raise typer.Exit(code)

    return run_alias


class AliasGroup(TyperGroup):
    """Built-in commands first, then every registered alias as a command."""

    def list_commands(self, ctx):
        names = super().list_commands(ctx)
        return names + [alias for alias in snapshot(ctx).aliases() if alias not in names]

    def get_command(self, ctx, cmd_name):
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd

        for registry in snapshot(ctx).registries():
            entry = registry.find_by_alias(cmd_name)
            if entry is not None:
                return _alias_command(cmd_name, entry.description)
        return None

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            typer.echo(f"{cmd_name} is an unknown command")
            ctx.exit(0)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    invoke_without_command=True, no_args_is_help=False, cls=AliasGroup, add_completion=False
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"cmdx {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def common_options_callback(
    ctx: typer.Context,
    force_global: bool = typer.Option(False, "--global", "-g", help="Force global scope."),
    force_local: bool = typer.Option(False, "--local", "-l", help="Force local scope."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version."
    ),
):
    """Personal command launcher.

    Register scripts under short aliases, globally or per project, and run
    them with: cmdx <alias> [args...]"""
    obj = ctx.ensure_object(dict)
    obj["force_global"] = force_global
    obj["force_local"] = force_local

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _forced(ctx: typer.Context) -> dict:
    return {
        "force_global": ctx.obj.get("force_global", False),
        "force_local": ctx.obj.get("force_local", False),
    }


@app.command("init")
@error_feedback
def init():
    """Setup local scope in the current directory."""
    result = api.init()
    for notice in result.notices:
        typer.echo(f"INFO: {notice}")
    if not result.notices:
        typer.echo(f"Initialized local scope at {result.index.parent.parent}")


@app.command("add")
@error_feedback
def add(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Name to run the script by."),
    description: str = typer.Argument("", help="Shown next to the alias in help."),
    no_edit: bool = typer.Option(False, "--no-edit", help="Do not open the new script."),
):
    """Create script and open it in the $EDITOR."""
    entry = api.add(
        snapshot(ctx), alias, description, open_editor=not no_edit, **_forced(ctx)
    )
    typer.echo(f"Added {entry.alias} ({entry.scope.kind.value}) -> {entry.rel_path}")


@app.command("edit")
@error_feedback
def edit(
    ctx: typer.Context,
    alias: str | None = typer.Argument(None, help="Alias to edit; omit to edit the index."),
):
    """Open script index or [ALIAS] in the $EDITOR."""
    api.edit(snapshot(ctx), alias, **_forced(ctx))


@app.command("remove")
@error_feedback
def remove(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Alias to deregister."),
):
    """Remove script from the index (does NOT remove file)."""
    entry = api.remove(snapshot(ctx), alias, **_forced(ctx))
    typer.echo(f"Removed {entry.alias} ({entry.scope.kind.value}); {entry.rel_path} kept")


@app.command("list")
@error_feedback
def list_cmd(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output in JSON format."),
):
    """List registered aliases; local ones shadow global ones."""
    output.echo_commands(api.list_commands(snapshot(ctx)), json_output=json_output)


def _configure_logging() -> None:
    level = str(config.load_config()["log_level"]).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[cmdx] %(levelname)s %(message)s",
    )


def main() -> None:
    """Entry point for cmdx command."""
    try:
        _configure_logging()
        app()
    except SystemExit:
        raise
    except CmdError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise SystemExit(1) from e
    except BaseException as e:
        raise SystemExit(1) from e
