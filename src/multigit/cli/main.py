import sys

import click
import typer

from multigit.cli.branch import branch as branch_command
from multigit.cli.commit_push import commit_push as commit_push_command

app = typer.Typer(name="multigit", help="Run one git branch operation across a list of repositories")
app.command(name="branch")(branch_command)
# Stop option parsing at the first positional so "--" and "-A" reach the command.
app.command(name="commit-push", context_settings={"allow_interspersed_args": False})(commit_push_command)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def run() -> None:
    """Console entry point: every usage error exits 1, like validation errors."""
    try:
        exit_code = app(standalone_mode=False)
    except click.exceptions.UsageError as e:
        e.show()
        sys.exit(1)
    except click.exceptions.Abort:
        typer.echo("Aborted!", err=True)
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    # Without standalone mode click returns the code of typer.Exit instead of exiting.
    sys.exit(exit_code if isinstance(exit_code, int) else 0)


if __name__ == "__main__":
    run()
