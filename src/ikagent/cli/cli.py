import logging
import os

import click

from ikagent.cli.alias import AliasedGroup, register_with_aliases
from ikagent.cli.commands.attach_cmd import attach_cmd
from ikagent.cli.commands.create_cmd import create_cmd
from ikagent.cli.commands.destroy_cmd import destroy_cmd
from ikagent.cli.commands.init_cmd import init_cmd
from ikagent.cli.commands.list_cmd import list_cmd
from ikagent.cli.commands.start_cmd import start_cmd
from ikagent.cli.commands.stop_cmd import stop_cmd
from ikagent.cli.output import user_output
from ikagent.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_ENV_VAR = "IKAGENT_DEBUG"

# Enable debug logging if IKAGENT_DEBUG environment variable is set
if os.getenv(DEBUG_ENV_VAR):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(cls=AliasedGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="ikagent")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Per-branch Docker dev sandboxes backed by isolated git clones."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


# Commands with @alias decorators use register_with_aliases() to auto-register aliases
register_with_aliases(cli, init_cmd)
register_with_aliases(cli, create_cmd)  # Has @alias("c")
register_with_aliases(cli, list_cmd)  # Has @alias("ls")
register_with_aliases(cli, attach_cmd)  # Has @alias("at")
register_with_aliases(cli, start_cmd)  # Has @alias("up")
register_with_aliases(cli, stop_cmd)  # Has @alias("st")
register_with_aliases(cli, destroy_cmd)  # Has @alias("rm")


def main() -> None:
    """CLI entry point used by the `ikagent` console script."""
    try:
        cli()
    except RuntimeError as e:
        if os.getenv(DEBUG_ENV_VAR):
            raise
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e
