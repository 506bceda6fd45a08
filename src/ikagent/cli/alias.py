"""Short command aliases (`ikagent c`, `ikagent rm`, ...).

Commands declare aliases with @alias(...) and are registered with
register_with_aliases(). Aliases resolve through AliasedGroup.get_command and
are listed next to the command name in --help rather than as separate
commands.
"""

from collections.abc import Callable

import click


def alias(*names: str) -> Callable[[click.Command], click.Command]:
    """Attach short aliases to a click command.

    Must be applied above @click.command so it receives the Command object.
    """

    def decorator(cmd: click.Command) -> click.Command:
        existing: tuple[str, ...] = getattr(cmd, "aliases", ())
        cmd.aliases = existing + names  # type: ignore[attr-defined]
        return cmd

    return decorator


def get_aliases(cmd: click.Command) -> tuple[str, ...]:
    return getattr(cmd, "aliases", ())


class AliasedGroup(click.Group):
    """click.Group that resolves registered aliases to their commands."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.alias_map: dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        resolved = self.alias_map.get(cmd_name, cmd_name)
        return super().get_command(ctx, resolved)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        # Report the canonical name so help and errors don't show the alias
        _, cmd, remaining = super().resolve_command(ctx, args)
        return (cmd.name if cmd is not None else None), cmd, remaining

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        rows: list[tuple[str, str]] = []
        for name in self.list_commands(ctx):
            cmd = self.get_command(ctx, name)
            if cmd is None or cmd.hidden:
                continue
            aliases = get_aliases(cmd)
            label = f"{name} ({', '.join(aliases)})" if aliases else name
            rows.append((label, cmd.get_short_help_str(limit=formatter.width)))

        if rows:
            with formatter.section("Commands"):
                formatter.write_dl(rows)


def register_with_aliases(
    group: AliasedGroup, cmd: click.Command, name: str | None = None
) -> None:
    """Add `cmd` to `group` under its name and every alias it declares."""
    group.add_command(cmd, name)
    canonical = name or cmd.name
    if canonical is None:
        raise ValueError("Command has no name to alias")
    for short in get_aliases(cmd):
        group.alias_map[short] = canonical
