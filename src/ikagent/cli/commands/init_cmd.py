"""Init command - set up ikagent in the current git repository."""

import click

from ikagent.cli.ensure import Ensure
from ikagent.cli.output import user_output
from ikagent.core.caches import CacheType
from ikagent.core.context import IkagentContext
from ikagent.core.init_ops import add_to_gitignore, write_packages_nix
from ikagent.core.picker import Choice, filter_choices
from ikagent.core.project_config import ProjectConfig, save_project_config
from ikagent.core.project_discovery import ProjectContext
from ikagent.core.settings import CLONES_DIR, MARKER_DIR

NO_NETWORK = "(none)"


def _prompt_list(message: str) -> list[str]:
    """Prompt for a comma-separated list; empty input means none."""
    raw = click.prompt(f"{message} (comma-separated, blank for none)", default="", err=True)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_env_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        Ensure.invariant(
            bool(sep) and bool(key.strip()), f"Invalid --env value '{pair}', expected KEY=VALUE"
        )
        overrides[key.strip()] = value
    return overrides


def _select_network(ctx: IkagentContext) -> str | None:
    networks = ctx.docker.list_networks() if ctx.docker.is_daemon_running() else []
    if not networks:
        return None
    choices = [Choice(name=NO_NETWORK, value=NO_NETWORK)]
    choices.extend(Choice(name=n, value=n) for n in networks)
    selected = ctx.picker.search("Docker network to join", lambda q: filter_choices(choices, q))
    if selected is None or selected == NO_NETWORK:
        return None
    return selected


@click.command("init")
@click.option("--copy", "copy_files", multiple=True, help="File to copy into every clone.")
@click.option("--network", help="Docker network containers join.")
@click.option(
    "--cache",
    "caches",
    multiple=True,
    type=click.Choice([c.value for c in CacheType]),
    help="Package-manager cache to mount.",
)
@click.option("--init-script", "init_scripts", multiple=True, help="Script run after create.")
@click.option(
    "--teardown-script", "teardown_scripts", multiple=True, help="Script run before destroy."
)
@click.option("--env-file", "env_files", multiple=True, help=".env file loaded into containers.")
@click.option("--env", "env_pairs", multiple=True, help="Env override, KEY=VALUE.")
@click.option("-y", "--yes", is_flag=True, help="Don't prompt; use only the given options.")
@click.pass_obj
def init_cmd(
    ctx: IkagentContext,
    copy_files: tuple[str, ...],
    network: str | None,
    caches: tuple[str, ...],
    init_scripts: tuple[str, ...],
    teardown_scripts: tuple[str, ...],
    env_files: tuple[str, ...],
    env_pairs: tuple[str, ...],
    yes: bool,
) -> None:
    """Initialize ikagent in the current git repository.

    Creates .ikagent/ with config.json and packages.nix, and adds the clones
    directory to .gitignore. Anything not passed as an option is prompted
    for unless --yes is given.
    """
    Ensure.invariant(
        ctx.git.is_git_repo(ctx.cwd),
        "Not a git repository",
        "Run 'git init' first or navigate to a git repository",
    )

    project = ProjectContext.at(ctx.cwd)
    if project.marker_dir.exists():
        user_output(f"ikagent already initialized in {project.name}")
        user_output(f"Config at: {project.config_path}")
        return

    env_overrides = _parse_env_pairs(env_pairs)
    copy_list = list(copy_files)
    init_list = list(init_scripts)
    teardown_list = list(teardown_scripts)
    env_file_list = list(env_files)
    cache_list = [CacheType(c) for c in dict.fromkeys(caches)]

    if not yes:
        if not copy_list:
            copy_list = _prompt_list("Files to copy to clones")
        if network is None:
            network = _select_network(ctx)
        if not cache_list:
            raw_caches = _prompt_list("Caches to mount (pnpm, bun, npm, yarn)")
            cache_list = []
            for raw in raw_caches:
                Ensure.invariant(
                    raw in {c.value for c in CacheType}, f"Unknown cache type '{raw}'"
                )
                if CacheType(raw) not in cache_list:
                    cache_list.append(CacheType(raw))
        if not init_list:
            init_list = _prompt_list("Init scripts to run")
        if not teardown_list:
            teardown_list = _prompt_list("Teardown scripts to run")
        if not env_file_list:
            env_file_list = _prompt_list("Env files to load")

    user_output(f"\nInitializing ikagent for {project.name}...")

    project.clones_dir.mkdir(parents=True, exist_ok=True)
    user_output(click.style("✓", fg="green") + f" Created {MARKER_DIR}/")

    config = ProjectConfig(
        copy=copy_list,
        network=network,
        init=init_list,
        teardown=teardown_list,
        caches=cache_list,
        env_files=env_file_list,
        env_overrides=env_overrides,
    )
    save_project_config(project.config_path, config)
    user_output(click.style("✓", fg="green") + f" Saved {MARKER_DIR}/config.json")

    write_packages_nix(project.marker_dir, cache_list)
    user_output(click.style("✓", fg="green") + f" Wrote {MARKER_DIR}/packages.nix")

    gitignore_line = f"{MARKER_DIR}/{CLONES_DIR}/"
    if add_to_gitignore(project.root, gitignore_line):
        user_output(click.style("✓", fg="green") + f" Added {gitignore_line} to .gitignore")

    user_output("\nReady! Run 'ikagent create <branch>' to create a dev environment.")
