"""jiranote CLI — all commands."""

import logging
from typing import Annotated

import typer
from pydantic import BaseModel, TypeAdapter, ValidationError
from rich import print as rprint
from rich import print_json
from rich.logging import RichHandler
from rich.table import Table

from jiranote.errors import JiraApiError, JiraNotInitializedError
from jiranote.models import JiraModel
from jiranote.plugin import JiraNotePlugin
from jiranote import settings as config
from jiranote.settings import JiraSettings, _list_profiles, _load_toml, get_settings, resolve_profile, save_profile

app = typer.Typer(help="jiranote: search and import Jira Cloud issues into notes", no_args_is_help=True)

ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-P", help="Profile name from ~/.config/jiranote/config.toml"),
]

DEFAULT_PROFILE_NAME = "default"

# Settings editable through `jiranote set`.
EDITABLE_SETTINGS = ("host", "username", "api_key", "render_to_markdown", "issue_yaml_key", "include_all")
_BOOL_SETTINGS = ("render_to_markdown", "include_all")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP requests and API responses")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Plugin factory
# ---------------------------------------------------------------------------


def get_plugin(profile: str | None = None) -> JiraNotePlugin:
    return JiraNotePlugin(get_settings(profile=profile))


def _print_model(model: BaseModel, include_all: bool) -> None:
    if include_all or not isinstance(model, JiraModel):
        print_json(data=model.model_dump(mode="json", by_alias=True))
    else:
        print_json(data=model.declared())


def _pick(plugin: JiraNotePlugin, pick, *args):
    """Run a picker, turning failures into a red message and exit code 1."""
    try:
        selection = pick(*args)
    except JiraNotInitializedError:
        rprint("[red]Jira is not configured. Run 'jiranote configure' first.[/red]")
        raise typer.Exit(1)
    except JiraApiError as exc:
        rprint(f"[red]Jira request failed: {exc}[/red]")
        raise typer.Exit(1)
    if selection is None:
        # Cancelled: nothing to print, non-zero so shell substitutions can tell.
        raise typer.Exit(1)
    _print_model(selection, plugin.settings.include_all)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("verify")
def verify(profile: ProfileOpt = None) -> None:
    """Check that the configured Jira instance is reachable and accepts the credentials."""
    plugin = get_plugin(profile)
    try:
        plugin.api.verify_connection()
    except JiraApiError:
        raise typer.Exit(1)


@app.command("pick-issue")
def pick_issue(profile: ProfileOpt = None) -> None:
    """Search for an issue and print its full record."""
    plugin = get_plugin(profile)
    _pick(plugin, plugin.api.get_issue)


@app.command("pick-project")
def pick_project(profile: ProfileOpt = None) -> None:
    """Choose one of the projects you can access."""
    plugin = get_plugin(profile)
    _pick(plugin, plugin.api.get_project)


@app.command("pick-issue-type")
def pick_issue_type(
    profile: ProfileOpt = None,
    project_id: Annotated[
        int | None,
        typer.Option("--project-id", help="Only offer the issue types of this project"),
    ] = None,
) -> None:
    """Choose an issue type, optionally limited to one project."""
    plugin = get_plugin(profile)
    _pick(plugin, plugin.api.get_issue_type, project_id)


@app.command("config-show")
def config_show(profile: ProfileOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings(profile=profile)

    def mask(val: str | None) -> str:
        if not val:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"...{val[-5:]}"

    def show(val: str) -> str:
        return val or "[dim](not set)[/dim]"

    table = Table(title="jiranote Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("profile", show(resolve_profile(profile) or ""))
    table.add_row("host", show(settings.host))
    table.add_row("username", show(settings.username))
    table.add_row("api_key", mask(settings.api_key.get_secret_value() if settings.api_key else None))
    table.add_row("render_to_markdown", str(settings.render_to_markdown))
    table.add_row("issue_yaml_key", settings.issue_yaml_key)
    table.add_row("include_all", str(settings.include_all))
    table.add_row("configured", "[green]yes[/green]" if settings.is_configured else "[yellow]no[/yellow]")

    rprint(table)


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help=f"One of: {', '.join(EDITABLE_SETTINGS)}")],
    value: Annotated[str, typer.Argument(help="New value")],
    profile: ProfileOpt = None,
) -> None:
    """Change a single setting in the active profile."""
    if key not in EDITABLE_SETTINGS:
        rprint(f"[red]Unknown setting '{key}'. Valid: {', '.join(EDITABLE_SETTINGS)}[/red]")
        raise typer.Exit(1)

    parsed: str | bool = value
    if key in _BOOL_SETTINGS:
        try:
            parsed = TypeAdapter(bool).validate_python(value)
        except ValidationError:
            rprint(f"[red]'{value}' is not a boolean. Use true or false.[/red]")
            raise typer.Exit(1)
    elif key == "issue_yaml_key" and not value.strip():
        parsed = JiraSettings.model_fields["issue_yaml_key"].default

    target = resolve_profile(profile) or DEFAULT_PROFILE_NAME
    save_profile(target, {key: parsed})
    shown = "***" if key == "api_key" else parsed
    rprint(f"[green]✓[/green] {key} = {shown} in profile '{target}'")


@app.command("set-default")
def set_default(
    profile: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default profile in ~/.config/jiranote/config.toml."""
    if config.CONFIG_PATH.exists():
        profiles = _list_profiles(_load_toml())
        if profile not in profiles:
            rprint(
                f"[red]Profile '{profile}' not found in {config.CONFIG_PATH}. "
                f"Available: {profiles or '(none)'}[/red]"
            )
            raise typer.Exit(1)
    save_profile(profile, {}, make_default=True)
    rprint(f'[green]✓[/green] Default profile set to "{profile}" in {config.CONFIG_PATH}')


@app.command("configure")
def configure(profile: ProfileOpt = None) -> None:
    """Interactive connection and output setup."""
    target = resolve_profile(profile) or DEFAULT_PROFILE_NAME
    profiles = _list_profiles(_load_toml())
    current = get_settings(profile=target) if target in profiles else JiraSettings()

    rprint(f"[bold]jiranote setup[/bold] (profile '{target}')")
    rprint("")

    host = typer.prompt("Host (e.g. https://my-company.atlassian.net)", default=current.host or None).strip()
    username = typer.prompt("Username (e.g. myname@my-company.com)", default=current.username or None).strip()
    rprint("Create an API key at: https://id.atlassian.com/manage-profile/security/api-tokens")
    api_key = typer.prompt(
        "API key (leave blank to keep the current one)" if current.api_key else "API key",
        default="" if current.api_key else None,
        hide_input=True,
        show_default=False,
    ).strip()

    render_to_markdown = typer.confirm("Render HTML content to markdown?", default=current.render_to_markdown)
    issue_yaml_key = typer.prompt("YAML frontmatter issue key", default=current.issue_yaml_key).strip()
    include_all = typer.confirm("Include full API response in YAML frontmatter?", default=current.include_all)

    values: dict = {
        "host": host,
        "username": username,
        "render_to_markdown": render_to_markdown,
        "issue_yaml_key": issue_yaml_key or JiraSettings.model_fields["issue_yaml_key"].default,
        "include_all": include_all,
    }
    if api_key:
        values["api_key"] = api_key

    save_profile(target, values, make_default=not profiles)
    rprint(f"[green]✓[/green] Profile '{target}' written to {config.CONFIG_PATH}")

    if typer.confirm("Verify the connection now?", default=True):
        plugin = JiraNotePlugin(current)
        plugin.update_settings(**values)
        try:
            plugin.api.verify_connection()
        except JiraApiError:
            raise typer.Exit(1)
