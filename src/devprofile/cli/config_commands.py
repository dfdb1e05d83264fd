import typer
from rich.table import Table

from ..domain.errors import DevProfileError
from .context import console, get_profile

app = typer.Typer()


@app.command("list")
def list_config(ctx: typer.Context):
    """show the fields stored for the profile. live mode keys are redacted."""
    try:
        profile = get_profile(ctx)
        settings = profile.settings()
    except DevProfileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not settings:
        console.print(f"[yellow]Nothing stored for profile '{profile.name}'.[/yellow]")
        console.print("\nConfigure it with: [cyan]devprofile login[/cyan]")
        return

    table = Table(title=f"Profile: {profile.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    for field, value in sorted(settings.items()):
        table.add_row(field, str(value))

    console.print(table)


@app.command("get")
def get_field(ctx: typer.Context, field: str):
    """print one stored field of the profile."""
    try:
        profile = get_profile(ctx)
        profile.config.read_in_config()
        key = profile.get_config_field(field)
        if not profile.config.is_set(key):
            console.print(f"[red]Error:[/red] {key} is not set")
            raise typer.Exit(1)
        console.print(profile.config.get_string(key), highlight=False, markup=False)
    except DevProfileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("set")
def set_field(ctx: typer.Context, field: str, value: str):
    """set one field of the profile."""
    try:
        profile = get_profile(ctx, apply_color=False)
        profile.write_config_field(field, value)
    except DevProfileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Set {profile.get_config_field(field)}")


@app.command("unset")
def unset_field(ctx: typer.Context, field: str):
    """
    delete one field of the profile.

    this only touches the config file; live mode keys kept in the keyring
    stay there until `devprofile logout`.
    """
    try:
        profile = get_profile(ctx, apply_color=False)
        profile.delete_config_field(field)
    except DevProfileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Removed {profile.get_config_field(field)}")


if __name__ == "__main__":
    app()
