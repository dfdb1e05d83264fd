import functools
import socket
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional

import typer

from ..config import DEFAULT_PROFILE
from ..domain.errors import DevProfileError
from ..profiles import Mode, ProfileFields
from ..validators import is_live_mode_key, validate_api_key
from .config_commands import app as config_app
from .context import CLIState, console, get_profile, setup_logging, validate_color

app = typer.Typer()

app.add_typer(config_app, name="config", help="Manage the fields stored for a profile")

FEEDBACK_URL = "https://stripe.com/docs/dev-tools-csat"
ISSUES_URL = "https://github.com/stripe/stripe-cli/issues"

BANNER = r"""
     _        _
 ___| |_ _ __(_)_ __   ___
/ __| __| '__| | '_ \ / _ \
\__ \ |_| |  | | |_) |  __/
|___/\__|_|  |_| .__/ \___|
               |_|
"""


@app.callback()
def main_callback(
    ctx: typer.Context,
    project_name: str = typer.Option(DEFAULT_PROFILE, "--project-name", "-p", help="the profile to use"),
    config: Optional[str] = typer.Option(None, "--config", help="path to the profiles file"),
    color: Optional[str] = typer.Option(
        None, "--color", callback=validate_color, help="turn color output on, off or auto"
    ),
    log_level: str = typer.Option("warning", "--log-level", help="debug, info, warning or error"),
):
    """manage developer credentials stored per profile."""
    setup_logging(log_level)
    ctx.obj = CLIState(project_name=project_name, config_file=config, color=color)


@app.command()
def feedback():
    """provide us with feedback on the CLI."""
    console.print(BANNER, highlight=False, markup=False)
    console.print("We'd love to know what you think of the CLI:\n")
    console.print(f"* Report bugs or issues on GitHub: {ISSUES_URL}")
    console.print(f"* Leave us feedback on how you're using it or features you'd like to see: {FEEDBACK_URL}")


@app.command()
def serve(
    directory: Path = typer.Argument(Path("."), help="directory to serve"),
    port: int = typer.Option(4242, "--port", help="port to serve content from"),
):
    """serve static files locally."""
    absolute_dir = directory.resolve()
    if not absolute_dir.is_dir():
        console.print(f"[red]Error:[/red] {absolute_dir} is not a directory")
        raise typer.Exit(1)

    console.print(f"Starting server for directory {absolute_dir}")
    console.print(f"At address http://localhost:{port}")

    handler = functools.partial(SimpleHTTPRequestHandler, directory=str(absolute_dir))
    try:
        with ThreadingHTTPServer(("", port), handler) as server:
            server.serve_forever()
    except KeyboardInterrupt:
        console.print("\nStopped")
    except OSError as e:
        console.print(f"[red]Error:[/red] could not serve on port {port}: {e}")
        raise typer.Exit(1)


@app.command()
def login(
    ctx: typer.Context,
    api_key: str = typer.Option(..., "--api-key", prompt="API key", hide_input=True, help="secret or restricted key"),
    publishable_key: Optional[str] = typer.Option(None, "--publishable-key", help="matching publishable key"),
    device_name: Optional[str] = typer.Option(None, "--device-name", help="name for this machine"),
    display_name: Optional[str] = typer.Option(None, "--display-name", help="account display name"),
    account_id: Optional[str] = typer.Option(None, "--account-id", help="account ID"),
):
    """store an API key for the profile."""
    try:
        validate_api_key(api_key.strip())
    except DevProfileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    mode = Mode.from_livemode(is_live_mode_key(api_key.strip()))
    fields = ProfileFields(
        device_name=device_name or socket.gethostname(),
        display_name=display_name,
        account_id=account_id,
        **{
            mode.api_key_name: api_key,
            mode.publishable_key_name: publishable_key,
        },
    )

    try:
        profile = get_profile(ctx, fields)
        result = profile.create_profile()
    except DevProfileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Configured profile '{profile.name}' with a {mode.value} mode key")
    console.print(f"[dim]Saved to {result.config_file}[/dim]")
    for key, reason in result.cleanup.failed.items():
        console.print(f"[dim]Could not remove legacy field {key}: {reason}[/dim]")


@app.command()
def logout(ctx: typer.Context):
    """remove the profile's fields and keyring entries."""
    try:
        profile = get_profile(ctx)
        profile.remove_profile()
    except DevProfileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Logged out of profile '{profile.name}'")


if __name__ == "__main__":
    app()
