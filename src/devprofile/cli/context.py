import logging
from typing import Optional

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler

from ..config import COLOR_OFF, DEFAULT_PROFILE, KEYRING_SERVICE, get_profiles_file
from ..profiles import ConfigStore, KeyringSecretStore, Profile, ProfileFields
from ..profiles.profile import SUPPORTED_COLORS

console = Console()

LOG_LEVELS = ("debug", "info", "warning", "error")


class CLIState(BaseModel):
    """options shared by every command."""
    project_name: str = DEFAULT_PROFILE
    config_file: Optional[str] = None
    color: Optional[str] = None


def setup_logging(level: str) -> None:
    if level.lower() not in LOG_LEVELS:
        raise typer.BadParameter(f"log level must be one of: {', '.join(LOG_LEVELS)}")

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def get_state(ctx: typer.Context) -> CLIState:
    if isinstance(ctx.obj, CLIState):
        return ctx.obj
    return CLIState()


def get_profile(
    ctx: typer.Context, fields: Optional[ProfileFields] = None, apply_color: bool = True
) -> Profile:
    """
    build the profile selected on the command line.

    also applies the color setting to the console, so a bad persisted
    color surfaces here. commands that edit fields skip this, so a bad
    color can still be fixed with `config set` or `config unset`.
    """
    state = get_state(ctx)
    store = ConfigStore(get_profiles_file(state.config_file))
    profile = Profile(state.project_name, store, KeyringSecretStore(KEYRING_SERVICE), fields)

    if state.color:
        console.no_color = state.color == COLOR_OFF
    elif apply_color:
        console.no_color = profile.get_color() == COLOR_OFF
    return profile


def validate_color(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in SUPPORTED_COLORS:
        raise typer.BadParameter(f"color must be one of: {', '.join(SUPPORTED_COLORS)}")
    return value
