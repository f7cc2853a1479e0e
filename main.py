"""
Ticket AI - terminal client for the session layer.

Walks the same screens as the web app (Index, Auth, Dashboard). Which
screen renders is decided by the route guard from the current session
state, so a restored session skips the login screen and signing out
lands back on it.
"""

import argparse
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from rich.prompt import Prompt

from core import display
from core.container import get_container
from core.display import console
from modules.auth.exceptions import ValidationFailedError
from modules.auth.messages import (
    sign_in_notice,
    sign_out_notice,
    sign_up_notice,
    validation_notice,
)
from modules.auth.session import SessionManager
from modules.auth.validation import validate_login, validate_registration
from modules.navigation.models import GuardAction
from shared.config import Settings, get_settings
from shared.logging import configure_logging

logger = logging.getLogger(__name__)

# A screen returns the next path, or None to quit
Screen = Callable[[SessionManager, Settings], Awaitable[Optional[str]]]


async def ask(prompt: str, **kwargs) -> str:
    """Prompt without blocking the event loop (push events keep flowing)."""
    return await asyncio.to_thread(Prompt.ask, prompt, **kwargs)


async def index_screen(sessions: SessionManager, settings: Settings) -> Optional[str]:
    display.render_index(settings.app_name, sessions.state)
    if sessions.state.is_authenticated:
        choice = await ask("Open dashboard (d) or quit (q)", choices=["d", "q"], default="d")
        return settings.landing_route if choice == "d" else None

    choice = await ask("Log in (l), get started (g) or quit (q)", choices=["l", "g", "q"], default="l")
    return None if choice == "q" else settings.auth_route


async def login(sessions: SessionManager, settings: Settings) -> Optional[str]:
    email = await ask("Email")
    password = await ask("Password", password=True)
    try:
        credentials = validate_login({"email": email, "password": password})
    except ValidationFailedError as e:
        display.show_notice(validation_notice(e))
        return settings.auth_route

    with console.status("Signing in…"):
        result = await sessions.sign_in(credentials.email, credentials.password)

    notice = sign_in_notice(result)
    if notice is not None:
        display.show_notice(notice)
        return settings.auth_route
    return settings.landing_route


async def signup(sessions: SessionManager, settings: Settings) -> Optional[str]:
    full_name = await ask("Full Name")
    email = await ask("Email")
    password = await ask("Password (min 6 characters)", password=True)
    display.render_roles()
    role = await ask("I am a…", choices=["client", "developer"], default="client")
    try:
        request = validate_registration(
            {"email": email, "password": password, "full_name": full_name, "role": role}
        )
    except ValidationFailedError as e:
        display.show_notice(validation_notice(e))
        return settings.auth_route

    with console.status("Creating account…"):
        result = await sessions.sign_up(
            request.email, request.password, request.full_name, request.role
        )

    notice = sign_up_notice(result)
    if notice is not None:
        display.show_notice(notice)
        return settings.auth_route
    return settings.landing_route


async def auth_screen(sessions: SessionManager, settings: Settings) -> Optional[str]:
    tab = await ask("Log in or sign up", choices=["login", "signup", "back"], default="login")
    if tab == "back":
        return "/"
    display.render_auth(settings.app_name, tab)
    if tab == "signup":
        return await signup(sessions, settings)
    return await login(sessions, settings)


async def dashboard_screen(sessions: SessionManager, settings: Settings) -> Optional[str]:
    display.render_dashboard(settings.app_name, sessions.state)
    choice = await ask(
        "Refresh (r), home (h), sign out (o) or quit (q)",
        choices=["r", "h", "o", "q"],
        default="r",
    )
    if choice == "q":
        return None
    if choice == "r" and sessions.state.profile_error is not None:
        with console.status("Loading your profile…"):
            await sessions.refresh_profile()
    if choice == "h":
        return "/"
    if choice == "o":
        notice = sign_out_notice(await sessions.sign_out())
        if notice is not None:
            display.show_notice(notice)
    # The guard sends a signed-out user on to the auth screen
    return settings.landing_route


async def not_found_screen(sessions: SessionManager, settings: Settings) -> Optional[str]:
    console.print("[yellow]Page not found[/yellow]")
    return "/"


async def run(settings: Settings, start_path: str = "/") -> None:
    """Run the screen loop until the user quits."""
    container = get_container()
    sessions = await container.session_manager()
    guard = container.route_guard

    screens: dict[str, Screen] = {
        "/": index_screen,
        settings.auth_route: auth_screen,
        settings.landing_route: dashboard_screen,
    }

    path: Optional[str] = start_path
    async with sessions:
        while path is not None:
            decision = guard.check(sessions.state, path)
            if decision.action == GuardAction.REDIRECT:
                logger.debug("Redirect %s -> %s (%s)", path, decision.target, decision.history.value)
                path = decision.target
                continue
            if decision.action == GuardAction.LOADING:
                display.render_loading()
                before = sessions.state
                await sessions.wait_for_profile()
                if sessions.state == before:
                    console.print("[red]Your profile could not be loaded.[/red]")
                    path = "/"
                continue

            screen = screens.get(path, not_found_screen)
            path = await screen(sessions, settings)

    console.print("\n[bold green]Bye![/bold green]")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Terminal client for Ticket AI sign-in and sessions"
    )
    parser.add_argument(
        "--path", "-p",
        default="/",
        help="Screen to open first (default: /)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging("DEBUG" if args.debug or settings.debug else settings.log_level)

    try:
        asyncio.run(run(settings, args.path))
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        console.print()
