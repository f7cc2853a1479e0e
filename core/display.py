"""Rich terminal rendering for the Index, Auth and Dashboard screens."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from modules.auth.messages import PROVIDER_MESSAGES, Notice
from modules.auth.models import AuthState, Role

console = Console()

FEATURES = [
    ("AI-Powered Matching", "Smart algorithms connect the right developer to every task"),
    ("Trust & Security", "Skill tests, fraud detection, and reputation scoring built in"),
    ("Escrow Payments", "Secure payments held until work is completed and approved"),
]

ROLE_BLURBS = {
    Role.CLIENT: "I need work done",
    Role.DEVELOPER: "I build solutions",
}


def format_role(role: Optional[Role]) -> str:
    """Capitalized role name, or an ellipsis while the profile loads."""
    return role.value.capitalize() if role else "…"


def display_name(state: AuthState, fallback: str = "User") -> str:
    if state.profile and state.profile.full_name:
        return state.profile.full_name
    return fallback


def render_header(app_name: str, state: AuthState) -> None:
    """Print the app bar with the signed-in user on the right."""
    bar = Table.grid(expand=True)
    bar.add_column()
    bar.add_column(justify="right")
    right = ""
    if state.is_authenticated:
        right = f"{display_name(state)} · {format_role(state.role)}"
    bar.add_row(Text(app_name, style="bold"), Text(right, style="dim"))
    console.print(Panel(bar, border_style="blue"))


def render_index(app_name: str, state: AuthState) -> None:
    render_header(app_name, state)
    console.print("[bold]Connect problems to solutions, intelligently[/bold]")
    console.print(
        "[dim]An AI operations manager that understands tasks, matches "
        "developers, ensures trust, and controls quality.[/dim]\n"
    )
    for title, description in FEATURES:
        console.print(f"  [bold cyan]{title}[/bold cyan]: {description}")
    console.print()


def render_auth(app_name: str, tab: str) -> None:
    """Print the auth card heading for the login or signup tab."""
    console.print(f"\n[bold]{app_name}[/bold]  [dim]AI-managed intelligent ticketing[/dim]")
    if tab == "signup":
        console.print("[bold]Create an account[/bold]")
        console.print(f"[dim]Get started with {app_name}[/dim]")
    else:
        console.print("[bold]Welcome back[/bold]")
        console.print("[dim]Enter your credentials to continue[/dim]")


def render_roles() -> None:
    for role in Role:
        console.print(f"  [bold]{role.value}[/bold]: {ROLE_BLURBS[role]}")


def render_dashboard(app_name: str, state: AuthState) -> None:
    render_header(app_name, state)
    console.print(f"[bold]Welcome, {display_name(state, fallback='there')}[/bold]")
    if state.is_loading_profile:
        console.print("[dim]Loading your profile…[/dim]")
    elif state.profile_error is not None:
        console.print("[red]Your profile could not be loaded.[/red]")
        console.print(f"{PROVIDER_MESSAGES[state.profile_error]} Choose refresh to try again.")
    else:
        console.print(
            f"Your {format_role(state.role)} dashboard is being built. "
            "More features coming soon."
        )
    console.print()


def render_loading() -> None:
    console.print("[dim]Loading…[/dim]")


def show_notice(notice: Notice) -> None:
    """Print a toast-style notice."""
    style = "red" if notice.destructive else "green"
    console.print(
        Panel(
            Text(notice.description),
            title=notice.title,
            border_style=style,
        )
    )
