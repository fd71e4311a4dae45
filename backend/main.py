"""
PurdueRide dev-data tool.

Seeds the mock ride backend and inspects it from the terminal. The dataset
is regenerated on every run from --seed, so the same seed always yields
the same users and rides; the session survives between runs in a JSON
file, so `login`, `whoami` and `logout` behave like a browser session.

Examples:
    python main.py users
    python main.py rides --seed 7
    python main.py login test@purdue.edu
    python main.py whoami
    python main.py request "Chauncey Hill" --passengers 2
    python main.py watch <ride-id> --polls 3
"""

import argparse
import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from rich.console import Console
from rich.table import Table

from modules.forms.validators import format_phone_number
from modules.mock_api.fixtures import create_test_user, create_test_users
from modules.mock_api.models import Ride, RideRequestPayload, RideStatus, User
from modules.mock_api.service import MockApiService
from modules.mock_api.simulator import call_api
from modules.mock_api.store import MockDataStore
from modules.notifications.queue import NotificationQueue
from modules.rides.watcher import RideStatusSubscription
from modules.session.exceptions import StorageError
from modules.session.interfaces import ISessionStorage
from modules.session.storage import JsonFileStorage, SupabaseStorage
from modules.session.store import SessionStore
from shared.config import get_settings
from shared.database import get_supabase_client, is_supabase_configured
from shared.log_config import configure_logging

console = Console()

STATUS_STYLES = {
    RideStatus.AVAILABLE: "green",
    RideStatus.IN_PROGRESS: "blue",
    RideStatus.FULL: "yellow",
    RideStatus.COMPLETED: "dim",
    RideStatus.CANCELLED: "red",
}


def build_backend(args: argparse.Namespace) -> tuple[MockDataStore, MockApiService, SessionStore]:
    """Create the seeded store, the API over it and a file-backed session."""
    settings = get_settings()
    store = MockDataStore.seeded(
        users=settings.mock_seed_users,
        rides=settings.mock_seed_rides,
        requests=settings.mock_seed_requests,
        seed=args.seed,
    )
    create_test_user(store)
    if args.test_users:
        create_test_users(store, args.test_users)

    api = MockApiService(
        store,
        error_rate=args.error_rate,
        min_delay_ms=0 if args.fast else None,
        max_delay_ms=0 if args.fast else None,
    )
    session = SessionStore(api, build_storage(args))
    return store, api, session


def build_storage(args: argparse.Namespace) -> ISessionStorage:
    if args.storage == "supabase":
        return SupabaseStorage(get_supabase_client(), get_settings().session_client_id)
    return JsonFileStorage(Path(args.session_file))


def users_table(users: list[User]) -> Table:
    table = Table(title=f"Users ({len(users)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Email", style="cyan")
    table.add_column("Phone")
    table.add_column("Verified")
    for index, user in enumerate(users, start=1):
        table.add_row(
            str(index),
            f"{user.first_name} {user.last_name}",
            user.email,
            format_phone_number(user.phone_number),
            user.is_verified.value,
        )
    return table


def rides_table(rides: list[Ride], title: str = "Rides") -> Table:
    table = Table(title=f"{title} ({len(rides)})")
    table.add_column("ID", style="dim")
    table.add_column("From")
    table.add_column("To")
    table.add_column("When")
    table.add_column("Seats", justify="right")
    table.add_column("Status")
    table.add_column("Driver")
    for ride in rides:
        style = STATUS_STYLES.get(ride.status, "white")
        table.add_row(
            ride.id,
            ride.pickup_location,
            ride.destination,
            ride.scheduled_time.strftime("%a %H:%M"),
            f"{ride.available_seats}/{ride.total_seats}",
            f"[{style}]{ride.status.value}[/{style}]",
            ride.driver_name or "-",
        )
    return table


async def cmd_users(args, store, api, session) -> int:
    console.print(users_table(store.users))
    return 0


async def cmd_rides(args, store, api, session) -> int:
    if args.all:
        console.print(rides_table(store.rides))
        return 0

    response = await call_api(api.get_available_rides())
    if not response.success:
        console.print(f"[red]Error:[/red] {response.error.message}")
        return 1
    console.print(rides_table(response.data.rides, title="Available rides"))
    return 0


async def cmd_requests(args, store, api, session) -> int:
    table = Table(title=f"Ride requests ({len(store.ride_requests)})")
    table.add_column("ID", style="dim")
    table.add_column("User")
    table.add_column("Ride")
    table.add_column("Pickup")
    table.add_column("Passengers", justify="right")
    table.add_column("Status")
    for request in store.ride_requests:
        table.add_row(
            request.id,
            request.user_id,
            request.ride_id,
            request.pickup_location,
            str(request.passenger_count),
            request.status.value,
        )
    console.print(table)
    return 0


async def cmd_login(args, store, api, session) -> int:
    response = await session.login(args.email, args.password)
    if not response.success:
        console.print(f"[red]Login failed:[/red] {session.error} [dim]({response.error.code})[/dim]")
        return 1
    user = session.user
    expires = datetime.fromtimestamp(session.session.expires_at / 1000, tz=timezone.utc)
    console.print(f"[green]Logged in as[/green] {user.first_name} {user.last_name} ({user.email})")
    console.print(f"[dim]Session expires {expires.isoformat(timespec='seconds')}[/dim]")
    return 0


async def cmd_whoami(args, store, api, session) -> int:
    if not await session.restore():
        console.print("[yellow]Not logged in[/yellow]")
        return 1
    user = session.user
    console.print(f"{user.first_name} {user.last_name} [cyan]{user.email}[/cyan] [dim]{user.id}[/dim]")
    return 0


async def cmd_logout(args, store, api, session) -> int:
    await session.restore()
    await session.logout()
    console.print("[green]Logged out[/green]")
    return 0


async def cmd_request(args, store, api, session) -> int:
    if not await session.restore():
        console.print("[red]Error:[/red] Log in first")
        return 1

    payload = RideRequestPayload(
        pickup_location=args.pickup,
        destination=args.destination,
        requested_time=datetime.now(timezone.utc) + timedelta(minutes=args.in_minutes),
        passenger_count=args.passengers,
        ride_id=args.ride,
    )
    response = await call_api(api.request_ride(payload, user_id=session.user.id))
    if not response.success:
        console.print(f"[red]Request failed:[/red] {response.error.message}")
        return 1
    request = response.data
    console.print(
        f"[green]Requested[/green] {request.id} from {request.pickup_location} "
        f"for {request.passenger_count} passenger(s), status {request.status.value}"
    )
    return 0


async def cmd_watch(args, store, api, session) -> int:
    notifications = NotificationQueue()
    subscription = RideStatusSubscription(api, args.ride_id, notifications, interval=args.interval)
    for _ in range(args.polls):
        ride = await subscription.poll_once()
        if ride is None:
            console.print(f"[red]Poll failed:[/red] {subscription.error}")
        else:
            style = STATUS_STYLES.get(ride.status, "white")
            console.print(f"{ride.id}: [{style}]{ride.status.value}[/{style}]")
        for notification in notifications.notifications:
            console.print(f"[bold]{notification.title}:[/bold] {notification.message}")
        notifications.clear_all_notifications()
        await asyncio.sleep(args.interval)
    return 0


COMMANDS = {
    "users": cmd_users,
    "rides": cmd_rides,
    "requests": cmd_requests,
    "login": cmd_login,
    "whoami": cmd_whoami,
    "logout": cmd_logout,
    "request": cmd_request,
    "watch": cmd_watch,
}


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed and inspect the PurdueRide mock backend")
    parser.add_argument("--seed", type=int, default=42, help="Dataset seed (default: 42)")
    parser.add_argument(
        "--error-rate",
        type=float,
        default=0.0,
        help="Simulated failure probability, 0-1 (default: 0)",
    )
    parser.add_argument("--fast", action="store_true", help="Skip simulated latency")
    parser.add_argument("--test-users", type=int, default=0, help="Add test1..testN@purdue.edu")
    parser.add_argument(
        "--session-file",
        default=settings.session_storage_path,
        help="Where the login session is kept",
    )
    parser.add_argument(
        "--storage",
        choices=["file", "supabase"],
        default=settings.session_storage,
        help="Session storage backend (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("users", help="List users")
    rides = sub.add_parser("rides", help="List available rides")
    rides.add_argument("--all", action="store_true", help="Include full, completed and cancelled rides")
    sub.add_parser("requests", help="List ride requests")

    login = sub.add_parser("login", help="Log in and keep the session")
    login.add_argument("email")
    login.add_argument("--password", default="password123", help="Not checked by the mock backend")
    sub.add_parser("whoami", help="Show the stored session user")
    sub.add_parser("logout", help="Clear the stored session")

    request = sub.add_parser("request", help="Request a ride as the logged-in user")
    request.add_argument("pickup")
    request.add_argument("--destination", default="Purdue University")
    request.add_argument("--passengers", type=int, default=1)
    request.add_argument("--in-minutes", type=int, default=15)
    request.add_argument("--ride", help="Ride ID to attach the request to")

    watch = sub.add_parser("watch", help="Poll a ride's status")
    watch.add_argument("ride_id")
    watch.add_argument("--polls", type=int, default=3)
    watch.add_argument("--interval", type=float, default=settings.ride_poll_interval)
    return parser


async def run(args: argparse.Namespace) -> int:
    store, api, session = build_backend(args)
    try:
        return await COMMANDS[args.command](args, store, api, session)
    except StorageError as e:
        console.print(f"[red]Session storage error:[/red] {e.message}")
        return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else get_settings().log_level)
    if not 0.0 <= args.error_rate <= 1.0:
        console.print("[red]Error:[/red] --error-rate must be between 0 and 1")
        return 2
    if args.storage == "supabase" and not is_supabase_configured():
        console.print("[red]Error:[/red] set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY to use --storage supabase")
        return 2
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
