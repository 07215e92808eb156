"""
Eero CLI - Command-line interface for the eero cloud API.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- Loading and saving the session token
- TTY detection for human vs machine output
- JSON output for piping/automation
"""

import argparse
import json
import sys
from typing import Any

from dotenv import load_dotenv

from eero_cli.core.errors import CLIError, MalformedNetworkReference, NoSessionFound
from eero_cli.core.logging import get_logger, setup_logging
from eero_cli.core.session import SessionStore
from eero_cli.core.types import Device, Network
from eero_cli.sdk import EeroClient

logger = get_logger(__name__)

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: CLIError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def prompt(message: str) -> str:
    """Ask for a line of input on the terminal."""
    print(message)
    return input().strip()


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_auth(client: EeroClient, store: SessionStore, _args: argparse.Namespace) -> None:
    """Log in with a one-time code and save the session."""
    try:
        identifier = prompt("Step 1: Enter eero login ID (phone or email address)").lower()
        attempt = client.auth.login(identifier)

        code = prompt("Step 2: Enter the code sent by email or SMS")
        token = client.auth.verify(attempt.user_token, code)

        store.save(token)
        print(f"Authentication successful. Session saved to {store.path}")
    except EOFError:
        error_output(CLIError("Input closed before login finished"))
    except CLIError as e:
        error_output(e)


def cmd_account(client: EeroClient, _store: SessionStore, _args: argparse.Namespace) -> None:
    """Show account information."""
    try:
        account = client.account.get()
        json_output(account.to_dict(), pretty=True)
    except CLIError as e:
        error_output(e)


def _network_label(network: Network) -> str:
    try:
        return network.network_id
    except MalformedNetworkReference:
        return network.url or "?"


def cmd_networks(client: EeroClient, _store: SessionStore, _args: argparse.Namespace) -> None:
    """List networks on the account."""
    try:
        networks = client.networks.list()

        if is_tty():
            if not networks:
                print("No networks found.")
                return

            table_output(
                ["ID", "Name", "Created"],
                [[_network_label(n), n.name or "", n.created or ""] for n in networks],
                [24, 32, 28],
            )
        else:
            success_output({"data": [n.to_dict() for n in networks]})
    except CLIError as e:
        error_output(e)


def _device_flags(device: Device) -> str:
    flags = {"guest": device.is_guest, "paused": device.paused, "blocked": device.blacklisted}
    return " ".join(name for name, on in flags.items() if on)


def _device_rows(devices: list[Device]) -> list[list[str]]:
    return [
        [
            d.name,
            d.ip or "",
            d.mac or "",
            "yes" if d.connected else "no",
            "wifi" if d.wireless else "wired",
            _device_flags(d),
        ]
        for d in devices
    ]


def cmd_devices(client: EeroClient, _store: SessionStore, args: argparse.Namespace) -> None:
    """List devices across all networks."""
    try:
        if args.keep_going:
            scan = client.devices.scan()
            devices = scan.devices
        else:
            scan = None
            devices = client.devices.list()

        if is_tty():
            if devices:
                table_output(
                    ["Name", "IP", "MAC", "Online", "Link", "Flags"],
                    _device_rows(devices),
                    [30, 15, 17, 6, 5, 20],
                )
            else:
                print("No devices found.")
            if scan and scan.errors:
                print(f"\n{len(scan.errors)} network(s) failed:")
                for url, error in scan.errors.items():
                    print(f"  {url}: {error}")
        elif scan is not None:
            success_output(scan.to_dict())
        else:
            success_output({"data": [d.to_dict() for d in devices]})

        if scan and scan.errors:
            sys.exit(1)
    except CLIError as e:
        error_output(e)


def cmd_session(client: EeroClient, _store: SessionStore, _args: argparse.Namespace) -> None:
    """Print the stored session token."""
    print(f"User token: {client.session_token}")


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="eero",
        description="Eero CLI - Unofficial command-line interface for eero networks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  TTY (human):  Pretty tables
  Pipe:         JSON

Examples:
  eero auth
  eero networks
  eero devices | jq '.data[].mac'
  eero -s ~/eero.session account
""",
    )
    parser.add_argument(
        "--session-file",
        "-s",
        help="Load/save the session from FILE (overrides EERO_SESSION_FILE)",
    )
    parser.add_argument("--base-url", help="API base URL (overrides EERO_BASE_URL)")
    parser.add_argument("--timeout", type=int, help="Request timeout in seconds (overrides EERO_TIMEOUT)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    auth = subparsers.add_parser("auth", help="Authenticate with the eero platform")
    auth.set_defaults(func=cmd_auth)

    account = subparsers.add_parser("account", help="Show account information")
    account.set_defaults(func=cmd_account)

    networks = subparsers.add_parser("networks", help="List networks")
    networks.set_defaults(func=cmd_networks)

    devices = subparsers.add_parser("devices", help="List devices on all networks")
    devices.add_argument(
        "--keep-going",
        "-k",
        action="store_true",
        help="Report networks that fail instead of stopping at the first one",
    )
    devices.set_defaults(func=cmd_devices)

    session = subparsers.add_parser("session", help="Print the stored session token")
    session.set_defaults(func=cmd_session)

    return parser


def main() -> None:
    """Main CLI entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    setup_logging(args.verbose)

    try:
        store = SessionStore(args.session_file)
        logger.debug("Using session file %s", store.path)

        # auth creates the session; every other command needs it
        token = None
        if args.command != "auth":
            try:
                token = store.load()
            except NoSessionFound as e:
                print(f"WARNING: {e.message}", file=sys.stderr)
                raise

        client = EeroClient(session_token=token, base_url=args.base_url, timeout=args.timeout)
    except CLIError as e:
        error_output(e)
        return

    args.func(client, store, args)


if __name__ == "__main__":
    main()
