"""CLI for gcal-agenda.

Usage:
    gcal-agenda                      # Show the next ten events (authorizing if needed)
    gcal-agenda agenda --width 60    # Same, with an explicit box width
    gcal-agenda login                # Interactive OAuth login
    gcal-agenda status               # Show OAuth token status
    gcal-agenda revoke               # Revoke OAuth token and delete token.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from typing import TextIO

from gcal_agenda.config import AgendaConfig
from gcal_agenda.exceptions import AgendaError

logger = logging.getLogger(__name__)


def show_agenda(
    config: AgendaConfig,
    width: int | None = None,
    input_provider: Callable[[str], str] | None = None,
    stream: TextIO | None = None,
) -> int:
    """Authorize, fetch upcoming events and print them as a box."""
    from gcal_agenda.calendar import Terminal, fetch_upcoming_events, render_events
    from gcal_agenda.google import GoogleOAuth

    stream = stream or sys.stdout
    terminal = Terminal(width=width) if width is not None else Terminal.detect(stream)

    auth = GoogleOAuth(
        config,
        input_provider=input_provider,
        output=lambda msg: print(msg, file=stream),
    )
    service = auth.ensure_authorized_client()

    events = fetch_upcoming_events(service)
    print(render_events(events, terminal), file=stream)
    return 0


def google_login(
    config: AgendaConfig,
    input_provider: Callable[[str], str] | None = None,
) -> int:
    """Interactive Google OAuth login."""
    from gcal_agenda.google import GoogleOAuth

    print("=" * 60)
    print("GCAL-AGENDA GOOGLE LOGIN")
    print("=" * 60)

    auth = GoogleOAuth(config, input_provider=input_provider)
    print(f"\nScopes: {', '.join(auth.required_scopes)}\n")

    auth.authorize()
    print("\nToken saved successfully!")
    return google_status(config)


def google_status(config: AgendaConfig) -> int:
    """Show Google OAuth token status."""
    from gcal_agenda.google import GoogleOAuth

    status = config.status()
    print(f"Config dir : {status['config_dir']}")
    print(f"Credentials: {'found' if status['credentials'] else 'missing'}")

    auth = GoogleOAuth(config)
    info = auth.get_token_info()

    if info["status"] == "no_token":
        print("No token found - run 'gcal-agenda login'")
        return 1

    print(f"Status     : {info['status']}")
    print(f"Scopes     : {', '.join(info.get('scopes', []))}")
    print(f"Expires in : {info.get('expires_in', 'unknown')}")
    print(f"Refresh    : {'yes' if info.get('has_refresh_token') else 'no'}")
    return 0


def google_revoke(config: AgendaConfig) -> int:
    """Revoke Google OAuth token."""
    from gcal_agenda.google import GoogleOAuth

    auth = GoogleOAuth(config)
    auth.revoke_token()
    print("Token revoked and local cache cleared")
    return 0


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="gcal-agenda",
        description="Show the next ten Google Calendar events in a terminal box",
    )
    parser.add_argument(
        "--config-dir",
        type=str,
        default=None,
        help="Directory holding credentials.json and token.json (default: ~/.config/calendar)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    agenda_parser = subparsers.add_parser("agenda", help="Show upcoming events (default)")
    agenda_parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Box width in characters (default: terminal width)",
    )

    subparsers.add_parser("login", help="Interactive OAuth login")
    subparsers.add_parser("status", help="Show token status")
    subparsers.add_parser("revoke", help="Revoke token")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    config = AgendaConfig.from_env(config_dir=args.config_dir)
    logger.debug(f"Using config dir {config.config_dir}")

    try:
        if args.command in (None, "agenda"):
            return show_agenda(config, width=getattr(args, "width", None))
        if args.command == "login":
            return google_login(config)
        if args.command == "status":
            return google_status(config)
        if args.command == "revoke":
            return google_revoke(config)
    except AgendaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nAborted", file=sys.stderr)
        return 130

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
