from __future__ import annotations

import argparse
import sys
from typing import Sequence

from dnicheck.config import get_settings
from dnicheck.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dnicheck", description="ID-number identity verification")
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the verification API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    verify_parser = subparsers.add_parser("verify", help="Verify asserted identity data")
    verify_parser.add_argument("--dni", help="8-digit ID number")
    verify_parser.add_argument("--given-name", help="Given name(s)")
    verify_parser.add_argument("--surname", help="Surname(s)")
    verify_parser.add_argument("--digit", help="Optional verification digit")
    verify_parser.add_argument(
        "--local", action="store_true", help="Run the lookup in-process instead of calling the API"
    )
    verify_parser.add_argument(
        "--no-input", action="store_true", help="Never prompt; fail on missing fields"
    )

    lookup_parser = subparsers.add_parser("lookup", help="Show resolved identity and directory result")
    lookup_parser.add_argument("--dni", required=True, help="8-digit ID number")

    subparsers.add_parser("providers", help="List registered identity providers")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("dnicheck.api.main:app", host=args.host, port=args.port)
        return

    if args.command == "verify":
        from dnicheck.cli.verify import verify_command

        sys.exit(
            verify_command(
                args.dni,
                args.given_name,
                args.surname,
                args.digit,
                local=args.local,
                interactive=False if args.no_input else None,
                settings=settings,
            )
        )

    if args.command == "lookup":
        from dnicheck.cli.verify import lookup_command

        sys.exit(lookup_command(args.dni, settings=settings))

    if args.command == "providers":
        from dnicheck.cli.verify import providers_command

        sys.exit(providers_command(settings))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
