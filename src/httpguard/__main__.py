"""
=============================================================================
HTTPGUARD CLI ENTRY POINT
=============================================================================

Inspect what the middleware would do without wiring them into an app.

=============================================================================
USAGE
=============================================================================

    # Which renderer answers this Accept header, and what does it produce?
    python -m httpguard negotiate "application/json;q=0.9, text/html"

    # Same, with verbose (debug) error output
    python -m httpguard negotiate "text/plain" --debug

    # Would IpFilter let this address through? Exit code 0 = yes, 1 = no
    python -m httpguard check-ip 10.0.0.13 --range '!10.0.0.13' --range private

=============================================================================
"""

from typing import List, Optional
import argparse
import sys

from . import __version__
from .errors.handler import ErrorHandler
from .http.request import HTTPRequest
from .http.response import ResponseFactory
from .middleware.error_catcher import ErrorCatcher
from .validation.ip import IpValidator, InvalidRangeError


EXIT_ALLOWED = 0
EXIT_DENIED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="httpguard",
        description="Inspect error-rendering negotiation and IP filtering decisions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m httpguard negotiate "text/html, application/json;q=0.9"
  python -m httpguard negotiate "*/*" --debug
  python -m httpguard check-ip 192.168.1.10 --range private
        """
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"httpguard {__version__}"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    # ─────────────────────────────────────────────────────────────────────
    # NEGOTIATE
    # ─────────────────────────────────────────────────────────────────────

    negotiate = commands.add_parser("negotiate", help="Show the renderer chosen for an Accept header")
    negotiate.add_argument("accept", help='Accept header value, e.g. "application/json"')
    negotiate.add_argument(
        "--debug",
        action="store_true",
        help="Render the sample error verbosely"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CHECK-IP
    # ─────────────────────────────────────────────────────────────────────

    check_ip = commands.add_parser("check-ip", help="Check an address against IP ranges")
    check_ip.add_argument("address", help="Client address, e.g. 10.0.0.1 or [::1]")
    check_ip.add_argument(
        "--range", "-r",
        dest="ranges",
        action="append",
        required=True,
        metavar="RANGE",
        help="Allowed range (repeatable): address, CIDR, alias or !negation"
    )

    return parser


def negotiate(accept: str, debug: bool = False) -> int:
    catcher = ErrorCatcher(ResponseFactory(), ErrorHandler(debug=debug))
    request = HTTPRequest(path="/sample", headers={"Accept": accept})

    binding = catcher.registry.negotiate(request.accept)
    if binding is None:
        print("Renderer: none (default error handler)")
    else:
        print(f"Pattern:  {binding.pattern}")
        print(f"Renderer: {binding.key}")

    try:
        raise RuntimeError("Sample error")
    except RuntimeError as error:
        response = catcher.handle_error(error, request)

    print(f"Status:   {response.status_line}")
    print(f"Content-Type: {response.get_header('Content-Type')}")
    print()
    print(response.text)
    return 0


def check_ip(address: str, ranges: List[str]) -> int:
    try:
        validator = IpValidator(ranges)
    except InvalidRangeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if validator(address):
        print("allowed")
        return EXIT_ALLOWED
    print("denied")
    return EXIT_DENIED


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the selected command."""
    args = build_parser().parse_args(argv)

    if args.command == "negotiate":
        return negotiate(args.accept, args.debug)
    return check_ip(args.address, args.ranges)


if __name__ == "__main__":
    sys.exit(main())
