"""
Command-line interface for Catenis Python SDK
Signs requests for diagnostics, calls API endpoints and listens to notifications
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from . import __version__
from .api.endpoints import ENDPOINTS
from .api.models import NotificationEvent
from .client import CatenisClient
from .config.client_config import (
    CompressThreshold,
    DeviceCredentials,
    Env,
    Host,
    Secure,
    UseCompression,
    Version,
)
from .exceptions import CatenisSDKError
from .notification.events import ChannelClosed, ChannelError, ChannelEvent, ChannelNotify, ChannelOpened


EXIT_OK = 0
EXIT_SDK_ERROR = 1
EXIT_USAGE_ERROR = 2


class UsageError(Exception):
    """Invalid command-line input detected after argument parsing"""


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='catenis-cli',
        description='Catenis SDK command-line interface for signing and calling the Catenis API'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Catenis Python SDK {__version__}'
    )
    parser.add_argument('--device-id', default=os.environ.get('CATENIS_DEVICE_ID'),
                        help='Device ID (default: $CATENIS_DEVICE_ID)')
    parser.add_argument('--secret', default=os.environ.get('CATENIS_API_ACCESS_SECRET'),
                        help='API access secret (default: $CATENIS_API_ACCESS_SECRET)')
    parser.add_argument('--host', default=os.environ.get('CATENIS_HOST'),
                        help='API host, as host[:port] (default: $CATENIS_HOST or catenis.io)')
    parser.add_argument('--environment', default=os.environ.get('CATENIS_ENVIRONMENT'),
                        choices=['prod', 'production', 'sandbox'],
                        help='Environment (default: $CATENIS_ENVIRONMENT or prod)')
    parser.add_argument('--insecure', action='store_true', help='Use http/ws instead of https/wss')
    parser.add_argument('--api-version', help='API version, e.g. 0.11')
    parser.add_argument('--no-compression', action='store_true', help='Do not compress request bodies')
    parser.add_argument('--compress-threshold', type=int, help='Minimum body size, in bytes, to compress')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='Increase log verbosity')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_sign_parser(subparsers)
    setup_call_parser(subparsers)
    setup_listen_parser(subparsers)

    return parser


def setup_sign_parser(subparsers):
    """Setup request signing subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Print the signed headers of a request without sending it')
    sign_parser.add_argument('method', help='HTTP method')
    sign_parser.add_argument('path', help='Path relative to the API base, e.g. messages/log')
    sign_parser.add_argument('--param', action='append', default=[], metavar='K=V', help='Path parameter')
    sign_parser.add_argument('--query', action='append', default=[], metavar='K=V', help='Query parameter')
    sign_parser.add_argument('--body', help='JSON body')
    sign_parser.add_argument('--timestamp', help='Sign as of this UTC instant (ISO 8601)')


def setup_call_parser(subparsers):
    """Setup endpoint call subcommand."""
    call_parser = subparsers.add_parser('call', help='Call an API endpoint and print the result')
    call_parser.add_argument('endpoint', choices=sorted(ENDPOINTS), metavar='ENDPOINT', help='Endpoint name')
    call_parser.add_argument('--param', action='append', default=[], metavar='K=V', help='Path parameter')
    call_parser.add_argument('--query', action='append', default=[], metavar='K=V', help='Query parameter')
    call_parser.add_argument('--body', help='JSON body')


def setup_listen_parser(subparsers):
    """Setup notification listening subcommand."""
    listen_parser = subparsers.add_parser('listen', help='Print notifications of an event')
    listen_parser.add_argument('event', help='Notification event name, e.g. new-msg-received')
    listen_parser.add_argument('--timeout', type=float, help='Stop listening after this many seconds')


def parse_pairs(values: List[str]) -> List[Tuple[str, str]]:
    """Parse ``K=V`` arguments, keeping their order."""
    pairs = []
    for value in values:
        key, sep, val = value.partition('=')
        if not sep or not key:
            raise UsageError(f"Expected K=V, got: {value}")
        pairs.append((key, val))
    return pairs


def parse_body(text: Optional[str]) -> Optional[str]:
    """Check that a body argument is JSON; the text itself is sent verbatim."""
    if text is None:
        return None
    try:
        json.loads(text)
    except ValueError as e:
        raise UsageError(f"Invalid JSON body: {e}")
    return text


def parse_timestamp(text: str) -> datetime:
    try:
        instant = datetime.fromisoformat(text.replace('Z', '+00:00'))
    except ValueError as e:
        raise UsageError(f"Invalid timestamp: {e}")
    return instant if instant.tzinfo else instant.replace(tzinfo=timezone.utc)


def build_client(args, clock=None) -> CatenisClient:
    """Create a client from the global options."""
    options = []
    if args.host:
        options.append(Host(args.host))
    if args.environment:
        options.append(Env(args.environment))
    if args.insecure:
        options.append(Secure(False))
    if args.api_version:
        options.append(Version(args.api_version))
    if args.no_compression:
        options.append(UseCompression(False))
    if args.compress_threshold is not None:
        options.append(CompressThreshold(args.compress_threshold))

    credentials = None
    if args.device_id or args.secret:
        credentials = DeviceCredentials(args.device_id or '', args.secret or '')

    return CatenisClient(credentials, *options, clock=clock)


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    return value


def handle_sign_command(args) -> int:
    """Handle request signing command."""
    clock = None
    if args.timestamp:
        instant = parse_timestamp(args.timestamp)
        clock = lambda: instant  # noqa: E731

    with build_client(args, clock) as client:
        request = client.builder.build_request(
            args.method,
            args.path,
            dict(parse_pairs(args.param)),
            parse_pairs(args.query),
            parse_body(args.body)
        )
        client.sign(request)

    print(f"{request.method.value} {request.url}")
    for name, value in request.headers.items():
        print(f"{name}: {value}")
    return EXIT_OK


def handle_call_command(args) -> int:
    """Handle endpoint call command."""
    with build_client(args) as client:
        result = client.call(
            args.endpoint,
            dict(parse_pairs(args.param)),
            parse_pairs(args.query),
            parse_body(args.body)
        )
    print(json.dumps(to_jsonable(result), indent=2, ensure_ascii=False))
    return EXIT_OK


def print_event(event: ChannelEvent) -> None:
    if isinstance(event, ChannelOpened):
        print("# channel open", file=sys.stderr)
    elif isinstance(event, ChannelNotify):
        print(event.payload, flush=True)
    elif isinstance(event, ChannelClosed):
        print(f"# channel closed by server: {event.code} {event.reason}".rstrip(), file=sys.stderr)
    elif isinstance(event, ChannelError):
        print(f"# channel error: {event.error}", file=sys.stderr)


def handle_listen_command(args) -> int:
    """Handle notification listening command."""
    errors: List[ChannelError] = []

    def handler(event: ChannelEvent) -> None:
        if isinstance(event, ChannelError):
            errors.append(event)
        print_event(event)

    with build_client(args) as client:
        with client.notification_channel(NotificationEvent.parse(args.event)) as channel:
            channel.open(handler)
            channel.wait(args.timeout)

    return EXIT_SDK_ERROR if errors else EXIT_OK


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 success, 1 SDK error, 2 usage error)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    handlers: Dict[str, Any] = {
        'sign': handle_sign_command,
        'call': handle_call_command,
        'listen': handle_listen_command,
    }

    if args.command not in handlers:
        parser.print_help()
        return EXIT_USAGE_ERROR

    try:
        return handlers[args.command](args)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except CatenisSDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SDK_ERROR
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
