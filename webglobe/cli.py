"""
Main CLI Entry Point
Command-line interface for the Webglobe registrar API
"""

import sys
import json
import argparse
from typing import Dict, List, Optional

from pydantic import ValidationError

from webglobe.api import ConfigurationError, ENDPOINTS, WebglobeClient, WebglobeError
from webglobe.utils.config import get_settings
from webglobe.utils.logger import get_logger, set_level

logger = get_logger(__name__)


def _connect() -> WebglobeClient:
    try:
        settings = get_settings()
    except (FileNotFoundError, ValidationError) as e:
        raise ConfigurationError(f"Invalid configuration: {str(e)}") from e
    set_level(settings.log_level)
    return WebglobeClient.from_settings(settings)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _parse_params(pairs: List[str]) -> Dict[str, str]:
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid parameter '{pair}', expected key=value")
        params[key] = value
    return params


def cmd_endpoints(args):
    """List the endpoint catalogue"""
    for name in sorted(ENDPOINTS):
        endpoint = ENDPOINTS[name]
        print(f"{name:<26} {endpoint.method:<6} {endpoint.path}")


def cmd_balance(args):
    """Print the account balance"""
    try:
        client = _connect()
        print(client.get_balance())
    except WebglobeError as e:
        logger.error(f"❌ Balance lookup failed: {str(e)}")
        sys.exit(1)


def cmd_check_domain(args):
    """Quick availability check"""
    try:
        client = _connect()
        client.check_domain_das(args.domain)
        _print_json(client.get_response())
    except WebglobeError as e:
        logger.error(f"❌ Domain check failed: {str(e)}")
        sys.exit(1)


def cmd_call(args):
    """Invoke any catalogue endpoint"""
    try:
        path_params = _parse_params(args.param or [])
        payload = json.loads(args.payload) if args.payload else None
    except ValueError as e:
        logger.error(f"❌ Invalid arguments: {str(e)}")
        sys.exit(1)

    try:
        client = _connect()
        client.invoke(args.endpoint, payload, **path_params)
        _print_json(client.get_response())
    except WebglobeError as e:
        logger.error(f"❌ {args.endpoint} failed: {str(e)}")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webglobe",
        description="Webglobe registrar API client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List available endpoints
  webglobe endpoints

  # Show account balance
  webglobe balance

  # Quick domain availability check
  webglobe check-domain example.cz

  # Call any endpoint
  webglobe call domain_info_by_name -p domain=example.cz
  webglobe call list_of_registrants --payload '{"tld": "cz"}'
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    endpoints_parser = subparsers.add_parser("endpoints", help="List API endpoints")
    endpoints_parser.set_defaults(func=cmd_endpoints)

    balance_parser = subparsers.add_parser("balance", help="Show account balance")
    balance_parser.set_defaults(func=cmd_balance)

    check_parser = subparsers.add_parser("check-domain", help="Quick domain availability check")
    check_parser.add_argument("domain", help="Domain name")
    check_parser.set_defaults(func=cmd_check_domain)

    call_parser = subparsers.add_parser("call", help="Call an API endpoint")
    call_parser.add_argument("endpoint", choices=sorted(ENDPOINTS), help="Endpoint name")
    call_parser.add_argument("-p", "--param", action="append", help="Path parameter as key=value (repeatable)")
    call_parser.add_argument("--payload", help="Payload as JSON string")
    call_parser.set_defaults(func=cmd_call)

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()
