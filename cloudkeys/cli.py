"""Cloudkeys CLI: Barbican secret operations from the command line.

Usage examples::

    cloudkeys -c '{"cloud":"mycloud"}' get-secret --name lb-cert
    cloudkeys -c '{"cloud":"mycloud"}' ensure-secret --name lb-cert \\
        --type application/x-pkcs12 --payload-file cert.p12
    cloudkeys -c '{"cloud":"mycloud"}' --timeout 60 delete-secrets --part-name lb-7f3a
    cloudkeys parse-secret-id https://barbican:9311/v1/secrets/abc123

Connection settings not given in ``--config`` are read from the ``OS_*``
environment variables.
"""

from __future__ import annotations

import argparse
import base64
import json
import sys
from pathlib import Path
from typing import Any

from cloudkeys.base.context import RequestContext
from cloudkeys.base.references import parse_secret_id


def _add_payload_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", "-n", required=True, help="Secret name")
    parser.add_argument(
        "--type", "-t",
        dest="secret_type",
        required=True,
        help="Payload content type (e.g. application/octet-stream)",
    )
    payload = parser.add_mutually_exclusive_group(required=True)
    payload.add_argument("--payload", help="Base64-encoded payload")
    payload.add_argument(
        "--payload-file",
        type=Path,
        help="File whose raw content is base64-encoded and stored",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``cloudkeys`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="cloudkeys",
        description="OpenStack Barbican secret helpers",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON OpenStack config (e.g. \'{"cloud":"mycloud"}\')',
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    ensure = commands.add_parser("ensure-secret", help="Return a secret ref, creating it if absent")
    _add_payload_args(ensure)

    create = commands.add_parser("create-secret", help="Create a secret")
    _add_payload_args(create)

    get = commands.add_parser("get-secret", help="Show the secret with this exact name")
    get.add_argument("--name", "-n", required=True, help="Secret name")

    delete = commands.add_parser(
        "delete-secrets", help="Delete opaque secrets whose name contains a substring"
    )
    delete.add_argument("--part-name", "-n", required=True, help="Case-sensitive substring")

    parse = commands.add_parser("parse-secret-id", help="Print the ID of a secret ref")
    parse.add_argument("ref", help="Secret reference URL")
    return parser


def _payload(ns: argparse.Namespace) -> str:
    if ns.payload_file is not None:
        return base64.b64encode(ns.payload_file.read_bytes()).decode()
    return ns.payload


def _run(svc: Any, ns: argparse.Namespace, ctx: RequestContext) -> Any:
    if ns.command == "ensure-secret":
        return svc.ensure_secret(ns.name, ns.secret_type, _payload(ns), ctx=ctx)
    if ns.command == "create-secret":
        return svc.create_secret(ns.name, ns.secret_type, _payload(ns), ctx=ctx)
    if ns.command == "get-secret":
        return svc.get_secret(ns.name, ctx=ctx)
    svc.delete_secrets(ns.part_name, ctx=ctx)
    return None


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, creates a secret manager via the universal factory,
    and runs the requested command. Secrets are printed as JSON, refs
    and IDs as plain text.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    if ns.command == "parse-secret-id":
        try:
            print(parse_secret_id(ns.ref))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    try:
        config: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)

    from cloudkeys.factory import universal_factory

    try:
        svc = universal_factory("secret_manager", "openstack", config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    ctx = RequestContext(timeout=ns.timeout)
    try:
        result = _run(svc, ns, ctx)
    except Exception as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        print("OK")
    elif isinstance(result, str):
        print(result)
    else:
        print(result.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
