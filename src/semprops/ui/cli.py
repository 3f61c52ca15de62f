# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from semprops.adapters.sqlalchemy import SqlAlchemyPropertyStore
from semprops.api import EDITOR
from semprops.app import build_handlers, build_store
from semprops.config import configure_logging, get_api_config
from semprops.domain.model import Entity

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from semprops.api import HandlerResponse
    from semprops.app import SemanticStore

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Read and edit semantic properties")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_page = subparsers.add_parser("create-page", help="Create an empty page")
    create_page.add_argument("title", help="Page title")

    declare = subparsers.add_parser("declare", help="Declare a property and its type")
    declare.add_argument("key", help="Property key, with or without namespace prefix")
    declare.add_argument(
        "type_id",
        help="Type id, e.g. _txt, _num, _qty, _dat, _wpg, _rec (unknown ids are treated as text)",
    )
    declare.add_argument("--label", type=str, help="Display label")
    declare.add_argument(
        "--field",
        dest="fields",
        action="append",
        default=[],
        help="Record field key; repeat in field order",
    )
    declare.add_argument(
        "--system",
        action="store_true",
        help="Mark the property as reserved so it cannot be written through the API",
    )

    get = subparsers.add_parser("get", help="Show the properties of a page")
    get.add_argument("title", help="Page title")
    get.add_argument("--property", dest="property_name", help="Only list this property")

    set_ = subparsers.add_parser("set", help="Set one or more properties as one batch")
    set_.add_argument("title", help="Page title")
    set_.add_argument("assignments", nargs="+", help="Property=value pairs")

    delete = subparsers.add_parser("delete", help="Delete a property from a page")
    delete.add_argument("title", help="Page title")
    delete.add_argument("property_name", help="Property to delete")

    return parser.parse_args(list(argv))


def _parse_assignment(text: str) -> dict[str, str]:
    key, separator, value = text.partition("=")
    if not separator or not key.strip():
        raise ValueError(f"Expected Property=value, got {text!r}")
    return {"property": key.strip(), "value": value}


def _print_response(response: HandlerResponse) -> int:
    stream = sys.stdout if response.status < 400 else sys.stderr  # noqa: PLR2004
    print(json.dumps(response.body, indent=2, ensure_ascii=False), file=stream)
    return 0 if response.status < 400 else 1  # noqa: PLR2004


def _run(args: argparse.Namespace, store: SemanticStore) -> int:
    config = get_api_config()
    handlers = build_handlers(store, config)
    match args.command:
        case "create-page":
            entity = Entity.from_title(args.title)
            created = store.create_page(entity)
            log.info("%s page %s", "Created" if created else "Kept existing", entity)
            return 0
        case "declare":
            if not isinstance(store, SqlAlchemyPropertyStore):
                raise ValueError("Property declarations are stored by the sqlalchemy backend only")
            key = handlers.engine.normalize(args.key)
            store.declare_property(
                key,
                args.type_id,
                label=args.label,
                user_defined=not args.system,
                fields=[handlers.engine.normalize(field) for field in args.fields],
            )
            return 0
        case "get":
            if args.property_name is not None:
                return _print_response(handlers.get_property(args.title, args.property_name))
            return _print_response(handlers.get_properties(args.title))
        case "set":
            payload = {"properties": [_parse_assignment(text) for text in args.assignments]}
            return _print_response(handlers.set_properties(args.title, payload, EDITOR))
        case "delete":
            return _print_response(handlers.delete_property(args.title, args.property_name, EDITOR))
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Command line entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "set":
            for text in parsed_args.assignments:
                _parse_assignment(text)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        exit_code = _run(parsed_args, build_store(get_api_config()))
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
