from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from schemasync.adapters.payload import parse_schema_type, translate_schema_type
from schemasync.app import build_service, register_external_source
from schemasync.config import configure_logging
from schemasync.domain.errors import InvalidInputError
from schemasync.domain.model import DeleteSemantic

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from schemasync.domain.model import SchemaType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    caller = argparse.ArgumentParser(add_help=False)
    caller.add_argument(
        "--user",
        type=str,
        required=True,
        help="Id of the calling user, checked by the authorizer",
    )
    caller.add_argument(
        "--source",
        type=str,
        default=None,
        help="External source name for provenance (defaults to SCHEMASYNC_EXTERNAL_SOURCE)",
    )

    parser = argparse.ArgumentParser(description="Synchronise tabular schemas into the store")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register = subparsers.add_parser("register-source", help="Register an external source")
    register.add_argument("name", type=str, help="Name of the external source")

    upsert = subparsers.add_parser(
        "upsert",
        parents=[caller],
        help="Reconcile a schema type described by a JSON file",
    )
    upsert.add_argument("file", type=Path, help="JSON file describing the schema type")

    link = subparsers.add_parser(
        "link",
        parents=[caller],
        help="Add a lineage mapping between two qualified names",
    )
    link.add_argument("source_qualified_name", type=str, help="Qualified name of the source")
    link.add_argument("target_qualified_name", type=str, help="Qualified name of the target")

    remove = subparsers.add_parser(
        "remove",
        parents=[caller],
        help="Remove a schema type and its attributes",
    )
    remove.add_argument("schema_type_id", type=str, help="Guid of the schema type")
    remove.add_argument(
        "--semantic",
        type=str,
        choices=[semantic.value for semantic in DeleteSemantic],
        default=DeleteSemantic.SOFT.value,
        help="Delete semantic (default: %(default)s)",
    )

    show = subparsers.add_parser(
        "show",
        parents=[caller],
        help="Show the schema type or attribute stored under a qualified name",
    )
    show.add_argument("qualified_name", type=str, help="Qualified name to look up")

    return parser.parse_args(list(argv))


def _load_schema_type(path: Path) -> SchemaType:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ValueError(f"Cannot read schema file {path}: {exc}") from exc
    return translate_schema_type(parse_schema_type(raw))


def _run(parsed_args: argparse.Namespace, schema_type: SchemaType | None) -> None:
    if parsed_args.command == "register-source":
        source = register_external_source(parsed_args.name)
        log.info("External source %s has id %s", source.name, source.id)
        return

    service = build_service()
    if parsed_args.command == "upsert":
        assert schema_type is not None
        schema_type_id = service.upsert_schema_type(
            parsed_args.user, schema_type, parsed_args.source
        )
        log.info("Schema type %s has id %s", schema_type.qualified_name, schema_type_id)
    elif parsed_args.command == "link":
        link = service.add_lineage_mapping(
            parsed_args.user,
            parsed_args.source_qualified_name,
            parsed_args.target_qualified_name,
            parsed_args.source,
        )
        log.info("Lineage mapping %s", link.relationship_id)
    elif parsed_args.command == "remove":
        service.remove_schema_type(
            parsed_args.user,
            parsed_args.schema_type_id,
            parsed_args.source,
            parsed_args.semantic,
        )
    elif parsed_args.command == "show":
        entity = service.find_schema_type(parsed_args.user, parsed_args.qualified_name)
        if entity is None:
            entity = service.find_schema_attribute(parsed_args.user, parsed_args.qualified_name)
        if entity is None:
            log.info("Nothing stored under %s", parsed_args.qualified_name)
            return
        log.info(
            "%s %s (version %s)\n%s",
            entity.type_name,
            entity.id,
            entity.version,
            json.dumps(dict(entity.properties), indent=2, sort_keys=True, default=str),
        )
    else:
        raise ValueError(f"Unsupported command: {parsed_args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    schema_type: SchemaType | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "upsert":
            schema_type = _load_schema_type(parsed_args.file)
    except ValueError:
        # InvalidInputError is a ValueError too
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args, schema_type)
    except InvalidInputError:
        log.exception("Rejected request")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


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
