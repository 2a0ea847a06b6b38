from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from dotenv import load_dotenv

from catalogcore.adapters.payloads import (
    parse_offer_request,
    parse_reconcile_request,
    render_change_request,
    render_delete_result,
    render_reconcile_result,
    render_upsert_result,
)
from catalogcore.app import (
    initialize_database,
    reconcile_product_variants,
    review_queue,
    seller_pending_requests,
    submit_offer,
    withdraw_offer,
)
from catalogcore.config import ConfigurationError, configure_logging
from catalogcore.domain.errors import ConflictError, NotFoundError, ValidationError
from catalogcore.domain.model import ChangeRequestStatus, OfferScope

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

ANY_STATUS = "ANY"
CALLER_ERRORS = (ValidationError, NotFoundError, ConflictError, ConfigurationError, ValueError)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile catalog variants and govern offers")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the local data dir)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create or migrate the database schema")

    reconcile = subparsers.add_parser(
        "reconcile-variants", help="Converge a product's variants to a target list"
    )
    reconcile.add_argument("product_id", type=str, help="Product id")
    reconcile.add_argument(
        "--payload",
        type=Path,
        required=True,
        help="JSON file with the target variant rows ('-' reads stdin)",
    )
    reconcile.add_argument(
        "--merge",
        action="store_true",
        help="Keep variants missing from the payload instead of removing them",
    )

    upsert = subparsers.add_parser("upsert-offer", help="Create or update a seller offer")
    upsert.add_argument("--seller-id", type=str, required=True, help="Seller id")
    upsert.add_argument(
        "--requested-by",
        type=str,
        help="Acting user id recorded on change requests (defaults to the seller)",
    )
    upsert.add_argument(
        "--payload",
        type=Path,
        required=True,
        help="JSON file with the proposed offer state ('-' reads stdin)",
    )

    delete = subparsers.add_parser("delete-offer", help="Delete a base or variant offer")
    delete.add_argument("--seller-id", type=str, required=True, help="Seller id")
    target = delete.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--product-id",
        type=str,
        help="Delete the base offer on this product and all variant offers under it",
    )
    target.add_argument("--variant-offer-id", type=str, help="Delete one variant offer")

    requests = subparsers.add_parser("change-requests", help="List offer change requests")
    requests.add_argument(
        "--status",
        type=str,
        default=ChangeRequestStatus.PENDING.value,
        help=f"Status filter, or {ANY_STATUS} (default: PENDING)",
    )
    requests.add_argument(
        "--scope",
        type=str,
        choices=[scope.value for scope in OfferScope],
        help="Only list requests of this scope",
    )
    requests.add_argument("--seller-id", type=str, help="Pending requests of one seller")
    requests.add_argument(
        "--product-id",
        type=str,
        help="Together with --seller-id: pending requests on one product",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_status(value: str) -> ChangeRequestStatus | None:
    normalized = value.strip().upper()
    if normalized == ANY_STATUS:
        return None
    try:
        return ChangeRequestStatus(normalized)
    except ValueError as exc:
        raise ValueError(f"Unknown change request status: {value}") from exc


def _read_payload(path: Path) -> dict[str, Any]:
    raw = sys.stdin.read() if str(path) == "-" else path.read_text(encoding="utf-8")
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Payload is not valid JSON: {exc}") from exc
    if isinstance(document, list):
        return {"variants": document}
    if not isinstance(document, dict):
        raise ValidationError("Payload must be a JSON object")
    return document


def _emit(document: object) -> None:
    sys.stdout.write(json.dumps(document, indent=2) + "\n")


def _run(args: argparse.Namespace) -> None:
    initialize_database(database_uri=args.database_uri)

    if args.command == "init-db":
        _emit({"status": "ok"})
    elif args.command == "reconcile-variants":
        request = parse_reconcile_request(
            _read_payload(args.payload), product_id=_parse_uuid(args.product_id)
        )
        if args.merge:
            request = replace(request, replace=False)
        _emit(render_reconcile_result(reconcile_product_variants(request)))
    elif args.command == "upsert-offer":
        target, proposed = parse_offer_request(_read_payload(args.payload))
        result = submit_offer(
            _parse_uuid(args.seller_id),
            target,
            proposed,
            requested_by=_parse_uuid(args.requested_by) if args.requested_by else None,
        )
        _emit(render_upsert_result(result))
    elif args.command == "delete-offer":
        result = withdraw_offer(
            _parse_uuid(args.seller_id),
            product_id=_parse_uuid(args.product_id) if args.product_id else None,
            variant_offer_id=(
                _parse_uuid(args.variant_offer_id) if args.variant_offer_id else None
            ),
        )
        _emit(render_delete_result(result))
    elif args.command == "change-requests":
        if bool(args.seller_id) != bool(args.product_id):
            raise ValueError("--seller-id and --product-id must be given together")
        if args.seller_id:
            found = seller_pending_requests(
                _parse_uuid(args.seller_id), _parse_uuid(args.product_id)
            )
        else:
            found = review_queue(
                status=_parse_status(args.status),
                scope=OfferScope(args.scope) if args.scope else None,
            )
        _emit([render_change_request(request) for request in found])
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        _run(parsed_args)
    except CALLER_ERRORS as exc:
        log.error("Request rejected: %s", exc)  # noqa: TRY400
        sys.stderr.write(f"error: {exc}\n")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
