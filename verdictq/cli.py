"""
VerdictQ command line.

Usage:
    verdictq score purchase.json
    verdictq parse-email message.eml
    verdictq thresholds

`score` accepts either a bare purchase object or
{"purchase": {...}, "overrides": {...}} where overrides follows ScoringOverrides.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from verdictq import __version__
from verdictq.gmail.parser import extract_receipt_text, parse_raw_email
from verdictq.infrastructure.settings import ENV, POLICY_PATH
from verdictq.observability.logging import get_logger
from verdictq.receipts.filters import filter_email_for_receipt
from verdictq.receipts.types import ReceiptEmail
from verdictq.runtime.thresholds import get_all_thresholds
from verdictq.scoring.engine import score_purchase
from verdictq.scoring.types import PurchaseInput, ScoringOverrides

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 2


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _split_score_payload(payload: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any] | None]:
    if "purchase" in payload:
        return payload["purchase"], payload.get("overrides")
    return payload, None


def cmd_score(args: argparse.Namespace) -> int:
    try:
        payload = json.loads(Path(args.purchase_file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading {args.purchase_file}: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if not isinstance(payload, dict):
        print("Purchase file must contain a JSON object", file=sys.stderr)
        return EXIT_INVALID_INPUT

    purchase_data, overrides_data = _split_score_payload(payload)
    try:
        purchase = PurchaseInput.model_validate(purchase_data)
        overrides = ScoringOverrides.model_validate(overrides_data) if overrides_data else None
    except ValidationError as e:
        print(f"Invalid purchase input:\n{e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    result = score_purchase(purchase, overrides)
    _print_json(result.model_dump(mode="json"))
    return EXIT_OK


def cmd_parse_email(args: argparse.Namespace) -> int:
    try:
        raw = Path(args.email_file).read_bytes()
    except OSError as e:
        print(f"Error reading {args.email_file}: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    parsed = parse_raw_email(raw)
    decision = filter_email_for_receipt(
        ReceiptEmail(subject=parsed.subject, text_content=parsed.cleaned_text)
    )
    _print_json(
        {
            "email": parsed.to_dict(),
            "receipt_text": extract_receipt_text(parsed),
            "filter": decision.to_dict(),
        }
    )
    return EXIT_OK


def cmd_thresholds(args: argparse.Namespace) -> int:
    _print_json({"env": ENV, "policy_path": str(POLICY_PATH), **get_all_thresholds()})
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="verdictq", description="Purchase verdicts and receipt-email processing"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    score = subparsers.add_parser("score", help="Score a purchase without an LLM")
    score.add_argument("purchase_file", help="JSON file with the purchase (and optional overrides)")
    score.set_defaults(func=cmd_score)

    parse_email = subparsers.add_parser(
        "parse-email", help="Parse a raw .eml file and run the receipt filter"
    )
    parse_email.add_argument("email_file", help="Raw RFC-822 message")
    parse_email.set_defaults(func=cmd_parse_email)

    thresholds = subparsers.add_parser("thresholds", help="Show the loaded policy thresholds")
    thresholds.set_defaults(func=cmd_thresholds)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("Running command %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
