"""
coicheck Command-Line Interface

Evaluate holder records stored as JSON files.

Usage:
    coicheck evaluate tenant.json --profile profile.json
    coicheck evaluate tenant.json --template restaurant --today 2025-03-01
    coicheck vendor-status vendor.json --threshold 45
    coicheck templates
    coicheck templates office

Exit codes: 0 on success, 1 on bad input (message on stderr).
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import Settings
from .dates import parse_local_date
from .engine import compare_tenant_coi, recalculate_vendor_status
from .exceptions import CoiCheckError, HolderRecordError
from .logging_config import configure_logging
from .models import RequirementProfile, TenantHolder, VendorHolder
from .templates import (
    get_template,
    load_templates,
    summarize_template,
    template_to_profile,
)

logger = logging.getLogger(__name__)


def _read_json(path: str) -> dict[str, Any]:
    """Read a JSON object from a file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise HolderRecordError(
            message=f"Cannot read {path}: {e.strerror or e}",
            details={"path": path},
        ) from e
    except json.JSONDecodeError as e:
        raise HolderRecordError(
            message=f"Invalid JSON in {path}: {e.msg} (line {e.lineno})",
            details={"path": path},
        ) from e
    if not isinstance(data, dict):
        raise HolderRecordError(
            message=f"{path} must contain a JSON object",
            details={"path": path},
        )
    return data


def _parse_today(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    parsed = parse_local_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD)")
    return parsed


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _templates_dir(settings: Settings) -> Optional[Path]:
    return settings.templates_dir


# =============================================================================
# Commands
# =============================================================================

def cmd_evaluate(args: argparse.Namespace, settings: Settings) -> int:
    """Evaluate a tenant certificate against its requirement profile."""
    record = _read_json(args.holder)
    tenant = TenantHolder.from_record(record)

    profile: Optional[RequirementProfile] = None
    if args.profile:
        profile = RequirementProfile.from_record(_read_json(args.profile))
    elif args.template:
        template = get_template(args.template, _templates_dir(settings))
        profile = template_to_profile(
            template,
            additional_insured_entities=args.additional_insured or (),
        )
    elif isinstance(record.get("requirement_profile"), dict):
        profile = RequirementProfile.from_record(record["requirement_profile"])

    threshold = args.threshold if args.threshold is not None else settings.expiring_threshold_days
    result = compare_tenant_coi(tenant, profile, threshold_days=threshold, today=args.today)
    _print_json(result.to_dict())
    return 0


def cmd_vendor_status(args: argparse.Namespace, settings: Settings) -> int:
    """Recalculate a vendor's coverage flags and status."""
    vendor = VendorHolder.from_record(_read_json(args.vendor))
    threshold = args.threshold if args.threshold is not None else settings.expiring_threshold_days
    updated = recalculate_vendor_status(vendor, threshold_days=threshold, today=args.today)
    _print_json(updated.to_record())
    return 0


def cmd_templates(args: argparse.Namespace, settings: Settings) -> int:
    """List templates, or show one."""
    if args.key:
        template = get_template(args.key, _templates_dir(settings))
        data = template.model_dump()
        data["summary"] = summarize_template(template)
        _print_json(data)
        return 0

    templates = load_templates(_templates_dir(settings))
    for key, template in templates.items():
        print(f"{key:<12} {template.name:<12} {summarize_template(template)}")
    return 0


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coicheck",
        description="Certificate of insurance compliance checks",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: COICHECK_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def add_evaluation_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--threshold",
            type=int,
            default=None,
            help="Days before expiration that count as expiring",
        )
        sub.add_argument(
            "--today",
            type=_parse_today,
            default=None,
            help="Reference day (YYYY-MM-DD), defaults to the local date",
        )

    # Evaluate command
    eval_parser = subparsers.add_parser("evaluate", help="Evaluate a tenant COI")
    eval_parser.add_argument("holder", help="Tenant record JSON file")
    source = eval_parser.add_mutually_exclusive_group()
    source.add_argument("--profile", help="Requirement profile JSON file")
    source.add_argument("--template", help="Requirement template key")
    eval_parser.add_argument(
        "--additional-insured",
        action="append",
        metavar="NAME",
        help="Additional insured entity for --template (repeatable)",
    )
    add_evaluation_options(eval_parser)
    eval_parser.set_defaults(func=cmd_evaluate)

    # Vendor status command
    vendor_parser = subparsers.add_parser("vendor-status", help="Recalculate a vendor's status")
    vendor_parser.add_argument("vendor", help="Vendor record JSON file")
    add_evaluation_options(vendor_parser)
    vendor_parser.set_defaults(func=cmd_vendor_status)

    # Templates command
    templates_parser = subparsers.add_parser("templates", help="List or show requirement templates")
    templates_parser.add_argument("key", nargs="?", help="Template key to show")
    templates_parser.set_defaults(func=cmd_templates)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    configure_logging(args.log_level or settings.log_level, stream=sys.stderr)

    try:
        return args.func(args, settings)
    except CoiCheckError as e:
        logger.debug("Command failed", extra={"error": e.code})
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
