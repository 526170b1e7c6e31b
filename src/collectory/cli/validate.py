#!/usr/bin/env python3
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Tuple

import yaml
from pydantic import ValidationError

from collectory.core.app_context import AppContext
from collectory.core.constants import DEFAULT_TEXT_ENCODING, SUPPORTED_ITEM_EXT
from collectory.core.document.item_document import ItemDocument
from collectory.core.formatting import format_pydantic_errors_simple
from collectory.core.schema.registry import SchemaRegistry


def _is_supported_yaml_file(p: Path) -> bool:
    return p.is_file() and p.suffix.lower() in SUPPORTED_ITEM_EXT


def _yaml_files_in_dir(root: Path, recursive: bool) -> list[Path]:
    if not root.is_dir():
        return []
    candidates = root.rglob("*") if recursive else root.glob("*")
    return [p for p in candidates if _is_supported_yaml_file(p)]


def find_all_files(paths: Iterable[str | Path], recursive: bool = False) -> list[Path]:
    files: list[Path] = []
    for raw in paths:
        p = Path(raw)
        if _is_supported_yaml_file(p):
            files.append(p)
        else:
            files.extend(_yaml_files_in_dir(p, recursive))
    # stable, de-duplicated order
    return sorted(set(files))


def validate_item_file(file_path: Path, registry: SchemaRegistry) -> Tuple[bool, str, List[str]]:
    """
    Returns: (is_valid, summary_message, error_list)
    """
    ok, msg = _quick_yaml_checks(file_path)
    if not ok:
        return False, msg, []

    try:
        doc = ItemDocument.from_file(file_path)
    except ValidationError as e:
        return False, f"{file_path}: Invalid item structure", format_pydantic_errors_simple(e)

    errors = doc.validate(registry=registry)
    if errors:
        return False, f"{file_path}: Validation Failed", errors

    return True, f"{file_path}: Validation Passed", []


def validate(args, ctx: AppContext) -> int:
    registry = ctx.registry_for(args.schema_root)

    files = find_all_files(args.files, recursive=args.recursive)
    if not files:
        print("No YAML files found.")
        return 1

    results = [(fp, *validate_item_file(fp, registry)) for fp in files]
    success = sum(1 for _, ok, _, _ in results if ok)

    if args.json:
        payload = [{"file": str(fp), "valid": ok, "errors": errs} for fp, ok, _, errs in results]
        print(json.dumps(payload, indent=2))
        return 0 if success == len(files) else 1

    for _, ok, msg, errs in results:
        if ok and not args.verbose:
            continue
        print(f"\n{msg}")
        for e in errs:
            print(f"  - {e}")

    print(f"\nValidation complete: {success}/{len(files)} passed.")
    return 0 if success == len(files) else 1


def register(subparser):
    parser = subparser.add_parser("validate", help="Validate item YAML files against their collection schemas.")
    parser.add_argument("files", nargs="+", help="Files or directories to validate.")
    parser.add_argument("--recursive", "-r", action="store_true", help="Recursively scan directories.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show all results, not only errors.")
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument(
        "--schema-root",
        action="append",
        default=None,
        help="Override schema roots just for this run (can be used multiple times).",
    )
    parser.set_defaults(func=validate)


def _quick_yaml_checks(file_path: Path) -> Tuple[bool, str]:
    """Fast YAML load and presence of the `collection` key."""
    try:
        raw = yaml.safe_load(file_path.read_text(encoding=DEFAULT_TEXT_ENCODING)) or {}
    except (OSError, ValueError, yaml.YAMLError) as e:
        return False, f"{file_path}: Failed to read YAML ({e})"
    if not isinstance(raw, dict) or not raw.get("collection"):
        return False, f"{file_path}: Missing collection"
    return True, ""
