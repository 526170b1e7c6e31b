#!/usr/bin/env python3

import json
from pathlib import Path

from collectory.core.app_context import AppContext
from collectory.core.schema.schema_file import SchemaFile


def register(subparsers):
    sp = subparsers.add_parser("schema", help="Schema utilities")
    sps = sp.add_subparsers(dest="schema_cmd")

    # default when user runs: `collectory schema`
    def schema_default(args, ctx: AppContext) -> int:
        sp.print_help()
        return 1
    sp.set_defaults(func=schema_default)

    lp = sps.add_parser("list", help="List schemas")
    lp.add_argument("--all", action="store_true", help="Include invalid schemas")
    lp.add_argument("--invalid", action="store_true", help="Show only invalid schemas")
    lp.add_argument("--json", action="store_true", help="JSON output")
    lp.set_defaults(func=list_schemas)

    vsp = sps.add_parser("validate", help="Validate a schema")
    vsp.add_argument("schema", help="Schema name or path")
    vsp.set_defaults(func=validate_schema)

    ssp = sps.add_parser("show", help="Show schema JSON")
    ssp.add_argument("schema", help="Schema name")
    ssp.set_defaults(func=show_schema)


def list_schemas(args, ctx: AppContext) -> int:
    print("Searched schema_paths:", ", ".join(ctx.config.get("schema_paths", [])) or "<none>")

    if args.invalid:
        entries = ctx.schemas.invalid_entries()
    elif args.all:
        entries = ctx.schemas.entries()
    else:
        entries = ctx.schemas.valid_entries()

    if args.json:
        payload = [{
            "name": e.name,
            "valid": e.valid,
            "path": str(e.path),
            "fields": e.field_count,
            "reason": e.reason,
        } for e in entries]
        print(json.dumps(payload, indent=2))
        return 0 if payload else 1

    if not entries:
        print("No schemas found.")
        return 1

    print("\nSchemas Found:")
    for e in sorted(entries, key=lambda x: (not x.valid, x.name.lower())):
        if e.valid:
            status = f"✓ valid ({e.field_count} fields)"
        else:
            brief = (e.reason or "").splitlines()[0] if e.reason else "unknown"
            status = f"✗ invalid ({brief})"
        print(f"  - {e.name:24} {status:35}  {e.path}")
    return 0


def validate_schema(args, ctx: AppContext) -> int:
    target = args.schema

    # Try by name (valids only)
    if ctx.schemas.get(target) is not None:
        print(f"Valid schema: {target}")
        return 0

    # Try as path (for invalids or unregistered files)
    p = Path(target)
    if p.exists():
        try:
            SchemaFile.from_file(p)
        except (OSError, ValueError) as e:
            print(f"Schema file invalid: {p}\n{e}")
            return 1
        print(f"Valid schema file: {p}")
        return 0

    # Fallback: attempt to match invalid by stem or recorded name
    matches = [e for e in ctx.schemas.invalid_entries() if target in (e.path.stem, e.name)]
    if matches:
        e = matches[0]
        print(f"Invalid schema: {target} ({e.path})\n{e.reason or ''}")
        return 1

    print(f"Schema '{target}' not found by name or path.")
    return 1


def show_schema(args, ctx: AppContext) -> int:
    s = ctx.schemas.get(args.schema)
    if s is None:
        print(f"Schema '{args.schema}' not found")
        return 1
    print(json.dumps(s.to_dict(), indent=2))
    return 0
