#!/usr/bin/env python3
import json

from collectory.core.config import ENV_OVERRIDES, config_layers
from collectory.core.app_context import AppContext


def register(subparsers):
    sp = subparsers.add_parser("config", help="Config utilities")
    sps = sp.add_subparsers(dest="config_cmd")

    def config_default(args, ctx: AppContext) -> int:
        sp.print_help()
        return 1
    sp.set_defaults(func=config_default)

    showp = sps.add_parser("show", help="Show effective config")
    showp.add_argument("key", nargs="?", help="Only show this top-level key")
    showp.set_defaults(func=show_config)

    pathsp = sps.add_parser("paths", help="Show where config is read from")
    pathsp.set_defaults(func=show_config_paths)


def show_config(args, ctx: AppContext) -> int:
    key = getattr(args, "key", None)
    if key is None:
        print(json.dumps(ctx.config, indent=2))
        return 0
    if key not in ctx.config:
        print(f"Unknown config key '{key}'")
        return 1
    print(json.dumps(ctx.config[key], indent=2))
    return 0


def show_config_paths(args, ctx: AppContext) -> int:
    for label, path in config_layers():
        state = "found" if path.exists() else "missing"
        print(f"  {label:8} {state:8} {path}")
    print(f"  env      {', '.join(ENV_OVERRIDES)}")
    return 0
