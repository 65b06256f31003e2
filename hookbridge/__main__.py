"""
Command line entry point: inspect a repository's hooks or run one of them.
"""

from __future__ import annotations

import argparse
import json
import keyword
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import git

from hookbridge.config import load_settings
from hookbridge.discovery import find_hooks, hooks_dir_for, parse_hook_name
from hookbridge.dispatcher import create_hook, create_script_hook
from hookbridge.exceptions import AbortRequested
from hookbridge.log_manager import log
from hookbridge.operation import parameter_operation
from hookbridge.parameters import extract
from hookbridge.utils import get_version

RESERVED_PARAMS = {"repository", "hook_name", "call"}


def _parse_params(pairs: Sequence[str]) -> Dict[str, Any]:
    """Turn ``KEY=VALUE`` arguments into a parameter map."""
    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        valid = key.isidentifier() and not keyword.iskeyword(key) and not key.startswith("_")
        if not sep or not valid or key in RESERVED_PARAMS:
            raise argparse.ArgumentTypeError(f"invalid parameter '{pair}', expected KEY=VALUE")
        params[key] = value
    return params


def _open_repo(path: Optional[str]) -> Optional[git.Repo]:
    try:
        return git.Repo(path or ".", search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
        log.debug("No repository at '%s': %s", path or ".", exc)
        return None


def cmd_list(args: argparse.Namespace) -> int:
    """List the hooks of a repository."""
    repo = _open_repo(args.repo)
    if repo is None:
        print(f"not a git repository: {args.repo or '.'}", file=sys.stderr)
        return 2

    hooks_dir = hooks_dir_for(repo)
    settings = load_settings(hooks_dir)
    descriptors = find_hooks(hooks_dir, args.operation)
    if not descriptors:
        print("no hooks found")
        return 0

    for descriptor in descriptors:
        hook = create_hook(descriptor, settings=settings)
        state = "disabled" if settings.is_skipped(descriptor.path) else hook.strategy
        print(f"{descriptor.phase.value:<5} {descriptor.operation:<16} {state:<9} {descriptor.path.name}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run one hook file against a parameter-only operation."""
    script = Path(args.file)
    try:
        params = _parse_params(args.param)
    except argparse.ArgumentTypeError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    descriptor = parse_hook_name(script)
    name = args.operation or (descriptor.operation if descriptor else None) or "command"
    repo = _open_repo(args.repo)
    settings = load_settings(hooks_dir_for(repo)) if repo is not None else None

    operation = parameter_operation(name, params, repository=repo)
    hook = create_script_hook(script, pre_hook=not args.post, settings=settings)
    try:
        if args.post:
            hook.post(operation)
        else:
            hook.pre(operation)
    except AbortRequested as exc:
        print(exc.message, file=sys.stderr)
        return 1

    print(json.dumps(extract(operation), indent=2, sort_keys=True, default=str))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookbridge",
        description="Run repository hooks around host operations.",
    )
    parser.add_argument("--version", action="version", version=get_version())
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    list_parser = subparsers.add_parser("list", help="list the hooks of a repository")
    list_parser.add_argument("operation", nargs="?", help="only list hooks for this operation")
    list_parser.add_argument("--repo", help="path inside the repository (default: current directory)")
    list_parser.set_defaults(func=cmd_list)

    run_parser = subparsers.add_parser("run", help="run a single hook file")
    run_parser.add_argument("file", help="hook file to run")
    run_parser.add_argument("--post", action="store_true", help="run as a post hook")
    run_parser.add_argument("--repo", help="path inside the repository bound as 'host'")
    run_parser.add_argument("--operation", help="operation name (default: taken from the file name)")
    run_parser.add_argument(
        "-p",
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="operation parameter, may be repeated",
    )
    run_parser.set_defaults(func=cmd_run)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the hookbridge CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    log.debug("argv = %s", argv if argv is not None else sys.argv[1:])
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
