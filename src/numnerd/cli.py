# src/numnerd/cli.py

"""
numnerd - tell me about integer N

Runs every analyzer on N concurrently and prints what they found, as
terminal text or as the HTML fragment the web service would serve.

usage: see numnerd -h
"""

from __future__ import annotations

import argparse
import os
import sys
import textwrap
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from numnerd import __version__ as _ver
from numnerd import config as CONFIG
from numnerd.collector import collect_sync
from numnerd.display import print_facts, render_html, show_analyzer_list
from numnerd.output_manager import OutputManager
from numnerd.randnum import random_number_text
from numnerd.registry import discover, discover_with_report
from numnerd.runtime import APPLY, CFG, missing_modules
from numnerd.runtime import current as _rt_current
from numnerd.utility import (
    UserInputError,
    apply_digit_limit,
    flatten_dotted,
    parse_nonnegative,
    typename,
)
from numnerd.workspace import seed_workspace, workspace_dir

COMMANDS = ("init", "list", "where", "random", "serve")


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    if not msg.startswith("Error:"):
        msg = f"{Fore.RED}Error:{Style.RESET_ALL} {msg}"
    print(msg, file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:
    epilog = textwrap.dedent("""\
    commands:
      init [overwrite]
          Create workspace folders and copy packaged profiles and data if missing.
          "overwrite" replaces them; requires NUMNERD_DEV=1.

      list
          List all available analyzers.

      where
          Show the workspace and package paths.

      random
          Print a random number.

      serve
          Run the web service (see --host / --port).
    """)

    p = argparse.ArgumentParser(
        prog="numnerd",
        description="numnerd — facts about integers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="+", metavar="integer|command",
                   help="a non-negative integer, or one of: " + ", ".join(COMMANDS))
    p.add_argument("--profile", default=None, help="Profile name (default: 'default')")
    p.add_argument("--html", action="store_true", help="Print the HTML fragment instead of terminal text")
    p.add_argument("--output", default=None, help="Append results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Do not print to the screen")
    p.add_argument("--no-color", action="store_true", help="Plain text without ANSI colors")
    p.add_argument("--debug", action="store_true", help="Show per-analyzer timings and tracebacks")
    p.add_argument("--host", default=None, help="serve: bind address (default from profile)")
    p.add_argument("--port", type=int, default=None, help="serve: port (default from profile)")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        if "--debug" in (argv if argv is not None else sys.argv):
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _load_profile(name: str | None, debug: bool) -> None:
    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if debug:
        print(f"[debug] active profile: {selected.name}", file=sys.stderr)
        if selected.source:
            print(f"[debug] profile file: {selected.source}", file=sys.stderr)
        flat = flatten_dotted(_rt_current().settings)
        for k in sorted(flat, key=str.lower):
            v = flat[k]
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
        print(file=sys.stderr)
    # a profile may switch debug on; the command line can only add to it
    _rt_current().debug = _rt_current().debug or debug


def _serve(args) -> int:
    import uvicorn

    from numnerd.web import create_app

    host = args.host or str(CFG("WEB.HOST", "0.0.0.0"))
    port = args.port or int(CFG("WEB.PORT", 3000))
    uvicorn.run(create_app(profile=args.profile), host=host, port=port)
    return 0


def _main_impl(argv=None) -> int:
    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)

    missing = missing_modules()
    if missing:
        print(f"{Fore.RED}Missing required packages:{Style.RESET_ALL} {', '.join(missing)}\n"
              f"Install them with: pip install {' '.join(missing)}", file=sys.stderr)
        return 1

    try:
        seed_workspace()
    except OSError as e:
        print(f"{Fore.YELLOW}Warning:{Style.RESET_ALL} workspace not seeded: {e}", file=sys.stderr)

    if args.profile and not CONFIG.has_profile(args.profile):
        names = ", ".join(n for n, _ in CONFIG.list_profiles())
        raise UserInputError(f"unknown profile '{args.profile}'. Available: {names or '(none)'}")
    _load_profile(args.profile, args.debug)
    apply_digit_limit()

    if args.debug:
        index, rep = discover_with_report(workspace_dir())
        print(f"[debug] discovered analyzers: {len(index.funcs)}", file=sys.stderr)
        for name, cnt in rep.ws_loaded + rep.pkg_loaded:
            print(f"[discovery] {Fore.GREEN}OK{Style.RESET_ALL} {name}: {cnt} analyzer(s)", file=sys.stderr)
        for name, err in rep.ws_failed + rep.pkg_failed:
            print(f"[discovery] {Fore.RED}FAIL{Style.RESET_ALL} {name}: {err}", file=sys.stderr)
        for label, skipped, kept in rep.skipped_duplicates:
            print(f"[discovery] {Fore.YELLOW}SKIP{Style.RESET_ALL} {label} from {skipped} (kept {kept})",
                  file=sys.stderr)
    else:
        index = discover(workspace_dir())

    command = args.items[0]

    if command == "init":
        if len(args.items) > 1 and args.items[1] == "overwrite":
            if os.environ.get("NUMNERD_DEV") != "1":
                print("Refusing to overwrite: set NUMNERD_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
        else:
            ws, copied = seed_workspace(overwrite=False)
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}, data: {copied.get('data', 0)}")
        return 0

    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('numnerd')}")
        return 0

    if command == "serve":
        return _serve(args)

    target = args.output if args.output is not None else (CFG("OUTPUT.OUTPUT_FILE", "") or None)
    with OutputManager(output_file=target, quiet=args.quiet) as om:
        if command == "list":
            show_analyzer_list(index, om)
            return 0

        if command == "random":
            om.write(random_number_text())
            return 0

        n = parse_nonnegative(command)
        facts = collect_sync(n, index)

        if args.html:
            rendered = render_html(facts)
            for html in rendered["basic"]:
                om.write(f"<li>{html}</li>")
            for label, html in rendered["forms"]:
                om.write(f"<dt>{label}</dt><dd>{html}</dd>")
        else:
            print_facts(facts, om, color=not args.no_color)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
