from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates raw argparse
namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the filenav CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="filenav",
        description="Scan a directory into a navigable tree and print its projection.",
    )

    # --- Tree Source ---
    p.add_argument(
        "-i", "--input",
        dest="root_path",
        default=None,
        help="Directory to scan (defaults to the configured root or the CWD).",
    )
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated regexes; matching entry names are skipped.",
    )
    p.add_argument(
        "--show-hidden",
        action="store_true",
        help="Include dot-prefixed entries.",
    )

    # --- View State ---
    p.add_argument(
        "--goto",
        dest="goto_path",
        default=None,
        help="Reveal and select this path (relative paths resolve against the root).",
    )
    p.add_argument(
        "--filter",
        dest="filter_paths",
        default=None,
        help="Comma-separated paths; show only their ancestor chains.",
    )
    p.add_argument(
        "--expand-all",
        action="store_true",
        help="Expand every directory before printing.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the stored configuration.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (the user data dir when no path is given).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the projection and navigation state as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["root_path"] = args.root_path

    if args.exclude_patterns is not None:
        overrides["exclude_patterns"] = split_csv(args.exclude_patterns)
    if args.show_hidden:
        overrides["show_hidden"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
