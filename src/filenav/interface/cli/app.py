from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(defaults, persistent storage and CLI overrides), tree construction, the
requested view operations (filter, reveal, expand) and output rendering.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from filenav.core.analysis.tree_renderer import projection_to_dict
from filenav.core.services.config_validator import validate_config
from filenav.core.services.filetree import Filetree
from filenav.domain.config import get_default_config, load_config
from filenav.domain.errors import TreeError
from filenav.infra.fs import normalize_path
from filenav.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)
from filenav.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on a tree error, 2 if the input path is missing.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    log_file = get_default_log_path() if args.log_file == "" else args.log_file
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, _ = validate_config(raw_conf, strict=False)
    clean_conf["root_path"] = normalize_path(clean_conf["root_path"], os.getcwd())

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    root_path = clean_conf["root_path"]
    if not os.path.isdir(root_path):
        msg = f"Input directory does not exist: {root_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    tree = Filetree.from_dir(root_path, clean_conf)
    try:
        if args.expand_all:
            tree.expand_all()
        filter_paths = cli_args.split_csv(args.filter_paths)
        if filter_paths:
            tree.filter_include(filter_paths)
        if args.goto_path:
            tree.open_path(args.goto_path)
    except TreeError as e:
        logger.error(f"Tree operation failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json_output:
        print(json.dumps(_tree_to_dict(tree), ensure_ascii=False, indent=2))
    else:
        _print_human_view(tree)
    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of non-None override values for known keys."""
    out = dict(base)
    for k in ("root_path", "exclude_patterns", "show_hidden"):
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _tree_to_dict(tree: Filetree) -> Dict[str, Any]:
    return {
        "root": tree.root_path,
        "selected": list(tree.state.selected),
        "selected_path": tree.selected_path(),
        "opened": sorted(list(loc) for loc in tree.state.opened),
        "focused": tree.focused,
        "filter": tree.files.filter_paths,
        "items": projection_to_dict(tree.items),
    }


def _print_human_view(tree: Filetree) -> None:
    print(f"{os.path.basename(tree.root_path) or tree.root_path}/")
    for line in tree.render():
        print(line)
    selected = tree.selected_path()
    if selected:
        print(f"\nSelected: {os.path.relpath(selected, tree.root_path)}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
