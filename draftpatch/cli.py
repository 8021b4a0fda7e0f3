"""
`draftpatch` command line.

Commands
--------
draftpatch apply DOCUMENT PATCH             -- apply a patch, print the result
draftpatch apply DOCUMENT PATCH -o OUT      -- write the result to OUT
draftpatch apply DOCUMENT PATCH --in-place  -- overwrite DOCUMENT
draftpatch show PATCH                       -- show hunk count and colored patch
draftpatch diff OLD NEW                     -- print a patch turning OLD into NEW

PATCH may be ``-`` to read from stdin. It may be a raw diff or a whole
assistant reply; fenced ```patch / ```diff blocks are picked out of it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .cli_display import (
    close_file_handlers, setup_logger, show_error, show_patch,
)
from .config import Config
from .diff_display import compute_diff
from .editing.extract import find_patch_blocks
from .editing.patch_applier import PatchApplier

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PATCH_FAILED = 1
EXIT_IO_ERROR = 2


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write_text(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def _patches_from(text: str) -> list[str]:
    """Return the patch blocks in an assistant reply, or the text itself."""
    blocks = find_patch_blocks(text)
    if blocks:
        logger.debug("[Patch] Found %d fenced patch block(s)", len(blocks))
        return blocks
    return [text]


def _load_config(args: argparse.Namespace) -> Config:
    cfg = Config.load(args.config)
    if args.search_before is not None:
        cfg.SEARCH_BEFORE = args.search_before
    if args.search_after is not None:
        cfg.SEARCH_AFTER = args.search_after
    return cfg


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _cmd_apply(args: argparse.Namespace, cfg: Config) -> int:
    """Apply every patch in PATCH to DOCUMENT, all or nothing."""
    try:
        text = _read_text(args.document)
        patch_source = _read_text(args.patch)
    except OSError as exc:
        show_error(str(exc))
        return EXIT_IO_ERROR

    applier: PatchApplier = cfg.make_applier()
    for patch in _patches_from(patch_source):
        result = applier.apply(text, patch)
        if not result.ok:
            show_error(result.error)
            return EXIT_PATCH_FAILED
        logger.info("[Patch] Applied %d hunk(s)", result.hunks_applied)
        text = result.text

    target = args.document if args.in_place else args.output
    if target is None:
        sys.stdout.write(text)
        return EXIT_OK

    try:
        _write_text(target, text)
    except OSError as exc:
        show_error(str(exc))
        return EXIT_IO_ERROR
    return EXIT_OK


def _cmd_show(args: argparse.Namespace, cfg: Config) -> int:
    """Print each patch with its hunk count."""
    try:
        patch_source = _read_text(args.patch)
    except OSError as exc:
        show_error(str(exc))
        return EXIT_IO_ERROR

    color = cfg.COLOR and not args.no_color
    for patch in _patches_from(patch_source):
        show_patch(patch, color=color)
    return EXIT_OK


def _cmd_diff(args: argparse.Namespace, cfg: Config) -> int:
    """Print a patch turning OLD into NEW."""
    try:
        old_text = _read_text(args.old)
        new_text = _read_text(args.new)
    except OSError as exc:
        show_error(str(exc))
        return EXIT_IO_ERROR

    patch = compute_diff(old_text, new_text, context_lines=args.context)
    if patch is not None:
        print(patch)
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Build and return the `draftpatch` argument parser."""
    parser = argparse.ArgumentParser(
        prog="draftpatch",
        description="Apply assistant-proposed unified diffs to drafts",
    )
    parser.add_argument("--config", default=None,
                        help="Path to .draftpatch.yaml config file")
    parser.add_argument("--search-before", dest="search_before", type=int,
                        default=None,
                        help="Lines searched before a hunk's expected position")
    parser.add_argument("--search-after", dest="search_after", type=int,
                        default=None,
                        help="Lines searched after a hunk's expected position")
    parser.add_argument("--log-file", action="store_true",
                        help="Also write a debug log under the configured log_dir")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show info-level log messages")

    subparsers = parser.add_subparsers(dest="cmd", metavar="COMMAND")
    subparsers.required = True

    # --- apply ---
    apply_p = subparsers.add_parser("apply", help="Apply a patch to a document")
    apply_p.add_argument("document", help="Document to patch")
    apply_p.add_argument("patch", help="Patch file, assistant reply, or - for stdin")
    out_group = apply_p.add_mutually_exclusive_group()
    out_group.add_argument("-o", "--output", default=None,
                           help="Write the patched document here")
    out_group.add_argument("--in-place", action="store_true",
                           help="Overwrite DOCUMENT with the result")
    apply_p.set_defaults(func=_cmd_apply)

    # --- show ---
    show_p = subparsers.add_parser("show", help="Show hunk count and colored patch")
    show_p.add_argument("patch", help="Patch file, assistant reply, or - for stdin")
    show_p.add_argument("--no-color", action="store_true",
                        help="Disable ANSI colors")
    show_p.set_defaults(func=_cmd_show)

    # --- diff ---
    diff_p = subparsers.add_parser("diff", help="Print a patch turning OLD into NEW")
    diff_p.add_argument("old", help="Original document")
    diff_p.add_argument("new", help="Edited document")
    diff_p.add_argument("-U", "--context", type=int, default=3,
                        help="Context lines around each change (default: 3)")
    diff_p.set_defaults(func=_cmd_diff)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the `draftpatch` command.

    Parameters
    ----------
    argv:
        Argument list without the program name. Defaults to sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Configure logging if not already configured
    if not logging.root.handlers:
        level = logging.INFO if args.verbose else logging.WARNING
        # Handler level too: the file logger lowers the package logger to DEBUG
        console = logging.StreamHandler()
        console.setLevel(level)
        logging.basicConfig(
            level=level,
            format="%(levelname)s  %(name)s  %(message)s",
            handlers=[console],
        )

    cfg = _load_config(args)
    file_logger = setup_logger(cfg.LOG_DIR) if args.log_file else None

    try:
        return args.func(args, cfg)
    finally:
        if file_logger is not None:
            close_file_handlers(file_logger)


if __name__ == "__main__":
    sys.exit(main())
