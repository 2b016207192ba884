"""
Build step that checks the DevTools frontend strings against the .grd/.grdp catalog
and generates the {"string", IDS_KEY} mapping consumed by the browser.

Usage:
  --root_gen_dir      The root directory of the output .h and .cc files
  --output_header     Path of the output .h file, relative to root_gen_dir
  --output_cc         Path of the output .cc file, relative to root_gen_dir

Exits with 0 on success and 1 when the catalog cannot be parsed, strings are
missing from it, IDS keys have to change, or the outputs cannot be written.
"""
import argparse
import logging
import sys
from typing import List, Optional, Tuple

# --- Python Version Check ---
if sys.version_info < (3, 11):
    sys.stderr.write("Error: This script requires Python 3.11 or newer.\n")
    sys.stderr.write(f"You are running Python {sys.version.split()[0]}.\n")
    sys.exit(1)
# --- End Version Check ---

from devtools_ui_strings.app_config import AppConfig, load_app_config
from devtools_ui_strings.build_gate import GateDecision, evaluate_result
from devtools_ui_strings.errors import UIStringsError, UnresolvedResourcesError
from devtools_ui_strings.grd_parser import parse_grd
from devtools_ui_strings.logging_config import LOGGER_NAME
from devtools_ui_strings.models import CatalogEntry, FrontendStringMap
from devtools_ui_strings.resource_reconciler import reconcile
from devtools_ui_strings.string_scanner import scan_frontend_strings
from devtools_ui_strings.table_generator import GeneratedArtifacts, generate

logger = logging.getLogger(LOGGER_NAME)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the DevTools UI string to IDS key mappings.")
    parser.add_argument('--root_gen_dir', required=True,
                        help="The root directory of the output .h and .cc files")
    parser.add_argument('--output_header', required=True,
                        help="Path of the output .h file for the id mappings, relative to root_gen_dir")
    parser.add_argument('--output_cc', required=True,
                        help="Path of the output .cc file for the id mappings, relative to root_gen_dir")
    return parser.parse_args(argv)


def parse_localizable_resource_maps(config: AppConfig) -> Tuple[FrontendStringMap, List[CatalogEntry]]:
    """
    Scan the frontend and parse the catalog.

    Returns:
        The discovered FrontendStringMap and the catalog entries.

    Raises:
        CatalogParseError: If either side cannot be read.
    """
    frontend_strings = scan_frontend_strings(
        config.frontend_root,
        excluded_dirs=config.excluded_dirs,
        show_progress=config.show_progress
    )
    catalog = parse_grd(config.grd_file_path)
    return frontend_strings, catalog


def check_resources(frontend_strings: FrontendStringMap, catalog: List[CatalogEntry],
                    autofix_command: str) -> GateDecision:
    """Reconcile and report. Raise if the build step has to fail."""
    decision = evaluate_result(reconcile(frontend_strings, catalog), autofix_command=autofix_command)
    if not decision.proceed:
        decision.raise_for_status()
    if decision.stale_entries_present:
        # Only strings to add or IDS keys to change fail the build.
        logger.warning(decision.diagnostics)
    return decision


def run(args: argparse.Namespace, config: AppConfig) -> GeneratedArtifacts:
    """Run the whole step. Every fatal condition is raised as a UIStringsError."""
    frontend_strings, catalog = parse_localizable_resource_maps(config)
    check_resources(frontend_strings, catalog, config.autofix_command)
    return generate(
        frontend_strings,
        root_gen_dir=args.root_gen_dir,
        output_header=args.output_header,
        output_cc=args.output_cc,
        ids_header=config.ids_header
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    try:
        config = load_app_config()
    except OSError as e:
        # The logger may be half set up, so report straight to stderr.
        sys.stderr.write(f"Error: Could not set up logging. Reason: {e}\n")
        return 1
    try:
        run(args, config)
    except UnresolvedResourcesError as e:
        logger.error(e.diagnostics)
        return 1
    except UIStringsError as e:
        logger.error("DevTools UI strings step failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
