import logging
from dataclasses import dataclass

from devtools_ui_strings.errors import UnresolvedAdditions, UnresolvedModifications
from devtools_ui_strings.resource_reconciler import (
    ReconcileResult,
    get_and_report_ids_keys_to_modify,
    get_and_report_resources_to_add,
    get_and_report_resources_to_remove
)

DEFAULT_AUTOFIX_COMMAND = (
    'node third_party/devtools-frontend/src/scripts/check_localizable_resources.js --autofix'
)

logger = logging.getLogger("devtools_ui_strings")


@dataclass
class GateDecision:
    """Whether generation may proceed, plus the diagnostics to show the operator."""
    proceed: bool
    diagnostics: str
    has_additions: bool = False
    has_modifications: bool = False
    stale_entries_present: bool = False

    def raise_for_status(self) -> None:
        """Raise the matching error when the build step has to fail."""
        if self.has_additions:
            raise UnresolvedAdditions(self.diagnostics)
        if self.has_modifications:
            raise UnresolvedModifications(self.diagnostics)


def evaluate(
        to_add_report: str,
        to_modify_report: str,
        to_remove_report: str,
        autofix_command: str = DEFAULT_AUTOFIX_COMMAND
) -> GateDecision:
    """
    Decide whether the build may continue given the three diff reports.

    Only additions and key mismatches block the build. Unused catalog entries are
    reported but never fail it.

    Args:
        to_add_report: Report of strings to add, '' when there are none.
        to_modify_report: Report of IDS keys to change, '' when there are none.
        to_remove_report: Report of unused catalog entries, '' when there are none.
        autofix_command: Command the operator can run to fix the catalog.

    Returns:
        The GateDecision for this run.
    """
    reports = [report for report in (to_add_report, to_modify_report, to_remove_report) if report]
    diagnostics = ''
    if reports:
        diagnostics = ''.join(f"{report}\n" for report in reports)
        diagnostics += f"\nThe errors are potentially fixable with `{autofix_command}`"

    has_additions = bool(to_add_report)
    has_modifications = bool(to_modify_report)
    return GateDecision(
        proceed=not (has_additions or has_modifications),
        diagnostics=diagnostics,
        has_additions=has_additions,
        has_modifications=has_modifications,
        stale_entries_present=bool(to_remove_report)
    )


def evaluate_result(result: ReconcileResult, autofix_command: str = DEFAULT_AUTOFIX_COMMAND) -> GateDecision:
    """Run the three report functions on a ReconcileResult and evaluate them."""
    decision = evaluate(
        get_and_report_resources_to_add(result),
        get_and_report_ids_keys_to_modify(result),
        get_and_report_resources_to_remove(result),
        autofix_command=autofix_command
    )
    logger.debug(
        "Gate decision: proceed=%s (add=%d, modify=%d, remove=%d)",
        decision.proceed, len(result.to_add), len(result.to_modify), len(result.to_remove)
    )
    return decision
