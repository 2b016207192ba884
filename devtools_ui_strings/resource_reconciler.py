from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from devtools_ui_strings.errors import CatalogParseError
from devtools_ui_strings.models import CatalogEntry, FrontendStringMap, LocalizableString


@dataclass
class KeyMismatch:
    """An IDS key whose catalog text differs from the text the frontend uses."""
    id_key: str
    catalog_text: str
    source: LocalizableString


@dataclass
class ReconcileResult:
    """The three disjoint diffs between the frontend strings and the catalog."""
    to_add: List[Tuple[str, LocalizableString]] = field(default_factory=list)
    to_modify: List[KeyMismatch] = field(default_factory=list)
    to_remove: List[CatalogEntry] = field(default_factory=list)


def index_catalog(catalog: Iterable[CatalogEntry]) -> Dict[str, CatalogEntry]:
    """
    Index catalog entries by IDS key, keeping catalog order.

    Raises:
        CatalogParseError: If the same IDS key is registered twice.
    """
    indexed: Dict[str, CatalogEntry] = {}
    for entry in catalog:
        if entry.id_key in indexed:
            raise CatalogParseError(
                f"Duplicate IDS key '{entry.id_key}' in '{entry.grdp_path}' "
                f"(already defined in '{indexed[entry.id_key].grdp_path}').",
                path=entry.grdp_path
            )
        indexed[entry.id_key] = entry
    return indexed


def reconcile(discovered: FrontendStringMap, catalog: Iterable[CatalogEntry]) -> ReconcileResult:
    """
    Compare the strings discovered in the frontend against the catalog.

    - to_add: discovered keys with no catalog entry.
    - to_modify: keys in both whose texts differ. The key has to change, not the text,
      because translations are tracked by key.
    - to_remove: catalog keys no longer used by the frontend.

    No deduplication is done: two keys holding equal text are compared independently.

    Args:
        discovered: Ordered mapping of IDS key to the frontend string.
        catalog: Catalog entries parsed from the .grd/.grdp files.

    Returns:
        ReconcileResult with to_add and to_modify in discovered order and
        to_remove in catalog order.
    """
    catalog_by_key = index_catalog(catalog)
    result = ReconcileResult()

    for id_key, localizable in discovered.items():
        entry = catalog_by_key.get(id_key)
        if entry is None:
            result.to_add.append((id_key, localizable))
        elif entry.text != localizable.text:
            result.to_modify.append(KeyMismatch(id_key, entry.text, localizable))

    result.to_remove = [entry for key, entry in catalog_by_key.items() if key not in discovered]
    return result


def _format_locations(localizable: LocalizableString) -> str:
    if not localizable.source_locations:
        return ''
    return ' (found in ' + ', '.join(sorted(localizable.source_locations)) + ')'


def get_and_report_resources_to_add(result: ReconcileResult) -> str:
    """Describe frontend strings missing from the catalog, or return '' when there are none."""
    if not result.to_add:
        return ''
    lines = ["Error: Found string(s) used in the frontend but missing from the .grd/.grdp files:"]
    for id_key, localizable in result.to_add:
        lines.append(f"  {id_key}: {localizable.text!r}{_format_locations(localizable)}")
    return '\n'.join(lines)


def get_and_report_ids_keys_to_modify(result: ReconcileResult) -> str:
    """Describe IDS keys that were reused for a different string, or return ''."""
    if not result.to_modify:
        return ''
    lines = ["Error: Found IDS key(s) whose registered text does not match the frontend string. "
             "Change the key, not the text:"]
    for mismatch in result.to_modify:
        lines.append(
            f"  {mismatch.id_key}: catalog has {mismatch.catalog_text!r}, "
            f"frontend uses {mismatch.source.text!r}{_format_locations(mismatch.source)}"
        )
    return '\n'.join(lines)


def get_and_report_resources_to_remove(result: ReconcileResult) -> str:
    """Describe catalog entries no longer used by the frontend, or return ''."""
    if not result.to_remove:
        return ''
    lines = ["Warning: Found unused message(s) in the .grd/.grdp files:"]
    for entry in result.to_remove:
        location = f" in '{entry.grdp_path}'" if entry.grdp_path else ''
        lines.append(f"  {entry.id_key}: {entry.text!r}{location}")
    return '\n'.join(lines)
