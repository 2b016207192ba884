import logging
import os
import xml.etree.ElementTree as ET
from typing import Dict, List

from devtools_ui_strings.errors import CatalogParseError
from devtools_ui_strings.models import CatalogEntry

logger = logging.getLogger("devtools_ui_strings")

# GRIT keeps leading/trailing whitespace only when the text is wrapped in '''.
_WHITESPACE_QUOTE = "'''"


def _placeholder_text(ph: ET.Element) -> str:
    # <ex> holds an example for translators, not part of the string.
    parts = [ph.text or '']
    for child in ph:
        if child.tag != 'ex':
            parts.append(''.join(child.itertext()))
        parts.append(child.tail or '')
    return ''.join(parts)


def message_text(message: ET.Element) -> str:
    """
    Extract the string registered by a <message>, with <ph> placeholders expanded.

    Args:
        message: The <message> element.

    Returns:
        The message text as the frontend would use it.
    """
    parts = [message.text or '']
    for child in message:
        if child.tag == 'ph':
            parts.append(_placeholder_text(child))
        else:
            parts.append(''.join(child.itertext()))
        parts.append(child.tail or '')

    text = ''.join(parts).strip()
    if len(text) >= 2 * len(_WHITESPACE_QUOTE) and text.startswith(_WHITESPACE_QUOTE) \
            and text.endswith(_WHITESPACE_QUOTE):
        text = text[len(_WHITESPACE_QUOTE):-len(_WHITESPACE_QUOTE)]
    return text


def _load_xml(path: str) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except FileNotFoundError as e:
        raise CatalogParseError(f"Resource file '{path}' not found.", path=path) from e
    except ET.ParseError as e:
        raise CatalogParseError(f"Malformed XML in '{path}': {e}", path=path) from e
    except OSError as e:
        raise CatalogParseError(f"Could not read '{path}'. Reason: {e}", path=path) from e


def _catalog_entry(message: ET.Element, path: str) -> CatalogEntry:
    name = message.get('name')
    if not name:
        raise CatalogParseError(f"Found a <message> without a name in '{path}'.", path=path)
    return CatalogEntry(
        id_key=name,
        text=message_text(message),
        description=message.get('desc', ''),
        grdp_path=path
    )


def parse_grdp_file(grdp_path: str) -> List[CatalogEntry]:
    """
    Parse the <message> elements of a .grdp file.

    Raises:
        CatalogParseError: If the file is missing or malformed, or a message has no name.
    """
    root = _load_xml(grdp_path)
    return [_catalog_entry(message, grdp_path) for message in root.iter('message')]


def parse_grd(grd_path: str) -> List[CatalogEntry]:
    """
    Parse a .grd file and every .grdp part it references.

    Parts are resolved relative to the .grd directory and visited in document order.
    Messages written directly in the .grd are included too.

    Args:
        grd_path: Path to the .grd file.

    Returns:
        All catalog entries, in the order they appear.

    Raises:
        CatalogParseError: On a missing or malformed file, an unnamed message,
            or a duplicated IDS key.
    """
    root = _load_xml(grd_path)
    grd_dir = os.path.dirname(grd_path)

    entries: List[CatalogEntry] = []
    for element in root.iter():
        if element.tag == 'part':
            part_file = element.get('file')
            if not part_file:
                raise CatalogParseError(f"Found a <part> without a file in '{grd_path}'.", path=grd_path)
            part_entries = parse_grdp_file(os.path.join(grd_dir, part_file))
            logger.debug("Parsed %d message(s) from '%s'.", len(part_entries), part_file)
            entries.extend(part_entries)
        elif element.tag == 'message':
            entries.append(_catalog_entry(element, grd_path))

    defined_in: Dict[str, str] = {}
    for entry in entries:
        if entry.id_key in defined_in:
            raise CatalogParseError(
                f"Duplicate IDS key '{entry.id_key}' in '{entry.grdp_path}' "
                f"(already defined in '{defined_in[entry.id_key]}').",
                path=entry.grdp_path
            )
        defined_in[entry.id_key] = entry.grdp_path

    logger.info("Parsed %d message(s) from '%s'.", len(entries), grd_path)
    return entries
