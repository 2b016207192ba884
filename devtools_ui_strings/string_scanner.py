import json
import logging
import os
import re
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from tqdm import tqdm

from devtools_ui_strings.errors import CatalogParseError
from devtools_ui_strings.models import FrontendStringMap, LocalizableString, ids_key_for

logger = logging.getLogger("devtools_ui_strings")

DEFAULT_EXCLUDED_DIRS = ['node_modules', 'third_party', 'langpacks', 'test_runner']

# ls`...` tagged templates without ${} substitutions.
_LS_TEMPLATE_RE = re.compile(r'\bls`((?:[^`\\$]|\\[\s\S]|\$(?!\{))*)`')

# Localization calls whose first argument is a string literal.
_UI_STRING_CALL_RE = re.compile(
    r'\b(?:Common\.UIString|Common\.UIStringFormat|UI\.formatLocalized)\(\s*'
    r"(?:'((?:[^'\\\n]|\\[\s\S])*)'"
    r'|"((?:[^"\\\n]|\\[\s\S])*)"'
    r'|`((?:[^`\\$]|\\[\s\S]|\$(?!\{))*)`)'
)

_SIMPLE_JS_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0',
}
_JS_ESCAPE_RE = re.compile(r'\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])')


def decode_js_string(body: str) -> str:
    """
    Decode the escape sequences of a JS string or template literal body.

    Args:
        body: The literal's content, without the surrounding quotes.

    Returns:
        The string value the JS engine would see.

    Raises:
        ValueError: For a code point escape above U+10FFFF or an unpaired surrogate.
    """
    def replace(match: re.Match) -> str:
        escape = match.group(1)
        if escape.startswith('u{'):
            code_point = int(escape[2:-1], 16)
            if code_point > 0x10FFFF:
                raise ValueError(f"Code point escape '\\{escape}' is out of range")
            return chr(code_point)
        if escape.startswith('u') and len(escape) == 5:
            return chr(int(escape[1:], 16))
        if escape.startswith('x') and len(escape) == 3:
            return chr(int(escape[1:], 16))
        if escape in ('\n', '\r\n', '\r', '\u2028', '\u2029'):
            # Line continuation.
            return ''
        return _SIMPLE_JS_ESCAPES.get(escape, escape)

    decoded = _JS_ESCAPE_RE.sub(replace, body)
    # Escapes such as \uD83D\uDE00 decode to a UTF-16 surrogate pair; join it into one character.
    try:
        return decoded.encode('utf-16-le', 'surrogatepass').decode('utf-16-le')
    except UnicodeDecodeError as e:
        raise ValueError(f"Unpaired surrogate escape in {body!r}") from e


def extract_strings_from_js(content: str) -> List[Tuple[str, int]]:
    """
    Find the localizable strings in JS source.

    Returns:
        (text, line number) pairs in source order.
    """
    found = []
    for regex in (_LS_TEMPLATE_RE, _UI_STRING_CALL_RE):
        for match in regex.finditer(content):
            body = next(group for group in match.groups() if group is not None)
            line_number = content.count('\n', 0, match.start()) + 1
            found.append((match.start(), decode_js_string(body), line_number))
    found.sort(key=lambda item: item[0])
    return [(text, line_number) for _, text, line_number in found]


def _descriptor_strings(descriptor: Dict[str, Any]) -> Iterator[str]:
    title = descriptor.get('title')
    if isinstance(title, str):
        yield title
    for option in descriptor.get('options') or []:
        if isinstance(option, dict):
            for field_name in ('title', 'text'):
                if isinstance(option.get(field_name), str):
                    yield option[field_name]
    tags = descriptor.get('tags')
    if isinstance(tags, str):
        for tag in tags.split(','):
            yield tag.strip()
    for setting in descriptor.get('settings') or []:
        if isinstance(setting, dict):
            yield from _descriptor_strings(setting)


def extract_strings_from_module_json(module: Dict[str, Any]) -> List[str]:
    """Collect the localizable fields of a module.json descriptor."""
    strings = list(_descriptor_strings(module))
    for extension in module.get('extensions') or []:
        if isinstance(extension, dict):
            strings.extend(_descriptor_strings(extension))
    return strings


def find_frontend_files(frontend_root: str, excluded_dirs: Iterable[str]) -> List[str]:
    """List the .js and module.json files under frontend_root, in sorted order."""
    excluded = set(excluded_dirs)
    files = []
    for dirpath, dirnames, filenames in os.walk(frontend_root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            if filename.endswith('.js') or filename == 'module.json':
                files.append(os.path.join(dirpath, filename))
    return files


def _add_string(strings: FrontendStringMap, text: str, location: str) -> None:
    if not text:
        return
    id_key = ids_key_for(text)
    if id_key not in strings:
        strings[id_key] = LocalizableString(text=text)
    strings[id_key].source_locations.add(location)


def scan_frontend_strings(
        frontend_root: str,
        excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
        show_progress: bool = False
) -> FrontendStringMap:
    """
    Scan the frontend tree and map each localizable string to its IDS key.

    The first occurrence of a string fixes its position in the map; later
    occurrences only add source locations.

    Args:
        frontend_root: Root of the DevTools frontend sources.
        excluded_dirs: Directory names that are not scanned.
        show_progress: Whether to show a tqdm progress bar.

    Returns:
        The ordered FrontendStringMap.

    Raises:
        CatalogParseError: If a file cannot be read, a module.json is not valid JSON,
            or a JS string literal holds an invalid escape.
    """
    if not os.path.isdir(frontend_root):
        raise CatalogParseError(f"Frontend root '{frontend_root}' does not exist.", path=frontend_root)

    files = find_frontend_files(frontend_root, excluded_dirs)
    strings: FrontendStringMap = {}
    for file_path in tqdm(files, desc="Scanning frontend", unit="file", disable=not show_progress):
        relative_path = os.path.relpath(file_path, frontend_root).replace(os.sep, '/')
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise CatalogParseError(f"Could not read '{file_path}'. Reason: {e}", path=file_path) from e

        if os.path.basename(file_path) == 'module.json':
            try:
                module = json.loads(content)
            except json.JSONDecodeError as e:
                raise CatalogParseError(f"Invalid JSON in '{file_path}': {e}", path=file_path) from e
            if not isinstance(module, dict):
                raise CatalogParseError(f"'{file_path}' must contain a JSON object.", path=file_path)
            for text in extract_strings_from_module_json(module):
                _add_string(strings, text, relative_path)
        else:
            try:
                found = extract_strings_from_js(content)
            except ValueError as e:
                raise CatalogParseError(f"Invalid string literal in '{file_path}': {e}", path=file_path) from e
            for text, line_number in found:
                _add_string(strings, text, f"{relative_path}:{line_number}")

    logger.info("Found %d localizable string(s) in %d file(s) under '%s'.", len(strings), len(files), frontend_root)
    return strings
