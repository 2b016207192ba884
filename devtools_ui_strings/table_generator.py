import asyncio
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from typing import List, Optional

from devtools_ui_strings.errors import ArtifactWriteError
from devtools_ui_strings.models import FrontendStringMap
from devtools_ui_strings.string_sanitizer import sanitize

DO_NOT_EDIT_BANNER = (
    '// This file is automatically generated by '
    '//third_party/devtools-frontend/src/scripts/build/generate_devtools_ui_strings.py. Do not edit.'
)
LOCALIZED_STRING_HEADER = 'chrome/browser/ui/webui/localized_string.h'
DEFAULT_IDS_HEADER = 'third_party/devtools-frontend/src/front_end/langpacks/devtools_ui_strings.h'

logger = logging.getLogger("devtools_ui_strings")


@dataclass
class GeneratedArtifacts:
    header_path: str
    definition_path: str
    header_content: str
    definition_content: str


def include_guard_for(header_path: str) -> str:
    """Build the include guard for a header, e.g. a/b_c.h -> A_B_C_H_."""
    return re.sub(r'[^A-Za-z0-9]', '_', header_path.replace(os.sep, '/')).upper() + '_'


def render_header(final_map: FrontendStringMap, output_header: str) -> str:
    """Render the declaration artifact: the table size and the extern declaration."""
    guard = include_guard_for(output_header)
    return f"""{DO_NOT_EDIT_BANNER}

#ifndef {guard}
#define {guard}

#include "{LOCALIZED_STRING_HEADER}"

namespace devtools {{

constexpr unsigned int kLocalizedStringsSize = {len(final_map)};
extern const LocalizedString kLocalizedStrings[kLocalizedStringsSize];

}} // namespace devtools

#endif // {guard}
"""


def render_definition(
        final_map: FrontendStringMap,
        output_header: str,
        ids_header: str = DEFAULT_IDS_HEADER
) -> str:
    """
    Render the definition artifact, one {"text", IDS_KEY} entry per string in map order.

    Raises:
        EncodingError: If a string cannot be written as a C++ literal.
    """
    mappings = ''.join(
        f'  {{"{sanitize(localizable.text)}", {id_key}}},\n'
        for id_key, localizable in final_map.items()
    )
    return f"""{DO_NOT_EDIT_BANNER}

#include "{output_header}"

#include "{ids_header}"

namespace devtools {{

const LocalizedString kLocalizedStrings[] = {{
{mappings}}};

}} // namespace devtools
"""


def _write_temp_sibling(path: str, content: str) -> str:
    """Write content next to path under a temporary name and return that name."""
    directory = os.path.dirname(path) or '.'
    os.makedirs(directory, exist_ok=True)
    with tempfile.NamedTemporaryFile(
            mode='w', encoding='utf-8', newline='\n', dir=directory,
            prefix=os.path.basename(path) + '.', suffix='.tmp', delete=False) as temp_f:
        temp_path = temp_f.name
        try:
            temp_f.write(content)
        except BaseException:
            temp_f.close()
            os.remove(temp_path)
            raise
    return temp_path


def _discard(temp_paths: List[Optional[str]]) -> None:
    for temp_path in temp_paths:
        if temp_path and os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError as e:
                logger.warning("Could not remove temporary file '%s': %s", temp_path, e)


async def write_artifacts_async(outputs: List[tuple]) -> None:
    """
    Write every (path, content) pair, all or nothing.

    The files are first written to temporary siblings concurrently. They replace the
    real outputs only once every write has succeeded; otherwise the temporary files
    are removed and ArtifactWriteError is raised for the first failing path.
    """
    results = await asyncio.gather(
        *(asyncio.to_thread(_write_temp_sibling, path, content) for path, content in outputs),
        return_exceptions=True
    )
    temp_paths = [None if isinstance(r, BaseException) else r for r in results]

    for (path, _), outcome in zip(outputs, results):
        if isinstance(outcome, BaseException):
            _discard(temp_paths)
            raise ArtifactWriteError(path, outcome) from outcome

    for index, ((path, _), temp_path) in enumerate(zip(outputs, temp_paths)):
        try:
            os.replace(temp_path, path)
        except OSError as e:
            _discard(temp_paths[index:])
            raise ArtifactWriteError(path, e) from e
        logger.info("Wrote '%s'.", path)


def generate(
        final_map: FrontendStringMap,
        root_gen_dir: str,
        output_header: str,
        output_cc: str,
        ids_header: str = DEFAULT_IDS_HEADER
) -> GeneratedArtifacts:
    """
    Generate the {text, IDS_KEY} table as a .h/.cc pair under root_gen_dir.

    Both files are rendered before anything is written, so an EncodingError leaves
    the previous outputs untouched.

    Args:
        final_map: Ordered mapping of IDS key to frontend string; only call this once
            the build gate allows it.
        root_gen_dir: Root directory of the generated files.
        output_header: Header path relative to root_gen_dir, also used in #include.
        output_cc: Definition path relative to root_gen_dir.
        ids_header: Header defining the IDS_ constants.

    Returns:
        GeneratedArtifacts describing what was written.

    Raises:
        EncodingError: If a string cannot be written as a C++ literal.
        ArtifactWriteError: If either file could not be written.
    """
    artifacts = GeneratedArtifacts(
        header_path=os.path.join(root_gen_dir, output_header),
        definition_path=os.path.join(root_gen_dir, output_cc),
        header_content=render_header(final_map, output_header),
        definition_content=render_definition(final_map, output_header, ids_header)
    )
    asyncio.run(write_artifacts_async([
        (artifacts.header_path, artifacts.header_content),
        (artifacts.definition_path, artifacts.definition_content),
    ]))
    logger.info("Generated %d localized string mapping(s).", len(final_map))
    return artifacts
