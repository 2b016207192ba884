import logging
import os
import textwrap

import pytest

from devtools_ui_strings.models import ids_key_for


def write_file(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(textwrap.dedent(content).lstrip())


def grdp_content(messages):
    """Build a .grdp body from (id_key, text) pairs."""
    lines = ['<?xml version="1.0" encoding="utf-8"?>', '<grit-part>']
    for id_key, text in messages:
        lines.append(f'  <message name="{id_key}" desc="">')
        lines.append(f'    {text}')
        lines.append('  </message>')
    lines.append('</grit-part>')
    return '\n'.join(lines) + '\n'


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep the package logger from writing to the console during tests."""
    logger = logging.getLogger("devtools_ui_strings")
    previous_handlers = list(logger.handlers)
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    yield logger
    logger.handlers[:] = previous_handlers


@pytest.fixture
def frontend_tree(tmp_path):
    """
    A small DevTools frontend with two modules, a .grd and one .grdp per module.

    The catalog matches the sources exactly, so the build gate lets it through.
    """
    root = tmp_path / "front_end"
    write_file(str(root / "elements" / "ElementsPanel.js"), """
        Elements.ElementsPanel = class {
          constructor() {
            this._title = ls`Elements`;
            this._hint = Common.UIString('Select an element');
          }
        };
    """)
    write_file(str(root / "elements" / "module.json"), """
        {
          "extensions": [
            {"type": "view", "id": "elements", "title": "Elements", "tags": "DOM, CSS"}
          ]
        }
    """)
    write_file(str(root / "console" / "ConsoleView.js"), """
        Console.ConsoleView = class {
          clear() {
            return Common.UIString("Console was cleared");
          }
        };
    """)

    elements_messages = [
        (ids_key_for('Elements'), 'Elements'),
        (ids_key_for('Select an element'), 'Select an element'),
        (ids_key_for('DOM'), 'DOM'),
        (ids_key_for('CSS'), 'CSS'),
    ]
    console_messages = [
        (ids_key_for('Console was cleared'), 'Console was cleared'),
    ]
    langpacks = root / "langpacks"
    write_file(str(langpacks / "elements_strings.grdp"), grdp_content(elements_messages))
    write_file(str(langpacks / "console_strings.grdp"), grdp_content(console_messages))
    write_file(str(langpacks / "devtools_ui_strings.grd"), """
        <?xml version="1.0" encoding="UTF-8"?>
        <grit latest_public_release="0" current_release="1">
          <release seq="1">
            <messages fallback_to_english="true">
              <part file="console_strings.grdp" />
              <part file="elements_strings.grdp" />
            </messages>
          </release>
        </grit>
    """)

    return {
        "frontend_root": str(root),
        "grd_file_path": str(langpacks / "devtools_ui_strings.grd"),
        "elements_grdp": str(langpacks / "elements_strings.grdp"),
        "console_grdp": str(langpacks / "console_strings.grdp"),
        "root_gen_dir": str(tmp_path / "gen"),
    }
