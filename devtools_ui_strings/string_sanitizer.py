from typing import List

from devtools_ui_strings.errors import EncodingError

# Named escapes understood by every C++ compiler.
_NAMED_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\a': '\\a',
    '\b': '\\b',
    '\f': '\\f',
    '\v': '\\v',
}


def _is_surrogate(char: str) -> bool:
    return 0xD800 <= ord(char) <= 0xDFFF


def sanitize_string_into_cpp_format(text: str) -> str:
    """
    Escape a frontend string so it can be embedded inside a double-quoted C++ literal.

    Control characters without a named escape are written as three-digit octal
    escapes, which never absorb a following digit the way hex escapes do. A '?'
    that follows another '?' is escaped so no trigraph can form.

    Args:
        text: The string as it appears in the frontend.

    Returns:
        The escaped string, without surrounding quotes.

    Raises:
        EncodingError: If the text contains NUL (the table stores NUL-terminated
            strings) or a lone surrogate (not encodable as UTF-8).
    """
    escaped: List[str] = []
    previous = ''
    for position, char in enumerate(text):
        if char == '\0':
            raise EncodingError(text, position, "NUL would truncate the C string")
        if _is_surrogate(char):
            raise EncodingError(text, position, "lone surrogate cannot be encoded as UTF-8")

        if char in _NAMED_ESCAPES:
            escaped.append(_NAMED_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            escaped.append('\\%03o' % ord(char))
        elif char == '?' and previous == '?':
            escaped.append('\\?')
        else:
            escaped.append(char)
        previous = char
    return ''.join(escaped)


# Short name used by the table generator.
sanitize = sanitize_string_into_cpp_format
