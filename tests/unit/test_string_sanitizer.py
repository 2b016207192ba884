import unittest

from devtools_ui_strings.errors import EncodingError
from devtools_ui_strings.string_sanitizer import sanitize, sanitize_string_into_cpp_format

_SIMPLE_ESCAPES = {
    'n': '\n', 'r': '\r', 't': '\t', 'a': '\a', 'b': '\b', 'f': '\f', 'v': '\v',
    '\\': '\\', '"': '"', "'": "'", '?': '?',
}


def read_cpp_literal(body: str) -> str:
    """Read the body of a C++ narrow string literal back the way a compiler would."""
    result = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == '"':
            raise AssertionError(f"Unescaped quote at position {i} in {body!r}")
        if char == '?' and body[i + 1:i + 2] == '?':
            raise AssertionError(f"Trigraph-prone '??' at position {i} in {body!r}")
        if char != '\\':
            result.append(char)
            i += 1
            continue
        i += 1
        escape = body[i]
        if escape in '01234567':
            digits = escape
            i += 1
            while len(digits) < 3 and i < len(body) and body[i] in '01234567':
                digits += body[i]
                i += 1
            result.append(chr(int(digits, 8)))
            continue
        if escape not in _SIMPLE_ESCAPES:
            raise AssertionError(f"Unknown escape \\{escape} in {body!r}")
        result.append(_SIMPLE_ESCAPES[escape])
        i += 1
    return ''.join(result)


class TestStringSanitizer(unittest.TestCase):

    def test_plain_text_is_unchanged(self):
        self.assertEqual(sanitize('Hello'), 'Hello')

    def test_quotes_and_backslashes(self):
        text = 'He said "hi"\\'
        sanitized = sanitize(text)
        self.assertEqual(sanitized, 'He said \\"hi\\"\\\\')
        self.assertEqual(read_cpp_literal(sanitized), text)

    def test_named_control_escapes(self):
        self.assertEqual(sanitize('a\nb\tc\rd'), 'a\\nb\\tc\\rd')

    def test_other_control_characters_use_three_digit_octal(self):
        # The digit after the escape must not be absorbed into it.
        self.assertEqual(sanitize('\x1b1'), '\\0331')
        self.assertEqual(sanitize('\x7f'), '\\177')
        self.assertEqual(read_cpp_literal(sanitize('\x01' + '7')), '\x017')

    def test_repeated_question_marks_cannot_form_trigraphs(self):
        sanitized = sanitize('What??!')
        self.assertNotIn('??', sanitized)
        self.assertEqual(read_cpp_literal(sanitized), 'What??!')
        self.assertEqual(read_cpp_literal(sanitize('????=')), '????=')

    def test_single_quote_and_question_mark_untouched(self):
        self.assertEqual(sanitize("Don't?"), "Don't?")

    def test_non_ascii_is_kept_verbatim(self):
        self.assertEqual(sanitize('Größe ✓ 日本語'), 'Größe ✓ 日本語')

    def test_nul_raises_encoding_error(self):
        with self.assertRaises(EncodingError) as ctx:
            sanitize('ab\0c')
        self.assertEqual(ctx.exception.position, 2)
        self.assertEqual(ctx.exception.text, 'ab\0c')

    def test_lone_surrogate_raises_encoding_error(self):
        with self.assertRaises(EncodingError):
            sanitize('bad \ud800 text')

    def test_encoding_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            sanitize('\0')

    def test_long_name_is_the_same_function(self):
        self.assertIs(sanitize, sanitize_string_into_cpp_format)

    def test_round_trip_over_every_printable_and_control_character(self):
        text = ''.join(chr(code) for code in range(1, 0x80)) + 'é中\U0001f600'
        self.assertEqual(read_cpp_literal(sanitize(text)), text)

    def test_distinct_inputs_sanitize_differently(self):
        inputs = ['\\n', '\n', '\\\n', '"', '\\"', '\x01', '\\001', '??', '?\\?']
        outputs = {sanitize(text) for text in inputs}
        self.assertEqual(len(outputs), len(inputs))


if __name__ == '__main__':
    unittest.main()
