import unittest

from data_stream_name import (
    INVALID_CHARACTERS,
    INVALID_START_CHARACTERS,
    DataStreamName,
    check_data_stream_name,
    validate_data_stream_name,
)
from datastream_errors import (
    ConfigError,
    InvalidCase,
    InvalidCharacters,
    InvalidStart,
    InvalidType,
    MissingParameter,
    ReservedName,
    TooLong,
)


class TestDataStreamName(unittest.TestCase):
    def test_missing_name(self):
        for value in (None, ''):
            with self.assertRaises(MissingParameter) as ctx:
                validate_data_stream_name(value)
            self.assertEqual(str(ctx.exception), "'data_stream_name' parameter is required")

    def test_non_string_name(self):
        for value in (123, 1.5, ['foo'], {'name': 'foo'}):
            with self.subTest(value=value):
                with self.assertRaises(InvalidType) as ctx:
                    validate_data_stream_name(value)
                self.assertIsInstance(ctx.exception, ConfigError)
                self.assertEqual(str(ctx.exception), f"'data_stream_name' must be a string: <{value!r}>")

    def test_invalid_uppercase(self):
        with self.assertRaises(InvalidCase) as ctx:
            validate_data_stream_name('TEST')
        self.assertEqual(str(ctx.exception), "'data_stream_name' must be lowercase only: <TEST>")

    def test_uppercase_wins_over_other_violations(self):
        for name in ('TEST/', '-Test', 'A' * 300, 'Foo#bar'):
            self.assertIsInstance(check_data_stream_name(name), InvalidCase, name)

    def test_invalid_characters(self):
        label = ','.join(INVALID_CHARACTERS)
        self.assertEqual(len(INVALID_CHARACTERS), 12)
        for c in INVALID_CHARACTERS:
            name = f"test{c}"
            with self.subTest(char=c):
                with self.assertRaises(InvalidCharacters) as ctx:
                    validate_data_stream_name(name)
                self.assertEqual(
                    str(ctx.exception),
                    f"'data_stream_name' must not contain invalid characters {label}: <{name}>",
                )
                self.assertEqual(ctx.exception.forbidden, INVALID_CHARACTERS)

    def test_invalid_start_characters(self):
        label = ','.join(INVALID_START_CHARACTERS)
        for c in INVALID_START_CHARACTERS:
            name = f"{c}test"
            with self.subTest(char=c):
                with self.assertRaises(InvalidStart) as ctx:
                    validate_data_stream_name(name)
                self.assertEqual(str(ctx.exception), f"'data_stream_name' must not start with {label}: <{name}>")

    def test_invalid_dots(self):
        for name in ('.', '..'):
            with self.subTest(name=name):
                with self.assertRaises(ReservedName) as ctx:
                    validate_data_stream_name(name)
                self.assertEqual(str(ctx.exception), f"'data_stream_name' must not be . or ..: <{name}>")

    def test_invalid_length(self):
        name = 'a' * 256
        with self.assertRaises(TooLong) as ctx:
            validate_data_stream_name(name)
        self.assertEqual(str(ctx.exception), f"'data_stream_name' must not be longer than 255 bytes: <{name}>")

    def test_length_counts_bytes(self):
        # 128 two-byte characters is 256 bytes
        self.assertIsInstance(check_data_stream_name('é' * 128), TooLong)
        self.assertIsNone(check_data_stream_name('é' * 127))

    def test_max_length_is_valid(self):
        self.assertEqual(validate_data_stream_name('a' * 255), 'a' * 255)

    def test_valid_name(self):
        name = validate_data_stream_name('logs-app.default')
        self.assertIsInstance(name, DataStreamName)
        self.assertEqual(name, 'logs-app.default')
        self.assertIsNone(check_data_stream_name('foo'))

    def test_errors_are_config_errors(self):
        for name in ('', 'X', 'a b', '_a', '.', 'a' * 256):
            self.assertIsInstance(check_data_stream_name(name), ConfigError)

    def test_repeatable(self):
        first = check_data_stream_name('a|b')
        second = check_data_stream_name('a|b')
        self.assertEqual(str(first), str(second))


if __name__ == '__main__':
    unittest.main()
