"""
Pytest configuration and shared fixtures for acfjson tests.

Provides immutable test data fixtures covering real Steam manifests and
malformed ACF input.
"""

from dataclasses import dataclass
from typing import Any

import pytest

import acfjson


@dataclass(frozen=True)
class AcfTestCase:
    """
    Immutable container for ACF test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: bytes
    expected_output: Any = None
    expected_error: type[Exception] | None = None


def tokens(*items: str | acfjson.AcfToken) -> list[acfjson.AcfToken]:
    """Builds a token list, wrapping plain strings as string tokens."""
    return [
        acfjson.string_token(item) if isinstance(item, str) else item
        for item in items
    ]


APPMANIFEST = b"""\
"AppState"
{
\t"appid"\t\t"228980"
\t"Universe"\t\t"1"
\t"name"\t\t"Steamworks Common Redistributables"
\t"StateFlags"\t\t"4"
\t"installdir"\t\t"Steamworks Shared"
\t"InstalledDepots"
\t{
\t\t"228983"
\t\t{
\t\t\t"manifest"\t\t"8124929965194586177"
\t\t\t"size"\t\t"4"
\t\t}
\t}
\t"UserConfig"
\t{
\t}
}
"""

LIBRARYFOLDERS = b"""\
"libraryfolders"
{
\t"0"
\t{
\t\t"path"\t\t"C:\\\\Program Files (x86)\\\\Steam"
\t\t"label"\t\t""
\t\t"apps"
\t\t{
\t\t\t"228980"\t\t"1234"
\t\t}
\t}
}
"""


@pytest.fixture
def acf_pass_cases() -> list[AcfTestCase]:
    """
    Provides ACF documents that must convert to the given JSON structure.
    """
    return [
        AcfTestCase(
            description="appmanifest with implicit top level",
            input_data=APPMANIFEST,
            expected_output={
                "AppState": {
                    "appid": "228980",
                    "Universe": "1",
                    "name": "Steamworks Common Redistributables",
                    "StateFlags": "4",
                    "installdir": "Steamworks Shared",
                    "InstalledDepots": {
                        "228983": {
                            "manifest": "8124929965194586177",
                            "size": "4",
                        }
                    },
                    "UserConfig": {},
                }
            },
        ),
        AcfTestCase(
            description="libraryfolders with doubled backslashes",
            input_data=LIBRARYFOLDERS,
            expected_output={
                "libraryfolders": {
                    "0": {
                        "path": "C:\\\\Program Files (x86)\\\\Steam",
                        "label": "",
                        "apps": {"228980": "1234"},
                    }
                }
            },
        ),
        AcfTestCase(
            description="braced top level on one line",
            input_data=b'{"a" "1" "b" {"c" "2"}}',
            expected_output={"a": "1", "b": {"c": "2"}},
        ),
        AcfTestCase(
            description="empty input",
            input_data=b"",
            expected_output={},
        ),
        AcfTestCase(
            description="non-ASCII keys and values",
            input_data='"名前" "Grüße 🎮"'.encode(),
            expected_output={"名前": "Grüße 🎮"},
        ),
        AcfTestCase(
            description="Unicode whitespace between tokens",
            input_data='\u3000"k"\u00a0"v"\u2028'.encode(),
            expected_output={"k": "v"},
        ),
    ]


@pytest.fixture
def acf_fail_cases() -> list[AcfTestCase]:
    """
    Provides ACF documents that must fail conversion in strict mode.
    """
    return [
        AcfTestCase(
            "unterminated key", b'{"a', None, acfjson.UnterminatedStringError
        ),
        AcfTestCase(
            "unquoted key", b"{a}", None, acfjson.UnexpectedCharacterError
        ),
        AcfTestCase(
            "JSON colon", b'{"a": "1"}', None, acfjson.UnexpectedCharacterError
        ),
        AcfTestCase(
            "invalid UTF-8", b'{"\xff\xfe"}', None, acfjson.InvalidEncodingError
        ),
        AcfTestCase(
            "truncated UTF-8", b'{"\xe2\x82', None, acfjson.InvalidEncodingError
        ),
        AcfTestCase(
            "closing brace as value",
            b'{"a" }',
            None,
            acfjson.UnexpectedTokenError,
        ),
        AcfTestCase(
            "missing value", b'"a"', None, acfjson.UnexpectedEofError
        ),
        AcfTestCase(
            "missing closing brace",
            b'{"a" "1"',
            None,
            acfjson.UnexpectedEofError,
        ),
        AcfTestCase(
            "object as key", b'{{"a" "1"}}', None, acfjson.UnexpectedTokenError
        ),
        AcfTestCase(
            "closing brace first", b"}", None, acfjson.UnexpectedTokenError
        ),
        AcfTestCase(
            "stray closing brace at implicit top level",
            b'"a" "1" }',
            None,
            acfjson.UnexpectedTokenError,
        ),
    ]
