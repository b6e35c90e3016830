"""
Test data generators for ACF conversion benchmarks.

Creates various ACF documents shaped like Steam files:
- Different sizes (small/large)
- Different nesting depths
- String-heavy content with backslashes and non-ASCII text
"""

import random
import string

# Constants for random data generation
_BACKSLASH_PROBABILITY = 0.1
_NON_ASCII_PROBABILITY = 0.05
_NON_ASCII_CHARS = "äöüßéèñøåçЖЯ名前ゲーム"
_TAB = "\t"


def generate_test_data(data_type: str) -> bytes:
    """Generates ACF test data based on specified type."""
    generators = {
        "small_manifest": _generate_small_manifest,
        "large_manifest": _generate_large_manifest,
        "library_folders": _generate_library_folders,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]().encode("utf-8")


def _member(key: str, value: str, depth: int) -> str:
    return f'{_TAB * depth}"{key}"\t\t"{value}"\n'


def _open(key: str, depth: int) -> str:
    return f'{_TAB * depth}"{key}"\n{_TAB * depth}{{\n'


def _close(depth: int) -> str:
    return f"{_TAB * depth}}}\n"


def _generate_small_manifest() -> str:
    """Generates a small appmanifest (< 1KB) with a few depots."""
    parts = [_open("AppState", 0)]
    for key, value in (
        ("appid", "228980"),
        ("Universe", "1"),
        ("name", "Steamworks Common Redistributables"),
        ("StateFlags", "4"),
        ("installdir", "Steamworks Shared"),
        ("LastUpdated", "1700000000"),
        ("SizeOnDisk", "123456789"),
    ):
        parts.append(_member(key, value, 1))

    parts.append(_open("InstalledDepots", 1))
    for depot in ("228983", "228990"):
        parts.append(_open(depot, 2))
        parts.append(_member("manifest", str(random.getrandbits(63)), 3))
        parts.append(_member("size", str(random.randint(1, 10**9)), 3))
        parts.append(_close(2))
    parts.append(_close(1))
    parts.append(_close(0))
    return "".join(parts)


def _generate_large_manifest() -> str:
    """Generates a large appmanifest (> 10KB) with many depots."""
    parts = [_open("AppState", 0)]
    parts.append(_member("appid", str(random.randint(10, 2_000_000)), 1))
    parts.append(_member("name", _random_string(24), 1))

    parts.append(_open("InstalledDepots", 1))
    for _ in range(200):
        parts.append(_open(str(random.randint(10, 2_000_000)), 2))
        parts.append(_member("manifest", str(random.getrandbits(63)), 3))
        parts.append(_member("size", str(random.randint(1, 10**9)), 3))
        parts.append(_close(2))
    parts.append(_close(1))

    parts.append(_open("UserConfig", 1))
    parts.append(_member("language", random.choice(["english", "german"]), 2))
    parts.append(_close(1))
    parts.append(_close(0))
    return "".join(parts)


def _generate_library_folders() -> str:
    """Generates a libraryfolders.vdf with several libraries and apps."""
    parts = [_open("libraryfolders", 0)]
    for index in range(8):
        parts.append(_open(str(index), 1))
        parts.append(
            _member("path", f"D:\\\\SteamLibrary{index}\\\\{_random_string(6)}", 2)
        )
        parts.append(_member("label", "", 2))
        parts.append(_open("apps", 2))
        for _ in range(50):
            parts.append(
                _member(
                    str(random.randint(10, 2_000_000)),
                    str(random.randint(0, 10**11)),
                    3,
                )
            )
        parts.append(_close(2))
        parts.append(_close(1))
    parts.append(_close(0))
    return "".join(parts)


def _generate_nested_structure() -> str:
    """Generates a deeply nested ACF structure."""

    def create_nested(depth: int, indent: int) -> str:
        if depth <= 0:
            return _member("value", _random_string(10), indent)

        parts = [_member("level", str(depth), indent)]
        for i in range(3):
            parts.append(_open(f"child{i}", indent))
            parts.append(create_nested(depth - 1, indent + 1))
            parts.append(_close(indent))
        return "".join(parts)

    return _open("root", 0) + create_nested(6, 1) + _close(0)


def _generate_string_heavy() -> str:
    """Generates ACF with long values containing backslashes and Unicode."""

    def create_value() -> str:
        chars = []
        for _ in range(80):
            roll = random.random()
            if roll < _BACKSLASH_PROBABILITY:
                chars.append("\\\\")
            elif roll < _BACKSLASH_PROBABILITY + _NON_ASCII_PROBABILITY:
                chars.append(random.choice(_NON_ASCII_CHARS))
            else:
                chars.append(
                    random.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    parts = [_open("strings", 0)]
    for i in range(200):
        parts.append(_member(f"key_{i}", create_value(), 1))
    parts.append(_close(0))
    return "".join(parts)


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
