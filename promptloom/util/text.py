"""
Text versus binary detection.
"""

from typing import Union

from ..constants import DEFAULT_CHARACTER_ENCODING, TEXT_BINARY_RATIO, TEXT_SCAN_CHARS

_ALLOWED_CONTROLS = frozenset({9, 10, 13})


def is_text(content: Union[str, bytes]) -> bool:
    """Return True if the input is likely text, False if likely binary.

    Empty input is text. Any NUL byte makes it binary. Otherwise the first
    512 decoded characters are inspected and the input is binary when 10% or
    more of them are control characters other than tab, LF and CR. Anything
    beyond ASCII counts as printable.
    """
    if isinstance(content, str):
        data = content.encode(DEFAULT_CHARACTER_ENCODING)
    else:
        data = bytes(content)

    if not data:
        return True

    if b"\x00" in data:
        return False

    sample = data.decode(DEFAULT_CHARACTER_ENCODING, errors="replace")[:TEXT_SCAN_CHARS]
    non_printable = sum(
        1 for char in sample
        if ord(char) not in _ALLOWED_CONTROLS and (ord(char) < 32 or ord(char) == 127)
    )
    return non_printable / len(sample) < TEXT_BINARY_RATIO
