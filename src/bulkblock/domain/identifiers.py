"""Account identifier normalization and well-formedness rules.

Operators paste one account name per line. The normalizer turns that text
into an ordered list of canonical candidates; the rules below decide whether
a candidate is a syntactically legal account name.

INVARIANT: normalize() is pure. Order and duplicates are preserved.
"""

from __future__ import annotations

import ipaddress
import re
import unicodedata
from dataclasses import dataclass

DEFAULT_MAX_LENGTH = 255
DEFAULT_INVALID_CHARS = "@:>="

# Characters that can never appear in a page title, hence never in a name.
_ILLEGAL_TITLE_CHARS = frozenset("#<>[]|{}")
_LINE_SPLIT = re.compile(r"\r\n|\r|\n")
_WHITESPACE_RUN = re.compile(r"[\s_]{2,}")


def canonicalize(name: str) -> str:
    """Upper-case the first character, leaving the rest untouched.

    Examples:
        >>> canonicalize("alice")
        'Alice'
        >>> canonicalize("eXample")
        'EXample'
    """
    if not name:
        return name
    return name[0].upper() + name[1:]


def normalize(raw_text: str) -> list[str]:
    """Turn multi-line operator input into canonical identifier candidates.

    Trims the whole text, splits on any line break, trims each line,
    drops blank lines, and canonicalizes the first character.

    Examples:
        >>> normalize("  alice\\nBob  \\n\\ncharlie\\n")
        ['Alice', 'Bob', 'Charlie']
    """
    lines = _LINE_SPLIT.split(raw_text.strip())
    return [canonicalize(line.strip()) for line in lines if line.strip()]


def _is_ip_address(name: str) -> bool:
    try:
        ipaddress.ip_address(name)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class UsernameRules:
    """Default well-formedness oracle for account names.

    A name is valid when it is non-empty, already canonical, within
    *max_length* UTF-8 bytes, not an IP address, free of title-illegal
    and configured invalid characters, free of control characters, and
    without leading, trailing or repeated whitespace/underscores.
    """

    max_length: int = DEFAULT_MAX_LENGTH
    invalid_chars: str = DEFAULT_INVALID_CHARS

    def is_valid(self, name: str) -> bool:
        if not name or name != canonicalize(name):
            return False
        if len(name.encode("utf-8")) > self.max_length:
            return False
        if _is_ip_address(name):
            return False
        if name != name.strip(" _") or _WHITESPACE_RUN.search(name):
            return False
        for char in name:
            if char in _ILLEGAL_TITLE_CHARS or char in self.invalid_chars:
                return False
            if unicodedata.category(char).startswith("C"):
                return False
        return True
