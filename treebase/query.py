"""Parsing helpers for query lines: tokens, conditions and typed values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

_DIGITS = frozenset("0123456789")
_SEPARATORS = frozenset(" ,")
_DROPPED = frozenset("()")
_OPERATOR_CHARS = frozenset("=<>")
_BASE = 37

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _days_in_month(year: int, month: int) -> int:
    if month == 2 and _is_leap(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


@dataclass(frozen=True, order=True)
class Timestamp:
    """A calendar date stored as year, month and day."""

    year: int
    month: int
    day: int

    def key(self) -> int:
        """Return the date packed as ``yyyymmdd`` so it sorts like the date."""
        return self.year * 10000 + self.month * 100 + self.day

    @classmethod
    def from_key(cls, key: int) -> "Timestamp":
        """Unpack a value produced by ``key``."""
        rest, day = divmod(key, 100)
        year, month = divmod(rest, 100)
        return cls(year, month, day)

    def __str__(self) -> str:
        return f"{self.year}/{self.month}/{self.day}"


def _all_digits(text: str) -> bool:
    return all(char in _DIGITS for char in text)


def parse_timestamp(text: str) -> Timestamp:
    """Parse ``yyyy/m/d`` or ``yyyy/mm/d`` (day of one or more digits).

    Raises ValueError when the text is malformed or names no real date.
    """
    if not 8 <= len(text) <= 10:
        raise ValueError(f"invalid timestamp {text!r}")
    year_text = text[:4]
    if not _all_digits(year_text) or text[4] != "/":
        raise ValueError(f"invalid timestamp {text!r}")
    if text[6] == "/":
        month_text, day_text = text[5:6], text[7:]
    elif text[7] == "/":
        month_text, day_text = text[5:7], text[8:]
    else:
        raise ValueError(f"invalid timestamp {text!r}")
    if not (_all_digits(month_text) and _all_digits(day_text)):
        raise ValueError(f"invalid timestamp {text!r}")
    year = parse_integer(year_text)
    month = parse_integer(month_text)
    day = parse_integer(day_text)
    if year <= 0 or not 1 <= month <= 12:
        raise ValueError(f"invalid timestamp {text!r}")
    if not 1 <= day <= _days_in_month(year, month):
        raise ValueError(f"invalid timestamp {text!r}")
    return Timestamp(year, month, day)


def is_integer(text: str) -> bool:
    """Return True when every character is an ASCII digit (also for "")."""
    return _all_digits(text)


def parse_integer(text: str) -> int:
    """Convert a string of ASCII digits to an int; "" gives 0."""
    if not _all_digits(text):
        raise ValueError(f"not an unsigned integer: {text!r}")
    return int(text) if text else 0


def encode_string(text: str) -> int:
    """Pack lowercase letters and digits into an integer, base 37.

    Letters map to 1-26 and digits to 27-36, so the order of the numbers
    follows the length first and then the characters.
    """
    value = 0
    for char in text:
        if "a" <= char <= "z":
            digit = ord(char) - 96
        elif char in _DIGITS:
            digit = ord(char) - 21
        else:
            raise ValueError(f"cannot encode character {char!r}")
        value = value * _BASE + digit
    return value


def decode_string(value: int) -> str:
    """Turn a number made by ``encode_string`` back into its text."""
    if value < 0:
        raise ValueError("encoded strings are never negative")
    chars: list[str] = []
    while value:
        value, digit = divmod(value, _BASE)
        chars.append(chr(digit + 96) if digit < 27 else chr(digit + 21))
    return "".join(reversed(chars))


class TokenizedLine(NamedTuple):
    """Tokens of one query line and the number of comma-separated parts."""

    tokens: list[str]
    size: int


def _expected_count(line: str) -> int:
    count = 1
    for char, following in zip(line, line[1:]):
        if char in _SEPARATORS and following not in _SEPARATORS:
            count += 1
    return count


def _split_words(line: str) -> list[str]:
    words: list[str] = []
    current: list[str] = []
    for char in line:
        if char in _SEPARATORS:
            if current:
                words.append("".join(current))
                current = []
        elif char not in _DROPPED:
            current.append(char)
    if current:
        words.append("".join(current))
    return words


def tokenize(line: str) -> TokenizedLine:
    """Split a query line into tokens.

    Spaces and commas separate tokens and parentheses are dropped. The
    token list is padded with empty strings to the number of word starts
    in the line. After ``WHERE`` the words of each condition are joined,
    so ``age = 5`` becomes ``age=5``; a ``|`` or ``&`` token separates two
    conditions.
    """
    commas = line[:-1].count(",")
    words = _split_words(line)
    expected = _expected_count(line)
    tokens = words + [""] * (expected - len(words))

    where = -1
    joiner = -1
    for i, token in enumerate(tokens):
        if token == "WHERE":
            where = i
        elif token[:1] in ("|", "&"):
            joiner = i
            break

    if where != -1:
        if joiner != -1:
            if len(tokens) - where != 4:
                tokens = tokens[: where + 1] + [
                    "".join(tokens[where + 1 : joiner]),
                    tokens[joiner],
                    "".join(tokens[joiner + 1 :]),
                ]
        elif len(tokens) - where != 2:
            tokens = tokens[: where + 1] + ["".join(tokens[where + 1 :])]
    return TokenizedLine(tokens, commas + 1)


class Condition(NamedTuple):
    """A condition split into column name, operator and operand."""

    column: str
    operator: str
    operand: str


def split_condition(text: str) -> Condition:
    """Split ``column<op>operand`` where ``op`` is made of ``=``, ``<``, ``>``.

    Spaces between the column and operand are skipped. Missing parts come
    back as empty strings.
    """
    index = 0
    length = len(text)
    while index < length and text[index] not in _OPERATOR_CHARS and text[index] != " ":
        index += 1
    column = text[:index]
    start = index
    while index < length and text[index] in _OPERATOR_CHARS:
        index += 1
    operator = text[start:index]
    while index < length and text[index] == " ":
        index += 1
    return Condition(column, operator, text[index:])