"""
printf/scanf format strings.

Format strings reach the generators as raw literal text: escapes such as
``\\n`` are still two characters. This module finds the conversion markers
in that text, classifies them through an explicit table, and rewrites the
text for Java's ``printf`` and Python's ``str.format``.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ConversionKind(Enum):
    """What a conversion marker reads or prints."""
    INTEGER = "integer"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    CHAR = "char"
    PERCENT = "percent"


# %[flags][width][.precision][length]letter
CONVERSION_PATTERN = re.compile(
    r"%(?P<flags>[-+ #0]*)"
    r"(?P<width>\d+|\*)?"
    r"(?:\.(?P<precision>\d+|\*))?"
    r"(?P<length>hh|h|ll|l|L|z|j|t)?"
    r"(?P<letter>[diouxXeEfFgGcs%])"
)

CONVERSION_KINDS = {
    "d": ConversionKind.INTEGER,
    "i": ConversionKind.INTEGER,
    "u": ConversionKind.INTEGER,
    "x": ConversionKind.INTEGER,
    "X": ConversionKind.INTEGER,
    "o": ConversionKind.INTEGER,
    "f": ConversionKind.FLOAT,
    "F": ConversionKind.FLOAT,
    "e": ConversionKind.FLOAT,
    "E": ConversionKind.FLOAT,
    "g": ConversionKind.FLOAT,
    "G": ConversionKind.FLOAT,
    "s": ConversionKind.STRING,
    "c": ConversionKind.CHAR,
    "%": ConversionKind.PERCENT,
}

# Used when a scanf target has no marker of its own
DEFAULT_INPUT_KIND = ConversionKind.INTEGER

NEWLINE_ESCAPE = "\\n"

# Letters that keep their meaning in a Python format spec
PYTHON_TYPED_LETTERS = frozenset("xXoeEgG")

JAVA_LETTERS = {"i": "d", "u": "d", "F": "f"}


@dataclass(frozen=True)
class Conversion:
    """One conversion marker found in a format string."""
    text: str
    flags: str
    width: Optional[str]
    precision: Optional[str]
    length: Optional[str]
    letter: str
    start: int
    end: int

    @property
    def kind(self) -> ConversionKind:
        kind = CONVERSION_KINDS[self.letter]
        if kind == ConversionKind.FLOAT and self.length in ("l", "L"):
            return ConversionKind.DOUBLE
        return kind

    @property
    def is_percent(self) -> bool:
        return self.letter == "%"


def find_conversions(fmt: str) -> List[Conversion]:
    """All conversion markers in order, '%%' included."""
    return [
        Conversion(
            text=match.group(0),
            flags=match.group("flags"),
            width=match.group("width"),
            precision=match.group("precision"),
            length=match.group("length"),
            letter=match.group("letter"),
            start=match.start(),
            end=match.end(),
        )
        for match in CONVERSION_PATTERN.finditer(fmt)
    ]


def value_conversions(fmt: str) -> List[Conversion]:
    """Markers that consume an argument, in order."""
    return [c for c in find_conversions(fmt) if not c.is_percent]


def has_value_conversions(fmt: str) -> bool:
    return bool(value_conversions(fmt))


def input_kind(fmt: Optional[str], position: int) -> ConversionKind:
    """Kind of the scanf marker at ``position``, or the integer default."""
    if fmt is None:
        return DEFAULT_INPUT_KIND
    conversions = value_conversions(fmt)
    if position < len(conversions):
        return conversions[position].kind
    return DEFAULT_INPUT_KIND


def has_trailing_newline(fmt: str) -> bool:
    return fmt.endswith(NEWLINE_ESCAPE) and not fmt.endswith("\\" + NEWLINE_ESCAPE)


def strip_trailing_newline(fmt: str) -> str:
    if has_trailing_newline(fmt):
        return fmt[:-len(NEWLINE_ESCAPE)]
    return fmt


def _rewrite(fmt: str, replace) -> str:
    parts = []
    last = 0
    for conversion in find_conversions(fmt):
        parts.append(fmt[last:conversion.start])
        parts.append(replace(conversion))
        last = conversion.end
    parts.append(fmt[last:])
    return "".join(parts)


def collapse_percents(fmt: str) -> str:
    """Turn '%%' into '%', leaving every other marker alone."""
    return _rewrite(fmt, lambda c: "%" if c.is_percent else c.text)


def _java_conversion(conversion: Conversion) -> str:
    if conversion.is_percent:
        return "%%"
    letter = JAVA_LETTERS.get(conversion.letter, conversion.letter)
    width = conversion.width or ""
    precision = f".{conversion.precision}" if conversion.precision else ""
    # Java's formatter has no length modifiers
    return f"%{conversion.flags}{width}{precision}{letter}"


def to_java_format(fmt: str) -> str:
    """Rewrite a C format for Java's String.format/printf."""
    return _rewrite(fmt, _java_conversion)


def _python_spec(conversion: Conversion) -> str:
    if "*" in ((conversion.width or "") + (conversion.precision or "")):
        return ""

    flags = conversion.flags
    spec = ""
    if "-" in flags:
        spec += "<"
    if "+" in flags:
        spec += "+"
    elif " " in flags:
        spec += " "
    if "#" in flags:
        spec += "#"
    if "0" in flags and "-" not in flags:
        spec += "0"
    if conversion.width:
        spec += conversion.width
    if conversion.precision:
        spec += f".{conversion.precision}"

    if conversion.letter in PYTHON_TYPED_LETTERS:
        spec += conversion.letter
    elif spec and conversion.kind == ConversionKind.INTEGER:
        spec += "d"
    elif spec and conversion.kind in (ConversionKind.FLOAT, ConversionKind.DOUBLE):
        spec += conversion.letter
    return spec


def _python_field(conversion: Conversion) -> str:
    if conversion.is_percent:
        return "%"
    spec = _python_spec(conversion)
    return "{:" + spec + "}" if spec else "{}"


def to_python_template(fmt: str) -> str:
    """Rewrite a C format as a str.format template.

    Literal braces are doubled so they survive formatting.
    """
    escaped = fmt.replace("{", "{{").replace("}", "}}")
    return _rewrite(escaped, _python_field)
