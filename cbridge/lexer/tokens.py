"""
Token definitions for the cbridge lexer.

The C subset only needs a handful of coarse token categories: the parser
decides everything else from the lexeme text, so keywords, operators and
delimiters are grouped by kind instead of getting one token type each.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """Token categories produced by the lexer."""

    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"             # both "..." and '...' literals
    OPERATOR = "OPERATOR"
    DELIMITER = "DELIMITER"
    NEWLINE = "NEWLINE"           # filtered out by the parser
    EOF = "EOF"


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for diagnostics and for the line/column shown next to each token.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    ``lexeme`` is the raw source text (quotes stripped for string and
    character literals) and is ``None`` only for the EOF token.
    """
    type: TokenType
    lexeme: Optional[str]
    location: SourceLocation

    def __str__(self) -> str:
        if self.lexeme is None:
            return self.type.name
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.location!r})"

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a reserved word."""
        return self.type == TokenType.KEYWORD

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER

    @property
    def is_literal(self) -> bool:
        """Check if this token is a numeric or string literal."""
        return self.type in {TokenType.NUMBER, TokenType.STRING}

    def to_dict(self) -> dict:
        """Plain representation for token viewers and JSON dumps."""
        return {
            "type": self.type.value,
            "value": self.lexeme,
            "line": self.location.line,
            "column": self.location.column,
        }


# Lookup tables used by the lexer and parser

# Type names that start a declaration or function definition
TYPE_KEYWORDS = frozenset({
    "int", "float", "double", "char", "void", "bool", "long", "short",
})

KEYWORDS = frozenset({
    # Types
    "int", "float", "double", "char", "void", "bool", "long", "short",
    "signed", "unsigned",

    # Control flow
    "if", "else", "while", "for", "do", "switch", "case", "default",
    "break", "continue", "return", "goto",

    # I/O statements handled by dedicated nodes
    "printf", "scanf",

    # Storage classes and qualifiers
    "const", "static", "extern", "register", "auto", "volatile",
    "struct", "union", "enum", "typedef", "sizeof",
})

OPERATOR_CHARS = "+-*/%=<>!&|^~"

DELIMITER_CHARS = "(){}[];,#."

# Two-character operators, matched greedily after the first character
TWO_CHAR_OPERATORS = frozenset({
    "==", "!=", "<=", ">=",
    "++", "--",
    "&&", "||",
    "+=", "-=", "*=", "/=", "%=",
    "<<", ">>",
})

ASSIGNMENT_OPERATORS = frozenset({"=", "+=", "-=", "*=", "/="})

INCREMENT_OPERATORS = frozenset({"++", "--"})
