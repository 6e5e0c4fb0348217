"""
Diagnostics for the cbridge parser.

The parser never stops on malformed input: tokens it cannot place are
skipped and reported as ParseWarning. A strict parser raises ParseError
for the first of them instead.
"""

from typing import Optional, List

from ..lexer.tokens import Token, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised by a strict parser on the first skipped input.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @classmethod
    def from_warning(cls, warning: "ParseWarning") -> "ParseError":
        d = warning.diagnostic
        return cls(d.message, d.location, warning.token, d.code, d.help_text, d.suggestions)

    def __str__(self) -> str:
        return str(self.diagnostic)


class ParseWarning:
    """
    Represents input the parser skipped without stopping.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P008": "Malformed function parameter",
    "P013": "Malformed include directive",
    "P020": "Nesting too deep",
}

# Reserved words the subset tokenizes but has no statement for
UNSUPPORTED_KEYWORDS = {
    "do": "Rewrite the do/while loop as a while loop",
    "switch": "Rewrite the switch as an if/else if chain",
    "case": "Rewrite the switch as an if/else if chain",
    "default": "Rewrite the switch as an if/else if chain",
    "break": "Restructure the loop condition instead of using break",
    "continue": "Restructure the loop body instead of using continue",
    "goto": "Replace goto with structured control flow",
    "struct": "Structures are not supported; use separate variables",
    "union": "Unions are not supported",
    "enum": "Replace the enum with int constants",
    "typedef": "Use the underlying type name directly",
}


def _describe(token: Token) -> str:
    if token.lexeme is None:
        return "end of input"
    return f"{token.type.name.lower()} '{token.lexeme}'"


# Helper functions for creating common parser diagnostics

def create_skipped_token_warning(token: Token) -> ParseWarning:
    """Create a warning for a token that cannot start a statement or operand."""
    suggestions = []
    if token.lexeme in UNSUPPORTED_KEYWORDS:
        suggestions.append(UNSUPPORTED_KEYWORDS[token.lexeme])

    return ParseWarning(
        message=f"Unexpected {_describe(token)}, skipped",
        location=token.location,
        token=token,
        code="P001",
        help_text="The token does not start any construct of the supported C subset and produced no output.",
        suggestions=suggestions
    )


def create_malformed_parameter_warning(token: Token) -> ParseWarning:
    """Create a warning for a token skipped inside a parameter list."""
    return ParseWarning(
        message=f"Malformed parameter near {_describe(token)}, skipped",
        location=token.location,
        token=token,
        code="P008",
        help_text="Each parameter must be a type keyword followed by a name.",
        suggestions=["Write parameters as 'int a, float b'"]
    )


def create_malformed_include_warning(token: Token) -> ParseWarning:
    """Create a warning for a '#' that is not followed by a usable include."""
    return ParseWarning(
        message=f"Malformed include directive near {_describe(token)}",
        location=token.location,
        token=token,
        code="P013",
        help_text="Only '#include <name>' and '#include \"name\"' are understood.",
        suggestions=["Write the directive as '#include <stdio.h>'"]
    )


def create_nesting_too_deep_warning(token: Token, limit: int) -> ParseWarning:
    """Create a warning for a construct nested past the parser's limit."""
    return ParseWarning(
        message=f"Nesting deeper than {limit} levels at {_describe(token)}, skipped",
        location=token.location,
        token=token,
        code="P020",
        help_text="Parentheses, argument lists, blocks, statement bodies and prefix operators count as one level each.",
        suggestions=["Split the expression or the statement into smaller helper functions"]
    )
