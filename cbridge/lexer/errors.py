"""
Diagnostics for the cbridge lexer.

The lexer is total: it never stops on bad input. Everything it tolerates is
recorded as a LexerWarning so tools can show it, and strict mode turns the
first warning into a LexerError instead.
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base class for diagnostics (errors, warnings, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        code = f"[{self.code}] " if self.code else ""
        result = f"{severity_prefix}: {code}{self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised by a strict lexer on the first tolerated problem.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
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

    @classmethod
    def from_warning(cls, warning: "LexerWarning") -> "LexerError":
        d = warning.diagnostic
        return cls(d.message, d.location, d.code, d.help_text, d.suggestions)

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexerWarning:
    """
    Represents something the lexer skipped or cut short.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
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

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L011": "Unterminated block comment",
}

# Characters that usually sneak in from word processors, with the ASCII
# spelling the C subset understands
ASCII_ALTERNATIVES = {
    '“': ['"'], '”': ['"'],
    '‘': ["'"], '’': ["'"],
    '–': ['-'], '—': ['-'], '−': ['-'],
    '×': ['*'], '÷': ['/'],
    '≤': ['<='], '≥': ['>='], '≠': ['!='],
}


def suggest_ascii_alternatives(char: str) -> List[str]:
    """Suggest ASCII replacements for look-alike Unicode characters."""
    return ASCII_ALTERNATIVES.get(char, [])


# Helper functions for creating common diagnostics

def create_invalid_character_warning(char: str, location: SourceLocation) -> LexerWarning:
    """Create a warning for a character the lexer skipped."""
    suggestions = suggest_ascii_alternatives(char)

    if suggestions:
        help_text = f"Did you mean {' or '.join(repr(s) for s in suggestions)}?"
    elif char.isprintable():
        help_text = f"The character '{char}' is not part of the supported C subset and was ignored."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) was ignored."

    return LexerWarning(
        message=f"Invalid character: {char!r}",
        location=location,
        code="L001",
        help_text=help_text,
        suggestions=suggestions
    )


def create_unterminated_string_warning(quote: str, location: SourceLocation) -> LexerWarning:
    """Create a warning for a string or character literal that runs to end of input."""
    return LexerWarning(
        message="Unterminated string literal",
        location=location,
        code="L002",
        help_text=f"Literals must be closed with a matching {quote} quote; the rest of the input was taken as its text.",
        suggestions=[f"Add a closing {quote} quote", "Check for an unescaped quote inside the literal"]
    )


def create_unterminated_comment_warning(location: SourceLocation) -> LexerWarning:
    """Create a warning for a block comment without its closing */."""
    return LexerWarning(
        message="Unterminated block comment",
        location=location,
        code="L011",
        help_text="The comment was never closed, so everything after '/*' was ignored.",
        suggestions=["Add a closing '*/'"]
    )
