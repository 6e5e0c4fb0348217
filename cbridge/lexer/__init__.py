"""
cbridge Lexer Package

Tokenizer for the supported C subset.

Key Features:
- Total: never fails, always ends with one EOF token
- Line/column tracking for every token
- Comments dropped, newlines kept as explicit tokens
- Skipped input recorded as warnings, optional strict mode
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, TYPE_KEYWORDS
from .lexer import Lexer, tokenize, tokenize_file
from .errors import Diagnostic, LexerError, LexerWarning

__all__ = [
    "Lexer",
    "tokenize",
    "tokenize_file",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "TYPE_KEYWORDS",
    "Diagnostic",
    "LexerError",
    "LexerWarning",
]
