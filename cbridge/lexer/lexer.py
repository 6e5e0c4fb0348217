"""
cbridge Lexer - turns C source text into a flat token list

Deliberately forgiving: anything it does not understand is skipped, so
tokenize() always returns and always ends with exactly one EOF token.
What got skipped is kept in ``warnings``; pass strict=True to raise on
the first one instead.
"""

import logging
from typing import List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, OPERATOR_CHARS,
    DELIMITER_CHARS, TWO_CHAR_OPERATORS
)
from .errors import (
    LexerError, LexerWarning, create_invalid_character_warning,
    create_unterminated_string_warning, create_unterminated_comment_warning
)

logger = logging.getLogger(__name__)


class Lexer:
    """
    Lexical analyzer for the supported C subset.

    Converts source text into tokens, tracking line and column for each one.
    """

    def __init__(self, source: str, filename: str = "<input>", strict: bool = False):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for diagnostics
            strict: Raise LexerError instead of recording a warning
        """
        self.source = source
        self.filename = filename
        self.strict = strict
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.warnings: List[LexerWarning] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens ending with a single EOF token

        Raises:
            LexerError: Only in strict mode
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []
        self.warnings = []

        while self.pos < len(self.source):
            self._skip_whitespace()
            if self.pos >= len(self.source):
                break

            char = self.source[self.pos]

            if char == '/' and self._peek() == '/':
                self._skip_line_comment()
            elif char == '/' and self._peek() == '*':
                self._skip_block_comment()
            elif self._is_identifier_start(char):
                self._read_identifier()
            elif char.isdigit() and char.isascii():
                self._read_number()
            elif char == '"' or char == "'":
                self._read_string(char)
            elif char in OPERATOR_CHARS:
                self._read_operator()
            elif char in DELIMITER_CHARS:
                self._add_token(TokenType.DELIMITER, char, self._location())
                self._advance()
            elif char == '\n':
                self._add_token(TokenType.NEWLINE, '\n', self._location())
                self._advance()
            else:
                self._report(create_invalid_character_warning(char, self._location()))
                self._advance()

        self.tokens.append(Token(TokenType.EOF, None, self._location()))

        logger.debug(
            "Tokenized %s: %d tokens, %d warnings",
            self.filename, len(self.tokens), len(self.warnings)
        )
        return self.tokens

    def _read_identifier(self):
        """Read an identifier or reserved word."""
        location = self._location()
        start = self.pos

        while self.pos < len(self.source) and self._is_identifier_continue(self.source[self.pos]):
            self._advance()

        lexeme = self.source[start:self.pos]
        token_type = TokenType.KEYWORD if lexeme in KEYWORDS else TokenType.IDENTIFIER
        self._add_token(token_type, lexeme, location)

    def _read_number(self):
        """Read digits with at most one decimal point.

        A second point ends the number; it is picked up as a delimiter.
        """
        location = self._location()
        start = self.pos
        has_decimal = False

        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == '.' and not has_decimal:
                has_decimal = True
            elif not (char.isdigit() and char.isascii()):
                break
            self._advance()

        self._add_token(TokenType.NUMBER, self.source[start:self.pos], location)

    def _read_string(self, quote: str):
        """Read a string or character literal.

        Escapes are kept verbatim: a backslash and the character after it are
        both copied into the lexeme.
        """
        location = self._location()
        self._advance()  # opening quote
        parts = []

        while self.pos < len(self.source) and self.source[self.pos] != quote:
            if self.source[self.pos] == '\\' and self.pos + 1 < len(self.source):
                parts.append(self.source[self.pos])
                self._advance()
            parts.append(self.source[self.pos])
            self._advance()

        if self.pos < len(self.source):
            self._advance()  # closing quote
        else:
            self._report(create_unterminated_string_warning(quote, location))

        self._add_token(TokenType.STRING, ''.join(parts), location)

    def _read_operator(self):
        """Read a one or two character operator."""
        location = self._location()
        lexeme = self.source[self.pos]
        self._advance()

        if self.pos < len(self.source) and lexeme + self.source[self.pos] in TWO_CHAR_OPERATORS:
            lexeme += self.source[self.pos]
            self._advance()

        self._add_token(TokenType.OPERATOR, lexeme, location)

    def _skip_whitespace(self):
        """Skip whitespace other than newlines."""
        while (self.pos < len(self.source) and
               self.source[self.pos].isspace() and
               self.source[self.pos] != '\n'):
            self._advance()

    def _skip_line_comment(self):
        """Skip a // comment, leaving the newline in place."""
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    def _skip_block_comment(self):
        """Skip a /* */ comment. An unclosed one swallows the rest of the input."""
        location = self._location()
        self._advance_by(2)

        while self.pos < len(self.source):
            if self.source.startswith('*/', self.pos):
                self._advance_by(2)
                return
            self._advance()

        self._report(create_unterminated_comment_warning(location))

    def _is_identifier_start(self, char: str) -> bool:
        return char == '_' or (char.isascii() and char.isalpha())

    def _is_identifier_continue(self, char: str) -> bool:
        return char == '_' or (char.isascii() and char.isalnum())

    def _add_token(self, token_type: TokenType, lexeme: str, location: SourceLocation):
        self.tokens.append(Token(token_type, lexeme, location))

    def _report(self, warning: LexerWarning):
        """Record a tolerated problem, or raise it in strict mode."""
        if self.strict:
            raise LexerError.from_warning(warning)
        logger.debug("Lexer skipped input: %s at %s", warning.message, warning.diagnostic.location)
        self.warnings.append(warning)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def _peek(self, offset: int = 1) -> Optional[str]:
        """Peek at a character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return None

    def has_warnings(self) -> bool:
        """Check if the lexer skipped anything."""
        return len(self.warnings) > 0


def tokenize(source: str, filename: str = "<input>") -> List[Token]:
    """
    Tokenize a source string.

    Never raises: unknown characters are dropped and unterminated comments
    or literals run to the end of the input.

    Args:
        source: Source code string
        filename: Filename for diagnostics

    Returns:
        List of tokens ending with one EOF token
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str, strict: bool = False) -> List[Token]:
    """
    Tokenize a source file.

    Raises:
        LexerError: In strict mode only
        OSError: If the file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return Lexer(source, filepath, strict=strict).tokenize()
