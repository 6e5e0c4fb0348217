"""
cbridge Recursive Descent Parser

One method per grammar rule. Expressions are parsed by precedence climbing
through one method per binary level, each folding left so that operators
of the same level associate to the left.

The parser is total: tokens that cannot start a statement or an operand
are skipped (and reported as warnings), every dispatch path consumes at
least one token, and parse() therefore always terminates with a Program.
"""

import logging
from contextlib import contextmanager
from typing import Callable, FrozenSet, List, Optional

from ..lexer.tokens import (
    Token, TokenType, SourceLocation, TYPE_KEYWORDS,
    ASSIGNMENT_OPERATORS, INCREMENT_OPERATORS
)
from .ast_nodes import (
    ASTNode, Program, Include, Function, Parameter, Variable, Assignment,
    IfStatement, WhileLoop, ForLoop, ReturnStatement, PrintfStatement,
    ScanfStatement, Block, FunctionCall, BinaryExpression, UnaryExpression,
    Literal, LiteralType, Identifier, Expression, SourceSpan
)
from .errors import (
    ParseError, ParseWarning, create_skipped_token_warning,
    create_malformed_parameter_warning, create_malformed_include_warning,
    create_nesting_too_deep_warning
)

logger = logging.getLogger(__name__)


# Binary operator levels, lowest precedence first
LOGICAL_OR_OPERATORS = frozenset({"||"})
LOGICAL_AND_OPERATORS = frozenset({"&&"})
EQUALITY_OPERATORS = frozenset({"==", "!="})
RELATIONAL_OPERATORS = frozenset({"<", ">", "<=", ">="})
ADDITIVE_OPERATORS = frozenset({"+", "-"})
MULTIPLICATIVE_OPERATORS = frozenset({"*", "/", "%"})

UNARY_OPERATORS = frozenset({"&", "-", "!"})

# Parentheses, call argument lists, blocks, statement bodies and prefix
# operators each add one level. Deeper input is skipped with a warning
# so that neither the parser nor the generators recurse without bound.
MAX_NESTING_DEPTH = 40


class Parser:
    """
    Recursive descent parser for the supported C subset.

    NEWLINE tokens are dropped up front; everything else is read with a
    single token of lookahead.
    """

    def __init__(self, tokens: List[Token], strict: bool = False):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer
            strict: Raise ParseError instead of recording a warning
        """
        self.tokens = [token for token in tokens if token.type != TokenType.NEWLINE]
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            location = self.tokens[-1].location if self.tokens else SourceLocation("<input>", 1, 1, 0)
            self.tokens.append(Token(TokenType.EOF, None, location))
        self.strict = strict
        self.current = 0
        self.depth = 0
        self.warnings: List[ParseWarning] = []

    def parse(self) -> Program:
        """
        Parse the token list into a Program.

        Returns:
            Program whose body holds the top-level nodes in source order

        Raises:
            ParseError: Only in strict mode
        """
        self.current = 0
        self.depth = 0
        self.warnings = []
        start = self._peek()
        body = []

        while not self._is_at_end():
            node = self._parse_statement()
            if node is not None:
                body.append(node)

        program = Program(body=body, span=self._span(start))
        logger.debug(
            "Parsed %d top-level nodes from %d tokens, %d warnings",
            len(body), len(self.tokens), len(self.warnings)
        )
        return program

    # ========================================================================
    # Statements
    # ========================================================================

    def _parse_statement(self) -> Optional[ASTNode]:
        """Dispatch on the leading token. Always consumes at least one token."""
        token = self._peek()

        if self._check(TokenType.DELIMITER, "#"):
            return self._parse_include()
        if self._check(TokenType.DELIMITER, "{"):
            return self._parse_block()

        if token.is_keyword:
            if token.lexeme in TYPE_KEYWORDS:
                return self._parse_declaration()
            if token.lexeme == "if":
                return self._parse_if_statement()
            if token.lexeme == "while":
                return self._parse_while_loop()
            if token.lexeme == "for":
                return self._parse_for_loop()
            if token.lexeme == "return":
                return self._parse_return_statement()
            if token.lexeme == "printf":
                return self._parse_printf_statement()
            if token.lexeme == "scanf":
                return self._parse_scanf_statement()

        if token.is_identifier:
            return self._parse_identifier_statement()

        self._advance()
        if not (token.type == TokenType.DELIMITER and token.lexeme == ";"):
            self._report(create_skipped_token_warning(token))
        return None

    def _parse_include(self) -> Optional[Include]:
        """Parse '#include <name>' or '#include "name"'.

        The bracketed form joins every token up to '>' on the same line,
        so '<stdio.h>' gives 'stdio.h'.
        """
        hash_token = self._advance()

        if not self._check(TokenType.IDENTIFIER, "include"):
            self._report(create_malformed_include_warning(self._peek()))
            return None
        self._advance()

        if self._check(TokenType.STRING):
            library = self._advance().lexeme
            return Include(library=library, span=self._span(hash_token))

        if self._match(TokenType.OPERATOR, "<"):
            parts = []
            while (not self._is_at_end()
                   and self._peek().line == hash_token.line
                   and not self._check(TokenType.OPERATOR, ">")):
                parts.append(self._advance().lexeme)
            if self._match(TokenType.OPERATOR, ">"):
                return Include(library="".join(parts), span=self._span(hash_token))

        self._report(create_malformed_include_warning(self._peek()))
        return None

    def _parse_declaration(self) -> Optional[ASTNode]:
        """Parse a variable declaration or a function definition."""
        type_token = self._advance()

        if not self._check(TokenType.IDENTIFIER):
            self._report(create_skipped_token_warning(type_token))
            return None
        name = self._advance().lexeme

        if self._check(TokenType.DELIMITER, "("):
            return self._parse_function(type_token, name)

        value = None
        if self._match(TokenType.OPERATOR, "="):
            value = self._parse_expression()
        self._match(TokenType.DELIMITER, ";")

        return Variable(
            data_type=type_token.lexeme,
            name=name,
            value=value,
            span=self._span(type_token)
        )

    def _parse_function(self, type_token: Token, name: str) -> Function:
        """Parse the parameter list and body after 'type name'."""
        self._advance()  # (
        parameters = self._parse_parameters()

        if self._check(TokenType.DELIMITER, "{"):
            body = self._parse_block().body
        else:
            # Prototype
            body = []
            self._match(TokenType.DELIMITER, ";")

        return Function(
            return_type=type_token.lexeme,
            name=name,
            parameters=parameters,
            body=body,
            span=self._span(type_token)
        )

    def _parse_parameters(self) -> List[Parameter]:
        parameters = []

        # f(void) declares no parameters
        if self._check(TokenType.KEYWORD, "void") and self._peek_next().lexeme == ")":
            self._advance()

        while not self._is_at_end() and not self._check(TokenType.DELIMITER, ")"):
            if self._match(TokenType.DELIMITER, ","):
                continue

            token = self._peek()
            if (token.type == TokenType.KEYWORD and token.lexeme in TYPE_KEYWORDS
                    and self._peek_next().type == TokenType.IDENTIFIER):
                type_name = self._advance().lexeme
                parameters.append(Parameter(type_name=type_name, name=self._advance().lexeme))
            else:
                self._report(create_malformed_parameter_warning(self._advance()))

        self._match(TokenType.DELIMITER, ")")
        return parameters

    def _parse_block(self) -> Block:
        """Parse '{' statements '}'. A missing '}' ends the block at end of input."""
        open_brace = self._advance()
        body = []

        with self._nested() as allowed:
            if not allowed:
                self._report(create_nesting_too_deep_warning(open_brace, MAX_NESTING_DEPTH))
                self._skip_balanced("{", "}")
                return Block(body=body, span=self._span(open_brace))

            while not self._is_at_end() and not self._check(TokenType.DELIMITER, "}"):
                node = self._parse_statement()
                if node is not None:
                    body.append(node)

        self._match(TokenType.DELIMITER, "}")
        return Block(body=body, span=self._span(open_brace))

    def _parse_if_statement(self) -> IfStatement:
        """Parse an if statement with its else if / else chain.

        The else clause is claimed by the innermost if still being parsed,
        which resolves the dangling else to the nearest if. An else if chain
        is read in a loop and nested afterwards, so long chains do not nest
        the parser.
        """
        clauses = []
        if_token = self._advance()
        clauses.append((if_token, self._parse_condition(), self._parse_branch()))

        else_branch = None
        while self._match(TokenType.KEYWORD, "else"):
            if self._check(TokenType.KEYWORD, "if"):
                if_token = self._advance()
                clauses.append((if_token, self._parse_condition(), self._parse_branch()))
            else:
                else_branch = self._parse_branch()
                break

        for if_token, condition, then_branch in reversed(clauses):
            else_branch = IfStatement(
                condition=condition,
                then_branch=then_branch,
                else_branch=else_branch,
                span=self._span(if_token)
            )
        return else_branch

    def _parse_while_loop(self) -> WhileLoop:
        while_token = self._advance()
        condition = self._parse_condition()
        body = self._parse_branch()
        return WhileLoop(condition=condition, body=body, span=self._span(while_token))

    def _parse_for_loop(self) -> ForLoop:
        """Parse 'for (init; condition; update) body'. Every clause is optional."""
        for_token = self._advance()
        self._match(TokenType.DELIMITER, "(")

        init = None
        if self._check(TokenType.KEYWORD) and self._peek().lexeme in TYPE_KEYWORDS:
            init = self._parse_declaration()
        elif self._check(TokenType.IDENTIFIER):
            init = self._parse_identifier_statement()
        else:
            self._match(TokenType.DELIMITER, ";")

        condition = None
        if not self._check(TokenType.DELIMITER, ";"):
            condition = self._parse_expression()
        self._match(TokenType.DELIMITER, ";")

        update = None
        if not self._is_at_end() and not self._check(TokenType.DELIMITER, ")"):
            update = self._parse_for_update()
        self._match(TokenType.DELIMITER, ")")

        body = self._parse_branch()

        return ForLoop(
            init=init,
            condition=condition,
            update=update,
            body=body,
            span=self._span(for_token)
        )

    def _parse_for_update(self) -> Optional[ASTNode]:
        """Parse i++, i--, ++i, --i, a compound assignment or a plain expression."""
        token = self._peek()

        if (token.type == TokenType.OPERATOR and token.lexeme in INCREMENT_OPERATORS
                and self._peek_next().type == TokenType.IDENTIFIER):
            self._advance()
            name = self._advance().lexeme
            return Assignment(identifier=name, operator=token.lexeme, span=self._span(token))

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_statement()

        return self._parse_expression()

    def _parse_return_statement(self) -> ReturnStatement:
        return_token = self._advance()

        value = None
        if not self._is_at_end() and not self._check(TokenType.DELIMITER, ";"):
            value = self._parse_expression()
        self._match(TokenType.DELIMITER, ";")

        return ReturnStatement(value=value, span=self._span(return_token))

    def _parse_printf_statement(self) -> PrintfStatement:
        printf_token = self._advance()
        arguments = self._parse_arguments()
        self._match(TokenType.DELIMITER, ";")
        return PrintfStatement(arguments=arguments, span=self._span(printf_token))

    def _parse_scanf_statement(self) -> ScanfStatement:
        scanf_token = self._advance()
        arguments = self._parse_arguments()
        self._match(TokenType.DELIMITER, ";")
        return ScanfStatement(arguments=arguments, span=self._span(scanf_token))

    def _parse_identifier_statement(self) -> Optional[ASTNode]:
        """Parse a statement that starts with an identifier.

        The token after the identifier decides the form, so nothing has to
        be re-read: assignment, increment, call, or a plain expression.
        """
        name_token = self._peek()
        following = self._peek_next()

        if following.type == TokenType.OPERATOR and following.lexeme in ASSIGNMENT_OPERATORS:
            self._advance_by(2)
            value = self._parse_expression()
            self._match(TokenType.DELIMITER, ";")
            return Assignment(
                identifier=name_token.lexeme,
                operator=following.lexeme,
                value=value,
                span=self._span(name_token)
            )

        if following.type == TokenType.OPERATOR and following.lexeme in INCREMENT_OPERATORS:
            self._advance_by(2)
            self._match(TokenType.DELIMITER, ";")
            return Assignment(
                identifier=name_token.lexeme,
                operator=following.lexeme,
                span=self._span(name_token)
            )

        if following.type == TokenType.DELIMITER and following.lexeme == "(":
            self._advance()
            arguments = self._parse_arguments()
            self._match(TokenType.DELIMITER, ";")
            return FunctionCall(
                name=name_token.lexeme,
                arguments=arguments,
                span=self._span(name_token)
            )

        expression = self._parse_expression()
        self._match(TokenType.DELIMITER, ";")
        return expression

    def _parse_condition(self) -> Optional[Expression]:
        """Parse '(' expression ')'. Missing parentheses are tolerated."""
        self._match(TokenType.DELIMITER, "(")
        condition = self._parse_expression()
        self._match(TokenType.DELIMITER, ")")
        return condition

    def _parse_branch(self) -> Optional[ASTNode]:
        """Parse the single statement governed by if, else, while or for."""
        if self._is_at_end():
            return None

        with self._nested() as allowed:
            if not allowed:
                self._report(create_nesting_too_deep_warning(self._peek(), MAX_NESTING_DEPTH))
                self._skip_statement()
                return None
            return self._parse_statement()

    def _parse_arguments(self) -> List[Expression]:
        """Parse a parenthesized, comma separated expression list."""
        arguments = []
        if not self._check(TokenType.DELIMITER, "("):
            return arguments
        open_paren = self._advance()

        with self._nested() as allowed:
            if not allowed:
                self._report(create_nesting_too_deep_warning(open_paren, MAX_NESTING_DEPTH))
                self._skip_balanced("(", ")")
                return arguments

            while not self._is_at_end() and not self._check(TokenType.DELIMITER, ")"):
                if self._match(TokenType.DELIMITER, ","):
                    continue
                argument = self._parse_expression()
                if argument is not None:
                    arguments.append(argument)

        self._match(TokenType.DELIMITER, ")")
        return arguments

    # ========================================================================
    # Expressions
    # ========================================================================

    def _parse_expression(self) -> Optional[Expression]:
        return self._parse_logical_or()

    def _parse_logical_or(self) -> Optional[Expression]:
        return self._parse_binary_level(LOGICAL_OR_OPERATORS, self._parse_logical_and)

    def _parse_logical_and(self) -> Optional[Expression]:
        return self._parse_binary_level(LOGICAL_AND_OPERATORS, self._parse_equality)

    def _parse_equality(self) -> Optional[Expression]:
        return self._parse_binary_level(EQUALITY_OPERATORS, self._parse_relational)

    def _parse_relational(self) -> Optional[Expression]:
        return self._parse_binary_level(RELATIONAL_OPERATORS, self._parse_additive)

    def _parse_additive(self) -> Optional[Expression]:
        return self._parse_binary_level(ADDITIVE_OPERATORS, self._parse_multiplicative)

    def _parse_multiplicative(self) -> Optional[Expression]:
        return self._parse_binary_level(MULTIPLICATIVE_OPERATORS, self._parse_unary)

    def _parse_binary_level(
        self,
        operators: FrozenSet[str],
        operand: Callable[[], Optional[Expression]]
    ) -> Optional[Expression]:
        """Parse operand (op operand)* and fold it to the left."""
        start = self._peek()
        left = operand()

        while self._check(TokenType.OPERATOR) and self._peek().lexeme in operators:
            operator = self._advance().lexeme
            right = operand()
            left = BinaryExpression(
                left=left,
                operator=operator,
                right=right,
                span=self._span(start)
            )

        return left

    def _parse_unary(self) -> Optional[Expression]:
        """Parse prefix &, - and !, which nest: '!-x', '&x'.

        The operators are collected first and wrapped around the operand
        innermost first.
        """
        operators = []
        while self._check(TokenType.OPERATOR) and self._peek().lexeme in UNARY_OPERATORS:
            operators.append(self._advance())

        with self._nested(len(operators)) as allowed:
            if not allowed:
                self._report(create_nesting_too_deep_warning(operators[0], MAX_NESTING_DEPTH))
                self._parse_primary()
                return None
            expression = self._parse_primary()

        for token in reversed(operators):
            expression = UnaryExpression(operator=token.lexeme, operand=expression, span=self._span(token))
        return expression

    def _parse_primary(self) -> Optional[Expression]:
        """Parse a literal, identifier, call or parenthesized expression.

        Any other token is consumed and yields no operand.
        """
        if self._is_at_end():
            return None
        token = self._advance()

        if token.type == TokenType.NUMBER:
            literal_type = LiteralType.FLOAT if "." in token.lexeme else LiteralType.INT
            return Literal(value=token.lexeme, literal_type=literal_type, span=self._span(token))

        if token.type == TokenType.STRING:
            return Literal(value=token.lexeme, literal_type=LiteralType.STRING, span=self._span(token))

        if token.type == TokenType.IDENTIFIER:
            if self._check(TokenType.DELIMITER, "("):
                arguments = self._parse_arguments()
                return FunctionCall(name=token.lexeme, arguments=arguments, span=self._span(token))
            return Identifier(name=token.lexeme, span=self._span(token))

        if token.type == TokenType.DELIMITER and token.lexeme == "(":
            with self._nested() as allowed:
                if not allowed:
                    self._report(create_nesting_too_deep_warning(token, MAX_NESTING_DEPTH))
                    self._skip_balanced("(", ")")
                    return None
                expression = self._parse_expression()
            self._match(TokenType.DELIMITER, ")")
            return expression

        self._report(create_skipped_token_warning(token))
        return None

    # ========================================================================
    # Token helpers
    # ========================================================================

    def _match(self, token_type: TokenType, lexeme: Optional[str] = None) -> bool:
        """Check if current token matches and consume if so."""
        if self._check(token_type, lexeme):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType, lexeme: Optional[str] = None) -> bool:
        """Check if current token matches type (and text) without consuming."""
        if self._is_at_end():
            return False
        token = self._peek()
        return token.type == token_type and (lexeme is None or token.lexeme == lexeme)

    def _advance(self) -> Token:
        """Consume and return current token. Never moves past EOF."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _advance_by(self, count: int):
        for _ in range(count):
            self._advance()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Return current token without consuming."""
        return self.tokens[self.current]

    def _peek_next(self) -> Token:
        """Return the token after the current one (EOF at the end)."""
        if self.current + 1 < len(self.tokens):
            return self.tokens[self.current + 1]
        return self.tokens[-1]

    def _previous(self) -> Token:
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self.tokens[0]

    @contextmanager
    def _nested(self, levels: int = 1):
        """Enter ``levels`` nesting levels; yields whether the limit still holds."""
        self.depth += levels
        try:
            yield self.depth <= MAX_NESTING_DEPTH
        finally:
            self.depth -= levels

    def _skip_balanced(self, opener: str, closer: str):
        """Consume tokens through the closer matching an opener already consumed."""
        balance = 1
        while balance > 0 and not self._is_at_end():
            token = self._advance()
            if token.type == TokenType.DELIMITER:
                if token.lexeme == opener:
                    balance += 1
                elif token.lexeme == closer:
                    balance -= 1

    def _skip_statement(self):
        """Consume one statement: a whole block, or tokens through the next top-level ';'."""
        if self._match(TokenType.DELIMITER, "{"):
            self._skip_balanced("{", "}")
            return

        balance = 0
        while not self._is_at_end():
            if balance == 0 and self._check(TokenType.DELIMITER, "}"):
                return
            token = self._advance()
            if token.type != TokenType.DELIMITER:
                continue
            if token.lexeme in ("(", "{"):
                balance += 1
            elif token.lexeme in (")", "}"):
                balance = max(0, balance - 1)
            elif token.lexeme == ";" and balance == 0:
                return

    def _span(self, start: Token) -> SourceSpan:
        end = self._previous() if self.current > 0 else start
        return SourceSpan(start.location, end.location)

    def _report(self, warning: ParseWarning):
        """Record skipped input, or raise it in strict mode."""
        if self.strict:
            raise ParseError.from_warning(warning)
        logger.debug("Parser skipped input: %s at %s", warning.message, warning.diagnostic.location)
        self.warnings.append(warning)

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


def parse(tokens: List[Token], strict: bool = False) -> Program:
    """
    Parse a token list into a Program.

    Never raises unless strict is set.
    """
    return Parser(tokens, strict=strict).parse()


def parse_source(source: str, filename: str = "<input>") -> Program:
    """
    Convenience function to tokenize and parse a source string.

    Args:
        source: Source code string
        filename: Filename for diagnostics

    Returns:
        Program AST
    """
    from ..lexer import tokenize

    return Parser(tokenize(source, filename)).parse()


def parse_file(filepath: str) -> Program:
    """
    Convenience function to parse a source file.

    Raises:
        OSError: If the file cannot be read
    """
    from ..lexer import tokenize_file

    return Parser(tokenize_file(filepath)).parse()
