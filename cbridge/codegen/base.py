"""
Shared code generator machinery.

CodeGenerator walks the AST as an ASTVisitor. Statement visitors append
lines to the output buffer; expression visitors return the rendered text.
Subclasses supply one target dialect each.

Expressions are rendered from the tree shape alone, so parentheses are
inserted wherever operator precedence would otherwise regroup the output.
"""

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union

from ..parser.ast_nodes import (
    ASTNode, ASTVisitor, Program, Block, Expression, FunctionCall,
    BinaryExpression, UnaryExpression, Literal, Identifier
)

logger = logging.getLogger(__name__)


class Dialect(Enum):
    """Target dialects."""
    JAVA = "java"
    PYTHON = "python"

    @classmethod
    def from_name(cls, name: Union[str, "Dialect"]) -> "Dialect":
        """Resolve a dialect from its name or its descriptive alias."""
        if isinstance(name, Dialect):
            return name
        key = name.strip().lower()
        if key in DIALECT_ALIASES:
            return DIALECT_ALIASES[key]
        raise ValueError(
            f"Unknown dialect {name!r}; expected one of {', '.join(sorted(DIALECT_ALIASES))}"
        )


DIALECT_ALIASES = {
    "java": Dialect.JAVA,
    "typed-block": Dialect.JAVA,
    "python": Dialect.PYTHON,
    "indentation-scoped": Dialect.PYTHON,
}


# Binary precedence, higher binds tighter. 3 is left free for dialects
# whose logical not sits between 'and' and the comparisons.
BINARY_PRECEDENCE: Dict[str, int] = {
    "||": 1,
    "&&": 2,
    "==": 4, "!=": 4,
    "<": 5, ">": 5, "<=": 5, ">=": 5,
    "+": 6, "-": 6,
    "*": 7, "/": 7, "%": 7,
}
UNARY_PRECEDENCE = 8
ATOM_PRECEDENCE = 9

# A double quote that no backslash escapes yet
UNESCAPED_QUOTE = re.compile(r'(?<!\\)"')


def quote_text(text: str) -> str:
    """Escape bare double quotes in raw literal text, e.g. from the char literal '"'."""
    return UNESCAPED_QUOTE.sub(r'\\"', text)


@dataclass
class GenerationContext:
    """Where the generator currently is in the tree."""
    function_name: Optional[str] = None
    in_entry_point: bool = False

    @property
    def at_top_level(self) -> bool:
        return self.function_name is None


class CodeGenerator(ASTVisitor):
    """
    Base class for the dialect generators.

    Provides the line buffer, indentation and expression rendering; the
    subclasses decide how each statement looks.
    """

    dialect: ClassVar[Dialect]
    comment_prefix: ClassVar[str]

    def __init__(self, indent: int = 4):
        """
        Args:
            indent: Spaces per nesting level
        """
        self.indent_unit = " " * indent
        self.lines: List[str] = []
        self.depth = 0
        self.context = GenerationContext()

    def generate(self, program: Program) -> str:
        """
        Render a Program in this generator's dialect.

        Returns:
            The rendered source text, or a one-line comment when the root is
            not a Program with a list body
        """
        if not isinstance(program, Program) or not isinstance(getattr(program, "body", None), list):
            logger.warning("Refusing to generate %s from %r", self.dialect.value, type(program).__name__)
            return f"{self.comment_prefix} Error: Invalid AST structure"

        self.lines = []
        self.depth = 0
        self.context = GenerationContext()

        program.accept(self)

        logger.debug("Generated %d %s lines", len(self.lines), self.dialect.value)
        return "\n".join(self.lines) + "\n" if self.lines else ""

    # ========================================================================
    # Output buffer
    # ========================================================================

    def _emit(self, text: str):
        self.lines.append(f"{self.indent_unit * self.depth}{text}")

    def _emit_comment(self, text: str):
        self._emit(f"{self.comment_prefix} {text}")

    def _blank(self, count: int = 1):
        """Add blank lines, never stacking more than ``count`` in a row."""
        existing = 0
        for line in reversed(self.lines):
            if line:
                break
            existing += 1
        if not self.lines:
            return
        self.lines.extend([""] * max(0, count - existing))

    @contextmanager
    def _indented(self):
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    @contextmanager
    def _function_scope(self, name: str, entry_point: bool = False):
        previous = self.context
        self.context = GenerationContext(function_name=name, in_entry_point=entry_point)
        try:
            yield
        finally:
            self.context = previous

    # ========================================================================
    # Statements
    # ========================================================================

    def _emit_statements(self, nodes: List[ASTNode]):
        for node in nodes:
            self._emit_statement(node)

    def _emit_statement(self, node: Optional[ASTNode]):
        """Emit a node in statement position.

        Calls become call statements; any other bare expression has no
        effect and is dropped.
        """
        if node is None:
            return
        if isinstance(node, FunctionCall):
            self._emit(self._terminate(self._expr(node)))
        elif isinstance(node, Expression):
            logger.debug("Dropping expression statement %s", node)
        else:
            node.accept(self)

    def _terminate(self, statement: str) -> str:
        """Add the dialect's statement terminator."""
        return statement

    @staticmethod
    def _branch_statements(node: Optional[ASTNode]) -> List[ASTNode]:
        """Statements of a loop or if branch: a block's body, or the single statement."""
        if node is None:
            return []
        if isinstance(node, Block):
            return list(node.body)
        return [node]

    # ========================================================================
    # Expressions
    # ========================================================================

    def _expr(self, node: Optional[ASTNode]) -> str:
        if node is None:
            return ""
        return node.accept(self)

    def _operator(self, operator: str) -> str:
        """Spelling of a C operator in this dialect."""
        return operator

    def _precedence(self, node: Optional[ASTNode]) -> int:
        if isinstance(node, BinaryExpression):
            return BINARY_PRECEDENCE.get(node.operator, ATOM_PRECEDENCE)
        if isinstance(node, UnaryExpression):
            if node.operator == "&":
                return self._precedence(node.operand)
            return UNARY_PRECEDENCE
        return ATOM_PRECEDENCE

    def _must_group(self, child: ASTNode, parent_operator: str) -> bool:
        """Dialect hook for grouping that precedence alone does not cover."""
        return False

    def _operand(
        self,
        child: Optional[ASTNode],
        parent_operator: str,
        right_side: bool,
        sibling: Optional[ASTNode] = None
    ) -> str:
        """Render one side of a binary expression, grouped if needed.

        ``sibling`` is the other operand, for dialects that render a
        literal differently depending on what it is compared with.
        """
        text = self._expr(child)
        if child is None:
            return text

        parent = BINARY_PRECEDENCE.get(parent_operator, ATOM_PRECEDENCE)
        precedence = self._precedence(child)
        # Binary levels fold left, so an equal-precedence right operand was grouped
        if (precedence < parent
                or (right_side and precedence == parent)
                or self._must_group(child, parent_operator)):
            return f"({text})"
        return text

    def visit_binary_expression(self, node: BinaryExpression) -> str:
        # a + b + c + ... nests on the left without limit; walk that spine
        # in a loop instead of recursing into it
        spine = [node]
        while (isinstance(spine[-1].left, BinaryExpression)
               and self._precedence(spine[-1].left) == self._precedence(spine[-1])):
            spine.append(spine[-1].left)
        spine.reverse()

        first = spine[0]
        text = self._operand(first.left, first.operator, right_side=False, sibling=first.right)
        for position, current in enumerate(spine):
            right = self._operand(current.right, current.operator, right_side=True, sibling=current.left)
            text = f"{text} {self._operator(current.operator)} {right}"
            parent = spine[position + 1] if position + 1 < len(spine) else None
            if parent is not None and self._must_group(current, parent.operator):
                text = f"({text})"
        return text

    def visit_unary_expression(self, node: UnaryExpression) -> str:
        operand = self._expr(node.operand)

        # No pointers in either target: &x is just x
        if node.operator == "&":
            return operand

        own = self._precedence(node)
        if node.operand is not None and (
            self._precedence(node.operand) < own
            or (isinstance(node.operand, UnaryExpression) and node.operand.operator == node.operator)
        ):
            operand = f"({operand})"
        return f"{self._operator(node.operator)}{operand}"

    def visit_literal(self, node: Literal) -> str:
        if node.is_string:
            return f'"{quote_text(node.value)}"'
        return node.value

    def visit_identifier(self, node: Identifier) -> str:
        return node.name

    def visit_function_call(self, node: FunctionCall) -> str:
        return f"{node.name}({self._call_arguments(node.arguments)})"

    def _call_arguments(self, arguments: List[Expression]) -> str:
        return ", ".join(self._expr(argument) for argument in arguments)
