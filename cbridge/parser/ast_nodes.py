"""
Abstract Syntax Tree node definitions for cbridge.

The node set is closed: one class per construct the parser can produce.
ASTVisitor declares a visit method for every one of them, so a generator
that forgets a node kind cannot be instantiated.

Nodes are frozen dataclasses and hold no parent pointers; a parse produces
a plain tree that later stages only read.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"
    INCLUDE = "Include"
    FUNCTION = "Function"

    # Statements
    VARIABLE = "Variable"
    ASSIGNMENT = "Assignment"
    IF_STATEMENT = "IfStatement"
    WHILE_LOOP = "WhileLoop"
    FOR_LOOP = "ForLoop"
    RETURN_STATEMENT = "ReturnStatement"
    PRINTF_STATEMENT = "PrintfStatement"
    SCANF_STATEMENT = "ScanfStatement"
    BLOCK = "Block"

    # Expressions
    FUNCTION_CALL = "FunctionCall"
    BINARY_EXPRESSION = "BinaryExpression"
    UNARY_EXPRESSION = "UnaryExpression"
    LITERAL = "Literal"
    IDENTIFIER = "Identifier"


class LiteralType(Enum):
    """Sub-kind of a Literal node."""
    INT = "int"
    FLOAT = "float"
    STRING = "string"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor(ABC):
    """Visitor interface with one method per node kind."""

    @abstractmethod
    def visit_program(self, node: 'Program') -> Any: ...

    @abstractmethod
    def visit_include(self, node: 'Include') -> Any: ...

    @abstractmethod
    def visit_function(self, node: 'Function') -> Any: ...

    @abstractmethod
    def visit_variable(self, node: 'Variable') -> Any: ...

    @abstractmethod
    def visit_assignment(self, node: 'Assignment') -> Any: ...

    @abstractmethod
    def visit_if_statement(self, node: 'IfStatement') -> Any: ...

    @abstractmethod
    def visit_while_loop(self, node: 'WhileLoop') -> Any: ...

    @abstractmethod
    def visit_for_loop(self, node: 'ForLoop') -> Any: ...

    @abstractmethod
    def visit_return_statement(self, node: 'ReturnStatement') -> Any: ...

    @abstractmethod
    def visit_printf_statement(self, node: 'PrintfStatement') -> Any: ...

    @abstractmethod
    def visit_scanf_statement(self, node: 'ScanfStatement') -> Any: ...

    @abstractmethod
    def visit_block(self, node: 'Block') -> Any: ...

    @abstractmethod
    def visit_function_call(self, node: 'FunctionCall') -> Any: ...

    @abstractmethod
    def visit_binary_expression(self, node: 'BinaryExpression') -> Any: ...

    @abstractmethod
    def visit_unary_expression(self, node: 'UnaryExpression') -> Any: ...

    @abstractmethod
    def visit_literal(self, node: 'Literal') -> Any: ...

    @abstractmethod
    def visit_identifier(self, node: 'Identifier') -> Any: ...


class ASTNode(ABC):
    """Base class for all AST nodes."""

    node_type: ClassVar[ASTNodeType]

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes, in source order."""

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict of the subtree, for AST viewers and JSON dumps."""
        result: Dict[str, Any] = {"type": self.node_type.value}
        for f in fields(self):
            if f.name == "span":
                continue
            result[f.name] = _to_plain(getattr(self, f.name))
        return result

    def walk(self):
        """Yield this node and every descendant, depth first in source order."""
        stack: List[ASTNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def __str__(self) -> str:
        span = getattr(self, "span", None)
        return f"{self.node_type.value}@{span}" if span else self.node_type.value


def _to_plain(value: Any) -> Any:
    if isinstance(value, ASTNode):
        return value.to_dict()
    if isinstance(value, Parameter):
        return {"type": value.type_name, "name": value.name}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


def _present(*nodes: Optional[ASTNode]) -> List[ASTNode]:
    return [node for node in nodes if node is not None]


# ============================================================================
# Base categories
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""


class Expression(ASTNode):
    """Base class for expressions."""


# ============================================================================
# Top-level nodes
# ============================================================================

@dataclass(frozen=True)
class Program(ASTNode):
    """Root AST node representing a complete translation unit."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PROGRAM

    body: List[ASTNode] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_program(self)

    def children(self) -> List[ASTNode]:
        return list(self.body)


@dataclass(frozen=True)
class Include(Statement):
    """#include directive. Kept in the tree, ignored by every generator."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.INCLUDE

    library: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_include(self)

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class Parameter:
    """Function parameter: a type keyword and a name."""
    type_name: str
    name: str


@dataclass(frozen=True)
class Function(Statement):
    """Function definition."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNCTION

    return_type: str
    name: str
    parameters: List[Parameter] = field(default_factory=list)
    body: List[ASTNode] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function(self)

    def children(self) -> List[ASTNode]:
        return list(self.body)

    @property
    def is_entry_point(self) -> bool:
        return self.name == "main"


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class Variable(Statement):
    """Variable declaration with an optional initializer."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.VARIABLE

    data_type: str
    name: str
    value: Optional[Expression] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable(self)

    def children(self) -> List[ASTNode]:
        return _present(self.value)


@dataclass(frozen=True)
class Assignment(Statement):
    """Assignment, compound assignment, or ++/-- on a named variable.

    ``value`` is None for ++ and --.
    """
    node_type: ClassVar[ASTNodeType] = ASTNodeType.ASSIGNMENT

    identifier: str
    operator: str
    value: Optional[Expression] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_assignment(self)

    def children(self) -> List[ASTNode]:
        return _present(self.value)

    @property
    def is_increment(self) -> bool:
        return self.operator in ("++", "--")


@dataclass(frozen=True)
class IfStatement(Statement):
    """If statement with optional else clause.

    An ``else if`` chain is an IfStatement sitting in ``else_branch``.
    """
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IF_STATEMENT

    condition: Optional[Expression]
    then_branch: Optional[ASTNode] = None
    else_branch: Optional[ASTNode] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_if_statement(self)

    def children(self) -> List[ASTNode]:
        return _present(self.condition, self.then_branch, self.else_branch)


@dataclass(frozen=True)
class WhileLoop(Statement):
    """While loop statement."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.WHILE_LOOP

    condition: Optional[Expression]
    body: Optional[ASTNode] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_while_loop(self)

    def children(self) -> List[ASTNode]:
        return _present(self.condition, self.body)


@dataclass(frozen=True)
class ForLoop(Statement):
    """Classic three-clause for loop. Every clause may be missing."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FOR_LOOP

    init: Optional[ASTNode] = None          # Variable or Assignment
    condition: Optional[Expression] = None
    update: Optional[ASTNode] = None        # Assignment or Expression
    body: Optional[ASTNode] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_for_loop(self)

    def children(self) -> List[ASTNode]:
        return _present(self.init, self.condition, self.update, self.body)


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """Return statement."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.RETURN_STATEMENT

    value: Optional[Expression] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_return_statement(self)

    def children(self) -> List[ASTNode]:
        return _present(self.value)


@dataclass(frozen=True)
class PrintfStatement(Statement):
    """printf(format, args...)."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PRINTF_STATEMENT

    arguments: List[Expression] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_printf_statement(self)

    def children(self) -> List[ASTNode]:
        return list(self.arguments)


@dataclass(frozen=True)
class ScanfStatement(Statement):
    """scanf(format, targets...)."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.SCANF_STATEMENT

    arguments: List[Expression] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_scanf_statement(self)

    def children(self) -> List[ASTNode]:
        return list(self.arguments)


@dataclass(frozen=True)
class Block(Statement):
    """Brace-delimited statement list."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BLOCK

    body: List[ASTNode] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_block(self)

    def children(self) -> List[ASTNode]:
        return list(self.body)


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class FunctionCall(Expression):
    """Call of a named function. Also used as a statement."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNCTION_CALL

    name: str
    arguments: List[Expression] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_call(self)

    def children(self) -> List[ASTNode]:
        return list(self.arguments)


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """Binary operation. Operands are None only for truncated input."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BINARY_EXPRESSION

    left: Optional[Expression]
    operator: str
    right: Optional[Expression]
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_expression(self)

    def children(self) -> List[ASTNode]:
        return _present(self.left, self.right)


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """Prefix operation: address-of, negation or logical not."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.UNARY_EXPRESSION

    operator: str
    operand: Optional[Expression]
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary_expression(self)

    def children(self) -> List[ASTNode]:
        return _present(self.operand)


@dataclass(frozen=True)
class Literal(Expression):
    """Literal value. ``value`` is the source text, never a converted number."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.LITERAL

    value: str
    literal_type: LiteralType
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_literal(self)

    def children(self) -> List[ASTNode]:
        return []

    @property
    def is_string(self) -> bool:
        return self.literal_type == LiteralType.STRING


@dataclass(frozen=True)
class Identifier(Expression):
    """Identifier expression."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IDENTIFIER

    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_identifier(self)

    def children(self) -> List[ASTNode]:
        return []


# Alias for the root type
AST = Program
