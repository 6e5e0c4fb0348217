"""
cbridge Parser Package

Recursive descent parser for the supported C subset. Produces a plain
Abstract Syntax Tree with source spans on every node.

Key Features:
- One method per grammar rule, left-folding binary precedence levels
- Closed node set with a matching ASTVisitor interface
- Skips what it cannot parse, so parsing always terminates
- Skipped input recorded as warnings, optional strict mode
"""

from .ast_nodes import (
    AST, ASTNode, ASTNodeType, ASTVisitor, SourceSpan, Statement, Expression,
    Program, Include, Function, Parameter, Variable, Assignment, IfStatement,
    WhileLoop, ForLoop, ReturnStatement, PrintfStatement, ScanfStatement, Block,
    FunctionCall, BinaryExpression, UnaryExpression, Literal, LiteralType,
    Identifier,
)
from .parser import Parser, parse, parse_source, parse_file
from .errors import ParseError, ParseWarning

__all__ = [
    # Core parser
    "Parser", "parse", "parse_source", "parse_file",

    # AST nodes
    "AST", "ASTNode", "ASTNodeType", "ASTVisitor", "SourceSpan",
    "Statement", "Expression",
    "Program", "Include", "Function", "Parameter", "Variable", "Assignment",
    "IfStatement", "WhileLoop", "ForLoop", "ReturnStatement",
    "PrintfStatement", "ScanfStatement", "Block",
    "FunctionCall", "BinaryExpression", "UnaryExpression", "Literal",
    "LiteralType", "Identifier",

    # Error handling
    "ParseError", "ParseWarning",
]
