"""
cbridge Code Generation Package

Renders a parsed Program in one of two target dialects:

- Dialect.JAVA    (typed-block): braces and explicit types, one Main class
- Dialect.PYTHON  (indentation-scoped): indented suites, no types
"""

from typing import Union

from ..parser.ast_nodes import Program
from .base import CodeGenerator, Dialect, DIALECT_ALIASES
from .java_generator import JavaGenerator
from .python_generator import PythonGenerator

GENERATORS = {
    Dialect.JAVA: JavaGenerator,
    Dialect.PYTHON: PythonGenerator,
}


def get_generator(dialect: Union[str, Dialect], indent: int = 4) -> CodeGenerator:
    """Create a fresh generator for a dialect name or Dialect."""
    return GENERATORS[Dialect.from_name(dialect)](indent=indent)


def generate(program: Program, dialect: Union[str, Dialect], indent: int = 4) -> str:
    """
    Render a Program in the given dialect.

    Never raises for a bad tree: a root that is not a Program gives a one-line
    error comment instead.

    Raises:
        ValueError: If the dialect name is unknown
    """
    return get_generator(dialect, indent).generate(program)


__all__ = [
    "CodeGenerator",
    "JavaGenerator",
    "PythonGenerator",
    "Dialect",
    "DIALECT_ALIASES",
    "get_generator",
    "generate",
]
