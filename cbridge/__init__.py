"""
cbridge - a teaching translator from a small C subset to Java and Python

Architecture:
    cbridge/
    ├── lexer/           # Tokenization
    ├── parser/          # Recursive descent parser and AST
    ├── codegen/         # Java and Python generators
    ├── pipeline.py      # Runs the three phases
    └── cli.py           # Command line front end

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, tokenize
from .parser import Parser, parse
from .codegen import Dialect, generate
from .pipeline import CompilerOptions, CompilationResult, compile_source, compile_file

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Dialect",

    # One-call helpers
    "tokenize",
    "parse",
    "generate",
    "compile_source",
    "compile_file",
    "CompilerOptions",
    "CompilationResult",

    # Version info
    "__version__",
]
