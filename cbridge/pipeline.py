"""
The cbridge compilation pipeline.

Runs the three phases in order (lexical analysis, syntax analysis, code
generation) and hands back every intermediate result, so a front end can
show the token list and the tree next to the translated text.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Union

from .lexer import Lexer, Token, Diagnostic
from .parser import Parser, Program
from .codegen import Dialect, get_generator

logger = logging.getLogger(__name__)


class CompilationPhase(Enum):
    """Pipeline phases, in execution order."""
    LEXICAL = "lexical analysis"
    SYNTAX = "syntax analysis"
    CODEGEN = "code generation"


@dataclass
class CompilerOptions:
    """Settings for one compilation."""
    dialect: Union[Dialect, str] = Dialect.JAVA
    strict: bool = False
    filename: str = "<input>"
    indent: int = 4

    def __post_init__(self):
        self.dialect = Dialect.from_name(self.dialect)
        if self.indent < 1:
            raise ValueError(f"indent must be positive, got {self.indent}")


@dataclass
class CompilationResult:
    """Everything one compilation produced."""
    tokens: List[Token]
    program: Program
    output: str
    dialect: Dialect
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def has_diagnostics(self) -> bool:
        return len(self.diagnostics) > 0


def compile_source(
    source: str,
    dialect: Union[Dialect, str] = Dialect.JAVA,
    strict: bool = False,
    options: Optional[CompilerOptions] = None
) -> CompilationResult:
    """
    Translate C source text into the target dialect.

    Args:
        source: C source text
        dialect: Target dialect, ignored when options are given
        strict: Raise on the first diagnostic, ignored when options are given
        options: Full settings

    Returns:
        CompilationResult with tokens, tree, output and diagnostics

    Raises:
        LexerError, ParseError: In strict mode only
        ValueError: If the dialect name is unknown
    """
    if options is None:
        options = CompilerOptions(dialect=dialect, strict=strict)

    logger.info("Compiling %s to %s", options.filename, options.dialect.value)

    logger.debug("Phase: %s", CompilationPhase.LEXICAL.value)
    lexer = Lexer(source, options.filename, strict=options.strict)
    tokens = lexer.tokenize()

    logger.debug("Phase: %s", CompilationPhase.SYNTAX.value)
    parser = Parser(tokens, strict=options.strict)
    program = parser.parse()

    logger.debug("Phase: %s", CompilationPhase.CODEGEN.value)
    output = get_generator(options.dialect, options.indent).generate(program)

    diagnostics = [w.diagnostic for w in lexer.warnings] + [w.diagnostic for w in parser.warnings]
    if diagnostics:
        logger.info("%s: %d diagnostics", options.filename, len(diagnostics))

    return CompilationResult(
        tokens=tokens,
        program=program,
        output=output,
        dialect=options.dialect,
        diagnostics=diagnostics,
    )


def compile_file(filepath: str, options: Optional[CompilerOptions] = None) -> CompilationResult:
    """
    Translate a C source file.

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    if options is None:
        options = CompilerOptions(filename=filepath)
    elif options.filename == "<input>":
        options = replace(options, filename=filepath)
    return compile_source(source, options=options)
