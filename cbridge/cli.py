#!/usr/bin/env python3
"""
cbridge command line front end.

Usage:
    cbridge [SOURCE] [options]

Options:
    -t, --target    Target dialect: java (default) or python
    -o, --output    Write the translation to a file instead of stdout
    --tokens        Print the token list instead of translating
    --ast           Print the syntax tree as JSON instead of translating
    --strict        Fail on the first skipped character or token
    -v, --verbose   Log progress (-vv for debug output)
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .codegen import DIALECT_ALIASES
from .lexer import LexerError
from .parser import ParseError
from .pipeline import CompilerOptions, CompilationResult, compile_source

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cbridge",
        description="Translate a small subset of C into Java or Python",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    cbridge hello.c                      # Java on stdout
    cbridge hello.c -t python -o hello.py
    cbridge hello.c --tokens             # Token list, one per line
    cbridge hello.c --ast                # Syntax tree as JSON
    cat hello.c | cbridge -t python      # Read the source from stdin
        """
    )

    parser.add_argument('source', nargs='?', default='-',
                        help="C source file ('-' or omitted reads stdin)")
    parser.add_argument('-t', '--target', choices=sorted(DIALECT_ALIASES), default='java',
                        help='Target dialect (default: java)')
    parser.add_argument('-o', '--output',
                        help='Write the result to this file')

    # Inspection options
    parser.add_argument('--tokens', action='store_true',
                        help='Print the token list instead of the translation')
    parser.add_argument('--ast', action='store_true',
                        help='Print the syntax tree as JSON instead of the translation')

    parser.add_argument('--strict', action='store_true',
                        help='Fail on the first skipped character or token')
    parser.add_argument('--indent', type=int, default=4,
                        help='Spaces per indentation level (default: 4)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log output (-v info, -vv debug)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def configure_logging(verbosity: int):
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def format_tokens(result: CompilationResult) -> str:
    lines = []
    for token in result.tokens:
        value = "" if token.lexeme is None else repr(token.lexeme)
        lines.append(f"{token.line}:{token.column}\t{token.type.value}\t{value}".rstrip())
    return "\n".join(lines) + "\n"


def format_ast(result: CompilationResult) -> str:
    return json.dumps(result.program.to_dict(), indent=2) + "\n"


def read_source(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if args.indent < 1:
        parser.error("--indent must be at least 1")

    try:
        source = read_source(args.source)
    except OSError as e:
        print(f"cbridge: cannot read {args.source}: {e.strerror or e}", file=sys.stderr)
        return 1

    options = CompilerOptions(
        dialect=args.target,
        strict=args.strict,
        filename="<stdin>" if args.source == '-' else args.source,
        indent=args.indent,
    )

    try:
        result = compile_source(source, options=options)
    except (LexerError, ParseError) as e:
        print(str(e), file=sys.stderr, end="")
        return 1

    for diagnostic in result.diagnostics:
        logger.warning("%s", str(diagnostic).rstrip())

    if args.tokens:
        text = format_tokens(result)
    elif args.ast:
        text = format_ast(result)
    else:
        text = result.output

    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            print(f"cbridge: cannot write {args.output}: {e.strerror or e}", file=sys.stderr)
            return 1
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
