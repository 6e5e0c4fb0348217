"""
Java generator (the typed-block dialect).

Everything is emitted inside ``public class Main``: functions become
``public static`` methods and top-level variables become static fields.
A C ``main`` becomes the Java entry point and owns a Scanner on System.in
for scanf.
"""

from typing import FrozenSet, Optional

from ..parser.ast_nodes import (
    ASTNode, Program, Include, Function, Variable, Assignment, IfStatement,
    WhileLoop, ForLoop, ReturnStatement, PrintfStatement, ScanfStatement,
    Block, Literal, LiteralType, Expression, Identifier
)
from . import formats
from .base import CodeGenerator, Dialect, quote_text
from .formats import ConversionKind

JAVA_TYPES = {
    "int": "int",
    "float": "float",
    "double": "double",
    "char": "char",
    "void": "void",
    "long": "long",
    "short": "short",
    "bool": "boolean",
}

# Initial value for a declaration without an initializer, by Java type
JAVA_DEFAULTS = {
    "int": "0",
    "float": "0.0f",
    "double": "0.0",
    "char": "'\\0'",
    "boolean": "false",
    "long": "0L",
    "short": "0",
}

# Operators after which a one-character string next to a char is a char
CHAR_COMPARISON_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">="})

SCANNER_READERS = {
    ConversionKind.INTEGER: "scanner.nextInt()",
    ConversionKind.FLOAT: "scanner.nextFloat()",
    ConversionKind.DOUBLE: "scanner.nextDouble()",
    ConversionKind.STRING: "scanner.next()",
    ConversionKind.CHAR: "scanner.next().charAt(0)",
}


def java_type(c_type: str) -> str:
    """Map a C type keyword to Java; unknown types become Object."""
    return JAVA_TYPES.get(c_type, "Object")


class JavaGenerator(CodeGenerator):
    """Renders the AST as a single Java class."""

    dialect = Dialect.JAVA
    comment_prefix = "//"

    def __init__(self, indent: int = 4):
        super().__init__(indent)
        self.global_chars: FrozenSet[str] = frozenset()
        # Names declared char where the generator currently is; scopes
        # inside one function are not told apart
        self.char_names: FrozenSet[str] = frozenset()

    def visit_program(self, node: Program):
        self.global_chars = frozenset(
            member.name for member in node.body
            if isinstance(member, Variable) and member.data_type == "char"
        )
        self.char_names = self.global_chars

        if any(isinstance(member, Function) and member.is_entry_point for member in node.body):
            self._emit("import java.util.Scanner;")
            self._blank()

        self._emit("public class Main {")
        with self._indented():
            previous: Optional[ASTNode] = None
            for member in node.body:
                if isinstance(member, Include):
                    continue
                if previous is not None and (isinstance(member, Function) or isinstance(previous, Function)):
                    self._blank()
                self._emit_statement(member)
                previous = member
        self._emit("}")

    def visit_include(self, node: Include):
        # Java needs no headers
        return None

    def visit_function(self, node: Function):
        self.char_names = self.global_chars | self._function_chars(node)
        try:
            if node.is_entry_point:
                self._emit_entry_point(node)
                return

            parameters = ", ".join(f"{java_type(p.type_name)} {p.name}" for p in node.parameters)
            self._emit(f"public static {java_type(node.return_type)} {node.name}({parameters}) {{")
            with self._function_scope(node.name), self._indented():
                self._emit_statements(node.body)
            self._emit("}")
        finally:
            self.char_names = self.global_chars

    @staticmethod
    def _function_chars(node: Function) -> FrozenSet[str]:
        """Parameters and local variables of a function declared char."""
        names = {p.name for p in node.parameters if p.type_name == "char"}
        for statement in node.body:
            names.update(
                descendant.name for descendant in statement.walk()
                if isinstance(descendant, Variable) and descendant.data_type == "char"
            )
        return frozenset(names)

    def _emit_entry_point(self, node: Function):
        """Emit main with its Scanner.

        A trailing return is dropped so that scanner.close() stays reachable.
        """
        body = list(node.body)
        if body and isinstance(body[-1], ReturnStatement):
            body.pop()

        self._emit("public static void main(String[] args) {")
        with self._function_scope(node.name, entry_point=True), self._indented():
            self._emit("Scanner scanner = new Scanner(System.in);")
            self._emit_statements(body)
            self._emit("scanner.close();")
        self._emit("}")

    def visit_variable(self, node: Variable):
        prefix = "static " if self.context.at_top_level else ""
        self._emit(f"{prefix}{self._declaration(node)};")

    def _declaration(self, node: Variable) -> str:
        target_type = java_type(node.data_type)
        return f"{target_type} {node.name} = {self._initializer(target_type, node.value)}"

    def _initializer(self, target_type: str, value: Optional[Expression]) -> str:
        if value is None:
            return JAVA_DEFAULTS.get(target_type, "null")

        if target_type == "char" and self._char_literal(value):
            return self._char_literal(value)
        if isinstance(value, Literal):
            if target_type == "float" and value.literal_type == LiteralType.FLOAT:
                return f"{value.value}f"
        return self._expr(value)

    @staticmethod
    def _char_literal(node: Optional[ASTNode]) -> Optional[str]:
        """Render a one-character string literal as a Java char, else None.

        'a' reaches the generator as a one-character string literal.
        """
        if not (isinstance(node, Literal) and node.is_string):
            return None
        text = node.value
        if text == "'":
            return "'\\''"
        if len(text) == 1 or (len(text) == 2 and text.startswith("\\")):
            return f"'{text}'"
        return None

    def _operand(
        self,
        child: Optional[ASTNode],
        parent_operator: str,
        right_side: bool,
        sibling: Optional[ASTNode] = None
    ) -> str:
        # c == 'a' compares a char, which Java cannot do with a String
        if (parent_operator in CHAR_COMPARISON_OPERATORS
                and isinstance(sibling, Identifier)
                and sibling.name in self.char_names
                and self._char_literal(child)):
            return self._char_literal(child)
        return super()._operand(child, parent_operator, right_side, sibling)

    def visit_assignment(self, node: Assignment):
        self._emit(f"{self._assignment(node)};")

    def _assignment(self, node: Assignment) -> str:
        if node.is_increment:
            return f"{node.identifier}{node.operator}"
        if node.operator == "=" and node.identifier in self.char_names and self._char_literal(node.value):
            return f"{node.identifier} = {self._char_literal(node.value)}"
        return f"{node.identifier} {node.operator} {self._expr(node.value)}"

    def visit_if_statement(self, node: IfStatement):
        self._emit(f"if ({self._expr(node.condition)}) {{")
        self._emit_branch(node.then_branch)

        current = node.else_branch
        while isinstance(current, IfStatement):
            self._emit(f"}} else if ({self._expr(current.condition)}) {{")
            self._emit_branch(current.then_branch)
            current = current.else_branch

        if current is not None:
            self._emit("} else {")
            self._emit_branch(current)
        self._emit("}")

    def visit_while_loop(self, node: WhileLoop):
        self._emit(f"while ({self._expr(node.condition)}) {{")
        self._emit_branch(node.body)
        self._emit("}")

    def visit_for_loop(self, node: ForLoop):
        init = self._clause(node.init)
        condition = self._expr(node.condition)
        update = self._clause(node.update)
        self._emit(f"for ({init}; {condition}; {update}) {{")
        self._emit_branch(node.body)
        self._emit("}")

    def _clause(self, node: Optional[ASTNode]) -> str:
        """Render a for-loop init or update clause without its semicolon."""
        if isinstance(node, Variable):
            return self._declaration(node)
        if isinstance(node, Assignment):
            return self._assignment(node)
        if isinstance(node, Expression):
            return self._expr(node)
        return ""

    def _emit_branch(self, node: Optional[ASTNode]):
        with self._indented():
            self._emit_statements(self._branch_statements(node))

    def visit_return_statement(self, node: ReturnStatement):
        # main is void in Java
        if self.context.in_entry_point or node.value is None:
            self._emit("return;")
        else:
            self._emit(f"return {self._expr(node.value)};")

    def visit_printf_statement(self, node: PrintfStatement):
        arguments = node.arguments
        if not arguments:
            self._emit("System.out.println();")
            return

        fmt, rest = arguments[0], arguments[1:]
        if not (isinstance(fmt, Literal) and fmt.is_string):
            method = "printf" if rest else "print"
            self._emit(f"System.out.{method}({self._call_arguments(arguments)});")
            return

        text = quote_text(fmt.value)
        if rest or formats.has_value_conversions(text):
            call_arguments = "".join(f", {self._expr(argument)}" for argument in rest)
            self._emit(f'System.out.printf("{formats.to_java_format(text)}"{call_arguments});')
            return

        body = formats.collapse_percents(formats.strip_trailing_newline(text))
        if not formats.has_trailing_newline(text):
            self._emit(f'System.out.print("{body}");')
        elif body:
            self._emit(f'System.out.println("{body}");')
        else:
            self._emit("System.out.println();")

    def visit_scanf_statement(self, node: ScanfStatement):
        if len(node.arguments) < 2:
            self._emit_comment("Scanner input needed")
            return

        fmt = node.arguments[0]
        text = fmt.value if isinstance(fmt, Literal) and fmt.is_string else None
        for position, target in enumerate(node.arguments[1:]):
            name = self._expr(target)
            if name:
                self._emit(f"{name} = {SCANNER_READERS[formats.input_kind(text, position)]};")

    def visit_block(self, node: Block):
        self._emit("{")
        with self._indented():
            self._emit_statements(node.body)
        self._emit("}")

    def _terminate(self, statement: str) -> str:
        return f"{statement};"
