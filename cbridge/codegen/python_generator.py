"""
Python generator (the indentation-scoped dialect).

Types disappear, blocks become indented suites and a C ``main`` is called
from an ``if __name__ == "__main__":`` guard. Three-clause for loops are
approximated with ``range``; shapes that do not fit are left as a comment.
"""

from typing import Optional

from ..parser.ast_nodes import (
    ASTNode, Program, Include, Function, Variable, Assignment, IfStatement,
    WhileLoop, ForLoop, ReturnStatement, PrintfStatement, ScanfStatement,
    Block, BinaryExpression, UnaryExpression, Literal, LiteralType, Identifier
)
from . import formats
from .base import CodeGenerator, Dialect, quote_text
from .formats import ConversionKind

PYTHON_DEFAULTS = {
    "int": "0",
    "long": "0",
    "short": "0",
    "float": "0.0",
    "double": "0.0",
    "char": "''",
    "bool": "False",
}

PYTHON_OPERATORS = {
    "&&": "and",
    "||": "or",
    "!": "not ",
}

INPUT_READERS = {
    ConversionKind.INTEGER: "int(input())",
    ConversionKind.FLOAT: "float(input())",
    ConversionKind.DOUBLE: "float(input())",
    ConversionKind.STRING: "input()",
    ConversionKind.CHAR: "input()[0]",
}

# Python chains these instead of nesting them
COMPARISON_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">="})

# 'not' binds looser than comparisons in Python
NOT_PRECEDENCE = 3


class PythonGenerator(CodeGenerator):
    """Renders the AST as a Python module."""

    dialect = Dialect.PYTHON
    comment_prefix = "#"

    def visit_program(self, node: Program):
        has_entry_point = False
        previous: Optional[ASTNode] = None

        for member in node.body:
            if isinstance(member, Include):
                continue
            if previous is not None and (isinstance(member, Function) or isinstance(previous, Function)):
                self._blank(2)
            self._emit_statement(member)
            previous = member
            if isinstance(member, Function) and member.is_entry_point:
                has_entry_point = True

        if has_entry_point:
            self._blank(2)
            self._emit('if __name__ == "__main__":')
            with self._indented():
                self._emit("main()")

    def visit_include(self, node: Include):
        return None

    def visit_function(self, node: Function):
        # The guard calls main() without arguments
        if node.is_entry_point:
            parameters = ""
        else:
            parameters = ", ".join(p.name for p in node.parameters)

        self._emit(f"def {node.name}({parameters}):")
        with self._function_scope(node.name, entry_point=node.is_entry_point):
            self._emit_suite(node.body)

    def _emit_suite(self, nodes):
        """Emit an indented suite, falling back to 'pass' when it has no code."""
        with self._indented():
            start = len(self.lines)
            self._emit_statements(nodes)
            emitted = [line.strip() for line in self.lines[start:] if line.strip()]
            if all(line.startswith(self.comment_prefix) for line in emitted):
                self._emit("pass")

    def visit_variable(self, node: Variable):
        if node.value is None:
            value = PYTHON_DEFAULTS.get(node.data_type, "None")
        else:
            value = self._expr(node.value)
        self._emit(f"{node.name} = {value}")

    def visit_assignment(self, node: Assignment):
        if node.operator == "++":
            self._emit(f"{node.identifier} += 1")
        elif node.operator == "--":
            self._emit(f"{node.identifier} -= 1")
        else:
            self._emit(f"{node.identifier} {node.operator} {self._expr(node.value)}")

    def visit_if_statement(self, node: IfStatement):
        self._emit(f"if {self._expr(node.condition)}:")
        self._emit_suite(self._branch_statements(node.then_branch))

        current = node.else_branch
        while isinstance(current, IfStatement):
            self._emit(f"elif {self._expr(current.condition)}:")
            self._emit_suite(self._branch_statements(current.then_branch))
            current = current.else_branch

        if current is not None:
            self._emit("else:")
            self._emit_suite(self._branch_statements(current))

    def visit_while_loop(self, node: WhileLoop):
        self._emit(f"while {self._expr(node.condition)}:")
        self._emit_suite(self._branch_statements(node.body))

    def visit_for_loop(self, node: ForLoop):
        header = self._range_header(node)
        if header is None:
            self._emit_comment("For loop conversion needed")
            return
        self._emit(header)
        self._emit_suite(self._branch_statements(node.body))

    def _range_header(self, node: ForLoop) -> Optional[str]:
        """Build 'for v in range(...)' for loops counting v up to a bound.

        Accepts 'v = start' (or a declaration of v), 'v < bound' or
        'v <= bound', and 'v++', '++v' or 'v += step'. Returns None for
        anything else.
        """
        init = node.init
        if isinstance(init, Variable):
            variable, start = init.name, init.value
        elif isinstance(init, Assignment) and init.operator == "=":
            variable, start = init.identifier, init.value
        else:
            return None

        condition = node.condition
        if not (isinstance(condition, BinaryExpression)
                and condition.operator in ("<", "<=")
                and isinstance(condition.left, Identifier)
                and condition.left.name == variable
                and condition.right is not None):
            return None

        step = self._range_step(node.update, variable)
        if step is None:
            return None

        arguments = [self._expr(start) if start is not None else "0", self._range_bound(condition)]
        if step != "1":
            arguments.append(step)
        return f"for {variable} in range({', '.join(arguments)}):"

    def _range_bound(self, condition: BinaryExpression) -> str:
        bound = condition.right
        if condition.operator == "<":
            return self._expr(bound)
        if isinstance(bound, Literal) and bound.literal_type == LiteralType.INT:
            return str(int(bound.value) + 1)
        return f"{self._operand(bound, '+', right_side=False)} + 1"

    def _range_step(self, update: Optional[ASTNode], variable: str) -> Optional[str]:
        if not isinstance(update, Assignment) or update.identifier != variable:
            return None
        if update.operator == "++":
            return "1"
        if update.operator == "+=" and update.value is not None:
            return self._expr(update.value)
        return None

    def visit_return_statement(self, node: ReturnStatement):
        if node.value is None:
            self._emit("return")
        else:
            self._emit(f"return {self._expr(node.value)}")

    def visit_printf_statement(self, node: PrintfStatement):
        arguments = node.arguments
        if not arguments:
            self._emit("print()")
            return

        fmt, rest = arguments[0], arguments[1:]
        if not (isinstance(fmt, Literal) and fmt.is_string):
            self._emit(f'print({self._call_arguments(arguments)}, end="")')
            return

        text = quote_text(fmt.value)
        body = formats.strip_trailing_newline(text)
        end = "" if formats.has_trailing_newline(text) else ', end=""'

        if rest:
            template = formats.to_python_template(body)
            self._emit(f'print("{template}".format({self._call_arguments(rest)}){end})')
        elif body or end:
            self._emit(f'print("{formats.collapse_percents(body)}"{end})')
        else:
            self._emit("print()")

    def visit_scanf_statement(self, node: ScanfStatement):
        if len(node.arguments) < 2:
            self._emit_comment("Input needed")
            return

        fmt = node.arguments[0]
        text = fmt.value if isinstance(fmt, Literal) and fmt.is_string else None
        for position, target in enumerate(node.arguments[1:]):
            name = self._expr(target)
            if name:
                self._emit(f"{name} = {INPUT_READERS[formats.input_kind(text, position)]}")

    def visit_block(self, node: Block):
        # No block scope in Python
        self._emit_statements(node.body)

    def _operator(self, operator: str) -> str:
        return PYTHON_OPERATORS.get(operator, operator)

    def _precedence(self, node: Optional[ASTNode]) -> int:
        if isinstance(node, UnaryExpression) and node.operator == "!":
            return NOT_PRECEDENCE
        return super()._precedence(node)

    def _must_group(self, child: ASTNode, parent_operator: str) -> bool:
        return (parent_operator in COMPARISON_OPERATORS
                and isinstance(child, BinaryExpression)
                and child.operator in COMPARISON_OPERATORS)
