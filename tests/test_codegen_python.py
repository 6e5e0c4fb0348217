"""
Test suite for the Python generator.

Tests cover:
- Module layout and the __main__ guard
- Declarations and defaults
- Control flow, including the range() approximation of for loops
- printf/scanf translation
- Operator spelling and parenthesization
"""

import textwrap
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from cbridge.codegen import Dialect, PythonGenerator, CodeGenerator, get_generator, generate
from cbridge.parser import parse_source, Program


def python(source: str) -> str:
    return generate(parse_source(source), Dialect.PYTHON)


def lines(source: str):
    return python(source).splitlines()


class TestPythonProgramStructure(unittest.TestCase):
    """Test cases for the overall shape of the output."""

    def test_hello_world(self):
        source = textwrap.dedent("""\
            #include <stdio.h>

            int main() {
                printf("Hello, World!\\n");
                return 0;
            }
        """)
        expected = textwrap.dedent("""\
            def main():
                print("Hello, World!")
                return 0


            if __name__ == "__main__":
                main()
        """)
        self.assertEqual(python(source), expected)

    def test_functions_and_main(self):
        source = textwrap.dedent("""\
            int add(int a, int b) {
                return a + b;
            }

            int main() {
                int r = add(2, 3);
                printf("%d\\n", r);
                return 0;
            }
        """)
        expected = textwrap.dedent("""\
            def add(a, b):
                return a + b


            def main():
                r = add(2, 3)
                print("{}".format(r))
                return 0


            if __name__ == "__main__":
                main()
        """)
        self.assertEqual(python(source), expected)

    def test_main_parameters_are_dropped(self):
        self.assertEqual(lines("int main(int argc) { }")[0], "def main():")

    def test_globals_before_functions(self):
        expected = textwrap.dedent("""\
            total = 0


            def bump():
                total += 1
        """)
        self.assertEqual(python("int total; void bump() { total++; }"), expected)

    def test_empty_program(self):
        self.assertEqual(python(""), "")
        self.assertEqual(python("#include <stdio.h>"), "")

    def test_empty_bodies_get_pass(self):
        self.assertEqual(python("void noop() {}"), "def noop():\n    pass\n")
        self.assertEqual(lines("while (x) {}"), ["while x:", "    pass"])

    def test_comment_only_body_gets_pass(self):
        self.assertEqual(
            lines("void f() { for (i = 9; i > 0; i--) {} }"),
            ["def f():", "    # For loop conversion needed", "    pass"]
        )

    def test_invalid_root(self):
        """Test the one-line diagnostic for a malformed tree root."""
        self.assertEqual(PythonGenerator().generate("int x;"), "# Error: Invalid AST structure")
        self.assertEqual(PythonGenerator().generate(Program(body=None)), "# Error: Invalid AST structure")

    def test_indent_width(self):
        generator = get_generator("indentation-scoped", indent=2)
        output = generator.generate(parse_source("if (a) { b = 1; }"))
        self.assertEqual(output, "if a:\n  b = 1\n")

    def test_generator_instances_are_reusable(self):
        generator = PythonGenerator()
        first = generator.generate(parse_source("x = 1;"))
        second = generator.generate(parse_source("y = 2;"))
        self.assertEqual((first, second), ("x = 1\n", "y = 2\n"))

    def test_base_generator_is_abstract(self):
        """Test that every visit method has to be implemented."""
        with self.assertRaises(TypeError):
            CodeGenerator()


class TestPythonStatements(unittest.TestCase):
    """Test cases for statements."""

    def test_default_values(self):
        self.assertEqual(
            lines("int x; long l; short s; float f; double d; char c; bool b;"),
            ["x = 0", "l = 0", "s = 0", "f = 0.0", "d = 0.0", "c = ''", "b = False"]
        )

    def test_initializers(self):
        self.assertEqual(
            lines("int x = 0; char c = 'a'; float f = 1.5;"),
            ["x = 0", 'c = "a"', "f = 1.5"]
        )

    def test_assignments(self):
        self.assertEqual(
            lines("x = 1; x += 2; x *= 3; x++; x--;"),
            ["x = 1", "x += 2", "x *= 3", "x += 1", "x -= 1"]
        )

    def test_if_elif_else(self):
        self.assertEqual(
            lines("if (x > 0) { y = 1; } else if (x < 0) { y = -1; } else { y = 0; }"),
            [
                "if x > 0:",
                "    y = 1",
                "elif x < 0:",
                "    y = -1",
                "else:",
                "    y = 0",
            ]
        )

    def test_dangling_else(self):
        self.assertEqual(
            lines("if (a) if (b) x = 1; else x = 2;"),
            [
                "if a:",
                "    if b:",
                "        x = 1",
                "    else:",
                "        x = 2",
            ]
        )

    def test_while_loop(self):
        self.assertEqual(
            lines("while (n > 1) { n = n / 2; steps++; }"),
            ["while n > 1:", "    n = n / 2", "    steps += 1"]
        )

    def test_nested_block_is_inlined(self):
        self.assertEqual(lines("{ int t = 1; { t++; } }"), ["t = 1", "t += 1"])

    def test_return_forms(self):
        self.assertEqual(
            lines("int f(int x) { if (x) { return; } return x; }"),
            ["def f(x):", "    if x:", "        return", "    return x"]
        )

    def test_expression_statements_dropped(self):
        self.assertEqual(lines("helper(1); x + 1;"), ["helper(1)"])


class TestPythonForLoops(unittest.TestCase):
    """Test cases for the range() approximation."""

    def _header(self, source: str) -> str:
        return lines(source)[0]

    def test_less_than_bound(self):
        self.assertEqual(self._header("for (i = 0; i < 5; i++) { x++; }"), "for i in range(0, 5):")

    def test_less_equal_bound_is_folded(self):
        self.assertEqual(self._header("for (i = 0; i <= 5; i++) { x++; }"), "for i in range(0, 6):")

    def test_less_equal_symbolic_bound(self):
        self.assertEqual(self._header("for (i = 1; i <= n; i++) {}"), "for i in range(1, n + 1):")
        self.assertEqual(self._header("for (i = 1; i <= n - 1; i++) {}"), "for i in range(1, n - 1 + 1):")

    def test_declaration_initializer(self):
        self.assertEqual(self._header("for (int k = 2; k < n; k++) {}"), "for k in range(2, n):")
        self.assertEqual(self._header("for (int k; k < 3; k++) {}"), "for k in range(0, 3):")

    def test_prefix_increment_and_step(self):
        self.assertEqual(self._header("for (i = 0; i < 9; ++i) {}"), "for i in range(0, 9):")
        self.assertEqual(self._header("for (i = 0; i < 10; i += 2) {}"), "for i in range(0, 10, 2):")
        self.assertEqual(self._header("for (i = 0; i < 10; i += 1) {}"), "for i in range(0, 10):")

    def test_body(self):
        self.assertEqual(
            lines('for (i = 0; i < 3; i++) { printf("%d\\n", i); }'),
            ["for i in range(0, 3):", '    print("{}".format(i))']
        )

    def test_unconvertible_loops_get_placeholder(self):
        """Test that loops outside the counting shape become a comment."""
        sources = [
            "for (i = 10; i > 0; i--) { x++; }",
            "for (i = 0; j < 5; i++) { x++; }",
            "for (i = 0; i < 5; j++) { x++; }",
            "for (i = 0; i != 5; i++) { x++; }",
            "for (;;) { x++; }",
            "for (i = 0; i < 5;) { x++; }",
            "for (i += 1; i < 5; i++) { x++; }",
        ]
        for source in sources:
            with self.subTest(source=source):
                self.assertEqual(lines(source), ["# For loop conversion needed"])


class TestPythonInputOutput(unittest.TestCase):
    """Test cases for printf and scanf."""

    def test_printf_forms(self):
        cases = {
            'printf("Hi");': 'print("Hi", end="")',
            'printf("Hi\\n");': 'print("Hi")',
            'printf("\\n");': "print()",
            "printf();": "print()",
            'printf("100%%\\n");': 'print("100%")',
            'printf("%d %s\\n", n, name);': 'print("{} {}".format(n, name))',
            'printf("%i %lf %5.2f", a, b, c);': 'print("{} {} {:5.2f}".format(a, b, c), end="")',
            'printf("%x {set}\\n", v);': 'print("{:x} {{set}}".format(v))',
            "printf(message);": 'print(message, end="")',
        }
        for source, expected in cases.items():
            with self.subTest(source=source):
                self.assertEqual(lines(source), [expected])

    def test_double_quote_character_literal(self):
        self.assertEqual(lines('printf("%c\\n", \'"\');'), ['print("{}".format("\\""))'])
        self.assertEqual(lines("printf('\"');"), ['print("\\"", end="")'])
        self.assertEqual(lines("r = '\"';"), ['r = "\\""'])

    def test_scanf_primitives(self):
        self.assertEqual(
            lines('scanf("%d %f %lf %s %c", &a, &b, &c, s, &ch);'),
            [
                "a = int(input())",
                "b = float(input())",
                "c = float(input())",
                "s = input()",
                "ch = input()[0]",
            ]
        )

    def test_scanf_defaults_to_integer(self):
        self.assertEqual(lines('scanf("value", &x);'), ["x = int(input())"])

    def test_scanf_without_target(self):
        self.assertEqual(lines("scanf();"), ["# Input needed"])


class TestPythonExpressions(unittest.TestCase):
    """Test cases for expression rendering."""

    def _expr(self, source: str) -> str:
        return lines(f"r = {source};")[0][len("r = "):]

    def test_logical_operators(self):
        self.assertEqual(self._expr("a && !b || c"), "a and not b or c")
        self.assertEqual(self._expr("!(a && b)"), "not (a and b)")

    def test_not_binds_looser_than_comparison(self):
        """Test that C's tight '!' keeps its meaning under Python's loose 'not'."""
        self.assertEqual(self._expr("!(a == b)"), "not a == b")
        self.assertEqual(self._expr("!a == b"), "(not a) == b")
        self.assertEqual(self._expr("-(!a)"), "-(not a)")

    def test_comparisons_are_not_chained(self):
        self.assertEqual(self._expr("a < b == c"), "(a < b) == c")
        self.assertEqual(self._expr("a == (b < c)"), "a == (b < c)")
        self.assertEqual(self._expr("a < b && b < c"), "a < b and b < c")

    def test_arithmetic_grouping(self):
        self.assertEqual(self._expr("(a + b) * c"), "(a + b) * c")
        self.assertEqual(self._expr("a / (b * c)"), "a / (b * c)")
        self.assertEqual(self._expr("a % b + c"), "a % b + c")

    def test_address_of_is_elided(self):
        self.assertEqual(self._expr("&x"), "x")


if __name__ == '__main__':
    unittest.main()
