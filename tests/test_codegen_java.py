"""
Test suite for the Java generator.

Tests cover:
- Class wrapping, entry point and Scanner handling
- Declarations, defaults and type mapping
- Control flow rendering
- printf/scanf translation and character literals
- Parenthesization and the invalid-root diagnostic
"""

import textwrap
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from cbridge.codegen import Dialect, JavaGenerator, generate
from cbridge.parser import parse_source, Program, Block


def java(source: str) -> str:
    return generate(parse_source(source), Dialect.JAVA)


def main_lines(body: str):
    """Lines emitted between Scanner creation and scanner.close() in main."""
    lines = java(f"int main() {{ {body} }}").splitlines()
    start = lines.index("        Scanner scanner = new Scanner(System.in);") + 1
    end = lines.index("        scanner.close();")
    return [line[8:] for line in lines[start:end]]


class TestJavaProgramStructure(unittest.TestCase):
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
            import java.util.Scanner;

            public class Main {
                public static void main(String[] args) {
                    Scanner scanner = new Scanner(System.in);
                    System.out.println("Hello, World!");
                    scanner.close();
                }
            }
        """)
        self.assertEqual(java(source), expected)

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
            import java.util.Scanner;

            public class Main {
                public static int add(int a, int b) {
                    return a + b;
                }

                public static void main(String[] args) {
                    Scanner scanner = new Scanner(System.in);
                    int r = add(2, 3);
                    System.out.printf("%d\\n", r);
                    scanner.close();
                }
            }
        """)
        self.assertEqual(java(source), expected)

    def test_no_main_means_no_scanner(self):
        expected = textwrap.dedent("""\
            public class Main {
                static int x = 0;
                static double rate = 1.5;
            }
        """)
        self.assertEqual(java("int x; double rate = 1.5;"), expected)

    def test_globals_then_main(self):
        output = java("int count = 3;\nint main() { count++; }")
        self.assertIn("    static int count = 3;\n\n    public static void main(String[] args) {", output)

    def test_type_mapping(self):
        output = java("bool check(bool flag, long n, short s) { return flag; }")
        self.assertIn("public static boolean check(boolean flag, long n, short s) {", output)

    def test_void_function(self):
        output = java("void noop() {}")
        self.assertIn("    public static void noop() {\n    }\n", output)

    def test_includes_are_dropped(self):
        self.assertNotIn("stdio", java("#include <stdio.h>\nint main() { }"))

    def test_invalid_root(self):
        """Test the one-line diagnostic for a malformed tree root."""
        self.assertEqual(JavaGenerator().generate(None), "// Error: Invalid AST structure")
        self.assertEqual(JavaGenerator().generate(Block([])), "// Error: Invalid AST structure")
        self.assertEqual(JavaGenerator().generate(Program(body=())), "// Error: Invalid AST structure")


class TestJavaStatements(unittest.TestCase):
    """Test cases for statements inside main."""

    def test_default_values(self):
        """Test initial values for declarations without an initializer."""
        self.assertEqual(
            main_lines("int x; float f; double d; char c; bool b; long l; short s;"),
            [
                "int x = 0;",
                "float f = 0.0f;",
                "double d = 0.0;",
                "char c = '\\0';",
                "boolean b = false;",
                "long l = 0L;",
                "short s = 0;",
            ]
        )

    def test_char_and_float_initializers(self):
        self.assertEqual(
            main_lines("char c = 'a'; float f = 2.5; double d = 2.5;"),
            ["char c = 'a';", "float f = 2.5f;", "double d = 2.5;"]
        )

    def test_assignments(self):
        self.assertEqual(
            main_lines("x = 1; x += 2; x /= 3; x++; x--;"),
            ["x = 1;", "x += 2;", "x /= 3;", "x++;", "x--;"]
        )

    def test_if_else_if_chain(self):
        self.assertEqual(
            main_lines("if (x > 0) { y = 1; } else if (x < 0) { y = -1; } else { y = 0; }"),
            [
                "if (x > 0) {",
                "    y = 1;",
                "} else if (x < 0) {",
                "    y = -1;",
                "} else {",
                "    y = 0;",
                "}",
            ]
        )

    def test_single_statement_branches_get_braces(self):
        self.assertEqual(
            main_lines("while (n > 1) n = n / 2;"),
            ["while (n > 1) {", "    n = n / 2;", "}"]
        )

    def test_for_loop(self):
        self.assertEqual(
            main_lines('for (int i = 0; i < 5; i++) { printf("%d\\n", i); }'),
            [
                "for (int i = 0; i < 5; i++) {",
                '    System.out.printf("%d\\n", i);',
                "}",
            ]
        )

    def test_for_loop_other_shapes(self):
        self.assertEqual(main_lines("for (i = 10; i > 0; i -= 2) {}")[0], "for (i = 10; i > 0; i -= 2) {")
        self.assertEqual(main_lines("for (;;) {}")[0], "for (; ; ) {")

    def test_nested_block(self):
        self.assertEqual(
            main_lines("{ int t = 1; }"),
            ["{", "    int t = 1;", "}"]
        )

    def test_returns_inside_main(self):
        """Test that main returns nothing and loses its trailing return."""
        self.assertEqual(
            main_lines("if (bad) { return 1; } return 0;"),
            ["if (bad) {", "    return;", "}"]
        )

    def test_returns_in_other_functions(self):
        output = java("int f(int x) { if (x) { return; } return x * 2; }")
        self.assertIn("            return;\n", output)
        self.assertIn("        return x * 2;\n", output)

    def test_call_statement_and_dropped_expression(self):
        self.assertEqual(main_lines("helper(1, x); x + 1;"), ["helper(1, x);"])


class TestJavaInputOutput(unittest.TestCase):
    """Test cases for printf and scanf."""

    def test_printf_forms(self):
        cases = {
            'printf("Hi");': 'System.out.print("Hi");',
            'printf("Hi\\n");': 'System.out.println("Hi");',
            'printf("\\n");': "System.out.println();",
            "printf();": "System.out.println();",
            'printf("100%%\\n");': 'System.out.println("100%");',
            'printf("%d %s\\n", n, name);': 'System.out.printf("%d %s\\n", n, name);',
            'printf("%i %lf %5.2f", a, b, c);': 'System.out.printf("%d %f %5.2f", a, b, c);',
            'printf("%d");': 'System.out.printf("%d");',
            "printf(message);": "System.out.print(message);",
            "printf(fmt, a, b);": "System.out.printf(fmt, a, b);",
        }
        for source, expected in cases.items():
            with self.subTest(source=source):
                self.assertEqual(main_lines(source), [expected])

    def test_double_quote_character_literal(self):
        self.assertEqual(
            main_lines('printf("%c\\n", \'"\');'),
            ['System.out.printf("%c\\n", "\\"");']
        )
        self.assertEqual(main_lines('printf("say \\"hi\\"\\n");'), ['System.out.println("say \\"hi\\"");'])

    def test_scanf_single_target(self):
        self.assertEqual(main_lines('scanf("%d", &x);'), ["x = scanner.nextInt();"])
        self.assertEqual(main_lines('scanf("%f", &x);'), ["x = scanner.nextFloat();"])
        self.assertEqual(main_lines('scanf("%lf", &x);'), ["x = scanner.nextDouble();"])
        self.assertEqual(main_lines('scanf("%s", name);'), ["name = scanner.next();"])
        self.assertEqual(main_lines('scanf(" %c", &ch);'), ["ch = scanner.next().charAt(0);"])

    def test_scanf_multiple_targets(self):
        """Test that each target is read with its own marker's primitive."""
        self.assertEqual(
            main_lines('scanf("%d %f", &a, &b);'),
            ["a = scanner.nextInt();", "b = scanner.nextFloat();"]
        )

    def test_scanf_defaults_to_integer(self):
        self.assertEqual(main_lines('scanf("", &x);'), ["x = scanner.nextInt();"])
        self.assertEqual(main_lines('scanf("%d", &a, &b);')[1], "b = scanner.nextInt();")

    def test_scanf_without_target(self):
        self.assertEqual(main_lines('scanf("%d");'), ["// Scanner input needed"])


class TestJavaExpressions(unittest.TestCase):
    """Test cases for expression rendering."""

    def _expr(self, source: str) -> str:
        line = main_lines(f"r = {source};")[0]
        return line[len("r = "):-1]

    def test_grouping_is_preserved(self):
        self.assertEqual(self._expr("(a + b) * c"), "(a + b) * c")
        self.assertEqual(self._expr("a + b * c"), "a + b * c")
        self.assertEqual(self._expr("a - (b - c)"), "a - (b - c)")
        self.assertEqual(self._expr("a - b - c"), "a - b - c")
        self.assertEqual(self._expr("(a || b) && c"), "(a || b) && c")

    def test_redundant_parentheses_dropped(self):
        self.assertEqual(self._expr("((a))"), "a")
        self.assertEqual(self._expr("(a * b) + c"), "a * b + c")

    def test_unary_operators(self):
        self.assertEqual(self._expr("!(a == b)"), "!(a == b)")
        self.assertEqual(self._expr("!a == b"), "!a == b")
        self.assertEqual(self._expr("-(-y)"), "-(-y)")
        self.assertEqual(self._expr("-(a + b)"), "-(a + b)")

    def test_address_of_is_elided(self):
        self.assertEqual(self._expr("&x"), "x")
        self.assertEqual(self._expr("f(&x, 2)"), "f(x, 2)")

    def test_logical_operators_unchanged(self):
        self.assertEqual(self._expr("a && !b || c"), "a && !b || c")

    def test_literals(self):
        self.assertEqual(self._expr('"text"'), '"text"')
        self.assertEqual(self._expr("3.25"), "3.25")

    def test_character_literal_compared_with_char(self):
        """Test that one-character strings next to a char variable become chars."""
        self.assertEqual(
            main_lines("char c; if (c == 'a') { c = 'b'; } while ('y' != c) { c = '\\n'; }"),
            [
                "char c = '\\0';",
                "if (c == 'a') {",
                "    c = 'b';",
                "}",
                "while ('y' != c) {",
                "    c = '\\n';",
                "}",
            ]
        )

    def test_character_literal_with_other_types_stays_string(self):
        self.assertEqual(
            main_lines("int x; if (x == 'a') { x = 'b'; }"),
            ["int x = 0;", 'if (x == "a") {', '    x = "b";', "}"]
        )

    def test_char_parameters_and_globals(self):
        output = java(
            "char grade;\n"
            "bool isYes(char answer) { return answer == 'y'; }\n"
            "void promote() { if (grade < 'B') { grade = 'A'; } }\n"
            "void other(int answer) { answer = 'n'; }\n"
        )
        self.assertIn("        return answer == 'y';\n", output)
        self.assertIn("        if (grade < 'B') {\n", output)
        self.assertIn("            grade = 'A';\n", output)
        self.assertIn('        answer = "n";\n', output)

    def test_double_quote_format_text(self):
        self.assertEqual(main_lines("printf('\"');"), ['System.out.print("\\"");'])


if __name__ == '__main__':
    unittest.main()
