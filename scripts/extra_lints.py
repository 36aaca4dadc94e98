#!/usr/bin/env python3
"""Custom lint rules for the sampler code base.

Rules:
1. no-class-tests: test files use module-level functions (Hypothesis
   state machine ``TestCase`` classes are allowed)
2. import-in-function: source modules import at module level
3. mutable-default: no list/dict/set default arguments
4. no-print: source modules log instead of printing
5. todo-needs-issue: TODO/FIXME comments carry an issue reference
6. global-random: source modules draw from a per-instance ``random.Random``,
   never from the shared module-level generator
7. bare-except: no ``except:`` clauses in source modules

Usage: python scripts/extra_lints.py [PATH ...]   (defaults to src and tests)
"""

import ast
import re
import sys
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DIRECTORIES = ("src", "tests")

# Attributes of the random module that construct independent generators.
RANDOM_CONSTRUCTORS = frozenset({"Random", "SystemRandom"})

TODO_PATTERN = re.compile(r"#\s*(TODO|FIXME)(?!:\s*\w+-\d+)", re.IGNORECASE)


@dataclass
class LintError:
    file: Path
    line: int
    column: int
    rule: str
    message: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}: {self.rule}: {self.message}"


def is_test_file(path: Path) -> bool:
    return path.name.startswith("test_") or path.name == "conftest.py"


class LintVisitor(ast.NodeVisitor):
    """AST visitor collecting rule violations for one file."""

    def __init__(self, file: Path) -> None:
        self.file = file
        self.errors: list[LintError] = []
        self._is_test_file = is_test_file(file)
        self._function_depth = 0
        self._random_aliases: set[str] = set()

    def _add_error(self, node: ast.AST, rule: str, message: str) -> None:
        lineno = getattr(node, "lineno", 0)
        col_offset = getattr(node, "col_offset", 0)
        self.errors.append(LintError(self.file, lineno, col_offset, rule, message))

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        if self._is_test_file and node.name.startswith("Test"):
            is_hypothesis_stateful = any(
                isinstance(base, ast.Attribute) and base.attr == "TestCase"
                for base in node.bases
            )
            if not is_hypothesis_stateful:
                msg = f"Class-based test '{node.name}' found. Use functions."
                self._add_error(node, "no-class-tests", msg)
        self.generic_visit(node)

    def _visit_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        self._function_depth += 1
        for default in node.args.defaults + node.args.kw_defaults:
            if default is not None and _is_mutable_default(default):
                msg = "Mutable default argument. Use None instead."
                self._add_error(default, "mutable-default", msg)
        self.generic_visit(node)
        self._function_depth -= 1

    visit_FunctionDef = _visit_function
    visit_AsyncFunctionDef = _visit_function

    def _check_import_location(self, node: ast.Import | ast.ImportFrom) -> None:
        if self._function_depth > 0 and not self._is_test_file:
            self._add_error(
                node,
                "import-in-function",
                "Import inside function. Move to module level.",
            )

    def visit_Import(self, node: ast.Import) -> None:
        self._check_import_location(node)
        for alias in node.names:
            if alias.name == "random":
                self._random_aliases.add(alias.asname or alias.name)
        self.generic_visit(node)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        self._check_import_location(node)
        if node.module == "random" and not self._is_test_file:
            for alias in node.names:
                if alias.name not in RANDOM_CONSTRUCTORS:
                    self._add_error(
                        node,
                        "global-random",
                        f"'from random import {alias.name}' uses the shared "
                        "generator. Use a random.Random instance.",
                    )
        self.generic_visit(node)

    def visit_Call(self, node: ast.Call) -> None:
        if not self._is_test_file:
            func = node.func
            if isinstance(func, ast.Name) and func.id == "print":
                self._add_error(
                    node,
                    "no-print",
                    "Use logging instead of print() in source code.",
                )
            if (
                isinstance(func, ast.Attribute)
                and isinstance(func.value, ast.Name)
                and func.value.id in self._random_aliases
                and func.attr not in RANDOM_CONSTRUCTORS
            ):
                self._add_error(
                    node,
                    "global-random",
                    f"random.{func.attr}() uses the shared generator. "
                    "Use a random.Random instance.",
                )
        self.generic_visit(node)

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if node.type is None and not self._is_test_file:
            self._add_error(node, "bare-except", "Bare except. Name the exception.")
        self.generic_visit(node)


def _is_mutable_default(node: ast.expr) -> bool:
    if isinstance(node, (ast.List, ast.Dict, ast.Set)):
        return True
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in ("list", "dict", "set")
    )


def check_todo_comments(file: Path, source: str) -> list[LintError]:
    errors: list[LintError] = []
    for i, line in enumerate(source.splitlines(), 1):
        match = TODO_PATTERN.search(line)
        if match:
            msg = f"{match.group(1)} needs issue reference (e.g., TODO: PROJ-123)."
            errors.append(LintError(file, i, match.start(), "todo-needs-issue", msg))
    return errors


def lint_source(path: Path, source: str) -> list[LintError]:
    """Lint ``source`` as though it were the contents of ``path``."""
    try:
        tree = ast.parse(source)
    except SyntaxError as e:
        return [LintError(path, e.lineno or 0, e.offset or 0, "syntax-error", str(e))]
    visitor = LintVisitor(path)
    visitor.visit(tree)
    return visitor.errors + check_todo_comments(path, source)


def lint_file(path: Path) -> list[LintError]:
    return lint_source(path, path.read_text())


def lint_paths(paths: list[Path]) -> list[LintError]:
    errors: list[LintError] = []
    for path in paths:
        if path.is_file():
            errors.extend(lint_file(path))
        elif path.is_dir():
            for py_file in sorted(path.rglob("*.py")):
                errors.extend(lint_file(py_file))
    return sorted(errors, key=lambda e: (str(e.file), e.line, e.column))


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    paths = [Path(arg) for arg in args] or [Path(d) for d in DEFAULT_DIRECTORIES]
    errors = lint_paths(paths)

    if errors:
        for error in errors:
            print(error)
        print(f"\nFound {len(errors)} custom lint error(s)")
        return 1

    print("All custom lint checks passed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
