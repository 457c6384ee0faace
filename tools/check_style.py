#!/usr/bin/env python3
"""Reject shell handling that bypasses faucet.core.runner and faucet.core.bash.

Commands must go through ShellCommand (an explicit sh -c argv with a
controlled environment) and shell text is inspected with bashlex, so three
things are flagged in src/:

- importing shlex
- passing shell=True to any call
- calling os.system

Usage: tools/check_style.py [DIR]   (DIR defaults to src)
"""

import ast
import sys
from pathlib import Path


class BanFinder(ast.NodeVisitor):
    def __init__(self):
        self.hits = []

    def flag(self, node, message):
        self.hits.append((node.lineno, message))

    def visit_Import(self, node):
        if any(alias.name == "shlex" for alias in node.names):
            self.flag(node, "shlex import; use faucet.core.bash")
        self.generic_visit(node)

    def visit_ImportFrom(self, node):
        if node.module == "shlex":
            self.flag(node, "shlex import; use faucet.core.bash")
        self.generic_visit(node)

    def visit_Call(self, node):
        if any(
            kw.arg == "shell" and isinstance(kw.value, ast.Constant) and kw.value.value is True
            for kw in node.keywords
        ):
            self.flag(node, "shell=True; use ShellCommand")
        if ast.unparse(node.func) == "os.system":
            self.flag(node, "os.system; use ShellCommand")
        self.generic_visit(node)


def find_python_files(directory):
    return sorted(str(p) for p in Path(directory).rglob("*.py"))


def check_file(filepath):
    """Return (lineno, message) for each banned construction in filepath."""
    finder = BanFinder()
    finder.visit(ast.parse(Path(filepath).read_text(encoding="utf-8"), filepath))
    return sorted(finder.hits)


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    root = Path(args[0] if args else "src")
    files = find_python_files(root) if root.is_dir() else []
    if not files:
        print(f"No Python files under {root}")
        return 1

    failed = False
    for path in files:
        try:
            hits = check_file(path)
        except SyntaxError as e:
            print(f"{path}: cannot parse: {e}")
            return 1
        for lineno, message in hits:
            print(f"{path}:{lineno}: {message}")
            failed = True
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
