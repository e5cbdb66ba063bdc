"""
Tests that enforce coding standards.

These tests verify that the codebase follows our import and logging
conventions.
"""

import pathlib as _pathlib
import re as _re

import pytest as _pytest

SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "hookctl"
TESTS_DIR = _pathlib.Path(__file__).parent

_TYPE_CHECKING_LINE = _re.compile(r"^if (_typing\.)?TYPE_CHECKING:")
_LOGGER_LINE = "_logger = _logging.getLogger(__name__)"


def _python_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    return sorted(p for p in directory.rglob("*.py") if p.name != "__init__.py")


def _from_imports(content: str) -> list[tuple[int, str]]:
    """
    Find 'from X import Y' statements outside TYPE_CHECKING blocks.

    'from __future__ import' is allowed.
    """
    found: list[tuple[int, str]] = []
    in_type_checking = False

    for i, line in enumerate(content.splitlines(), start=1):
        stripped = line.strip()
        if _TYPE_CHECKING_LINE.match(line):
            in_type_checking = True
            continue
        if in_type_checking and stripped and not line[0].isspace():
            in_type_checking = False
        if in_type_checking:
            continue
        if stripped.startswith("from ") and " import " in stripped and "__future__" not in stripped:
            found.append((i, stripped))

    return found


class TestImportStyle:
    """Tests for import style compliance."""

    @_pytest.mark.parametrize("directory", [SRC_DIR, TESTS_DIR], ids=["src", "tests"])
    def test_no_from_imports(self, directory: _pathlib.Path) -> None:
        """Modules use 'import X as _x' (external) or 'import X as x' (internal)."""
        violations = [
            f"{path}:{line_num}: {line}"
            for path in _python_files(directory)
            if path.name != "test_coding_standards.py"
            for line_num, line in _from_imports(path.read_text())
        ]
        if violations:
            _pytest.fail("Found forbidden 'from X import Y' imports:\n" + "\n".join(f"  {v}" for v in violations))

    def test_type_checking_imports_allowed(self) -> None:
        content = "import typing as _typing\n\nif _typing.TYPE_CHECKING:\n    from a import B\n\nfrom c import D\n"
        assert _from_imports(content) == [(6, "from c import D")]


class TestLoggingStyle:
    """Tests for module logger conventions."""

    def test_module_loggers(self) -> None:
        """Modules that log do so through a module-level _logger."""
        violations: list[str] = []
        for path in _python_files(SRC_DIR):
            content = path.read_text()
            if "getLogger(" in content and _LOGGER_LINE not in content:
                violations.append(str(path))
        assert violations == []

    def test_no_print_in_library_code(self) -> None:
        """Only the CLI writes to the terminal, and it uses click.echo."""
        offenders = [
            str(path)
            for path in _python_files(SRC_DIR)
            if _re.search(r"^\s*print\(", path.read_text(), _re.MULTILINE)
        ]
        assert offenders == []
