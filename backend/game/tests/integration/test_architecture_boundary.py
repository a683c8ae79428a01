"""Architectural boundary tests enforcing layer dependency rules.

Layer dependency direction (allowed):
  server → messaging → logic
  server → session → logic
  session → shared.dal

Forbidden (runtime imports):
  logic → messaging, session, server, shared
  messaging → session, server
  session → messaging, server
"""

import ast
from pathlib import Path

_GAME_ROOT = Path(__file__).resolve().parents[2]


def _collect_runtime_import_targets(source_dir: Path) -> list[tuple[str, int, str]]:
    """Parse all .py files and return (filename, lineno, module) for runtime imports.

    Skip imports inside `if TYPE_CHECKING:` blocks; those are type-only
    and do not create runtime layer coupling.
    """
    results: list[tuple[str, int, str]] = []
    for py_file in source_dir.rglob("*.py"):
        tree = ast.parse(py_file.read_text(), filename=str(py_file))
        type_checking_ranges = _find_type_checking_ranges(tree)
        for node in ast.walk(tree):
            if not isinstance(node, (ast.Import, ast.ImportFrom)):
                continue
            if any(start <= node.lineno <= end for start, end in type_checking_ranges):
                continue
            if isinstance(node, ast.Import):
                results.extend((py_file.name, node.lineno, alias.name) for alias in node.names)
            elif node.module is not None:
                results.append((py_file.name, node.lineno, node.module))
    return results


def _find_type_checking_ranges(tree: ast.Module) -> list[tuple[int, int]]:
    """Find line ranges of `if TYPE_CHECKING:` blocks."""
    ranges: list[tuple[int, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.If) and isinstance(node.test, ast.Name) and node.test.id == "TYPE_CHECKING":
            start = node.lineno
            end = max(child.lineno for child in ast.walk(node) if hasattr(child, "lineno"))
            ranges.append((start, end))
    return ranges


def _violations(layer: str, forbidden: tuple[str, ...]) -> list[str]:
    return [
        f"{name}:{lineno} {module}"
        for name, lineno, module in _collect_runtime_import_targets(_GAME_ROOT / layer)
        if module.startswith(forbidden)
    ]


def test_game_logic_is_self_contained():
    """game.logic is pure: no messaging, persistence or transport imports."""
    violations = _violations("logic", ("game.messaging", "game.session", "game.server", "shared"))
    assert violations == [], f"game.logic imports outside its layer: {violations}"


def test_messaging_does_not_import_session():
    """game.messaging must not import from game.session (layer boundary)."""
    violations = _violations("messaging", ("game.session", "game.server", "shared.db"))
    assert violations == [], f"game.messaging imports from game.session: {violations}"


def test_session_does_not_import_messaging():
    """game.session stores games; it never builds or parses events."""
    violations = _violations("session", ("game.messaging", "game.server"))
    assert violations == [], f"game.session imports from upper layers: {violations}"
