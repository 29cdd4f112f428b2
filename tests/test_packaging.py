"""Every third-party module the package imports is declared in setup.py."""

from __future__ import annotations

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _top_level_imports(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf8"))
    names = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            names.add(node.module.split(".")[0])
    return names


def _declared_dependencies() -> set[str]:
    tree = ast.parse((ROOT / "setup.py").read_text(encoding="utf8"))
    for node in ast.walk(tree):
        if (
            isinstance(node, ast.Assign)
            and any(isinstance(t, ast.Name) and t.id == "dependencies" for t in node.targets)
        ):
            specs = ast.literal_eval(node.value)
            return {spec.split("@")[0].strip() for spec in specs}
    raise AssertionError("setup.py has no dependencies list")


def test_cli_and_utils_imports_are_declared() -> None:
    stdlib = {"__future__", "sys", "pathlib", "collections", "typing", "dataclasses"}
    imported = set()
    for name in ("cli.py", "utils.py"):
        imported |= _top_level_imports(ROOT / "mpminicharts" / name)

    missing = imported - stdlib - _declared_dependencies()

    assert missing == set()
