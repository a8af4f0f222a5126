"""Architectural tests for the order keys service.

All checks use static filesystem/AST inspection to avoid import-time side
effects.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
PKG_DIR = PROJECT_ROOT / "order_keys"
LOGIC_DIR = PKG_DIR / "logic"
ROUTES_DIR = PKG_DIR / "routes"
MODELS_DIR = PKG_DIR / "models"
SCHEMAS_DIR = PROJECT_ROOT / "schemas"

PROBLEM_CODES = (
    "RANK_GAP_EXHAUSTED",
    "REORDER_ITEM_NOT_FOUND",
    "REORDER_DUPLICATE_ID",
    "REQUEST_VALIDATION_FAILED",
    "INTERNAL_ERROR",
)


@dataclass
class ParsedModule:
    path: Path
    tree: ast.AST


def parse_module_safe(path: Path) -> Optional[ParsedModule]:
    try:
        code = path.read_text(encoding="utf-8")
    except Exception:
        return None
    try:
        return ParsedModule(path=path, tree=ast.parse(code, filename=str(path)))
    except SyntaxError:
        return None


def py_files_under(*roots: Path) -> list[Path]:
    files: list[Path] = []
    for root in roots:
        if not root.exists():
            continue
        for p in root.rglob("*.py"):
            if "__pycache__" in p.parts:
                continue
            files.append(p)
    return files


def imported_modules(tree: ast.AST) -> set[str]:
    names: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            names.add(node.module.split(".")[0])
    return names


def string_literals(tree: ast.AST) -> set[str]:
    return {
        node.value
        for node in ast.walk(tree)
        if isinstance(node, ast.Constant) and isinstance(node.value, str)
    }


def test_all_modules_parse() -> None:
    files = py_files_under(PKG_DIR)
    assert files, "order_keys package must contain Python modules"
    for path in files:
        assert parse_module_safe(path) is not None, f"{path} failed to parse"


def test_rank_allocator_is_pure() -> None:
    """The allocator depends on nothing but the standard library."""
    parsed = parse_module_safe(LOGIC_DIR / "rank_allocator.py")
    assert parsed is not None
    third_party = imported_modules(parsed.tree) - {"__future__", "logging", "typing", "math"}
    assert not third_party, f"rank_allocator imports {sorted(third_party)}"


def test_rank_constants_are_declared_with_contract_values() -> None:
    parsed = parse_module_safe(LOGIC_DIR / "rank_allocator.py")
    assert parsed is not None
    values: dict[str, float] = {}
    for node in parsed.tree.body:  # type: ignore[attr-defined]
        if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            try:
                values[node.target.id] = ast.literal_eval(node.value)  # type: ignore[arg-type]
            except ValueError:
                continue
    assert values.get("MIN_ORDER") == 0
    assert values.get("MAX_ORDER") == 1_000_000
    assert values.get("INITIAL_STEP") == 1000
    assert values.get("MINIMUM_ORDER_GAP") == 1


def test_gap_exhaustion_is_a_dedicated_exception() -> None:
    parsed = parse_module_safe(LOGIC_DIR / "rank_allocator.py")
    assert parsed is not None
    classes = {n.name: n for n in ast.walk(parsed.tree) if isinstance(n, ast.ClassDef)}
    assert "GapExhaustion" in classes
    bases = [b.id for b in classes["GapExhaustion"].bases if isinstance(b, ast.Name)]
    assert bases == ["Exception"]


@pytest.mark.parametrize("code", PROBLEM_CODES)
def test_problem_codes_not_hardcoded_in_routes(code: str) -> None:
    for path in py_files_under(ROUTES_DIR):
        parsed = parse_module_safe(path)
        assert parsed is not None
        assert code not in string_literals(parsed.tree), f"{path.name} hardcodes {code}"


def test_problem_codes_declared_in_problem_factory() -> None:
    parsed = parse_module_safe(LOGIC_DIR / "problem_factory.py")
    assert parsed is not None
    literals = string_literals(parsed.tree)
    for code in PROBLEM_CODES:
        assert code in literals


def test_route_modules_expose_router() -> None:
    for path in py_files_under(ROUTES_DIR):
        if path.name == "__init__.py":
            continue
        parsed = parse_module_safe(path)
        assert parsed is not None
        assigned = {
            t.id
            for n in parsed.tree.body  # type: ignore[attr-defined]
            if isinstance(n, ast.Assign)
            for t in n.targets
            if isinstance(t, ast.Name)
        }
        assert "router" in assigned, f"{path.name} must define `router`"


def test_logic_layer_does_not_import_fastapi() -> None:
    for path in py_files_under(LOGIC_DIR, MODELS_DIR):
        parsed = parse_module_safe(path)
        assert parsed is not None
        assert "fastapi" not in imported_modules(parsed.tree), f"{path.name} imports fastapi"


def test_no_bare_except() -> None:
    for path in py_files_under(PKG_DIR):
        parsed = parse_module_safe(path)
        assert parsed is not None
        for node in ast.walk(parsed.tree):
            if isinstance(node, ast.ExceptHandler):
                assert node.type is not None, f"bare except in {path}:{node.lineno}"


def test_response_schemas_exist() -> None:
    for name in ("rank_response.schema.json", "rank_plan.schema.json", "problem.schema.json"):
        assert (SCHEMAS_DIR / name).is_file(), f"missing schemas/{name}"
