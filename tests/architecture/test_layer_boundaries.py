"""
Layer boundaries between the Artha packages.

Dependency direction:
    artha_kernel      imports nothing from the other artha packages
    artha_config      may import artha_kernel
    artha_engines     may import artha_kernel and artha_config
    artha_ingestion   may import artha_kernel
    artha_services    may import everything above

These tests read source code via AST; they import nothing.
"""

import ast
from pathlib import Path

import pytest

ROOT = Path(__file__).parents[2]


def _python_files(package: str) -> list[Path]:
    return sorted((ROOT / package).rglob("*.py"))


def _extract_imports(path: Path) -> list[tuple[int, str]]:
    tree = ast.parse(path.read_text(), filename=str(path))
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


FORBIDDEN = {
    "artha_kernel": ("artha_config", "artha_engines", "artha_ingestion", "artha_services", "scripts"),
    "artha_config": ("artha_engines", "artha_ingestion", "artha_services", "scripts"),
    "artha_engines": ("artha_ingestion", "artha_services", "scripts"),
    "artha_ingestion": ("artha_config", "artha_engines", "artha_services", "scripts"),
    "artha_services": ("scripts",),
}


@pytest.mark.parametrize("package", sorted(FORBIDDEN))
def test_no_upward_imports(package):
    violations = []
    for path in _python_files(package):
        for lineno, module in _extract_imports(path):
            for prefix in FORBIDDEN[package]:
                if module == prefix or module.startswith(f"{prefix}."):
                    violations.append(f"  {path.relative_to(ROOT)}:{lineno} imports '{module}'")
    assert not violations, (
        f"{package} must not import {', '.join(FORBIDDEN[package])}:\n"
        + "\n".join(violations)
    )


class TestEnginePurity:
    """Engines take ``now`` as a parameter; only services read the clock."""

    FORBIDDEN_CALLS = ("datetime.now", "date.today", "time.time")

    def test_no_wall_clock_reads(self):
        violations = []
        for path in _python_files("artha_engines"):
            source = path.read_text()
            for call in self.FORBIDDEN_CALLS:
                if f"{call}(" in source:
                    violations.append(f"  {path.relative_to(ROOT)} calls {call}()")
        assert not violations, "\n".join(violations)

    def test_no_file_or_network_io(self):
        violations = []
        for path in _python_files("artha_engines"):
            for lineno, module in _extract_imports(path):
                if module.split(".")[0] in ("os", "socket", "urllib", "requests", "sqlite3"):
                    violations.append(f"  {path.relative_to(ROOT)}:{lineno} imports '{module}'")
        assert not violations, "\n".join(violations)
