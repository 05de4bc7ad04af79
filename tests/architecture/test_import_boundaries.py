"""
Import-boundary enforcement.

1. Domain purity   -- timesheet_kernel/domain/** may not import SQLAlchemy,
                      models, services, selectors or db.
2. Kernel boundary -- timesheet_kernel/** may not import timesheet_config.
3. Read side       -- timesheet_kernel/selectors/** may not import services.

All scanning is done via AST -- these tests are read-only.
"""

import ast
import glob
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def _python_files(root: Path) -> list[str]:
    """Return all .py files under *root*, sorted for deterministic order."""
    return sorted(glob.glob(f"{root}/**/*.py", recursive=True))


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = ast.parse(Path(filepath).read_text(), filename=filepath)
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(root: Path, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for filepath in _python_files(root):
        for lineno, module in _extract_imports(filepath):
            if _matches_any(module, forbidden):
                found.append(f"{filepath}:{lineno} imports {module}")
    return found


class TestDomainPurity:
    def test_domain_has_no_persistence_imports(self):
        forbidden = (
            "sqlalchemy",
            "timesheet_kernel.db",
            "timesheet_kernel.models",
            "timesheet_kernel.services",
            "timesheet_kernel.selectors",
        )
        violations = _violations(ROOT / "timesheet_kernel" / "domain", forbidden)
        assert not violations, "\n".join(violations)


class TestKernelBoundary:
    def test_kernel_never_imports_config(self):
        violations = _violations(ROOT / "timesheet_kernel", ("timesheet_config",))
        assert not violations, "\n".join(violations)

    def test_selectors_never_import_services(self):
        violations = _violations(
            ROOT / "timesheet_kernel" / "selectors", ("timesheet_kernel.services",)
        )
        assert not violations, "\n".join(violations)
