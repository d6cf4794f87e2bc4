"""Diagnostic tool for verifying tggrab installation and dependencies."""

import sys
from importlib import import_module
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table


def check_dependency(
    module_name: str, package_name: Optional[str] = None, optional: bool = False
) -> tuple[bool, str]:
    """
    Check if a Python module is importable.

    Args:
        module_name: Name of the module to import
        package_name: Display name of the package (defaults to module_name)
        optional: Whether this is an optional dependency

    Returns:
        Tuple of (success: bool, message: str)
    """
    display_name = package_name or module_name

    try:
        import_module(module_name)
        return True, f"[OK] {display_name}"
    except ImportError:
        if optional:
            return False, f"[WARN] {display_name} (optional - not installed)"
        return False, f"[MISSING] {display_name}"


def check_browser() -> tuple[bool, str]:
    """
    Check that Playwright can find a Chromium build.

    Returns:
        Tuple of (success: bool, message: str)
    """
    try:
        from playwright.sync_api import sync_playwright
    except ImportError:
        return False, "[WARN] Chromium (optional - playwright not installed)"

    try:
        with sync_playwright() as p:
            executable = Path(p.chromium.executable_path)
        if executable.exists():
            return True, "[OK] Chromium browser"
        return False, "[WARN] Chromium (optional - run: playwright install chromium)"
    except Exception as e:
        return False, f"[WARN] Chromium (optional - {e})"


def check_output_dir(output_dir: Optional[Path] = None) -> tuple[bool, str]:
    """
    Check if the export directory is writable.

    Args:
        output_dir: Directory to check (defaults to the current directory)

    Returns:
        Tuple of (success: bool, message: str)
    """
    test_dir = output_dir or Path(".")

    try:
        test_dir.mkdir(parents=True, exist_ok=True)

        test_file = test_dir / ".tggrab_test"
        test_file.write_text("test")
        test_file.unlink()

        return True, f"[OK] Export directory writable ({test_dir})"
    except PermissionError:
        return False, f"[FAIL] Export directory - permission denied ({test_dir})"
    except Exception as e:
        return False, f"[FAIL] Export directory - {str(e)} ({test_dir})"


def run_doctor(output_dir: Optional[Path] = None, console: Optional[Console] = None) -> int:
    """
    Run diagnostic checks and display results.

    Args:
        output_dir: Export directory to check for writability
        console: Rich console to print to

    Returns:
        Exit code (0 if all core dependencies OK, 1 if any core dependency missing)
    """
    console = console or Console()
    console.print("Running tggrab diagnostics...\n")

    core_checks = [
        ("bs4", "beautifulsoup4"),
        ("soupsieve", "soupsieve"),
        ("pydantic", "pydantic"),
        ("rich", "rich"),
    ]

    optional_checks = [
        ("yaml", "pyyaml", True),
        ("playwright.sync_api", "playwright", True),
    ]

    core_results = [check_dependency(mod, pkg) for mod, pkg in core_checks]
    optional_results = [check_dependency(mod, pkg, opt) for mod, pkg, opt in optional_checks]
    system_results = [check_output_dir(output_dir)]
    if optional_results[1][0]:
        system_results.append(check_browser())

    all_checks = {
        "Core Dependencies": core_results,
        "Optional Dependencies": optional_results,
        "System": system_results,
    }

    for category, results in all_checks.items():
        table = Table(title=category, show_header=False, box=None)
        table.add_column("Status", style="bold")

        for success, message in results:
            style = "green" if success else ("yellow" if "optional" in message else "red")
            table.add_row(message, style=style)

        console.print(table)
        console.print()

    core_failed = any(not success for success, _ in core_results)

    if core_failed:
        console.print("\nWARNING: Some core dependencies are missing!")
        console.print("\nRecommended fixes:")
        console.print("  1. For pip users: pip install --upgrade --force-reinstall tggrab")
        console.print("  2. For development: pip install -e .[dev]")
        return 1

    console.print("\nAll core dependencies installed correctly!")

    optional_missing = [msg for success, msg in optional_results if not success]
    if optional_missing:
        console.print("\nOptional features available:")
        console.print("  - YAML config support: pip install tggrab[yaml]")
        console.print("  - Live browser capture: pip install tggrab[browser]")
        console.print("  - All optional features: pip install tggrab[all]")

    return 0


if __name__ == "__main__":
    sys.exit(run_doctor())
