"""
Runtime dependency checks and browser installation.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import importlib.util
import subprocess
import sys
from pathlib import Path

from colorama import Fore, Style

# import name -> pip package name
REQUIRED_MODULES = {
    "playwright": "playwright",
    "markdown_it": "markdown-it-py",
    "mdit_py_plugins": "mdit-py-plugins",
    "linkify_it": "linkify-it-py",
    "pygments": "Pygments",
    "PIL": "Pillow",
    "colorama": "colorama",
}


def _report(ok: bool, message: str) -> None:
    mark = f"{Fore.GREEN}✓" if ok else f"{Fore.RED}✗"
    print(f"{mark}{Style.RESET_ALL} {message}")


def chromium_available() -> bool:
    """Check whether Playwright's Chromium build is installed."""
    from playwright.sync_api import sync_playwright, Error as PlaywrightError

    try:
        with sync_playwright() as p:
            return Path(p.chromium.executable_path).exists()
    except PlaywrightError:
        return False


def check_dependencies(check_browser: bool = True) -> bool:
    """Report which dependencies are available. Returns True if all are."""
    all_ok = True
    for module, package in REQUIRED_MODULES.items():
        if importlib.util.find_spec(module) is not None:
            _report(True, f"{package} is available")
        else:
            _report(False, f"{package} is required but not found. Run: pip install {package}")
            all_ok = False

    if check_browser and importlib.util.find_spec("playwright") is not None:
        if chromium_available():
            _report(True, "Playwright Chromium is available")
        else:
            _report(False, "Playwright Chromium is not installed. Run: markdown-to-pdf --install-browser")
            all_ok = False

    return all_ok


def install_chromium() -> bool:
    """Install Playwright's Chromium build."""
    print("Installing Playwright Chromium...")
    try:
        subprocess.run([sys.executable, "-m", "playwright", "install", "chromium"],
                       check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        _report(False, f"Failed to install Playwright Chromium: {e.stderr}")
        return False
    _report(True, "Playwright Chromium installed successfully")
    return True
