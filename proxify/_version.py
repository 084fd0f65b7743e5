"""Version and system information for proxify.

Usage:
    from proxify._version import __version__, get_version_info, print_version_info

    print(__version__)  # "0.1.0"
    print_version_info()  # for bug reports

CLI Usage:
    python -m proxify --version
    python -m proxify info
"""

from __future__ import annotations

import importlib.util
import platform
import sys
from importlib import metadata
from typing import Any, Dict, Optional

# Version components
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0
VERSION_SUFFIX = ""  # e.g., "alpha", "beta", "rc1"

__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}{'-' + VERSION_SUFFIX if VERSION_SUFFIX else ''}"


def get_python_info() -> Dict[str, str]:
    """Get Python interpreter information."""
    return {
        "version": platform.python_version(),
        "implementation": platform.python_implementation(),
        "executable": sys.executable,
    }


def get_platform_info() -> Dict[str, str]:
    """Get platform/OS information."""
    return {
        "system": platform.system(),
        "release": platform.release(),
        "machine": platform.machine(),
    }


def _get_package_version(module_name: str, package_name: str) -> Optional[str]:
    """Return the installed version of a package, or None if not installed.

    Args:
        module_name: Name of the module to look for.
        package_name: Distribution name on the package index.
    """
    if importlib.util.find_spec(module_name) is None:
        return None
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def get_dependency_versions() -> Dict[str, Optional[str]]:
    """Get versions of the runtime dependencies."""
    return {
        "pydantic": _get_package_version("pydantic", "pydantic"),
        "pydantic_core": _get_package_version("pydantic_core", "pydantic-core"),
        "typing_extensions": _get_package_version(
            "typing_extensions", "typing-extensions"
        ),
    }


def get_version_info() -> Dict[str, Any]:
    """Get version, python, platform and dependency info."""
    return {
        "proxify": __version__,
        "python": get_python_info(),
        "platform": get_platform_info(),
        "dependencies": get_dependency_versions(),
    }


def format_version_info(info: Optional[Dict[str, Any]] = None) -> str:
    """Format version info as a human-readable string with aligned colons."""
    if info is None:
        info = get_version_info()

    sections = [
        ("Python", list(info["python"].items())),
        ("Platform", list(info["platform"].items())),
        (
            "Dependencies",
            [(pkg, ver or "not installed") for pkg, ver in info["dependencies"].items()],
        ),
    ]
    width = max(len(label) for _, fields in sections for label, _ in fields)

    lines = [f"proxify: {info['proxify']}"]
    for title, fields in sections:
        lines.append("")
        lines.append(f"{title}:")
        for label, value in fields:
            lines.append(f"  {label:>{width}} : {value}")
    return "\n".join(lines)


def print_version_info() -> None:
    """Print version and system information to stdout."""
    print(format_version_info())
