"""Installed asalang version."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    try:
        return version("asalang")
    except PackageNotFoundError:
        # Source checkout on sys.path without an install
        return "0.0.0"
