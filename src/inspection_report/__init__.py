"""Top-level package for the inspection report builder.

Provides subpackages:
- inspection_report.extraction – decoding stored answers into records
- inspection_report.layout – numbering, pagination and fixed pages
- inspection_report.output – PDF rendering
- inspection_report.loading – snapshot files
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text(encoding="utf-8")
        except OSError:
            content = ""
        for line in content.splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("inspection-report")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 The inspection-report authors"
__all__: list[str] = ["__version__"]
