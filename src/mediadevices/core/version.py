"""Version information for mediadevices."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Get version from installed package metadata.

    Falls back to reading pyproject.toml when running from a source checkout.

    Returns:
        Version string (e.g., "0.1.0") or "unknown" if not found
    """
    try:
        return version("mediadevices")
    except PackageNotFoundError:
        try:
            import tomllib
            from pathlib import Path

            pyproject_path = Path(__file__).parents[3] / "pyproject.toml"
            if not pyproject_path.exists():
                return "unknown"

            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
            return data.get("project", {}).get("version", "unknown")

        except (OSError, ValueError):
            return "unknown"


__version__ = get_version()
