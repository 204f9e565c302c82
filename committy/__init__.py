"""Interactive assistant that splits a dirty working tree into topic commits."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("committy")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
