"""Run compose-file services with the `container` command-line tool."""

__version__ = "0.1.0"
__all__ = ["__version__"]