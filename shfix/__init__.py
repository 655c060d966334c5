"""shfix — pre-commit auto-fixer for shell scripts."""

__version__ = "0.1.0"
