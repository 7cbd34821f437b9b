"""farmconf command line interface."""

from .main import app, GlobalOptions, main

__all__ = ["app", "GlobalOptions", "main"]
