"""Core shared infrastructure for flowkit.

This package contains foundational utilities:
    - config: Application configuration management
    - console: Rich console output and logging
    - result: Result type and error hierarchy
    - diagnostics: Checks behind `flowkit doctor`
"""

from __future__ import annotations

from . import config, console

__all__ = ["config", "console"]
