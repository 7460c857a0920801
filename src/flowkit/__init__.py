"""flowkit - git-flow branching workflow from the terminal.

This package provides the `flowkit` command-line tool: it shells out to
`git` / `git flow`, parses their branch listings, and classifies refs by
flow branch type.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
