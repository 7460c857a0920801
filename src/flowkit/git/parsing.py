"""Text parsing for `git branch`-style output and ref names.

Both `git branch` and `git flow <type>` print one branch per line, indented
by two spaces, with the checked-out branch prefixed by ``*``::

      feature/branch-1
    * fix/branch-2
      master

Parsing never raises: blank or unexpected output degrades to an empty or
partial list. Exit codes are the caller's concern.
"""

from __future__ import annotations

REFS_HEADS_PREFIX = "refs/heads/"

# Current-branch marker plus the padding and line terminators around it.
BRANCH_MARKER_CHARS = "* \n\r"


def trim_branch_name(line: str) -> str:
    """Strip the current-branch marker, spaces and CR/LF from both ends."""
    return line.strip(BRANCH_MARKER_CHARS)


def get_branch_names(command_output: str | None) -> list[str]:
    """Return branch names from branch-listing output, in input order.

    Duplicates are kept and nothing is sorted. The ``*`` marker is removed
    rather than reported; use the symbolic HEAD to find the current branch.
    """
    if command_output is None or not command_output.strip():
        return []

    names: list[str] = []
    for line in command_output.split("\n"):
        if not line:
            continue
        name = trim_branch_name(line)
        if name:
            names.append(name)
    return names


def get_remote_names(command_output: str | None) -> list[str]:
    """Parse `git remote` output (one bare name per line)."""
    if command_output is None:
        return []
    return [line.strip() for line in command_output.splitlines() if line.strip()]


def strip_refs_heads(ref: str) -> str:
    """Drop a leading ``refs/heads/`` (e.g. 'refs/heads/main' -> 'main')."""
    if ref.startswith(REFS_HEADS_PREFIX):
        return ref[len(REFS_HEADS_PREFIX) :]
    return ref


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line breaks to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


__all__ = [
    "BRANCH_MARKER_CHARS",
    "REFS_HEADS_PREFIX",
    "get_branch_names",
    "get_remote_names",
    "normalize_newlines",
    "strip_refs_heads",
    "trim_branch_name",
]
