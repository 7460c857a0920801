from __future__ import annotations

import pytest

from flowkit.git.parsing import (
    get_branch_names,
    get_remote_names,
    normalize_newlines,
    strip_refs_heads,
    trim_branch_name,
)


@pytest.mark.parametrize("output", [None, "", "    ", "\n\n", " \r\n \r\n"])
def test_get_branch_names_returns_empty_list(output: str | None) -> None:
    assert get_branch_names(output) == []


def test_get_branch_names_parses_git_branch_output() -> None:
    output = "  feature/branch-1\n* fix/branch-2\n  master\n\n"

    assert get_branch_names(output) == ["feature/branch-1", "fix/branch-2", "master"]


def test_get_branch_names_skips_blank_lines_and_keeps_order() -> None:
    assert get_branch_names("a\n\nb\n") == ["a", "b"]
    assert get_branch_names("zeta\nalpha\nmid") == ["zeta", "alpha", "mid"]


def test_get_branch_names_strips_carriage_returns() -> None:
    output = "  develop\r\n* feature/login\r\n"

    assert get_branch_names(output) == ["develop", "feature/login"]


def test_get_branch_names_keeps_duplicates() -> None:
    assert get_branch_names("main\n* main\nmain\n") == ["main", "main", "main"]


def test_get_branch_names_drops_lines_that_are_only_markers() -> None:
    assert get_branch_names("*\n  \n\r\nrelease/1.0\n") == ["release/1.0"]


def test_get_branch_names_keeps_inner_spaces_and_stars() -> None:
    # Only the ends are trimmed; git-flow never emits such names but they must survive.
    assert get_branch_names("* odd * name \n") == ["odd * name"]


def test_trim_branch_name_is_idempotent() -> None:
    once = trim_branch_name("* \r feature/x \n")
    assert once == "feature/x"
    assert trim_branch_name(once) == once


def test_trim_branch_name_leaves_tabs() -> None:
    assert trim_branch_name("\tmain ") == "\tmain"


def test_get_remote_names() -> None:
    assert get_remote_names("origin\nupstream\n\n") == ["origin", "upstream"]
    assert get_remote_names("") == []
    assert get_remote_names(None) == []


@pytest.mark.parametrize(
    ("ref", "expected"),
    [
        ("refs/heads/main", "main"),
        ("refs/heads/feature/login", "feature/login"),
        ("main", "main"),
        ("refs/tags/v1.0", "refs/tags/v1.0"),
        ("", ""),
    ],
)
def test_strip_refs_heads(ref: str, expected: str) -> None:
    assert strip_refs_heads(ref) == expected


def test_normalize_newlines() -> None:
    assert normalize_newlines("a\r\nb\rc\nd") == "a\nb\nc\nd"
