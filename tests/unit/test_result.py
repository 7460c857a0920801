from __future__ import annotations

import pytest

from flowkit.core import result
from flowkit.core.config import ConfigError
from flowkit.core.result import ConfigurationError, Err, FlowKitError, GitError, Ok


def test_ok_map_and_unwrap() -> None:
    assert Ok("a\nb").map(str.splitlines) == Ok(["a", "b"])
    assert Ok(3).unwrap() == 3


def test_err_map_is_noop_and_unwrap_raises() -> None:
    err = Err(GitError("boom"))

    assert err.map(str.upper) is err
    with pytest.raises(GitError, match="boom"):
        err.unwrap()


def test_error_context_is_rendered() -> None:
    error = GitError("git failed", context={"cwd": "/repo", "returncode": 128})

    assert str(error) == "git failed [cwd=/repo, returncode=128]"
    assert str(FlowKitError("plain")) == "plain"


def test_config_error_is_a_configuration_error() -> None:
    assert issubclass(ConfigError, ConfigurationError)
    assert issubclass(ConfigurationError, FlowKitError)


def test_public_surface() -> None:
    assert set(result.__all__) == {
        "Ok",
        "Err",
        "Result",
        "FlowKitError",
        "GitError",
        "ConfigurationError",
        "ValidationError",
    }
