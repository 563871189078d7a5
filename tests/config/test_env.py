from __future__ import annotations

import pytest

from petregistry.config import ConfigurationError, optional_int_env_var


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_optional_int_env_var_falls_back_to_default(
    monkeypatch: pytest.MonkeyPatch, raw: str | None
) -> None:
    if raw is None:
        monkeypatch.delenv("EXAMPLE_INT", raising=False)
    else:
        monkeypatch.setenv("EXAMPLE_INT", raw)

    assert optional_int_env_var("EXAMPLE_INT", default=7) == 7


def test_optional_int_env_var_strips_whitespace(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", " 12 ")

    assert optional_int_env_var("EXAMPLE_INT", default=7) == 12


def test_optional_int_env_var_rejects_non_integers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "twelve")

    with pytest.raises(ConfigurationError, match="EXAMPLE_INT must be an integer"):
        optional_int_env_var("EXAMPLE_INT", default=7)
