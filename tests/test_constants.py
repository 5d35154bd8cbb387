from __future__ import annotations

import logging

from irclink.constants import _from_env


def test_from_env_unset_gives_default(monkeypatch):  # type: ignore[no-untyped-def]
    monkeypatch.delenv("IRC_TEST_VALUE", raising=False)
    assert _from_env("IRC_TEST_VALUE", 6667, int) == 6667


def test_from_env_empty_gives_default(monkeypatch):  # type: ignore[no-untyped-def]
    monkeypatch.setenv("IRC_TEST_VALUE", "")
    assert _from_env("IRC_TEST_VALUE", "irclink", str) == "irclink"


def test_from_env_casts_value(monkeypatch):  # type: ignore[no-untyped-def]
    monkeypatch.setenv("IRC_TEST_VALUE", "2.5")
    assert _from_env("IRC_TEST_VALUE", 30.0, float) == 2.5


def test_from_env_invalid_value_warns(monkeypatch, caplog):  # type: ignore[no-untyped-def]
    monkeypatch.setenv("IRC_TEST_VALUE", "not-a-port")
    caplog.set_level(logging.WARNING)
    assert _from_env("IRC_TEST_VALUE", 6667, int) == 6667
    assert "IRC_TEST_VALUE" in caplog.text
