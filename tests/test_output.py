"""Tests for the output formatting system."""

from __future__ import annotations

import json

import pytest

from pokedex import output as output_module
from pokedex.output import OutputManager, _should_disable_color, get_output, reset_output, set_output


class TestColorDetection:
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_dumb_term(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_color_allowed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestStreams:
    def test_data_to_stdout(self, capsys) -> None:
        OutputManager(no_color=True).print_data("area-1")
        captured = capsys.readouterr()
        assert captured.out == "area-1\n"
        assert captured.err == ""

    def test_error_to_stderr_even_when_quiet(self, capsys) -> None:
        OutputManager(no_color=True, quiet=True).error("boom")
        assert capsys.readouterr().err == "Error: boom\n"

    def test_quiet_suppresses_info(self, capsys) -> None:
        OutputManager(no_color=True, quiet=True).info("hello")
        assert capsys.readouterr().err == ""

    def test_debug_only_when_verbose(self, capsys) -> None:
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"

    def test_success_hidden_when_quiet(self, capsys) -> None:
        OutputManager(no_color=True, quiet=True).success("saved")
        OutputManager(no_color=True).success("shown")
        assert capsys.readouterr().err == "shown\n"


class TestData:
    def test_plain_table(self, capsys) -> None:
        OutputManager(no_color=True).print_table(["key", "value"], [["size", "3"]])
        assert capsys.readouterr().out == "key\tvalue\nsize\t3\n"

    def test_plain_json(self, capsys) -> None:
        OutputManager(no_color=True).format_response({"ttl_seconds": 300})
        assert json.loads(capsys.readouterr().out) == {"ttl_seconds": 300}


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_output(self) -> None:
        manager = OutputManager(no_color=True)
        set_output(manager)
        assert output_module.get_output() is manager
