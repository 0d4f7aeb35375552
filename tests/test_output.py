"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb colour disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_response and print_table in each format
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from yapi.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)
from yapi import output as output_module


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("yapi.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("yapi.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# Format resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("payload")
        captured = capfd.readouterr()
        assert captured.out == "payload\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("diagnostic line")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "diagnostic line" in captured.err

    def test_no_diagnostics_leak_into_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True, verbose=True)
        mgr.debug("GET http://example.test/api/project/get")
        mgr.format_response({"errcode": 0})
        mgr.success("done")
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"errcode": 0}
        assert "api/project/get" in captured.err


# ------------------------------------------------------------------ #
# Quiet and verbose
# ------------------------------------------------------------------ #


class TestQuietMode:
    @pytest.mark.parametrize("method", ["info", "success"])
    def test_suppressed(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("hidden")
        assert capfd.readouterr().err == ""

    @pytest.mark.parametrize("method", ["warning", "error"])
    def test_not_suppressed(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("shown")
        assert "shown" in capfd.readouterr().err


class TestVerboseMode:
    def test_debug_hidden_by_default(self, capfd, non_tty):
        OutputManager(no_color=True).debug("hidden")
        assert capfd.readouterr().err == ""

    def test_debug_prefixed_when_verbose(self, capfd, non_tty):
        OutputManager(no_color=True, verbose=True).debug("trace")
        assert capfd.readouterr().err == "[debug] trace\n"

    def test_debug_markup_escaped_with_color(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        OutputManager(verbose=True).debug("[bold]literal[/bold]")
        assert "[bold]literal[/bold]" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Rendering
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        data = {"errcode": 0, "data": {"name": "宠物"}}
        mgr.format_response(data)
        out = capfd.readouterr().out
        assert json.loads(out) == data
        assert "宠物" in out

    def test_plain_dict(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"errcode": 0, "data": {"_id": 1}})
        lines = capfd.readouterr().out.strip().split("\n")
        assert lines == ["errcode\t0", 'data\t{"_id": 1}']

    def test_plain_list(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response([{"a": 1, "b": 2}, "x"])
        assert capfd.readouterr().out == "1\t2\nx\n"

    def test_rich(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.format_response({"errcode": 0})
        assert "errcode" in capfd.readouterr().out


class TestPrintTable:
    def test_plain(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["id", "name"], [["7", "pets"], ["8", "orders"]])
        assert capfd.readouterr().out == "id\tname\n7\tpets\n8\torders\n"

    def test_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["id", "name"], [["7", "pets"]])
        assert json.loads(capfd.readouterr().out) == [{"id": "7", "name": "pets"}]

    def test_rich(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(["id", "name"], [["7", "pets"]], title="Categories")
        out = capfd.readouterr().out
        assert "Categories" in out
        assert "pets" in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_lazy_default(self, non_tty):
        reset_output()
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_module_helpers_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True))
        output_module.info("i")
        output_module.warning("w")
        output_module.debug("d")
        err = capfd.readouterr().err
        assert "i\n" in err
        assert "Warning: w" in err
        assert "[debug] d" in err
