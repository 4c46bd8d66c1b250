"""
CLI-level tests, run in-process so the Playwright stand-in is honoured.
"""
import pathlib

import pytest
from typer.testing import CliRunner

from site_render import __version__
from site_render.cli import app as _cli

_runner = CliRunner()


def test_render_one_page(fake_pw, make_sitemap):
    make_sitemap(pathlib.Path("sitemap.xml"), "http://example.com/")

    result = _runner.invoke(
        _cli,
        ["render", "--sitemap-file", "sitemap.xml", "--output", "output", "--parallel-renders", "1"],
    )

    assert result.exit_code == 0, result.output
    assert "All pages rendered successfully" in result.output
    assert fake_pw.launches == 1 and fake_pw.browser_closes == 1
    assert pathlib.Path("output/index.html").exists()


def test_render_failure_exits_1_naming_the_url(fake_pw, make_sitemap, no_backoff):
    make_sitemap(pathlib.Path("sitemap.xml"), "http://example.com/broken")
    fake_pw.goto_failures["http://example.com/broken"] = -1

    result = _runner.invoke(
        _cli,
        ["render", "--sitemap-file", "sitemap.xml", "-o", "output", "-j", "1", "--max-retries", "1"],
    )

    assert result.exit_code == 1
    assert "http://example.com/broken" in result.output
    assert len(fake_pw.gotos) == 2
    assert fake_pw.browser_closes == 1


def test_missing_sitemap_file_exits_1(fake_pw):
    result = _runner.invoke(_cli, ["render", "--sitemap-file", "nope.xml", "-o", "out"])
    assert result.exit_code == 1
    assert "nope.xml" in result.output
    assert fake_pw.launches == 0


@pytest.mark.parametrize(
    "args",
    [
        ["render", "-o", "out"],
        ["render", "-o", "out", "--sitemap-file", "a.xml", "--sitemap-url", "http://x/s.xml"],
        ["render", "-o", "out", "--sitemap-url", "http://x/s.xml", "--replace-url", "nope"],
        ["render", "-o", "out", "--sitemap-url", "http://x/s.xml", "--parallel-renders", "0"],
    ],
)
def test_config_errors_exit_1_before_any_work(fake_pw, monkeypatch, args):
    def _never(*a, **kw):  # pragma: no cover
        raise AssertionError("no network expected")

    monkeypatch.setattr("site_render.sitemap._get", _never)
    result = _runner.invoke(_cli, args)
    assert result.exit_code == 1
    assert "❌" in result.output
    assert fake_pw.launches == 0


def test_output_is_required():
    result = _runner.invoke(_cli, ["render", "--sitemap-file", "s.xml"])
    assert result.exit_code != 0


def test_options_from_environment(fake_pw, make_sitemap, monkeypatch):
    make_sitemap(pathlib.Path("sm.xml"), "http://example.com/env")
    monkeypatch.setenv("SITERENDER_SITEMAP_FILE", "sm.xml")
    monkeypatch.setenv("SITERENDER_OUTPUT", "envout")
    monkeypatch.setenv("SITERENDER_PARALLEL_RENDERS", "1")

    result = _runner.invoke(_cli, ["render"])

    assert result.exit_code == 0, result.output
    assert pathlib.Path("envout/env/index.html").exists()


def test_urls_command_prints_rewritten_list(fake_pw, make_sitemap):
    make_sitemap(pathlib.Path("sitemap.xml"), "https://example.com/a", "https://example.com/b")

    result = _runner.invoke(
        _cli,
        ["urls", "--sitemap-file", "sitemap.xml", "--replace-url", "http://localhost=https://example.com"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[-2:] == ["http://localhost/a", "http://localhost/b"]
    assert fake_pw.launches == 0


def test_version():
    result = _runner.invoke(_cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
