"""Tests for the polyglot command functions."""

from __future__ import annotations

import typing as typ

import pytest

from polyglot_pages import cli

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def _quiet_logging(mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "_configure_logging")


def _fake_translate(
    scope: str, source: typ.Mapping[str, str], locale: typ.Any
) -> dict[str, str]:
    return {key: f"{locale.code}: {value}" for key, value in source.items()}


def test_extract_reports_written_files(
    site_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.extract(config=site_root / "site.yaml")

    out = capsys.readouterr().out
    assert f"wrote {site_root / 'templates' / 'index.html'}" in out
    assert f"wrote {site_root / 'locales' / 'en.json'} (" in out
    assert "strings)" in out


def test_translate_requires_api_key(
    seeded_site: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(SystemExit) as excinfo:
        cli.translate(config=seeded_site / "site.yaml")

    assert excinfo.value.code == 1
    assert "ANTHROPIC_API_KEY environment variable not set" in capsys.readouterr().err


def test_translate_refreshes_target_locales(
    site_root: Path,
    monkeypatch: pytest.MonkeyPatch,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    translator = mocker.MagicMock(side_effect=_fake_translate)
    factory = mocker.patch.object(cli, "MessagesTranslator", return_value=translator)
    cli.extract(config=site_root / "site.yaml")
    capsys.readouterr()

    cli.translate(config=site_root / "site.yaml", locales="en,de", sections="shared,home")

    assert capsys.readouterr().out == "de: 2 translated, 0 up to date, 0 failed\n"
    assert factory.call_args.kwargs["api_key"] == "sk-test"
    assert [call.args[0] for call in translator.call_args_list] == ["shared", "home"]
    translator.close.assert_called_once_with()
    assert (site_root / "locales" / "de.json").is_file()
    assert not (site_root / "locales" / "fr.json").exists()


def test_translate_skips_undecodable_locale(
    site_root: Path,
    monkeypatch: pytest.MonkeyPatch,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    translator = mocker.MagicMock(side_effect=_fake_translate)
    mocker.patch.object(cli, "MessagesTranslator", return_value=translator)
    cli.extract(config=site_root / "site.yaml")
    (site_root / "locales" / "de.json").write_text("{broken", encoding="utf-8")
    capsys.readouterr()

    cli.translate(config=site_root / "site.yaml", locales="de,fr", sections="shared,home")

    captured = capsys.readouterr()
    assert captured.out == "fr: 2 translated, 0 up to date, 0 failed\n"
    assert captured.err.startswith("de: skipped, Dictionary ")
    assert (site_root / "locales" / "de.json").read_text(encoding="utf-8") == "{broken"
    translator.close.assert_called_once_with()


def test_build_and_verify(seeded_site: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = seeded_site / "site.yaml"

    cli.build(config=config)
    out = capsys.readouterr().out
    assert out.rstrip().endswith("Built 18 pages for en, de, fr, no, da, sv")

    cli.verify(config=config)
    out = capsys.readouterr().out
    assert "Results: 0 errors, 0 warnings" in out
    assert out.rstrip().endswith("ALL CHECKS PASSED")


def test_verify_exits_non_zero_on_errors(
    seeded_site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = seeded_site / "site.yaml"
    cli.build(config=config, locales="en")
    (seeded_site / "dist" / "disclosure.html").unlink()
    capsys.readouterr()

    with pytest.raises(SystemExit) as excinfo:
        cli.verify(config=config, locales="en")

    out = capsys.readouterr().out
    assert excinfo.value.code == 1
    assert "ERROR: Missing: disclosure.html" in out
    assert "FAIL - Fix errors before deploying" in out


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, None), ("", None), (" , ", None), ("en, de,", ["en", "de"])],
)
def test_split_csv(value: str | None, expected: list[str] | None) -> None:
    assert cli._split_csv(value) == expected
