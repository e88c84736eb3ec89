from __future__ import annotations

import typing as typ

import pytest

from polyglot_pages.config import SiteConfigError, load_site_config

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    MakeConfig = cabc.Callable[..., Path]


def test_loads_registries_in_order(tmp_path: Path, make_config: MakeConfig) -> None:
    config = load_site_config(make_config(tmp_path))

    assert config.base_url == "https://example.com"
    assert [meta.code for meta in config.select_locales()] == [
        "en",
        "de",
        "fr",
        "no",
        "da",
        "sv",
    ]
    assert [page.key for page in config.pages] == ["home", "reviews", "disclosure"]
    assert config.source.path_prefix == ""
    assert config.locales["no"].path_prefix == "no/"
    assert config.locales["no"].hreflang == "nb"
    assert config.locales_dir == tmp_path / "locales"


def test_page_descriptor_paths(tmp_path: Path, make_config: MakeConfig) -> None:
    config = load_site_config(make_config(tmp_path))

    assert config.get_page("home").url_path == ""
    assert config.get_page("reviews").url_path == "reviews/"
    assert config.get_page("disclosure").url_path == "disclosure"
    assert config.get_page("reviews").is_directory_index


def test_redirect_pages_are_hreflang_exempt(tmp_path: Path, make_config: MakeConfig) -> None:
    pages = [
        {"key": "home", "template": "index.html"},
        {"key": "old", "template": "old.html", "redirect_to": "/discounts/new"},
    ]
    config = load_site_config(make_config(tmp_path, pages=pages))

    old = config.get_page("old")
    assert old.redirect_to == "discounts/new"
    assert config.is_hreflang_exempt(old)
    assert not config.is_hreflang_exempt(config.get_page("home"))


def test_select_locales_rejects_unknown_codes(tmp_path: Path, make_config: MakeConfig) -> None:
    config = load_site_config(make_config(tmp_path))

    assert [meta.code for meta in config.select_locales(["sv", "de"])] == ["de", "sv"]
    with pytest.raises(SiteConfigError, match="xx"):
        config.select_locales(["de", "xx"])


def test_unknown_page_lists_known_keys(tmp_path: Path, make_config: MakeConfig) -> None:
    config = load_site_config(make_config(tmp_path))
    with pytest.raises(KeyError, match="home"):
        config.get_page("missing")


def test_duplicate_page_keys_rejected(tmp_path: Path, make_config: MakeConfig) -> None:
    pages = [
        {"key": "home", "template": "index.html"},
        {"key": "home", "template": "other.html"},
    ]
    with pytest.raises(SiteConfigError, match="Duplicate page key"):
        load_site_config(make_config(tmp_path, pages=pages))


def test_unknown_source_locale_rejected(tmp_path: Path, make_config: MakeConfig) -> None:
    path = make_config(tmp_path, extra_site={"source_locale": "it"})
    with pytest.raises(SiteConfigError, match="Source locale 'it'"):
        load_site_config(path)


def test_locale_missing_required_field(tmp_path: Path) -> None:
    path = tmp_path / "site.yaml"
    path.write_text(
        "site:\n  base_url: https://example.com\n"
        "locales:\n  en:\n    html_lang: en\n"
        "pages:\n  - key: home\n    template: index.html\n",
        encoding="utf-8",
    )
    with pytest.raises(SiteConfigError, match="og_locale"):
        load_site_config(path)


def test_missing_file_and_bad_top_level(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yaml")

    path = tmp_path / "list.yaml"
    path.write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_site_config(path)


def test_extraction_vocabulary_overrides(tmp_path: Path, make_config: MakeConfig) -> None:
    path = tmp_path / "site.yaml"
    make_config(tmp_path)
    text = path.read_text(encoding="utf-8")
    text += (
        "extraction:\n"
        "  nav_labels:\n    Guides: nav_guides\n"
        "  span_classes:\n    - price-tag\n"
    )
    path.write_text(text, encoding="utf-8")

    vocabulary = load_site_config(path).vocabulary
    assert vocabulary.nav_labels["Guides"] == "nav_guides"
    assert vocabulary.nav_labels["Reviews"] == "nav_reviews"
    assert vocabulary.span_classes == ["price-tag"]
