"""Tests for configuration loading."""

from pathlib import Path

import pytest

from sitepager.config import CONFIG_FILENAME, PathsSettings, SitepagerConfig
from sitepager.exceptions import ConfigLoadError


def test_defaults(tmp_path: Path):
    config = SitepagerConfig.load(tmp_path)

    assert config.paths.site_root == tmp_path
    assert config.paths.abs_pages_dir == tmp_path / "pages"
    assert config.paths.abs_templates_dir == tmp_path / "templates"
    assert config.paths.abs_output_dir == tmp_path / "dist"
    assert config.pagination.segment == "page"
    assert config.pagination.template == "pagination"
    assert config.pagination.max_visible == 5
    assert config.pagination.index_filename == "index.html"


def test_absolute_paths_are_kept(tmp_path: Path):
    paths = PathsSettings(site_root=tmp_path, output_dir=Path("/srv/www"))

    assert paths.abs_output_dir == Path("/srv/www")


def test_load_reads_toml_file(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text(
        '[paths]\npages_dir = "content"\n\n[pagination]\nsegment = "seite"\nmax_visible = 3\n',
        encoding="utf-8",
    )

    config = SitepagerConfig.load(tmp_path)

    assert config.paths.abs_pages_dir == tmp_path / "content"
    assert config.pagination.segment == "seite"
    assert config.pagination.max_visible == 3
    assert config.pagination.aria_label == "Pagination"


def test_environment_overrides_file(tmp_path: Path, monkeypatch):
    (tmp_path / CONFIG_FILENAME).write_text('[pagination]\nsegment = "seite"\n', encoding="utf-8")
    monkeypatch.setenv("SITEPAGER_PAGINATION__SEGMENT", "p")

    config = SitepagerConfig.load(tmp_path)

    assert config.pagination.segment == "p"


def test_invalid_toml_raises(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text("[pagination\nsegment = ", encoding="utf-8")

    with pytest.raises(ConfigLoadError) as excinfo:
        SitepagerConfig.load(tmp_path)

    assert excinfo.value.path == str(tmp_path / CONFIG_FILENAME)
