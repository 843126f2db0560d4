"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from oxidoc.cli import build_parser, main, render_options


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user configuration and registry out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("OXIDOC_CONFIG", raising=False)
    monkeypatch.delenv("OXIDOC_REGISTRY", raising=False)


def make_crate(root: Path, name: str, version: str, source: str) -> Path:
    crate_dir = root / f"{name}-{version}"
    (crate_dir / "src").mkdir(parents=True)
    (crate_dir / "Cargo.toml").write_text(f'[package]\nname = "{name}"\nversion = "{version}"\n')
    (crate_dir / "src" / "lib.rs").write_text(source)
    return crate_dir


def test_parser_rejects_two_actions() -> None:
    """Verify that actions are mutually exclusive."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--all", "-s", "x"])


def test_generate_then_search(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify indexing one crate and printing search results."""
    registry = tmp_path / "registry"
    crate_dir = make_crate(tmp_path, "demo", "0.2.0", "pub struct Test;\nimpl Test { pub fn run(&self) {} }\n")

    assert main(["-g", str(crate_dir), "--registry", str(registry)]) == 0
    assert "Indexed 3 items" in capsys.readouterr().out
    assert (registry / "doc" / "demo-0.2.0" / "demo" / "sdesc-Test.odoc").is_file()

    assert main(["-s", "test", "--registry", str(registry)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert "demo::Test [Struct] (demo 0.2.0)" in out
    assert "demo::Test::run [Function] (demo 0.2.0)" in out


def test_all_indexes_registry_and_reports_failures(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify that --all continues past a broken crate and exits 1."""
    registry = tmp_path / "registry"
    index_dir = registry / "src" / "index.crates.io-6f17d22bba15001f"
    make_crate(index_dir, "good", "1.0.0", "pub fn ok() {}\n")
    broken = index_dir / "broken-0.1.0"
    broken.mkdir(parents=True)

    assert main(["--all", "--registry", str(registry)]) == 1
    out = capsys.readouterr().out
    assert "Indexed 1 crates, 1 failed" in out
    assert "broken-0.1.0" in out
    assert (registry / "doc" / "good-1.0.0").is_dir()


def test_missing_manifest_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify that a directory without Cargo.toml is reported on stderr."""
    assert main(["-g", str(tmp_path), "--registry", str(tmp_path / "registry")]) == 1
    assert "error: No Cargo.toml found" in capsys.readouterr().err


def test_parse_error_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify that a syntax error names the file."""
    crate_dir = make_crate(tmp_path, "bad", "0.1.0", "pub fn (\n")
    assert main(["-g", str(crate_dir), "--registry", str(tmp_path / "registry")]) == 1
    assert "lib.rs" in capsys.readouterr().err


def test_render_options_from_config() -> None:
    """Verify that render settings are read from configuration."""
    options = render_options({"render": {"style": "default", "color": False, "width": 72}})
    assert options.style == "default"
    assert not options.color
    assert options.width == 72
    assert options.default_language == "rust"
