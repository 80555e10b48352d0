"""Tests for directory loading, manifests and repository URLs."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from proanalyze.sources import is_repo_url, load_directory, load_manifest, parse_repo_url


def test_load_directory_walks_in_sorted_order_and_skips_noise(tmp_path: Path) -> None:
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "b.py").write_text("b = 2\n", encoding="utf-8")
    (tmp_path / "pkg" / "a.py").write_text("a = 1\n", encoding="utf-8")
    (tmp_path / "main.py").write_text("print('main')\n", encoding="utf-8")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config.py").write_text("ignored\n", encoding="utf-8")
    (tmp_path / "image.bin").write_bytes(b"\xff\xfe\x00\x81")

    files = load_directory(tmp_path)

    assert [file.path for file in files] == ["main.py", "pkg/a.py", "pkg/b.py"]
    assert files[1].name == "a.py"
    assert files[1].content == "a = 1\n"


def test_load_directory_requires_a_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_directory(tmp_path / "missing")


def test_load_manifest_reads_records(tmp_path: Path) -> None:
    manifest = tmp_path / "files.json"
    manifest.write_text(
        json.dumps(
            [
                {"name": "app.py", "path": "src/app.py", "content": "x = 1\n", "size": 6},
                {"path": "lib/util.py", "content": "y = 2\n"},
            ]
        ),
        encoding="utf-8",
    )

    files = load_manifest(manifest)

    assert [(file.name, file.path) for file in files] == [("app.py", "src/app.py"), ("util.py", "lib/util.py")]
    assert files[1].size == 6


@pytest.mark.parametrize("body", ["{}", "[1, 2]", '[{"name": "a.py"}]', "not json"])
def test_load_manifest_rejects_malformed_input(tmp_path: Path, body: str) -> None:
    manifest = tmp_path / "files.json"
    manifest.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_manifest(manifest)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/octo/demo", ("octo", "demo")),
        ("https://github.com/octo/demo.git", ("octo", "demo")),
        ("git@github.com:octo/demo.git", ("octo", "demo")),
        ("https://github.com/octo/demo/tree/main/src", ("octo", "demo")),
    ],
)
def test_parse_repo_url(url: str, expected: tuple[str, str]) -> None:
    assert parse_repo_url(url) == expected


def test_parse_repo_url_rejects_other_hosts() -> None:
    with pytest.raises(ValueError, match="Invalid GitHub URL"):
        parse_repo_url("https://gitlab.com/octo/demo")


def test_is_repo_url_separates_remote_references_from_paths() -> None:
    assert is_repo_url("https://github.com/octo/demo")
    assert is_repo_url("git@github.com:octo/demo.git")
    assert not is_repo_url("projects/demo")
    assert not is_repo_url("/home/me/demo")
