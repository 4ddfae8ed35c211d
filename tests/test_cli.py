from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import REPO_A, FakeUrlFetcher, Repo
from mvn_resolver import cli

runner = CliRunner()


class ContextFetcher(FakeUrlFetcher):
    def __enter__(self) -> ContextFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


@pytest.fixture
def fake(monkeypatch: pytest.MonkeyPatch) -> Repo:
    for name in ("REPOSITORIES", "TARGET_DIR", "ROOTS", "TIMEOUT"):
        monkeypatch.delenv(f"MVN_RESOLVER_{name}", raising=False)
    fetcher = ContextFetcher()
    monkeypatch.setattr(cli, "HttpUrlFetcher", lambda timeout: fetcher)
    return Repo(fetcher, REPO_A)


def test_url_command_prints_one_url_per_repository(fake: Repo) -> None:
    result = runner.invoke(
        cli.app,
        ["url", "com.acme:lib:[1.0]:aar", "-r", "https://one.example/m2/", "-r", "https://two.example/m2"],
    )
    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "https://one.example/m2/com/acme/lib/1.0/lib-1.0.aar",
        "https://two.example/m2/com/acme/lib/1.0/lib-1.0.aar",
    ]


def test_url_command_rejects_bad_coordinate(fake: Repo) -> None:
    result = runner.invoke(cli.app, ["url", "com.acme:lib"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_resolve_prints_classpath(fake: Repo, tmp_path: Path) -> None:
    fake.pom("a", "1.0", dependencies=[("com.example", "b", "2.0")])
    fake.jar("a", "1.0")
    fake.pom("b", "2.0")
    fake.jar("b", "2.0")

    result = runner.invoke(
        cli.app,
        ["resolve", "com.example:a:1.0", "-r", REPO_A, "-t", str(tmp_path), "--separator", ";", "--tree"],
    )

    assert result.exit_code == 0, result.output
    expected = ";".join(
        str(p.resolve()) for p in sorted([tmp_path / "a" / "1.0.jar", tmp_path / "b" / "2.0.jar"])
    )
    assert expected in result.stdout
    assert (tmp_path / "b" / "2.0.jar").exists()


def test_resolve_writes_html(fake: Repo, tmp_path: Path) -> None:
    fake.pom("a", "1.0")
    fake.jar("a", "1.0")
    html = tmp_path / "graph.html"

    result = runner.invoke(
        cli.app,
        ["resolve", "com.example:a:1.0", "-r", REPO_A, "-t", str(tmp_path / "jars"), "--html", str(html)],
    )

    assert result.exit_code == 0, result.output
    assert html.exists()


def test_resolve_failure_exits_nonzero(fake: Repo, tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["resolve", "com.example:missing:1.0", "-r", REPO_A, "-t", str(tmp_path)])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_resolve_without_roots(fake: Repo, tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["resolve", "-r", REPO_A, "-t", str(tmp_path)])
    assert result.exit_code == 1
    assert "No root coordinates" in result.output


def test_effective_prints_tree(fake: Repo) -> None:
    fake.pom("p", "9", dependencies=[("com.example", "x", "1")])
    fake.pom("a", "1.0", parent=("com.example", "p", "9"))

    result = runner.invoke(cli.app, ["effective", "com.example:a:1.0", "-r", REPO_A])

    assert result.exit_code == 0, result.output
    assert "com.example:x:1 (scope=compile)" in result.stdout


def test_effective_prints_emoji_named_coordinates(fake: Repo) -> None:
    fake.pom("tv", "1.0", dependencies=[("org.example", "link", "2.0")])

    result = runner.invoke(cli.app, ["effective", "com.example:tv:1.0", "-r", REPO_A])

    assert result.exit_code == 0, result.output
    assert "com.example:tv:1.0" in result.stdout
    assert "org.example:link:2.0 (scope=compile)" in result.stdout


def test_resolve_prints_classpath_in_walk_order(fake: Repo, tmp_path: Path) -> None:
    fake.pom("zeta", "1", dependencies=[("com.example", "mid", "1")])
    fake.jar("zeta", "1")
    fake.pom("mid", "1", dependencies=[("com.example", "alpha", "1")])
    fake.jar("mid", "1")
    fake.pom("alpha", "1")
    fake.jar("alpha", "1")

    result = runner.invoke(
        cli.app, ["resolve", "com.example:zeta:1", "-r", REPO_A, "-t", str(tmp_path), "--separator", ";"]
    )

    assert result.exit_code == 0, result.output
    expected = ";".join(str((tmp_path / name / "1.jar").resolve()) for name in ("zeta", "mid", "alpha"))
    assert expected in result.stdout
