"""Shared pytest fixtures and test helpers for pubctl tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from pubctl.config.settings import PubSettings
from pubctl.domain.document import Document
from pubctl.infrastructure.site import Site


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary project directory with an empty content tree.

    This is the single source of truth for the site directory layout.
    All site-related fixtures (site, _isolated_site) build on this. Local
    plugin discovery is pointed at the temp directory and entry points are
    off so installed plugins never leak into tests.
    """
    (tmp_path / "content").mkdir()
    (tmp_path / "static").mkdir()
    monkeypatch.delenv("PUBCTL_CONFIG", raising=False)
    monkeypatch.setenv("PUBCTL_PLUGINS__ENTRY_POINTS", "false")
    return tmp_path


@pytest.fixture
def site(site_root: Path) -> Site:
    """Site over the temp project directory with default settings."""
    return Site(PubSettings.from_cli(site_root=site_root))


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp site root so the CLI builds an isolated site.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes. Tests that need the path can also request ``site_root``.
    """
    monkeypatch.chdir(site_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across test modules)
# ---------------------------------------------------------------------------


def write_article(
    site_root: Path,
    relative: str,
    *,
    title: str | None = "An Article",
    date: str | None = "2021-01-05",
    description: str | None = "A short summary.",
    featured_image: str | None = None,
    body: str = "Body text.\n",
    extra: str = "",
) -> Path:
    """Write a Markdown article under ``content/`` and return its path.

    Pass ``None`` for a field to leave it out of the front matter.
    """
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if description is not None:
        lines.append(f"description: {description}")
    if featured_image is not None:
        lines.append(f"featuredImage: {featured_image}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    path = site_root / "content" / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n" + body, encoding="utf-8")
    return path


def make_doc(identifier: str, *, path: str | None = None, **kwargs: object) -> Document:
    """Build a Document directly, bypassing parsing and validation."""
    fields: dict[str, object] = {
        "identifier": identifier,
        "title": identifier.title(),
        "published_date": date(2021, 1, 5),
        "description": "d",
        "source_path": Path(path) if path else None,
    }
    fields.update(kwargs)
    return Document(**fields)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Verbose CLI runs enable telemetry for the thread; switch it back off."""
    from pubctl.services.telemetry import disable_telemetry

    try:
        yield
    finally:
        disable_telemetry()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI invocations reconfigure the root logger; put it back afterwards."""
    import logging

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    pub_level = logging.getLogger("pubctl").level
    try:
        yield
    finally:
        root.handlers = handlers
        root.setLevel(level)
        logging.getLogger("pubctl").setLevel(pub_level)
