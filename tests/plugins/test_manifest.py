"""Tests for the built-in manifest renderer."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from pubctl.plugins.builtins.manifest import MANIFEST_FILENAME, ManifestPlugin
from tests.conftest import make_doc


class TestManifestPlugin:
    def test_writes_records_in_given_order(self, tmp_path: Path) -> None:
        docs = (
            make_doc("newer", published_date=date(2022, 1, 1)),
            make_doc("older", published_date=date(2020, 1, 1), featured_image="/img/o.png"),
        )
        out = tmp_path / "public"
        written = ManifestPlugin().publish_documents(documents=docs, output_dir=out)
        assert written == [MANIFEST_FILENAME]

        payload = json.loads((out / MANIFEST_FILENAME).read_text(encoding="utf-8"))
        assert payload["count"] == 2
        assert [d["identifier"] for d in payload["documents"]] == ["newer", "older"]
        assert payload["documents"][1]["featured_image"] == "/img/o.png"
        assert payload["documents"][0]["date"] == "2022-01-01"
        assert not (out / "manifest.json.tmp").exists()

    def test_paths_relative_to_site_root(self, tmp_path: Path) -> None:
        doc = make_doc("a", path=str(tmp_path / "content" / "a.md"))
        ManifestPlugin(site_root=tmp_path).publish_documents(documents=(doc,), output_dir=tmp_path)
        payload = json.loads((tmp_path / MANIFEST_FILENAME).read_text(encoding="utf-8"))
        assert payload["documents"][0]["path"] == "content/a.md"

    def test_path_outside_site_root_kept(self, tmp_path: Path) -> None:
        outside = tmp_path.parent / "elsewhere" / "a.md"
        doc = make_doc("a", path=str(outside))
        site_root = tmp_path / "site"
        ManifestPlugin(site_root=site_root).publish_documents(documents=(doc,), output_dir=tmp_path)
        payload = json.loads((tmp_path / MANIFEST_FILENAME).read_text(encoding="utf-8"))
        assert payload["documents"][0]["path"] == str(outside)

    def test_empty_set(self, tmp_path: Path) -> None:
        ManifestPlugin().publish_documents(documents=(), output_dir=tmp_path)
        payload = json.loads((tmp_path / MANIFEST_FILENAME).read_text(encoding="utf-8"))
        assert payload == {"count": 0, "documents": []}
