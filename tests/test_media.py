"""
Tests des sources de médias et de la résolution des images.
"""

import logging

from bookgen_export.media import (
    DirectoryMediaSource,
    MediaBlob,
    MemoryMediaSource,
    collect_image_ids,
    resolve_media,
)
from bookgen_export.models import MediaRef


class TestMemoryMediaSource:
    def test_get_and_add(self):
        source = MemoryMediaSource()
        assert source.get("a") is None

        blob = MediaBlob(id="a", mime="image/png", data=b"x")
        source.add(blob)

        assert source.get("a") is blob


class TestDirectoryMediaSource:
    """Tests de la lecture des fichiers <id>.<ext>."""

    def test_reads_image_file(self, tmp_path):
        (tmp_path / "abc.png").write_bytes(b"png bytes")

        blob = DirectoryMediaSource(tmp_path).get("abc")

        assert blob == MediaBlob(id="abc", mime="image/png", data=b"png bytes")

    def test_ignores_non_image_files(self, tmp_path):
        (tmp_path / "abc.txt").write_text("not an image")
        assert DirectoryMediaSource(tmp_path).get("abc") is None

    def test_unknown_id(self, tmp_path):
        assert DirectoryMediaSource(tmp_path).get("missing") is None

    def test_missing_directory(self, tmp_path):
        assert DirectoryMediaSource(tmp_path / "nope").get("abc") is None

    def test_rejects_paths(self, tmp_path):
        media_dir = tmp_path / "media"
        media_dir.mkdir()
        (tmp_path / "secret.png").write_bytes(b"x")

        source = DirectoryMediaSource(media_dir)

        assert source.get("../secret") is None
        assert source.get(".hidden") is None
        assert source.get("") is None

    def test_glob_characters_in_id(self, tmp_path):
        (tmp_path / "a[1].png").write_bytes(b"bracket")
        (tmp_path / "a1.png").write_bytes(b"plain")

        assert DirectoryMediaSource(tmp_path).get("a[1]").data == b"bracket"


class TestCollectImageIds:
    def test_order_and_deduplication(self, sample_project):
        sample_project.cover_image_id = "cover"
        sample_project.chapters[0].image_id = "hero"
        sample_project.chapters[0].sections[0].images = [
            MediaRef(id="cover"),
            MediaRef(id="voice", kind="audio", mime="audio/mpeg"),
        ]
        sample_project.chapters[1].sections[0].images = [MediaRef(id="map"), MediaRef(id="hero")]

        assert collect_image_ids(sample_project) == ["cover", "hero", "map"]

    def test_no_images(self, sample_project):
        assert collect_image_ids(sample_project) == []


class TestResolveMedia:
    """Tests de resolve_media : les échecs sont loggés, jamais levés."""

    def test_without_source(self, sample_project):
        sample_project.cover_image_id = "cover"

        resolved = resolve_media(sample_project, None)

        assert resolved.resources == []
        assert resolved.cover is None

    def test_resources(self, sample_project):
        sample_project.cover_image_id = "cover"
        sample_project.chapters[0].image_id = "my image"
        source = MemoryMediaSource(
            {
                "cover": MediaBlob(id="cover", mime="image/jpeg", data=b"c"),
                "my image": MediaBlob(id="my image", mime="image/svg+xml", data=b"<svg/>"),
            }
        )

        resolved = resolve_media(sample_project, source)

        assert [(r.id, r.path, r.media_type) for r in resolved.resources] == [
            ("img_cover", "images/cover.jpg", "image/jpeg"),
            ("img_my_image", "images/my_image.svg", "image/svg+xml"),
        ]
        assert resolved.cover is resolved.resources[0]
        assert resolved.cover.properties == "cover-image"
        assert resolved.resources[1].properties is None
        assert resolved.blobs == {"images/cover.jpg": b"c", "images/my_image.svg": b"<svg/>"}
        assert resolved.get("my image") is resolved.resources[1]
        assert resolved.get(None) is None

    def test_failures_are_skipped(self, sample_project, caplog):
        class FlakySource:
            def get(self, media_id):
                if media_id == "broken":
                    raise OSError("unreadable")
                if media_id == "bitmap":
                    return MediaBlob(id=media_id, mime="image/bmp", data=b"bmp")
                if media_id == "ok":
                    return MediaBlob(id=media_id, mime="image/png", data=b"png")
                return None

        sample_project.chapters[0].sections[0].images = [
            MediaRef(id="broken"),
            MediaRef(id="bitmap"),
            MediaRef(id="gone"),
            MediaRef(id="ok"),
        ]

        with caplog.at_level(logging.ERROR, logger="bookgen_export.media"):
            resolved = resolve_media(sample_project, FlakySource())

        assert [r.id for r in resolved.resources] == ["img_ok"]
        assert resolved.get("broken") is None
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 3

    def test_sanitized_name_collision(self, sample_project, caplog):
        """Deux identifiants qui donnent le même nom de fichier : seul le premier est gardé."""
        sample_project.chapters[0].sections[0].images = [MediaRef(id="a b"), MediaRef(id="a_b")]
        source = MemoryMediaSource(
            {
                "a b": MediaBlob(id="a b", mime="image/png", data=b"png"),
                "a_b": MediaBlob(id="a_b", mime="image/jpeg", data=b"jpg"),
            }
        )

        with caplog.at_level(logging.ERROR, logger="bookgen_export.media"):
            resolved = resolve_media(sample_project, source)

        assert [(r.id, r.path) for r in resolved.resources] == [("img_a_b", "images/a_b.png")]
        assert resolved.blobs == {"images/a_b.png": b"png"}
        assert resolved.get("a_b") is None
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
