"""
Tests du modèle de projet et du chargement du document JSON de l'application.
"""

import json

import pytest

from bookgen_export.config import ExportDefaults
from bookgen_export.exceptions import BookExportError, ProjectFormatError
from bookgen_export.models import BookMeta, BookProject, load_project

PROJECT_DOCUMENT = {
    "meta": {
        "id": "b7c1",
        "title": "The Lighthouse",
        "subtitle": "A Tale",
        "authorName": "Ann Writer",
        "language": "fr",
        "genre": "Mystery",
        "tagline": "Keep the light on",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-02-01T00:00:00Z",
        "version": 3,
    },
    "premise": "A keeper finds a letter.",
    "coverImageId": "cov",
    "outline": [{"ignored": True}],
    "chapters": [
        {
            "id": "ch1",
            "title": "Arrival",
            "synopsis": "She arrives.",
            "imageId": "ch1img",
            "sections": [
                {
                    "id": "s1",
                    "title": "Dock",
                    "content": "<p>Waves.</p>",
                    "images": [
                        {"id": "m1", "mime": "image/jpeg", "altText": "Dock", "caption": "At dawn"},
                        {"mime": "image/png"},
                    ],
                }
            ],
        },
        {"id": "ch2", "title": "Storm"},
    ],
}


class TestFromDict:
    """Tests de BookProject.from_dict."""

    def test_full_document(self):
        project = BookProject.from_dict(PROJECT_DOCUMENT)

        meta = project.meta
        assert (meta.id, meta.title, meta.subtitle) == ("b7c1", "The Lighthouse", "A Tale")
        assert meta.author_name == "Ann Writer"
        assert meta.language == "fr"
        assert meta.tagline == "Keep the light on"
        assert meta.version == 3
        assert project.premise == "A keeper finds a letter."
        assert project.cover_image_id == "cov"

        first, second = project.chapters
        assert first.image_id == "ch1img"
        assert first.synopsis == "She arrives."
        image = first.sections[0].images[0]
        assert (image.id, image.mime, image.alt_text, image.caption) == (
            "m1",
            "image/jpeg",
            "Dock",
            "At dawn",
        )
        assert len(first.sections[0].images) == 1
        assert second.sections == []

    def test_minimal_document(self):
        project = BookProject.from_dict({"meta": {"id": "x", "title": "T"}})

        assert project.chapters == []
        assert project.premise == ""
        assert project.cover_image_id is None
        assert project.meta.author_name is None

    @pytest.mark.parametrize(
        "document, field",
        [
            ([], "<root>"),
            ({}, "meta"),
            ({"meta": {"title": "T"}}, "meta.id"),
            ({"meta": {"id": "x"}}, "meta.title"),
            ({"meta": {"id": "x", "title": "T"}, "chapters": "nope"}, "chapters"),
            ({"meta": {"id": "x", "title": "T"}, "chapters": [1]}, "chapters[0]"),
        ],
    )
    def test_invalid_documents(self, document, field):
        with pytest.raises(ProjectFormatError) as exc_info:
            BookProject.from_dict(document, source="book.json")

        assert exc_info.value.field == field
        assert "book.json" in str(exc_info.value)


class TestMetaDefaults:
    def test_language_fallback(self):
        meta = BookMeta(id="x", title="T")
        assert meta.lang == "en"

        ExportDefaults().language = "es"
        assert meta.lang == "es"

    def test_author_fallback(self):
        assert BookMeta(id="x", title="T").author == "Unknown Author"
        assert BookMeta(id="x", title="T", author_name="Me").author == "Me"


class TestLoadProject:
    def test_load(self, tmp_path):
        path = tmp_path / "The_Lighthouse.book.json"
        path.write_text(json.dumps(PROJECT_DOCUMENT), encoding="utf-8")

        project = load_project(path)

        assert project.meta.title == "The Lighthouse"
        assert [c.title for c in project.chapters] == ["Arrival", "Storm"]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.book.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ProjectFormatError) as exc_info:
            load_project(path)

        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, BookExportError)
        assert str(path) in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_project(tmp_path / "absent.book.json")
