"""
Tests du document de package (content.opf).
"""

import re
from datetime import datetime, timedelta, timezone

from bookgen_export.config import ExportDefaults
from bookgen_export.epub.package import (
    book_identifier,
    format_modified,
    render_package_document,
)
from bookgen_export.epub.resources import GeneratedResource, build_manifest, plan_reading_order


def _render(project, now, images=(), cover=None):
    order = plan_reading_order(project)
    manifest = build_manifest(order, list(images))
    return render_package_document(project, order, manifest, now, cover=cover)


class TestFormatModified:
    def test_second_precision_utc(self):
        assert format_modified(datetime(2024, 5, 1, 12, 30, 15, 123456)) == "2024-05-01T12:30:15Z"

    def test_converts_to_utc(self):
        paris = timezone(timedelta(hours=2))
        assert format_modified(datetime(2024, 5, 1, 14, 30, 15, tzinfo=paris)) == "2024-05-01T12:30:15Z"

    def test_pattern(self):
        value = format_modified(datetime.now(timezone.utc))
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", value)


class TestBookIdentifier:
    def test_urn(self):
        assert book_identifier("1234") == "urn:uuid:1234"


class TestPackageDocument:
    """Tests de render_package_document."""

    def test_metadata(self, sample_project, fixed_now, parse_xml, ns):
        root = parse_xml(_render(sample_project, fixed_now))

        assert root.get("unique-identifier") == "BookId"
        metadata = root.find("opf:metadata", ns)
        identifier = metadata.find("dc:identifier", ns)
        assert identifier.get("id") == "BookId"
        assert identifier.text == "urn:uuid:1234"
        assert metadata.find("dc:title", ns).text == "A < B"
        assert metadata.find("dc:language", ns).text == "en"
        assert metadata.find("dc:creator", ns).text == "Jane Doe"
        assert metadata.find("dc:subject", ns).text == "Fantasy"
        assert metadata.find("dc:date", ns).text == "2024-05-01"
        assert metadata.find("dc:publisher", ns).text == "BookGen"
        assert metadata.find("dc:rights", ns).text == "Copyright © 2024 Jane Doe. All rights reserved."
        assert [d.text for d in metadata.findall("dc:description", ns)] == [
            "Two chapters & a premise"
        ]
        modified = metadata.find("opf:meta[@property='dcterms:modified']", ns)
        assert modified.text == "2024-05-01T12:30:15Z"

    def test_title_escaped_in_source(self, sample_project, fixed_now):
        opf = _render(sample_project, fixed_now)

        assert "<dc:title>A &lt; B</dc:title>" in opf
        assert "<dc:description>Two chapters &amp; a premise</dc:description>" in opf

    def test_optional_metadata_omitted(self, empty_project, fixed_now, parse_xml, ns):
        metadata = parse_xml(_render(empty_project, fixed_now)).find("opf:metadata", ns)

        assert metadata.find("dc:subject", ns) is None
        assert metadata.findall("dc:description", ns) == []
        assert metadata.find("dc:creator", ns).text == "Unknown Author"
        assert metadata.find("opf:meta[@name='cover']", ns) is None

    def test_tagline_description(self, sample_project, fixed_now, parse_xml, ns):
        sample_project.meta.tagline = "  Less is more  "

        metadata = parse_xml(_render(sample_project, fixed_now)).find("opf:metadata", ns)

        assert [d.text for d in metadata.findall("dc:description", ns)] == [
            "Two chapters & a premise",
            "Less is more",
        ]

    def test_manifest_and_spine(self, sample_project, fixed_now, parse_xml, ns):
        root = parse_xml(_render(sample_project, fixed_now))

        items = root.findall("opf:manifest/opf:item", ns)
        assert [i.get("id") for i in items] == [
            "nav",
            "ncx",
            "stylesheet",
            "title",
            "copyright",
            "chapter1",
            "chapter2",
        ]
        assert items[0].get("properties") == "nav"
        assert items[1].get("properties") is None

        spine = root.find("opf:spine", ns)
        assert spine.get("toc") == "ncx"
        assert [ref.get("idref") for ref in spine] == ["title", "copyright", "chapter1", "chapter2"]

    def test_cover(self, sample_project, fixed_now, parse_xml, ns):
        cover = GeneratedResource(
            id="img_cover",
            path="images/cover.png",
            media_type="image/png",
            properties="cover-image",
        )

        root = parse_xml(_render(sample_project, fixed_now, images=[cover], cover=cover))

        assert root.find("opf:metadata/opf:meta[@name='cover']", ns).get("content") == "img_cover"
        item = root.find("opf:manifest/opf:item[@id='img_cover']", ns)
        assert item.get("properties") == "cover-image"
        assert item.get("href") == "images/cover.png"

    def test_language_and_publisher_defaults(self, empty_project, fixed_now, parse_xml, ns):
        ExportDefaults().language = "de"
        ExportDefaults().publisher = "Acme & Sons"

        opf = _render(empty_project, fixed_now)

        metadata = parse_xml(opf).find("opf:metadata", ns)
        assert metadata.find("dc:language", ns).text == "de"
        assert metadata.find("dc:publisher", ns).text == "Acme & Sons"
