"""
Construction des documents XHTML de l'EPUB : chapitres et pages liminaires.

Chaque fonction est pure : elle ne dépend que du modèle, de l'ordre de
lecture partagé et, pour le copyright, de l'année de l'export.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from markupsafe import Markup

from ..config import ExportDefaults, TemplateNames
from .constants import HIDDEN_SECTION_TITLE, STYLESHEET_FILENAME
from .resources import ChapterEntry
from .sanitizer import clean_markup_for_container
from .templates import render_template

if TYPE_CHECKING:
    from ..media import ResolvedMedia
    from ..models import BookMeta, Section
    from .resources import GeneratedResource

DEFAULT_SECTION_IMAGE_ALT = "Section image"


@dataclass
class Figure:
    path: str
    alt: str
    caption: str | None = None


@dataclass
class SectionBlock:
    """Section prête à être rendue : titre brut, corps nettoyé, figures résolues."""

    title: str
    body: Markup
    figures: list[Figure] = field(default_factory=list)


def _render_page(template_name: str, language: str, **context) -> str:
    return render_template(
        template_name, language=language, stylesheet=STYLESHEET_FILENAME, **context
    )


def _section_block(section: "Section", media: "ResolvedMedia | None") -> SectionBlock:
    figures = []
    for image in section.images:
        resource = media.get(image.id) if media else None
        if resource is None:
            continue
        figures.append(
            Figure(
                path=resource.path,
                alt=image.alt_text or DEFAULT_SECTION_IMAGE_ALT,
                caption=image.caption,
            )
        )

    title = section.title.strip()
    if title == HIDDEN_SECTION_TITLE:
        title = ""

    return SectionBlock(
        title=title,
        body=Markup(clean_markup_for_container(section.content)),
        figures=figures,
    )


def chapter_heading(number: int, title: str) -> str:
    """Titre affiché en tête du chapitre : "Chapter N: <titre>"."""
    title = title.strip()
    return f"Chapter {number}: {title}" if title else f"Chapter {number}"


def render_chapter(
    entry: ChapterEntry,
    language: str,
    media: "ResolvedMedia | None" = None,
) -> str:
    """
    Rend le document de contenu d'un chapitre.

    Le document contient le titre numéroté du chapitre puis un bloc
    <section> par section (titre échappé + contenu nettoyé). Un chapitre
    sans section produit un document valide ne contenant que le titre.

    Args:
        entry: Entrée du chapitre dans l'ordre de lecture partagé
        language: Code langue du livre (attributs lang / xml:lang)
        media: Images résolues (None = pas d'images)

    Returns:
        Document XHTML complet

    Example:
        >>> order = plan_reading_order(project)
        >>> xhtml = render_chapter(order.chapters[0], "en")
        >>> "Chapter 1: One" in xhtml
        True
    """
    chapter = entry.chapter
    chapter_image = media.get(chapter.image_id) if media else None

    return _render_page(
        TemplateNames().Chapter_Template,
        language,
        page_title=entry.resource.title,
        heading=chapter_heading(entry.number, chapter.title),
        chapter_image=chapter_image,
        sections=[_section_block(section, media) for section in chapter.sections],
    )


def render_title_page(
    meta: "BookMeta", cover: "GeneratedResource | None" = None
) -> str:
    """
    Rend la page de titre : titre, sous-titre optionnel et auteur.

    L'auteur absent est remplacé par "Unknown Author".
    """
    return _render_page(
        TemplateNames().Title_Page_Template,
        meta.lang,
        title=meta.title,
        subtitle=meta.subtitle,
        author=meta.author,
        cover=cover,
    )


def render_copyright_page(meta: "BookMeta", year: int) -> str:
    """Rend la page de copyright pour l'année donnée."""
    return _render_page(
        TemplateNames().Copyright_Page_Template,
        meta.lang,
        title=meta.title,
        author=meta.author,
        year=year,
        publisher=ExportDefaults().publisher,
    )


def render_stylesheet() -> str:
    return render_template(TemplateNames().Stylesheet)


def rights_statement(meta: "BookMeta", year: int) -> str:
    """Mention de droits déclarée dans les métadonnées du package."""
    return f"Copyright © {year} {meta.author}. All rights reserved."
