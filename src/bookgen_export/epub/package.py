"""
Document de package (content.opf) : métadonnées, manifeste et spine.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ..config import ExportDefaults, TemplateNames
from .documents import rights_statement
from .templates import render_template

if TYPE_CHECKING:
    from ..models import BookProject
    from .resources import GeneratedResource, ReadingOrder


def book_identifier(book_id: str) -> str:
    """Identifiant unique du livre : URN de l'identifiant interne du projet."""
    return f"urn:uuid:{book_id}"


def to_utc(now: datetime) -> datetime:
    """Ramène une date en UTC (une date naïve est considérée comme UTC)."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def format_modified(now: datetime) -> str:
    """
    Formate la date de dernière modification (dcterms:modified).

    Example:
        >>> format_modified(datetime(2024, 5, 1, 12, 30, 15, 123000))
        '2024-05-01T12:30:15Z'
    """
    return to_utc(now).strftime("%Y-%m-%dT%H:%M:%SZ")


def render_package_document(
    project: "BookProject",
    reading_order: "ReadingOrder",
    manifest: list["GeneratedResource"],
    now: datetime,
    cover: "GeneratedResource | None" = None,
) -> str:
    """
    Rend le document de package.

    Le spine reprend exactement l'ordre de lecture partagé : page de titre,
    copyright, puis chapitres dans l'ordre du projet.

    Args:
        project: Projet exporté (métadonnées, prémisse)
        reading_order: Ordre de lecture partagé
        manifest: Toutes les ressources déclarées (voir resources.build_manifest)
        now: Horloge de l'export
        cover: Image de couverture résolue, si présente

    Returns:
        Document OPF complet
    """
    meta = project.meta
    now = to_utc(now)
    descriptions = [
        text.strip() for text in (project.premise, meta.tagline) if text and text.strip()
    ]

    return render_template(
        TemplateNames().Package_Template,
        identifier=book_identifier(meta.id),
        title=meta.title,
        language=meta.lang,
        author=meta.author,
        modified=format_modified(now),
        subject=meta.genre,
        descriptions=descriptions,
        date=now.date().isoformat(),
        publisher=ExportDefaults().publisher,
        rights=rights_statement(meta, now.year),
        cover=cover,
        manifest=manifest,
        spine=list(reading_order.entries),
    )
