"""
Documents de navigation : toc.ncx (EPUB 2) et nav.xhtml (EPUB 3).

Les deux documents sont rendus à partir de la même liste de `NavPoint`,
elle-même dérivée de l'ordre de lecture partagé. Ils ne parcourent jamais
les chapitres indépendamment l'un de l'autre.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import TemplateNames
from .constants import STYLESHEET_FILENAME
from .templates import render_template

if TYPE_CHECKING:
    from ..models import BookMeta
    from .resources import ReadingOrder


@dataclass(frozen=True)
class NavPoint:
    """
    Entrée de navigation.

    Attributes:
        id: Identifiant de l'entrée (identique à l'id du manifeste)
        play_order: Ordre de lecture NCX, à partir de 1, sans trou
        label: Libellé affiché
        href: Fichier cible, relatif au package
    """

    id: str
    play_order: int
    label: str
    href: str


def build_navigation_points(reading_order: "ReadingOrder") -> list[NavPoint]:
    """
    Dérive les entrées de navigation de l'ordre de lecture.

    Returns:
        Titre (1), copyright (2), puis chapitres (3..N+2)
    """
    return [
        NavPoint(
            id=resource.id,
            play_order=play_order,
            label=resource.title,
            href=resource.path,
        )
        for play_order, resource in enumerate(reading_order.entries, start=1)
    ]


def render_toc_ncx(meta: "BookMeta", identifier: str, points: list[NavPoint]) -> str:
    """
    Rend la carte de navigation NCX (compatibilité EPUB 2).

    Args:
        meta: Métadonnées du livre (titre du document)
        identifier: Identifiant URN du livre (dtb:uid)
        points: Entrées de navigation partagées
    """
    return render_template(
        TemplateNames().Ncx_Template,
        identifier=identifier,
        title=meta.title,
        points=points,
    )


def render_nav_document(language: str, points: list[NavPoint]) -> str:
    """Rend le document de navigation EPUB 3 (<nav epub:type="toc">)."""
    return render_template(
        TemplateNames().Nav_Template,
        language=language,
        stylesheet=STYLESHEET_FILENAME,
        points=points,
    )
