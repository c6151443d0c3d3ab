"""
Liste ordonnée des ressources générées pour un export.

Tous les builders (documents, navigation, manifeste) reçoivent la même
instance de `ReadingOrder`, calculée une seule fois par export. Aucun
builder ne recalcule d'identifiant ou de nom de fichier à partir de
`project.chapters` : c'est ce qui garantit que le manifeste, le spine et
les deux documents de navigation désignent les mêmes fichiers, dans le
même ordre.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .constants import (
    COPYRIGHT_PAGE_FILENAME,
    COPYRIGHT_PAGE_LABEL,
    CSS_MEDIA_TYPE,
    NAV_FILENAME,
    NCX_FILENAME,
    NCX_MEDIA_TYPE,
    STYLESHEET_FILENAME,
    TITLE_PAGE_FILENAME,
    TITLE_PAGE_LABEL,
    XHTML_MEDIA_TYPE,
)

if TYPE_CHECKING:
    from ..models import BookProject, Chapter


@dataclass(frozen=True)
class GeneratedResource:
    """
    Ressource déclarée dans le manifeste du package.

    Attributes:
        id: Identifiant unique dans le manifeste
        path: Chemin relatif au répertoire du package (ex: "chapter1.xhtml")
        media_type: Type MIME déclaré
        title: Libellé de navigation (documents du spine uniquement)
        properties: Attribut `properties` du manifeste (ex: "nav", "cover-image")
    """

    id: str
    path: str
    media_type: str
    title: str = ""
    properties: str | None = None


@dataclass(frozen=True)
class ChapterEntry:
    """
    Document de contenu d'un chapitre dans l'ordre de lecture.

    Attributes:
        number: Position 1-based du chapitre dans `project.chapters`
        chapter: Le chapitre source (lecture seule)
        resource: La ressource générée correspondante
    """

    number: int
    chapter: "Chapter"
    resource: GeneratedResource


@dataclass(frozen=True)
class ReadingOrder:
    """
    Ordre de lecture linéaire : page de titre, copyright, puis chapitres.

    Attributes:
        front_matter: Pages liminaires (titre, copyright)
        chapters: Une entrée par chapitre, dans l'ordre du projet
    """

    front_matter: tuple[GeneratedResource, ...]
    chapters: tuple[ChapterEntry, ...] = field(default_factory=tuple)

    @property
    def entries(self) -> tuple[GeneratedResource, ...]:
        """Toutes les ressources du spine, dans l'ordre de lecture."""
        return self.front_matter + tuple(entry.resource for entry in self.chapters)

    @property
    def title_page(self) -> GeneratedResource:
        return self.front_matter[0]

    @property
    def copyright_page(self) -> GeneratedResource:
        return self.front_matter[1]

    def __iter__(self) -> Iterator[GeneratedResource]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.front_matter) + len(self.chapters)


def chapter_label(number: int, title: str) -> str:
    """Libellé de navigation d'un chapitre ("Chapter N" si le titre est vide)."""
    return title.strip() or f"Chapter {number}"


def plan_reading_order(project: "BookProject") -> ReadingOrder:
    """
    Calcule la liste ordonnée partagée par tous les builders.

    Args:
        project: Le projet à exporter (lecture seule)

    Returns:
        L'ordre de lecture, avec des noms `chapter<N>.xhtml` 1-based

    Example:
        >>> order = plan_reading_order(project)
        >>> [r.path for r in order]
        ['title.xhtml', 'copyright.xhtml', 'chapter1.xhtml', 'chapter2.xhtml']
    """
    front_matter = (
        GeneratedResource(
            id="title",
            path=TITLE_PAGE_FILENAME,
            media_type=XHTML_MEDIA_TYPE,
            title=TITLE_PAGE_LABEL,
        ),
        GeneratedResource(
            id="copyright",
            path=COPYRIGHT_PAGE_FILENAME,
            media_type=XHTML_MEDIA_TYPE,
            title=COPYRIGHT_PAGE_LABEL,
        ),
    )

    chapters = tuple(
        ChapterEntry(
            number=number,
            chapter=chapter,
            resource=GeneratedResource(
                id=f"chapter{number}",
                path=f"chapter{number}.xhtml",
                media_type=XHTML_MEDIA_TYPE,
                title=chapter_label(number, chapter.title),
            ),
        )
        for number, chapter in enumerate(project.chapters, start=1)
    )

    return ReadingOrder(front_matter=front_matter, chapters=chapters)


def auxiliary_resources() -> list[GeneratedResource]:
    """Ressources hors spine toujours présentes : nav, NCX et feuille de style."""
    return [
        GeneratedResource(
            id="nav",
            path=NAV_FILENAME,
            media_type=XHTML_MEDIA_TYPE,
            properties="nav",
        ),
        GeneratedResource(id="ncx", path=NCX_FILENAME, media_type=NCX_MEDIA_TYPE),
        GeneratedResource(
            id="stylesheet", path=STYLESHEET_FILENAME, media_type=CSS_MEDIA_TYPE
        ),
    ]


def build_manifest(
    reading_order: ReadingOrder, images: list[GeneratedResource]
) -> list[GeneratedResource]:
    """
    Assemble le manifeste complet dans l'ordre de déclaration.

    Ordre : nav, ncx, stylesheet, pages liminaires, images, chapitres.

    Raises:
        ValueError: Si deux ressources partagent le même identifiant ou chemin
    """
    manifest = (
        auxiliary_resources()
        + list(reading_order.front_matter)
        + list(images)
        + [entry.resource for entry in reading_order.chapters]
    )

    seen_ids: set[str] = set()
    seen_paths: set[str] = set()
    for resource in manifest:
        if resource.id in seen_ids or resource.path in seen_paths:
            raise ValueError(
                f"Duplicate manifest resource: id={resource.id!r}, path={resource.path!r}"
            )
        seen_ids.add(resource.id)
        seen_paths.add(resource.path)

    return manifest
