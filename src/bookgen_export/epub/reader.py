"""
Relecture d'un EPUB généré : métadonnées, manifeste, spine et navigation.

Ce module relit une archive avec ebooklib, indépendamment des builders,
pour vérifier qu'un export est cohérent (commande `inspect` et tests).
"""

import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup
from ebooklib import ITEM_DOCUMENT, epub

from .constants import MIMETYPE_CONTENT, MIMETYPE_PATH

if TYPE_CHECKING:
    from ebooklib.epub import EpubBook


@dataclass
class PackageSummary:
    """
    Résumé d'un EPUB relu.

    Attributes:
        identifier: dc:identifier du package
        title: dc:title
        language: dc:language
        manifest: Couples (id, href) déclarés dans le manifeste
        documents: hrefs des documents XHTML, dans l'ordre du spine
        spine: idrefs du spine
        ncx_hrefs: Cibles de la navMap NCX, dans l'ordre
        nav_hrefs: Cibles du <nav epub:type="toc">, dans l'ordre
        archive_entries: Noms des entrées de l'archive, dans l'ordre physique
        marker_ok: True si `mimetype` est la première entrée, stockée, au bon contenu
    """

    identifier: str | None
    title: str | None
    language: str | None
    manifest: list[tuple[str, str]] = field(default_factory=list)
    documents: list[str] = field(default_factory=list)
    spine: list[str] = field(default_factory=list)
    ncx_hrefs: list[str] = field(default_factory=list)
    nav_hrefs: list[str] = field(default_factory=list)
    archive_entries: list[str] = field(default_factory=list)
    marker_ok: bool = False

    @property
    def is_consistent(self) -> bool:
        """Spine, NCX et nav désignent les mêmes documents dans le même ordre."""
        return self.marker_ok and self.documents == self.ncx_hrefs == self.nav_hrefs


def _first_metadata(book: "EpubBook", name: str) -> str | None:
    values = book.get_metadata("DC", name)
    if values:
        return values[0][0]
    return None


def _nav_hrefs(book: "EpubBook") -> list[str]:
    """Extrait les liens du document de navigation EPUB 3."""
    nav_item = next(
        (item for item in book.get_items() if isinstance(item, epub.EpubNav)), None
    )
    if nav_item is None:
        return []

    soup = BeautifulSoup(nav_item.content, "html.parser")
    for nav in soup.find_all("nav"):
        if nav.get("epub:type") == "toc":
            return [link.get("href") for link in nav.find_all("a")]
    return []


def _check_marker(path: Path) -> tuple[list[str], bool]:
    with zipfile.ZipFile(path, "r") as zf:
        infos = zf.infolist()
        names = [info.filename for info in infos]
        if not infos:
            return names, False
        first = infos[0]
        marker_ok = (
            first.filename == MIMETYPE_PATH
            and first.compress_type == zipfile.ZIP_STORED
            and zf.read(first) == MIMETYPE_CONTENT.encode("ascii")
        )
    return names, marker_ok


def inspect_epub(path: str | Path) -> PackageSummary:
    """
    Relit un fichier EPUB et résume sa structure.

    Args:
        path: Chemin du fichier .epub

    Returns:
        Résumé du package

    Example:
        >>> summary = inspect_epub("book.epub")
        >>> summary.spine
        ['title', 'copyright', 'chapter1', 'chapter2']
    """
    path = Path(path)
    archive_entries, marker_ok = _check_marker(path)
    book = epub.read_epub(str(path), options={"ignore_ncx": False})

    items_by_id = {item.id: item for item in book.get_items()}
    spine = [idref for idref, _linear in book.spine]
    documents = [
        items_by_id[idref].file_name
        for idref in spine
        if idref in items_by_id and items_by_id[idref].get_type() == ITEM_DOCUMENT
    ]

    return PackageSummary(
        identifier=_first_metadata(book, "identifier"),
        title=_first_metadata(book, "title"),
        language=_first_metadata(book, "language"),
        manifest=[(item.id, item.file_name) for item in book.get_items()],
        documents=documents,
        spine=spine,
        ncx_hrefs=[link.href for link in book.toc if isinstance(link, epub.Link)],
        nav_hrefs=_nav_hrefs(book),
        archive_entries=archive_entries,
        marker_ok=marker_ok,
    )
