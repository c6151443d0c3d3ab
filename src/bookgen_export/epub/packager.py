"""
Assemblage de l'archive EPUB.

Ce module orchestre l'export complet d'un projet :
1. Calcule l'ordre de lecture partagé (une seule fois)
2. Résout les images auprès de la source de médias
3. Rend tous les documents (pages, chapitres, navigation, package)
4. Écrit l'archive ZIP en mémoire, fichier `mimetype` en premier et non compressé

L'archive n'est retournée qu'une fois entièrement écrite : en cas d'échec,
l'appelant reçoit une ExportError et aucune sortie partielle.
"""

import io
import re
import tempfile
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from ..config import ExportDefaults, TemplateNames
from ..exceptions import ExportError
from ..logger import get_logger
from ..media import MediaSource, resolve_media
from ..models import BookProject
from .constants import (
    CONTAINER_PATH,
    MIMETYPE_CONTENT,
    MIMETYPE_PATH,
    NAV_FILENAME,
    NCX_FILENAME,
    PACKAGE_FILENAME,
    PACKAGE_MEDIA_TYPE,
    STYLESHEET_FILENAME,
    ZIP_ENTRY_DATE,
)
from .documents import (
    render_chapter,
    render_copyright_page,
    render_stylesheet,
    render_title_page,
)
from .navigation import build_navigation_points, render_nav_document, render_toc_ncx
from .package import book_identifier, render_package_document, to_utc
from .resources import build_manifest, plan_reading_order
from .templates import render_template

logger = get_logger(__name__)

EPUB_EXTENSION = ".epub"


def _zip_info(path: str, compress_type: int) -> zipfile.ZipInfo:
    """Entrée d'archive à date fixe, pour des exports reproductibles."""
    info = zipfile.ZipInfo(path, date_time=ZIP_ENTRY_DATE)
    info.compress_type = compress_type
    info.external_attr = 0o644 << 16
    return info


class EpubPackager:
    """
    Exporteur EPUB 3 d'un projet de livre.

    Attributes:
        media: Source des images du projet (None = export sans images)
        clock: Horloge de l'export (dcterms:modified, dc:date, année du copyright)

    Example:
        >>> packager = EpubPackager(media=DirectoryMediaSource("media"))
        >>> blob = packager.build(project)
        >>> save_epub(blob, safe_filename(project.meta.title), "exports")
    """

    def __init__(
        self,
        media: Optional[MediaSource] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.media = media
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def build(self, project: BookProject) -> bytes:
        """
        Construit l'archive EPUB d'un projet.

        Args:
            project: Projet à exporter (jamais modifié)

        Returns:
            Contenu binaire du fichier .epub

        Raises:
            ExportError: Si l'écriture de l'archive échoue
        """
        now = to_utc(self.clock())
        meta = project.meta
        package_dir = ExportDefaults().package_dir

        logger.info(
            f"📦 Export EPUB de « {meta.title} » ({len(project.chapters)} chapitre(s))"
        )

        reading_order = plan_reading_order(project)
        media = resolve_media(project, self.media)
        try:
            manifest = build_manifest(reading_order, media.resources)
        except ValueError as e:
            raise ExportError(meta.id, str(e)) from e
        points = build_navigation_points(reading_order)
        identifier = book_identifier(meta.id)

        # Contenu de chaque ressource du manifeste, par chemin
        documents: dict[str, bytes] = {
            NAV_FILENAME: render_nav_document(meta.lang, points).encode("utf-8"),
            NCX_FILENAME: render_toc_ncx(meta, identifier, points).encode("utf-8"),
            STYLESHEET_FILENAME: render_stylesheet().encode("utf-8"),
            reading_order.title_page.path: render_title_page(
                meta, media.cover
            ).encode("utf-8"),
            reading_order.copyright_page.path: render_copyright_page(
                meta, now.year
            ).encode("utf-8"),
        }
        documents.update(media.blobs)
        for entry in reading_order.chapters:
            documents[entry.resource.path] = render_chapter(
                entry, meta.lang, media
            ).encode("utf-8")

        package_document = render_package_document(
            project, reading_order, manifest, now, cover=media.cover
        )
        container = render_template(
            TemplateNames().Container_Template,
            package_path=f"{package_dir}/{PACKAGE_FILENAME}",
            media_type=PACKAGE_MEDIA_TYPE,
        )

        entries: list[tuple[str, bytes]] = [
            (CONTAINER_PATH, container.encode("utf-8")),
            (f"{package_dir}/{PACKAGE_FILENAME}", package_document.encode("utf-8")),
        ]
        for resource in manifest:
            data = documents.pop(resource.path, None)
            if data is None:
                raise ExportError(meta.id, "manifest resource has no content", resource.path)
            entries.append((f"{package_dir}/{resource.path}", data))

        if documents:
            raise ExportError(
                meta.id, f"undeclared documents: {', '.join(sorted(documents))}"
            )

        blob = self._write_archive(meta.id, entries)
        logger.info(f"✅ EPUB généré : {len(entries) + 1} entrées, {len(blob)} octets")
        return blob

    def _write_archive(self, project_id: str, entries: list[tuple[str, bytes]]) -> bytes:
        """
        Écrit l'archive en mémoire.

        Le fichier marqueur `mimetype` est toujours la première entrée, stockée
        sans compression ; toutes les autres entrées sont compressées.
        """
        buffer = io.BytesIO()
        current = MIMETYPE_PATH
        try:
            with zipfile.ZipFile(buffer, "w") as zf:
                zf.writestr(
                    _zip_info(MIMETYPE_PATH, zipfile.ZIP_STORED),
                    MIMETYPE_CONTENT.encode("ascii"),
                )
                for path, data in entries:
                    current = path
                    zf.writestr(_zip_info(path, zipfile.ZIP_DEFLATED), data)
        except Exception as e:
            logger.exception(f"Échec d'écriture de l'archive ({current})")
            raise ExportError(project_id, f"{type(e).__name__}: {e}", current) from e

        return buffer.getvalue()


def build(
    project: BookProject,
    media: Optional[MediaSource] = None,
    now: Optional[datetime] = None,
) -> bytes:
    """
    Exporte un projet en EPUB (raccourci de EpubPackager.build).

    Args:
        project: Projet à exporter
        media: Source des images (optionnelle)
        now: Date de l'export (défaut : maintenant, UTC)

    Returns:
        Contenu binaire du fichier .epub
    """
    clock = (lambda: now) if now is not None else None
    return EpubPackager(media=media, clock=clock).build(project)


def safe_filename(title: str) -> str:
    """
    Nom de fichier dérivé du titre : tout caractère hors [a-z0-9] devient "_".

    Example:
        >>> safe_filename("A < B")
        'A___B'
    """
    return re.sub(r"[^a-z0-9]", "_", title, flags=re.IGNORECASE) or "book"


def save_epub(blob: bytes, filename: str, directory: str | Path = ".") -> Path:
    """
    Enregistre une archive sur disque en ajoutant l'extension .epub.

    L'écriture passe par un fichier temporaire renommé à la fin : un fichier
    .epub présent sur disque est toujours complet.

    Args:
        blob: Contenu retourné par build()
        filename: Nom du fichier, sans extension
        directory: Répertoire de destination (créé si nécessaire)

    Returns:
        Chemin du fichier écrit
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    name = filename if filename.lower().endswith(EPUB_EXTENSION) else f"{filename}{EPUB_EXTENSION}"
    output_path = directory / name

    tmp_handle = tempfile.NamedTemporaryFile(
        prefix=f".{output_path.stem}.",
        suffix=EPUB_EXTENSION,
        dir=str(directory),
        delete=False,
    )
    tmp_path = Path(tmp_handle.name)
    try:
        with tmp_handle:
            tmp_handle.write(blob)
        tmp_path.replace(output_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)

    logger.info(f"💾 EPUB enregistré sous : {output_path}")
    return output_path
