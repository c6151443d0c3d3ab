"""
Résolution des images référencées par un projet.

Les images (couverture, illustrations de chapitre, images de section) ne
font pas partie du modèle : le projet ne contient que leurs identifiants.
Les octets viennent d'une source de médias (stockage local de l'application,
répertoire d'export...). Une image introuvable ou illisible n'interrompt
jamais l'export : elle est loggée puis ignorée, et aucun document ne la
référence.
"""

import mimetypes
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

from .epub.constants import IMAGE_EXTENSIONS, IMAGES_DIR
from .epub.resources import GeneratedResource
from .logger import get_logger

if TYPE_CHECKING:
    from .models import BookProject

logger = get_logger(__name__)

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass(frozen=True)
class MediaBlob:
    """
    Contenu binaire d'un média.

    Attributes:
        id: Identifiant du média
        mime: Type MIME réel
        data: Octets du fichier
    """

    id: str
    mime: str
    data: bytes


class MediaSource(Protocol):
    """Source de médias : retourne None si l'identifiant est inconnu."""

    def get(self, media_id: str) -> Optional[MediaBlob]: ...


class MemoryMediaSource:
    """Source de médias en mémoire (tests, intégration applicative)."""

    def __init__(self, blobs: dict[str, MediaBlob] | None = None) -> None:
        self._blobs: dict[str, MediaBlob] = dict(blobs or {})

    def add(self, blob: MediaBlob) -> None:
        self._blobs[blob.id] = blob

    def get(self, media_id: str) -> Optional[MediaBlob]:
        return self._blobs.get(media_id)


class DirectoryMediaSource:
    """
    Source de médias lisant des fichiers `<id>.<ext>` dans un répertoire.

    Le type MIME est déduit de l'extension du fichier trouvé.

    Example:
        >>> source = DirectoryMediaSource("exports/media")
        >>> blob = source.get("4f1c...")  # lit exports/media/4f1c....png
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def get(self, media_id: str) -> Optional[MediaBlob]:
        if not self.directory.is_dir() or not media_id:
            return None
        # Un identifiant ne désigne jamais un chemin hors du répertoire
        if "/" in media_id or "\\" in media_id or media_id.startswith("."):
            return None

        for candidate in sorted(self.directory.glob(f"{glob_escape(media_id)}.*")):
            mime, _ = mimetypes.guess_type(candidate.name)
            if mime and mime.startswith("image/"):
                return MediaBlob(id=media_id, mime=mime, data=candidate.read_bytes())
        return None


def glob_escape(text: str) -> str:
    """Échappe les métacaractères glob d'un identifiant."""
    return re.sub(r"([*?\[])", r"[\1]", text)


@dataclass
class ResolvedMedia:
    """
    Images effectivement disponibles pour l'export.

    Attributes:
        resources: Ressources du manifeste, dans l'ordre de première référence
        blobs: Contenu de chaque image, par chemin dans le package
        cover: Ressource de la couverture si elle a été résolue
    """

    resources: list[GeneratedResource] = field(default_factory=list)
    blobs: dict[str, bytes] = field(default_factory=dict)
    cover: GeneratedResource | None = None
    _by_media_id: dict[str, GeneratedResource] = field(default_factory=dict)

    def get(self, media_id: str | None) -> GeneratedResource | None:
        """Retourne la ressource d'une image résolue, None sinon."""
        if not media_id:
            return None
        return self._by_media_id.get(media_id)


def collect_image_ids(project: "BookProject") -> list[str]:
    """
    Liste les images référencées par le projet, sans doublon.

    Ordre : couverture, puis pour chaque chapitre son illustration et les
    images de ses sections.
    """
    ids: list[str] = []

    def add(media_id: str | None) -> None:
        if media_id and media_id not in ids:
            ids.append(media_id)

    add(project.cover_image_id)
    for chapter in project.chapters:
        add(chapter.image_id)
        for section in chapter.sections:
            for image in section.images:
                if image.kind == "image":
                    add(image.id)
    return ids


def resolve_media(
    project: "BookProject", source: MediaSource | None
) -> ResolvedMedia:
    """
    Récupère toutes les images du projet depuis la source de médias.

    Args:
        project: Le projet à exporter
        source: Source de médias (None = export sans images)

    Returns:
        Les images résolues, prêtes à être déclarées et archivées
    """
    resolved = ResolvedMedia()
    if source is None:
        return resolved

    for media_id in collect_image_ids(project):
        try:
            blob = source.get(media_id)
        except Exception as e:
            logger.error(f"Échec de lecture de l'image {media_id} : {e}")
            continue

        if blob is None:
            logger.error(f"Image {media_id} introuvable, ignorée")
            continue

        extension = IMAGE_EXTENSIONS.get(blob.mime)
        if extension is None:
            logger.error(f"Type d'image non supporté pour {media_id} : {blob.mime}")
            continue

        safe_id = _UNSAFE_ID_CHARS.sub("_", media_id)
        is_cover = media_id == project.cover_image_id
        resource = GeneratedResource(
            id=f"img_{safe_id}",
            path=f"{IMAGES_DIR}/{safe_id}.{extension}",
            media_type=blob.mime,
            properties="cover-image" if is_cover else None,
        )
        # Deux identifiants distincts peuvent donner le même nom une fois nettoyés
        if resource.path in resolved.blobs or any(
            known.id == resource.id for known in resolved.resources
        ):
            logger.error(f"Collision de nom pour l'image {media_id}, ignorée")
            continue

        resolved.resources.append(resource)
        resolved.blobs[resource.path] = blob.data
        resolved._by_media_id[media_id] = resource
        if is_cover:
            resolved.cover = resource

    logger.debug(f"{len(resolved.resources)} image(s) résolue(s)")
    return resolved
