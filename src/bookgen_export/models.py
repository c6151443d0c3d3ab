"""
Modèle canonique d'un projet de livre.

Ce module décrit le projet tel que l'application d'écriture le manipule
(métadonnées, chapitres ordonnés, sections ordonnées au contenu HTML riche)
et sait le relire depuis le document JSON exporté par l'application
(`<titre>.book.json`, clés en camelCase).

Le moteur d'export reçoit ces objets en lecture seule et ne les modifie jamais.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import ExportDefaults
from .exceptions import ProjectFormatError


@dataclass
class MediaRef:
    """
    Référence vers un média stocké localement (image générée, audio).

    Attributes:
        id: Identifiant du média dans le stockage local
        kind: "image" ou "audio"
        mime: Type MIME déclaré lors de l'enregistrement
        alt_text: Texte alternatif optionnel
        caption: Légende optionnelle
    """

    id: str
    kind: str = "image"
    mime: str = "image/png"
    alt_text: str | None = None
    caption: str | None = None


@dataclass
class Section:
    id: str
    title: str
    content: str = ""
    images: list[MediaRef] = field(default_factory=list)


@dataclass
class Chapter:
    """
    Chapitre du livre.

    L'ordre des chapitres dans `BookProject.chapters` est l'ordre de lecture
    de référence ; l'ordre des sections l'est à l'intérieur du chapitre.
    """

    id: str
    title: str
    sections: list[Section] = field(default_factory=list)
    synopsis: str | None = None
    image_id: str | None = None


@dataclass
class BookMeta:
    id: str
    title: str
    subtitle: str | None = None
    author_name: str | None = None
    language: str = ""
    genre: str | None = None
    tagline: str | None = None
    created_at: str = ""
    updated_at: str = ""
    version: int = 1

    @property
    def lang(self) -> str:
        """Langue effective (repli sur la langue par défaut de la configuration)."""
        return self.language or ExportDefaults().language

    @property
    def author(self) -> str:
        """Auteur affichable (repli sur "Unknown Author")."""
        return self.author_name or ExportDefaults().unknown_author


@dataclass
class BookProject:
    meta: BookMeta
    premise: str = ""
    chapters: list[Chapter] = field(default_factory=list)
    cover_image_id: str | None = None

    @classmethod
    def from_dict(cls, data: Any, source: str | None = None) -> "BookProject":
        """
        Construit un projet depuis le document JSON de l'application.

        Les clés inconnues (outline, historique, presets de style...) sont
        ignorées. Les champs optionnels absents prennent leur valeur par défaut.

        Args:
            data: Dictionnaire issu de json.load()
            source: Origine du document, reprise dans les messages d'erreur

        Returns:
            Le projet construit

        Raises:
            ProjectFormatError: Si meta, meta.id ou meta.title sont absents
        """
        if not isinstance(data, dict):
            raise ProjectFormatError("<root>", "must be an object", source)

        meta_data = data.get("meta")
        if not isinstance(meta_data, dict):
            raise ProjectFormatError("meta", "is missing", source)

        for key in ("id", "title"):
            if not isinstance(meta_data.get(key), str):
                raise ProjectFormatError(f"meta.{key}", "is missing", source)

        meta = BookMeta(
            id=meta_data["id"],
            title=meta_data["title"],
            subtitle=meta_data.get("subtitle"),
            author_name=meta_data.get("authorName"),
            language=meta_data.get("language") or "",
            genre=meta_data.get("genre"),
            tagline=meta_data.get("tagline"),
            created_at=meta_data.get("createdAt", ""),
            updated_at=meta_data.get("updatedAt", ""),
            version=meta_data.get("version", 1),
        )

        chapters_data = data.get("chapters") or []
        if not isinstance(chapters_data, list):
            raise ProjectFormatError("chapters", "must be a list", source)

        chapters = [
            _chapter_from_dict(chapter, index, source)
            for index, chapter in enumerate(chapters_data)
        ]

        return cls(
            meta=meta,
            premise=data.get("premise") or "",
            chapters=chapters,
            cover_image_id=data.get("coverImageId"),
        )


def _chapter_from_dict(data: Any, index: int, source: str | None) -> Chapter:
    if not isinstance(data, dict):
        raise ProjectFormatError(f"chapters[{index}]", "must be an object", source)

    sections = []
    for section_index, section in enumerate(data.get("sections") or []):
        if not isinstance(section, dict):
            raise ProjectFormatError(
                f"chapters[{index}].sections[{section_index}]",
                "must be an object",
                source,
            )
        sections.append(
            Section(
                id=str(section.get("id", "")),
                title=section.get("title") or "",
                content=section.get("content") or "",
                images=[
                    MediaRef(
                        id=image["id"],
                        kind=image.get("kind", "image"),
                        mime=image.get("mime", "image/png"),
                        alt_text=image.get("altText"),
                        caption=image.get("caption"),
                    )
                    for image in section.get("images") or []
                    if isinstance(image, dict) and image.get("id")
                ],
            )
        )

    return Chapter(
        id=str(data.get("id", "")),
        title=data.get("title") or "",
        sections=sections,
        synopsis=data.get("synopsis"),
        image_id=data.get("imageId"),
    )


def load_project(path: str | Path) -> BookProject:
    """
    Charge un projet depuis un fichier `.book.json`.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas
        ProjectFormatError: Si le JSON est invalide ou incomplet
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ProjectFormatError("<root>", f"is not valid JSON ({e})", str(path)) from e
    return BookProject.from_dict(data, source=str(path))
