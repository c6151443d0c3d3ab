"""
Exceptions spécifiques à l'export de livres.

Deux familles d'erreurs remontent à l'appelant :
- les erreurs d'entrée (projet JSON incomplet) : ProjectFormatError
- les erreurs d'assemblage de l'archive : ExportError

Les défauts de contenu (HTML mal formé, image introuvable) ne sont jamais
levés : ils sont loggés et l'export continue avec une sortie dégradée.
"""


class BookExportError(Exception):
    """Classe de base de toutes les erreurs levées par bookgen_export."""


class ProjectFormatError(BookExportError, ValueError):
    """
    Exception levée quand un document projet ne peut pas être chargé.

    Attributes:
        field: Chemin du champ manquant ou invalide (ex: "meta.title")
        source: Origine du document (chemin du fichier) si connue
    """

    def __init__(self, field: str, reason: str, source: str | None = None):
        self.field = field
        self.reason = reason
        self.source = source

        location = f" ({source})" if source else ""
        super().__init__(f"Invalid project document{location}: {field} {reason}")

    def __repr__(self) -> str:
        return f"ProjectFormatError(field={self.field!r}, reason={self.reason!r})"


class ExportError(BookExportError):
    """
    Exception levée quand l'assemblage de l'archive EPUB échoue.

    Aucune archive partielle n'est jamais retournée : l'appelant peut
    simplement relancer l'export.

    Attributes:
        project_id: Identifiant du projet en cours d'export
        entry: Entrée de l'archive en cours d'écriture lors de l'échec (si connue)
    """

    def __init__(self, project_id: str, message: str, entry: str | None = None):
        self.project_id = project_id
        self.entry = entry

        detail = f" while writing {entry}" if entry else ""
        super().__init__(f"EPUB export failed for project {project_id}{detail}: {message}")

    def __repr__(self) -> str:
        return f"ExportError(project_id={self.project_id!r}, entry={self.entry!r})"
