"""
Export EPUB 3 des projets de livre BookGen.

bookgen-export transforme le modèle canonique d'un livre (métadonnées,
chapitres ordonnés, sections au contenu HTML riche) en archive EPUB 3
prête pour les liseuses et les plateformes d'impression à la demande
(Amazon KDP).

Le processus d'export :
1. Calcule une seule fois l'ordre de lecture (titre, copyright, chapitres)
2. Résout les images référencées auprès d'une source de médias
3. Rend chaque document à partir de cet ordre partagé
4. Assemble l'archive en mémoire et la retourne en octets

Fonctionnalités principales :
- Manifeste, spine, NCX et nav.xhtml toujours cohérents
- Échappement XML centralisé et nettoyage du HTML de l'éditeur
- Exports reproductibles (horloge injectable, dates d'archive fixes)
- Logs par session, barres de progression tqdm en ligne de commande

Organisation du package :
- models.py : Modèle du projet et chargement du JSON de l'application
- media.py : Sources de médias et résolution des images
- epub/ : Génération et relecture des archives EPUB
- config.py : Configuration (singletons verrouillables, variables d'environnement)
- logger.py : Logging console + fichier par session
- cli.py : Commandes `build` et `inspect`

Usage minimal :
    >>> from bookgen_export import load_project, build, save_epub, safe_filename
    >>>
    >>> project = load_project("My_Book.book.json")
    >>> blob = build(project)
    >>> save_epub(blob, safe_filename(project.meta.title), "exports")

Usage avec images :
    >>> from bookgen_export import EpubPackager, DirectoryMediaSource
    >>>
    >>> packager = EpubPackager(media=DirectoryMediaSource("exports/media"))
    >>> blob = packager.build(project)

Configuration :
    Variables reconnues (environnement ou fichier .env) :

        BOOKGEN_PUBLISHER=BookGen
        BOOKGEN_LANGUAGE=en
        BOOKGEN_LOG_DIR=logs

Version: 0.1.0
"""

# Erreurs
from .exceptions import BookExportError, ExportError, ProjectFormatError

# Modèle
from .models import BookMeta, BookProject, Chapter, MediaRef, Section, load_project

# Génération EPUB (avant media : media dépend de epub.resources)
from .epub import EpubPackager, PackageSummary, build, inspect_epub, safe_filename, save_epub

# Médias
from .media import DirectoryMediaSource, MediaBlob, MediaSource, MemoryMediaSource

# Version du package
__version__ = "0.1.0"

# Exports publics
__all__ = [
    # Version
    "__version__",
    # Erreurs
    "BookExportError",
    "ExportError",
    "ProjectFormatError",
    # Modèle
    "BookMeta",
    "BookProject",
    "Chapter",
    "Section",
    "MediaRef",
    "load_project",
    # Génération EPUB
    "EpubPackager",
    "build",
    "save_epub",
    "safe_filename",
    "PackageSummary",
    "inspect_epub",
    # Médias
    "MediaSource",
    "MediaBlob",
    "MemoryMediaSource",
    "DirectoryMediaSource",
]
