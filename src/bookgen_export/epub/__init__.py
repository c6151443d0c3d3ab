"""
Module de génération des archives EPUB 3.

Ce module fournit des outils pour :
- Nettoyer le texte et le HTML riche des sections
- Calculer l'ordre de lecture partagé par tous les documents
- Rendre les documents XHTML, la navigation et le package via Jinja2
- Assembler l'archive ZIP (fichier `mimetype` en premier, non compressé)
- Relire une archive générée pour en vérifier la cohérence

Organisation du module :
- constants.py : Noms de fichiers, types MIME, libellés
- sanitizer.py : Échappement XML et nettoyage du HTML de l'éditeur
- resources.py : Ressources générées et ordre de lecture
- templates.py : Environnement Jinja2 (échappement centralisé)
- documents.py : Chapitres, page de titre, page de copyright
- navigation.py : toc.ncx et nav.xhtml
- package.py : content.opf
- packager.py : Assemblage et enregistrement de l'archive
- reader.py : Relecture d'un EPUB avec ebooklib

Exports publics :
    Classes :
        - EpubPackager : Exporteur EPUB d'un projet
        - ReadingOrder : Ordre de lecture partagé
        - GeneratedResource : Ressource déclarée dans le manifeste
        - NavPoint : Entrée de navigation
        - PackageSummary : Résumé d'un EPUB relu

    Fonctions :
        - build : Exporte un projet en octets EPUB
        - save_epub : Enregistre une archive sur disque
        - safe_filename : Nom de fichier dérivé du titre
        - inspect_epub : Relit un EPUB généré
        - escape_for_xml : Échappement XML par entités nommées
        - clean_markup_for_container : Nettoyage du HTML riche
"""

# Nettoyage
from .sanitizer import clean_markup_for_container, escape_for_xml

# Ordre de lecture et builders
from .resources import GeneratedResource, ReadingOrder, build_manifest, plan_reading_order
from .documents import render_chapter, render_copyright_page, render_title_page
from .navigation import NavPoint, build_navigation_points, render_nav_document, render_toc_ncx
from .package import format_modified, render_package_document

# Assemblage et relecture
from .packager import EpubPackager, build, safe_filename, save_epub
from .reader import PackageSummary, inspect_epub

__all__ = [
    # Nettoyage
    "escape_for_xml",
    "clean_markup_for_container",
    # Ordre de lecture et builders
    "GeneratedResource",
    "ReadingOrder",
    "plan_reading_order",
    "build_manifest",
    "render_chapter",
    "render_title_page",
    "render_copyright_page",
    "NavPoint",
    "build_navigation_points",
    "render_toc_ncx",
    "render_nav_document",
    "format_modified",
    "render_package_document",
    # Assemblage et relecture
    "EpubPackager",
    "build",
    "save_epub",
    "safe_filename",
    "PackageSummary",
    "inspect_epub",
]
