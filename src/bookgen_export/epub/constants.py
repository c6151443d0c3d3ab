"""
Constantes du format EPUB 3 utilisées par les builders.
"""

# Fichier marqueur : première entrée de l'archive, non compressée, sans saut de ligne
MIMETYPE_PATH = "mimetype"
MIMETYPE_CONTENT = "application/epub+zip"

CONTAINER_PATH = "META-INF/container.xml"
PACKAGE_MEDIA_TYPE = "application/oebps-package+xml"

# Noms des documents dans le répertoire du package (OEBPS/)
PACKAGE_FILENAME = "content.opf"
NCX_FILENAME = "toc.ncx"
NAV_FILENAME = "nav.xhtml"
STYLESHEET_FILENAME = "stylesheet.css"
TITLE_PAGE_FILENAME = "title.xhtml"
COPYRIGHT_PAGE_FILENAME = "copyright.xhtml"
IMAGES_DIR = "images"

XHTML_MEDIA_TYPE = "application/xhtml+xml"
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"
CSS_MEDIA_TYPE = "text/css"

# Libellés de navigation des pages liminaires
TITLE_PAGE_LABEL = "Title Page"
COPYRIGHT_PAGE_LABEL = "Copyright"

# Titre attribué par l'application à la première section de chaque chapitre, jamais affiché
HIDDEN_SECTION_TITLE = "Opening"

# Date fixe des entrées de l'archive (date minimale du format ZIP)
ZIP_ENTRY_DATE = (1980, 1, 1, 0, 0, 0)

# Types d'images acceptés dans un EPUB 3 (core media types) -> extension
IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}

# Éléments supprimés (avec leur contenu) lors du nettoyage
DROPPED_ELEMENTS = {"script", "style"}

# Attributs propres à l'éditeur ou interdits dans un document non scripté
DISALLOWED_ATTRIBUTES = {"style", "contenteditable", "spellcheck", "draggable"}
