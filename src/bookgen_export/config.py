"""
Configuration globale de l'export EPUB.

Les classes de configuration sont des singletons verrouillables : on peut
les ajuster au démarrage (CLI, variables d'environnement) puis les figer
avec `lock_config()` pour éviter toute modification pendant un export.
"""

import logging
import os

from dotenv import load_dotenv


class ConfigBase:
    # Attribut de classe pour le singleton
    _instance = None
    _locked: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def lock(self):
        self._locked = True

    @property
    def is_locked(self) -> bool:
        return self._locked

    def __setattr__(self, name, value):
        if getattr(self, "_locked", False):
            raise AttributeError("Configuration is locked")
        super().__setattr__(name, value)


class TemplateNames(ConfigBase):
    Container_Template: str = "container.xml.j2"
    Package_Template: str = "content.opf.j2"
    Ncx_Template: str = "toc.ncx.j2"
    Nav_Template: str = "nav.xhtml.j2"
    Title_Page_Template: str = "title.xhtml.j2"
    Copyright_Page_Template: str = "copyright.xhtml.j2"
    Chapter_Template: str = "chapter.xhtml.j2"
    Stylesheet: str = "stylesheet.css"


class LoggerLevel(ConfigBase):
    level: int = logging.INFO
    console_level: int = logging.ERROR
    file_level: int = logging.DEBUG
    base_dir: str = "logs"


class ExportDefaults(ConfigBase):
    publisher: str = "BookGen"
    unknown_author: str = "Unknown Author"
    language: str = "en"
    package_dir: str = "OEBPS"


def load_env_overrides() -> None:
    """
    Applique les surcharges définies dans l'environnement (ou un fichier .env).

    Variables reconnues :
    - BOOKGEN_PUBLISHER : éditeur déclaré dans les métadonnées
    - BOOKGEN_LANGUAGE : langue par défaut quand le projet n'en précise pas
    - BOOKGEN_LOG_DIR : répertoire racine des sessions de logs
    """
    load_dotenv()

    publisher = os.getenv("BOOKGEN_PUBLISHER")
    if publisher:
        ExportDefaults().publisher = publisher

    language = os.getenv("BOOKGEN_LANGUAGE")
    if language:
        ExportDefaults().language = language

    log_dir = os.getenv("BOOKGEN_LOG_DIR")
    if log_dir:
        LoggerLevel().base_dir = log_dir


def lock_config():
    """Verrouille la configuration pour empêcher les modifications ultérieures."""
    LoggerLevel().lock()
    TemplateNames().lock()
    ExportDefaults().lock()
