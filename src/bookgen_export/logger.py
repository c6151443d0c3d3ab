"""
Module de configuration du logging pour bookgen-export.

Ce module fournit une fonction centralisée pour configurer le système de logging
avec sortie console et fichier. Tous les modules de l'application utilisent
`get_logger(__name__)` pour obtenir un logger configuré de manière cohérente.

Fonctionnalités :
- Regroupement des logs par session d'exécution dans logs/run_YYYYMMDD_HHMMSS/
- Création différée du répertoire de session ET des fichiers (un export qui
  ne logge rien ne touche pas au disque)
- Sortie console compatible avec les barres de progression tqdm
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .config import LoggerLevel

DEFAULT_LOG_FILENAME = "export.log"


# ============================================================
# 🔹 Gestionnaire de session de logs
# ============================================================


class LogSession:
    """
    Gestionnaire singleton pour regrouper tous les logs d'une exécution.

    Le nom du répertoire (logs/run_YYYYMMDD_HHMMSS/) est fixé au premier
    appel, mais le répertoire n'est créé qu'à la première écriture.
    """

    _instance: Optional["LogSession"] = None
    _session_dir: Optional[Path] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if LogSession._session_dir is not None:
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        LogSession._session_dir = Path(LoggerLevel().base_dir) / f"run_{timestamp}"

    @classmethod
    def get_session_dir(cls) -> Path:
        """Retourne le répertoire de la session en cours (sans le créer)."""
        if cls._session_dir is None:
            cls()
        assert cls._session_dir is not None
        return cls._session_dir

    @classmethod
    def reset(cls):
        """Reset la session (utile pour les tests)."""
        cls._instance = None
        cls._session_dir = None


# ============================================================
# 🔹 Handlers de logging
# ============================================================


class TqdmLoggingHandler(logging.Handler):
    """
    Handler console qui passe par tqdm.write().

    Les messages s'affichent au-dessus des barres de progression de la
    commande `build` au lieu de les casser.
    """

    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
        except Exception:
            self.handleError(record)


class LazyFileHandler(logging.Handler):
    """
    Handler qui crée le fichier de log seulement au premier message.

    Le chemin peut être donné directement ou résolu au dernier moment
    (nom de fichier relatif au répertoire de session).
    """

    def __init__(
        self,
        filename: Path | str,
        mode: str = "a",
        encoding: str = "utf-8",
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        self.filename = Path(filename)
        self.mode = mode
        self.encoding = encoding
        self._handler: Optional[logging.FileHandler] = None

    def _resolve_path(self) -> Path:
        if self.filename.is_absolute() or len(self.filename.parts) > 1:
            return self.filename
        return LogSession.get_session_dir() / self.filename

    def _ensure_handler(self):
        """Crée le FileHandler sous-jacent (et son répertoire) si nécessaire."""
        if self._handler is None:
            path = self._resolve_path()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handler = logging.FileHandler(
                path,
                mode=self.mode,
                encoding=self.encoding,
            )
            if self.formatter:
                self._handler.setFormatter(self.formatter)

    @property
    def is_open(self) -> bool:
        return self._handler is not None

    def emit(self, record):
        try:
            self._ensure_handler()
            if self._handler:
                self._handler.emit(record)
        except Exception:
            self.handleError(record)

    def close(self):
        if self._handler:
            self._handler.close()
        super().close()


# ============================================================
# 🔹 Configuration des loggers
# ============================================================


def setup_logger(
    name: str,
    log_dir: Optional[str] = None,
    level: Optional[int] = None,
    console_level: Optional[int] = None,
    file_level: Optional[int] = None,
    log_filename: str = DEFAULT_LOG_FILENAME,
) -> logging.Logger:
    """
    Configure un logger avec sortie console et fichier.

    Args:
        name: Nom du logger (généralement __name__ du module)
        log_dir: Répertoire explicite (None = répertoire de session)
        level: Niveau global (None = LoggerLevel)
        console_level: Niveau de la console (None = LoggerLevel)
        file_level: Niveau du fichier (None = LoggerLevel)
        log_filename: Nom du fichier de log (défaut: "export.log")

    Returns:
        Logger configuré avec handlers console et fichier

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Export démarré")
    """
    levels = LoggerLevel()
    logger = logging.getLogger(name)
    logger.setLevel(levels.level if level is None else level)

    # Éviter d'ajouter des handlers multiples si déjà configuré
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(
        levels.console_level if console_level is None else console_level
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    target = Path(log_dir) / log_filename if log_dir else Path(log_filename)
    file_handler = LazyFileHandler(filename=target, mode="a", encoding="utf-8")
    file_handler.setLevel(levels.file_level if file_level is None else file_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def get_logger(name: str, log_filename: Optional[str] = None) -> logging.Logger:
    """
    Récupère un logger existant ou en crée un nouveau avec la configuration par défaut.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("Contenu mal formé nettoyé")
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logger(name, log_filename=log_filename or DEFAULT_LOG_FILENAME)

    return logger
