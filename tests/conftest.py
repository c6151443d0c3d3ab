"""
Configuration pytest pour les tests bookgen-export.

Ce fichier contient les fixtures communes à tous les tests : projets
d'exemple, horloge fixe, helpers de lecture d'archive et remise à zéro
de la configuration et de la session de logs.
"""

import io
import zipfile
from datetime import datetime, timezone

import pytest
from lxml import etree

from bookgen_export.config import ExportDefaults, LoggerLevel, TemplateNames
from bookgen_export.epub import build
from bookgen_export.logger import LogSession
from bookgen_export.models import BookMeta, BookProject, Chapter, Section

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 15, tzinfo=timezone.utc)

NAMESPACES = {
    "opf": "http://www.idpf.org/2007/opf",
    "dc": "http://purl.org/dc/elements/1.1/",
    "ncx": "http://www.daisy.org/z3986/2005/ncx/",
    "xhtml": "http://www.w3.org/1999/xhtml",
    "epub": "http://www.idpf.org/2007/ops",
    "container": "urn:oasis:names:tc:opendocument:xmlns:container",
}


@pytest.fixture(autouse=True)
def reset_state(tmp_path, monkeypatch):
    """
    Isole chaque test : configuration neuve, logs dans un répertoire temporaire.

    Les singletons de configuration sont recréés (la commande CLI les
    verrouille) et les variables BOOKGEN_* de l'environnement sont retirées.
    """
    for config_cls in (LoggerLevel, TemplateNames, ExportDefaults):
        monkeypatch.setattr(config_cls, "_instance", None)
    for variable in ("BOOKGEN_PUBLISHER", "BOOKGEN_LANGUAGE", "BOOKGEN_LOG_DIR"):
        monkeypatch.delenv(variable, raising=False)

    LoggerLevel().base_dir = str(tmp_path / "logs")
    LogSession.reset()
    yield
    LogSession.reset()


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def sample_project():
    """Projet "A < B" avec deux chapitres "One" et "Two"."""
    return BookProject(
        meta=BookMeta(
            id="1234",
            title="A < B",
            author_name="Jane Doe",
            language="en",
            genre="Fantasy",
            created_at="2024-01-01T00:00:00Z",
            updated_at="2024-04-30T08:00:00Z",
        ),
        premise="Two chapters & a premise",
        chapters=[
            Chapter(
                id="c1",
                title="One",
                sections=[
                    Section(id="s1", title="Opening", content="<p>Hello<br>world</p>"),
                ],
            ),
            Chapter(
                id="c2",
                title="Two",
                sections=[
                    Section(id="s2", title="", content="<p>Second</p><p> </p>"),
                ],
            ),
        ],
    )


@pytest.fixture
def empty_project():
    """Projet sans chapitre ni auteur."""
    return BookProject(meta=BookMeta(id="empty-1", title="Empty"))


@pytest.fixture
def build_epub(fixed_now):
    """Construit l'archive d'un projet à l'instant fixe FIXED_NOW."""

    def _build(project, media=None, now=None):
        return build(project, media=media, now=now or fixed_now)

    return _build


@pytest.fixture
def open_epub():
    """Ouvre une archive en mémoire avec zipfile."""

    def _open(blob: bytes) -> zipfile.ZipFile:
        return zipfile.ZipFile(io.BytesIO(blob), "r")

    return _open


@pytest.fixture
def parse_xml():
    """Parse un document en mode strict (échoue si le XML est mal formé)."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)

    def _parse(data: bytes | str):
        if isinstance(data, str):
            data = data.encode("utf-8")
        return etree.fromstring(data, parser)

    return _parse


@pytest.fixture
def ns():
    return NAMESPACES
