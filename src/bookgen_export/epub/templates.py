"""
Rendu des documents XML de l'EPUB via des templates Jinja2.

Tous les documents (package, navigation, pages) sont produits par des
templates du répertoire `templates/`. L'échappement est fait à un seul
endroit : le hook `finalize` de l'environnement applique `escape_for_xml`
à toute chaîne insérée par `{{ ... }}`. Le HTML déjà nettoyé doit donc être
passé sous forme de `Markup` pour être inséré tel quel.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from markupsafe import Markup

from .sanitizer import escape_for_xml

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def _escape_value(value: Any) -> Any:
    """
    Échappement centralisé de chaque expression `{{ ... }}`.

    - None devient une chaîne vide
    - Markup (HTML nettoyé) est laissé intact
    - toute autre chaîne est échappée avec des entités nommées
    """
    if value is None:
        return ""
    if isinstance(value, Markup):
        return value
    if isinstance(value, str):
        return Markup(escape_for_xml(value))
    return value


@lru_cache(maxsize=1)
def template_env() -> Environment:
    """
    Environnement Jinja2 partagé, créé au premier export.

    L'initialisation est idempotente : les appels suivants retournent
    la même instance.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
        finalize=_escape_value,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_template(template_name: str, **context: Any) -> str:
    """
    Rend un template avec les variables données.

    Args:
        template_name: Nom du fichier template (voir config.TemplateNames)
        **context: Variables passées au template

    Returns:
        Document rendu

    Example:
        >>> render_template("container.xml.j2", package_path="OEBPS/content.opf")
    """
    return template_env().get_template(template_name).render(**context)
