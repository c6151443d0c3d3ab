"""
Nettoyage du texte et du HTML riche avant insertion dans un document EPUB.

Le contenu des sections vient de l'éditeur riche de l'application : c'est du
HTML, pas du XHTML, et rien ne garantit qu'il soit bien formé. Ce module le
transforme en fragment XML bien formé :
- éléments vides auto-fermants (<br/>, <img/>, <hr/>)
- suppression des attributs de style et propres à l'éditeur
- suppression des paragraphes vides
- suppression des scripts, commentaires et caractères interdits en XML

Le nettoyage ne lève jamais d'exception : une entrée impossible à analyser
est échappée telle quelle dans un paragraphe.
"""

import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning
from bs4.element import NavigableString, PreformattedString, Tag

from ..logger import get_logger
from .constants import DISALLOWED_ATTRIBUTES, DROPPED_ELEMENTS

logger = get_logger(__name__)

# Le contenu d'une section ressemble parfois à un nom de fichier ou une URL
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

_XML_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

# Caractères hors de la plage autorisée par XML 1.0
_INVALID_XML_CHARS = re.compile(
    r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)

# Noms simples (sans préfixe de namespace) valides en XML
_XML_NAME = re.compile(r"^[A-Za-z_][-A-Za-z0-9_.]*$")

_UNWRAPPED_ELEMENTS = {"html", "body"}

# Gestionnaires d'événements (onclick, onload...) ; "open" (<details>) n'en est pas un
_EVENT_HANDLER = re.compile(r"^on[a-z]+$")
_NON_HANDLER_ATTRIBUTES = {"open"}


def escape_for_xml(text: str | None) -> str:
    """
    Échappe un texte pour un attribut ou un contenu d'élément XML.

    Args:
        text: Texte saisi par l'utilisateur (titre, auteur, légende...)

    Returns:
        Texte avec &, <, >, " et ' remplacés par leurs entités nommées

    Example:
        >>> escape_for_xml('A < B & "C"')
        'A &lt; B &amp; &quot;C&quot;'
    """
    if not text:
        return ""
    for char, entity in _XML_ENTITIES:
        text = text.replace(char, entity)
    return text


def strip_invalid_xml_chars(text: str) -> str:
    """Supprime les caractères de contrôle interdits dans un document XML."""
    return _INVALID_XML_CHARS.sub("", text)


def clean_markup_for_container(html: str | None) -> str:
    """
    Convertit le HTML de l'éditeur en fragment XHTML bien formé.

    Args:
        html: Contenu HTML d'une section (non fiable)

    Returns:
        Fragment XHTML prêt à être inséré dans un document de contenu

    Example:
        >>> clean_markup_for_container('<p style="color:red">Hi<br></p><p> </p>')
        '<p>Hi<br/></p>'
    """
    if not html:
        return ""

    try:
        soup = BeautifulSoup(strip_invalid_xml_chars(html), "html.parser")
        _drop_unsafe_nodes(soup)
        _clean_tags(soup)
        _strip_decoded_chars(soup)
        _remove_empty_paragraphs(soup)
        return soup.decode(formatter="minimal")
    except Exception as e:
        logger.warning(
            f"Nettoyage HTML impossible ({type(e).__name__}: {e}), "
            f"contenu échappé en texte brut"
        )
        return f"<p>{escape_for_xml(strip_invalid_xml_chars(html))}</p>"


def _drop_unsafe_nodes(soup: BeautifulSoup) -> None:
    """Supprime scripts, styles, <head> et nœuds spéciaux (commentaires, doctype...)."""
    for tag in soup.find_all(list(DROPPED_ELEMENTS | {"head"})):
        if not tag.decomposed:
            tag.decompose()

    for node in soup.find_all(string=lambda s: isinstance(s, PreformattedString)):
        node.extract()


def _clean_tags(soup: BeautifulSoup) -> None:
    """
    Retire les attributs interdits et déballe les balises inutilisables.

    Une balise au nom invalide en XML (ex: <o:p> collé depuis Word) est
    remplacée par son contenu.
    """
    for tag in soup.find_all(True):
        if tag.name in _UNWRAPPED_ELEMENTS or not _XML_NAME.match(tag.name):
            tag.unwrap()
            continue

        for attr in list(tag.attrs):
            name = attr.lower()
            if (
                name in DISALLOWED_ATTRIBUTES
                or (_EVENT_HANDLER.match(name) and name not in _NON_HANDLER_ATTRIBUTES)
                or not _XML_NAME.match(attr)
            ):
                del tag[attr]


def _strip_decoded_chars(soup: BeautifulSoup) -> None:
    """Retire les caractères interdits produits par les références numériques (&#1;)."""
    for node in soup.find_all(string=True):
        cleaned = strip_invalid_xml_chars(node)
        if cleaned != node:
            node.replace_with(cleaned)

    for tag in soup.find_all(True):
        for attr, value in list(tag.attrs.items()):
            if isinstance(value, list):
                tag[attr] = [strip_invalid_xml_chars(item) for item in value]
            else:
                tag[attr] = strip_invalid_xml_chars(value)


def _is_empty_paragraph(tag: Tag) -> bool:
    for child in tag.children:
        if isinstance(child, Tag):
            return False
        if isinstance(child, NavigableString) and child.strip():
            return False
    return True


def _remove_empty_paragraphs(soup: BeautifulSoup) -> None:
    # Ordre inverse : un paragraphe qui ne contenait que des paragraphes vides
    # devient vide à son tour
    for paragraph in reversed(soup.find_all("p")):
        if _is_empty_paragraph(paragraph):
            paragraph.decompose()
