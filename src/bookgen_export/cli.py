"""
Interface en ligne de commande de bookgen-export.

Commandes :
- build : exporte un ou plusieurs projets `.book.json` en EPUB
- inspect : relit un EPUB et vérifie la cohérence de sa navigation

Example:
    $ bookgen-export build My_Book.book.json -o exports --media-dir exports/media
    $ bookgen-export inspect exports/My_Book.epub
"""

import sys
from pathlib import Path

import click
from tqdm import tqdm

from . import __version__
from .config import ExportDefaults, load_env_overrides, lock_config
from .epub import EpubPackager, inspect_epub, safe_filename, save_epub
from .exceptions import BookExportError
from .logger import get_logger
from .media import DirectoryMediaSource
from .models import load_project

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="bookgen-export")
def cli() -> None:
    """BookGen Export - Convertit les projets BookGen en EPUB 3."""
    # Appels répétés dans un même processus : la configuration est déjà figée
    if not ExportDefaults().is_locked:
        load_env_overrides()
        lock_config()


@cli.command()
@click.argument(
    "projects",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Répertoire de destination des fichiers .epub.",
)
@click.option(
    "--media-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Répertoire contenant les images (<id>.<ext>).",
)
@click.option(
    "--name",
    help="Nom du fichier de sortie (un seul projet ; défaut : dérivé du titre).",
)
def build(
    projects: tuple[Path, ...],
    output_dir: Path,
    media_dir: Path | None,
    name: str | None,
) -> None:
    """Exporte chaque PROJECT (.book.json) en EPUB."""
    if name and len(projects) > 1:
        raise click.UsageError("--name ne peut être utilisé qu'avec un seul projet")

    media = DirectoryMediaSource(media_dir) if media_dir else None
    packager = EpubPackager(media=media)

    failures = 0
    with tqdm(
        total=len(projects),
        desc="Export EPUB",
        unit="livre",
        ncols=100,
        disable=len(projects) < 2,
    ) as pbar:
        for project_path in projects:
            try:
                project = load_project(project_path)
                blob = packager.build(project)
                filename = name or safe_filename(project.meta.title)
                output_path = save_epub(blob, filename, output_dir)
                pbar.write(f"✅ {project_path} -> {output_path}")
            except BookExportError as e:
                failures += 1
                logger.error(f"Export impossible pour {project_path} : {e}")
                pbar.write(f"❌ {project_path} : {e}")
            except OSError as e:
                failures += 1
                logger.exception(f"Erreur d'entrée/sortie pour {project_path}")
                pbar.write(f"❌ {project_path} : {e}")
            pbar.update(1)

    if failures:
        click.echo(f"{failures}/{len(projects)} export(s) en échec", err=True)
        sys.exit(1)


@cli.command()
@click.argument("epub_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(epub_file: Path) -> None:
    """Affiche la structure d'un EPUB et vérifie sa cohérence."""
    summary = inspect_epub(epub_file)

    click.echo(f"Title:      {summary.title}")
    click.echo(f"Identifier: {summary.identifier}")
    click.echo(f"Language:   {summary.language}")
    click.echo(f"Entries:    {len(summary.archive_entries)}")
    click.echo("Spine:")
    for idref, href in zip(summary.spine, summary.documents):
        click.echo(f"  {idref:<12} {href}")

    if not summary.is_consistent:
        click.echo("❌ Navigation incohérente avec le spine", err=True)
        sys.exit(1)
    click.echo("✅ Manifeste, spine et navigation cohérents")


def main() -> None:
    cli()
