"""
Point d'entrée `python -m bookgen_export`.

Voir cli.py pour les commandes disponibles.
"""

from .cli import main

if __name__ == "__main__":
    main()
