"""
Interface en ligne de commande pour metricvp.
Fournit des commandes pour générer des données, construire des VP-trees,
tester les performances et effectuer des recherches.
"""

import argparse
import sys
from typing import List, Optional

from metricvp import __version__
from metricvp.utils.cli_build import build_command
from metricvp.utils.cli_generate import generate_command
from metricvp.utils.cli_search import search_command
from metricvp.utils.cli_test import test_command
from metricvp.utils.config import ConfigManager

def _config_path(argv: List[str]) -> Optional[str]:
    # --config doit être connu avant de construire les valeurs par défaut des sous-commandes
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default=None)
    known, _ = pre_parser.parse_known_args(argv)
    return known.config

def main(argv: Optional[List[str]] = None) -> int:
    """
    Point d'entrée principal pour l'interface en ligne de commande.

    Args:
        argv: Arguments (sys.argv[1:] par défaut)

    Returns:
        int: Code de retour (0 pour succès, autre pour erreur)
    """
    argv = sys.argv[1:] if argv is None else argv
    config_manager = ConfigManager(_config_path(argv))

    build_config = config_manager.get_section("build_tree")
    search_config = config_manager.get_section("search")
    generate_config = config_manager.get_section("generate")

    default_vectors_path = config_manager.get_file_path("default_vectors")
    default_tree_path = config_manager.get_file_path("default_tree")

    parser = argparse.ArgumentParser(
        description="metricvp - Recherche des plus proches voisins dans un espace métrique par VP-tree",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--config", default=config_manager.config_path,
                        help="Chemin vers le fichier de configuration")
    parser.add_argument("--version", action="version", version=f"metricvp v{__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Commandes disponibles")

    def add_build_options(sub_parser: argparse.ArgumentParser) -> None:
        sub_parser.add_argument("--bucket_size", type=int, default=build_config["bucket_size"],
                                help="Taille maximale des feuilles (0 = pas de feuilles)")
        sub_parser.add_argument("--metric", default=build_config["metric"],
                                help="Fonction de distance (euclidean, manhattan, chebyshev, angular)")
        sub_parser.add_argument("--seed", type=int, default=build_config["seed"],
                                help="Graine du tirage des points de vue")

    # Commande generate
    generate_parser = subparsers.add_parser("generate", help="Générer un fichier de vecteurs aléatoires")
    generate_parser.add_argument("out_vec", nargs="?", default=default_vectors_path,
                                 help="Fichier binaire de sortie")
    generate_parser.add_argument("--n", type=int, default=generate_config["n"],
                                 help="Nombre de vecteurs")
    generate_parser.add_argument("--dims", type=int, default=generate_config["dims"],
                                 help="Dimension des vecteurs")
    generate_parser.add_argument("--seed", type=int, default=generate_config["seed"],
                                 help="Graine du générateur")
    generate_parser.set_defaults(func=generate_command)

    # Commande build
    build_parser = subparsers.add_parser("build", help="Construire un VP-tree")
    build_parser.add_argument("vectors_file", nargs="?", default=default_vectors_path,
                              help="Fichier binaire contenant les vecteurs")
    build_parser.add_argument("tree_file", nargs="?", default=default_tree_path,
                              help="Fichier de sortie pour la forme textuelle de l'arbre")
    add_build_options(build_parser)
    build_parser.set_defaults(func=build_command)

    # Commande test
    test_parser = subparsers.add_parser("test", help="Tester la performance de la recherche")
    test_parser.add_argument("vectors_file", nargs="?", default=default_vectors_path,
                             help="Fichier binaire contenant les vecteurs")
    add_build_options(test_parser)
    test_parser.add_argument("--k", type=int, default=search_config["limit"],
                             help="Nombre de voisins à retourner")
    test_parser.add_argument("--max_distance", type=float, default=search_config["max_distance"],
                             help="Distance maximale acceptée")
    test_parser.add_argument("--queries", type=int, default=search_config["queries"],
                             help="Nombre de requêtes aléatoires à effectuer")
    test_parser.add_argument("--n_jobs", type=int, default=search_config["n_jobs"],
                             help="Nombre de threads pour la recherche par lots")
    test_parser.add_argument("--no-faiss", dest="use_faiss", action="store_false",
                             help="Ne pas utiliser FAISS pour la recherche exhaustive euclidienne")
    test_parser.set_defaults(use_faiss=search_config["use_faiss"])
    test_parser.set_defaults(func=test_command)

    # Commande search
    search_parser = subparsers.add_parser("search", help="Rechercher les voisins d'une requête")
    search_parser.add_argument("vectors_file", nargs="?", default=default_vectors_path,
                               help="Fichier binaire contenant les vecteurs")
    query_group = search_parser.add_mutually_exclusive_group()
    query_group.add_argument("--index", type=int, default=0,
                             help="Indice du vecteur utilisé comme requête")
    query_group.add_argument("--vector", default=None,
                             help="Vecteur requête sous la forme x,y,z,...")
    add_build_options(search_parser)
    search_parser.add_argument("--k", type=int, default=search_config["limit"],
                               help="Nombre de résultats à afficher")
    search_parser.add_argument("--max_distance", type=float, default=search_config["max_distance"],
                               help="Distance maximale acceptée")
    search_parser.set_defaults(func=search_command)

    args = parser.parse_args(argv)

    if hasattr(args, "func"):
        return args.func(args)
    else:
        parser.print_help()
        return 0

if __name__ == "__main__":
    sys.exit(main())
