"""
Module pour la construction de VP-trees en ligne de commande.
"""

import argparse
import datetime
import os
import time

from metricvp.builder.builder import build_from_config
from metricvp.io.reader import read_vectors
from metricvp.io.writer import write_tree
from metricvp.utils.config import ConfigManager
from metricvp.utils.distances import get_distance

def format_time(seconds: float) -> str:
    """Formate le temps en heures, minutes, secondes."""
    return str(datetime.timedelta(seconds=int(seconds)))

def build_command(args: argparse.Namespace) -> int:
    """
    Commande pour construire un VP-tree et sauvegarder sa forme textuelle.

    Args:
        args: Arguments de ligne de commande

    Returns:
        int: Code de retour (0 pour succès, autre pour erreur)
    """
    config_manager = ConfigManager(args.config)
    total_start_time = time.time()

    try:
        print(f"🚀 Construction d'un VP-tree...")
        print(f"  - Vecteurs: {args.vectors_file}")
        print(f"  - Sortie: {args.tree_file}")
        print(f"  - Taille max feuille: {args.bucket_size}")
        print(f"  - Distance: {args.metric}")
        print(f"  - Graine: {args.seed}")

        vectors = read_vectors(args.vectors_file)
        tree = build_from_config(
            vectors,
            config=config_manager.config,
            distance=get_distance(args.metric),
            bucket_size=args.bucket_size,
            seed=args.seed,
            verbose=True
        )

        write_tree(tree, args.tree_file)
        stats_file = os.path.splitext(args.tree_file)[0] + ".stats.txt"
        tree.save_statistics(stats_file)
        print(f"✓ Statistiques sauvegardées dans {stats_file}")

        total_time = time.time() - total_start_time
        print(f"\n✓ Construction terminée en {format_time(total_time)}")

        print("\nPour évaluer la recherche sur ces vecteurs :")
        print(f"  python -m metricvp.cli test {args.vectors_file} --bucket_size {args.bucket_size} --metric {args.metric}")

    except Exception as e:
        print(f"\n❌ Erreur: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1

    return 0
