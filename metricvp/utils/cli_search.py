"""
Module pour la recherche ponctuelle en ligne de commande.
"""

import argparse
import time
from typing import List

import numpy as np

from metricvp.builder.builder import build_from_config
from metricvp.core.queue import SearchResult
from metricvp.io.reader import read_vectors
from metricvp.utils.config import ConfigManager
from metricvp.utils.distances import get_distance

def format_results(results: List[SearchResult], elapsed: float, comparisons: int) -> str:
    """
    Formate les résultats de recherche pour l'affichage en terminal.

    Args:
        results: Liste des résultats de recherche
        elapsed: Durée de la recherche en secondes
        comparisons: Nombre de distances calculées
    """
    output = ["\n🕒 Recherche:",
              f"  → Temps      : {elapsed*1000:.2f} ms",
              f"  → Distances  : {comparisons:,}",
              "\n📋 Résultats:"]
    for rank, result in enumerate(results, 1):
        output.append(f"  {rank:>3}. #{result.index:<8} d={result.distance:.6f}")
    if not results:
        output.append("  (aucun résultat)")
    return "\n".join(output)

def parse_vector(text: str) -> np.ndarray:
    """Convertit "x,y,z" en vecteur float32."""
    try:
        return np.array([float(v) for v in text.split(",")], dtype=np.float32)
    except ValueError:
        raise ValueError(f"Vecteur invalide: '{text}'") from None

def search_command(args: argparse.Namespace) -> int:
    """
    Commande pour rechercher les plus proches voisins d'une requête.

    Args:
        args: Arguments de ligne de commande

    Returns:
        int: Code de retour (0 pour succès, autre pour erreur)
    """
    config_manager = ConfigManager(args.config)

    try:
        vectors = read_vectors(args.vectors_file)
        if args.vector is not None:
            query = parse_vector(args.vector)
            if query.shape[0] != vectors.shape[1]:
                raise ValueError(f"Dimension de la requête ({query.shape[0]}) différente des vecteurs ({vectors.shape[1]})")
            print(f"🔍 Requête: vecteur fourni (dim {query.shape[0]})")
        else:
            if not 0 <= args.index < len(vectors):
                raise ValueError(f"Indice hors limites: {args.index} (0..{len(vectors) - 1})")
            query = vectors[args.index]
            print(f"🔍 Requête: vecteur #{args.index}")

        tree = build_from_config(
            vectors,
            config=config_manager.config,
            distance=get_distance(args.metric),
            bucket_size=args.bucket_size,
            seed=args.seed,
            verbose=True
        )

        start_time = time.time()
        results = tree.search(query, args.k, args.max_distance)
        elapsed = time.time() - start_time

        print(format_results(results, elapsed, tree.comparisons))

    except Exception as e:
        print(f"\n❌ Erreur: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1

    return 0
