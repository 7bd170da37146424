"""
Module pour la génération de jeux de données de test.
"""

import argparse

import numpy as np

from metricvp.io.writer import write_vectors

def generate_command(args: argparse.Namespace) -> int:
    """
    Commande pour générer un fichier de vecteurs aléatoires.

    Args:
        args: Arguments de ligne de commande

    Returns:
        int: Code de retour (0 pour succès, autre pour erreur)
    """
    try:
        print(f"🎲 Génération de {args.n:,} vecteurs aléatoires (dim {args.dims}, seed={args.seed})...")
        rng = np.random.default_rng(args.seed)
        vectors = rng.standard_normal((args.n, args.dims)).astype(np.float32)
        write_vectors(vectors, args.out_vec)
    except Exception as e:
        print(f"\n❌ Erreur: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1

    return 0
