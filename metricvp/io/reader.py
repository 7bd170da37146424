"""
Module de lecture de vecteurs pour metricvp.
"""

import os
import struct
import time
from typing import Optional

import numpy as np

HEADER_SIZE = 16  # 2 entiers 64 bits: n, d

def read_vectors(file_path: str, limit: Optional[int] = None, verbose: bool = True) -> np.ndarray:
    """
    Lit des vecteurs depuis un fichier binaire (header n, d en uint64 puis float32).

    Args:
        file_path: Chemin vers le fichier binaire
        limit: Nombre maximal de vecteurs à lire (facultatif)
        verbose: Afficher les messages de progression

    Returns:
        np.ndarray: Tableau de forme (n, d) en float32

    Raises:
        ValueError: Si le fichier est tronqué ou mal formé
    """
    start_time = time.time()
    if verbose:
        print(f"⏳ Chargement des vecteurs depuis {file_path}...")

    with open(file_path, "rb") as f:
        header = f.read(HEADER_SIZE)
        if len(header) != HEADER_SIZE:
            raise ValueError(f"Entête invalide dans {file_path}")
        n, d = struct.unpack("<QQ", header)
        if limit is not None:
            n = min(n, limit)

        expected = n * d * 4
        buffer = f.read(expected)
        if len(buffer) != expected:
            raise ValueError(f"Fichier tronqué: {len(buffer)} octets lus, {expected} attendus")

    vectors = np.frombuffer(buffer, dtype=np.float32).reshape(n, d)

    if verbose:
        elapsed = time.time() - start_time
        size_mb = os.path.getsize(file_path) / (1024 ** 2)
        print(f"✓ {n:,} vecteurs (dim {d}) chargés [{size_mb:.1f} MB, terminé en {elapsed:.2f}s]")

    return vectors
