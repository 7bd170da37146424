"""
Module d'écriture pour metricvp.
Sérialise les VP-trees sous forme textuelle compacte et écrit les fichiers de vecteurs.
"""

import math
import os
import struct
import time

import numpy as np

from metricvp.core.tree import InnerNode, LeafNode, Node, VPTree

def _format_number(value) -> str:
    value = float(value)
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if math.isnan(value):
        return "NaN"
    if value.is_integer():
        return str(int(value))
    return repr(value)

def _format_bucket(node: LeafNode) -> str:
    return "[" + ",".join(str(int(i)) for i in node.indices) + "]"

def stringify(node: Node) -> str:
    """
    Forme textuelle compacte d'un nœud: JSON sans guillemets autour des clés
    et sans les enfants vides.

    Grammaire:
        Node   := '{' 'i:' int (',m:' num ',M:' num ',mu:' num)? (',L:' (Bucket|Node))? (',R:' (Bucket|Node))? '}'
        Bucket := '[' int (',' int)* ']'

    Un arbre vide s'écrit 'null'.
    """
    if node is None:
        return "null"
    if isinstance(node, LeafNode):
        return _format_bucket(node)

    parts = [f"{{i:{int(node.index)}"]
    if node.mu is not None:
        parts.append(f",m:{_format_number(node.m)},M:{_format_number(node.M)},mu:{_format_number(node.mu)}")
    if node.left is not None:
        parts.append(",L:" + stringify(node.left))
    if node.right is not None:
        parts.append(",R:" + stringify(node.right))
    parts.append("}")
    return "".join(parts)

def write_tree(tree: VPTree, file_path: str) -> str:
    """
    Sauvegarde la forme textuelle d'un VP-tree.

    Args:
        tree: Arbre à sauvegarder
        file_path: Chemin du fichier de sortie

    Returns:
        str: Chemin du fichier écrit
    """
    print(f"⏳ Sauvegarde de l'arbre vers {file_path}...")
    os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)

    with open(file_path, "w", encoding="utf-8") as f:
        f.write(stringify(tree.tree))
        f.write("\n")

    print(f"✓ Arbre sauvegardé vers {file_path}")
    return file_path

class VectorWriter:
    """Classe pour écrire des vecteurs dans un fichier binaire."""

    @staticmethod
    def write_bin(vectors: np.ndarray, file_path: str) -> None:
        """
        Écrit des vecteurs dans un fichier binaire.
        Format: header (n, d: uint64) suivi des données en float32.

        Args:
            vectors: Tableau numpy contenant les vecteurs (shape: [n, d])
            file_path: Chemin du fichier de sortie
        """
        n, d = vectors.shape
        start_time = time.time()
        print(f"⏳ Écriture de {n:,} vecteurs (dim {d}) vers {file_path}...")

        os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)

        with open(file_path, "wb") as f:
            f.write(struct.pack("<QQ", n, d))
            f.write(np.ascontiguousarray(vectors, dtype=np.float32).tobytes())

        elapsed = time.time() - start_time
        print(f"✓ {n:,} vecteurs (dim {d}) écrits dans {file_path} [terminé en {elapsed:.2f}s]")

def write_vectors(vectors: np.ndarray, file_path: str) -> None:
    """Fonction utilitaire pour écrire des vecteurs dans un fichier."""
    VectorWriter.write_bin(vectors, file_path)
