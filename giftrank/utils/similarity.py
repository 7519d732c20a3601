"""
Embedding similarity for vector retrieval over the in-memory catalog.
"""

from typing import List

import numpy as np


def cosine_similarity(a: List[float], b: List[float]) -> float:
    """Cosine of the angle between two embeddings; 0.0 when empty, zero-length or mismatched."""
    if not a or not b or len(a) != len(b):
        return 0.0
    a_vec = np.asarray(a, dtype=float)
    b_vec = np.asarray(b, dtype=float)
    denom = np.linalg.norm(a_vec) * np.linalg.norm(b_vec)
    if denom == 0:
        return 0.0
    return float(a_vec @ b_vec / denom)


def cosine_distance(a: List[float], b: List[float]) -> float:
    """1 - cosine similarity (0 = same direction, 2 = opposite)."""
    return 1.0 - cosine_similarity(a, b)
