# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: SimilarityRanker
# -----------------------------------------------------------------------------

from typing import List, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from observation.Observation import Observation

ScoredObservation = Tuple[Observation, float]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity in [-1, 1]. Defined as 0.0 when either vector has
    zero magnitude.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Vector dimensions differ: {va.shape[0]} != {vb.shape[0]}")

    na = float(np.linalg.norm(va))
    nb = float(np.linalg.norm(vb))
    if na == 0.0 or nb == 0.0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / (na * nb), -1.0, 1.0))


@runtime_checkable
class SimilarityRanker(Protocol):
    def rank(
            self,
            query: Sequence[float],
            candidates: Sequence[Observation],
            k: int = 5,
    ) -> List[ScoredObservation]:
        ...


class CosineSimilarityRanker:
    """
    Exact linear scan: scores every candidate against the query and keeps
    the top k. Ties keep their original index order.
    """

    def rank(
            self,
            query: Sequence[float],
            candidates: Sequence[Observation],
            k: int = 5,
    ) -> List[ScoredObservation]:
        if k <= 0 or not candidates:
            return []

        q = np.asarray(query, dtype=np.float64)
        dims = {c.dimension for c in candidates}
        if dims != {q.shape[0]}:
            raise ValueError(
                f"Query dimension {q.shape[0]} does not match candidate dimension(s) {sorted(dims)}"
            )

        matrix = np.asarray([c.embedding for c in candidates], dtype=np.float64)
        scores = self.scores(q, matrix)

        # stable sort keeps index order for equal scores
        order = np.argsort(-scores, kind="stable")[:k]
        return [(candidates[i], float(scores[i])) for i in order]

    @staticmethod
    def scores(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        dots = matrix @ query
        denom = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        out = np.zeros_like(dots)
        np.divide(dots, denom, out=out, where=denom > 0.0)
        return np.clip(out, -1.0, 1.0)
