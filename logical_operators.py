"""Logical operators, brute-force distance and bipartite entanglement.

Logical operators are built in three steps:

1. centralizer: vectors commuting with every stabilizer row, i.e. the null
   space of the tableau with X and Z halves swapped;
2. greedy extension: keep centralizer vectors that raise the rank of
   (stabilizers + kept vectors) until 2k are collected;
3. symplectic Gram-Schmidt: pair vectors with <X_i, Z_i> = 1 and clear every
   other pool vector against the pair.

Pairing is greedy. A candidate X_i with no partner in the current pool is
deferred; if the pool runs out the result carries fewer than k pairs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from gf2_tableau import nullspace_mod2, rank_mod2, symplectic_dual, symplectic_product
from shared_utilities import DEFAULT_MAX_SEARCH_OPERATORS


@dataclass
class LogicalOperatorResult:
    """Logical operators as rows ``X_1, Z_1, X_2, Z_2, ...``.

    ``operators`` has shape ``(2 * pairs_found, 2N)``.
    """

    operators: np.ndarray
    k: int
    pairs_found: int

    @property
    def complete(self) -> bool:
        return self.pairs_found == self.k

    @property
    def missing(self) -> int:
        return self.k - self.pairs_found

    @property
    def x_operators(self) -> np.ndarray:
        return self.operators[0::2]

    @property
    def z_operators(self) -> np.ndarray:
        return self.operators[1::2]

    def __len__(self) -> int:
        return int(self.operators.shape[0])


def _extend_beyond_stabilizers(
    tableau: np.ndarray, centralizer: np.ndarray, target: int
) -> List[np.ndarray]:
    span = tableau.copy()
    current_rank = rank_mod2(span) if span.shape[0] else 0
    kept: List[np.ndarray] = []
    for v in centralizer:
        if len(kept) >= target:
            break
        candidate = np.vstack([span, v])
        r = rank_mod2(candidate)
        if r > current_rank:
            kept.append(v.copy())
            span = candidate
            current_rank = r
    return kept


def _symplectic_gram_schmidt(pool: List[np.ndarray], k: int) -> List[np.ndarray]:
    pool = [v.copy() for v in pool if v.any()]
    deferred: List[int] = []
    pairs: List[np.ndarray] = []

    while len(pairs) < 2 * k:
        x_idx = next((i for i in range(len(pool)) if i not in deferred and pool[i].any()), None)
        if x_idx is None:
            break
        x_op = pool[x_idx]
        z_idx = next(
            (j for j in range(len(pool)) if j != x_idx and symplectic_product(x_op, pool[j]) == 1),
            None,
        )
        if z_idx is None:
            deferred.append(x_idx)
            continue

        z_op = pool[z_idx]
        pairs.extend([x_op, z_op])
        rest = [pool[i] for i in range(len(pool)) if i not in (x_idx, z_idx)]
        pool = []
        for w in rest:
            w = w.copy()
            if symplectic_product(w, z_op):
                w ^= x_op
            if symplectic_product(w, x_op):
                w ^= z_op
            pool.append(w)
        deferred = []
    return pairs


def find_logical_operators(tableau: np.ndarray, k: int) -> LogicalOperatorResult:
    """Return up to k symplectic pairs of logical operators for ``tableau``.

    Every returned operator commutes with every stabilizer row;
    <X_i, Z_i> = 1 and all other cross products vanish.
    """
    tableau = np.asarray(tableau, dtype=np.uint8) & 1
    cols = tableau.shape[1]
    if k <= 0:
        return LogicalOperatorResult(np.zeros((0, cols), dtype=np.uint8), max(k, 0), 0)

    centralizer = nullspace_mod2(symplectic_dual(tableau))
    pool = _extend_beyond_stabilizers(tableau, centralizer, 2 * k)
    logging.debug(
        "[LOGICAL] centralizer dim %d, %d vectors beyond the stabilizer span",
        len(centralizer), len(pool),
    )

    pairs = _symplectic_gram_schmidt(pool, k)
    operators = np.array(pairs, dtype=np.uint8).reshape(len(pairs), cols)
    result = LogicalOperatorResult(operators, k, len(pairs) // 2)
    if not result.complete:
        logging.warning(
            "[LOGICAL] found %d of %d logical operators (%d pairs missing)",
            len(result), 2 * k, result.missing,
        )
    return result


def operator_weight(op: np.ndarray) -> int:
    """Number of sites where the Pauli is not the identity."""
    op = np.asarray(op, dtype=np.uint8)
    N = op.shape[-1] // 2
    return int(np.count_nonzero(op[:N] | op[N:]))


def logical_search_distance(
    logicals: np.ndarray, max_operators: Optional[int] = DEFAULT_MAX_SEARCH_OPERATORS
) -> Optional[int]:
    """Minimum weight over all nonzero XOR combinations of ``logicals``.

    Returns 0 when there are no logicals and ``None`` when more than
    ``max_operators`` operators would have to be combined.
    """
    logicals = np.asarray(logicals, dtype=np.uint8)
    n_ops = logicals.shape[0]
    if n_ops == 0:
        return 0
    if max_operators is not None and n_ops > max_operators:
        logging.info("[DIST] skipping logical search over %d operators (limit %d)", n_ops, max_operators)
        return None

    # Gray-code walk: each subset differs from the previous one by one operator.
    combination = np.zeros(logicals.shape[1], dtype=np.uint8)
    min_weight = 0
    for i in range(1, 1 << n_ops):
        flip = (i & -i).bit_length() - 1
        combination ^= logicals[flip]
        w = operator_weight(combination)
        if w > 0 and (min_weight == 0 or w < min_weight):
            min_weight = w
            if min_weight == 1:
                break
    return min_weight


def _crosses_cut(row: np.ndarray, N: int, cut: int) -> bool:
    support = row[:N] | row[N:]
    return bool(support[:cut].any() and support[cut:].any())


def compute_entanglement(tableau: np.ndarray, logicals: Optional[np.ndarray] = None) -> int:
    """Half the number of operators with support on both sides of the cut at N // 2.

    Counted operators are the stabilizer rows plus, when ``logicals`` is
    given, the Z member of each logical pair.
    """
    tableau = np.asarray(tableau, dtype=np.uint8)
    N = tableau.shape[1] // 2
    cut = N // 2
    crossing = sum(1 for row in tableau if _crosses_cut(row, N, cut))
    if logicals is not None and len(logicals):
        z_ops = np.asarray(logicals, dtype=np.uint8)[1::2]
        crossing += sum(1 for row in z_ops if _crosses_cut(row, N, cut))
    return crossing // 2


__all__ = [
    "LogicalOperatorResult",
    "find_logical_operators",
    "operator_weight",
    "logical_search_distance",
    "compute_entanglement",
]
