"""End-to-end analysis of a Clifford QCA rule and a stabilizer generator.

``analyze(rule_matrix, state, N)`` is a pure pipeline:

1. rule properties: det M(x) and the symplectic condition;
2. stabilizer generator: X(z), Z(z) and periodic self-orthogonality;
3. code parameters (orthogonal generators only): d1N(x), k and the
   cyclic-residual distance;
4. binary tableau (k > 0 only): logical operators, brute-force distance over
   logical combinations and the bipartite entanglement count.

Shape errors fail fast with ``ValueError``. Failures inside a stage are
logged and reported through the stage's ``*_details`` text, leaving booleans
False and counts 0.

Run as a script to analyze a preset rule with a Pauli-string generator and
optionally track the code parameters along the automaton trajectory.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from clifford_automaton import f2_to_pauli_string, pauli_string_to_f2, run, single_x_state
from code_parameters import calculate_code_distance, finite_gcd_factor
from gf2_tableau import cyclic_stabilizer_tableau
from laurent_matrix import (
    RuleMatrixLike,
    determinant,
    format_laurent_matrix,
    is_symplectic,
    rule_matrix_to_laurent,
    validate_rule_matrix,
)
from logical_operators import (
    compute_entanglement,
    find_logical_operators,
    logical_search_distance,
    operator_weight,
)
from periodic_gcd import factor_over_gf2
from qca_properties import (
    StateLike,
    has_orthogonal_stabilizer_periodic,
    state_to_laurent,
    validate_state,
)
from shared_utilities import (
    DEFAULT_LATTICE_SIZE,
    DEFAULT_MAX_SEARCH_OPERATORS,
    DEFAULT_POSITION,
    DEFAULT_TIME_STEPS,
    parse_rule_matrix,
    write_trajectory_csv,
)

STABILIZER_CONDITION = "S(z) = X(z)Z(z⁻¹) + Z(z)X(z⁻¹) mod (x^N-1)"
SYMPLECTIC_CONDITION = "M(x⁻¹)ᵀ Ω M(x)"


def _empty_operators() -> np.ndarray:
    return np.zeros((0, 0), dtype=np.uint8)


@dataclass
class AnalysisResult:
    invertible: bool = False
    determinant_details: str = ""
    symplectic: bool = False
    symplectic_details: str = ""
    transfer_matrix: str = ""
    orthogonal_stabilizer: bool = False
    stabilizer_details: str = ""
    x_poly: str = "0"
    z_poly: str = "0"
    gcd_factor: str = ""
    gcd_factorization: str = ""
    logical_qubits: int = 0
    logical_qubits_details: str = ""
    code_distance: int = 0
    search_distance: Optional[int] = None
    distance_diagnostic: str = ""
    logical_operators: np.ndarray = field(default_factory=_empty_operators)
    logical_weights: List[int] = field(default_factory=list)
    logical_shortfall: int = 0
    entanglement: int = 0

    def to_dict(self) -> Dict[str, object]:
        d = dataclasses.asdict(self)
        d["logical_operators"] = np.asarray(self.logical_operators).astype(int).tolist()
        return d


@dataclass
class TrajectoryPoint:
    step: int
    state: str
    orthogonal: bool
    logical_qubits: int
    code_distance: int
    entanglement: int


def _rule_properties(rule: np.ndarray, result: AnalysisResult) -> None:
    try:
        M = rule_matrix_to_laurent(rule, 2)
        result.transfer_matrix = format_laurent_matrix(M)
        det = determinant(M)
        result.invertible = det.is_monomial()
        result.determinant_details = f"det(M(x)) = {det}"
    except Exception as e:
        logging.warning("[ANALYSIS] determinant failed: %s", e)
        result.invertible = False
        result.determinant_details = "Error calculating determinant"

    try:
        result.symplectic = is_symplectic(rule_matrix_to_laurent(rule, 2))
        relation = "=" if result.symplectic else "≠"
        result.symplectic_details = f"{SYMPLECTIC_CONDITION} {relation} Ω"
    except Exception as e:
        logging.warning("[ANALYSIS] symplectic check failed: %s", e)
        result.symplectic = False
        result.symplectic_details = "Error checking symplectic condition"


def _stabilizer_properties(state: np.ndarray, N: int, result: AnalysisResult) -> None:
    try:
        X, Z = state_to_laurent(state)
        result.x_poly = X.to_string("z")
        result.z_poly = Z.to_string("z")
        result.orthogonal_stabilizer = has_orthogonal_stabilizer_periodic(state, N)
        relation = "=" if result.orthogonal_stabilizer else "≠"
        result.stabilizer_details = f"{STABILIZER_CONDITION} {relation} 0"
    except Exception as e:
        logging.warning("[ANALYSIS] stabilizer check failed: %s", e)
        result.orthogonal_stabilizer = False
        result.stabilizer_details = "Error calculating Laurent polynomials"


def _code_parameters(state: np.ndarray, N: int, result: AnalysisResult) -> None:
    if not result.orthogonal_stabilizer:
        result.logical_qubits_details = "Cannot calculate logical qubits (non-orthogonal stabilizer)"
        return
    try:
        X, Z = state_to_laurent(state)
        d1N = finite_gcd_factor(X, Z, N)
        result.gcd_factor = str(d1N)
        result.gcd_factorization = factor_over_gf2(d1N)
        result.logical_qubits = 0 if d1N.is_zero() else int(d1N.degree())
        result.logical_qubits_details = f"k = {result.logical_qubits} logical qubits"
        result.code_distance = calculate_code_distance(state, N)
    except Exception as e:
        logging.warning("[ANALYSIS] code parameters failed: %s", e)
        result.logical_qubits = 0
        result.code_distance = 0
        result.logical_qubits_details = "Error calculating logical qubits"


def _binary_tableau_analysis(
    state: np.ndarray, N: int, result: AnalysisResult, max_search_operators: Optional[int]
) -> None:
    k = result.logical_qubits
    if k <= 0:
        result.search_distance = 0 if result.orthogonal_stabilizer else None
        return
    try:
        X, Z = state_to_laurent(state)
        tableau = cyclic_stabilizer_tableau(X, Z, N)
        logicals = find_logical_operators(tableau, k)
        result.logical_operators = logicals.operators
        result.logical_weights = [operator_weight(op) for op in logicals.operators]
        result.logical_shortfall = logicals.missing
        result.entanglement = compute_entanglement(tableau, logicals.operators)
        result.search_distance = logical_search_distance(logicals.operators, max_search_operators)
    except Exception as e:
        logging.warning("[ANALYSIS] binary tableau analysis failed: %s", e)
        result.entanglement = 0
        result.search_distance = None
        return

    # the search XORs logical representatives without stabilizer products, so a gap is common
    if result.search_distance is not None and result.search_distance != result.code_distance:
        result.distance_diagnostic = (
            f"residual distance {result.code_distance} differs from "
            f"logical search distance {result.search_distance}"
        )
        logging.info("[DIST] %s", result.distance_diagnostic)


def analyze(
    rule_matrix: RuleMatrixLike,
    state: StateLike,
    N: int,
    max_search_operators: Optional[int] = DEFAULT_MAX_SEARCH_OPERATORS,
) -> AnalysisResult:
    """Analyze ``rule_matrix`` together with the stabilizer generator ``state`` on N sites."""
    rule = validate_rule_matrix(rule_matrix)
    st = validate_state(state, N)

    result = AnalysisResult()
    _rule_properties(rule, result)
    _stabilizer_properties(st, N, result)
    _code_parameters(st, N, result)
    _binary_tableau_analysis(st, N, result, max_search_operators)
    logging.debug(
        "[ANALYSIS] invertible=%s symplectic=%s orthogonal=%s k=%d d=%d",
        result.invertible, result.symplectic, result.orthogonal_stabilizer,
        result.logical_qubits, result.code_distance,
    )
    return result


def analyze_trajectory(
    rule_matrix: RuleMatrixLike,
    state: StateLike,
    N: int,
    steps: int,
    max_search_operators: Optional[int] = DEFAULT_MAX_SEARCH_OPERATORS,
) -> List[TrajectoryPoint]:
    """Code parameters of the evolving generator, one point per time step (step 0 included).

    States that recur along the trajectory are analyzed once.
    """
    rule = validate_rule_matrix(rule_matrix)
    st = validate_state(state, N)
    history = run(st, rule, steps)

    cache: Dict[bytes, Tuple[bool, int, int, int]] = {}
    points: List[TrajectoryPoint] = []
    for t, current in enumerate(history):
        key = current.tobytes()
        if key not in cache:
            r = analyze(rule, current, N, max_search_operators)
            cache[key] = (r.orthogonal_stabilizer, r.logical_qubits, r.code_distance, r.entanglement)
        orthogonal, k, d, ent = cache[key]
        points.append(TrajectoryPoint(t, f2_to_pauli_string(current), orthogonal, k, d, ent))
    logging.info("[QCA] analyzed %d steps (%d distinct states)", len(points), len(cache))
    return points


def format_report(result: AnalysisResult) -> str:
    lines = [
        f"Transfer matrix M(x): {result.transfer_matrix}",
        f"Invertible: {result.invertible}    {result.determinant_details}",
        f"Symplectic: {result.symplectic}    {result.symplectic_details}",
        f"X(z) = {result.x_poly}",
        f"Z(z) = {result.z_poly}",
        f"Orthogonal stabilizer: {result.orthogonal_stabilizer}    {result.stabilizer_details}",
    ]
    if result.gcd_factor:
        lines.append(f"d1N(x) = {result.gcd_factor} = {result.gcd_factorization}")
    lines.append(f"Logical qubits: {result.logical_qubits}    {result.logical_qubits_details}")
    lines.append(f"Code distance: {result.code_distance}")
    if result.search_distance is not None:
        lines.append(f"Logical search distance: {result.search_distance}")
    if result.distance_diagnostic:
        lines.append(f"Warning: {result.distance_diagnostic}")
    if result.logical_qubits > 0:
        found = len(result.logical_operators)
        lines.append(f"Logical operators: {found}/{2 * result.logical_qubits}")
        for i, op in enumerate(result.logical_operators):
            kind = "X" if i % 2 == 0 else "Z"
            N = op.shape[0] // 2
            paulis = f2_to_pauli_string(np.stack([op[:N], op[N:]], axis=1))
            lines.append(f"  {kind}_{i // 2 + 1}: {paulis}  (weight {result.logical_weights[i]})")
    lines.append(f"Entanglement: {result.entanglement}")
    return "\n".join(lines)


def main() -> None:
    p = argparse.ArgumentParser(description="Analyze a 1D Clifford QCA rule and its stabilizer code")
    p.add_argument("--rule", type=str, default="default", help="Preset name (default, glider, identity) or JSON 2x6 matrix")
    p.add_argument("--state", type=str, default=None, help="Generator as a Pauli string, e.g. XZZXI (overrides --position)")
    p.add_argument("--lattice-size", type=int, default=None, help=f"Number of sites N (default {DEFAULT_LATTICE_SIZE}, or len(--state))")
    p.add_argument("--position", type=int, default=DEFAULT_POSITION, help="Site of the single X when --state is not given")
    p.add_argument("--steps", type=int, default=0, help=f"Automaton steps to track (typical: {DEFAULT_TIME_STEPS}); 0 analyzes the generator only")
    p.add_argument("--max-search-operators", type=int, default=DEFAULT_MAX_SEARCH_OPERATORS, help="Skip the brute-force logical search above this many operators")
    p.add_argument("--csv-out", type=str, default=None, help="Write the trajectory to this CSV file")
    p.add_argument("--json-out", type=str, default=None, help="Write the analysis result to this JSON file")
    p.add_argument("--verbose", action="store_true", help="Log intermediate polynomials")
    args = p.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        rule = parse_rule_matrix(args.rule)
        if args.state is not None:
            state = pauli_string_to_f2(args.state)
            N = args.lattice_size if args.lattice_size is not None else state.shape[0]
        else:
            N = args.lattice_size if args.lattice_size is not None else DEFAULT_LATTICE_SIZE
            state = single_x_state(N, args.position)
        result = analyze(rule, state, N, args.max_search_operators)
    except ValueError as e:
        p.error(str(e))

    print(format_report(result))

    if args.json_out:
        os.makedirs(os.path.dirname(args.json_out) or ".", exist_ok=True)
        with open(args.json_out, "w") as f:
            json.dump({"rule_matrix": rule.astype(int).tolist(), "N": N, **result.to_dict()}, f, indent=2)
        logging.info("[QCA] wrote %s", args.json_out)

    if args.steps > 0:
        points = analyze_trajectory(rule, state, N, args.steps, args.max_search_operators)
        print("\nstep  k  d  ent  state")
        for pt in points:
            print(f"{pt.step:4d} {pt.logical_qubits:2d} {pt.code_distance:2d} {pt.entanglement:4d}  {pt.state}")
        if args.csv_out:
            n = write_trajectory_csv(args.csv_out, points)
            logging.info("[QCA] wrote %d rows to %s", n, args.csv_out)


if __name__ == "__main__":
    main()
