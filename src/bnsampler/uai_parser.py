"""
UAI file format parser for boolean Bayesian networks.

Only the ``BAYES`` network type is accepted. Every variable must be binary
(state 0 = False, state 1 = True) and have exactly one factor whose scope
lists its parents followed by the variable itself.
"""

import itertools
from typing import Dict, List, Optional, Sequence, Tuple

import torch

from .network import BayesNetwork, row_index_from_values


class Factor:
    """Conditional probability table as parsed from the file."""

    def __init__(self, vars: List[int], values: torch.Tensor):
        """
        Args:
            vars: Variable indices (0-based), parents first, child last
            values: Tensor of shape (2,) * len(vars), indexed in scope order
        """
        self.vars = tuple(vars)
        self.values = values

    @property
    def child(self) -> int:
        return self.vars[-1]

    @property
    def parents(self) -> Tuple[int, ...]:
        return self.vars[:-1]

    def cpt(self) -> List[float]:
        """P(child = True | parents) per CPT row."""
        cpt = [0.0] * (1 << len(self.parents))
        for assignment in itertools.product((True, False), repeat=len(self.parents)):
            idx = tuple(int(v) for v in assignment) + (1,)
            cpt[row_index_from_values(assignment)] = float(self.values[idx])
        return cpt

    def __repr__(self):
        return f"Factor(vars={self.vars}, shape={tuple(self.values.shape)})"


def read_model_file(
    filepath: str, names: Optional[Sequence[str]] = None, factor_eltype=torch.float64
) -> BayesNetwork:
    """
    Parse a UAI BAYES model file into a network.

    Args:
        filepath: Path to .uai file
        names: Optional variable names (default ``X0``, ``X1``, ...)
        factor_eltype: Data type for factor values (default: torch.float64)

    Returns:
        BayesNetwork
    """
    with open(filepath, "r", encoding="utf-8") as f:
        content = f.read()
    return read_model_from_string(content, names=names, factor_eltype=factor_eltype)


def read_factors_from_string(content: str, factor_eltype=torch.float64) -> Tuple[int, List[Factor]]:
    """
    Parse the factor tables of a UAI BAYES model.

    Returns:
        Tuple of (number of variables, factors in file order)
    """
    lines = [line.strip() for line in content.split("\n") if line.strip()]
    if len(lines) < 4:
        raise ValueError("Malformed UAI model: expected at least 4 header lines.")

    network_type = lines[0]
    if network_type != "BAYES":
        raise ValueError(f"Unsupported UAI network type: {network_type!r}. Expected 'BAYES'.")
    nvars = int(lines[1])
    cards = [int(x) for x in lines[2].split()]
    if len(cards) != nvars:
        raise ValueError(f"Expected {nvars} cardinalities, got {len(cards)}.")
    if any(card != 2 for card in cards):
        raise ValueError(f"Only boolean variables are supported, got cardinalities {cards}.")
    ntables = int(lines[3])
    if len(lines) < 4 + ntables:
        raise ValueError(
            f"Malformed UAI model: expected {ntables} scope lines, got {len(lines) - 4}."
        )

    scopes = []
    for i in range(ntables):
        parts = lines[4 + i].split()
        scope_size = int(parts[0])
        if scope_size < 1 or len(parts) - 1 != scope_size:
            raise ValueError(
                f"Scope size mismatch on line {4 + i}: "
                f"declared {scope_size}, found {len(parts) - 1} variables."
            )
        scope = [int(x) for x in parts[1:]]
        for var in scope:
            if not 0 <= var < nvars:
                raise ValueError(f"Variable {var} on line {4 + i} is out of range.")
        scopes.append(scope)

    tokens: List[str] = []
    for line in lines[4 + ntables:]:
        tokens.extend(line.split())
    cursor = 0

    factors: List[Factor] = []
    for scope in scopes:
        if cursor >= len(tokens):
            raise ValueError("Unexpected end of UAI factor table data.")
        nelements = int(tokens[cursor])
        cursor += 1
        if nelements != 1 << len(scope) or cursor + nelements > len(tokens):
            raise ValueError(
                f"Factor over {scope} needs {1 << len(scope)} entries, got {nelements}."
            )
        values = torch.tensor(
            [float(x) for x in tokens[cursor:cursor + nelements]], dtype=factor_eltype
        )
        cursor += nelements

        values = values.reshape((2,) * len(scope))
        row_sums = values.sum(dim=-1)
        if not torch.allclose(row_sums, torch.ones_like(row_sums)):
            raise ValueError(f"Conditional rows of factor over {scope} do not sum to 1.")
        factors.append(Factor(scope, values))

    return nvars, factors


def read_model_from_string(
    content: str, names: Optional[Sequence[str]] = None, factor_eltype=torch.float64
) -> BayesNetwork:
    """
    Parse a UAI BAYES model from a string.

    Variables are added in file order, so every factor must only reference
    parents with a smaller index than its child.

    Args:
        content: UAI file content as string
        names: Optional variable names (default ``X0``, ``X1``, ...)
        factor_eltype: Data type for factor values

    Returns:
        BayesNetwork
    """
    nvars, factors = read_factors_from_string(content, factor_eltype=factor_eltype)
    if names is None:
        names = [f"X{i}" for i in range(nvars)]
    elif len(names) != nvars:
        raise ValueError(f"Expected {nvars} variable names, got {len(names)}.")

    by_child: Dict[int, Factor] = {}
    for factor in factors:
        if factor.child in by_child:
            raise ValueError(f"Variable {factor.child} has more than one factor.")
        by_child[factor.child] = factor
    missing = [i for i in range(nvars) if i not in by_child]
    if missing:
        raise ValueError(f"No factor for variable(s) {missing}.")

    network = BayesNetwork()
    for i in range(nvars):
        factor = by_child[i]
        network.add_variable(names[i], list(factor.parents), factor.cpt())
    return network


def read_evidence_file(filepath: str) -> Dict[int, bool]:
    """
    Parse evidence file (.evid format).

    Args:
        filepath: Path to .evid file

    Returns:
        Dictionary mapping variable index (0-based) to observed value
    """
    if not filepath:
        return {}

    with open(filepath, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f if line.strip()]

    if not lines:
        return {}

    parts = [int(x) for x in lines[-1].split()]
    nobsvars = parts[0]
    if len(parts) != 1 + 2 * nobsvars:
        raise ValueError(f"Evidence line declares {nobsvars} observations, got {parts[1:]}.")

    evidence = {}
    for i in range(nobsvars):
        value = parts[2 + 2 * i]
        if value not in (0, 1):
            raise ValueError(f"Evidence value {value} is not boolean.")
        evidence[parts[1 + 2 * i]] = bool(value)
    return evidence


def evidence_arrays(evidence: Dict[int, bool]) -> Tuple[List[int], List[bool]]:
    """Split an evidence map into sorted (indices, values) arrays."""
    indices = sorted(evidence)
    return indices, [evidence[i] for i in indices]
