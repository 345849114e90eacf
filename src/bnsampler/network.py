"""
Boolean Bayesian network representation and CPT indexing.

CPT rows are indexed by parent assignment: with parents ``p_0 ... p_{n-1}``
the row is ``sum(2 ** (n - 1 - i) for each p_i that is False)``, so the
all-true assignment is row 0. ``cpt[row]`` is always P(variable = True | row).
"""

from __future__ import annotations

import copy
import numbers
from typing import Dict, Iterator, List, Sequence, Tuple, Union

from .errors import (
    CyclicOrForwardReferenceError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidArgumentError,
)


class Variable:
    """A boolean random variable with its conditional probability table."""

    def __init__(self, name: str, parents: Sequence["Variable"], cpt: Sequence[float]):
        """
        Args:
            name: Variable identifier
            parents: Ordered parent variables (non-owning references)
            cpt: P(True | parent row) for every row, ``2 ** len(parents)`` entries
        """
        self.name = name
        self.parents = tuple(parents)
        self.cpt = tuple(float(p) for p in cpt)
        self.value = False

    def __repr__(self):
        parents = ", ".join(p.name for p in self.parents)
        return f"Variable({self.name!r}, parents=[{parents}], value={self.value})"


def row_index_from_values(values: Sequence[bool]) -> int:
    """Map a parent-value assignment to its CPT row."""
    n = len(values)
    index = 0
    for i, value in enumerate(values):
        if not value:
            index += 1 << (n - 1 - i)
    return index


def row_index(parents: Sequence[Variable]) -> int:
    """CPT row selected by the parents' current values (0 for a root)."""
    return row_index_from_values([p.value for p in parents])


def conditional_probability(variable: Variable) -> float:
    """P(variable = True) given its parents' current values."""
    return variable.cpt[row_index(variable.parents)]


def assigned_probability(variable: Variable) -> float:
    """Probability of the variable's current value given its parents' values."""
    p_true = conditional_probability(variable)
    return p_true if variable.value else 1.0 - p_true


ParentRef = Union[str, int, Variable]


class BayesNetwork:
    """
    Ordered collection of boolean variables forming a DAG.

    Variables are stored in topological order: a variable can only name
    parents that were added before it. The network owns its variables and
    is the only place their ``value`` is written from.
    """

    def __init__(self):
        self.variables: List[Variable] = []
        self._index: Dict[str, int] = {}
        # index -> indices of variables listing it as a parent
        self._children: List[List[int]] = []

    @classmethod
    def from_description(
        cls, description: Sequence[Tuple[str, Sequence[ParentRef], Sequence[float]]]
    ) -> "BayesNetwork":
        """
        Build a network from ``(name, parents, cpt)`` triples in topological order.

        Args:
            description: Variable descriptions, parents referenced by name or index

        Returns:
            Ready BayesNetwork
        """
        network = cls()
        for name, parents, cpt in description:
            network.add_variable(name, parents, cpt)
        return network

    def add_variable(
        self, name: str, parents: Sequence[ParentRef] = (), cpt: Sequence[float] = (0.5,)
    ) -> Variable:
        """
        Append a variable to the network.

        Args:
            name: Unique variable name
            parents: Parents by name, index or Variable; all must already exist
            cpt: ``2 ** len(parents)`` probabilities of True (one for a root)

        Returns:
            The constructed Variable
        """
        if name in self._index:
            raise InvalidArgumentError(f"Duplicate variable name {name!r}.")

        parent_indices = [self._resolve_parent(name, ref) for ref in parents]
        if len(set(parent_indices)) != len(parent_indices):
            raise InvalidArgumentError(f"Variable {name!r} lists a parent twice.")

        cpt = list(cpt)
        expected = 1 << len(parent_indices)
        if len(cpt) != expected:
            raise InvalidArgumentError(
                f"CPT of {name!r} has {len(cpt)} entries, expected {expected} "
                f"for {len(parent_indices)} parent(s)."
            )
        for p in cpt:
            if not 0.0 <= float(p) <= 1.0:
                raise InvalidArgumentError(f"CPT entry {p} of {name!r} is not a probability.")

        variable = Variable(name, [self.variables[i] for i in parent_indices], cpt)
        index = len(self.variables)
        self.variables.append(variable)
        self._index[name] = index
        self._children.append([])
        for i in parent_indices:
            self._children[i].append(index)
        return variable

    def _resolve_parent(self, child: str, ref: ParentRef) -> int:
        if isinstance(ref, Variable):
            index = self._index.get(ref.name)
            if index is None or self.variables[index] is not ref:
                raise CyclicOrForwardReferenceError(
                    f"Parent {ref.name!r} of {child!r} is not part of this network."
                )
            return index
        if isinstance(ref, str):
            if ref not in self._index:
                raise CyclicOrForwardReferenceError(
                    f"Parent {ref!r} of {child!r} has not been constructed yet."
                )
            return self._index[ref]
        if isinstance(ref, bool) or not isinstance(ref, numbers.Integral):
            raise InvalidArgumentError(f"Invalid parent reference {ref!r} for {child!r}.")
        ref = int(ref)
        if not 0 <= ref < len(self.variables):
            raise CyclicOrForwardReferenceError(
                f"Parent index {ref} of {child!r} does not precede it in the network."
            )
        return ref

    def __len__(self) -> int:
        return len(self.variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self.variables)

    def __getitem__(self, index: int) -> Variable:
        return self.variables[self.check_index(index)]

    def __repr__(self):
        return f"BayesNetwork(nvars={len(self.variables)})"

    @property
    def names(self) -> List[str]:
        return [v.name for v in self.variables]

    def check_index(self, index: int) -> int:
        """Validate a variable index and return it."""
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise InvalidArgumentError(f"Variable index must be an int, got {index!r}.")
        index = int(index)
        if not 0 <= index < len(self.variables):
            raise IndexOutOfRangeError(
                f"Variable index {index} outside network of {len(self.variables)} variables."
            )
        return index

    def variable(self, name: str) -> Variable:
        return self.variables[self.index_of(name)]

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise InvalidArgumentError(f"Unknown variable {name!r}.") from None

    def children_of(self, index: int) -> List[int]:
        """Indices of the variables that list ``index`` as a parent."""
        return list(self._children[self.check_index(index)])

    def markov_blanket(self, index: int) -> set:
        """Parents, children and the children's other parents of a variable."""
        blanket = {self._index[p.name] for p in self[index].parents}
        for child in self._children[index]:
            blanket.add(child)
            blanket.update(self._index[p.name] for p in self.variables[child].parents)
        blanket.discard(index)
        return blanket

    def values(self) -> Tuple[bool, ...]:
        """Snapshot of the current assignment in network order."""
        return tuple(v.value for v in self.variables)

    def set_values(self, values: Sequence[bool]) -> None:
        """Assign every variable at once."""
        if len(values) != len(self.variables):
            raise DimensionMismatchError(
                f"Got {len(values)} values for {len(self.variables)} variables."
            )
        for variable, value in zip(self.variables, values):
            variable.value = bool(value)

    def evidence(
        self, indices: Sequence[int], values: Sequence[bool]
    ) -> Dict[int, bool]:
        """
        Validate positional evidence arrays.

        Args:
            indices: Indices of the evidence variables
            values: Observed value for each entry of ``indices``

        Returns:
            Dictionary mapping variable index to observed value
        """
        if len(indices) != len(values):
            raise DimensionMismatchError(
                f"{len(indices)} evidence indices but {len(values)} evidence values."
            )
        evidence: Dict[int, bool] = {}
        for index, value in zip(indices, values):
            index = self.check_index(index)
            if index in evidence:
                raise InvalidArgumentError(f"Evidence index {index} given more than once.")
            evidence[index] = bool(value)
        return evidence

    def clamp(self, evidence: Dict[int, bool]) -> None:
        """Set the evidence variables to their observed values."""
        for index, value in evidence.items():
            self.variables[index].value = value

    def copy(self) -> "BayesNetwork":
        """Independent copy, e.g. for running queries on separate threads."""
        return copy.deepcopy(self)


def estimate_cpt(examples: Sequence[Sequence[bool]], num_parents: int) -> List[float]:
    """
    Estimate a CPT from observed examples by frequency counting.

    Args:
        examples: Rows ``(parent_1, ..., parent_n, child)`` of boolean observations
        num_parents: Number of parent columns in each row

    Returns:
        List of P(child = True | row) indexed by CPT row
    """
    nrows = 1 << num_parents
    seen = [0] * nrows
    positive = [0] * nrows
    for example in examples:
        if len(example) != num_parents + 1:
            raise DimensionMismatchError(
                f"Example {tuple(example)} should hold {num_parents + 1} values."
            )
        row = row_index_from_values(example[:num_parents])
        seen[row] += 1
        if example[num_parents]:
            positive[row] += 1

    missing = [row for row in range(nrows) if seen[row] == 0]
    if missing:
        raise InvalidArgumentError(f"No examples for CPT row(s) {missing}.")
    return [positive[row] / seen[row] for row in range(nrows)]

