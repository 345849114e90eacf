"""
Markov chain Monte Carlo inference: single-site Gibbs sampling driven by
each variable's Markov-blanket posterior.
"""

from __future__ import annotations

import logging
import numbers
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidArgumentError, ZeroTotalWeightError
from .network import BayesNetwork, Variable, conditional_probability
from .sampling import _weighted_sample, ensure_rng, validate_query

logger = logging.getLogger(__name__)

SCAN_ORDERS = ("cyclic", "sweep", "random")

# weighted draws tried before the evidence is declared impossible
INIT_ATTEMPTS = 1000


def markov_blanket_posterior(
    network: BayesNetwork, variable: Union[int, Variable]
) -> Tuple[float, float]:
    """
    Unnormalized posterior of a variable given its Markov blanket.

    For each hypothesis (True, then False) the result is the probability of
    the hypothesis given the variable's parents, times the probability of
    each child's current value given its parents with the variable set to
    the hypothesis. The variable's value is restored before returning.

    Args:
        network: BayesNetwork holding the current assignment
        variable: Variable or its index

    Returns:
        Tuple of (p_true, p_false), unnormalized
    """
    if isinstance(variable, Variable):
        index = network.index_of(variable.name)
        if network.variables[index] is not variable:
            raise InvalidArgumentError(f"Variable {variable.name!r} is not part of this network.")
    else:
        index = network.check_index(variable)
    node = network.variables[index]
    children = [network.variables[c] for c in network.children_of(index)]

    original = node.value
    p_true = conditional_probability(node)
    p_false = 1.0 - p_true
    for child in children:
        node.value = True
        p = conditional_probability(child)
        p_true *= p if child.value else 1.0 - p

        node.value = False
        p = conditional_probability(child)
        p_false *= p if child.value else 1.0 - p
    node.value = original
    return p_true, p_false


def gibbs_update(
    network: BayesNetwork, index: int, rng: Optional[np.random.Generator] = None
) -> bool:
    """
    Resample one variable from its Markov-blanket posterior.

    A blanket with zero total mass leaves the value unchanged.

    Returns:
        The new value of the variable
    """
    rng = ensure_rng(rng)
    node = network[index]
    p_true, p_false = markov_blanket_posterior(network, index)
    total = p_true + p_false
    if total == 0.0:
        logger.debug("Zero-mass Markov blanket for %r, value kept", node.name)
        return node.value
    node.value = rng.random() < p_true / total
    return node.value


def mcmc_ask(
    network: BayesNetwork,
    query_index: int,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    num_samples: int,
    rng: Optional[np.random.Generator] = None,
    burn_in: int = 0,
    scan: str = "cyclic",
) -> float:
    """
    Estimate P(query = True | evidence) by Gibbs sampling.

    The chain starts from a likelihood-weighted sample with nonzero weight,
    so the initial state is consistent with the evidence. Evidence variables
    are never resampled. Consecutive states are correlated and no
    thinning is done.

    Args:
        network: BayesNetwork to sample
        query_index: Index of the query variable
        evidence_indices: Indices of the evidence variables
        evidence_values: Observed value for each evidence index
        num_samples: Number of counted chain states
        rng: Random source
        burn_in: Transitions to run before counting
        scan: ``"cyclic"`` updates one variable per iteration in network order,
            ``"sweep"`` updates every non-evidence variable per iteration,
            ``"random"`` updates one uniformly chosen variable per iteration

    Returns:
        Fraction of counted states in which the query variable is true
    """
    query_index, evidence = validate_query(
        network, query_index, evidence_indices, evidence_values, num_samples
    )
    if scan not in SCAN_ORDERS:
        raise InvalidArgumentError(f"Unknown scan order {scan!r}; expected one of {SCAN_ORDERS}.")
    if isinstance(burn_in, bool) or not isinstance(burn_in, numbers.Integral) or burn_in < 0:
        raise InvalidArgumentError(f"Burn-in must be a non-negative int, got {burn_in!r}.")
    rng = ensure_rng(rng)

    _initialize_chain(network, evidence, rng)
    free = [i for i in range(len(network)) if i not in evidence]
    query = network.variables[query_index]

    step = 0

    def transition():
        nonlocal step
        if not free:
            return
        if scan == "sweep":
            for i in free:
                gibbs_update(network, i, rng)
        elif scan == "random":
            gibbs_update(network, free[int(rng.integers(len(free)))], rng)
        else:
            gibbs_update(network, free[step % len(free)], rng)
        step += 1

    for _ in range(burn_in):
        transition()

    n_true = 0
    for _ in range(num_samples):
        transition()
        if query.value:
            n_true += 1

    logger.debug(
        "MCMC (%s scan): %d states after %d burn-in, %d true",
        scan, num_samples, burn_in, n_true,
    )
    return n_true / num_samples


def _initialize_chain(network: BayesNetwork, evidence, rng: np.random.Generator) -> None:
    for _ in range(INIT_ATTEMPTS):
        if _weighted_sample(network, evidence, rng) > 0.0:
            return
    raise ZeroTotalWeightError(
        f"No state consistent with the evidence {evidence} found in "
        f"{INIT_ATTEMPTS} weighted samples; the evidence has zero probability."
    )
