"""
Approximate inference by stochastic simulation: prior (ancestral) sampling,
rejection sampling and likelihood weighting.

All functions take the random source explicitly as a
``numpy.random.Generator``; a fresh default generator is created when
``rng`` is omitted.
"""

from __future__ import annotations

import logging
import numbers
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidArgumentError, NoAcceptedSamplesError, ZeroTotalWeightError
from .network import BayesNetwork, assigned_probability, conditional_probability

logger = logging.getLogger(__name__)


def ensure_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return np.random.default_rng() if rng is None else rng


def validate_query(
    network: BayesNetwork,
    query_index: int,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    num_samples: int,
) -> Tuple[int, Dict[int, bool]]:
    """
    Check the arguments shared by every query before any value is written.

    Returns:
        Tuple of (query index, evidence map)
    """
    query_index = network.check_index(query_index)
    evidence = network.evidence(evidence_indices, evidence_values)
    if isinstance(num_samples, bool) or not isinstance(num_samples, numbers.Integral):
        raise InvalidArgumentError(f"Sample count must be an int, got {num_samples!r}.")
    if num_samples < 1:
        raise InvalidArgumentError(f"Sample count must be at least 1, got {num_samples}.")
    return query_index, evidence


def prior_sample(network: BayesNetwork, rng: Optional[np.random.Generator] = None) -> None:
    """
    Draw one complete assignment from the joint distribution, in place.

    Variables are visited in topological order, so each draw conditions on
    parents that were already sampled.

    Args:
        network: BayesNetwork whose values are overwritten
        rng: Random source
    """
    rng = ensure_rng(rng)
    for variable in network:
        variable.value = rng.random() < conditional_probability(variable)


def rejection_sampling(
    network: BayesNetwork,
    query_index: int,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    num_samples: int,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Estimate P(query = True | evidence) by discarding inconsistent prior samples.

    Args:
        network: BayesNetwork to sample
        query_index: Index of the query variable
        evidence_indices: Indices of the evidence variables
        evidence_values: Observed value for each evidence index
        num_samples: Number of prior samples to draw
        rng: Random source

    Returns:
        Fraction of accepted samples in which the query variable is true
    """
    query_index, evidence = validate_query(
        network, query_index, evidence_indices, evidence_values, num_samples
    )
    rng = ensure_rng(rng)
    variables = network.variables
    query = variables[query_index]

    n_true = 0
    n_false = 0
    for _ in range(num_samples):
        prior_sample(network, rng)
        if all(variables[i].value == value for i, value in evidence.items()):
            if query.value:
                n_true += 1
            else:
                n_false += 1

    accepted = n_true + n_false
    logger.debug(
        "Rejection sampling: %d of %d samples accepted (%d true)",
        accepted, num_samples, n_true,
    )
    if accepted == 0:
        raise NoAcceptedSamplesError(
            f"None of {num_samples} samples matched the evidence {evidence}."
        )
    return n_true / accepted


def weighted_sample(
    network: BayesNetwork,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Draw one sample with the evidence clamped and return its weight.

    Non-evidence variables are sampled as in :func:`prior_sample`; every
    evidence variable multiplies the weight by the probability of its
    observed value given its (already assigned) parents.

    Args:
        network: BayesNetwork whose values are overwritten
        evidence_indices: Indices of the evidence variables
        evidence_values: Observed value for each evidence index
        rng: Random source

    Returns:
        Likelihood weight of the sample
    """
    evidence = network.evidence(evidence_indices, evidence_values)
    return _weighted_sample(network, evidence, ensure_rng(rng))


def _weighted_sample(
    network: BayesNetwork, evidence: Dict[int, bool], rng: np.random.Generator
) -> float:
    weight = 1.0
    for index, variable in enumerate(network.variables):
        if index in evidence:
            variable.value = evidence[index]
            weight *= assigned_probability(variable)
        else:
            variable.value = rng.random() < conditional_probability(variable)
    return weight


def likelihood_weighting(
    network: BayesNetwork,
    query_index: int,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    num_samples: int,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Estimate P(query = True | evidence) by likelihood weighting.

    Args:
        network: BayesNetwork to sample
        query_index: Index of the query variable
        evidence_indices: Indices of the evidence variables
        evidence_values: Observed value for each evidence index
        num_samples: Number of weighted samples to draw
        rng: Random source

    Returns:
        Weight of the samples with a true query over the total weight
    """
    query_index, evidence = validate_query(
        network, query_index, evidence_indices, evidence_values, num_samples
    )
    rng = ensure_rng(rng)
    query = network.variables[query_index]

    w_true = 0.0
    w_false = 0.0
    for _ in range(num_samples):
        weight = _weighted_sample(network, evidence, rng)
        if query.value:
            w_true += weight
        else:
            w_false += weight

    total = w_true + w_false
    logger.debug(
        "Likelihood weighting: %d samples, weight true=%g false=%g",
        num_samples, w_true, w_false,
    )
    if total == 0.0:
        raise ZeroTotalWeightError(
            f"All {num_samples} samples had zero weight for evidence {evidence}."
        )
    return w_true / total
