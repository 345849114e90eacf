"""
Vectorized ancestral sampling with PyTorch.

Samples are drawn for the whole batch at once, one variable (column) at a
time in topological order. Unlike the scalar samplers these functions never
write the network's ``value`` fields, so one network can serve them
concurrently.
"""

from __future__ import annotations

import logging
import numbers
from typing import Dict, List, Optional, Sequence, Tuple

import torch

from .errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    NoAcceptedSamplesError,
    ZeroTotalWeightError,
)
from .network import BayesNetwork
from .sampling import validate_query

logger = logging.getLogger(__name__)


def _parent_columns(network: BayesNetwork) -> List[List[int]]:
    return [[network.index_of(p.name) for p in v.parents] for v in network]


def _row_indices(samples: torch.Tensor, parents: List[int]) -> torch.Tensor:
    """CPT row of every sample: each false parent adds its power-of-two weight."""
    n = len(parents)
    rows = torch.zeros(samples.shape[0], dtype=torch.long, device=samples.device)
    for i, column in enumerate(parents):
        rows += (~samples[:, column]).long() * (1 << (n - 1 - i))
    return rows


def _sample_batch(
    network: BayesNetwork,
    num_samples: int,
    evidence: Dict[int, bool],
    generator: Optional[torch.Generator],
    device: torch.device,
) -> Tuple[torch.Tensor, torch.Tensor]:
    if isinstance(num_samples, bool) or not isinstance(num_samples, numbers.Integral):
        raise InvalidArgumentError(f"Sample count must be an int, got {num_samples!r}.")
    if num_samples < 1:
        raise InvalidArgumentError(f"Sample count must be at least 1, got {num_samples}.")
    samples = torch.zeros((num_samples, len(network)), dtype=torch.bool, device=device)
    weights = torch.ones(num_samples, dtype=torch.float64, device=device)

    for index, (variable, parents) in enumerate(zip(network, _parent_columns(network))):
        cpt = torch.tensor(variable.cpt, dtype=torch.float64, device=device)
        p_true = cpt[_row_indices(samples, parents)]
        if index in evidence:
            samples[:, index] = evidence[index]
            weights *= p_true if evidence[index] else 1.0 - p_true
        else:
            u = torch.rand(num_samples, dtype=torch.float64, generator=generator, device=device)
            samples[:, index] = u < p_true
    return samples, weights


def prior_sample_batch(
    network: BayesNetwork,
    num_samples: int,
    generator: Optional[torch.Generator] = None,
    device: str = "cpu",
) -> torch.Tensor:
    """
    Draw many complete assignments from the joint distribution.

    Args:
        network: BayesNetwork to sample
        num_samples: Number of assignments
        generator: Optional torch random generator
        device: torch device

    Returns:
        Bool tensor of shape (num_samples, num_variables)
    """
    samples, _ = _sample_batch(network, num_samples, {}, generator, torch.device(device))
    return samples


def weighted_sample_batch(
    network: BayesNetwork,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    num_samples: int,
    generator: Optional[torch.Generator] = None,
    device: str = "cpu",
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Draw many samples with the evidence clamped.

    Returns:
        Tuple of (samples, weights) with shapes (num_samples, num_variables)
        and (num_samples,)
    """
    evidence = network.evidence(evidence_indices, evidence_values)
    return _sample_batch(network, num_samples, evidence, generator, torch.device(device))


def joint_probability_batch(network: BayesNetwork, assignments: torch.Tensor) -> torch.Tensor:
    """
    Exact joint probability of each row of a (batch, num_variables) bool tensor.
    """
    if assignments.dim() != 2 or assignments.shape[1] != len(network):
        raise DimensionMismatchError(
            f"Expected assignments of shape (batch, {len(network)}), "
            f"got {tuple(assignments.shape)}."
        )
    assignments = assignments.to(torch.bool)
    result = torch.ones(assignments.shape[0], dtype=torch.float64, device=assignments.device)
    for index, (variable, parents) in enumerate(zip(network, _parent_columns(network))):
        cpt = torch.tensor(variable.cpt, dtype=torch.float64, device=assignments.device)
        p_true = cpt[_row_indices(assignments, parents)]
        result *= torch.where(assignments[:, index], p_true, 1.0 - p_true)
    return result


def batch_rejection_sampling(
    network: BayesNetwork,
    query_index: int,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    num_samples: int,
    generator: Optional[torch.Generator] = None,
    device: str = "cpu",
) -> float:
    """Vectorized counterpart of :func:`bnsampler.sampling.rejection_sampling`."""
    query_index, evidence = validate_query(
        network, query_index, evidence_indices, evidence_values, num_samples
    )
    samples = prior_sample_batch(network, num_samples, generator=generator, device=device)

    accepted = torch.ones(num_samples, dtype=torch.bool, device=samples.device)
    for index, value in evidence.items():
        accepted &= samples[:, index] == value

    n_accepted = int(accepted.sum())
    n_true = int((samples[:, query_index] & accepted).sum())
    logger.debug(
        "Batch rejection sampling: %d of %d samples accepted (%d true)",
        n_accepted, num_samples, n_true,
    )
    if n_accepted == 0:
        raise NoAcceptedSamplesError(
            f"None of {num_samples} samples matched the evidence {evidence}."
        )
    return n_true / n_accepted


def batch_likelihood_weighting(
    network: BayesNetwork,
    query_index: int,
    evidence_indices: Sequence[int],
    evidence_values: Sequence[bool],
    num_samples: int,
    generator: Optional[torch.Generator] = None,
    device: str = "cpu",
) -> float:
    """Vectorized counterpart of :func:`bnsampler.sampling.likelihood_weighting`."""
    query_index, evidence = validate_query(
        network, query_index, evidence_indices, evidence_values, num_samples
    )
    samples, weights = _sample_batch(
        network, num_samples, evidence, generator, torch.device(device)
    )

    total = float(weights.sum())
    w_true = float(weights[samples[:, query_index]].sum())
    logger.debug(
        "Batch likelihood weighting: %d samples, weight true=%g total=%g",
        num_samples, w_true, total,
    )
    if total == 0.0:
        raise ZeroTotalWeightError(
            f"All {num_samples} samples had zero weight for evidence {evidence}."
        )
    return w_true / total
