"""
Exact probability of a fully observed assignment.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .errors import DimensionMismatchError
from .network import BayesNetwork, assigned_probability

logger = logging.getLogger(__name__)


def exact_joint_probability(network: BayesNetwork, assignment: Sequence[bool]) -> float:
    """
    Joint probability P(X_1 = x_1, ..., X_k = x_k) of a complete assignment.

    The assignment is written into the network and the result is the product
    of every variable's probability given its parents. Nothing is marginalized,
    so every variable must be observed.

    Args:
        network: BayesNetwork to evaluate
        assignment: One boolean per variable, in network order

    Returns:
        Probability in [0, 1]
    """
    if len(assignment) != len(network):
        raise DimensionMismatchError(
            f"Exact evaluation needs all {len(network)} variables, got {len(assignment)}."
        )
    network.set_values(assignment)

    result = 1.0
    for variable in network:
        result *= assigned_probability(variable)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("P(%s) = %g", network.values(), result)
    return result
