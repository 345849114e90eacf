"""
bnsampler: exact and approximate inference on boolean Bayesian networks.

This package provides a boolean Bayesian network with conditional
probability tables, exact evaluation of fully observed assignments, and
stochastic approximations (rejection sampling, likelihood weighting and
Gibbs sampling) for queries with partial evidence.
"""

from bnsampler.errors import (
    BayesNetError,
    CyclicOrForwardReferenceError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    NoAcceptedSamplesError,
    ZeroTotalWeightError,
)
from bnsampler.network import (
    BayesNetwork,
    Variable,
    assigned_probability,
    conditional_probability,
    estimate_cpt,
    row_index,
    row_index_from_values,
)
from bnsampler.exact import exact_joint_probability
from bnsampler.sampling import (
    likelihood_weighting,
    prior_sample,
    rejection_sampling,
    weighted_sample,
)
from bnsampler.mcmc import gibbs_update, markov_blanket_posterior, mcmc_ask
from bnsampler.uai_parser import (
    evidence_arrays,
    read_evidence_file,
    read_model_file,
    read_model_from_string,
)

__version__ = "0.1.0"
__all__ = [
    # Errors
    "BayesNetError",
    "CyclicOrForwardReferenceError",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "NoAcceptedSamplesError",
    "ZeroTotalWeightError",
    # Network
    "BayesNetwork",
    "Variable",
    "assigned_probability",
    "conditional_probability",
    "estimate_cpt",
    "row_index",
    "row_index_from_values",
    # Inference
    "exact_joint_probability",
    "prior_sample",
    "rejection_sampling",
    "weighted_sample",
    "likelihood_weighting",
    "markov_blanket_posterior",
    "gibbs_update",
    "mcmc_ask",
    # UAI parsing
    "read_model_file",
    "read_model_from_string",
    "read_evidence_file",
    "evidence_arrays",
]
