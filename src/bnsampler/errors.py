"""
Exception types raised by the inference engine.
"""


class BayesNetError(Exception):
    """Base class for all errors raised by bnsampler."""


class DimensionMismatchError(BayesNetError, ValueError):
    """An assignment or evidence array does not match the expected length."""


class CyclicOrForwardReferenceError(BayesNetError, ValueError):
    """A parent is not a variable constructed earlier in the network."""


class InvalidArgumentError(BayesNetError, ValueError):
    """An argument is malformed (bad CPT, duplicate index, unknown option, ...)."""


class IndexOutOfRangeError(BayesNetError, IndexError):
    """A variable index lies outside the network's bounds."""


class NoAcceptedSamplesError(BayesNetError, ZeroDivisionError):
    """Rejection sampling accepted no sample consistent with the evidence."""


class ZeroTotalWeightError(BayesNetError, ZeroDivisionError):
    """Every sample (or hypothesis) carried zero probability mass."""
