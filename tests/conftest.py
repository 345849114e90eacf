import pathlib

import numpy as np
import pytest

from bnsampler import BayesNetwork, read_model_file

EXAMPLES = pathlib.Path(__file__).resolve().parent.parent / "examples"

POKER_NAMES = [
    "B.Cocky",
    "B.Bluff",
    "A.Deals",
    "A.GoodHand",
    "B.GoodHand",
    "B.Bets",
    "A.Wins",
]


@pytest.fixture
def chain():
    """A -> B with P(A)=0.5, P(B|A)=0.8, P(B|~A)=0.3."""
    return BayesNetwork.from_description(
        [
            ("A", [], [0.5]),
            ("B", ["A"], [0.8, 0.3]),
        ]
    )


@pytest.fixture
def poker():
    return read_model_file(str(EXAMPLES / "poker_game.uai"), names=POKER_NAMES)


@pytest.fixture
def rng():
    return np.random.default_rng(20240917)
