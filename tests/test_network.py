"""Tests for network construction and CPT indexing."""

from __future__ import annotations

import itertools

import pytest

from bnsampler import (
    BayesNetwork,
    CyclicOrForwardReferenceError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    assigned_probability,
    conditional_probability,
    estimate_cpt,
    row_index,
    row_index_from_values,
)

# (cocky, bluff) observations
BLUFF_EXAMPLES = [
    (True, True), (True, True), (True, True), (True, False), (True, True),
    (False, False), (False, False), (False, True), (False, False),
    (False, False), (False, False), (False, False), (False, True),
]


class TestRowIndex:
    """Tests for the parent-assignment to CPT-row mapping."""

    @pytest.mark.parametrize("n", [0, 1, 2, 3, 4])
    def test_bijection(self, n):
        rows = [row_index_from_values(a) for a in itertools.product((True, False), repeat=n)]
        assert sorted(rows) == list(range(2 ** n))

    @pytest.mark.parametrize("n", [0, 1, 3])
    def test_all_true_is_row_zero(self, n):
        assert row_index_from_values([True] * n) == 0

    def test_positional_weights(self):
        assert row_index_from_values([False, True, True]) == 4
        assert row_index_from_values([True, False, True]) == 2
        assert row_index_from_values([True, True, False]) == 1
        assert row_index_from_values([False, False, False]) == 7

    def test_reads_parent_values(self, poker):
        bets = poker.variable("B.Bets")
        poker.variable("B.Bluff").value = True
        poker.variable("B.GoodHand").value = False
        assert row_index(bets.parents) == 1
        assert conditional_probability(bets) == pytest.approx(0.7)

    def test_root_has_row_zero(self, chain):
        assert row_index(chain[0].parents) == 0


class TestProbabilities:
    """Tests for assigned and conditional probabilities."""

    def test_complement_sums_to_one(self, poker):
        for variable in poker:
            for assignment in itertools.product((True, False), repeat=len(variable.parents)):
                for parent, value in zip(variable.parents, assignment):
                    parent.value = value
                variable.value = True
                p_true = assigned_probability(variable)
                variable.value = False
                p_false = assigned_probability(variable)
                assert p_true + p_false == pytest.approx(1.0, abs=1e-15)

    def test_root_false_uses_complement(self, chain):
        a = chain[0]
        a.value = False
        assert assigned_probability(a) == pytest.approx(0.5)
        chain2 = BayesNetwork.from_description([("R", [], [0.05])])
        chain2[0].value = False
        assert assigned_probability(chain2[0]) == pytest.approx(0.95)

    def test_conditional_ignores_own_value(self, chain):
        chain[0].value = False
        b = chain[1]
        b.value = True
        p1 = conditional_probability(b)
        b.value = False
        assert conditional_probability(b) == p1 == pytest.approx(0.3)


class TestConstruction:
    """Tests for building networks."""

    def test_parents_by_name_index_and_variable(self):
        network = BayesNetwork()
        a = network.add_variable("A", [], [0.5])
        network.add_variable("B", [0], [0.8, 0.3])
        c = network.add_variable("C", [a, "B"], [0.1, 0.2, 0.3, 0.4])
        assert [p.name for p in c.parents] == ["A", "B"]
        assert network.names == ["A", "B", "C"]
        assert len(network) == 3

    def test_forward_reference_by_name(self):
        network = BayesNetwork()
        with pytest.raises(CyclicOrForwardReferenceError):
            network.add_variable("B", ["A"], [0.8, 0.3])

    def test_forward_reference_by_index(self):
        network = BayesNetwork()
        network.add_variable("A", [], [0.5])
        with pytest.raises(CyclicOrForwardReferenceError):
            network.add_variable("B", [1], [0.8, 0.3])

    def test_foreign_variable(self, chain):
        network = BayesNetwork()
        network.add_variable("A", [], [0.5])
        with pytest.raises(CyclicOrForwardReferenceError):
            network.add_variable("B", [chain[0]], [0.8, 0.3])

    def test_cpt_length(self):
        network = BayesNetwork()
        network.add_variable("A", [], [0.5])
        with pytest.raises(InvalidArgumentError):
            network.add_variable("B", ["A"], [0.8])
        with pytest.raises(InvalidArgumentError):
            network.add_variable("C", [], [0.5, 0.5])

    def test_cpt_range(self):
        network = BayesNetwork()
        with pytest.raises(InvalidArgumentError):
            network.add_variable("A", [], [1.5])

    def test_duplicate_name(self, chain):
        with pytest.raises(InvalidArgumentError):
            chain.add_variable("A", [], [0.5])

    def test_duplicate_parent(self, chain):
        with pytest.raises(InvalidArgumentError):
            chain.add_variable("C", ["A", "A"], [0.1, 0.2, 0.3, 0.4])


class TestNetworkAccess:
    """Tests for lookup, assignment and evidence handling."""

    def test_index_bounds(self, chain):
        with pytest.raises(IndexOutOfRangeError):
            chain[2]
        with pytest.raises(IndexOutOfRangeError):
            chain[-1]

    def test_unknown_name(self, chain):
        with pytest.raises(InvalidArgumentError):
            chain.variable("Z")

    def test_set_values(self, chain):
        chain.set_values([True, False])
        assert chain.values() == (True, False)
        with pytest.raises(DimensionMismatchError):
            chain.set_values([True])

    def test_evidence(self, chain):
        assert chain.evidence([1, 0], [True, False]) == {1: True, 0: False}
        with pytest.raises(DimensionMismatchError):
            chain.evidence([0, 1], [True])
        with pytest.raises(IndexOutOfRangeError):
            chain.evidence([5], [True])
        with pytest.raises(InvalidArgumentError):
            chain.evidence([0, 0], [True, True])

    def test_children_and_blanket(self, poker):
        b_good = poker.index_of("B.GoodHand")
        assert poker.children_of(b_good) == [5, 6]
        assert poker.markov_blanket(b_good) == {1, 2, 3, 5, 6}
        assert poker.markov_blanket(0) == {1}

    def test_copy_is_independent(self, chain):
        chain.set_values([True, True])
        clone = chain.copy()
        clone.set_values([False, False])
        assert chain.values() == (True, True)
        assert clone[1].parents[0] is clone[0]


class TestEstimateCpt:
    """Tests for CPT estimation from examples."""

    def test_bluff_examples(self):
        assert estimate_cpt(BLUFF_EXAMPLES, num_parents=1) == pytest.approx([0.8, 0.25])

    def test_root(self):
        assert estimate_cpt([(True,), (False,), (False,), (False,)], 0) == [0.25]

    def test_missing_row(self):
        with pytest.raises(InvalidArgumentError):
            estimate_cpt([(True, True)], num_parents=1)

    def test_wrong_width(self):
        with pytest.raises(DimensionMismatchError):
            estimate_cpt([(True, True, False)], num_parents=1)
