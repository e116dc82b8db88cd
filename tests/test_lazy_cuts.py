import threading

import pytest

from decision_programming.decision_model import build_decision_model
from decision_programming.influence_diagram import InfluenceDiagram
from decision_programming.lazy_cuts import PENDING, SUBMITTED
from decision_programming.model_parameters import create_model_parameters
from decision_programming.parameters import Specs


def _values(mapping, default=0.0):
    return lambda name: mapping.get(name, default)


# Optimal strategy of the simple diagram: always choose state 2
FEASIBLE = {"pi_1_2": 0.3, "pi_2_2": 0.7}


@pytest.fixture
def probability_sum_cut(simple_diagram, simple_params):
    result = build_decision_model(Specs(probability_sum_cut=True), simple_diagram, simple_params)
    return result["lazy_cuts"][0]


@pytest.fixture
def number_of_paths_cut(simple_diagram, simple_params):
    result = build_decision_model(Specs(num_paths=2), simple_diagram, simple_params)
    return result["lazy_cuts"][0]


def test_probability_sum_cut_submits_once(probability_sum_cut, fake_callback_data):
    cb_data = fake_callback_data(_values({}))
    assert probability_sum_cut.state == PENDING
    assert probability_sum_cut(cb_data) is True
    assert probability_sum_cut.state == SUBMITTED
    assert len(cb_data.submitted) == 1

    # A different violating solution is ignored after submission
    cb_data2 = fake_callback_data(_values({"pi_1_1": 0.3, "pi_2_1": 0.3}))
    assert probability_sum_cut(cb_data2) is False
    assert probability_sum_cut(cb_data) is False
    assert cb_data2.submitted == []
    assert len(cb_data.submitted) == 1


def test_probability_sum_cut_ignores_feasible_solutions(probability_sum_cut, fake_callback_data):
    cb_data = fake_callback_data(_values(FEASIBLE))
    assert probability_sum_cut(cb_data) is False
    assert probability_sum_cut.state == PENDING
    assert cb_data.submitted == []


def test_probability_sum_cut_tolerance_is_epsilon(probability_sum_cut, fake_callback_data):
    epsilon = probability_sum_cut.epsilon
    assert epsilon == pytest.approx(0.3)

    within = fake_callback_data(_values({"pi_1_2": 0.3, "pi_2_2": 0.7 - epsilon / 2}))
    assert probability_sum_cut(within) is False

    beyond = fake_callback_data(_values({"pi_1_2": 0.3, "pi_2_2": 0.7 - 2 * epsilon}))
    assert probability_sum_cut(beyond) is True


def test_probability_sum_cut_constraint(probability_sum_cut, fake_callback_data):
    cb_data = fake_callback_data(_values({}))
    probability_sum_cut(cb_data)
    mdl = probability_sum_cut.mdl
    constr = mdl.add_constraint(cb_data.submitted[0], ctname="probability_sum")
    mdl.update()
    row = mdl.model.getRow(constr)
    assert row.size() == 4
    assert all(row.getCoeff(k) == 1.0 for k in range(row.size()))
    assert constr.RHS == 1.0


def test_number_of_paths_cut_submits_once(number_of_paths_cut, fake_callback_data):
    assert number_of_paths_cut(fake_callback_data(_values(FEASIBLE))) is False
    assert number_of_paths_cut.state == PENDING

    cb_data = fake_callback_data(_values({"pi_1_2": 0.3}))
    assert number_of_paths_cut(cb_data) is True
    assert number_of_paths_cut(cb_data) is False
    assert len(cb_data.submitted) == 1
    assert number_of_paths_cut.submitted


def test_number_of_paths_counts_paths_above_epsilon(number_of_paths_cut):
    eps = number_of_paths_cut.epsilon
    assert number_of_paths_cut.active_paths([eps, eps / 2, 1.0, 0.0]) == 2


def test_number_of_paths_constraint_skips_impossible_paths(simple_diagram, fake_callback_data):
    params = create_model_parameters(simple_diagram, {1: [0.0, 1.0]}, {3: [[1.0, 2.0], [0.0, 3.0]]})
    result = build_decision_model(Specs(num_paths=1), simple_diagram, params)
    cut = result["lazy_cuts"][0]
    assert cut.epsilon == 0.0

    cb_data = fake_callback_data(_values({}))
    assert cut(cb_data) is True

    mdl = result["model"]
    constr = mdl.add_constraint(cb_data.submitted[0], ctname="num_paths")
    mdl.update()
    row = mdl.model.getRow(constr)
    assert row.size() == 2
    assert {row.getVar(k).VarName for k in range(row.size())} == {"pi_2_1", "pi_2_2"}
    assert constr.RHS == 1.0


def test_concurrent_invocations_submit_once(probability_sum_cut, fake_callback_data):
    cb_data = fake_callback_data(_values({}))
    barrier = threading.Barrier(8)
    outcomes = []

    def invoke():
        barrier.wait()
        outcomes.append(probability_sum_cut(cb_data))

    threads = [threading.Thread(target=invoke) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(True) == 1
    assert len(cb_data.submitted) == 1


def test_cuts_are_independent(simple_diagram, simple_params, fake_callback_data):
    result = build_decision_model(Specs(probability_sum_cut=True, num_paths=2), simple_diagram, simple_params)
    probability_cut, paths_cut = result["lazy_cuts"]

    cb_data = fake_callback_data(_values({}))
    assert probability_cut(cb_data) is True
    assert paths_cut.state == PENDING
    assert paths_cut(cb_data) is True
    assert len(cb_data.submitted) == 2


def test_cuts_without_decision_nodes(fake_callback_data):
    diagram = InfluenceDiagram(C=[1], D=[], V=[2], A=[(1, 2)], S_j=[2])
    params = create_model_parameters(diagram, {1: [0.5, 0.5]}, {2: [1.0, -1.0]})
    result = build_decision_model(Specs(probability_sum_cut=True), diagram, params)
    cut = result["lazy_cuts"][0]
    assert cut(fake_callback_data(_values({"pi_1": 0.5, "pi_2": 0.5}))) is False
