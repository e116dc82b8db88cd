import pytest
from gurobipy import GRB

from decision_programming.gurobi_wrapper import GurobiModelWrapper


@pytest.fixture
def mdl():
    mdl = GurobiModelWrapper("wrapper_test")
    mdl.model.setParam('OutputFlag', 0)
    return mdl


def test_variable_names_and_bounds(mdl):
    x = mdl.continuous_var_dict([(1, 2), (2, 1)], ub=lambda key: key[0] / 10, name="x")
    y = mdl.binary_var_dict(["a"], name="y")

    assert x[(1, 2)].VarName == "x_1_2"
    assert x[(2, 1)].UB == pytest.approx(0.2)
    assert y["a"].VarName == "y_a"
    assert y["a"].VType == GRB.BINARY
    assert mdl.number_of_variables == 3
    assert mdl.number_of_binary_variables == 1


def test_solve_small_model(mdl):
    x = mdl.continuous_var_dict([1, 2], ub=1.0, name="x")
    b = mdl.binary_var_dict([1], name="b")
    mdl.add_constraint(x[1] + x[2] <= 1.5, ctname="capacity")
    mdl.add_constraint(x[2] <= b[1])
    mdl.maximize(mdl.sum([2 * x[1], 3 * x[2], -0.5 * b[1]]))

    sol = mdl.solve(log_output=False)
    assert sol.is_feasible()
    assert mdl.is_optimal()
    assert sol.objective_value == pytest.approx(0.5 * 2 + 3 - 0.5)
    assert sol.get_value_dict(x) == pytest.approx({1: 0.5, 2: 1.0})
    assert sol.get_value_dict({}) == {}
    assert sol.solve_details.time >= 0


def test_infeasible_model_has_no_solution(mdl):
    x = mdl.continuous_var_dict([1], ub=1.0, name="x")
    mdl.add_constraint(x[1] >= 2)
    mdl.minimize(x[1])

    sol = mdl.solve(log_output=False)
    assert not sol.is_feasible()
    assert sol.objective_value is None
    assert mdl.get_objective_value() is None


def test_lazy_callbacks_are_called_at_incumbents(mdl):
    b = mdl.binary_var_dict([1, 2], name="b")
    mdl.maximize(b[1] + b[2])
    seen = []

    def forbid_both(cb_data):
        values = cb_data.get_values([b[1], b[2]])
        seen.append(values)
        if sum(values) > 1.5:
            cb_data.submit(b[1] + b[2] <= 1)

    mdl.add_lazy_callback(forbid_both)
    sol = mdl.solve(log_output=False)

    assert seen
    assert mdl.model.Params.LazyConstraints == 1
    assert sol.objective_value == pytest.approx(1.0)
