import itertools

from decision_programming.paths import paths, restrict, to_index


def test_paths_cover_every_combination_once():
    result = list(paths([2, 3]))
    assert len(result) == 6
    assert len(set(result)) == 6
    assert set(result) == set(itertools.product([1, 2], [1, 2, 3]))


def test_empty_state_vector_yields_one_empty_path():
    assert list(paths([])) == [()]
    assert len(paths([])) == 1


def test_paths_are_restartable_and_can_be_nested():
    P = paths([2, 2])
    assert list(P) == list(P)

    Q = paths([3])
    pairs = [(s, t) for s in P for t in Q]
    assert len(pairs) == 4 * 3


def test_last_node_varies_fastest():
    assert list(paths([2, 2])) == [(1, 1), (1, 2), (2, 1), (2, 2)]


def test_large_state_space_is_not_materialized():
    P = paths([10] * 8)
    assert len(P) == 10 ** 8
    assert next(iter(P)) == (1,) * 8


def test_restrict_and_index():
    s = (2, 1, 3)
    assert restrict(s, [1, 3]) == (2, 3)
    assert restrict(s, []) == ()
    assert to_index((2, 3)) == (1, 2)
