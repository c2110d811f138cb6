import pytest

from feasibility import DUMMY, PartialPath, PrematureCycleError


@pytest.fixture
def path():
    return PartialPath(4)


def test_empty_path_allows_any_arc_but_self_loops(path):
    assert path.canInclude(0, 1)
    assert path.canInclude(3, 0)
    assert not path.canInclude(2, 2)


def test_origin_with_successor_is_rejected(path):
    path.include(0, 1)
    assert not path.canInclude(0, 2)


def test_reused_target_is_rejected(path):
    path.include(0, 1)
    assert not path.canInclude(2, 1)


def test_arc_closing_a_subtour_is_rejected(path):
    path.include(0, 1)
    path.include(1, 2)
    assert not path.canInclude(2, 0)
    assert path.canInclude(2, 3)


def test_reverse_arc_is_rejected(path):
    path.include(0, 1)
    assert not path.canInclude(1, 0)


def test_rollback_restores_feasibility(path):
    path.include(0, 1)
    path.include(1, 2)
    path.rollback(1)
    assert path.successors == [1, DUMMY, DUMMY, DUMMY]
    assert path.canInclude(1, 2)


def test_clear(path):
    path.include(0, 1)
    path.clear()
    assert path.successors == [DUMMY] * 4


def test_can_exclude_with_alternatives(path):
    assert path.canExclude(0, 1)


def test_cannot_exclude_when_origin_has_no_other_target():
    path = PartialPath(3)
    path.include(0, 1)
    # 1 -> 0 would close a subtour, so 1 -> 2 is forced
    assert path.canInclude(1, 2)
    assert not path.canExclude(1, 2)


def test_exclude_needs_a_third_path_fragment():
    path = PartialPath(4)
    path.include(0, 1)
    path.include(2, 3)
    assert path.canInclude(1, 2)
    assert not path.canExclude(1, 2)

    path = PartialPath(5)
    path.include(0, 1)
    path.include(2, 3)
    assert path.canExclude(1, 2)


def test_committed_subtour_is_an_invariant_violation(path):
    path.include(0, 1)
    path.include(1, 0)
    with pytest.raises(PrematureCycleError):
        path.components()
    with pytest.raises(PrematureCycleError):
        path.canInclude(2, 3)
