"""Тесты выбора ревьюверов."""

import random
from dataclasses import dataclass

import pytest

from pr_reviewer.domain.pull_requests.selector import select_reviewers


@dataclass
class Member:
    user_id: str
    is_active: bool = True


ROSTER = [
    Member("u1"),
    Member("u2"),
    Member("u3", is_active=False),
    Member("u4"),
    Member("u5"),
    Member("u6", is_active=False),
]


def test_select_is_reproducible_with_seed():
    """Тест: одинаковый seed даёт одинаковый выбор."""
    first = select_reviewers(ROSTER, "u1", 2, random.Random(42))
    second = select_reviewers(ROSTER, "u1", 2, random.Random(42))
    assert first == second
    assert first == random.Random(42).sample(["u2", "u4", "u5"], 2)


@pytest.mark.parametrize("seed", range(30))
@pytest.mark.parametrize("limit", [1, 2, 5])
def test_select_properties(seed, limit):
    """Тест: нет исключённого, нет неактивных, нет повторов, не больше лимита."""
    selected = select_reviewers(ROSTER, "u2", limit, random.Random(seed))

    eligible = {"u1", "u4", "u5"}
    assert "u2" not in selected
    assert set(selected) <= eligible
    assert len(selected) == len(set(selected))
    assert len(selected) == min(limit, len(eligible))


def test_select_zero_or_negative_limit():
    """Тест: неположительный лимит даёт пустой результат."""
    assert select_reviewers(ROSTER, "u1", 0) == []
    assert select_reviewers(ROSTER, "u1", -1) == []


def test_select_no_eligible():
    """Тест: нет подходящих кандидатов: пустой результат, без ошибки."""
    roster = [Member("u1"), Member("u2", is_active=False)]
    assert select_reviewers(roster, "u1", 2) == []
    assert select_reviewers([], "u1", 2) == []


def test_select_without_exclude():
    """Тест: без исключения выбираются все активные в пределах лимита."""
    selected = select_reviewers(ROSTER, None, 10, random.Random(1))
    assert sorted(selected) == ["u1", "u2", "u4", "u5"]


def test_select_ignores_duplicate_candidates():
    """Тест: повтор кандидата во входных данных не даёт повтора в выборе."""
    roster = [Member("u2"), Member("u2"), Member("u3")]
    selected = select_reviewers(roster, "u1", 2, random.Random(3))
    assert sorted(selected) == ["u2", "u3"]


def test_select_covers_every_candidate():
    """Тест: каждый подходящий кандидат может быть выбран."""
    rng = random.Random(2024)
    seen = set()
    for _ in range(200):
        seen.update(select_reviewers(ROSTER, "u1", 1, rng))
    assert seen == {"u2", "u4", "u5"}
