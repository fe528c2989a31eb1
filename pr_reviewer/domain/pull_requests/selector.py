"""Выбор ревьюверов из состава команды."""

import random
from typing import Iterable, Optional, Protocol

# Политика назначения: сколько ревьюверов берётся при создании PR и при замене
CREATE_REVIEWERS_LIMIT = 2
REASSIGN_REVIEWERS_LIMIT = 1

# Общий источник случайности процесса; тесты передают свой random.Random(seed)
default_rng = random.Random()


class Candidate(Protocol):
    user_id: str
    is_active: bool


def select_reviewers(
    candidates: Iterable[Candidate],
    exclude_user_id: Optional[str],
    limit: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """
    Выбрать до limit ревьюверов среди активных кандидатов, кроме exclude_user_id.

    Выборка равновероятная и без повторов. Пустой результат не ошибка:
    его возвращают при limit <= 0 и при отсутствии подходящих кандидатов.
    Порядок выбранных ID значения не имеет.
    """
    if limit <= 0:
        return []

    eligible: list[str] = []
    for candidate in candidates:
        if not candidate.is_active or candidate.user_id == exclude_user_id:
            continue
        if candidate.user_id not in eligible:
            eligible.append(candidate.user_id)

    if not eligible:
        return []

    rng = rng or default_rng
    return rng.sample(eligible, min(limit, len(eligible)))
