"""Нагрузочный прогон против запущенного сервиса."""

import argparse
import asyncio
import random
import statistics
import time
import uuid
from typing import Dict, List, Tuple

import httpx
from faker import Faker

fake = Faker()


def random_id(prefix: str) -> str:
    """Сгенерировать уникальный ID с префиксом."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


async def create_team(client: httpx.AsyncClient, num_users: int) -> Tuple[str, List[str]]:
    """Создать команду с уникальными пользователями."""
    team_name = random_id("team")
    members = [
        {"user_id": random_id("u"), "username": fake.name(), "is_active": True}
        for _ in range(num_users)
    ]
    response = await client.post("/team/add", json={"team_name": team_name, "members": members})
    response.raise_for_status()
    return team_name, [m["user_id"] for m in members]


async def create_pr(client: httpx.AsyncClient, author_id: str) -> dict:
    """Создать PR с уникальным ID."""
    response = await client.post(
        "/pullRequest/create",
        json={
            "pull_request_id": random_id("pr"),
            "pull_request_name": fake.sentence(),
            "author_id": author_id,
        },
    )
    response.raise_for_status()
    return response.json()["pr"]


class RequestStats:
    """Счётчики и времена ответов одной группы запросов."""

    def __init__(self, label: str):
        self.label = label
        self.count = 0
        self.server_errors = 0
        self.response_times: List[float] = []
        self.error_details: Dict[str, int] = {}

    def record_success(self, duration_ms: float):
        self.count += 1
        self.response_times.append(duration_ms)

    def record_error(self, error_code: str, http_status_code: int | None = None):
        self.count += 1
        self.error_details[error_code] = self.error_details.get(error_code, 0) + 1
        if http_status_code and 500 <= http_status_code < 600:
            self.server_errors += 1

    def print_results(self, test_duration: float):
        print(f"\nРезультаты {self.label}:")
        print(f"  Всего запросов: {self.count}")
        print(f"  Ошибок (5xx): {self.server_errors}")
        if self.count:
            success_rate = (self.count - self.server_errors) / self.count * 100
            print(f"  Успешность (без 5xx): {success_rate:.2f}%")
            print(f"  RPS: {self.count / test_duration:.2f}")
        if self.error_details:
            print(f"  Коды ошибок: {self.error_details}")
        if self.response_times:
            times = sorted(self.response_times)
            print(
                "  Время ответа (мс): "
                f"среднее={statistics.mean(times):.2f}, "
                f"P50={times[len(times) // 2]:.2f}, "
                f"P95={times[int(len(times) * 0.95)]:.2f}, "
                f"P99={times[int(len(times) * 0.99)]:.2f}, "
                f"макс={times[-1]:.2f}"
            )


class SharedData:
    """Созданные в прогоне команды и открытые PR."""

    def __init__(self):
        self.teams: Dict[str, List[str]] = {}
        self.user_ids: List[str] = []
        self.open_prs: Dict[str, List[str]] = {}

    def add_team(self, team_name: str, user_ids: List[str]):
        self.teams[team_name] = user_ids
        self.user_ids.extend(user_ids)

    def add_pr(self, pr: dict):
        if pr["status"] == "OPEN":
            self.open_prs[pr["pull_request_id"]] = pr["assigned_reviewers"]
        else:
            self.open_prs.pop(pr["pull_request_id"], None)


async def _timed(stats: RequestStats, request):
    """Выполнить запрос и записать результат."""
    start = time.perf_counter()
    try:
        response = await request
    except httpx.HTTPError as exc:
        stats.record_error(type(exc).__name__)
        return None

    if response.is_success:
        stats.record_success((time.perf_counter() - start) * 1000)
        return response.json()

    try:
        code = response.json()["error"]["code"]
    except (ValueError, KeyError, TypeError):
        code = f"HTTP_{response.status_code}"
    stats.record_error(code, response.status_code)
    return None


async def _read_once(client: httpx.AsyncClient, data: SharedData, stats: RequestStats):
    kind = random.randint(0, 2)
    if kind == 0:
        user_id = random.choice(data.user_ids)
        await _timed(stats, client.get("/users/getReview", params={"user_id": user_id}))
    elif kind == 1:
        await _timed(stats, client.get("/stats"))
    else:
        team_name = random.choice(list(data.teams))
        await _timed(stats, client.get("/team/get", params={"team_name": team_name}))


async def _write_once(client: httpx.AsyncClient, data: SharedData, stats: RequestStats):
    kind = random.randint(0, 3)
    open_prs = [pr_id for pr_id, reviewers in data.open_prs.items() if reviewers]

    if kind == 0 and open_prs:
        pr_id = random.choice(open_prs)
        body = await _timed(stats, client.post("/pullRequest/merge", json={"pull_request_id": pr_id}))
        if body:
            data.add_pr(body["pr"])
    elif kind == 1 and open_prs:
        pr_id = random.choice(open_prs)
        old_user_id = random.choice(data.open_prs[pr_id])
        body = await _timed(
            stats,
            client.post(
                "/pullRequest/reassign",
                json={"pull_request_id": pr_id, "old_user_id": old_user_id},
            ),
        )
        if body:
            data.add_pr(body["pr"])
    elif kind == 2:
        user_id = random.choice(data.user_ids)
        await _timed(
            stats,
            client.post(
                "/users/setIsActive",
                json={"user_id": user_id, "is_active": random.random() > 0.2},
            ),
        )
    else:
        body = await _timed(
            stats,
            client.post(
                "/pullRequest/create",
                json={
                    "pull_request_id": random_id("pr"),
                    "pull_request_name": fake.sentence(),
                    "author_id": random.choice(data.user_ids),
                },
            ),
        )
        if body:
            data.add_pr(body["pr"])


async def run_load_test(
    base_url: str,
    num_teams: int,
    users_per_team: int,
    prs_per_team: int,
    concurrency: int,
    test_duration: float,
):
    print("Нагрузочное тестирование:")
    print(f"  Команд: {num_teams}, пользователей на команду: {users_per_team}")
    print(f"  PR на команду: {prs_per_team}, параллельных воркеров: {concurrency}")
    print(f"  Длительность теста: {test_duration}с\n")

    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        data = SharedData()
        start = time.time()
        for _ in range(num_teams):
            team_name, user_ids = await create_team(client, users_per_team)
            data.add_team(team_name, user_ids)
            for _ in range(prs_per_team):
                data.add_pr(await create_pr(client, random.choice(user_ids)))
        print(f"Предварительные данные созданы за {time.time() - start:.2f}с")

        read_stats = RequestStats("чтения")
        write_stats = RequestStats("записи")
        end_time = time.time() + test_duration

        async def worker(step, stats):
            while time.time() < end_time:
                await step(client, data, stats)
                await asyncio.sleep(0.01)

        await asyncio.gather(
            *[worker(_read_once, read_stats) for _ in range(concurrency)],
            *[worker(_write_once, write_stats) for _ in range(concurrency)],
        )

    read_stats.print_results(test_duration)
    write_stats.print_results(test_duration)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--base-url", default="http://localhost:8080")
    parser.add_argument("--teams", type=int, default=20)
    parser.add_argument("--users-per-team", type=int, default=10)
    parser.add_argument("--prs-per-team", type=int, default=20)
    parser.add_argument("--concurrency", type=int, default=30)
    parser.add_argument("--duration", type=float, default=60)
    args = parser.parse_args()

    asyncio.run(
        run_load_test(
            base_url=args.base_url,
            num_teams=args.teams,
            users_per_team=args.users_per_team,
            prs_per_team=args.prs_per_team,
            concurrency=args.concurrency,
            test_duration=args.duration,
        )
    )
