"""Pure scheduling functions: work-queue generation, shuffling and sampling."""

from collections.abc import Sequence

from lib_bench.scheduling.domain.rng import RandomSource
from lib_bench.scheduling.domain.work_item import WorkItem
from lib_bench.task.domain.task import Task


def generate_work_queue(
    task_ids: Sequence[str],
    conditions: Sequence[str],
    repetitions: int,
) -> list[WorkItem]:
    """Return the cartesian product in stable order: tasks, then conditions, then repetitions."""
    return [
        WorkItem(task_id=task_id, condition=condition, repetition_index=index)
        for task_id in task_ids
        for condition in conditions
        for index in range(repetitions)
    ]


def shuffle[T](items: Sequence[T], rng: RandomSource) -> list[T]:
    """
    Fisher-Yates shuffle into a new list; the input is never mutated.

    Walks from the last index down to 1, drawing once from rng per position.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def stratified_sample(
    tasks: Sequence[Task],
    limit: int,
    rng: RandomSource,
) -> list[Task]:
    """
    Sample ``limit`` tasks, apportioned across categories by size.

    Each category gets the floor of its proportional share; leftover slots go
    one at a time to the categories with the largest remainders (ties keep
    first-seen category order). Within a category, tasks are shuffled with rng
    and the first ``n`` are taken.
    """
    if limit >= len(tasks):
        return list(tasks)
    if limit <= 0:
        return []

    groups: dict[str, list[Task]] = {}
    for task in tasks:
        groups.setdefault(task.category, []).append(task)

    total = len(tasks)
    allocation: dict[str, int] = {}
    remainders: dict[str, int] = {}
    for category, group in groups.items():
        allocation[category], remainders[category] = divmod(limit * len(group), total)

    leftover = limit - sum(allocation.values())
    by_remainder = sorted(groups, key=lambda c: remainders[c], reverse=True)
    for category in by_remainder[:leftover]:
        allocation[category] += 1

    sample: list[Task] = []
    for category, group in groups.items():
        sample.extend(shuffle(group, rng)[: allocation[category]])
    return sample
