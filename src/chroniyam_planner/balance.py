"""
Quadrant balance check.

Compares the share of tasks in each quadrant with healthy ranges. Schedule
(important, not urgent) work should dominate.
"""

import logging
import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from chroniyam_planner.models import BalanceReport, Quadrant, QuadrantShare, Task

logger = logging.getLogger(__name__)

# Minimum task count before the largest-quadrant rule applies
MIN_TASKS_FOR_MAJORITY_RULE = 4


@dataclass(frozen=True)
class Benchmark:
    minimum: int
    maximum: int


HEALTHY_BENCHMARKS: dict[Quadrant, Benchmark] = {
    Quadrant.DO_FIRST: Benchmark(15, 25),
    Quadrant.SCHEDULE: Benchmark(50, 65),
    Quadrant.DELEGATE: Benchmark(5, 15),
    Quadrant.ELIMINATE: Benchmark(5, 15),
}


def _percent(count: int, total: int) -> int:
    # Half-up rounding, so 12.5% shows as 13%.
    return math.floor(count / total * 100 + 0.5)


def evaluate_balance(tasks: Sequence[Task]) -> BalanceReport:
    """
    Evaluate how tasks are spread over the four quadrants.

    Args:
        tasks: Tasks to evaluate, typically those of the current plan

    Returns:
        BalanceReport with per-quadrant percentages, issues and warnings.
        An empty task list yields an empty, balanced report.
    """
    total = len(tasks)
    if total == 0:
        return BalanceReport(total_tasks=0)

    counts = Counter(task.quadrant for task in tasks)
    percentages = {q: _percent(counts.get(q, 0), total) for q in Quadrant}
    shares = [
        QuadrantShare(quadrant=q, count=counts.get(q, 0), percentage=percentages[q])
        for q in Quadrant
    ]

    issues: list[str] = []
    warnings: list[str] = []

    do_first = percentages[Quadrant.DO_FIRST]
    bench = HEALTHY_BENCHMARKS[Quadrant.DO_FIRST]
    if do_first < bench.minimum:
        warnings.append(f"Do First is below target ({do_first}% < {bench.minimum}%)")
    elif do_first > bench.maximum:
        issues.append(
            f"Do First is too high ({do_first}% > {bench.maximum}%) - Too reactive!"
        )

    schedule = percentages[Quadrant.SCHEDULE]
    bench = HEALTHY_BENCHMARKS[Quadrant.SCHEDULE]
    if schedule < bench.minimum:
        issues.append(
            f"Schedule is too low ({schedule}% < {bench.minimum}%) - Focus on strategic work!"
        )
    elif schedule > bench.maximum:
        warnings.append(f"Schedule is above target ({schedule}% > {bench.maximum}%)")

    is_schedule_largest = all(
        schedule > percentages[q] for q in Quadrant if q != Quadrant.SCHEDULE
    )
    if not is_schedule_largest and total >= MIN_TASKS_FOR_MAJORITY_RULE:
        issues.append("Schedule should be your largest quadrant for optimal productivity")

    delegate = percentages[Quadrant.DELEGATE]
    bench = HEALTHY_BENCHMARKS[Quadrant.DELEGATE]
    if delegate > bench.maximum:
        issues.append(
            f"Delegate is too high ({delegate}% > {bench.maximum}%) - Too many distractions!"
        )

    eliminate = percentages[Quadrant.ELIMINATE]
    bench = HEALTHY_BENCHMARKS[Quadrant.ELIMINATE]
    if eliminate > bench.maximum:
        issues.append(
            f"Eliminate is too high ({eliminate}% > {bench.maximum}%) - Eliminate time wasters!"
        )

    logger.debug(
        f"Balance over {total} tasks: "
        + ", ".join(f"{q.value} {percentages[q]}%" for q in Quadrant)
    )
    return BalanceReport(
        total_tasks=total, shares=shares, issues=issues, warnings=warnings
    )
