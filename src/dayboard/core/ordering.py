"""Fractional ordering of tasks within a day - no I/O dependencies.

Orders are floats; a higher order sorts earlier among incomplete tasks.
Moving a task writes a single new order value computed from its future
neighbours, so no other task has to be touched.
"""

from dataclasses import dataclass
from datetime import date

from .tasks import Task, incomplete_in_order

ORDER_STEP = 1000.0

# Below this, bisection has lost too much precision to keep ranks distinct.
MIN_ORDER_GAP = 1e-6


@dataclass(frozen=True)
class MovePlan:
    """The single write a move needs. allocated_date is None for same-day moves."""

    order: float
    allocated_date: date | None = None


def allocate_order(orders: list[float], position: int) -> float:
    """
    Compute the order for an insertion at `position`.

    Args:
        orders: Order values of the destination's incomplete tasks, top first
            (so strictly descending).
        position: Index the new item will occupy, 0..len(orders).

    Returns:
        An order strictly between the future neighbours, or above the first /
        below the last at the ends.
    """
    if position < 0:
        raise ValueError(f"position must be non-negative, got {position}")

    if not orders:
        return ORDER_STEP

    # Top of the column
    if position == 0:
        return orders[0] + ORDER_STEP

    # Bottom of the incomplete tasks
    if position >= len(orders):
        return orders[-1] / 2

    return (orders[position - 1] + orders[position]) / 2


def creation_order(highest: float | None) -> float:
    """Order for a newly created task: above everything else on its day."""
    if highest is None:
        return ORDER_STEP
    return highest + ORDER_STEP


def sequence_orders(count: int, start: int = 1) -> list[float]:
    """Evenly spaced orders: start*1000, (start+1)*1000, ... (count values)."""
    return [(start + i) * ORDER_STEP for i in range(count)]


def needs_renumber(orders: list[float]) -> bool:
    """
    Check whether a partition's orders have collapsed.

    True when any order is at or below MIN_ORDER_GAP or two neighbours are
    closer than MIN_ORDER_GAP.
    """
    ranked = sorted(orders, reverse=True)
    if ranked and ranked[-1] <= MIN_ORDER_GAP:
        return True
    return any(a - b < MIN_ORDER_GAP for a, b in zip(ranked, ranked[1:]))


def plan_move(
    task: Task,
    destination_date: date,
    destination_tasks: list[Task],
    position: int | None = None,
    onto: Task | None = None,
) -> MovePlan | None:
    """
    Work out the write for dropping `task` into a day column.

    Args:
        task: The task being dragged.
        destination_date: Day of the column it is dropped on.
        destination_tasks: Every task currently on that day (the dragged task
            included when it is a same-day move).
        position: Index in the destination's incomplete list to insert before.
            None means "dropped on the column itself", i.e. the end of the
            incomplete tasks.
        onto: Task the drop landed on. Overrides position; a completed target
            means "end of the incomplete tasks".

    Returns:
        MovePlan, or None when the drop leaves the board unchanged.
    """
    incomplete = incomplete_in_order(destination_tasks)
    same_day = task.allocated_date == destination_date

    if onto is not None:
        if onto.id == task.id:
            return None
        if onto.completed:
            position = len(incomplete)
        else:
            position = next((i for i, t in enumerate(incomplete) if t.id == onto.id), None)
            if position is None:
                raise ValueError(f"Task {onto.id} is not on {destination_date}")
    elif position is None:
        position = len(incomplete)

    if position < 0:
        raise ValueError(f"position must be non-negative, got {position}")
    position = min(position, len(incomplete))

    if same_day and not task.completed:
        current = next((i for i, t in enumerate(incomplete) if t.id == task.id), None)
        # Inserting before itself or before its lower neighbour changes nothing
        if current is not None and position in (current, current + 1):
            return None

    order = allocate_order([t.order for t in incomplete], position)
    if same_day:
        return MovePlan(order=order)
    return MovePlan(order=order, allocated_date=destination_date)
