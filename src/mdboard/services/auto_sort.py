"""Automatic card placement driven by ``#gather_`` column rules."""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from datetime import date

from ..gather import GatherRuleEngine, GatherSyntaxError
from ..models import Board, Column, GatherRule, Tag, Task
from ..utils.datetime import today_local
from ..utils.ids import short_id
from ..utils.tags import authoritative_date, extract_tags, has_sticky

logger = logging.getLogger(__name__)

SORT_TAG_PATTERN = re.compile(r"(?:(?<=\s)|^)#sort-([a-zA-Z]+)(?=\s|$)")
SORT_BY_DATE = "bydate"
SORT_BY_NAME = "byname"


@dataclass
class SortPlan:
    """Where every movable task goes, decided before anything moves."""

    today: date
    rules: dict[str, GatherRule] = field(default_factory=dict)  # column_id -> rule
    rule_errors: dict[str, str] = field(default_factory=dict)  # column_id -> message
    ungathered_column_id: str | None = None
    destinations: dict[str, str] = field(default_factory=dict)  # task_id -> column_id
    origins: dict[str, str] = field(default_factory=dict)  # task_id -> column_id
    sticky_task_ids: set[str] = field(default_factory=set)

    @property
    def moves(self) -> dict[str, tuple[str, str]]:
        """Tasks that change column: task_id -> (from_column_id, to_column_id)."""
        return {
            task_id: (self.origins[task_id], target)
            for task_id, target in self.destinations.items()
            if self.origins.get(task_id) != target
        }


class AutoSortOrchestrator:
    """Redistributes cards to the columns whose gather rules they match.

    Policy:
    - Column rules are tried in board order; the first match wins.
    - Cards matching nothing go to the first ``#ungathered`` column, or
      stay where they are if there is none.
    - Sticky cards never move.
    - Include columns neither give nor receive cards.
    - Columns tagged ``#sort-bydate`` / ``#sort-byname`` are ordered afterwards.
    """

    def __init__(self, engine: GatherRuleEngine | None = None) -> None:
        self.engine = engine or GatherRuleEngine()

    def plan(self, board: Board, today: date | None = None) -> SortPlan:
        """Decide the destination of every movable task without moving any."""
        plan = SortPlan(today=today or today_local())

        for column in board.columns:
            if column.include_mode:
                continue
            try:
                rule = self.engine.parse_column(column)
            except GatherSyntaxError as e:
                plan.rule_errors[column.id] = str(e)
                logger.warning("Gather rule disabled for column '%s': %s", column.display_title, e)
                continue
            if rule is not None:
                plan.rules[column.id] = rule
            if plan.ungathered_column_id is None and self.engine.is_ungathered(column.title):
                plan.ungathered_column_id = column.id

        for column in board.columns:
            if column.include_mode:
                continue
            for task in column.tasks:
                plan.origins[task.id] = column.id
                tags = extract_tags(task.text)
                if has_sticky(tags):
                    plan.sticky_task_ids.add(task.id)
                    continue
                target = self._first_match(plan, tags)
                if target is None:
                    target = plan.ungathered_column_id or column.id
                plan.destinations[task.id] = target

        return plan

    def sort(self, board: Board, today: date | None = None) -> Board:
        """Return a new Board with tasks redistributed by the gather rules.

        The input board is not modified and shares no mutable containers
        with the result. Column identities and Task objects are reused.
        """
        plan = self.plan(board, today)
        return self.apply(board, plan)

    def apply(self, board: Board, plan: SortPlan) -> Board:
        """Build the sorted board from a plan."""
        kept: dict[str, list[Task]] = {column.id: [] for column in board.columns}
        arrived: dict[str, list[Task]] = {column.id: [] for column in board.columns}

        for column in board.columns:
            for task in column.tasks:
                target = plan.destinations.get(task.id, column.id)
                if target == column.id:
                    kept[column.id].append(task)
                else:
                    arrived[target].append(task)
                    logger.debug(
                        "Moving task %s '%s' -> column %s",
                        short_id(task.id),
                        task.display_title,
                        short_id(target),
                    )

        columns: list[Column] = []
        for column in board.columns:
            tasks = kept[column.id] + arrived[column.id]
            tasks = self._apply_sort_tags(column, tasks)
            columns.append(
                column.model_copy(
                    update={"tasks": tasks, "include_files": list(column.include_files)}
                )
            )

        logger.info(
            "Auto-sort moved %d of %d tasks (%d rules, %d disabled)",
            len(plan.moves),
            board.task_count,
            len(plan.rules),
            len(plan.rule_errors),
        )
        return board.model_copy(
            update={
                "columns": columns,
                "front_matter": copy.deepcopy(board.front_matter),
                "settings": copy.deepcopy(board.settings),
                "anomalies": [anomaly.model_copy() for anomaly in board.anomalies],
                "include_errors": [issue.model_copy() for issue in board.include_errors],
            }
        )

    def _first_match(self, plan: SortPlan, tags: list[Tag]) -> str | None:
        for column_id, rule in plan.rules.items():
            if self.engine.evaluate(rule, tags, plan.today):
                return column_id
        return None

    def _apply_sort_tags(self, column: Column, tasks: list[Task]) -> list[Task]:
        if column.include_mode:
            return tasks
        for mode in SORT_TAG_PATTERN.findall(column.title):
            mode = mode.lower()
            if mode == SORT_BY_DATE:
                tasks = sorted(tasks, key=_date_sort_key)
            elif mode == SORT_BY_NAME:
                tasks = sorted(tasks, key=lambda task: (task.display_title or task.title).casefold())
            else:
                logger.debug("Unknown sort tag '#sort-%s' on column '%s'", mode, column.display_title)
        return tasks


def _date_sort_key(task: Task) -> tuple[int, date]:
    """Dated tasks first in date order; undated tasks keep their order at the end."""
    due = authoritative_date(extract_tags(task.text))
    if due is None:
        return (1, date.min)
    return (0, due)
