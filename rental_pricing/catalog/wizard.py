# This module implements the five-step selection state machine for the pricing catalog.
# It exists so the order of choices and the invalidation of dependent choices live in one place.
# Filters at steps after the current step are always empty.

from __future__ import annotations

from rental_pricing.catalog.errors import ValidationError
from rental_pricing.catalog.models import (
    FILTER_STEPS,
    NO_SEASON_DEFINITION,
    FilterKey,
    filter_for_step,
)

FIRST_STEP = 1
LAST_STEP = len(FILTER_STEPS)
SEASON_STEP = FilterKey.SEASON.step
UNIT_STEP = FilterKey.UNIT.step

# step -> steps whose filters are cleared when that step changes
DEPENDENT_STEPS: dict[int, tuple[int, ...]] = {
    1: (2, 3, 4, 5),
    2: (3, 4, 5),
    3: (4, 5),
    4: (5,),
    5: (),
}


class SelectionWizard:
    """Caller-owned wizard state: a cursor over the steps and one filter per step."""

    def __init__(self) -> None:
        self._current_step = FIRST_STEP
        self._filters: dict[FilterKey, str] = {key: "" for key in FILTER_STEPS}

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def current_key(self) -> FilterKey:
        return filter_for_step(self._current_step)

    def get_filter(self, key: FilterKey) -> str:
        return self._filters[FilterKey(key)]

    def set_filter(self, step: int, value: object) -> tuple[FilterKey, ...]:
        """Store a value for a reachable step and clear every dependent filter.

        Returns the keys that were cleared so the caller can drop their option lists.
        """

        key = filter_for_step(step)
        if step > self._current_step:
            raise ValidationError(
                f"Step {step} is not reachable yet; current step is {self._current_step}",
                field=key.param_name,
            )

        self._filters[key] = "" if value is None else str(value).strip()
        cleared = self._clear_steps(DEPENDENT_STEPS[step])
        if step < self._current_step:
            self._current_step = step
        return cleared

    def is_step_satisfied(self, step: int) -> bool:
        key = filter_for_step(step)
        if key is FilterKey.SEASON:
            return (
                self._filters[FilterKey.SEASON_DEFINITION] == NO_SEASON_DEFINITION
                or self._filters[FilterKey.SEASON] != ""
            )
        return self._filters[key] != ""

    def advance(self) -> bool:
        if self._current_step >= LAST_STEP:
            return False
        self._current_step += 1
        return True

    def retreat(self) -> bool:
        if self._current_step <= FIRST_STEP:
            return False
        self._current_step -= 1
        self._clear_steps(DEPENDENT_STEPS[self._current_step])
        return True

    def jump_to(self, step: int) -> bool:
        """Move the cursor directly; forward jumps need every skipped step satisfied."""

        if not FIRST_STEP <= step <= LAST_STEP or step == self._current_step:
            return False

        if step > self._current_step:
            skipped = range(self._current_step, step)
            if not all(self.is_step_satisfied(s) for s in skipped):
                return False
        else:
            self._clear_steps(DEPENDENT_STEPS[step])

        self._current_step = step
        return True

    def skip_seasons(self) -> bool:
        """Take the no-seasonal-pricing shortcut from step 3 straight to the unit step."""

        if self._current_step != FilterKey.SEASON_DEFINITION.step:
            return False
        if self._filters[FilterKey.SEASON_DEFINITION] != NO_SEASON_DEFINITION:
            return False
        return self.jump_to(UNIT_STEP)

    def reset(self) -> None:
        self._current_step = FIRST_STEP
        for key in FILTER_STEPS:
            self._filters[key] = ""

    def snapshot(self) -> dict[FilterKey, str]:
        return dict(self._filters)

    def is_ready_for_submission(self) -> bool:
        return all(
            self._filters[key] != ""
            for key in (FilterKey.RENTAL_LOCATION, FilterKey.RATE_TYPE, FilterKey.UNIT)
        )

    def _clear_steps(self, steps: tuple[int, ...]) -> tuple[FilterKey, ...]:
        cleared = []
        for dependent in steps:
            key = filter_for_step(dependent)
            self._filters[key] = ""
            cleared.append(key)
        return tuple(cleared)
