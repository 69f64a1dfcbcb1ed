from __future__ import annotations

import logging
import math
import random
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from openport.actions import apply_action, check_run_outcome
from openport.api.models import RunSnapshot
from openport.catalog.registry import CatalogProvider
from openport.config import RunConfig
from openport.core.cooldowns import action_remaining, empty_cooldowns, event_remaining
from openport.core.models import ActionDefinition, EventDefinition, Number, RunOutcome, RunPhase
from openport.core.run_text import action_entry, describe_outcome, event_entry, push_log, score_tier
from openport.core.selection import generate_environment_modifiers, select_next
from openport.core.state import decrement_time, initialize
from openport.fsm import RunFSM
from openport.turn_processing.validators import (
    DEFAULT_SUBMIT_PIPELINE,
    InvalidActionError,
    ValidationContext,
    ValidatorPipeline,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def random_in_range(rng: random.Random, lo: int, hi: int) -> int:
    """Inclusive integer draw using only `rng.random()`."""

    return math.floor(lo + rng.random() * (hi - lo + 1))


class RunController:
    """Owns one run: lifecycle, per-action transition and the periodic tick.

    Actions and ticks serialize through a single lock, so a tick never interleaves
    with an action mid-mutation. Nothing inside the lock blocks; the catalog fetch
    (which may hit the network) happens before the lock is taken.

    The clock (`now_ms`) and the random source (`rng`) are injectable so a run is
    fully deterministic under test.
    """

    def __init__(
        self,
        *,
        catalog_provider: CatalogProvider,
        rng: random.Random | None = None,
        now_ms: Callable[[], Number] | None = None,
        config: RunConfig | None = None,
        pipeline: ValidatorPipeline = DEFAULT_SUBMIT_PIPELINE,
        run_id: UUID | None = None,
    ) -> None:
        self._catalog_provider = catalog_provider
        self._rng = rng if rng is not None else random.Random()
        self._now_ms = now_ms or wall_clock_ms
        self.config = config or RunConfig()
        self.pipeline = pipeline
        self._lock = threading.Lock()

        self._catalog: tuple[EventDefinition, ...] = ()
        self._env_modifiers: dict[str, float] = {}

        created = _now()
        self._run = RunSnapshot(
            run_id=run_id or uuid4(),
            created_at=created,
            last_updated_at=created,
            score_tier=score_tier(0, self.config.score_tiers),
        )

    # --- Queries ---

    @property
    def run_id(self) -> UUID:
        return self._run.run_id

    @property
    def phase(self) -> RunPhase:
        return self._run.phase

    @property
    def catalog(self) -> tuple[EventDefinition, ...]:
        return self._catalog

    def snapshot(self) -> RunSnapshot:
        return self._run.model_copy(deep=True)

    def find_event(self, event_id: str) -> EventDefinition | None:
        return next((e for e in self._catalog if e.id == event_id), None)

    def get_remaining(
        self,
        item_id: str,
        now: Number | None = None,
        *,
        kind: Literal["event", "action"] = "event",
    ) -> float:
        """Seconds left on an event or action cooldown, 0 when not on cooldown."""

        at = self._now_ms() if now is None else now
        if kind == "action":
            return action_remaining(self._run.cooldowns, item_id, at)
        return event_remaining(self._run.cooldowns, item_id, at)

    # --- Transitions ---

    def start_run(self) -> RunSnapshot:
        """idle/over -> playing. Ignored while a run is already playing."""

        if self._run.phase == RunPhase.playing:
            logger.info("Run %s already playing; start ignored", self.run_id)
            return self.snapshot()

        catalog = tuple(self._catalog_provider())

        with self._lock:
            if self._run.phase == RunPhase.playing:
                return self.snapshot()

            now = self._now_ms()
            state = initialize(self._seed_overrides())
            cooldowns = empty_cooldowns()
            env_modifiers = generate_environment_modifiers(catalog, self._rng)
            current = select_next(catalog, state, cooldowns, env_modifiers, now, self._rng)

            self._catalog = catalog
            self._env_modifiers = env_modifiers

            fsm = RunFSM(self._run)
            fsm.begin()
            fsm.sync_phase_to_model()

            self._run.state = state
            self._run.cooldowns = cooldowns
            self._run.current_event = current
            self._run.outcome = None
            self._run.outcome_headline = None
            self._run.outcome_sub = None
            self._run.log = [event_entry(current)] if current is not None else []
            self._touch()

            logger.info("Run %s started with %d events", self.run_id, len(catalog))
            if current is None:
                logger.debug("Run %s: no eligible event at start", self.run_id)
            return self.snapshot()

    def submit_action(self, action: ActionDefinition, event: EventDefinition) -> RunSnapshot:
        """playing -> playing | over. Illegal input is logged and ignored."""

        with self._lock:
            now = self._now_ms()
            ctx = ValidationContext(run_id=str(self.run_id), event=event, action=action, now=now)
            try:
                self.pipeline.validate(ctx=ctx, run=self._run)
            except InvalidActionError as e:
                logger.info("Run %s: ignoring action: %s", self.run_id, e)
                return self.snapshot()

            result = apply_action(self._run.state, self._run.cooldowns, action, event.id, event.cooldown, now)
            self._run.state = result.state
            self._run.cooldowns = result.cooldowns

            entries = [action_entry(action)]
            outcome = check_run_outcome(result.state, event)
            if outcome is not None:
                self._end(outcome)
            else:
                current = select_next(
                    self._catalog, result.state, result.cooldowns, self._env_modifiers, now, self._rng
                )
                self._run.current_event = current
                if current is not None:
                    entries.append(event_entry(current))
                else:
                    logger.debug("Run %s: no eligible event after action '%s'", self.run_id, action.id)

            self._run.log = push_log(self._run.log, entries, limit=self.config.log_limit)
            self._touch()
            return self.snapshot()

    def tick(self) -> RunSnapshot:
        """Time decay. Also retries selection when no event is presented."""

        with self._lock:
            if self._run.phase != RunPhase.playing:
                return self.snapshot()

            state = decrement_time(self._run.state)
            self._run.state = state

            outcome = check_run_outcome(state)
            if outcome is not None:
                self._end(outcome)
            elif self._run.current_event is None:
                current = select_next(
                    self._catalog, state, self._run.cooldowns, self._env_modifiers, self._now_ms(), self._rng
                )
                self._run.current_event = current
                if current is not None:
                    self._run.log = push_log(self._run.log, [event_entry(current)], limit=self.config.log_limit)

            self._touch()
            return self.snapshot()

    # --- Internal ---

    def _seed_overrides(self) -> dict[str, Number]:
        return {
            name: random_in_range(self._rng, lo, hi)
            for name, (lo, hi) in self.config.init_ranges.items()
        }

    def _end(self, outcome: RunOutcome) -> None:
        fsm = RunFSM(self._run)
        fsm.finish()
        fsm.sync_phase_to_model()

        self._run.outcome = outcome
        summary = describe_outcome(outcome)
        self._run.outcome_headline = summary.headline
        self._run.outcome_sub = summary.sub
        logger.info("Run %s over: %s (score %s)", self.run_id, outcome.value, self._run.state.score)

    def _touch(self) -> None:
        self._run.score_tier = score_tier(self._run.state.score, self.config.score_tiers)
        self._run.last_updated_at = _now()
