from __future__ import annotations

from collections.abc import Mapping

from openport.core.models import CooldownTable, Number

MS_PER_SECOND = 1000


def empty_cooldowns() -> CooldownTable:
    return CooldownTable()


def start(expiries: Mapping[str, Number], item_id: str, duration_seconds: Number, now: Number) -> dict[str, Number]:
    """Return a new mapping with `item_id` expiring `duration_seconds` after `now` (ms).

    A zero duration is legal: the entry is immediately expired since `now < now` is false.
    """

    out = dict(expiries)
    out[item_id] = now + duration_seconds * MS_PER_SECOND
    return out


def is_on_cooldown(expiries: Mapping[str, Number], item_id: str, now: Number) -> bool:
    expiry = expiries.get(item_id)
    return expiry is not None and now < expiry


def remaining_seconds(expiries: Mapping[str, Number], item_id: str, now: Number) -> float:
    expiry = expiries.get(item_id)
    if expiry is None or now >= expiry:
        return 0
    return (expiry - now) / MS_PER_SECOND


def start_event_cooldown(table: CooldownTable, event_id: str, duration_seconds: Number, now: Number) -> CooldownTable:
    return table.model_copy(update={"events": start(table.events, event_id, duration_seconds, now)})


def start_action_cooldown(table: CooldownTable, action_id: str, duration_seconds: Number, now: Number) -> CooldownTable:
    return table.model_copy(update={"actions": start(table.actions, action_id, duration_seconds, now)})


def is_event_on_cooldown(table: CooldownTable, event_id: str, now: Number) -> bool:
    return is_on_cooldown(table.events, event_id, now)


def is_action_on_cooldown(table: CooldownTable, action_id: str, now: Number) -> bool:
    return is_on_cooldown(table.actions, action_id, now)


def event_remaining(table: CooldownTable, event_id: str, now: Number) -> float:
    return remaining_seconds(table.events, event_id, now)


def action_remaining(table: CooldownTable, action_id: str, now: Number) -> float:
    return remaining_seconds(table.actions, action_id, now)
