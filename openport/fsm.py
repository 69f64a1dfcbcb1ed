from __future__ import annotations

from statemachine import State, StateMachine

from openport.api.models import RunSnapshot
from openport.core.models import RunPhase


class RunFSM(StateMachine):
    """FSM wrapper around RunSnapshot.

    - phases: idle -> playing -> over, and over -> playing on an explicit restart.
    - state mutation is done by the controller; the FSM only guards phase changes.
    """

    idle = State(RunPhase.idle.value, value=RunPhase.idle.value, initial=True)
    playing = State(RunPhase.playing.value, value=RunPhase.playing.value)
    over = State(RunPhase.over.value, value=RunPhase.over.value)

    begin = idle.to(playing) | over.to(playing)
    finish = playing.to(over)

    def __init__(self, run: RunSnapshot):
        self.run = run
        super().__init__(start_value=run.phase.value)

    def sync_phase_to_model(self) -> None:
        self.run.phase = RunPhase(str(self.current_state.value))
