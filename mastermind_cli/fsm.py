from __future__ import annotations

from dataclasses import dataclass

from statemachine import State, StateMachine

from mastermind_cli.api.models import SessionPhase


@dataclass(slots=True)
class SessionState:
    """The only mutable state of the client: which remote game (if any) is running.

    `phase == playing` iff `active_game_id` is set.
    """

    active_game_id: str | None = None
    phase: SessionPhase = SessionPhase.idle


class SessionFSM(StateMachine):
    """FSM wrapper around SessionState.

    It only guards transitions; the controller decides when to fire them and
    keeps `active_game_id` in step.
    - idle -> playing once the server created a game
    - playing -> idle once the game was deleted (or won)
    - closed is terminal and reachable from anywhere on exit
    """

    idle = State(SessionPhase.idle.value, value=SessionPhase.idle.value, initial=True)
    playing = State(SessionPhase.playing.value, value=SessionPhase.playing.value)
    closed = State(SessionPhase.closed.value, value=SessionPhase.closed.value, final=True)

    game_created = idle.to(playing)
    game_ended = playing.to(idle)
    shutdown = idle.to(closed) | playing.to(closed)

    def __init__(self, session: SessionState):
        self.session = session
        super().__init__(start_value=session.phase.value)

    def sync_phase_to_model(self) -> None:
        self.session.phase = SessionPhase(str(self.current_state.value))
