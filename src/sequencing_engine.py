"""SequencingEngine: the test-run state machine.

States: NOT_STARTED -> RUNNING <-> PAUSED -> ENDED (RUNNING -> ENDED directly
when the sequence is exhausted or the run is terminated). ENDED is terminal
until start() re-initializes the run.

Every operation goes through apply(), which checks preconditions and returns
an OperationResult instead of raising. Countdown expiry (tick) and manual
navigation (advance/retreat) share one transition path guarded by
``transition_locked``: the lock is checked and set as the first step of each
path, so a caller re-entering the engine while a transition is in flight
(e.g. from the cue listener) is rejected rather than applied twice.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from psychopy import logging

from countdown import CountdownDriver
from item_classifier import DEFAULT_SENTENCE_MARKER, classify_files
from item_pool import ItemPool
from models import (
    Operation,
    OperationResult,
    Rejection,
    RunSnapshot,
    RunState,
    RunStatus,
    StimulusItem,
    StimulusKind,
)
from utils import DEFAULT_DURATIONS, build_sequence, resolve_duration

ACTIVE_STATUSES = (RunStatus.RUNNING, RunStatus.PAUSED)


class SequencingEngine:
    """Owns the item pool, the frozen sequence and the RunState of one session.

    Public API:
    - apply(op) and the wrappers start/pause/resume/advance/retreat/end/tick
    - poll(): pump the countdown driver (call once per frame)
    - add_items/delete_item/delete_all/ingest: pool mutation (pre-run only)
    - snapshot(): read-only view for the presentation layer
    """

    def __init__(
        self,
        pool: ItemPool | None = None,
        durations: Mapping[str, int] | None = None,
        cue: Any = None,
        countdown: CountdownDriver | None = None,
        sentence_marker: str = DEFAULT_SENTENCE_MARKER,
    ) -> None:
        """Initialize engine in the NOT_STARTED state.

        Args:
            pool: Pre-run item pool (empty pool if None)
            durations: Phase durations (configs/session.json 'durations')
            cue: Object with play()/stop() (CuePlayer), or None for silent runs
            countdown: Countdown driver (one on core.getTime if None)
            sentence_marker: Marker passed to the classifier by ingest()
        """
        self.pool = pool if pool is not None else ItemPool()
        self.durations = dict(durations or DEFAULT_DURATIONS)
        self.cue = cue
        self.countdown = countdown if countdown is not None else CountdownDriver()
        self.sentence_marker = sentence_marker

        self.state = RunState()
        self._frozen: Optional[tuple[StimulusItem, ...]] = None
        self._built: tuple[StimulusItem, ...] = ()
        self._built_version = -1

        self._handlers = {
            Operation.START: self._start,
            Operation.PAUSE: self._pause,
            Operation.RESUME: self._resume,
            Operation.ADVANCE: self._advance,
            Operation.RETREAT: self._retreat,
            Operation.END: self._end,
            Operation.TICK: self._tick,
        }

    # =========================================================================
    # READ-ONLY VIEW
    # =========================================================================

    @property
    def status(self) -> RunStatus:
        return self.state.status

    @property
    def sequence(self) -> tuple[StimulusItem, ...]:
        """Frozen sequence during a run, otherwise rebuilt from the current pool."""
        if self._frozen is not None:
            return self._frozen
        if self._built_version != self.pool.version:
            self._built = build_sequence(self.pool)
            self._built_version = self.pool.version
        return self._built

    @property
    def current_item(self) -> Optional[StimulusItem]:
        if self.state.status in ACTIVE_STATUSES:
            return self.sequence[self.state.position]
        return None

    def snapshot(self) -> RunSnapshot:
        st = self.state
        return RunSnapshot(
            status=st.status,
            position=st.position,
            writing_subphase=st.writing_subphase,
            seconds_remaining=st.seconds_remaining,
            transition_locked=st.transition_locked,
            total=len(self.sequence),
            item=self.current_item,
        )

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def apply(self, op: Operation) -> OperationResult:
        """Single entry point for every run-state operation."""
        result = self._handlers[op]()
        if result:
            logging.debug(f"{op.value}: {result.message}")
        else:
            logging.warning(f"{op.value} rejected ({result.reason.value}): {result.message}")
        return result

    def start(self) -> OperationResult:
        return self.apply(Operation.START)

    def pause(self) -> OperationResult:
        return self.apply(Operation.PAUSE)

    def resume(self) -> OperationResult:
        return self.apply(Operation.RESUME)

    def advance(self) -> OperationResult:
        return self.apply(Operation.ADVANCE)

    def retreat(self) -> OperationResult:
        return self.apply(Operation.RETREAT)

    def end(self) -> OperationResult:
        return self.apply(Operation.END)

    def tick(self) -> OperationResult:
        return self.apply(Operation.TICK)

    def poll(self) -> int:
        """Apply one tick per whole second the countdown reports as due.

        Returns:
            Number of ticks applied
        """
        applied = 0
        while self.state.status is RunStatus.RUNNING and self.countdown.take_due():
            self.tick()
            applied += 1
        return applied

    # =========================================================================
    # POOL MUTATION
    # =========================================================================

    def _pool_locked(self) -> Optional[OperationResult]:
        if self.state.status in ACTIVE_STATUSES:
            return OperationResult.rejected(
                Rejection.POOL_MUTATION_REJECTED,
                'Items cannot be changed while a test is in progress. End the test first.',
            )
        return None

    def _report_pool(self, result: OperationResult) -> OperationResult:
        if result:
            logging.info(result.message)
        else:
            logging.warning(result.message)
        return result

    def add_items(self, items: Iterable[StimulusItem]) -> OperationResult:
        rejected = self._pool_locked()
        if rejected is not None:
            return self._report_pool(rejected)
        count = self.pool.add(items)
        return self._report_pool(OperationResult.success(f"Added {count} item(s)"))

    def delete_item(self, item_id: str) -> OperationResult:
        rejected = self._pool_locked()
        if rejected is not None:
            return self._report_pool(rejected)
        if not self.pool.remove(item_id):
            return self._report_pool(OperationResult.rejected(
                Rejection.ITEM_NOT_FOUND, f"No item with id {item_id}"
            ))
        return self._report_pool(OperationResult.success(f"Deleted item {item_id}"))

    def delete_all(self) -> OperationResult:
        rejected = self._pool_locked()
        if rejected is not None:
            return self._report_pool(rejected)
        count = self.pool.clear()
        return self._report_pool(OperationResult.success(f"Deleted {count} item(s)"))

    def ingest(self, paths: Iterable[str]) -> tuple[OperationResult, list[str]]:
        """Classify files and add the resulting items to the pool.

        Returns:
            (result, skipped) where skipped lists files that yielded no item
        """
        rejected = self._pool_locked()
        if rejected is not None:
            return self._report_pool(rejected), []
        items, skipped = classify_files(paths, self.sentence_marker)
        return self.add_items(items), skipped

    # =========================================================================
    # HANDLERS (called only through apply)
    # =========================================================================

    def _invalid(self, message: str) -> OperationResult:
        return OperationResult.rejected(Rejection.INVALID_OPERATION, message)

    def _duration(self, item: StimulusItem, writing: bool = False) -> int:
        return resolve_duration(item.kind, writing, self.durations)

    def _signal_cue(self) -> None:
        if self.cue is not None:
            self.cue.play()

    def _begin_phase(self) -> None:
        """Establish the new phase: restart the countdown cadence and cue."""
        self.countdown.arm()
        st = self.state
        logging.exp(
            f"Phase start: item {st.position + 1}/{len(self.sequence)} "
            f"writing={st.writing_subphase} seconds={st.seconds_remaining}"
        )
        self._signal_cue()

    def _start(self) -> OperationResult:
        if self.state.status not in (RunStatus.NOT_STARTED, RunStatus.ENDED):
            return self._invalid('A test is already in progress')
        sequence = self.sequence
        if not sequence:
            return OperationResult.rejected(
                Rejection.EMPTY_SEQUENCE, 'Add at least one item before starting the test'
            )
        self._frozen = sequence
        self.state = RunState(
            status=RunStatus.RUNNING,
            position=0,
            writing_subphase=False,
            seconds_remaining=self._duration(sequence[0]),
            transition_locked=True,
        )
        st = self.state
        self._begin_phase()
        st.transition_locked = False
        return OperationResult.success(f"Started with {len(sequence)} item(s)")

    def _pause(self) -> OperationResult:
        if self.state.status is not RunStatus.RUNNING:
            return self._invalid('Only a running test can be paused')
        self.state.status = RunStatus.PAUSED
        self.countdown.cancel()
        return OperationResult.success(f"Paused at {self.state.seconds_remaining}s")

    def _resume(self) -> OperationResult:
        st = self.state
        if st.status is not RunStatus.PAUSED:
            return self._invalid('Only a paused test can be resumed')
        st.status = RunStatus.RUNNING
        if st.seconds_remaining > 0:
            st.transition_locked = False
        self.countdown.arm()
        return OperationResult.success(f"Resumed at {st.seconds_remaining}s")

    def _tick(self) -> OperationResult:
        st = self.state
        if st.status is not RunStatus.RUNNING:
            return self._invalid('Countdown only runs while the test is running')
        if st.transition_locked:
            return self._invalid('A transition is in progress')
        if st.seconds_remaining <= 0:
            return self._invalid('No time remaining in the current phase')
        st.seconds_remaining -= 1
        if st.seconds_remaining == 0:
            return self._transition('timeout')
        return OperationResult.success(f"{st.seconds_remaining}s remaining")

    def _advance(self) -> OperationResult:
        st = self.state
        if st.status is not RunStatus.RUNNING:
            return self._invalid('Next is only available while the test is running')
        if st.transition_locked:
            return self._invalid('A transition is in progress')
        if st.position >= len(self.sequence) - 1 and not st.writing_subphase:
            return self._invalid('Already at the last item')
        return self._transition('manual')

    def _transition(self, trigger: str) -> OperationResult:
        """Move to the next phase: writing sub-phase, next item, or end of run."""
        st = self.state
        st.transition_locked = True
        item = self.sequence[st.position]
        if item.kind is StimulusKind.VISUAL_PROMPT and not st.writing_subphase:
            st.writing_subphase = True
            st.seconds_remaining = self._duration(item, writing=True)
            self._begin_phase()
            st.transition_locked = False
            return OperationResult.success(f"{trigger}: writing sub-phase for {item.label}")

        st.writing_subphase = False
        if st.position < len(self.sequence) - 1:
            st.position += 1
            st.seconds_remaining = self._duration(self.sequence[st.position])
            self._begin_phase()
            st.transition_locked = False
            return OperationResult.success(f"{trigger}: item {st.position + 1}")

        self._end()
        return OperationResult.success(f"{trigger}: sequence finished")

    def _retreat(self) -> OperationResult:
        st = self.state
        if st.status is not RunStatus.RUNNING:
            return self._invalid('Previous is only available while the test is running')
        if st.transition_locked:
            return self._invalid('A transition is in progress')
        if st.position <= 0:
            return self._invalid('Already at the first item')
        st.transition_locked = True
        st.writing_subphase = False
        st.position -= 1
        st.seconds_remaining = self._duration(self.sequence[st.position])
        self._begin_phase()
        st.transition_locked = False
        return OperationResult.success(f"manual: back to item {st.position + 1}")

    def _end(self) -> OperationResult:
        previous = self.state.status
        self.state = RunState(status=RunStatus.ENDED)
        self._frozen = None
        self.countdown.cancel()
        if self.cue is not None:
            self.cue.stop()
        logging.exp(f"Test ended (was {previous.value})")
        return OperationResult.success('Test ended')
