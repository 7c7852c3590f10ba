"""Data models for the stimulus sequencer."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class StimulusKind(Enum):
    """Stimulus categories; the value is the position key in the test order."""
    VISUAL_PROMPT = 0
    WORD_PROMPT = 1
    SENTENCE_PROMPT = 2
    OTHER = 3


class RunStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


class Operation(Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    ADVANCE = "advance"
    RETREAT = "retreat"
    END = "end"
    TICK = "tick"


class Rejection(Enum):
    INVALID_OPERATION = "invalid_operation"
    EMPTY_SEQUENCE = "empty_sequence"
    POOL_MUTATION_REJECTED = "pool_mutation_rejected"
    ITEM_NOT_FOUND = "item_not_found"


class UnclassifiableContent(Exception):
    """Raised by the item classifier for content it cannot turn into stimuli."""


def new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class StimulusItem:
    """A single stimulus. Never mutated once created.

    Attributes:
        id: Opaque unique token
        kind: Stimulus category
        label: Display name (usually the source file name)
        payload: Text content, or a path to an image file
        is_text: False when payload is an image reference
    """
    kind: StimulusKind
    label: str
    payload: str
    is_text: bool = True
    id: str = field(default_factory=new_item_id)

    def preview(self, limit: int = 100) -> str:
        if not self.is_text:
            return f"[image] {self.label}"
        return self.payload[:limit]


@dataclass
class RunState:
    """Mutable run state, owned and mutated only by SequencingEngine."""
    status: RunStatus = RunStatus.NOT_STARTED
    position: int = -1
    writing_subphase: bool = False
    seconds_remaining: int = 0
    transition_locked: bool = False


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only view of the engine handed to the presentation layer."""
    status: RunStatus
    position: int
    writing_subphase: bool
    seconds_remaining: int
    transition_locked: bool
    total: int
    item: Optional[StimulusItem] = None

    @property
    def is_active(self) -> bool:
        return self.status in (RunStatus.RUNNING, RunStatus.PAUSED)

    @property
    def can_advance(self) -> bool:
        return (
            self.status is RunStatus.RUNNING
            and not self.transition_locked
            and (self.position < self.total - 1 or self.writing_subphase)
        )

    @property
    def can_retreat(self) -> bool:
        return (
            self.status is RunStatus.RUNNING
            and not self.transition_locked
            and self.position > 0
        )

    @property
    def phase_label(self) -> str:
        if self.item is None:
            return ''
        if self.writing_subphase:
            return 'writing'
        return self.item.kind.name.lower()


@dataclass(frozen=True)
class OperationResult:
    """Outcome of an engine operation or pool mutation (truthy iff ok)."""
    ok: bool
    reason: Optional[Rejection] = None
    message: str = ''

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str = '') -> 'OperationResult':
        return cls(True, None, message)

    @classmethod
    def rejected(cls, reason: Rejection, message: str) -> 'OperationResult':
        return cls(False, reason, message)
