"""ControlBar: builds the navigation buttons and maps user input to operations."""
from __future__ import annotations

from typing import Any

from models import Operation, RunSnapshot, RunStatus
from stimulus_types import LayoutConfig

KEY_BINDINGS = {
    'right': Operation.ADVANCE,
    'left': Operation.RETREAT,
    'escape': Operation.END,
}
PAUSE_KEY = 'space'


class ControlBar:
    """Manages the bottom control bar (Previous / Next / Pause|Resume / End Test).

    Architecture:
    - specs: pure description of the buttons for a given snapshot
    - build: draws the buttons through the renderer, returns hit-test targets
    - handle_click / handle_keys: translate input into an Operation (or None)
    """

    def __init__(self, layout: LayoutConfig) -> None:
        self._layout = layout

    def specs(self, snap: RunSnapshot) -> list[tuple[Operation, str, bool]]:
        """Describe the buttons for the current snapshot.

        Returns:
            List of (operation, label, enabled) in left-to-right order
        """
        running = snap.status is RunStatus.RUNNING
        if snap.status is RunStatus.PAUSED:
            toggle = (Operation.RESUME, 'Resume Test', True)
        else:
            toggle = (Operation.PAUSE, 'Pause Test', running)
        return [
            (Operation.RETREAT, 'Previous', snap.can_retreat),
            (Operation.ADVANCE, 'Next', snap.can_advance),
            toggle,
            (Operation.END, 'End Test', snap.is_active),
        ]

    def positions(self, count: int) -> list[tuple[float, float]]:
        """Centre positions for ``count`` evenly spaced buttons."""
        layout = self._layout
        w = layout['controls_button_w']
        gap = layout['controls_gap']
        span = count * w + (count - 1) * gap
        x0 = -span / 2.0 + w / 2.0
        return [(x0 + i * (w + gap), layout['controls_y']) for i in range(count)]

    def build(self, renderer: Any, mouse: Any, snap: RunSnapshot) -> list[tuple[Operation, Any, bool]]:
        """Draw the control bar and return (operation, rect, enabled) hit targets."""
        specs = self.specs(snap)
        targets = []
        for (op, label, enabled), pos in zip(specs, self.positions(len(specs))):
            rect = renderer.draw_button(
                mouse, label, pos=pos,
                width=self._layout['controls_button_w'],
                enabled=enabled,
            )
            targets.append((op, rect, enabled))
        return targets

    def handle_click(self, targets: list[tuple[Operation, Any, bool]], mouse: Any) -> Operation | None:
        """Return the operation of the enabled button under the mouse, if any.

        Caller handles debouncing (press -> release edge detection).
        """
        for op, rect, enabled in targets:
            if enabled and rect.contains(mouse):
                return op
        return None

    def handle_keys(self, keys: list[str], snap: RunSnapshot) -> Operation | None:
        """Map the first bound key press to an operation."""
        for key in keys:
            if key == PAUSE_KEY:
                return Operation.RESUME if snap.status is RunStatus.PAUSED else Operation.PAUSE
            if key in KEY_BINDINGS:
                return KEY_BINDINGS[key]
        return None
