"""SessionRunner: drives one test run using Renderer, ControlBar and the engine.

Responsibilities:
- Frame loop: pump the countdown, draw the current snapshot, flip
- Forward button clicks (edge-detected on release) and key presses to the engine
- Return when the engine reaches ENDED
"""
from __future__ import annotations

from typing import Any

from psychopy import event, logging

from models import RunStatus
from sequencing_engine import SequencingEngine
from ui.controls import KEY_BINDINGS, PAUSE_KEY

DEFAULT_WRITING_PROMPT = 'Write Story'


class SessionRunner:

    def __init__(
        self,
        win: Any,
        renderer: Any,
        controls: Any,
        writing_prompt: str = DEFAULT_WRITING_PROMPT,
    ) -> None:
        """Initialize session runner.

        Args:
            win: PsychoPy window instance
            renderer: Renderer instance for drawing
            controls: ControlBar instance for the button strip
            writing_prompt: Text shown during the writing sub-phase
        """
        self.win = win
        self.renderer = renderer
        self.controls = controls
        self.writing_prompt = writing_prompt

    def run(self, engine: SequencingEngine) -> None:
        """Start the engine and run the frame loop until the test ends.

        Args:
            engine: Engine with a populated pool (NOT_STARTED or ENDED)
        """
        result = engine.start()
        if not result:
            logging.warning(f"Test not started: {result.message}")
            return

        mouse = event.Mouse(win=self.win)
        mouse_was_pressed = False
        event.clearEvents()
        key_list = list(KEY_BINDINGS) + [PAUSE_KEY]

        while engine.status is not RunStatus.ENDED:
            engine.poll()
            snap = engine.snapshot()
            if snap.status is RunStatus.ENDED:
                break

            self.renderer.draw_header(snap)
            self.renderer.draw_stimulus(snap.item, snap.writing_subphase, self.writing_prompt)
            targets = self.controls.build(self.renderer, mouse, snap)
            self.win.flip()

            op = self.controls.handle_keys(event.getKeys(keyList=key_list), snap)

            # Detect mouse state: only trigger on press→release transition (debounce)
            mouse_is_pressed = any(mouse.getPressed())
            mouse_just_released = mouse_was_pressed and not mouse_is_pressed
            mouse_was_pressed = mouse_is_pressed
            if op is None and mouse_just_released:
                op = self.controls.handle_click(targets, mouse)

            if op is not None:
                engine.apply(op)
