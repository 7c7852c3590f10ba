"""Renderer: encapsulates all drawing primitives for the stimulus sequencer.

This class provides a memory-efficient rendering interface that:
- Reuses visual objects (header, text stimulus, writing prompt) across frames
- Accepts state via dependency injection (window, layout)
- Separates concerns: atomic draw_* methods (no flip) vs show_* flows (with flip)
"""
from __future__ import annotations

from typing import Any, Sequence

from psychopy import core, event, visual

from models import RunSnapshot, RunStatus, StimulusItem
from path_utils import file_exists_nonempty, fitted_size_keep_aspect
from stimulus_types import LayoutConfig
from ui.item_list import DELETE, ItemListView


class Renderer:
    """Handles all visual rendering for a test session.

    Architecture:
    - __init__: Pre-creates reusable visual objects
    - show_*: Blocking flows with internal flip loops (instruction, completion)
    - draw_*: Atomic drawing primitives (caller manages flip)
    """

    def __init__(self, win: visual.Window, layout: LayoutConfig) -> None:
        """Initialize renderer with pre-created reusable visual objects.

        Args:
            win: PsychoPy window for rendering
            layout: Layout configuration dictionary
        """
        self._win = win
        self._layout = layout
        font = layout['font_main']

        self._timer_stim = visual.TextStim(
            win, text='', pos=(layout['header_left_x'], layout['header_y']),
            height=layout['header_font_size'], color='white', font=font,
            anchorHoriz='left',
        )
        self._position_stim = visual.TextStim(
            win, text='', pos=(layout['header_right_x'], layout['header_y']),
            height=layout['header_font_size'], color='white', font=font,
            anchorHoriz='right',
        )
        self._status_stim = visual.TextStim(
            win, text='PAUSED', pos=(0, layout['header_y']),
            height=layout['header_font_size'], color='yellow', font=font, bold=True,
        )
        self._text_stim = visual.TextStim(
            win, text='', pos=(0, layout['stimulus_y']),
            height=layout['stimulus_text_height'], color='white', font=font,
            wrapWidth=layout['stimulus_box_w'],
        )
        self._writing_stim = visual.TextStim(
            win, text='', pos=(0, layout['stimulus_y']),
            height=layout['writing_text_height'], color='white', font=font, bold=True,
        )
        self._image_cache: dict[str, Any] = {}

    def show_instruction(self, text: str, button_text: str, debug_mode: bool) -> None:
        """Display instruction screen with delayed clickable button (blocking).

        Button activates after configured delay (0s in debug mode).
        """
        lines = (text or '').split('\n')
        layout = self._layout
        delay = 0.0 if debug_mode else layout['instruction_button_delay']
        show_start = core.getTime()

        mouse = event.Mouse(win=self._win)
        mouse_was_pressed = False  # Edge detection state

        while True:
            elapsed = core.getTime() - show_start
            clickable = elapsed >= delay

            self._draw_multiline(
                lines,
                center_y=layout['instruction_center_y'],
                line_height=layout['instruction_line_height'],
                spacing=layout['instruction_line_spacing'],
            )
            remaining = int(max(0, delay - elapsed))
            label = button_text if clickable else f"{button_text} ({remaining}s)"
            btn_rect = self.draw_button(
                mouse, label,
                pos=(layout['button_x'], layout['instruction_button_y']),
                width=layout['button_width'],
                enabled=clickable,
            )
            self._win.flip()

            mouse_is_pressed = any(mouse.getPressed())
            mouse_just_released = mouse_was_pressed and not mouse_is_pressed
            mouse_was_pressed = mouse_is_pressed

            if clickable and mouse_just_released and btn_rect.contains(mouse):
                break

    def show_completion(
        self,
        lines: Sequence[str] | None = None,
        colors: list[str] | None = None,
        seconds: float = 3.0,
    ) -> None:
        """Display completion screen for a fixed duration (blocking)."""
        if lines is None:
            lines = ['Test complete', 'Thank you!']
        if colors is None:
            colors = ['green', 'white']
        end_time = core.getTime() + max(0.0, seconds)
        while core.getTime() < end_time:
            self._draw_multiline(
                lines,
                center_y=0.05,
                line_height=0.065,
                colors=colors,
                bold_idx={0},
            )
            self._win.flip()

    def draw_item_list(
        self,
        mouse: Any,
        view: ItemListView,
        items: Sequence[StimulusItem],
        page: int,
        message: str = '',
    ) -> list[tuple[tuple[str, str | None], Any, bool]]:
        """Draw the pre-test item list (no flip).

        Returns:
            (action, rect, enabled) targets for ItemListView.handle_click
        """
        layout = self._layout
        font = layout['font_main']
        text_h = layout['list_text_height']
        targets = []

        visual.TextStim(
            self._win, text=view.title(items, page), pos=(0, layout['header_y']),
            height=layout['header_font_size'], color='white', font=font, bold=True,
        ).draw()

        if not items:
            visual.TextStim(
                self._win, text='No items loaded. Use "Add Files" to choose stimuli.',
                pos=(0, layout['list_top_y']), height=text_h, color='gray', font=font,
            ).draw()

        for row, (index, item) in enumerate(view.visible(items, page)):
            y = view.row_y(row)
            visual.TextStim(
                self._win, text=view.row_text(index, item), pos=(layout['list_label_x'], y),
                height=text_h, color='white', font=font, anchorHoriz='left',
                wrapWidth=layout['list_delete_x'] - layout['list_delete_w'] - layout['list_label_x'],
            ).draw()
            rect = self.draw_button(
                mouse, 'Delete', pos=(layout['list_delete_x'], y), width=layout['list_delete_w'],
            )
            targets.append(((DELETE, item.id), rect, True))

        specs = view.action_specs(len(items)) + view.page_specs(len(items), page)
        for (action, label, enabled), pos in zip(specs, view.action_positions(len(specs))):
            rect = self.draw_button(
                mouse, label, pos=pos, width=layout['list_action_w'], enabled=enabled,
            )
            targets.append((action, rect, enabled))

        if message:
            visual.TextStim(
                self._win, text=message, pos=(0, layout['list_message_y']),
                height=text_h, color='yellow', font=font,
            ).draw()
        return targets

    def draw_header(self, snap: RunSnapshot) -> None:
        """Draw timer (left), pause tag (centre) and item position (right)."""
        self.draw_timer(snap.seconds_remaining, self._layout['timer_red_threshold'])
        if snap.status is RunStatus.PAUSED:
            self._status_stim.draw()
        if snap.total:
            self._position_stim.text = f"{snap.position + 1} / {snap.total}"
            self._position_stim.draw()

    def draw_timer(self, remaining_seconds: int, red_threshold: int | None) -> None:
        """Draw countdown timer (MM:SS format, reuses pre-created TextStim)."""
        remaining = max(0, int(remaining_seconds))
        mins, secs = divmod(remaining, 60)
        self._timer_stim.text = f"Time remaining: {mins:02d}:{secs:02d}"
        self._timer_stim.color = (
            'red' if (red_threshold is not None and remaining <= red_threshold) else 'white'
        )
        self._timer_stim.draw()

    def draw_stimulus(self, item: StimulusItem | None, writing: bool, writing_prompt: str) -> None:
        """Draw the current phase: writing prompt, text stimulus or image."""
        if item is None:
            return
        if writing:
            self._writing_stim.text = writing_prompt
            self._writing_stim.draw()
            return
        if item.is_text:
            self._text_stim.text = item.payload
            self._text_stim.draw()
            return
        self._draw_image(item)

    def _draw_image(self, item: StimulusItem) -> None:
        path = item.payload
        if not file_exists_nonempty(path):
            self._text_stim.text = f"{item.label}\n(image missing)"
            self._text_stim.draw()
            return
        img = self._image_cache.get(path)
        if img is None:
            layout = self._layout
            disp_w, disp_h = fitted_size_keep_aspect(
                path, layout['stimulus_box_w'], layout['stimulus_box_h']
            )
            img = visual.ImageStim(
                self._win, image=path, pos=(0, layout['stimulus_y']), size=(disp_w, disp_h),
            )
            self._image_cache[path] = img
        img.draw()

    def draw_button(
        self,
        mouse: Any,
        label: str,
        pos: tuple[float, float],
        width: float,
        enabled: bool = True,
    ) -> Any:
        """Draw a button with hover effect (returns rect for hit testing)."""
        layout = self._layout
        rect = visual.Rect(
            self._win,
            width=width,
            height=layout['button_height'],
            pos=pos,
            lineWidth=layout['button_line_width'],
        )
        hovered = enabled and rect.contains(mouse)
        if not enabled:
            rect.fillColor = layout['button_fill_disabled']
            rect.lineColor = layout['button_outline_disabled']
        elif hovered:
            rect.fillColor = layout['button_fill_hover']
            rect.lineColor = layout['button_outline_hover']
        else:
            rect.fillColor = layout['button_fill_normal']
            rect.lineColor = layout['button_outline_normal']
        text = visual.TextStim(
            self._win, text=label, pos=pos,
            height=layout['button_label_height'],
            color='white' if enabled else 'gray', font=layout['font_main'],
        )
        rect.draw()
        text.draw()
        return rect

    def _draw_multiline(
        self,
        lines: Sequence[str],
        center_y: float,
        line_height: float,
        spacing: float = 1.5,
        colors: list[str] | None = None,
        bold_idx: set[int] | None = None,
    ) -> None:
        """Draw vertically-centered multi-line text (internal helper)."""
        lines = list(lines or [])
        n = len(lines)
        if n == 0:
            return
        total = line_height * spacing * (n - 1)
        start_y = center_y + total / 2.0

        for i, text in enumerate(lines):
            y = start_y - i * (line_height * spacing)
            color = colors[i] if (colors and i < len(colors)) else 'white'
            visual.TextStim(
                self._win, text=text or '', pos=(0, y), height=line_height,
                color=color, font=self._layout['font_main'],
                bold=bool(bold_idx and i in bold_idx),
            ).draw()
