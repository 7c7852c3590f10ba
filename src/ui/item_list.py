"""ItemListView: layout and hit testing for the pre-test item screen.

The screen lists the pool (file name + preview) with a Delete button per row,
and an action row with Add Files / Delete All / Start Test / Quit. Paging
arrows appear when the pool does not fit on one page.
"""
from __future__ import annotations

from typing import Any, Sequence

from models import StimulusItem
from stimulus_types import LayoutConfig

ADD_FILES = 'add_files'
DELETE = 'delete'
DELETE_ALL = 'delete_all'
START = 'start'
QUIT = 'quit'
PAGE_PREV = 'page_prev'
PAGE_NEXT = 'page_next'

PREVIEW_CHARS = 40


class ItemListView:
    """Pure description of the item screen; Renderer does the drawing.

    Actions are (name, item_id) tuples; item_id is only set for DELETE.
    """

    def __init__(self, layout: LayoutConfig, rows_per_page: int = 8) -> None:
        self._layout = layout
        self.rows_per_page = rows_per_page

    # =========================================================================
    # PAGING
    # =========================================================================

    def page_count(self, n_items: int) -> int:
        return max(1, -(-n_items // self.rows_per_page))

    def clamp_page(self, page: int, n_items: int) -> int:
        return max(0, min(page, self.page_count(n_items) - 1))

    def visible(self, items: Sequence[StimulusItem], page: int) -> list[tuple[int, StimulusItem]]:
        """(global_index, item) pairs shown on ``page``."""
        start = self.clamp_page(page, len(items)) * self.rows_per_page
        return list(enumerate(items))[start:start + self.rows_per_page]

    # =========================================================================
    # CONTENT
    # =========================================================================

    def row_text(self, index: int, item: StimulusItem) -> str:
        return f"{index + 1}. {item.label}  |  {item.preview(PREVIEW_CHARS)}"

    def row_y(self, row: int) -> float:
        layout = self._layout
        return layout['list_top_y'] - row * layout['list_row_h']

    def title(self, items: Sequence[StimulusItem], page: int) -> str:
        total_pages = self.page_count(len(items))
        suffix = f"  (page {self.clamp_page(page, len(items)) + 1}/{total_pages})" if total_pages > 1 else ''
        return f"Loaded items: {len(items)}{suffix}"

    def action_specs(self, n_items: int) -> list[tuple[tuple[str, str | None], str, bool]]:
        """Bottom action row as (action, label, enabled), left to right."""
        return [
            ((ADD_FILES, None), 'Add Files', True),
            ((DELETE_ALL, None), 'Delete All', n_items > 0),
            ((START, None), 'Start Test', n_items > 0),
            ((QUIT, None), 'Quit', True),
        ]

    def page_specs(self, n_items: int, page: int) -> list[tuple[tuple[str, str | None], str, bool]]:
        if self.page_count(n_items) <= 1:
            return []
        page = self.clamp_page(page, n_items)
        return [
            ((PAGE_PREV, None), '◄', page > 0),
            ((PAGE_NEXT, None), '►', page < self.page_count(n_items) - 1),
        ]

    def action_positions(self, count: int) -> list[tuple[float, float]]:
        layout = self._layout
        w = layout['list_action_w']
        gap = layout['controls_gap']
        span = count * w + (count - 1) * gap
        x0 = -span / 2.0 + w / 2.0
        return [(x0 + i * (w + gap), layout['list_actions_y']) for i in range(count)]

    # =========================================================================
    # EVENT HANDLING
    # =========================================================================

    def handle_click(
        self,
        targets: list[tuple[tuple[str, str | None], Any, bool]],
        mouse: Any,
    ) -> tuple[str, str | None] | None:
        """Return the action of the enabled target under the mouse, if any."""
        for action, rect, enabled in targets:
            if enabled and rect.contains(mouse):
                return action
        return None
