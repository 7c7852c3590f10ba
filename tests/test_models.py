import dataclasses
import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from models import (  # noqa: E402
    OperationResult,
    Rejection,
    RunSnapshot,
    RunStatus,
    StimulusItem,
    StimulusKind,
)


class TestStimulusItem(unittest.TestCase):
    def test_items_are_immutable(self):
        item = StimulusItem(StimulusKind.WORD_PROMPT, 'WAT_1.txt', 'river')
        with self.assertRaises(dataclasses.FrozenInstanceError):
            item.payload = 'changed'

    def test_ids_are_unique(self):
        a = StimulusItem(StimulusKind.WORD_PROMPT, 'WAT_1.txt', 'river')
        b = StimulusItem(StimulusKind.WORD_PROMPT, 'WAT_1.txt', 'river')
        self.assertNotEqual(a.id, b.id)

    def test_preview(self):
        text = StimulusItem(StimulusKind.SENTENCE_PROMPT, 'SRT.txt', 'x' * 150)
        self.assertEqual(len(text.preview()), 100)
        image = StimulusItem(StimulusKind.VISUAL_PROMPT, 'TAT_01.png', '/tmp/TAT_01.png', is_text=False)
        self.assertEqual(image.preview(), '[image] TAT_01.png')


class TestRunSnapshot(unittest.TestCase):
    def _snap(self, **kw):
        base = dict(
            status=RunStatus.RUNNING, position=0, writing_subphase=False,
            seconds_remaining=10, transition_locked=False, total=3,
        )
        base.update(kw)
        return RunSnapshot(**base)

    def test_navigation_flags(self):
        first = self._snap()
        self.assertTrue(first.can_advance)
        self.assertFalse(first.can_retreat)
        last = self._snap(position=2)
        self.assertFalse(last.can_advance)
        self.assertTrue(last.can_retreat)
        self.assertTrue(self._snap(position=2, writing_subphase=True).can_advance)

    def test_locked_or_paused_disables_navigation(self):
        self.assertFalse(self._snap(position=1, transition_locked=True).can_advance)
        self.assertFalse(self._snap(position=1, status=RunStatus.PAUSED).can_retreat)
        self.assertTrue(self._snap(status=RunStatus.PAUSED).is_active)

    def test_phase_label(self):
        item = StimulusItem(StimulusKind.VISUAL_PROMPT, 'TAT_01.png', 'p', is_text=False)
        self.assertEqual(self._snap(item=item).phase_label, 'visual_prompt')
        self.assertEqual(self._snap(item=item, writing_subphase=True).phase_label, 'writing')
        self.assertEqual(self._snap().phase_label, '')


class TestOperationResult(unittest.TestCase):
    def test_truthiness(self):
        self.assertTrue(OperationResult.success('ok'))
        rejected = OperationResult.rejected(Rejection.EMPTY_SEQUENCE, 'nothing to run')
        self.assertFalse(rejected)
        self.assertIs(rejected.reason, Rejection.EMPTY_SEQUENCE)

if __name__ == '__main__':
    unittest.main()
