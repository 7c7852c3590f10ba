import os, sys
import unittest

# Ensure src/ is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from models import StimulusItem, StimulusKind
from utils import DEFAULT_DURATIONS, build_sequence, resolve_duration

V = StimulusKind.VISUAL_PROMPT
W = StimulusKind.WORD_PROMPT
S = StimulusKind.SENTENCE_PROMPT
O = StimulusKind.OTHER


def make(kind, label):
    return StimulusItem(kind=kind, label=label, payload=label)


class TestBuildSequence(unittest.TestCase):
    def test_orders_by_kind_and_keeps_insertion_order(self):
        pool = [
            make(S, 's1'), make(W, 'w1'), make(O, 'o1'), make(V, 'v1'),
            make(W, 'w2'), make(S, 's2'), make(V, 'v2'),
        ]
        labels = [item.label for item in build_sequence(pool)]
        self.assertEqual(labels, ['v1', 'v2', 'w1', 'w2', 's1', 's2', 'o1'])

    def test_idempotent(self):
        pool = [make(W, 'w1'), make(V, 'v1'), make(W, 'w2'), make(S, 's1')]
        first = build_sequence(pool)
        self.assertEqual(first, build_sequence(pool))
        self.assertEqual(first, build_sequence(first))

    def test_empty_pool(self):
        self.assertEqual(build_sequence([]), ())


class TestResolveDuration(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(resolve_duration(V, False), 30)
        self.assertEqual(resolve_duration(W, False), 15)
        self.assertEqual(resolve_duration(S, False), 30)
        self.assertEqual(resolve_duration(O, False), 15)

    def test_writing_wins_over_kind(self):
        for kind in StimulusKind:
            self.assertEqual(resolve_duration(kind, True), 240)

    def test_pure(self):
        for kind in StimulusKind:
            for writing in (False, True):
                self.assertEqual(resolve_duration(kind, writing), resolve_duration(kind, writing))

    def test_configured_durations_with_fallback(self):
        durations = {'word_prompt': 3, 'writing': 10}
        self.assertEqual(resolve_duration(W, False, durations), 3)
        self.assertEqual(resolve_duration(V, True, durations), 10)
        self.assertEqual(resolve_duration(S, False, durations), DEFAULT_DURATIONS['sentence_prompt'])

if __name__ == '__main__':
    unittest.main()
