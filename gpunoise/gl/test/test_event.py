#-*- coding: utf-8 -*-

import unittest

from gpunoise.gl.common import Event

class TestEvent(unittest.TestCase):

    def test_invokes_listeners_in_order(self):
        calls = []
        event = Event()
        event.append(lambda *a, **kw: calls.append(('first', a, kw)))
        event.append(lambda *a, **kw: calls.append(('second', a, kw)))

        event(1, b=2)
        self.assertEqual([('first', (1, ), {'b': 2}), ('second', (1, ), {'b': 2})], calls)

    def test_once(self):
        calls = []
        event = Event()
        event.once(calls.append)

        event('a')
        event('b')
        self.assertEqual(['a'], calls)
        self.assertEqual(0, len(event))

    def test_overflow(self):
        event = Event()
        for _ in range(Event.OVERFLOW + 1):
            event.append(lambda: None)
        with self.assertRaises(OverflowError):
            event.append(lambda: None)
