import random
from unittest import TestCase

import policy
from policy import RepeatMode
from timefmt import format_time, progress_fraction


class NextPreviousTests(TestCase):
    def test_next_is_cyclic(self):
        for count in (1, 2, 5):
            for start in range(count):
                i = start
                for _ in range(count):
                    i = policy.next_index(i, count, False)
                self.assertEqual(i, start)

    def test_previous_wraps_from_zero(self):
        self.assertEqual(policy.previous_index(0, 4, False), 3)
        self.assertEqual(policy.previous_index(3, 4, False), 2)
        self.assertEqual(policy.previous_index(0, 1, False), 0)

    def test_shuffled_pick_is_in_range_and_may_repeat(self):
        rng = random.Random(1)
        picks = [policy.next_index(0, 3, True, rng) for _ in range(200)]
        picks += [policy.previous_index(0, 3, True, rng) for _ in range(200)]
        self.assertEqual(set(picks), {0, 1, 2})

    def test_empty_count_rejected(self):
        with self.assertRaises(ValueError):
            policy.next_index(0, 0, False)
        with self.assertRaises(ValueError):
            policy.previous_index(0, 0, True)


class RepeatCycleTests(TestCase):
    def test_cycle_order(self):
        self.assertIs(policy.cycle_repeat(RepeatMode.OFF), RepeatMode.ALL)
        self.assertIs(policy.cycle_repeat(RepeatMode.ALL), RepeatMode.ONE)
        self.assertIs(policy.cycle_repeat(RepeatMode.ONE), RepeatMode.OFF)


class TimeFormatTests(TestCase):
    def test_format(self):
        self.assertEqual(format_time(0), "00:00")
        self.assertEqual(format_time(65), "01:05")
        self.assertEqual(format_time(3600), "60:00")
        self.assertEqual(format_time(59.9), "00:59")
        self.assertEqual(format_time(6000), "100:00")

    def test_format_missing_or_negative(self):
        self.assertEqual(format_time(None), "00:00")
        self.assertEqual(format_time(-5), "00:00")

    def test_progress_fraction(self):
        self.assertEqual(progress_fraction(30, 120), 0.25)
        self.assertEqual(progress_fraction(5, 0), 0.0)
        self.assertEqual(progress_fraction(130, 120), 1.0)
        self.assertEqual(progress_fraction(-1, 120), 0.0)
