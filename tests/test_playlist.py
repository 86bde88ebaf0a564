import random
from unittest import TestCase

from playlist import Playlist


class PlaylistTests(TestCase):
    def setUp(self):
        self.pl = Playlist()
        for t in ("a", "b", "c", "d"):
            self.pl.add(t)

    def test_add_rejects_duplicates(self):
        self.assertFalse(self.pl.add("b"))
        self.assertTrue(self.pl.add("e"))
        self.assertEqual(len(self.pl), 5)
        self.assertEqual(self.pl.original(), ["a", "b", "c", "d", "e"])

    def test_remove_at_uses_identity_in_original(self):
        self.pl.shuffle(random.Random(3))
        victim = self.pl.at(1)
        self.assertEqual(self.pl.remove_at(1), victim)
        self.assertNotIn(victim, self.pl)
        self.assertEqual(len(self.pl.original()), 3)
        self.assertEqual(sorted(self.pl.tracks()), sorted(self.pl.original()))

    def test_remove_at_out_of_range(self):
        for bad in (-1, 4, 99):
            with self.assertRaises(IndexError):
                self.pl.remove_at(bad)
        self.assertEqual(len(self.pl), 4)

    def test_shuffle_leaves_original_alone(self):
        self.pl.shuffle(random.Random(5))
        self.assertEqual(sorted(self.pl.tracks()), ["a", "b", "c", "d"])
        self.assertEqual(self.pl.original(), ["a", "b", "c", "d"])
        self.pl.restore_original_order()
        self.assertEqual(self.pl.tracks(), ["a", "b", "c", "d"])

    def test_index_of(self):
        self.assertEqual(self.pl.index_of("c"), 2)
        self.assertEqual(self.pl.index_of("zzz"), -1)

    def test_clear(self):
        self.pl.clear()
        self.assertEqual(len(self.pl), 0)
        self.assertEqual(self.pl.original(), [])

    def test_accessors_return_copies(self):
        self.pl.tracks().append("x")
        self.pl.original().clear()
        self.assertEqual(len(self.pl), 4)
        self.assertEqual(list(self.pl), ["a", "b", "c", "d"])
