import json, tempfile
from pathlib import Path
from unittest import TestCase

import storage
from controller import PlaybackController
from policy import RepeatMode
from fakes import FakeRig


class StorageTests(TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "cfg" / "settings.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_gives_defaults(self):
        self.assertEqual(storage.load(self.path), storage.defaults())

    def test_save_and_load(self):
        state = storage.defaults()
        state["volume"] = 0.3
        storage.save(state, self.path)
        self.assertEqual(storage.load(self.path)["volume"], 0.3)

    def test_second_save_keeps_backup(self):
        storage.save(dict(storage.defaults(), volume=0.1), self.path)
        storage.save(dict(storage.defaults(), volume=0.2), self.path)
        bak = json.loads(self.path.with_suffix(".bak").read_text(encoding="utf-8"))
        self.assertEqual(bak["volume"], 0.1)

    def test_corrupt_file_rolls_back_to_backup(self):
        storage.save(dict(storage.defaults(), repeat="all"), self.path)
        storage.save(dict(storage.defaults(), repeat="one"), self.path)
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(storage.load(self.path)["repeat"], "all")
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8"))["repeat"], "all")

    def test_unknown_keys_dropped_missing_keys_defaulted(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"volume": 0.5, "theme": "Neo Noir"}), encoding="utf-8")
        state = storage.load(self.path)
        self.assertEqual(state["volume"], 0.5)
        self.assertNotIn("theme", state)
        self.assertEqual(state["repeat"], "off")

    def test_apply_and_capture(self):
        ctl = PlaybackController(FakeRig())
        ctl.add_tracks(["a", "b", "c"])
        storage.apply(ctl, dict(storage.defaults(), volume=3.0, repeat="one", shuffle=True))
        self.assertEqual(ctl.volume, 1.0)
        self.assertIs(ctl.repeat_mode, RepeatMode.ONE)
        self.assertTrue(ctl.shuffle_enabled)
        ctl.set_volume(0.25)
        out = storage.capture(ctl, {})
        self.assertEqual(out, {"volume": 0.25, "shuffle": True, "repeat": "one"})

    def test_apply_ignores_bad_repeat(self):
        ctl = PlaybackController(FakeRig())
        storage.apply(ctl, dict(storage.defaults(), repeat="sometimes"))
        self.assertIs(ctl.repeat_mode, RepeatMode.OFF)

    def test_apply_ignores_bad_volume(self):
        ctl = PlaybackController(FakeRig(), volume=0.6)
        storage.apply(ctl, dict(storage.defaults(), volume="loud", repeat="all"))
        self.assertEqual(ctl.volume, 0.6)
        self.assertIs(ctl.repeat_mode, RepeatMode.ALL)
