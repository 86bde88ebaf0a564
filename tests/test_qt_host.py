from unittest import TestCase, skipIf

try:
    from PySide6.QtCore import QCoreApplication
    import qt_host
except ImportError:
    qt_host = None

from controller import PlaybackController
from fakes import FakeRig


@skipIf(qt_host is None, "PySide6 not available")
class QtHostTests(TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def setUp(self):
        self.rig = FakeRig()
        self.ctl = PlaybackController(self.rig)
        self.host = qt_host.QtPlaybackHost(self.ctl, interval_ms=50)
        self.seen = []
        self.host.stateChanged.connect(lambda m: self.seen.append(("state", m)))
        self.host.trackChanged.connect(lambda i, t: self.seen.append(("track", i, t)))
        self.host.playlistChanged.connect(lambda n: self.seen.append(("playlist", n)))
        self.host.progress.connect(lambda e, t, f: self.seen.append(("progress", e, t, f)))
        self.host.playbackError.connect(lambda k, m: self.seen.append(("error", k)))
        self.host.playlistFinished.connect(lambda: self.seen.append(("finished",)))

    def tearDown(self):
        self.host.shutdown()

    def test_events_relayed_as_signals(self):
        self.ctl.add_tracks(["a.mp3"])
        self.ctl.play()
        self.rig.last.pos = 20.0
        self.ctl.tick()
        self.rig.last.finish()
        self.ctl.tick()
        self.assertEqual(self.seen, [
            ("playlist", 1),
            ("track", 0, "a.mp3"),
            ("state", "playing"),
            ("progress", 20.0, 200.0, 0.1),
            ("state", "stopped"),
            ("progress", 0.0, 0.0, 0.0),
            ("finished",),
        ])

    def test_load_error_relayed(self):
        self.rig.unloadable.add("bad.mp3")
        self.ctl.add_tracks(["bad.mp3"])
        self.ctl.play()
        self.assertIn(("error", "load"), self.seen)

    def test_timer_start_stop(self):
        self.assertFalse(self.host.running)
        self.host.start()
        self.assertTrue(self.host.running)
        self.host.stop()
        self.assertFalse(self.host.running)

    def test_shutdown_closes_controller(self):
        self.ctl.add_tracks(["a.mp3"])
        self.ctl.play()
        self.host.shutdown()
        self.assertFalse(self.ctl.device_loaded)
        self.seen.clear()
        self.ctl.add_tracks(["b.mp3"])
        self.assertEqual(self.seen, [])
