"""In-memory playback device used to drive the controller from tests."""

from typing import List, Set

from device import Device, DeviceState, DeviceLoadError, DeviceCommandError


class FakeDevice(Device):
    name = "fake"

    def __init__(self, rig: "FakeRig"):
        self.rig     = rig
        self.track   = None
        self._state  = DeviceState.STOPPED
        self.volume  = None
        self.seeks: List[float] = []
        self.pos     = 0.0
        self.len     = 200.0
        self.released = False

    def load(self, track):
        if track in self.rig.unloadable:
            raise DeviceLoadError(f"cannot decode {track}")
        self.track = track
        self.rig.loads.append(track)
        self.rig.live.add(id(self))

    def _loaded(self):
        if self.track is None:
            raise DeviceCommandError("no track loaded")

    def play(self):
        self._loaded()
        self._state = DeviceState.PLAYING

    def pause(self):
        self._loaded()
        self._state = DeviceState.PAUSED

    def stop(self):
        self.track = None
        self._state = DeviceState.STOPPED
        self.released = True
        self.rig.live.discard(id(self))

    def seek(self, fraction):
        self._loaded()
        self.seeks.append(fraction)
        self.pos = fraction * self.len

    def set_volume(self, fraction):
        self.volume = fraction

    def position(self): return self.pos
    def length(self):   return self.len
    def state(self):    return self._state

    # test helpers
    def finish(self):
        self.pos = self.len
        self._state = DeviceState.STOPPED

    def break_down(self):
        self._state = DeviceState.ERROR


class FakeRig:
    """Device factory that remembers every device it handed out."""

    def __init__(self):
        self.devices: List[FakeDevice] = []
        self.unloadable: Set[str] = set()
        self.live: Set[int] = set()
        self.loads: List[str] = []

    def __call__(self, track=None):
        dev = FakeDevice(self)
        self.devices.append(dev)
        return dev

    @property
    def last(self) -> FakeDevice:
        return self.devices[-1]

