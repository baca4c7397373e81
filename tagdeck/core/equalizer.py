"""
Equalizer parameters forwarded to an external audio graph.
No signal processing happens here; values are clamped and passed through.
"""

from typing import Protocol


GAIN_RANGE = (0, 200)
BAND_RANGE = (-15, 15)


class AudioGraph(Protocol):
    def apply(self, gain, bass, mid, treble):
        """Apply master gain (percent) and bass/mid/treble gain (dB)"""


def _clamp(value, bounds):
    low, high = bounds
    return max(low, min(high, value))


class EqualizerSettings:
    """Master gain and three band gains, pushed to the graph on every change"""

    def __init__(self, gain=100, bass=0, mid=0, treble=0, graph=None):
        self.gain = _clamp(gain, GAIN_RANGE)
        self.bass = _clamp(bass, BAND_RANGE)
        self.mid = _clamp(mid, BAND_RANGE)
        self.treble = _clamp(treble, BAND_RANGE)
        self.graph = graph

    def attach(self, graph):
        """Connect a graph and push the current values to it"""
        self.graph = graph
        self._forward()

    def set_gain(self, percent):
        self.gain = _clamp(percent, GAIN_RANGE)
        self._forward()

    def set_bass(self, db):
        self.bass = _clamp(db, BAND_RANGE)
        self._forward()

    def set_mid(self, db):
        self.mid = _clamp(db, BAND_RANGE)
        self._forward()

    def set_treble(self, db):
        self.treble = _clamp(db, BAND_RANGE)
        self._forward()

    def as_dict(self):
        return {"gain": self.gain, "bass": self.bass, "mid": self.mid, "treble": self.treble}

    def _forward(self):
        if self.graph is not None:
            self.graph.apply(self.gain, self.bass, self.mid, self.treble)
