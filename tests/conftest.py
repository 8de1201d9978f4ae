"""
Shared fixtures for the sequencer tests.
"""

import sys
from pathlib import Path

import pytest

# Allow running the tests from a source checkout without installing
_SRC = Path(__file__).parent.parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sequencer.engine.sequence import ComponentSequence  # noqa: E402
from sequencer.models.enums import LogLevel  # noqa: E402
from sequencer.models.keyframe import ComponentKeyframe, Keyframe  # noqa: E402
from sequencer.services.memory_document import MemoryDocument, MemoryObject  # noqa: E402
from sequencer.utils.logger import configure_logger  # noqa: E402


class RecordingKeyframe(Keyframe):
    """
    Keyframe with a fixed fingerprint that records how it was applied.

    interpolate_state returns `interpolated` when given, otherwise a
    fingerprint derived from both endpoints and the fraction.
    """

    def __init__(self, time, fingerprint, interpolated=None):
        super().__init__(time)
        self.fingerprint = fingerprint
        self.interpolated = interpolated
        self.calls = []

    def load_state(self, target):
        self.calls.append(("load", target))
        return self.fingerprint

    def interpolate_state(self, target, next_keyframe, fraction):
        self.calls.append(("interpolate", next_keyframe, fraction))
        if self.interpolated is not None:
            return self.interpolated
        return hash((self.fingerprint, next_keyframe.fingerprint, fraction))


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep test output readable; restore defaults afterwards."""
    configure_logger(min_level=LogLevel.ERROR, use_colors=False)
    yield
    configure_logger(min_level=LogLevel.INFO, use_colors=True)


@pytest.fixture
def make_keyframe():
    return RecordingKeyframe


@pytest.fixture
def document():
    return MemoryDocument("test")


@pytest.fixture
def slider(document):
    """Active, solved object with a numeric value and a label."""
    return document.add_object(MemoryObject("Slider", {"value": 0.0, "label": "start"}))


@pytest.fixture
def slider_sequence(document, slider):
    """Slider animated from 0 (t=0) to 100 (t=10)."""
    seq = ComponentSequence(slider.instance_id, document)
    seq.add_keyframe(ComponentKeyframe(0.0, {"value": 0.0, "label": "start"}))
    seq.add_keyframe(ComponentKeyframe(10.0, {"value": 100.0, "label": "end"}))
    return seq
