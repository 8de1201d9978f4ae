from sequencer.engine.keyframe_index import KeyframeIndex
from sequencer.engine.sequence import Sequence, ComponentSequence, CameraSequence

__all__ = ['KeyframeIndex', 'Sequence', 'ComponentSequence', 'CameraSequence']
