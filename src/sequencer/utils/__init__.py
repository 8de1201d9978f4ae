"""
Utility functions for the keyframe sequencer
"""

from .math_utils import clamp, remap, lerp
from .enum_helper import EnumHelper

__all__ = [
    'clamp',
    'remap',
    'lerp',
    'EnumHelper',
]
