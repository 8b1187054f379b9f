"""In-memory frame representation and construction."""

from .builder import BuilderAtom, ConFrameBuilder
from .frame import AtomDatum, ConFrame, FrameHeader

__all__ = [
    "AtomDatum",
    "BuilderAtom",
    "ConFrame",
    "ConFrameBuilder",
    "FrameHeader",
]
