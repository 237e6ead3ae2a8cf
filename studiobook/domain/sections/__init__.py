"""Sections domain - optimistic editing of brief and logistics"""

from .editor import EditorState, SectionEditor
from .snapshot import OptimisticChange, Snapshot

__all__ = ["EditorState", "SectionEditor", "OptimisticChange", "Snapshot"]
