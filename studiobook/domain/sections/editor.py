"""
Section editor
Optimistic edit controller for one ordered collection of typed sections
(a project's brief or its logistics).

``sections`` is what the user sees; ``original_sections`` is the last state
the backend confirmed. Only a successful save or a load moves the baseline.
"""

import copy
import logging
from enum import Enum
from typing import Callable, List, Optional

from ...exceptions import SectionStateError
from ...notifications import Notifier
from ...schemas import ApiResult, ContentType, Section
from ...services.section_service import SECTION_TYPES, SectionService
from .snapshot import OptimisticChange, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPES = {"brief": "text", "logistics": "list"}

SECTION_LABELS = {"brief": "Brief", "logistics": "Logistics"}


class EditorState(str, Enum):
    VIEW = "view"
    EDITING = "editing"
    SAVING = "saving"


def blank_content(content_type: ContentType):
    return [""] if content_type == "list" else ""


class SectionEditor:
    """Edit/save/rollback state machine for one section collection"""

    def __init__(
        self,
        project_id: str,
        section_type: str,
        section_service: SectionService,
        notifier: Notifier,
        sections: Optional[List[Section]] = None,
        on_saved: Optional[Callable[[List[Section]], None]] = None,
    ):
        if section_type not in SECTION_TYPES:
            raise SectionStateError(f"Unknown section type: {section_type}")

        self.project_id = project_id
        self.section_type = section_type
        self.section_service = section_service
        self.notifier = notifier
        self.on_saved = on_saved

        self.state = EditorState.VIEW
        self.editing_id: Optional[int] = None
        self.sections: List[Section] = []
        self.original_sections: List[Section] = []
        self.seed(sections or [])

    @property
    def label(self) -> str:
        return SECTION_LABELS[self.section_type]

    @property
    def is_saving(self) -> bool:
        return self.state == EditorState.SAVING

    @property
    def is_dirty(self) -> bool:
        return self.sections != self.original_sections

    def seed(self, sections: List[Section]) -> None:
        """Replace both the live collection and the baseline"""
        self.sections = copy.deepcopy(list(sections))
        self.original_sections = copy.deepcopy(list(sections))
        self.state = EditorState.VIEW
        self.editing_id = None

    async def load(self) -> ApiResult:
        """Fetch the collection from the backend"""
        if self.is_saving:
            return ApiResult.failure("Save in progress")

        result = await self.section_service.get_sections(self.project_id)
        if not result.success:
            self.notifier.error(result.message or f"Failed to load {self.section_type}")
            return result

        self.seed(getattr(result.data, self.section_type))
        return result

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _find(self, section_id: int) -> Section:
        for section in self.sections:
            if section.id == section_id:
                return section
        raise SectionStateError(f"No {self.section_type} section with id {section_id}")

    def _editing(self, section_id: int) -> Section:
        if self.state != EditorState.EDITING or self.editing_id != section_id:
            raise SectionStateError(f"Section {section_id} is not being edited")
        return self._find(section_id)

    def next_id(self) -> int:
        return max((s.id for s in self.sections), default=0) + 1

    def add_section(self, content_type: Optional[ContentType] = None) -> Optional[Section]:
        """Prepend a blank section and make it the edit target"""
        if self.is_saving:
            self.notifier.warning("Wait for the current save to finish")
            return None

        content_type = content_type or DEFAULT_CONTENT_TYPES[self.section_type]
        section = Section(
            id=self.next_id(),
            type=content_type,
            title="",
            content=blank_content(content_type),
            order=0,
        )
        self.sections.insert(0, section)
        self.state = EditorState.EDITING
        self.editing_id = section.id
        return section

    def edit(self, section_id: int) -> None:
        if self.is_saving:
            raise SectionStateError("Cannot edit while saving")
        self._find(section_id)
        self.state = EditorState.EDITING
        self.editing_id = section_id

    def set_title(self, section_id: int, title: str) -> None:
        self._editing(section_id).title = title

    def set_text(self, section_id: int, text: str) -> None:
        section = self._editing(section_id)
        if section.type != "text":
            raise SectionStateError(f"Section {section_id} is a list")
        section.content = text

    def add_item(self, section_id: int, text: str = "") -> None:
        section = self._editing(section_id)
        if section.type != "list":
            raise SectionStateError(f"Section {section_id} is not a list")
        section.content.append(text)

    def set_item(self, section_id: int, position: int, text: str) -> None:
        section = self._editing(section_id)
        if section.type != "list" or not 0 <= position < len(section.content):
            raise SectionStateError(f"No item {position} in section {section_id}")
        section.content[position] = text

    def remove_item(self, section_id: int, position: int) -> None:
        section = self._editing(section_id)
        if section.type != "list" or not 0 <= position < len(section.content):
            raise SectionStateError(f"No item {position} in section {section_id}")
        section.content.pop(position)

    def set_content_type(self, section_id: int, content_type: ContentType) -> None:
        """Switch between text and list, converting the content"""
        section = self._editing(section_id)
        if section.type == content_type:
            return
        converted = Section.model_validate({**section.model_dump(), "type": content_type})
        self.sections[self.sections.index(section)] = converted

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _ordered(self, sections: List[Section]) -> List[Section]:
        return [s.model_copy(update={"order": position}, deep=True) for position, s in enumerate(sections)]

    async def save(self) -> ApiResult:
        """
        Send the whole collection.

        On failure nothing is changed here and the previous state comes back;
        callers that mutated optimistically restore their own snapshot.
        """
        if self.is_saving:
            return ApiResult.failure("Save already in progress")

        previous_state = self.state
        self.state = EditorState.SAVING
        outgoing = self._ordered(self.sections)

        result = await self.section_service.update_sections(self.project_id, self.section_type, outgoing)
        if not result.success:
            self.state = previous_state
            self.notifier.error(result.message or f"Failed to save {self.section_type}")
            return result

        saved = result.data if isinstance(result.data, list) else outgoing
        self.sections = copy.deepcopy(saved)
        self.original_sections = copy.deepcopy(saved)
        self.state = EditorState.VIEW
        self.editing_id = None
        self.notifier.success(f"{self.label} saved successfully")
        if self.on_saved:
            self.on_saved(copy.deepcopy(saved))
        return result

    async def save_section(self) -> ApiResult:
        """Save the open edit; on failure the edit stays open and unchanged"""
        if self.state != EditorState.EDITING:
            raise SectionStateError("No section is being edited")

        editing_id = self.editing_id
        snapshot = Snapshot.capture(self.sections)
        result = await self.save()
        if not result.success:
            self.sections = snapshot.restore()
            self.state = EditorState.EDITING
            self.editing_id = editing_id
        return result

    def cancel(self) -> None:
        if self.is_saving:
            raise SectionStateError("Cannot cancel while saving")
        self.sections = copy.deepcopy(self.original_sections)
        self.state = EditorState.VIEW
        self.editing_id = None

    async def delete(self, section_id: int) -> ApiResult:
        """Remove a section and save; a failed save puts it back where it was"""
        if self.is_saving:
            return ApiResult.failure("Save already in progress")
        self._find(section_id)

        if self.editing_id == section_id:
            self.state = EditorState.VIEW
            self.editing_id = None

        change = OptimisticChange(
            get_state=lambda: self.sections,
            set_state=self._set_sections,
            mutate=lambda sections: [s for s in sections if s.id != section_id],
        )
        return await change.run(lambda _: self.save())

    def _set_sections(self, sections: List[Section]) -> None:
        self.sections = sections
