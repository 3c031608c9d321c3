"""
Tariff access scope selection over the club ⊇ section ⊇ group hierarchy.

The selector holds three explicit id sets and a read-only containment index.
"Fully selected" is never stored: a node counts as selected when its own id
is in its set or an ancestor's id is in the ancestor's set.

Selecting a parent also records every descendant id explicitly; deselecting
it removes them again. Children of a selected parent cannot be toggled on
their own.

Only ids present in the index can be selected, whether seeded or toggled.
The index is built from the clubs the caller manages, so anything else is
refused with ``ScopeForbiddenError``.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from libs.common.errors import ServiceError
from services.staff_service.models import PackageType
from services.staff_service.schemas.backend import SectionRecord

ACCESS_REQUIRED = "access_required"


class ScopeLockedError(ServiceError):
    """A child was toggled while an ancestor already covers it."""

    status_code = 409
    code = "scope_locked"


class ScopeForbiddenError(ServiceError):
    """An id is unknown or belongs to a club the caller does not manage."""

    status_code = 403
    code = "scope_forbidden"


@dataclass(frozen=True)
class ContainmentIndex:
    club_ids: tuple[int, ...] = ()
    club_sections: dict[int, list[int]] = field(default_factory=dict)
    section_groups: dict[int, list[int]] = field(default_factory=dict)
    section_club: dict[int, int] = field(default_factory=dict)
    group_section: dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_sections(
        cls,
        sections: Iterable[SectionRecord],
        club_ids: Optional[Iterable[int]] = None,
    ) -> "ContainmentIndex":
        """Index ``sections``; with ``club_ids``, only those clubs are kept."""
        allowed = None if club_ids is None else list(dict.fromkeys(club_ids))
        club_sections: dict[int, list[int]] = {}
        section_groups: dict[int, list[int]] = {}
        section_club: dict[int, int] = {}
        group_section: dict[int, int] = {}
        for section in sections:
            if allowed is not None and section.club_id not in allowed:
                continue
            club_sections.setdefault(section.club_id, []).append(section.id)
            section_club[section.id] = section.club_id
            group_ids = [group.id for group in section.groups]
            section_groups[section.id] = group_ids
            for group_id in group_ids:
                group_section[group_id] = section.id
        return cls(
            club_ids=tuple(allowed if allowed is not None else club_sections),
            club_sections=club_sections,
            section_groups=section_groups,
            section_club=section_club,
            group_section=group_section,
        )

    def has_club(self, club_id: int) -> bool:
        return club_id in self.club_ids

    def has_section(self, section_id: int) -> bool:
        return section_id in self.section_club

    def has_group(self, group_id: int) -> bool:
        return group_id in self.group_section

    def sections_of(self, club_id: int) -> list[int]:
        return list(self.club_sections.get(club_id, []))

    def groups_of_section(self, section_id: int) -> list[int]:
        return list(self.section_groups.get(section_id, []))

    def groups_of_club(self, club_id: int) -> list[int]:
        return [
            group_id
            for section_id in self.sections_of(club_id)
            for group_id in self.groups_of_section(section_id)
        ]


class AccessScopeSelector:
    def __init__(
        self,
        index: ContainmentIndex,
        *,
        clubs: Iterable[int] = (),
        sections: Iterable[int] = (),
        groups: Iterable[int] = (),
    ):
        """
        Raises:
            ScopeForbiddenError: when a seeded id is not in ``index``.
        """
        self.index = index
        self.selected_clubs: set[int] = set(clubs)
        self.selected_sections: set[int] = set(sections)
        self.selected_groups: set[int] = set(groups)
        self._require("club_ids", self.selected_clubs, index.has_club)
        self._require("section_ids", self.selected_sections, index.has_section)
        self._require("group_ids", self.selected_groups, index.has_group)

    @staticmethod
    def _require(
        field_name: str, ids: Iterable[int], known: Callable[[int], bool]
    ) -> None:
        outside = sorted(i for i in ids if not known(i))
        if outside:
            raise ScopeForbiddenError(
                f"Cannot target {field_name} {outside}",
                details={field_name: outside},
            )

    # --- toggles ---

    def toggle_club(self, club_id: int) -> bool:
        """Flip a club with its whole subtree. Returns the new state."""
        self._require("club_ids", [club_id], self.index.has_club)
        section_ids = self.index.sections_of(club_id)
        group_ids = self.index.groups_of_club(club_id)

        if club_id in self.selected_clubs:
            self.selected_clubs.discard(club_id)
            self.selected_sections.difference_update(section_ids)
            self.selected_groups.difference_update(group_ids)
            return False

        self.selected_clubs.add(club_id)
        self.selected_sections.update(section_ids)
        self.selected_groups.update(group_ids)
        return True

    def toggle_section(self, section_id: int) -> bool:
        self._require("section_ids", [section_id], self.index.has_section)
        club_id = self.index.section_club.get(section_id)
        if club_id is not None and club_id in self.selected_clubs:
            raise ScopeLockedError(
                f"Section {section_id} is covered by selected club {club_id}"
            )

        group_ids = self.index.groups_of_section(section_id)
        if section_id in self.selected_sections:
            self.selected_sections.discard(section_id)
            self.selected_groups.difference_update(group_ids)
            return False

        self.selected_sections.add(section_id)
        self.selected_groups.update(group_ids)
        return True

    def toggle_group(self, group_id: int) -> bool:
        self._require("group_ids", [group_id], self.index.has_group)
        section_id = self.index.group_section.get(group_id)
        if section_id is not None and self.is_section_fully_selected(section_id):
            raise ScopeLockedError(
                f"Group {group_id} is covered by a selected section or club"
            )

        if group_id in self.selected_groups:
            self.selected_groups.discard(group_id)
            return False
        self.selected_groups.add(group_id)
        return True

    # --- queries ---

    def is_club_fully_selected(self, club_id: int) -> bool:
        return club_id in self.selected_clubs

    def is_section_fully_selected(self, section_id: int) -> bool:
        club_id = self.index.section_club.get(section_id)
        if club_id is not None and club_id in self.selected_clubs:
            return True
        return section_id in self.selected_sections

    def is_group_selected(self, group_id: int, parent_section_id: int) -> bool:
        if self.is_section_fully_selected(parent_section_id):
            return True
        return group_id in self.selected_groups

    @property
    def is_empty(self) -> bool:
        return not (self.selected_clubs or self.selected_sections or self.selected_groups)

    def package_type(self) -> PackageType:
        """Classify the current selection; recomputed on every call."""
        if self.selected_clubs:
            return PackageType.FULL_CLUB
        if self.selected_sections and not self.selected_groups:
            return PackageType.FULL_SECTION
        if len(self.selected_groups) == 1:
            return PackageType.SINGLE_GROUP
        return PackageType.MULTIPLE_GROUPS

    def selection_summary(self) -> dict:
        if self.selected_clubs:
            return {"type": "clubs", "count": len(self.selected_clubs)}
        if self.selected_sections:
            return {"type": "sections", "count": len(self.selected_sections)}
        if self.selected_groups:
            return {"type": "groups", "count": len(self.selected_groups)}
        return {"type": "none", "count": 0}

    def validate(self) -> dict[str, str]:
        if self.is_empty:
            return {"access": ACCESS_REQUIRED}
        return {}

    def as_lists(self) -> dict[str, list[int]]:
        return {
            "club_ids": sorted(self.selected_clubs),
            "section_ids": sorted(self.selected_sections),
            "group_ids": sorted(self.selected_groups),
        }
