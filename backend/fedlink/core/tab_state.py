"""Tab State — top-level section selector kept in sync with the current route, both ways.

Invariants:
    - select(section) updates the selector and returns the section's canonical path
    - sync_from_path(path) updates the selector for deep links and back/forward
      navigation; paths outside every section leave the selector unchanged
    - The profile tab's canonical path includes the signed-in user's id when known
"""

from dataclasses import dataclass

from fedlink.core.client_routes import normalize_path, profile_path
from fedlink.core.domain_types import Section

_SECTION_PREFIXES: tuple[tuple[str, Section], ...] = (
    ("/profile", Section.PROFILE),
    ("/services", Section.SERVICES),
    ("/admin", Section.ADMIN),
    ("/instance-setup", Section.ADMIN),
)


def section_for_path(path: str) -> Section | None:
    normalized = normalize_path(path)
    if normalized == "/":
        return Section.HOME
    for prefix, section in _SECTION_PREFIXES:
        if normalized == prefix or normalized.startswith(prefix + "/"):
            return section
    return None


def canonical_path(section: Section, user_id: int | None = None) -> str:
    if section == Section.HOME:
        return "/"
    if section == Section.PROFILE:
        return profile_path(user_id)
    return f"/{section.value}"


@dataclass
class TabState:
    selected: Section = Section.HOME

    def select(self, section: Section, user_id: int | None = None) -> str:
        self.selected = section
        return canonical_path(section, user_id)

    def sync_from_path(self, path: str) -> Section:
        section = section_for_path(path)
        if section is not None:
            self.selected = section
        return self.selected
