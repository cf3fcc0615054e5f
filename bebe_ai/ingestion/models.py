from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PageDescriptor:
    """A discovered guide page, labelled with where it sits in the navigation."""
    url: str
    section: str
    subsection: str = ""


@dataclass(frozen=True)
class MieuxVivreMetadata:
    title: str
    section: str
    subsection: str
    heading: Optional[str]
    url: str


@dataclass(frozen=True)
class PageMetadata:
    title: str
    section: str
    subsection: str
    url: str

    @classmethod
    def for_page(cls, page: PageDescriptor, title: str) -> "PageMetadata":
        return cls(title=title, section=page.section, subsection=page.subsection, url=page.url)

    def with_heading(self, heading: Optional[str]) -> MieuxVivreMetadata:
        return MieuxVivreMetadata(
            title=self.title,
            section=self.section,
            subsection=self.subsection,
            heading=heading,
            url=self.url,
        )
