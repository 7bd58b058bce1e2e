"""
Title entity.

A Title is a piece of entertainment (movie or show). Field names are the
JSON wire contract; `additionalInfo` is the only camel-cased field.
"""

from pydantic import BaseModel, ConfigDict, Field


class Reference(BaseModel):
    """A reference to a title in an external directory or streaming service."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = ""
    additional_info: dict[str, str] = Field(default_factory=dict, alias="additionalInfo")


class Directory(Reference):
    """A reference to a title in an external catalog such as IMDB."""


class Service(Reference):
    """A reference to a title on a streaming service such as Netflix."""


class Title(BaseModel):
    """
    A movie or show in the catalog.

    Attributes:
        id: Opaque unique identifier, immutable once stored
        genres: Genre names, matched case-insensitively
        scores: Score kind (e.g. "metacritic") to raw integer score
        directories: Catalog name to reference record
        services: Streaming service name to reference record
    """

    id: str
    name: str = ""
    year: int = 0
    description: str = ""
    genres: list[str] = Field(default_factory=list)
    scores: dict[str, int] = Field(default_factory=dict)
    poster: str = ""
    directories: dict[str, Directory] = Field(default_factory=dict)
    services: dict[str, Service] = Field(default_factory=dict)

    def to_wire(self) -> dict:
        """Serialize to the JSON wire shape."""
        return self.model_dump(mode="json", by_alias=True)
