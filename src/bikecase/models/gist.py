"""Models for GitHub Gist API payloads."""

from pydantic import BaseModel, Field


class GistFile(BaseModel):
    """A file inside a gist."""

    filename: str
    content: str = ""
    truncated: bool = False


class Gist(BaseModel):
    """A gist as returned by `GET /gists/{id}`."""

    id: str
    description: str | None = None
    files: dict[str, GistFile] = Field(default_factory=dict)


class CreatedGist(BaseModel):
    """Response of `POST /gists`."""

    id: str


class RemoteRecord(BaseModel):
    """The script stored in a gist.

    Attributes:
        gist_id: Opaque id of the gist.
        filename: Name of the Rust file holding the script.
        content: Full script text.
        description: Gist description.
    """

    gist_id: str
    filename: str
    content: str
    description: str = ""
