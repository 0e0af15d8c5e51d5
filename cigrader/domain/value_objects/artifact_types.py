from enum import Enum

from pydantic import BaseModel

HTML_CONTENT_TYPE = "text/html"


class ArtifactFailureReason(str, Enum):
    NO_ARTIFACT = "no_artifact"  # the build published no artifact
    UNREACHABLE = "unreachable"  # artifact existed but could not be fetched
    HOP_LIMIT = "hop_limit"
    CYCLE = "cycle"
    NO_LINK = "no_link"  # listing page without a link to follow


class ArtifactReference(BaseModel, frozen=True):
    location_uri: str
    is_directory_listing: bool = False


class FetchedPage(BaseModel, frozen=True):
    """Raw response for one hop of artifact resolution."""

    uri: str
    content_type: str
    body: bytes

    @property
    def is_directory_listing(self) -> bool:
        # Content-Type may carry a charset suffix
        return HTML_CONTENT_TYPE in self.content_type.lower()


class TerminalArtifact(BaseModel, frozen=True):
    location_uri: str
    content_type: str
    content: bytes
    hops: int


class ArtifactCancelled(BaseModel, frozen=True):
    """Resolution stopped because the caller's deadline passed."""

    last_uri: str
    hops: int
