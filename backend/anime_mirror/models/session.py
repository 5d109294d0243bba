"""Session state and API data models."""
import re
from typing import Optional

from pydantic import BaseModel

from anime_mirror.models.image import EncodedImage

INITIAL_STATUS = "Waiting for upload..."

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\r\n]')


class SessionState(BaseModel):
    """The single mutable record behind the page. Owned by MirrorController."""

    original_image: Optional[EncodedImage] = None
    character_name: str = ""
    is_generating: bool = False
    result_image: Optional[EncodedImage] = None
    error: Optional[str] = None
    status: str = INITIAL_STATUS

    @property
    def can_generate(self) -> bool:
        return not self.is_generating and self.original_image is not None and bool(self.character_name)


def download_filename(character_name: str) -> str:
    """Suggested filename for the composite, e.g. `Pikachu_collab.png`."""
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", character_name).strip() or "character"
    return f"{safe_name}_collab.png"


class CharacterNameRequest(BaseModel):
    """Request model for setting the character name. Stored verbatim."""

    character_name: str


class SessionSnapshot(BaseModel):
    """What the API returns to the page. Images are rendered as data URLs."""

    original_image: Optional[str] = None
    character_name: str
    is_generating: bool
    result_image: Optional[str] = None
    error: Optional[str] = None
    status: str
    can_generate: bool
    download_filename: Optional[str] = None

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionSnapshot":
        return cls(
            original_image=state.original_image.data_url if state.original_image else None,
            character_name=state.character_name,
            is_generating=state.is_generating,
            result_image=state.result_image.data_url if state.result_image else None,
            error=state.error,
            status=state.status,
            can_generate=state.can_generate,
            download_filename=(
                download_filename(state.character_name) if state.result_image else None
            ),
        )
