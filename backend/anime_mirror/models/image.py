"""Image payload and style descriptor data models."""
import base64

from pydantic import BaseModel, ConfigDict, Field


class EncodedImage(BaseModel):
    """An image carried as mime type + base64 text, embeddable as a data URL."""

    mime_type: str
    data: str

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "EncodedImage":
        return cls(mime_type=mime_type, data=base64.b64encode(raw).decode("ascii"))

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


class CharacterDetails(BaseModel):
    """How the named character appears and acts in the composite."""

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    interaction: str = Field(..., min_length=1)


class StyleDescriptor(BaseModel):
    """Structured scene description returned by the analysis model.

    Field names on the wire follow the response schema sent to Gemini
    (camelCase `characterDetails`); Python code uses snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    clothing: str = Field(..., min_length=1)
    pose: str = Field(..., min_length=1)
    expression: str = Field(..., min_length=1)
    character_details: CharacterDetails = Field(..., alias="characterDetails")
    environment: str = Field(..., min_length=1)
