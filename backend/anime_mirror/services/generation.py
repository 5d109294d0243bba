"""Gemini generation client: style analysis and composite synthesis."""
import logging
from typing import Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from anime_mirror.core.errors import NoImageProducedError, ParseError, RemoteError
from anime_mirror.models.image import EncodedImage, StyleDescriptor

logger = logging.getLogger(__name__)

ANALYSIS_MODEL_ID = "gemini-3-flash-preview"
IMAGE_MODEL_ID = "gemini-2.5-flash-image"

# The uploaded photo is always declared as JPEG to the service.
SOURCE_MIME_TYPE = "image/jpeg"
DEFAULT_RESULT_MIME_TYPE = "image/png"

STYLE_DESCRIPTOR_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "clothing": types.Schema(type=types.Type.STRING),
        "pose": types.Schema(type=types.Type.STRING),
        "expression": types.Schema(type=types.Type.STRING),
        "characterDetails": types.Schema(
            type=types.Type.OBJECT,
            properties={
                "name": types.Schema(type=types.Type.STRING),
                "type": types.Schema(type=types.Type.STRING),
                "interaction": types.Schema(type=types.Type.STRING),
            },
            required=["name", "type", "interaction"],
        ),
        "environment": types.Schema(type=types.Type.STRING),
    },
    required=["clothing", "pose", "expression", "characterDetails", "environment"],
)


def build_analysis_instruction(character_name: str) -> str:
    """Build the instruction sent alongside the photo for step (a).

    Field meanings are spelled out in prose; the structure itself is
    enforced by STYLE_DESCRIPTOR_SCHEMA.
    """
    return (
        f'The user wants a hyper-realistic photo of themselves posing with the character "{character_name}". '
        "Study the person's appearance in the image and the character's typical style, then describe the shot:\n"
        "- clothing: modern fashion for the person, themed after the character\n"
        "- pose: how the person interacts with the character (e.g. arm around, standing beside)\n"
        "- expression: a facial expression matching the mood\n"
        f'- characterDetails.name: "{character_name}"\n'
        '- characterDetails.type: "3D photorealistic render"\n'
        "- characterDetails.interaction: what the character is doing in the pose\n"
        "- environment: a clean studio or cinematic backdrop\n"
        "Keep every description concise but visually rich."
    )


def build_composite_prompt(descriptor: StyleDescriptor) -> str:
    """Build the step (b) prompt from every field of the descriptor."""
    details = descriptor.character_details
    return (
        "Hyper-realistic, professional fashion photoshoot. "
        "Use the face from the provided image without any changes. "
        f"Subject is wearing {descriptor.clothing}. "
        f"Subject pose: {descriptor.pose}. "
        f"Subject expression: {descriptor.expression}. "
        f"Character: {details.name}, {details.type}, {details.interaction}. "
        f"Environment: {descriptor.environment}. "
        "Maintain facial features from the input photo exactly. 3D cinematic lighting."
    )


def parse_style_descriptor(response_text: Optional[str]) -> StyleDescriptor:
    """Parse the analysis response text into a StyleDescriptor.

    Raises:
        ParseError: When the text is empty, not JSON, or misses required fields.
    """
    if not response_text:
        raise ParseError("Analysis response contained no text")
    try:
        return StyleDescriptor.model_validate_json(response_text)
    except ValidationError as exc:
        logger.error("Failed to parse analysis response: %.200s", response_text)
        raise ParseError(f"Analysis response does not match the descriptor schema: {exc}") from exc


def extract_first_image(response: types.GenerateContentResponse) -> EncodedImage:
    """Return the first inline image part of a synthesis response.

    Raises:
        NoImageProducedError: When no content part carries image data.
    """
    candidates = response.candidates or []
    parts = []
    if candidates and candidates[0].content is not None:
        parts = candidates[0].content.parts or []

    for part in parts:
        if part.inline_data is not None and part.inline_data.data:
            return EncodedImage.from_bytes(
                bytes(part.inline_data.data),
                part.inline_data.mime_type or DEFAULT_RESULT_MIME_TYPE,
            )

    raise NoImageProducedError("No image data returned by Gemini Image API")


class GenerationClient:
    """Translates session inputs into Gemini requests and parses the responses.

    Holds no per-session state; one instance is shared by the process.
    Every call goes straight to the service: no caching, batching or retry.
    """

    def __init__(self, api_key: str, client: Optional[genai.Client] = None) -> None:
        self._client = client if client is not None else genai.Client(api_key=api_key)

    async def derive_style_descriptor(
        self, character_name: str, original_image: EncodedImage
    ) -> StyleDescriptor:
        """Step (a): analyze the photo and character into a StyleDescriptor.

        Args:
            character_name: Name of the character to pose with.
            original_image: The uploaded portrait.

        Returns:
            Parsed StyleDescriptor.

        Raises:
            RemoteError: The analysis call failed.
            ParseError: The response did not match the schema.
        """
        instruction = build_analysis_instruction(character_name)
        response_text = await self._call_analysis_api(instruction, original_image)
        descriptor = parse_style_descriptor(response_text)
        logger.info("Derived style descriptor for character=%s", descriptor.character_details.name)
        return descriptor

    async def synthesize_composite_image(
        self, original_image: EncodedImage, descriptor: StyleDescriptor
    ) -> EncodedImage:
        """Step (b): render the user together with the character.

        Raises:
            RemoteError: The synthesis call failed.
            NoImageProducedError: The response contained no image part.
        """
        prompt = build_composite_prompt(descriptor)
        response = await self._call_image_api(prompt, original_image)
        return extract_first_image(response)

    async def _call_analysis_api(self, instruction: str, image: EncodedImage) -> Optional[str]:
        """Call the analysis model with a JSON response schema and return its text."""
        try:
            response = await self._client.aio.models.generate_content(
                model=ANALYSIS_MODEL_ID,
                contents=[
                    types.Part(inline_data=types.Blob(data=image.to_bytes(), mime_type=SOURCE_MIME_TYPE)),
                    types.Part(text=instruction),
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=STYLE_DESCRIPTOR_SCHEMA,
                ),
            )
        except Exception as exc:
            raise RemoteError(f"Analysis call failed: {type(exc).__name__}: {exc}") from exc
        return response.text

    async def _call_image_api(
        self, prompt: str, image: EncodedImage
    ) -> types.GenerateContentResponse:
        """Call the image model with the source photo and composition prompt."""
        try:
            return await self._client.aio.models.generate_content(
                model=IMAGE_MODEL_ID,
                contents=[
                    types.Part(inline_data=types.Blob(data=image.to_bytes(), mime_type=SOURCE_MIME_TYPE)),
                    types.Part(text=prompt),
                ],
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        except Exception as exc:
            raise RemoteError(f"Image call failed: {type(exc).__name__}: {exc}") from exc
