"""MirrorController: owns the session state and runs the generation chain."""
import asyncio
from typing import TYPE_CHECKING, Optional

from anime_mirror.core.errors import GenerationInProgressError, InvalidUploadError
from anime_mirror.core.logging import setup_logging
from anime_mirror.models.image import EncodedImage
from anime_mirror.models.session import SessionState

if TYPE_CHECKING:
    from anime_mirror.services.generation import GenerationClient

logger = setup_logging("controller")

STATUS_READY = "Ready to generate!"
STATUS_ANALYZING = "Analyzing face and character..."
STATUS_SUMMONING = "Summoning {name}..."
STATUS_COMPLETE = "Creation complete!"
STATUS_ERROR = "Error"

VALIDATION_ERROR_MESSAGE = "Please upload an image and enter a character name."
GENERATION_ERROR_MESSAGE = "Generation failed. Please try again."


class MirrorController:
    """Single authoritative holder of SessionState.

    Responsibilities:
    1. Store the uploaded portrait and the character name
    2. Validate inputs and refuse generate while a run is in flight
    3. Run analysis then synthesis, updating status in between
    4. Catch every failure of the chain, log it, show a generic message
    5. Reset to defaults on request

    State notes:
    - All mutations happen on the event loop between awaits, so readers
      never see a half-applied transition.
    - _run_id identifies the current run. reset() bumps it so a run that
      was in flight finishes without touching the fresh state.
    """

    def __init__(self, generation_client: "GenerationClient") -> None:
        self.generation_client = generation_client
        self.state = SessionState()
        self._run_id = 0

    def upload_image(self, data: bytes, content_type: Optional[str]) -> SessionState:
        """Store an uploaded image as an embeddable payload.

        Args:
            data: Raw file bytes. No size, dimension or format checks.
            content_type: Declared mime type of the upload.

        Raises:
            InvalidUploadError: When the upload is not image content.
        """
        if not content_type or not content_type.startswith("image/"):
            raise InvalidUploadError(f"Expected an image upload, got {content_type or 'unknown type'}")
        self.state.original_image = EncodedImage.from_bytes(data, content_type)
        self.state.status = STATUS_READY
        logger.info("Image uploaded: type=%s bytes=%d", content_type, len(data))
        return self.state

    def set_character_name(self, name: str) -> SessionState:
        self.state.character_name = name
        return self.state

    async def generate(self) -> SessionState:
        """Run analysis then synthesis for the current inputs.

        Missing inputs set the fixed validation message and make no remote
        call. Any failure inside the chain ends the run with the generic
        failure message; the cause is only logged.

        Returns:
            The session state after the run.

        Raises:
            GenerationInProgressError: A run is already in flight.
            asyncio.CancelledError: The awaiting task was cancelled. The run
                is ended with the generic failure message before re-raising.
        """
        if self.state.is_generating:
            raise GenerationInProgressError("A generation is already in progress")

        image = self.state.original_image
        name = self.state.character_name
        if image is None or not name:
            self.state.error = VALIDATION_ERROR_MESSAGE
            return self.state

        self._run_id += 1
        run_id = self._run_id
        self.state.error = None
        self.state.result_image = None
        self.state.is_generating = True
        self.state.status = STATUS_ANALYZING

        stage = "analysis"
        try:
            descriptor = await self.generation_client.derive_style_descriptor(name, image)
            if run_id != self._run_id:
                return self.state
            stage = "synthesis"
            self.state.status = STATUS_SUMMONING.format(name=name)
            result = await self.generation_client.synthesize_composite_image(image, descriptor)
        except asyncio.CancelledError:
            logger.warning("Generation cancelled during %s", stage, extra={"stage": stage})
            if run_id == self._run_id:
                self.state.is_generating = False
                self.state.error = GENERATION_ERROR_MESSAGE
                self.state.status = STATUS_ERROR
            raise
        except Exception as exc:
            logger.error(
                "Generation failed during %s: %s",
                stage,
                exc,
                exc_info=True,
                extra={"stage": stage, "error_type": type(exc).__name__},
            )
            if run_id == self._run_id:
                self.state.is_generating = False
                self.state.error = GENERATION_ERROR_MESSAGE
                self.state.status = STATUS_ERROR
            return self.state

        if run_id != self._run_id:
            logger.info("Discarding result of a run superseded by reset")
            return self.state

        self.state.result_image = result
        self.state.is_generating = False
        self.state.status = STATUS_COMPLETE
        logger.info("Generation complete for character=%s", name)
        return self.state

    def reset(self) -> SessionState:
        """Restore defaults, discarding any in-flight or completed result."""
        self._run_id += 1
        self.state = SessionState()
        return self.state
