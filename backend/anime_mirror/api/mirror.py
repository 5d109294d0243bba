"""Mirror API router: routes page actions to MirrorController."""
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile

from anime_mirror.core.errors import GenerationInProgressError, InvalidUploadError
from anime_mirror.models.session import CharacterNameRequest, SessionSnapshot, download_filename
from anime_mirror.services.controller import MirrorController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mirror", tags=["mirror"])


def get_controller(request: Request) -> MirrorController:
    """FastAPI dependency: retrieve MirrorController from app.state.

    Returns HTTP 503 if the controller was not initialized at startup
    (e.g. the Gemini API key is missing).
    """
    controller: MirrorController | None = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(
            status_code=503,
            detail="Generation service unavailable. Service not initialized.",
        )
    return controller


@router.get("/state", response_model=SessionSnapshot)
async def get_state(controller: MirrorController = Depends(get_controller)) -> SessionSnapshot:
    """Return the current session state; polled by the page during a run."""
    return SessionSnapshot.from_state(controller.state)


@router.post("/image", response_model=SessionSnapshot)
async def upload_image(
    file: UploadFile = File(...),
    controller: MirrorController = Depends(get_controller),
) -> SessionSnapshot:
    """Upload the portrait photo.

    Raises:
        HTTPException 415: The file is not image content.
    """
    data = await file.read()
    try:
        state = controller.upload_image(data, file.content_type)
    except InvalidUploadError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    return SessionSnapshot.from_state(state)


@router.put("/character", response_model=SessionSnapshot)
async def set_character(
    body: CharacterNameRequest,
    controller: MirrorController = Depends(get_controller),
) -> SessionSnapshot:
    return SessionSnapshot.from_state(controller.set_character_name(body.character_name))


@router.post("/generate", response_model=SessionSnapshot)
async def generate(controller: MirrorController = Depends(get_controller)) -> SessionSnapshot:
    """Run the two-step generation for the current inputs.

    Validation and generation failures are reported through the returned
    state (`error`), not the HTTP status.

    Raises:
        HTTPException 409: A generation is already in progress.
    """
    try:
        state = await controller.generate()
    except GenerationInProgressError as exc:
        logger.info("Generate refused: run already in flight")
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return SessionSnapshot.from_state(state)


@router.post("/reset", response_model=SessionSnapshot)
async def reset(controller: MirrorController = Depends(get_controller)) -> SessionSnapshot:
    return SessionSnapshot.from_state(controller.reset())


@router.get("/result")
async def download_result(controller: MirrorController = Depends(get_controller)) -> Response:
    """Download the composite image as an attachment.

    Raises:
        HTTPException 404: No composite has been generated.
    """
    state = controller.state
    if state.result_image is None:
        raise HTTPException(status_code=404, detail="No result image available.")
    filename = download_filename(state.character_name)
    # Plain filename must be latin-1 safe; filename* carries the exact UTF-8 name.
    ascii_filename = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return Response(
        content=state.result_image.to_bytes(),
        media_type=state.result_image.mime_type,
        headers={
            "Content-Disposition": (
                f"attachment; filename=\"{ascii_filename}\"; filename*=UTF-8''{quote(filename)}"
            )
        },
    )
