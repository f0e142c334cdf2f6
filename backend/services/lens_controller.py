"""
Voice-driven image controller for the lens.

Camera button → capture a frame (optionally persisted as the original of a
new edit record). Voice query → edit the active image if one was captured,
otherwise generate a fresh image. Successful edits become the new active
image so later prompts keep building on them.
"""
import asyncio
import logging
from typing import Optional, Set

from PIL import Image

from config.settings import settings
from core.events import Event
from core.lens import CameraSource, DisplaySurface
from models.lens import LensState, LensStateResponse
from services.image_generator import ImageGenerator
from services.nano_banana_service import NanoBananaService
from services.supabase_api import SupabaseAPI, build_supabase_api

logger = logging.getLogger(__name__)

CAPTURING_TEXT = "Capturing photo..."
CAPTURED_TEXT = "Photo captured!"
CAPTURE_ERROR_TEXT = "Error capturing photo"
GENERATE_ERROR_TEXT = "Error Generating Image"
EDIT_ERROR_TEXT = "Error Editing Image"


class LensController:
    def __init__(
        self,
        display: DisplaySurface,
        camera: CameraSource,
        generator: ImageGenerator,
        editor: Optional[NanoBananaService] = None,
        storage: Optional[SupabaseAPI] = None,
        device_info: str = "Spectacles",
    ):
        self.display = display
        self.camera = camera
        self.generator = generator
        self.editor = editor
        self.storage = storage
        self.device_info = device_info

        self.camera_button = Event("camera_button")
        self.query_event = Event("query")

        self.state = LensState.IDLE
        self.active_image: Optional[Image.Image] = None
        self.record_id: Optional[str] = None

        # Triggers run one at a time, in arrival order
        self._lock = asyncio.Lock()
        self._capture_persist_task: Optional[asyncio.Task] = None
        self._edit_persist_task: Optional[asyncio.Task] = None
        self._background_tasks: Set[asyncio.Task] = set()

    def start(self) -> None:
        """Subscribe to the host triggers and reset the busy indicator."""
        self.display.set_busy(False)
        self.query_event.add(self.handle_query)
        self.camera_button.add(self.capture_photo)

    def snapshot(self) -> LensStateResponse:
        return LensStateResponse(
            state=self.state,
            text=getattr(self.display, "text", ""),
            busy=getattr(self.display, "busy", False),
            has_active_image=self.active_image is not None,
            record_id=self.record_id,
        )

    async def drain(self) -> None:
        """Wait for every outstanding storage side effect."""
        while True:
            pending = [task for task in self._background_tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def capture_photo(self) -> None:
        async with self._lock:
            previous_state = self.state
            self.state = LensState.CAPTURING
            self.display.set_busy(True)
            self.display.show_text(CAPTURING_TEXT)

            try:
                frame = await self.camera.capture()
            except Exception as error:
                logger.error(f"Error capturing photo: {error!r}")
                self.display.show_text(CAPTURE_ERROR_TEXT)
                self.display.set_busy(False)
                self.state = previous_state
                return

            # A new capture starts a new session
            self.active_image = frame
            self.record_id = None
            self._capture_persist_task = None

            self.display.show_image(frame)
            self.display.show_text(CAPTURED_TEXT)
            self.display.set_busy(False)
            self.state = LensState.CAPTURED
            logger.info("Photo captured successfully from camera")

            if self.storage is not None:
                self._capture_persist_task = self._spawn(self._persist_capture(frame))

    async def handle_query(self, prompt: str) -> None:
        if not prompt or not prompt.strip():
            logger.warning("Ignoring empty voice query")
            return

        async with self._lock:
            if self.active_image is not None:
                if self.editor is not None:
                    await self._edit(prompt)
                    return
                logger.warning("Image editing not configured, generating a new image instead")
            await self._generate(prompt)

    async def _generate(self, prompt: str) -> None:
        previous_state = self.state
        self.state = LensState.GENERATING
        self.display.set_busy(True)
        self.display.show_text(f"Generating: {prompt}")

        try:
            image = await self.generator.generate_image(prompt)
        except Exception as error:
            logger.error(f"Error generating image: {error!r}")
            self.display.show_text(GENERATE_ERROR_TEXT)
            self.display.set_busy(False)
            self.state = previous_state
            return

        logger.info(f"Image generated successfully for prompt: {prompt}")
        # A fresh generation is shown but never becomes the active image
        self.display.show_image(image)
        self.display.show_text(prompt)
        self.display.set_busy(False)
        self.state = LensState.CAPTURED if self.active_image is not None else LensState.IDLE

    async def _edit(self, prompt: str) -> None:
        self.state = LensState.EDITING
        self.display.set_busy(True)
        self.display.show_text(f"Editing: {prompt}")

        try:
            edited = await self.editor.edit_image(self.active_image, prompt)
        except Exception as error:
            logger.error(f"Error editing image: {error!r}")
            self.display.show_text(EDIT_ERROR_TEXT)
            self.display.set_busy(False)
            self.state = LensState.CAPTURED
            return

        logger.info(f"Image edited successfully for prompt: {prompt}")
        self.active_image = edited
        self.display.show_image(edited)
        self.display.show_text(prompt)
        self.display.set_busy(False)
        self.state = LensState.CAPTURED

        if self.storage is not None:
            self._edit_persist_task = self._spawn(
                self._persist_edit(edited, prompt, self._capture_persist_task, self._edit_persist_task)
            )

    async def _persist_capture(self, frame: Image.Image) -> Optional[str]:
        """Upload the captured frame and open an edit record for it."""
        try:
            filename = SupabaseAPI.generate_filename("original")
            original_url = await self.storage.upload_image(frame, filename)
            record_id = await self.storage.create_edit_record(original_url, self.device_info)
        except Exception as error:
            logger.error(f"Failed to save captured photo: {error!r}")
            return None

        # Only claim the session if no newer capture replaced it meanwhile
        if self._capture_persist_task is asyncio.current_task():
            self.record_id = record_id
        return record_id

    async def _persist_edit(
        self,
        edited: Image.Image,
        prompt: str,
        capture_task: Optional[asyncio.Task],
        previous_edit_task: Optional[asyncio.Task] = None,
    ) -> None:
        """Upload the edited image and attach it to the session's record."""
        # Record updates land in edit order
        if previous_edit_task is not None:
            await asyncio.gather(previous_edit_task, return_exceptions=True)

        record_id = self.record_id
        if capture_task is not None:
            record_id = await capture_task

        if not record_id:
            logger.warning("No edit record for this session, skipping edit upload")
            return

        try:
            filename = SupabaseAPI.generate_filename("edited")
            edited_url = await self.storage.upload_image(edited, filename)
            await self.storage.update_edit_record(record_id, edited_url, prompt)
        except Exception as error:
            logger.error(f"Failed to save edited image: {error!r}")


def build_lens_controller(display: DisplaySurface, camera: CameraSource) -> LensController:
    """Wire a controller from settings; edit and storage are optional capabilities."""
    editor = NanoBananaService() if settings.edit_enabled else None
    storage = build_supabase_api()

    if editor is None:
        logger.warning("FAL_API_KEY not set, image editing disabled")
    if storage is None:
        logger.info("Supabase not configured, captured and edited images will not be saved")

    return LensController(
        display=display,
        camera=camera,
        generator=ImageGenerator(),
        editor=editor,
        storage=storage,
        device_info=settings.DEVICE_INFO,
    )
