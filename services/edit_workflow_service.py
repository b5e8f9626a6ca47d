"""
Client-side image edit workflow.

EditWorkflowService owns the WorkflowState (original image, edited image,
prompt, loading flag, last error) and runs at most one remote edit at a
time. Presentation code reads `state`, subscribes for refreshes and calls
the action methods; it never mutates the state directly.
"""
from typing import Callable, List, Optional

from config.settings import Settings, get_settings
from core.exceptions import ReadFailure, ValidationFailure
from models.image_edit import (
    EditFailure,
    EditOutcome,
    EditRequest,
    EditSuccess,
    ImageArtifact,
    WorkflowState,
)
from services.gemini_service import GeminiService
from services.image_codec import (
    ImageSource,
    extension_for_mime_type,
    file_to_data_url,
    mime_type_from_data_url,
    strip_data_url_prefix,
)
from services.openrouter_service import OpenRouterService
from services.storage_service import LocalStorageService

READ_FAILED_MESSAGE = "Failed to read file. Please try another image."
VALIDATION_MESSAGE = "Please upload an image and provide an editing prompt."
EDIT_FAILED_MESSAGE = "Failed to edit image. Please try again."
SAVE_FAILED_MESSAGE = "Failed to save image. Please try again."

StateListener = Callable[[WorkflowState], None]


class EditWorkflowService:
    def __init__(
        self,
        image_edit_service,
        storage_service: Optional[LocalStorageService] = None,
        download_filename: str = "edited-image",
        default_extension: str = "png",
    ):
        self.image_edit_service = image_edit_service
        self.storage_service = storage_service or LocalStorageService()
        self.download_filename = download_filename
        self.default_extension = default_extension
        self._state = WorkflowState()
        self._last_outcome: Optional[EditOutcome] = None
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> WorkflowState:
        """Snapshot of the current state"""
        return self._state.model_copy()

    @property
    def last_outcome(self) -> Optional[EditOutcome]:
        return self._last_outcome

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` with a fresh snapshot after every state change"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as error:
                print(f"Warning: state listener {listener!r} failed: {error}")

    def set_original(self, artifact: ImageArtifact):
        self._state.original = artifact
        self._state.edited = None
        self._state.error = None
        self._notify()

    async def load_image(self, source: ImageSource, mime_type: Optional[str] = None) -> bool:
        """Encode a selected file and make it the original image"""
        try:
            artifact = await file_to_data_url(source, mime_type)
        except ReadFailure as error:
            print(f"❌ Failed to read image: {error}")
            self._state.error = READ_FAILED_MESSAGE
            self._notify()
            return False

        self.set_original(artifact)
        return True

    def set_prompt(self, text: str):
        self._state.prompt = text
        self._notify()

    def _build_request(self) -> EditRequest:
        original = self._state.original
        prompt = self._state.prompt
        if original is None or not prompt.strip():
            raise ValidationFailure(VALIDATION_MESSAGE)

        return EditRequest(
            image_data=strip_data_url_prefix(original.data_url),
            mime_type=original.mime_type,
            prompt=prompt,
        )

    async def submit(self) -> Optional[EditOutcome]:
        """Send the original image and prompt to the remote edit service"""
        if self._state.is_loading:
            print("Warning: edit already in progress, ignoring submit")
            return None

        try:
            request = self._build_request()
        except ValidationFailure as error:
            self._state.error = error.message
            self._notify()
            return None

        self._state.edited = None
        self._state.error = None
        self._state.is_loading = True
        self._notify()

        source = self._state.original
        print(f"🔍 Submitting edit: mime_type={request.mime_type}, prompt_length={len(request.prompt)}")
        try:
            edited = await self.image_edit_service.edit_image(
                request.image_data,
                request.mime_type,
                request.prompt
            )
            if self._state.original is not source:
                print("Warning: original image changed during the edit, dropping result")
                return None
            self._state.edited = edited
            self._last_outcome = EditSuccess(artifact=edited)
            print(f"✅ Edit completed: {edited.mime_type}")
        except Exception as error:
            print(f"❌ Image edit failed: {error}")
            if self._state.original is not source:
                return None
            self._state.error = EDIT_FAILED_MESSAGE
            self._last_outcome = EditFailure(reason=str(error))
        finally:
            self._state.is_loading = False
            self._notify()

        return self._last_outcome

    async def regenerate(self) -> Optional[EditOutcome]:
        """Run the same edit again with the current image and prompt"""
        return await self.submit()

    def undo(self):
        self._state.edited = None
        self._state.error = None
        self._notify()

    def suggested_filename(self) -> Optional[str]:
        edited = self._state.edited
        if edited is None:
            return None

        mime_type = mime_type_from_data_url(edited.data_url) or edited.mime_type
        extension = extension_for_mime_type(mime_type, self.default_extension)
        return f"{self.download_filename}.{extension}"

    async def download(self) -> Optional[str]:
        """Hand the edited image to the storage service; returns where it was saved"""
        edited = self._state.edited
        filename = self.suggested_filename()
        if edited is None or filename is None:
            return None

        success, saved_path, error = await self.storage_service.save_image_from_data_url(
            edited.data_url,
            filename
        )
        if not success:
            print(f"❌ Failed to save edited image: {error}")
            self._state.error = SAVE_FAILED_MESSAGE
            self._notify()
            return None

        return saved_path


def get_image_edit_service(settings: Settings):
    if settings.IMAGE_EDIT_PROVIDER == "openrouter":
        return OpenRouterService(
            api_key=settings.OPENROUTER_API_KEY,
            model=settings.OPENROUTER_MODEL,
            base_url=settings.OPENROUTER_BASE_URL,
            timeout=settings.IMAGE_EDIT_TIMEOUT,
            referer=settings.OPENROUTER_REFERER,
            title=settings.PROJECT_NAME,
        )

    return GeminiService(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.IMAGE_EDIT_TIMEOUT,
    )


def create_edit_workflow(settings: Optional[Settings] = None) -> EditWorkflowService:
    """Wire the configured provider and local storage into a workflow"""
    settings = settings or get_settings()
    return EditWorkflowService(
        image_edit_service=get_image_edit_service(settings),
        storage_service=LocalStorageService(settings.DOWNLOAD_DIR),
        download_filename=settings.DOWNLOAD_FILENAME,
        default_extension=settings.DEFAULT_DOWNLOAD_EXTENSION,
    )
