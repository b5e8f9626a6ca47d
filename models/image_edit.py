from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union, Literal
from enum import Enum

EXAMPLE_PROMPTS = [
    "Make the sky a vibrant sunset",
    "Add a cute robot sidekick",
    "Change the style to watercolor painting",
    "Give it a vintage, sepia tone",
]

class WorkflowStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"

class ImageArtifact(BaseModel):
    """An encoded image: the data URL carries both the bytes and the media type"""
    model_config = ConfigDict(frozen=True)

    data_url: str
    mime_type: str

class EditRequest(BaseModel):
    image_data: str  # Base64 payload without the data URL prefix
    mime_type: str
    prompt: str = Field(..., min_length=1)

class EditSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    artifact: ImageArtifact

class EditFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    reason: str

EditOutcome = Union[EditSuccess, EditFailure]

class WorkflowState(BaseModel):
    original: Optional[ImageArtifact] = None
    edited: Optional[ImageArtifact] = None
    prompt: str = ""
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def status(self) -> WorkflowStatus:
        return WorkflowStatus.SUBMITTING if self.is_loading else WorkflowStatus.IDLE

    @property
    def can_submit(self) -> bool:
        """Mirrors the enabled state of the generate button"""
        return not self.is_loading and self.original is not None and bool(self.prompt.strip())
