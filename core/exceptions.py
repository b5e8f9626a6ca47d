from typing import Optional


class ImageEditError(Exception):
    """Base class for errors raised by the image edit workflow"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} ({self.cause})"
        return self.message


class ReadFailure(ImageEditError):
    """The selected resource could not be turned into a data URL"""


class ValidationFailure(ImageEditError):
    """An edit was requested without an image or without a prompt"""


class RemoteFailure(ImageEditError):
    """The remote edit service returned no image or the call itself failed"""


class ConfigurationError(ImageEditError):
    """Settings are missing or invalid at startup"""
