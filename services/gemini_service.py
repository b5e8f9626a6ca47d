import httpx
from typing import Optional

from core.exceptions import RemoteFailure
from models.image_edit import ImageArtifact
from services.image_codec import build_data_url

NO_IMAGE_MESSAGE = "No image data was returned from the API. The prompt may have violated safety policies."

class GeminiService:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash-image",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    async def edit_image(self, image_data: str, mime_type: str, prompt: str) -> ImageArtifact:
        """Edit an image with a text prompt using Gemini's image model"""
        if not self.api_key:
            raise RemoteFailure("Gemini API key not configured")

        payload = {
            "contents": [{
                "parts": [
                    {
                        "inlineData": {
                            "mimeType": mime_type,
                            "data": image_data
                        }
                    },
                    {
                        "text": prompt
                    }
                ]
            }],
            "generationConfig": {
                "responseModalities": ["IMAGE"]
            }
        }

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json"
        }

        url = f"{self.base_url}/models/{self.model}:generateContent"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as error:
            raise RemoteFailure("Request timeout - Gemini API may be slow", error) from error
        except httpx.HTTPError as error:
            raise RemoteFailure("Error calling Gemini API", error) from error

        if response.status_code != 200:
            error_data = _json_or_empty(response)
            error_info = error_data.get('error')
            error_message = error_info.get('message') if isinstance(error_info, dict) else error_info
            if not isinstance(error_message, str) or not error_message:
                error_message = f'API request failed: {response.status_code}'
            raise RemoteFailure(error_message)

        try:
            return extract_image(_json_or_empty(response))
        except RemoteFailure:
            raise
        except (AttributeError, TypeError, KeyError, ValueError) as error:
            raise RemoteFailure("Unexpected response from Gemini API", error) from error


def extract_image(data: dict) -> ImageArtifact:
    """Return the first inline image of the first candidate"""
    candidates = data.get('candidates') or []
    if not candidates:
        block_reason = (data.get('promptFeedback') or {}).get('blockReason')
        raise RemoteFailure(_with_reason(NO_IMAGE_MESSAGE, block_reason))

    candidate = candidates[0]
    for part in (candidate.get('content') or {}).get('parts') or []:
        inline_data = part.get('inlineData') or part.get('inline_data')
        if inline_data and inline_data.get('data'):
            mime_type = inline_data.get('mimeType') or inline_data.get('mime_type') or 'image/png'
            return ImageArtifact(
                data_url=build_data_url(mime_type, inline_data['data']),
                mime_type=mime_type
            )

    raise RemoteFailure(_with_reason(NO_IMAGE_MESSAGE, candidate.get('finishReason')))


def _with_reason(message: str, reason: Optional[str]) -> str:
    return f"{message} (reason: {reason})" if reason else message


def _json_or_empty(response: httpx.Response) -> dict:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
