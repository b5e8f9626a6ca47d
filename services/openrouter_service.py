import base64
import httpx
from typing import Optional

from core.exceptions import RemoteFailure
from models.image_edit import ImageArtifact
from services.image_codec import build_data_url, split_data_url

class OpenRouterService:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "google/gemini-2.5-flash-image-preview",
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 120.0,
        referer: str = "https://image-edit-studio.app",
        title: str = "Image Edit Studio",
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.referer = referer
        self.title = title

    async def edit_image(self, image_data: str, mime_type: str, prompt: str) -> ImageArtifact:
        """Edit an image using OpenRouter's Gemini model"""
        if not self.api_key:
            raise RemoteFailure("OpenRouter API key not configured")

        # Prepare the request payload
        payload = {
            "model": self.model,
            "modalities": ["image", "text"],
            "messages": [{
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": prompt
                    },
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": build_data_url(mime_type, image_data)
                        }
                    }
                ]
            }]
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
            "Content-Type": "application/json"
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=headers
                )

                if response.status_code != 200:
                    error_data = response.json() if response.content else {}
                    error_message = error_data.get('error', {}).get('message', f'API request failed: {response.status_code}')
                    raise RemoteFailure(error_message)

                data = response.json()
                choices = data.get('choices') or [{}]
                images = (choices[0].get('message') or {}).get('images') or [{}]
                image_url = (images[0].get('image_url') or {}).get('url')

                if not image_url:
                    raise RemoteFailure("No edited image received from API")

                if image_url.startswith('data:'):
                    result_mime_type, _ = split_data_url(image_url)
                    return ImageArtifact(data_url=image_url, mime_type=result_mime_type)

                # Plain URL: fetch it so the caller always gets a data URL
                image_response = await client.get(image_url)
                if image_response.status_code != 200:
                    raise RemoteFailure(f"Failed to download edited image: {image_response.status_code}")

                result_mime_type = image_response.headers.get('content-type', 'image/png').split(';')[0]
                encoded = base64.b64encode(image_response.content).decode('ascii')
                return ImageArtifact(
                    data_url=build_data_url(result_mime_type, encoded),
                    mime_type=result_mime_type
                )

        except RemoteFailure:
            raise
        except httpx.TimeoutException as error:
            raise RemoteFailure("Request timeout - OpenRouter API may be slow", error) from error
        except Exception as error:
            raise RemoteFailure("Error calling OpenRouter API", error) from error
