from typing import Optional, Tuple
from pathlib import Path
import asyncio
import base64


class LocalStorageService:
    def __init__(self, download_dir: str = "."):
        self.download_dir = Path(download_dir)

    async def save_image_from_data_url(self, data_url: str, filename: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """Decode a base64 image data URL and write it into the download directory"""
        try:
            # Parse data URL (e.g., "data:image/png;base64,iVBORw0KGg...")
            if not data_url.startswith('data:image/'):
                raise ValueError("Invalid data URL format - must be a data:image/ URL")

            header, base64_data = data_url.split(',', 1)
            if not header.endswith(';base64'):
                raise ValueError("Invalid data URL format - payload must be base64 encoded")

            image_bytes = base64.b64decode(base64_data, validate=True)

            # Only the final path component is honoured
            target = self.download_dir / Path(filename).name

            def _write():
                self.download_dir.mkdir(parents=True, exist_ok=True)
                target.write_bytes(image_bytes)

            await asyncio.to_thread(_write)
            print(f"💾 Saved edited image to {target} ({len(image_bytes)} bytes)")

            return True, str(target), None

        except ValueError as error:
            return False, None, str(error)
        except OSError as error:
            print(f"❌ Storage service error: {error}")
            return False, None, f"Failed to write image: {error}"
