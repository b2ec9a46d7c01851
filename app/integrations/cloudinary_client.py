# app/integrations/cloudinary_client.py
from __future__ import annotations
from typing import Any, Dict, Optional
import hashlib
import time

import httpx

from app.modules.employees.errors import PhotoUploadError


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """Signature Cloudinary: sha1("a=1&b=2" + secret), clés triées, valeurs vides exclues."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        *,
        folder: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.upload_url = f"https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
        self.api_key = api_key
        self._api_secret = api_secret
        self.folder = folder
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "CloudinaryUploader":
        return cls(
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
            folder=settings.CLOUDINARY_FOLDER,
            **kwargs,
        )

    async def upload(self, data: str, *, public_id: Optional[str] = None) -> str:
        """Envoie une image (data URI ou base64) et retourne son URL https."""
        if not data.startswith("data:"):
            data = f"data:image/jpeg;base64,{data}"

        params: Dict[str, Any] = {"timestamp": int(time.time())}
        if self.folder:
            params["folder"] = self.folder
        if public_id:
            params["public_id"] = public_id
        form = {**params, "api_key": self.api_key, "signature": sign_params(params, self._api_secret), "file": data}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.post(self.upload_url, data=form)
        except httpx.HTTPError as e:
            raise PhotoUploadError("photo_upload_unreachable", {"error": repr(e)}) from e

        if r.status_code >= 400:
            raise PhotoUploadError("photo_upload_failed", r.text[:500], status_code=r.status_code)
        url = r.json().get("secure_url")
        if not url:
            raise PhotoUploadError("photo_upload_no_url", r.json(), status_code=r.status_code)
        return url
