"""Upload of local files to the KBase Shock blob store."""

import json
import os
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .errors import (
    UploadConnectionFailedError,
    UploadEmptyResponseError,
    UploadRejectedError,
)
from .library_types import HANDLE_TYPE_SHOCK, Handle
from .shared_env_utils import SharedEnvUtils

DEFAULT_SHOCK_URL = "https://kbase.us/services/shock-api"
DEFAULT_CONNECT_TIMEOUT = 10
READS_ATTRIBUTES = {"filetype": "reads"}


@dataclass(frozen=True)
class ShockConnection:
    """Shock service url and the token used to authenticate against it."""
    url: str
    token: Optional[str] = None

    @property
    def headers(self) -> dict:
        return {"Authorization": "OAuth " + (self.token or "")}


class ShockUtils(SharedEnvUtils):
    """Utilities for uploading files to Shock and filling in their handles."""

    def __init__(
        self,
        shock_url: Optional[str] = None,
        connect_timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """Initialize Shock utilities.

        Args:
            shock_url: Shock service URL, falls back to the "shock.url" config value
            connect_timeout: Seconds to wait for the connection to Shock
            **kwargs: Additional keyword arguments passed to SharedEnvUtils
        """
        super().__init__(**kwargs)
        self.shock_url = (
            shock_url or self.get_config_value("shock.url") or DEFAULT_SHOCK_URL
        ).rstrip("/")
        if connect_timeout is None:
            connect_timeout = self.get_config_value(
                "upload.connect_timeout", DEFAULT_CONNECT_TIMEOUT
            )
        self.connect_timeout = float(connect_timeout)

    def shock_connection(self) -> ShockConnection:
        return ShockConnection(url=self.shock_url, token=self.get_token(namespace="kbase"))

    def upload_blob_file(self, file_path: str, shock: Optional[ShockConnection] = None) -> str:
        """Upload one file to Shock as a new node.

        Args:
            file_path: Local file to upload
            shock: Connection to use, defaults to this instance's Shock url and token

        Returns:
            The Shock node id

        Raises:
            UploadConnectionFailedError: the request could not be issued
            UploadEmptyResponseError: Shock returned an empty body
            UploadRejectedError: Shock did not report status 200
        """
        if shock is None:
            shock = self.shock_connection()
        node_url = shock.url + "/node"
        self.log_info(f"Uploading {file_path} to {node_url}")
        try:
            with open(file_path, "rb") as fh:
                response = requests.post(
                    node_url,
                    headers=shock.headers,
                    files={
                        "attributes": ("attributes", json.dumps(READS_ATTRIBUTES)),
                        "upload": (os.path.basename(file_path), fh),
                    },
                    timeout=(self.connect_timeout, None),
                )
        except requests.exceptions.RequestException as e:
            self.log_error(f"Upload request to {node_url} failed: {e}")
            raise UploadConnectionFailedError(
                f"Connection failure uploading file to Shock: {file_path}"
            ) from e

        if not response.content or not response.content.strip():
            raise UploadEmptyResponseError(
                f"Empty response uploading file to Shock: {file_path}"
            )
        try:
            resp_obj = response.json()
        except ValueError:
            raise UploadRejectedError(
                file_path, response.status_code, "response is not valid JSON"
            ) from None

        status = resp_obj.get("status") if isinstance(resp_obj, dict) else None
        if status != 200:
            errors = resp_obj.get("error") if isinstance(resp_obj, dict) else None
            message = errors[0] if errors else ""
            self.log_error(f"Shock rejected {file_path}: {status} {message}")
            raise UploadRejectedError(file_path, status, message)

        try:
            shock_id = resp_obj["data"]["id"]
        except (KeyError, TypeError):
            self.log_error(f"Shock response for {file_path} has no node id")
            raise UploadRejectedError(file_path, status, "response has no node id") from None
        self.log_info(f"Uploaded {file_path} as Shock node {shock_id}")
        return shock_id

    def upload_handle(self, handle: Handle, shock: Optional[ShockConnection] = None) -> Handle:
        """Upload the local file behind a placeholder handle and fill in its Shock fields."""
        if shock is None:
            shock = self.shock_connection()
        shock_id = self.upload_blob_file(handle.full_path_file, shock)
        handle.full_path_file = None
        handle.type = HANDLE_TYPE_SHOCK
        handle.url = shock.url
        handle.id = shock_id
        return handle
