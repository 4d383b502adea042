"""Registration of uploaded Shock nodes with the KBase handle service."""

import uuid
from typing import Any, Dict, Optional

import requests

from .errors import RegistrationFailedError
from .library_types import Handle
from .shared_env_utils import SharedEnvUtils

DEFAULT_HANDLE_SERVICE_URL = "https://kbase.us/services/handle_service"


class HandleServiceUtils(SharedEnvUtils):
    """Client for the handle service ``AbstractHandle`` JSON-RPC API.

    Registration is optional: with an empty handle service url, handles are
    returned without a handle id.
    """

    def __init__(self, handle_service_url: Optional[str] = None, **kwargs: Any) -> None:
        """Initialize handle service utilities.

        Args:
            handle_service_url: Handle service URL. None falls back to the
                "handle_service.url" config value and then the production
                service; an empty string disables registration.
            **kwargs: Additional keyword arguments passed to SharedEnvUtils
        """
        super().__init__(**kwargs)
        if handle_service_url is None:
            handle_service_url = self.get_config_value(
                "handle_service.url", DEFAULT_HANDLE_SERVICE_URL
            )
        self.hs_url = handle_service_url or None

    def _call_handle_service(self, method: str, params: list) -> Any:
        """Issue a JSON-RPC 1.1 call against the handle service and return its result."""
        data = {
            "version": "1.1",
            "method": f"AbstractHandle.{method}",
            "params": params,
            "id": str(uuid.uuid4()),
        }
        headers = {}
        token = self.get_token(namespace="kbase")
        if token:
            headers["Authorization"] = token
        try:
            response = requests.post(self.hs_url, json=data, headers=headers)
            result = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise RegistrationFailedError(f"Handle service call {method} failed: {e}") from e
        if not isinstance(result, dict):
            raise RegistrationFailedError(f"Unexpected handle service response to {method}")

        if "error" in result and result["error"]:
            error = result["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RegistrationFailedError(f"Handle service error in {method}: {message}")
        if not response.ok or "result" not in result:
            raise RegistrationFailedError(
                f"Handle service call {method} failed with HTTP {response.status_code}"
            )
        return result["result"]

    def persist_handle(self, handle: Handle) -> Handle:
        """Persist a Shock handle and attach the returned handle id.

        Args:
            handle: Handle already uploaded to Shock

        Returns:
            The same handle, with ``hid`` set when a handle service is configured

        Raises:
            RegistrationFailedError: the handle was never uploaded to Shock, or
                the handle service call failed
        """
        if not self.hs_url:
            self.log_info(f"No handle service configured, not registering {handle.file_name}")
            return handle
        if not handle.uploaded:
            raise RegistrationFailedError(f"{handle.file_name} has not been uploaded to Shock")
        record: Dict[str, Any] = handle.to_dict()
        record.pop("full_path_file", None)
        try:
            result = self._call_handle_service("persist_handle", [record])
        except RegistrationFailedError as e:
            self.log_error(str(e))
            raise
        if not result:
            self.log_error("Handle service returned no handle id")
            raise RegistrationFailedError(f"No handle id returned for Shock node {handle.id}")
        handle.hid = result[0]
        self.log_info(f"Registered Shock node {handle.id} as handle {handle.hid}")
        return handle
