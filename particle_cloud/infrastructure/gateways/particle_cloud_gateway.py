"""Particle cloud gateway implementation - Infrastructure layer."""

from __future__ import annotations

import time
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from particle_cloud.domain.entities.device import Device
from particle_cloud.domain.entities.errors import (
    AuthenticationError,
    DeviceNotFoundError,
    MalformedResponseError,
    ParticleCloudError,
    ParticleConnectionError,
    RateLimitError,
)
from particle_cloud.domain.entities.results import (
    CompileResult,
    FlashOptions,
    FlashResult,
)
from particle_cloud.domain.gateways.particle_cloud_gateway import (
    IParticleCloudGateway,
)
from particle_cloud.shared import (
    DEFAULT_REQUEST_TIMEOUT,
    gateway_context,
    get_logger,
)

logger = get_logger(__name__)

COMPILE_PATH = "v1/binaries"
KEY_UPLOAD_FILENAME = "particle-cloud"


class ParticleCloudGateway(IParticleCloudGateway):
    """HTTP client for the Particle cloud API."""

    def __init__(
        self,
        api_url: str,
        access_token: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """
        Initialize Particle Cloud Gateway.

        Args:
            api_url: Base URL of the Particle cloud API
            access_token: Bearer token sent with every request
            timeout: Seconds before a request is abandoned
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._access_token = access_token

    # ------------------------------------------------------------------
    # Account level operations
    # ------------------------------------------------------------------
    def list_devices(self) -> List[Device]:
        payload = self._request("GET", Device.LIST_PATH, event="particle.devices.list")
        if not isinstance(payload, list):
            raise MalformedResponseError(
                "Device listing is not a list",
                details={"payload": payload},
            )
        devices = [self.device(item) for item in payload if isinstance(item, dict)]
        logger.info("particle.devices.list.parsed", count=len(devices))
        return devices

    def provision_device(self, product_id: int) -> Device:
        payload = self._request(
            "POST",
            Device.PROVISION_PATH,
            event="particle.device.provision",
            json={"product_id": product_id},
        )
        device_id = self._require(payload, "device_id", "particle.device.provision")
        return self.device(device_id)

    def compile(
        self,
        file_paths: Sequence[str],
        *,
        device_id: Optional[str] = None,
        platform_id: Optional[int] = None,
        product_id: Optional[int] = None,
    ) -> CompileResult:
        """
        Compile source files in the cloud.

        Args:
            file_paths: Source files to upload
            device_id: Compile for the platform of this device
            platform_id: Compile for this platform
            product_id: Compile against this product's firmware

        Returns:
            CompileResult: ``ok`` False with the compiler output on a
            compile failure
        """
        data = {
            key: str(value)
            for key, value in (
                ("device_id", device_id),
                ("platform_id", platform_id),
                ("product_id", product_id),
            )
            if value is not None
        }

        with ExitStack() as stack:
            files = self._open_files(stack, file_paths)
            payload, ok, errors = self._submit(
                "POST",
                COMPILE_PATH,
                event="particle.compile",
                data=data,
                files=files,
            )

        return CompileResult(
            ok=ok,
            errors=errors,
            binary_id=payload.get("binary_id"),
            binary_url=payload.get("binary_url"),
            expires_at=payload.get("expires_at"),
            size_info=payload.get("sizeInfo"),
        )

    # ------------------------------------------------------------------
    # Device operations
    # ------------------------------------------------------------------
    def device_attributes(self, device: Device) -> Dict[str, Any]:
        return self._request_object(
            "GET",
            device.path,
            event="particle.device.attributes",
            target=device.id_or_name,
        )

    def claim_device(self, device: Device) -> Dict[str, Any]:
        return self._request_object(
            "POST",
            Device.CLAIM_PATH,
            event="particle.device.claim",
            json={"id": device.id},
            target=device.id_or_name,
        )

    def remove_device(self, device: Device) -> bool:
        payload = self._request_object(
            "DELETE",
            device.path,
            event="particle.device.remove",
            target=device.id_or_name,
        )
        return bool(payload.get("ok", True))

    def rename_device(self, device: Device, name: str) -> str:
        payload = self._request_object(
            "PUT",
            device.path,
            event="particle.device.rename",
            json={"name": name},
            target=device.id_or_name,
        )
        return payload.get("name", name)

    def call_function(self, device: Device, name: str, argument: str) -> int:
        event = "particle.device.function"
        payload = self._request(
            "POST",
            device.function_path(name),
            event=event,
            json={"arg": argument},
            target=device.id_or_name,
        )
        return int(self._require(payload, "return_value", event))

    def get_variable(self, device: Device, name: str) -> Any:
        event = "particle.device.variable"
        payload = self._request(
            "GET",
            device.variable_path(name),
            event=event,
            target=device.id_or_name,
        )
        return self._require(payload, "result", event)

    def signal_device(self, device: Device, enabled: bool) -> bool:
        payload = self._request_object(
            "PUT",
            device.path,
            event="particle.device.signal",
            json={"signal": "1" if enabled else "0"},
            target=device.id_or_name,
        )
        return bool(payload.get("signaling", False))

    def flash_device(
        self, device: Device, file_paths: Sequence[str], options: FlashOptions
    ) -> FlashResult:
        data = {"file_type": "binary"} if options.binary else {}

        with ExitStack() as stack:
            files = self._open_files(stack, file_paths)
            payload, ok, errors = self._submit(
                "PUT",
                device.path,
                event="particle.device.flash",
                data=data,
                files=files,
                target=device.id_or_name,
            )

        return FlashResult(ok=ok, errors=errors, message=payload.get("status"))

    def change_device_product(
        self, device: Device, product_id: int, should_update: bool
    ) -> bool:
        payload = self._request_object(
            "PUT",
            device.path,
            event="particle.device.change_product",
            json={
                "product_id": product_id,
                "update_after_claim": should_update,
            },
            target=device.id_or_name,
        )
        return str(payload.get("updated_product_id")) == str(product_id)

    def update_device_public_key(
        self, device: Device, public_key: str, algorithm: str
    ) -> bool:
        payload = self._request_object(
            "POST",
            Device.UPDATE_KEYS_PATH,
            event="particle.device.update_public_key",
            json={
                "deviceID": device.id,
                "publicKey": public_key,
                "algorithm": algorithm,
                "filename": KEY_UPLOAD_FILENAME,
                "order": f"manufacturer_{int(time.time())}",
            },
            target=device.id_or_name,
        )
        return bool(payload.get("ok", True))

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, *, event: str, **kwargs: Any) -> Any:
        """Send one request and return the decoded JSON body."""
        response = self._send(method, path, event=event, **kwargs)
        return self._decode(response, event)

    def _request_object(
        self, method: str, path: str, *, event: str, **kwargs: Any
    ) -> Dict[str, Any]:
        payload = self._request(method, path, event=event, **kwargs)
        return self._expect_object(payload, event)

    def _submit(
        self, method: str, path: str, *, event: str, **kwargs: Any
    ) -> Tuple[Dict[str, Any], bool, str]:
        """
        Send a flash or compile request, the cloud answers 400 on build errors.

        Returns:
            The decoded body, whether the cloud accepted the request and the
            error text. A 400 is never accepted, whatever its body says.
        """
        response = self._send(method, path, event=event, accept_rejection=True, **kwargs)
        payload = self._expect_object(self._decode(response, event), event)

        if response.status_code == httpx.codes.BAD_REQUEST:
            errors = self._errors(payload) or response.reason_phrase
            return payload, False, errors

        ok, errors = self._outcome(payload)
        return payload, ok, errors

    def _send(
        self,
        method: str,
        path: str,
        *,
        event: str,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, str]] = None,
        files: Optional[List[Tuple[str, Tuple[str, Any]]]] = None,
        target: Optional[str] = None,
        accept_rejection: bool = False,
    ) -> httpx.Response:
        """
        Send one request and return the response.

        Args:
            method: HTTP method
            path: API path, with or without a leading slash
            event: Log event prefix for this operation
            target: Device id or name, reported when the cloud answers 404
            accept_rejection: Return a 400 answer instead of raising,
                compile and flash report their errors that way

        Raises:
            ParticleCloudError: Or one of its subclasses for known statuses
            ParticleConnectionError: If the cloud cannot be reached
        """
        url = self._url(path)

        with gateway_context(self.api_url, target):
            logger.info(f"{event}.request", method=method, url=url)

            try:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.request(
                        method,
                        url,
                        headers=self._headers(),
                        json=json,
                        data=data,
                        files=files,
                    )

                    if (
                        accept_rejection
                        and response.status_code == httpx.codes.BAD_REQUEST
                    ):
                        logger.warning(
                            f"{event}.rejected", status_code=response.status_code
                        )
                        return response

                    response.raise_for_status()

                    logger.info(f"{event}.response", status_code=response.status_code)
                    return response

            except httpx.HTTPStatusError as e:
                logger.error(
                    f"{event}.http_error",
                    status_code=e.response.status_code,
                    response_text=e.response.text,
                    url=url,
                    exc_info=e,
                )
                raise self._status_error(e.response, target) from e

            except httpx.RequestError as e:
                logger.error(
                    f"{event}.request_error",
                    error=str(e),
                    url=url,
                    exc_info=e,
                )
                raise ParticleConnectionError(
                    f"Failed to communicate with the Particle cloud: {str(e)}"
                ) from e

    def _decode(self, response: httpx.Response, event: str) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"{event}.malformed_response",
                status_code=response.status_code,
                response_text=response.text,
            )
            raise MalformedResponseError(
                "Particle cloud returned a body that is not JSON",
                status_code=response.status_code,
                details={"response_text": response.text},
            ) from e

    def _expect_object(self, payload: Any, event: str) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            logger.error(f"{event}.unexpected_shape", payload=payload)
            raise MalformedResponseError(
                "Particle cloud response is not a JSON object",
                details={"payload": payload},
            )
        return payload

    def _require(self, payload: Any, key: str, event: str) -> Any:
        if key not in self._expect_object(payload, event):
            logger.error(f"{event}.missing_field", field=key, payload=payload)
            raise MalformedResponseError(
                f"Particle cloud response has no '{key}'",
                details={"payload": payload},
            )
        return payload[key]

    def _status_error(
        self, response: httpx.Response, target: Optional[str]
    ) -> ParticleCloudError:
        status = response.status_code
        message = self._error_message(response)
        details = {"response_text": response.text}

        if status in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            return AuthenticationError(
                f"Particle cloud refused the access token: {message}",
                status_code=status,
                details=details,
            )
        if status == httpx.codes.NOT_FOUND and target is not None:
            return DeviceNotFoundError(target, details=details)
        if status == httpx.codes.TOO_MANY_REQUESTS:
            return RateLimitError(
                f"Particle cloud rate limit reached: {message}",
                retry_after=self._retry_after(response),
                details=details,
            )
        return ParticleCloudError(
            f"Particle cloud returned HTTP {status}: {message}",
            status_code=status,
            details=details,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text
        if isinstance(payload, dict):
            return str(
                payload.get("error_description")
                or payload.get("error")
                or response.text
            )
        return response.text

    @staticmethod
    def _retry_after(response: httpx.Response) -> Optional[float]:
        value = response.headers.get("Retry-After")
        if not value:
            return None
        try:
            return max(0.0, float(value))
        except ValueError:
            return None

    @staticmethod
    def _errors(payload: Dict[str, Any]) -> str:
        errors = payload.get("errors") or payload.get("error") or ""
        if isinstance(errors, list):
            return "\n".join(str(item) for item in errors)
        return str(errors)

    @classmethod
    def _outcome(cls, payload: Dict[str, Any]) -> Tuple[bool, str]:
        errors = cls._errors(payload)
        if "ok" in payload:
            return bool(payload["ok"]), errors
        return not errors, errors

    @staticmethod
    def _open_files(
        stack: ExitStack, file_paths: Sequence[str]
    ) -> List[Tuple[str, Tuple[str, Any]]]:
        files = []
        for index, file_path in enumerate(file_paths):
            field_name = "file" if index == 0 else f"file{index}"
            handle = stack.enter_context(open(file_path, "rb"))
            files.append((field_name, (Path(file_path).name, handle)))
        return files
