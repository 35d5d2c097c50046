"""HTTP delivery of encoded readings to the ingestion endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import httpx

from services.encoder import CONTENT_TYPE

EXPECTED_STATUS = 201


@dataclass(frozen=True)
class DeliverySuccess:
    status_code: int = EXPECTED_STATUS


@dataclass(frozen=True)
class UnexpectedStatus:
    """The endpoint answered, but not with ``201 Created``."""

    status_code: int
    detail: Optional[str] = None


@dataclass(frozen=True)
class TransportError:
    """The request never produced a response (refused, timed out, DNS, I/O)."""

    cause: Exception

    @property
    def reason(self) -> str:
        return str(self.cause) or type(self.cause).__name__


DeliveryOutcome = Union[DeliverySuccess, UnexpectedStatus, TransportError]


class DeliveryClient:
    """Posts payloads to a single endpoint and classifies the outcome.

    No retries are attempted; a failed delivery is reported to the caller.
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {timeout}.")
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "DeliveryClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def deliver(self, payload: bytes) -> DeliveryOutcome:
        try:
            response = self._client.post(
                self.endpoint_url,
                content=payload,
                headers={"Content-Type": CONTENT_TYPE},
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            return TransportError(cause=exc)

        if response.status_code == EXPECTED_STATUS:
            return DeliverySuccess(status_code=response.status_code)
        return UnexpectedStatus(
            status_code=response.status_code,
            detail=self._extract_detail(response),
        )

    @staticmethod
    def _extract_detail(response: httpx.Response) -> Optional[str]:
        try:
            data = response.json()
        except ValueError:
            text = response.text.strip()
            return text[:200] or None
        if isinstance(data, dict) and data.get("detail") is not None:
            return str(data["detail"])[:200]
        return None
