from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import requests

from config.settings import Settings

logger = logging.getLogger(__name__)


class IntegrationError(Exception):
    status_code = 500


class IntegrationNotConfigured(IntegrationError):
    def __init__(self, label: str):
        super().__init__(f"{label} not configured")
        self.label = label


class UpstreamError(IntegrationError):
    status_code = 502

    def __init__(self, label: str, status: int | None = None, reason: str | None = None):
        if status is not None:
            message = f"{label} API error: {status}"
        else:
            message = f"{label} API error: {reason or 'request failed'}"
        super().__init__(message)
        self.label = label
        self.status = status


class UpstreamIntegration(ABC):
    label = "Upstream"

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    @property
    @abstractmethod
    def base_url(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def is_configured(self) -> bool:
        raise NotImplementedError

    def auth_headers(self) -> dict[str, str]:
        return {}

    def ensure_configured(self) -> None:
        if not self.is_configured():
            logger.error("%s config missing", self.label)
            raise IntegrationNotConfigured(self.label)

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request_json("GET", self.url(path), params=params)

    def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        headers = {**self.auth_headers(), **kwargs.pop("headers", {})}
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                timeout=self.settings.upstream_timeout_seconds,
                verify=self._verify_for(url),
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.error("%s request failed: %s", self.label, exc)
            raise UpstreamError(self.label, reason=str(exc)) from exc

        if not response.ok:
            logger.error("%s error response: %s", self.label, response.text)
            raise UpstreamError(self.label, status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(self.label, reason="invalid JSON") from exc

    def _verify_for(self, url: str) -> bool:
        if url.startswith("https"):
            return self.settings.upstream_verify_tls
        return True
