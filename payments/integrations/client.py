import json
from dataclasses import dataclass, field

import requests
from requests import RequestException

from ..exceptions import RemoteError, TransportError
from ..utils import mask_secrets

COMMON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}
METHODS = ("GET", "POST", "PUT", "DELETE")


@dataclass
class ProviderResponse:
    status_code: int
    body: dict = field(default_factory=dict)
    success: bool = True


def _decode(resp):
    try:
        return resp.json()
    except ValueError:
        return {"raw": resp.text}


class ProviderClient:
    """Single-attempt JSON client for a provider's HTTP API.

    Raises :class:`TransportError` when the provider can't be reached and
    :class:`RemoteError` (with the decoded body) on a non-2xx answer. Retrying
    is left to the caller.
    """

    def __init__(self, base_url: str, headers: dict = None, logger=None, timeout: float = 30):
        self.base_url = base_url.rstrip("/") + "/"
        self.headers = dict(headers or {})
        self.logger = logger
        self.timeout = timeout

    def get(self, endpoint, params=None):
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint, data=None):
        return self.request("POST", endpoint, data)

    def put(self, endpoint, data=None):
        return self.request("PUT", endpoint, data)

    def delete(self, endpoint):
        return self.request("DELETE", endpoint)

    def url_for(self, endpoint: str) -> str:
        return self.base_url + endpoint.lstrip("/")

    def request(self, method: str, endpoint: str, data=None, params=None) -> ProviderResponse:
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        url = self.url_for(endpoint)
        headers = {**COMMON_HEADERS, **self.headers}

        self._log("debug", "API Request", {"method": method, "url": url, "body": mask_secrets(data)})
        try:
            resp = requests.request(
                method,
                url,
                headers=headers,
                data=json.dumps(data) if data is not None else None,
                params=params or None,
                timeout=self.timeout,
                verify=True,
            )
        except RequestException as e:
            self._log("error", "Request failed", {"url": url, "error": str(e)})
            raise TransportError() from e

        body = _decode(resp)
        self._log("debug", "API Response", {"status_code": resp.status_code, "body": mask_secrets(body)})

        if not 200 <= resp.status_code < 300:
            message = body.get("message") if isinstance(body, dict) else None
            raise RemoteError(
                message or f"API request failed with status {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )
        return ProviderResponse(status_code=resp.status_code, body=body if isinstance(body, dict) else {"data": body})

    def _log(self, level, message, context):
        if self.logger:
            getattr(self.logger, level)(message, context)
