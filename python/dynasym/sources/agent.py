"""HTTP client for the debug agent's REST API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..errors import AgentError
from ..logging import get_logger
from ..models import LiveSymbol, Module

logger = get_logger(__name__)


class AgentClient:
    """Talks to the debug agent attached to the target process.

    Responses use a ``{"success": bool, "data": ..., "message": str}``
    envelope. Changing the connection target drops the auth token, and a 401
    response clears it as well.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self._token = token
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def update_connection(self, host: str, port: int) -> None:
        new_url = f"http://{host}:{port}"
        if new_url != self.base_url:
            self.base_url = new_url
            self._token = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        if not self.base_url:
            raise AgentError("no agent connection configured")
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        url = f"{self.base_url}{endpoint}"
        try:
            resp = await self._http().request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise AgentError(f"{method} {endpoint} failed: {e}") from e

        if resp.status_code == 401:
            self._token = None
            raise AgentError("authentication failed", status_code=401)
        if not resp.is_success:
            raise AgentError(
                f"{method} {endpoint} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            body = resp.json()
        except ValueError as e:
            raise AgentError(f"{method} {endpoint} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise AgentError(f"{method} {endpoint} returned unexpected payload")
        if body.get("success") is False:
            raise AgentError(body.get("message") or f"{method} {endpoint} failed")
        return body.get("data") or {}

    async def list_modules(self) -> List[Module]:
        data = await self._request("GET", "/api/modules")
        modules: List[Module] = []
        for raw in data.get("modules") or []:
            try:
                modules.append(Module.model_validate(raw))
            except ValidationError:
                logger.debug("skipping_malformed_module", entry=raw)
        return modules

    async def enumerate(self, module: Module) -> List[LiveSymbol]:
        """Enumerate the symbols the agent reports for ``module``."""
        data = await self._request("GET", f"/api/modules/{module.base}/symbols")
        symbols: List[LiveSymbol] = []
        skipped = 0
        for raw in data.get("symbols") or []:
            try:
                symbols.append(LiveSymbol.model_validate(raw))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.debug(
                "skipped_malformed_symbols", module=module.short_name, count=skipped
            )
        return symbols

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AgentClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
