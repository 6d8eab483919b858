"""
JSON-RPC 2.0 transport over httpx.

call() issues one POST and decodes the {result, error} envelope into either a
result, a TransportError (no usable envelope), or an RpcApplicationError
(the node reported an error). call_with_fallback() runs an ordered list of
MethodAttempt values and moves to the next one only when the node answers
"method not found", so callers never learn which method name a node supports.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import httpx

from wallet_watcher.core.exceptions import RpcApplicationError, TransportError
from wallet_watcher.watcher_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 15.0

_request_ids = itertools.count(1)


def build_rpc_body(method: str, params: list[Any]) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": next(_request_ids),
        "method": method,
        "params": params,
    }


@dataclass(frozen=True)
class MethodAttempt:
    """One method name plus the adapter that builds its parameter list from logical arguments."""

    method: str
    adapt: Callable[..., list[Any]]


class JsonRpcClient:
    """
    Synchronous JSON-RPC client bound to one endpoint.

    Owns an httpx.Client unless one is injected (tests pass a client with
    httpx.MockTransport). Every request carries the configured timeout; a
    timeout surfaces as TransportError.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not url.strip():
            raise ValueError("url must be non-empty")
        self.url = url.strip()
        self._timeout = httpx.Timeout(timeout_sec)
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=self._timeout)

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "JsonRpcClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call; return the raw result (may be None)."""
        body = build_rpc_body(method, params)
        try:
            resp = self._http.post(self.url, json=body, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method}: timeout: {e}", method=method) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method}: {e}", method=method) from e

        try:
            envelope = resp.json()
        except ValueError as e:
            raise TransportError(
                f"{method}: malformed response body (HTTP {resp.status_code})",
                method=method,
            ) from e
        if not isinstance(envelope, dict):
            raise TransportError(
                f"{method}: response is not a JSON-RPC envelope (HTTP {resp.status_code})",
                method=method,
            )

        err = envelope.get("error")
        if err is not None:
            if isinstance(err, dict):
                code = err.get("code")
                message = str(err.get("message", ""))
            else:
                code, message = None, str(err)
            if not isinstance(code, int) or isinstance(code, bool):
                code = -32603
            raise RpcApplicationError(code, message, method=method)
        if resp.is_error:
            raise TransportError(f"{method}: HTTP {resp.status_code}", method=method)
        return envelope.get("result")

    def call_with_fallback(self, attempts: Sequence[MethodAttempt], *args: Any) -> Any:
        """
        Try each attempt in order, stopping at the first outcome that is not "method not found".

        Raises the last RpcApplicationError when every method is unknown to the node.
        """
        if not attempts:
            raise ValueError("attempts must be non-empty")
        last_error: RpcApplicationError | None = None
        for attempt in attempts:
            try:
                return self.call(attempt.method, attempt.adapt(*args))
            except RpcApplicationError as e:
                if not e.is_method_not_found:
                    raise
                last_error = e
                logger.debug("rpc_method_not_found_fallback", method=attempt.method, url=self.url)
        assert last_error is not None
        raise last_error
