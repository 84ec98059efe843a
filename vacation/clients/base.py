"""
Declarative HTTP clients for calls to other ERP modules.

A client is a class whose methods only describe the remote endpoint:

    @http_client("hr")
    class HrClient(HttpClient):
        @get("/api/employees/{employee_id}")
        def get_employee(self, employee_id: int) -> EmployeeInfo: ...

Calling ``hr.get_employee(7)`` fills ``{employee_id}`` from the argument of
the same name, sends an argument named ``body`` as JSON, turns every other
non-None argument into a query parameter, and validates the response JSON
against the return annotation.
"""

import inspect
import re
import time
import types
from typing import Any, Callable, ClassVar, Dict, Optional, get_type_hints
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter

from vacation.exceptions import DataNotFoundError, ExternalAPIError, ServiceUnavailableError
from vacation.utils.logging import get_logger

logger = get_logger(__name__)

_PATH_PARAM = re.compile(r"{(\w+)}")

# Gateway style failures are worth another attempt, other errors are final
RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


class Endpoint:
    """A client method bound to an HTTP verb and a path template."""

    def __init__(self, method: str, path: str, func: Callable[..., Any]):
        self.method = method
        self.path = path
        self.func = func
        self.signature = inspect.signature(func)
        self.path_params = _PATH_PARAM.findall(path)

        missing = set(self.path_params) - set(self.signature.parameters)
        if missing:
            raise TypeError(
                f"{func.__qualname__}: path {path!r} references unknown parameter(s) {sorted(missing)}"
            )

        self._resolved = False
        self._adapter: Optional[TypeAdapter] = None

        self.__name__ = func.__name__
        self.__qualname__ = func.__qualname__
        self.__doc__ = func.__doc__

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __repr__(self) -> str:
        return f"<Endpoint {self.method} {self.path} ({self.__qualname__})>"

    def _response_adapter(self) -> Optional[TypeAdapter]:
        # Annotations are resolved on first call so forward references work
        if not self._resolved:
            return_type = get_type_hints(self.func).get("return", Any)
            self._adapter = None if return_type is type(None) else TypeAdapter(return_type)
            self._resolved = True
        return self._adapter

    def build_request(self, *args: Any, **kwargs: Any) -> tuple[str, Optional[dict], Any]:
        """Map call arguments to ``(path, query params, json body)``."""
        bound = self.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        arguments = dict(bound.arguments)
        arguments.pop("self", None)

        path = _PATH_PARAM.sub(
            lambda m: quote(str(arguments[m.group(1)]), safe=""), self.path
        )
        for name in self.path_params:
            arguments.pop(name, None)

        body = arguments.pop("body", None)
        if isinstance(body, BaseModel):
            body = body.model_dump(mode="json")

        params = {key: value for key, value in arguments.items() if value is not None}
        return path, params or None, body

    def __call__(self, client: "HttpClient", *args: Any, **kwargs: Any) -> Any:
        path, params, body = self.build_request(client, *args, **kwargs)
        response = client._request(self.method, path, params=params, json=body)

        adapter = self._response_adapter()
        if adapter is None or response.status_code == 204 or not response.content:
            return None
        try:
            return adapter.validate_python(response.json())
        except ValueError as e:
            raise ExternalAPIError(
                client.service_name,
                f"{self.method} {path} returned an unreadable payload: {e}",
                status_code=response.status_code,
            ) from e


def request(method: str, path: str) -> Callable[[Callable[..., Any]], Endpoint]:
    def decorator(func: Callable[..., Any]) -> Endpoint:
        return Endpoint(method.upper(), path, func)
    return decorator


def get(path: str) -> Callable[[Callable[..., Any]], Endpoint]:
    return request("GET", path)


def post(path: str) -> Callable[[Callable[..., Any]], Endpoint]:
    return request("POST", path)


def put(path: str) -> Callable[[Callable[..., Any]], Endpoint]:
    return request("PUT", path)


def delete(path: str) -> Callable[[Callable[..., Any]], Endpoint]:
    return request("DELETE", path)


class HttpClient:
    """
    Transport shared by all declarative clients.

    Retries connection failures, timeouts and 502/503/504 answers with a
    linear backoff, then maps the outcome onto the service exceptions:

    - retries exhausted -> ServiceUnavailableError
    - 404 -> DataNotFoundError
    - any other error status -> ExternalAPIError
    """

    service_name: ClassVar[str] = ""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        max_retries: int = 2,
        backoff: float = 0.2,
        transport: Optional[httpx.BaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_retries = max(0, max_retries)
        self.backoff = backoff
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json", **(headers or {})},
        )

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> httpx.Response:
        attempts = self.max_retries + 1
        last_error = ""

        for attempt in range(1, attempts + 1):
            try:
                response = self._client.request(method, path, params=params, json=json)
            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}: {e}"
                logger.warning(
                    "%s %s %s failed (attempt %d/%d): %s",
                    self.service_name, method, path, attempt, attempts, last_error,
                )
            else:
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    return self._raise_for_status(response, method, path)
                last_error = f"HTTP {response.status_code}"
                logger.warning(
                    "%s %s %s answered %d (attempt %d/%d)",
                    self.service_name, method, path, response.status_code, attempt, attempts,
                )

            if attempt < attempts and self.backoff > 0:
                time.sleep(self.backoff * attempt)

        raise ServiceUnavailableError(
            self.service_name,
            f"{method} {path} failed after {attempts} attempt(s): {last_error}",
        )

    def _raise_for_status(self, response: httpx.Response, method: str, path: str) -> httpx.Response:
        status_code = response.status_code
        if status_code == 404:
            raise DataNotFoundError(f"{self.service_name} resource", path)
        if status_code >= 400:
            raise ExternalAPIError(
                self.service_name,
                f"{method} {path} returned HTTP {status_code}: {response.text[:200]}",
                status_code=status_code,
            )
        return response

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} service={self.service_name!r} base_url={self.base_url!r}>"
