"""The generated client: operations composed over a transport.

An :class:`ApiClient` is built once by
:func:`~typedapi.generator.builder.build_client` and never changes after
that. It holds:

* the transport it was built on -- unknown attributes are delegated to it,
  so ``client.request(...)``, ``client.get(...)`` and
  ``client.interceptors`` keep working;
* one :class:`Operation` per ``(path, method)``, reachable by name
  (``client.getUser`` / ``client["getUser"]``) and by path
  (``client.paths["/user/{id}"]["get"]``) -- both views share instances.

An operation named ``transport``, ``operations``, ``stages`` or ``aclose``
takes over that client attribute, the way operations also take over
transport attributes; ``async with client`` still closes the transport.
``paths`` always returns the path map.

Example::

    client = build_client(spec, HttpTransport(base_url="https://api.example.com"))
    async with client:
        result = await client.getUser({"id": 7, "expand": "details"})
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional

from typedapi.client.params import Parameters, split_params
from typedapi.client.response import ResponseNormalizer
from typedapi.client.result import ApiResponse


class Operation:
    """One callable API operation.

    Calling it splits *parameters* against the URL template, builds the
    request config, and awaits the normalised result. Path-parameter errors
    are raised before anything is sent.

    Attributes:
        name: Operation name (declared ``operationId`` or derived).
        path: URL template.
        method: HTTP method token.
    """

    def __init__(self, name: str, path: str, method: str, normalizer: ResponseNormalizer) -> None:
        self.name = name
        self.path = path
        self.method = method
        self._normalizer = normalizer

    def build_config(
        self,
        parameters: Parameters = None,
        data: Any = None,
        config: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Return the transport config for one call; *config* overrides win."""
        split = split_params(self.path, parameters)
        return {
            "method": self.method,
            "url": split.url,
            "params": split.query_params,
            "data": data,
            "operation_name": self.name,
            **(config or {}),
        }

    async def __call__(
        self,
        parameters: Parameters = None,
        data: Any = None,
        config: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse:
        return await self._normalizer(self.build_config(parameters, data, config))

    def __repr__(self) -> str:
        return f"<Operation {self.name}: {self.method.upper()} {self.path}>"


# Client members an operation of the same name takes over.
_SHADOWABLE = frozenset({"transport", "operations", "stages", "aclose"})


class ApiClient:
    """Typed operations plus pass-through access to a transport.

    Args:
        transport: The request executor the operations dispatch through.
        operations: Operation name to :class:`Operation`.
        paths: URL template to method token to :class:`Operation`.
        normalizer: The normalizer shared by every operation.
    """

    def __init__(
        self,
        transport: Any,
        operations: Mapping[str, Operation],
        paths: Mapping[str, Mapping[str, Operation]],
        normalizer: ResponseNormalizer,
    ) -> None:
        self._transport = transport
        self._operations = MappingProxyType(dict(operations))
        self._paths = MappingProxyType(
            {path: MappingProxyType(dict(methods)) for path, methods in paths.items()}
        )
        self._normalizer = normalizer

    @property
    def transport(self) -> Any:
        return self._transport

    @property
    def operations(self) -> Mapping[str, Operation]:
        """Read-only map of operation name to :class:`Operation`."""
        return self._operations

    @property
    def paths(self) -> Mapping[str, Mapping[str, Operation]]:
        """Read-only map of URL template to method token to :class:`Operation`."""
        return self._paths

    @property
    def stages(self) -> tuple:
        """Response stages run after every round-trip, in order."""
        return self._normalizer.stages

    def __getattribute__(self, name: str) -> Any:
        # Operations named like a client member replace it, as they replace
        # transport members in __getattr__. ``paths`` stays reserved.
        if name in _SHADOWABLE:
            operation = object.__getattribute__(self, "_operations").get(name)
            if operation is not None:
                return operation
        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails.
        if name.startswith("__") or name in {"_operations", "_transport", "_paths", "_normalizer"}:
            raise AttributeError(name)
        operation = self._operations.get(name)
        if operation is not None:
            return operation
        return getattr(self._transport, name)

    def __getitem__(self, name: str) -> Operation:
        return self._operations[name]

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._operations))

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._close_transport()

    async def aclose(self) -> None:
        """Close the transport, if it can be closed."""
        await self._close_transport()

    async def _close_transport(self) -> None:
        close = getattr(self._transport, "aclose", None)
        if close is not None:
            await close()

    def __repr__(self) -> str:
        return f"<ApiClient operations={len(self._operations)} transport={type(self._transport).__name__}>"
