"""Error types for resource group lifecycle operations.

Adapters raise TransportError, RemoteRejected and NotFound. The reconciler
never recovers from them; it stamps the lifecycle operation onto the
exception and re-raises the same object.
"""

from __future__ import annotations

from enum import Enum


class LifecycleOperation(str, Enum):
    """Lifecycle operations exposed to the configuration engine."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    IMPORT = "import"


class ResourceGroupError(Exception):
    """Base class for all resource group errors.

    Attributes:
        operation: Lifecycle operation that produced the error, once known.
        resource_guid: Identifier of the entity involved, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: LifecycleOperation | None = None,
        resource_guid: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.resource_guid = resource_guid

    def __str__(self) -> str:
        if self.operation is None:
            return self.message
        if self.resource_guid:
            return f"{self.operation.value} {self.resource_guid}: {self.message}"
        return f"{self.operation.value}: {self.message}"


class TransportError(ResourceGroupError):
    """The call could not complete (network, authentication, timeout)."""

    pass


class RemoteRejected(ResourceGroupError):
    """The backend validated the request and declined it."""

    pass


class NotFound(ResourceGroupError):
    """The identifier does not resolve to a remote entity."""

    pass


class LifecycleStateError(ResourceGroupError):
    """Operation is not valid for the entity's current lifecycle status."""

    pass


class IdentityMismatchError(ResourceGroupError):
    """Operation addressed a different entity than the one the reconciler owns."""

    pass
