"""Call surface of the remote resource group service.

The provider never talks to the network itself. Any client satisfying
RemoteStateAdapter can be injected into the reconciler; an authenticated
client may be shared by many reconcilers as long as it is safe for
concurrent use on different identifiers.

Implementations signal failures by raising:
    TransportError: the call could not complete.
    RemoteRejected: the backend declined the request.
    NotFound: the identifier does not resolve.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import WireRecord


@runtime_checkable
class RemoteStateAdapter(Protocol):
    """Create, get, update and delete for account resource groups."""

    def create(self, record: WireRecord) -> WireRecord:
        """Create a resource group and return the stored record."""
        ...

    def get(self, resource_guid: str) -> WireRecord:
        """Fetch a resource group. Raises NotFound if it does not exist."""
        ...

    def update(self, resource_guid: str, record: WireRecord) -> WireRecord:
        """Replace the writable fields of a resource group."""
        ...

    def delete(self, resource_guid: str) -> None:
        """Delete a resource group."""
        ...
