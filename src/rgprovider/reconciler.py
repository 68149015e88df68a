"""Lifecycle reconciliation for a single account resource group.

The reconciler drives one remote entity through its lifecycle:

    ABSENT --create/import--> PRESENT --read/update--> PRESENT --delete--> DELETED

Each operation:
1. Encodes the desired configuration into a wire record (create, update)
2. Issues exactly one call on the injected RemoteStateAdapter
3. Decodes the response and writes it into the local state record

Local state changes only after the adapter confirms success. Adapter
failures are re-raised unchanged apart from being tagged with the
operation that produced them; nothing is retried here.

IDENTITY: resource_guid is assigned by the backend on create (or supplied
on import) and is never changed afterwards. Every later operation takes it
as an explicit argument and it must match the entity this reconciler owns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

from .adapter import RemoteStateAdapter
from .errors import (
    IdentityMismatchError,
    LifecycleOperation,
    LifecycleStateError,
    NotFound,
    RemoteRejected,
    ResourceGroupError,
    TransportError,
)
from .mapper import decode, encode
from .models import ResourceGroupConfig, ResourceGroupState, WireRecord
from .provenance import OperationProvenance, get_provenance_logger

logger = logging.getLogger(__name__)

# Fields refreshed from an update response. description and accounts are
# kept as sent rather than trusted from a possibly partial echo.
# TODO: revisit once the backend's update response is confirmed to echo props in full.
UPDATE_REFRESH_FIELDS: tuple[str, ...] = (
    "name",
    "enabled",
    "type",
    "updated_by",
    "last_updated",
)


class EntityStatus(str, Enum):
    """Lifecycle status of the entity owned by a reconciler."""

    ABSENT = "absent"
    PRESENT = "present"
    DELETED = "deleted"


class ResourceGroupReconciler:
    """Reconciles one account resource group against the remote service.

    Operations run sequentially; an instance must not be shared between
    threads. The adapter may be shared between instances.
    """

    def __init__(
        self,
        adapter: RemoteStateAdapter,
        state: ResourceGroupState | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            adapter: Client for the remote resource group service.
            state: Previously persisted state. When it carries a resource_guid
                the entity starts PRESENT, otherwise ABSENT.
        """
        self._adapter = adapter
        self._provenance_logger = get_provenance_logger()
        self._deleted_guid: str | None = None

        if state is not None and state.resource_guid:
            self._state: ResourceGroupState | None = state
            self._status = EntityStatus.PRESENT
        else:
            self._state = None
            self._status = EntityStatus.ABSENT

    @property
    def status(self) -> EntityStatus:
        return self._status

    @property
    def state(self) -> ResourceGroupState | None:
        """Last confirmed local state, None unless PRESENT."""
        return self._state

    @property
    def resource_guid(self) -> str | None:
        return self._state.resource_guid if self._state is not None else None

    # -------------------------------------------------------------------------
    # Lifecycle operations
    # -------------------------------------------------------------------------

    def create(self, config: ResourceGroupConfig) -> ResourceGroupState:
        """Create the resource group remotely and store the returned state.

        Raises:
            LifecycleStateError: If the entity is not ABSENT.
            RemoteRejected: If the backend declines the payload.
            TransportError: If the call cannot complete.
        """
        operation = LifecycleOperation.CREATE
        self._require_status(operation, EntityStatus.ABSENT, None)

        record = encode(config)
        logger.info(
            "Creating resource group",
            extra={"resource_name": config.name, "resource_type": record.type},
        )
        logger.debug("Create payload", extra={"payload": record.to_payload()})

        with self._audited(operation, None, config.name) as provenance:
            response = self._invoke(operation, None, self._adapter.create, record)
            state = decode(response)
            if not state.resource_guid:
                raise RemoteRejected(
                    "create response did not include a resource_guid",
                    operation=operation,
                )
            provenance.resource_guid = state.resource_guid

        self._state = state
        self._status = EntityStatus.PRESENT
        logger.info(
            "Created resource group",
            extra={"resource_guid": state.resource_guid, "resource_type": state.type},
        )
        return state

    def read(self, resource_guid: str) -> ResourceGroupState:
        """Refresh local state from the backend, overwriting every field.

        A NotFound means the entity was deleted out-of-band. The status is
        left PRESENT; dropping the record is the caller's decision.

        Raises:
            NotFound: If the identifier no longer resolves.
            TransportError: If the call cannot complete.
        """
        operation = LifecycleOperation.READ
        self._require_status(operation, EntityStatus.PRESENT, resource_guid)

        logger.info("Reading resource group", extra={"resource_guid": resource_guid})
        state = self._fetch(operation, resource_guid)

        self._state = state
        logger.info("Read resource group", extra={"resource_guid": resource_guid})
        return state

    def update(self, resource_guid: str, config: ResourceGroupConfig) -> ResourceGroupState:
        """Push the configuration to the backend.

        Writable fields are last-writer-wins from config. Only
        UPDATE_REFRESH_FIELDS are taken from the response; description and
        accounts are kept as sent, and other computed fields keep their
        last known values.

        Raises:
            RemoteRejected: If the backend declines the payload.
            TransportError: If the call cannot complete.
        """
        operation = LifecycleOperation.UPDATE
        self._require_status(operation, EntityStatus.PRESENT, resource_guid)

        # Identity travels explicitly; encoding never carries it
        record = encode(config).model_copy(update={"resource_guid": resource_guid})
        logger.info(
            "Updating resource group",
            extra={"resource_guid": resource_guid, "resource_name": config.name},
        )
        logger.debug("Update payload", extra={"payload": record.to_payload()})

        with self._audited(operation, resource_guid, config.name):
            response = self._invoke(
                operation, resource_guid, self._adapter.update, resource_guid, record
            )
            refreshed = decode(response)
            self._warn_on_identity_drift(operation, resource_guid, refreshed)

        changes: dict[str, Any] = {name: getattr(refreshed, name) for name in UPDATE_REFRESH_FIELDS}
        changes["description"] = record.props.description
        changes["accounts"] = tuple(record.props.accounts or ())

        assert self._state is not None
        state = self._state.model_copy(update=changes)
        self._state = state
        logger.info("Updated resource group", extra={"resource_guid": resource_guid})
        return state

    def delete(self, resource_guid: str) -> None:
        """Delete the resource group remotely.

        RemoteRejected and NotFound are terminal for the caller, which
        discards the record either way. TransportError leaves the entity
        PRESENT so the delete can be retried.

        Raises:
            RemoteRejected: If the backend refuses removal.
            NotFound: If the entity is already gone.
            TransportError: If the call cannot complete.
        """
        operation = LifecycleOperation.DELETE
        self._require_status(operation, EntityStatus.PRESENT, resource_guid)

        logger.info("Deleting resource group", extra={"resource_guid": resource_guid})
        with self._audited(operation, resource_guid, None):
            self._invoke(operation, resource_guid, self._adapter.delete, resource_guid)

        self._state = None
        self._status = EntityStatus.DELETED
        self._deleted_guid = resource_guid
        logger.info("Deleted resource group", extra={"resource_guid": resource_guid})

    def import_state(self, resource_guid: str) -> ResourceGroupState:
        """Reconstruct local state from a bare identifier.

        Equivalent to a read with no prior configuration: every field,
        accounts and enabled included, comes from the fetched record.

        Raises:
            LifecycleStateError: If the entity is not ABSENT.
            NotFound: If the identifier does not resolve.
            TransportError: If the call cannot complete.
        """
        operation = LifecycleOperation.IMPORT
        self._require_status(operation, EntityStatus.ABSENT, resource_guid)

        logger.info("Importing resource group", extra={"resource_guid": resource_guid})
        state = self._fetch(operation, resource_guid)

        self._state = state
        self._status = EntityStatus.PRESENT
        logger.info(
            "Imported resource group",
            extra={"resource_guid": resource_guid, "resource_name": state.name},
        )
        return state

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _fetch(self, operation: LifecycleOperation, resource_guid: str) -> ResourceGroupState:
        with self._audited(operation, resource_guid, None) as provenance:
            response = self._invoke(operation, resource_guid, self._adapter.get, resource_guid)
            fetched = decode(response)
            self._warn_on_identity_drift(operation, resource_guid, fetched)
            provenance.resource_name = fetched.name
        return fetched.model_copy(update={"resource_guid": resource_guid})

    def _require_status(
        self,
        operation: LifecycleOperation,
        expected: EntityStatus,
        resource_guid: str | None,
    ) -> None:
        """Check lifecycle status and identity before any remote call."""
        if resource_guid is not None and not resource_guid:
            raise ValueError("resource_guid must not be empty")

        if self._status is EntityStatus.DELETED:
            if operation is LifecycleOperation.CREATE:
                raise LifecycleStateError(
                    "entity was deleted; use a new reconciler to recreate it",
                    operation=operation,
                    resource_guid=self._deleted_guid,
                )
            # The identifier is no longer valid for any operation
            raise NotFound(
                "resource group was deleted",
                operation=operation,
                resource_guid=resource_guid,
            )

        if self._status is not expected:
            hint = "import it first" if self._status is EntityStatus.ABSENT else "it already exists"
            raise LifecycleStateError(
                f"cannot {operation.value} a {self._status.value} resource group; {hint}",
                operation=operation,
                resource_guid=resource_guid,
            )

        owned = self.resource_guid
        if resource_guid is not None and owned is not None and resource_guid != owned:
            raise IdentityMismatchError(
                f"reconciler owns {owned}, not {resource_guid}",
                operation=operation,
                resource_guid=resource_guid,
            )

    def _invoke(
        self,
        operation: LifecycleOperation,
        resource_guid: str | None,
        call: Callable[..., Any],
        *args: Any,
    ) -> Any:
        """Run one adapter call, tagging any failure with the operation.

        Returns a WireRecord for create/get/update, None for delete.
        """
        try:
            response = call(*args)
            if response is None or isinstance(response, WireRecord):
                return response
            # Adapters may hand back the raw JSON mapping
            return WireRecord.model_validate(response)
        except ResourceGroupError as e:
            e.operation = operation
            if e.resource_guid is None:
                e.resource_guid = resource_guid
            raise
        except Exception as e:
            raise TransportError(
                f"{type(e).__name__}: {e}",
                operation=operation,
                resource_guid=resource_guid,
            ) from e

    @contextmanager
    def _audited(
        self,
        operation: LifecycleOperation,
        resource_guid: str | None,
        resource_name: str | None,
    ) -> Iterator[OperationProvenance]:
        provenance = self._provenance_logger.create_provenance(
            operation=operation.value,
            resource_guid=resource_guid,
            resource_name=resource_name,
        )
        try:
            yield provenance
        except Exception as e:
            provenance.finish(e)
            self._provenance_logger.log_provenance(provenance)
            raise
        provenance.finish()
        self._provenance_logger.log_provenance(provenance)

    def _warn_on_identity_drift(
        self,
        operation: LifecycleOperation,
        resource_guid: str,
        received: ResourceGroupState,
    ) -> None:
        if received.resource_guid and received.resource_guid != resource_guid:
            logger.warning(
                "Backend returned a different resource_guid; keeping the original",
                extra={
                    "operation": operation.value,
                    "resource_guid": resource_guid,
                    "received_resource_guid": received.resource_guid,
                },
            )
