"""Mock resource group service state and operations.

Stores records in their wire JSON shape so that every response goes
through the same parsing path a real client would use.
"""

from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field
from typing import Any

from rgprovider.errors import NotFound, RemoteRejected, ResourceGroupError
from rgprovider.models import WireRecord

DEFAULT_ACCOUNT_GUID = "ACCOUNT_0123456789ABCDEF"
DEFAULT_USER = "operator@example.com"


@dataclass
class MockResourceGroupCall:
    """A recorded call against the mock API."""

    operation: str
    resource_guid: str | None = None
    payload: dict[str, Any] | None = None


@dataclass
class MockResourceGroupAPI:
    """In-memory resource group service.

    Satisfies the RemoteStateAdapter protocol. All operations are
    synchronous since this is test code.
    """

    account_guid: str = DEFAULT_ACCOUNT_GUID
    updated_by: str = DEFAULT_USER
    # Drop these props keys from update responses
    omit_from_update_response: tuple[str, ...] = ()
    # Keep stored props values for keys an update payload leaves out
    partial_updates: bool = False

    records: dict[str, dict[str, Any]] = field(default_factory=dict)
    calls: list[MockResourceGroupCall] = field(default_factory=list)
    _failures: dict[str, ResourceGroupError] = field(default_factory=dict)
    _guid_counter: itertools.count = field(default_factory=lambda: itertools.count(1))
    _clock: itertools.count = field(default_factory=lambda: itertools.count(1700000000000, 1000))

    # -------------------------------------------------------------------------
    # Test controls
    # -------------------------------------------------------------------------

    def fail_next(self, operation: str, error: ResourceGroupError) -> None:
        """Make the next call of an operation raise error."""
        self._failures[operation] = error

    def seed(
        self,
        resource_guid: str,
        name: str,
        accounts: list[str],
        *,
        enabled: int = 1,
        description: str | None = None,
        is_default: int = 0,
    ) -> dict[str, Any]:
        """Insert a record as if it had been created out-of-band."""
        record = {
            "resourceGuid": resource_guid,
            "guid": self.account_guid,
            "resourceName": name,
            "resourceType": "LW_ACCOUNT",
            "enabled": enabled,
            "isDefault": is_default,
            "props": {
                "description": description,
                "lwAccounts": list(accounts),
                "lastUpdated": next(self._clock),
                "updatedBy": self.updated_by,
            },
        }
        self.records[resource_guid] = record
        return copy.deepcopy(record)

    def remove_out_of_band(self, resource_guid: str) -> None:
        """Delete a record without going through the API."""
        self.records.pop(resource_guid, None)

    def call_count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call.operation == operation)

    # -------------------------------------------------------------------------
    # RemoteStateAdapter
    # -------------------------------------------------------------------------

    def create(self, record: WireRecord) -> WireRecord:
        payload = record.to_payload()
        self._record_call("create", None, payload)
        self._validate(payload)

        resource_guid = f"RG_{next(self._guid_counter):04d}"
        stored = self._store(resource_guid, payload)
        return WireRecord.model_validate({"data": stored})

    def get(self, resource_guid: str) -> WireRecord:
        self._record_call("get", resource_guid, None)
        return WireRecord.model_validate({"data": self._existing(resource_guid)})

    def update(self, resource_guid: str, record: WireRecord) -> WireRecord:
        payload = record.to_payload()
        self._record_call("update", resource_guid, payload)
        self._existing(resource_guid)
        self._validate(payload)

        stored = self._store(resource_guid, payload)
        response = copy.deepcopy(stored)
        for key in self.omit_from_update_response:
            response["props"].pop(key, None)
        return WireRecord.model_validate({"data": response})

    def delete(self, resource_guid: str) -> None:
        self._record_call("delete", resource_guid, None)
        existing = self._existing(resource_guid)
        if existing.get("isDefault") == 1:
            raise RemoteRejected("default resource groups cannot be deleted")
        del self.records[resource_guid]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _record_call(
        self, operation: str, resource_guid: str | None, payload: dict[str, Any] | None
    ) -> None:
        self.calls.append(MockResourceGroupCall(operation, resource_guid, payload))
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    def _existing(self, resource_guid: str) -> dict[str, Any]:
        record = self.records.get(resource_guid)
        if record is None:
            raise NotFound(f"resource group {resource_guid} not found")
        return copy.deepcopy(record)

    def _validate(self, payload: dict[str, Any]) -> None:
        if not payload.get("resourceName"):
            raise RemoteRejected("resourceName is required")
        if payload.get("resourceType") != "LW_ACCOUNT":
            raise RemoteRejected(f"unsupported resourceType: {payload.get('resourceType')}")
        if not payload.get("props", {}).get("lwAccounts"):
            raise RemoteRejected("props.lwAccounts must not be empty")

    def _store(self, resource_guid: str, payload: dict[str, Any]) -> dict[str, Any]:
        props = payload.get("props", {})
        previous = self.records.get(resource_guid, {})
        if self.partial_updates:
            props = {**previous.get("props", {}), **props}
        stored = {
            "resourceGuid": resource_guid,
            "guid": self.account_guid,
            "resourceName": payload["resourceName"],
            "resourceType": payload["resourceType"],
            "enabled": payload.get("enabled", 0),
            "isDefault": previous.get("isDefault", 0),
            "props": {
                "description": props.get("description"),
                "lwAccounts": list(props.get("lwAccounts", [])),
                "lastUpdated": next(self._clock),
                "updatedBy": self.updated_by,
            },
        }
        self.records[resource_guid] = stored
        return copy.deepcopy(stored)
