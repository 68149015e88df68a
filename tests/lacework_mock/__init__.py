"""Resource group API mock for lifecycle testing.

Provides an in-memory implementation of the remote resource group service
so the reconciler can be exercised without network access.

Key Features:
- In-memory state keyed by resource_guid
- Backend-assigned identifiers and computed fields
- Error injection per operation
- Partial update echoes and out-of-band deletion

Usage:
    from lacework_mock import MockResourceGroupAPI

    api = MockResourceGroupAPI()
    reconciler = ResourceGroupReconciler(api)
    state = reconciler.create(config)

    assert api.call_count("create") == 1
"""

from .api import MockResourceGroupAPI, MockResourceGroupCall

__all__ = [
    "MockResourceGroupAPI",
    "MockResourceGroupCall",
]
