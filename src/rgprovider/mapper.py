"""Translation between local resource group records and wire records.

Pure functions, no I/O. The only representation mismatch is the enabled
flag: a bool locally, an integer 0/1 remotely.
"""

from __future__ import annotations

from .config import RESOURCE_GROUP_TYPE
from .models import ResourceGroupConfig, ResourceGroupState, WireProps, WireRecord

FLAG_TRUE = 1
FLAG_FALSE = 0


def bool_to_flag(value: bool | None, default: bool = True) -> int:
    """Convert a bool to the remote integer flag.

    Args:
        value: Local value, None when unset.
        default: Value assumed when unset.

    Returns:
        1 for True, 0 for False.
    """
    if value is None:
        value = default
    return FLAG_TRUE if value is True else FLAG_FALSE


def flag_to_bool(flag: int | None) -> bool:
    """Convert a remote integer flag to bool. Anything other than 1 is False."""
    return flag == FLAG_TRUE


def trim_accounts(accounts: list[str]) -> list[str]:
    return [account.strip() for account in accounts]


def encode(config: ResourceGroupConfig) -> WireRecord:
    """Build the wire record for a desired configuration.

    Read-only fields are never carried. The resource type is the fixed
    discriminator for account groups.
    """
    return WireRecord(
        name=config.name,
        type=RESOURCE_GROUP_TYPE,
        enabled=bool_to_flag(config.enabled),
        props=WireProps(
            description=config.description,
            accounts=trim_accounts(config.accounts),
        ),
    )


def decode(record: WireRecord) -> ResourceGroupState:
    """Build a local state record from a wire record, computed fields included."""
    props = record.props
    last_updated = props.last_updated
    return ResourceGroupState(
        resource_guid=record.resource_guid,
        name=record.name,
        enabled=flag_to_bool(record.enabled),
        description=props.description,
        accounts=tuple(props.accounts or ()),
        guid=record.guid,
        last_updated=None if last_updated is None else str(last_updated),
        updated_by=props.updated_by,
        type=record.type,
        is_default=flag_to_bool(record.is_default),
    )
