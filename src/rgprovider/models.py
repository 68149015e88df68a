"""Pydantic models for resource group records.

Three shapes are modelled:
1. ResourceGroupConfig - the desired state handed over by the configuration engine
2. WireRecord - the shape exchanged with the remote service
3. ResourceGroupState - the reconciled local state, config plus computed fields

Field descriptions double as the attribute schema exposed to the
configuration engine.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .config import MAX_ACCOUNTS, MAX_NAME_LENGTH

# =============================================================================
# Local Configuration
# =============================================================================


class ResourceGroupConfig(BaseModel):
    """Desired state of an account resource group."""

    model_config = {"extra": "ignore"}

    name: Annotated[
        str, Field(min_length=1, max_length=MAX_NAME_LENGTH, description="The resource group name")
    ]
    enabled: bool = Field(True, description="The state of the resource group")
    # Unset is the empty string so that clearing a description is sent
    description: str = Field("", description="The description of the resource group")
    accounts: Annotated[
        list[str],
        Field(
            min_length=1,
            max_length=MAX_ACCOUNTS,
            description="The list of accounts to include in the resource group",
        ),
    ]

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("accounts")
    @classmethod
    def validate_accounts(cls, v: list[str]) -> list[str]:
        trimmed = [account.strip() for account in v]
        if any(not account for account in trimmed):
            raise ValueError("accounts must not contain blank entries")
        return trimmed


# =============================================================================
# Wire Records
# =============================================================================


class WireProps(BaseModel):
    """Nested props of a remote resource group."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    description: str | None = None
    accounts: list[str] | None = Field(None, alias="lwAccounts")
    last_updated: int | str | None = Field(None, alias="lastUpdated")
    updated_by: str | None = Field(None, alias="updatedBy")


class WireRecord(BaseModel):
    """A resource group as sent to and returned by the remote service.

    Every field is optional so that partial responses still parse.
    Integer flags are kept as-is; conversion is the mapper's job.
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    resource_guid: str | None = Field(None, alias="resourceGuid")
    guid: str | None = None
    name: str | None = Field(None, alias="resourceName")
    type: str | None = Field(None, alias="resourceType")
    enabled: int | None = None
    is_default: int | None = Field(None, alias="isDefault")
    props: WireProps = Field(default_factory=WireProps)

    @model_validator(mode="before")
    @classmethod
    def unwrap_data(cls, data: Any) -> Any:
        # API responses wrap the record in {"data": {...}}
        if isinstance(data, dict) and set(data) == {"data"} and isinstance(data["data"], dict):
            return data["data"]
        return data

    @field_validator("props", mode="before")
    @classmethod
    def default_props(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON shape expected by the remote service."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Local State
# =============================================================================


class ResourceGroupState(BaseModel):
    """Reconciled local state of an account resource group."""

    model_config = {"extra": "ignore", "frozen": True}

    resource_guid: str | None = Field(
        None, description="The resource group unique identifier"
    )
    name: str | None = Field(None, description="The resource group name")
    enabled: bool = Field(False, description="The state of the resource group")
    description: str | None = Field(None, description="The description of the resource group")
    accounts: tuple[str, ...] = Field(
        default=(),
        description="The list of accounts to include in the resource group",
    )

    # Computed by the backend
    guid: str | None = Field(None, description="The account id the resource group belongs to")
    last_updated: str | None = Field(
        None, description="The time in millis when the resource was last updated"
    )
    updated_by: str | None = Field(
        None, description="The username of the user who performed the last update"
    )
    type: str | None = Field(None, description="The type of the resource group")
    is_default: bool = Field(
        False, description="Whether the resource group is a default resource group"
    )
