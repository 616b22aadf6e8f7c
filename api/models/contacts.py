"""
Trusted Contact Data Models
"""

from typing import List

from pydantic import BaseModel, Field, field_validator


class TrustedContactRequest(BaseModel):
    """Request model for adding or removing a trusted contact."""
    address: str = Field(
        ...,
        description="Sender address, bare or in 'Name <addr>' form"
    )

    @field_validator("address")
    @classmethod
    def validate_address(cls, value: str) -> str:
        """Require something that looks like an email address."""
        value = value.strip()
        if "@" not in value:
            raise ValueError("address must contain '@'")
        return value


class TrustedContactsResponse(BaseModel):
    """Response model listing trusted contacts."""
    contacts: List[str] = Field(
        default_factory=list,
        description="Normalized trusted addresses, sorted"
    )
