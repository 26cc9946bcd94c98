"""
Mail proxy Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field


class AccountCredentials(BaseModel):
    """Address and password for a Mail.tm account."""

    address: EmailStr = Field(..., description="Mailbox address")
    password: str = Field(..., min_length=6, description="Mailbox password")


class InboxCreated(BaseModel):
    """A freshly provisioned disposable inbox."""

    account_id: str = Field(..., description="Mail.tm account ID")
    address: EmailStr = Field(..., description="Mailbox address")
    password: str = Field(..., description="Generated mailbox password")
    token: str = Field(..., description="Mail.tm bearer token for this mailbox")
