"""Authentication schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

from ayoo.models.account import AccountRole


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshRequest(BaseModel):
    """Token refresh request"""
    refresh_token: str


class AccountCreate(BaseModel):
    """Register account request"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    role: AccountRole = AccountRole.CUSTOMER
    preferred_city: Optional[str] = None
    merchant_id: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Update profile request"""
    name: Optional[str] = None
    avatar: Optional[str] = None
    preferred_city: Optional[str] = None
    role: Optional[AccountRole] = None


class AccountResponse(BaseModel):
    """Account response"""
    id: UUID
    email: str
    name: str
    avatar: Optional[str]
    preferred_city: Optional[str]
    role: AccountRole
    merchant_id: Optional[str]
    points: int
    xp: int
    level: int
    earnings_cents: int
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True
