"""Identity endpoints and the bearer-token dependencies used by every router"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ayoo.config import settings
from ayoo.database import get_db
from ayoo.models.account import Account, AccountRole
from ayoo.orders.accounts import AccountRegistry, normalize_email
from ayoo.schemas.auth import Token, RefreshRequest, AccountCreate, ProfileUpdate, AccountResponse

router = APIRouter()
logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

ACCESS = "access"
REFRESH = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _encode(account: Account, token_type: str, lifetime: timedelta, **claims) -> str:
    payload = {
        "sub": str(account.id),
        "exp": datetime.utcnow() + lifetime,
        "type": token_type,
        **claims,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(account: Account) -> str:
    """Short-lived bearer token carrying the account role"""
    return _encode(
        account,
        ACCESS,
        timedelta(minutes=settings.access_token_expire_minutes),
        role=account.role.value,
    )


def create_refresh_token(account: Account) -> str:
    return _encode(account, REFRESH, timedelta(days=settings.refresh_token_expire_days))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str, expected_type: str) -> Optional[UUID]:
    """Account id from a signed token of the expected type, else None"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return UUID(payload["sub"]) if payload.get("type") == expected_type else None
    except (JWTError, KeyError, ValueError):
        return None


async def issue_tokens(account: Account, db: AsyncSession) -> Token:
    """New access token plus a rotated refresh token, stored on the account"""
    access_token = create_access_token(account)
    account.refresh_token = create_refresh_token(account)
    await db.commit()
    return Token(
        access_token=access_token,
        refresh_token=account.refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Account:
    account_id = decode_token(token, ACCESS)
    account = await db.get(Account, account_id) if account_id else None
    if account is None or not account.is_active:
        raise _unauthorized("Invalid or expired token")
    return account


async def get_current_active_user(
    current_user: Account = Depends(get_current_user),
) -> Account:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Account is disabled")
    return current_user


def require_role(*roles: AccountRole):
    """Dependency factory for role-based access control; admins always pass"""
    async def role_checker(current_user: Account = Depends(get_current_active_user)) -> Account:
        if current_user.role != AccountRole.ADMIN and current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user
    return role_checker


@router.post("/register", response_model=AccountResponse, status_code=201)
async def register(
    request: AccountCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a customer, merchant or rider account"""
    if request.role == AccountRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin accounts cannot self-register")
    
    registry = AccountRegistry(db)
    if await registry.get_by_email(request.email):
        raise HTTPException(status_code=409, detail="Account exists")
    if request.role == AccountRole.MERCHANT:
        if await registry.merchant_name_taken(request.name):
            raise HTTPException(status_code=409, detail="Restaurant name is already registered")
        if request.merchant_id and await registry.find_merchant(request.merchant_id, None):
            raise HTTPException(status_code=409, detail="Merchant id is already registered")
    
    account = Account(
        email=normalize_email(request.email),
        hashed_password=get_password_hash(request.password),
        name=request.name,
        role=request.role,
        preferred_city=request.preferred_city,
        merchant_id=request.merchant_id,
        points=0,
        xp=0,
        level=1,
        earnings_cents=0,
    )
    db.add(account)
    await db.commit()
    await db.refresh(account)
    
    logger.info("Account registered", email=account.email, role=account.role.value)
    return account


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Exchange email and password for a token pair"""
    account = await AccountRegistry(db).get_by_email(form_data.username)
    if not account or not verify_password(form_data.password, account.hashed_password):
        raise _unauthorized("Incorrect email or password")
    if not account.is_active:
        raise _unauthorized("Account is disabled")
    
    account.last_login = datetime.utcnow()
    return await issue_tokens(account, db)


@router.post("/refresh", response_model=Token)
async def refresh_token(
    request: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Rotate the refresh token; a token that was already rotated is refused"""
    account_id = decode_token(request.refresh_token, REFRESH)
    account = await db.get(Account, account_id) if account_id else None
    if account is None or account.refresh_token != request.refresh_token:
        raise _unauthorized("Invalid refresh token")
    return await issue_tokens(account, db)


@router.get("/me", response_model=AccountResponse)
async def get_current_user_info(
    current_user: Account = Depends(get_current_active_user),
):
    return current_user


@router.patch("/me", response_model=AccountResponse)
async def update_profile(
    updates: ProfileUpdate,
    current_user: Account = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update profile fields; balances are never editable here"""
    data = updates.model_dump(exclude_unset=True)
    
    # Roles are fixed at registration
    role = data.get("role")
    if role is not None and role != current_user.role and current_user.role != AccountRole.ADMIN:
        raise HTTPException(status_code=403, detail="Role cannot be changed from the profile")
    
    name = data.get("name")
    if (
        name
        and (role or current_user.role) == AccountRole.MERCHANT
        and await AccountRegistry(db).merchant_name_taken(name, exclude=current_user)
    ):
        raise HTTPException(status_code=409, detail="Restaurant name is already registered")
    
    for field, value in data.items():
        if value is not None:
            setattr(current_user, field, value)
    
    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.post("/logout")
async def logout(
    current_user: Account = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Revoke the stored refresh token"""
    current_user.refresh_token = None
    await db.commit()
    return {"message": "Logged out"}
