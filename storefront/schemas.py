from datetime import datetime
from pydantic import BaseModel, BeforeValidator, EmailStr, Field
from typing import Annotated, List, Literal, Optional

ORDER_STATUSES = ('pending', 'successful', 'cancelled')
PRODUCT_CATEGORIES = ('fiction', 'non-fiction')

# largest value a 64-bit integer column holds
MAX_ID = 2**63 - 1

def parse_id(value) -> Optional[int]:
    """Return ``value`` as a storable row id, or None if it cannot be one."""
    if isinstance(value, (bool, float)):
        return None
    try:
        n = int(value)
    except (TypeError, ValueError):
        return None
    return n if 0 < n <= MAX_ID else None

def _strip(v):
    return v.strip() if isinstance(v, str) else v

def _lower(v):
    return v.strip().lower() if isinstance(v, str) else v

RoleName = Literal['admin', 'user']
Category = Annotated[Literal['fiction', 'non-fiction'], BeforeValidator(_lower)]
Email = Annotated[EmailStr, BeforeValidator(_lower)]
UserName = Annotated[str, BeforeValidator(_strip), Field(min_length=1, max_length=120)]
ProductName = Annotated[str, BeforeValidator(_strip), Field(min_length=1, max_length=100)]

# --- users ---

class UserCreate(BaseModel):
    user_name: UserName
    email: Email
    password: str = Field(min_length=6)
    role: RoleName = 'user'
    address: Optional[str] = None

class UserUpdate(BaseModel):
    user_name: Optional[UserName] = None
    email: Optional[Email] = None
    role: Optional[RoleName] = None
    address: Optional[str] = None

class UserRead(BaseModel):
    id: int
    user_name: str
    email: str
    role: str
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config: from_attributes = True

class UserEnvelope(BaseModel):
    message: str
    data: UserRead

class UserListEnvelope(BaseModel):
    message: str
    data: List[UserRead] = []
    count: int = 0

class DeletedUser(BaseModel):
    id: int
    user_name: str
    email: str
    class Config: from_attributes = True

class DeletedUserEnvelope(BaseModel):
    message: str
    data: DeletedUser

# --- auth ---

class LoginPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class LoginUser(BaseModel):
    id: int
    user_name: str
    email: str
    role: str
    class Config: from_attributes = True

class LoginResponse(BaseModel):
    message: str
    user: LoginUser
    token: str
    token_type: str = 'bearer'

# --- products ---

class ProductCreate(BaseModel):
    name: ProductName
    price: float = Field(gt=0)
    category: Category
    quantity: int = Field(ge=0, le=MAX_ID)

class ProductUpdate(BaseModel):
    name: Optional[ProductName] = None
    price: Optional[float] = Field(default=None, gt=0)
    category: Optional[Category] = None
    quantity: Optional[int] = Field(default=None, ge=0, le=MAX_ID)

class ProductRead(BaseModel):
    id: int
    name: str
    price: float
    formatted_price: str
    category: str
    quantity: int
    in_stock: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config: from_attributes = True

class ProductEnvelope(BaseModel):
    message: str
    product: ProductRead

class ProductListEnvelope(BaseModel):
    message: str
    products: List[ProductRead] = []

# --- orders ---

class OrderItemRequest(BaseModel):
    # ids past the column range resolve to no product rather than failing validation
    product: int
    quantity: int = Field(ge=1, le=MAX_ID)

class OrderItemRead(BaseModel):
    product_id: int
    quantity: int
    unit_price: float
    name_snapshot: str
    class Config: from_attributes = True

class OrderRead(BaseModel):
    id: int
    owner_id: int
    items: List[OrderItemRead]
    total_amount: float
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config: from_attributes = True

class OrderEnvelope(BaseModel):
    message: str
    order: OrderRead

class OrderListEnvelope(BaseModel):
    message: str
    orders: List[OrderRead] = []
