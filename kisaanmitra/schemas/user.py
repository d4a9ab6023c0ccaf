from typing import Optional
from pydantic import BaseModel, EmailStr, ConfigDict, Field
from kisaanmitra.schemas.base import TimestampSchema

class UserBase(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    full_name: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(min_length=6)

class UserInDB(TimestampSchema, UserBase):
    id: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class User(UserInDB):
    pass

class UserWithToken(BaseModel):
    user: User
    access_token: str
    token_type: str

    model_config = ConfigDict(from_attributes=True)

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    username: Optional[str] = None
    jti: Optional[str] = None

class SessionInfo(BaseModel):
    user: User
    expires_at: int
