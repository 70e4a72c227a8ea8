from pydantic import BaseModel, EmailStr, ConfigDict
from lms.core.constants import RoleEnum

class UserBase(BaseModel):
    full_name: str
    email: EmailStr

class UserCreate(UserBase):
    role: RoleEnum = RoleEnum.STUDENT
    is_active: bool = True

class User(UserBase):
    """Main user schema for reading user data."""
    id: int
    role: RoleEnum
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class UserSummary(BaseModel):
    """Populated reference to a user, as embedded in other resources."""
    id: int
    full_name: str
    email: EmailStr

    model_config = ConfigDict(from_attributes=True)

class UserContext(BaseModel):
    """The authenticated principal for a request."""
    user: User
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
