from pydantic import BaseModel
from typing import Literal, Optional

Role = Literal["ADMIN", "STAFF"]

# One of the two fixed POS accounts
class User(BaseModel):
    id: str
    username: str
    role: Role
    name: str

# Schema for the login form; the password is accepted but never checked
class UserLogin(BaseModel):
    username: str
    password: Optional[str] = None

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User

