from pydantic import EmailStr, Field

from busticket.schemas import CamelModel

class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=32)

class UserContact(CamelModel):
    name: str
    email: EmailStr
    phone: str

class RegistrationResponse(CamelModel):
    success: bool = True
    message: str = "User registered successfully"
    user_id: int
    user: UserContact
