from pydantic import BaseModel, Field, StrictBool


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    display_name: str = Field(min_length=1, max_length=100)


class LoginRequest(BaseModel):
    username: str
    password: str


class DarkModeRequest(BaseModel):
    dark_mode: StrictBool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: int
    username: str
    display_name: str
    dark_mode: bool = False

    model_config = {"from_attributes": True}
