from pydantic import BaseModel, Field
from datetime import datetime


class PlayerRegister(BaseModel):
    team_id: str
    name: str = Field(..., min_length=1, max_length=50)
    username: str = Field(..., min_length=1, max_length=30, pattern=r"^[a-z0-9_]+$")
    password: str = Field(..., min_length=4)


class PlayerLogin(BaseModel):
    username: str
    password: str


class PlayerResponse(BaseModel):
    id: str
    team_id: str
    name: str
    username: str
    created_at: datetime

    class Config:
        from_attributes = True


class PlayerMove(BaseModel):
    new_team_id: str


class PasswordReset(BaseModel):
    new_password: str = Field(..., min_length=4)
