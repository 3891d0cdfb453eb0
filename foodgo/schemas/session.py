from datetime import datetime
from pydantic import BaseModel, Field


class SessionCreate(BaseModel):
    user_id: str = Field(min_length=1)
    first_name: str = ""


class SessionRead(BaseModel):
    token: str
    user_id: str
    first_name: str
    acquired_at: datetime
