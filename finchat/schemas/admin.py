from pydantic import BaseModel, Field


class AdminVerifyRequest(BaseModel):
    password: str = Field(..., min_length=1)


class AdminVerifyResponse(BaseModel):
    success: bool = True
    verified: bool
