import pydantic as p

__all__ = ['TokenResponse']


class TokenResponse(p.BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    access_expires: float
    refresh_expires: float
