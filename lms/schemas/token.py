from pydantic import BaseModel

class TokenPayload(BaseModel):
    user_id: int | None = None
    jti: str | None = None
    exp: int | None = None
