from pydantic import BaseModel


class TokenResponse(BaseModel):
    """OAuth2 token payload; keys stay snake_case as the password flow requires."""

    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: str
