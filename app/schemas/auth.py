from pydantic import BaseModel, Field
from typing import Optional


class AuthCallbackRequest(BaseModel):
    """OAuth authorization code handed back by the auth provider redirect"""
    code: str = Field(..., min_length=1)
    code_verifier: Optional[str] = None
