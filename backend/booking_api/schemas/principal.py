"""
booking_api/schemas/principal.py
Principal modeli: the identity resolved for the current request.
"""
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

AuthMethod = Literal["jwt", "firebase"]


class Principal(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: str = Field(..., description="Firebase UID")
    email: Optional[str] = Field(None, description="E-mail (if known)")
    admin: bool = Field(False, description="Admin custom claim")
    email_verified: Optional[bool] = Field(None, alias="emailVerified")
    method: Optional[AuthMethod] = Field(None, description="Trust path that produced this principal")
