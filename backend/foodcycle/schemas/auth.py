"""
FoodCycle Backend - Auth Schemas
================================

What:  Body of POST /jwt, the identity claim a token is minted for.

The claim comes from the frontend after it has signed the user in with its
identity provider; the backend does not re-check it against a credential.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from foodcycle.schemas.common import Email


class TokenRequest(BaseModel):
    email: Email
    name: Optional[str] = Field(default=None, max_length=200)

    def claims(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
