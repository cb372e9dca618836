import os
import time
import jwt
from typing import Any, Dict

ALG = os.getenv("JWT_ALG", "HS256")
SECRET = os.environ.get("JWT_SECRET", "change_me")
ACCESS_TTL = int(os.getenv("JWT_ACCESS_TTL_SECONDS", "3600"))


def mint_access(user_id: str, ttl: int = ACCESS_TTL) -> str:
    """Tokens come from the account service; minting here is for workers and tests."""
    now = int(time.time())
    return jwt.encode({"sub": user_id, "iat": now, "exp": now + ttl, "typ": "access"}, SECRET, algorithm=ALG)


def decode_token(tok: str) -> Dict[str, Any]:
    return jwt.decode(tok, SECRET, algorithms=[ALG])
