"""Login: email/password → signed token.

The only alias-service route that needs no bearer token.
"""

from fastapi import APIRouter, Depends

from opendydns.api.deps import get_auth_service, get_codec
from opendydns.auth.jwt import TokenCodec
from opendydns.auth.service import AuthService
from opendydns.schemas.session import SessionCreate, TokenRead

router = APIRouter()


@router.post("/sessions", response_model=TokenRead)
async def create_session(
    body: SessionCreate,
    auth: AuthService = Depends(get_auth_service),
    codec: TokenCodec = Depends(get_codec),
):
    identity = await auth.authenticate(body.email, body.password)
    issued = codec.issue(identity)
    return TokenRead(token=issued.token)
