from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Dict, Optional

import orjson
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from .clients import _boto_cfg, build_session
from .errors import InvalidCredentials
from .models import Credentials

log = logging.getLogger(__name__)


class SignInRequest(BaseModel):
    accessKeyId: str
    secretAccessKey: str
    region: str
    sessionToken: Optional[str] = None


def credentials_from_request(req: SignInRequest) -> Credentials:
    ak = req.accessKeyId.strip()
    sk = req.secretAccessKey.strip()
    region = req.region.strip()
    st = (req.sessionToken or '').strip() or None
    if not ak or not sk or not region:
        raise InvalidCredentials("accessKeyId, secretAccessKey and region are required")
    return Credentials(access_key_id=ak, secret_access_key=sk, region=region, session_token=st)


def credentials_from_payload(body: Any) -> Credentials:
    """Build Credentials from a decoded camelCase blob (the stored cookie)."""
    try:
        req = SignInRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidCredentials(f"malformed credentials: {e.error_count()} invalid field(s)") from e
    return credentials_from_request(req)


def dumps_credentials(creds: Credentials) -> str:
    blob: Dict[str, Any] = {
        'accessKeyId': creds.access_key_id,
        'secretAccessKey': creds.secret_access_key,
        'region': creds.region,
    }
    if creds.session_token:
        blob['sessionToken'] = creds.session_token
    # cookie-safe: unpadded base64url
    return base64.urlsafe_b64encode(orjson.dumps(blob)).decode().rstrip("=")


def loads_credentials(blob: Optional[str]) -> Credentials:
    if not blob:
        raise InvalidCredentials("no stored credentials")
    try:
        raw = base64.urlsafe_b64decode(blob + "=" * (-len(blob) % 4))
        body = orjson.loads(raw)
    except (binascii.Error, ValueError) as e:
        raise InvalidCredentials(f"stored credentials are unreadable: {e}") from e
    return credentials_from_payload(body)


def _caller_identity(creds: Credentials) -> Dict[str, Any]:
    sess = build_session(creds.access_key_id, creds.secret_access_key, creds.session_token, creds.region)
    sts = sess.client('sts', region_name=creds.region, config=_boto_cfg())
    return sts.get_caller_identity()


async def validate_credentials(creds: Credentials) -> Dict[str, Any]:
    """Return the caller identity; botocore errors propagate on bad credentials."""
    ident = await run_in_threadpool(_caller_identity, creds)
    log.info("credentials validated for account %s", ident.get('Account'))
    return {
        'arn': ident.get('Arn'),
        'userId': ident.get('UserId'),
        'account': ident.get('Account'),
        'region': creds.region,
    }
