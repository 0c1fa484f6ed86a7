from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.config import Config

from . import config
from .models import Credentials

log = logging.getLogger(__name__)


def _boto_cfg(tag: str = "awsdash") -> Config:
    return Config(
        retries={'max_attempts': max(1, config.BOTO_MAX_ATTEMPTS), 'mode': 'standard'},
        read_timeout=config.BOTO_READ_TIMEOUT,
        connect_timeout=config.BOTO_CONNECT_TIMEOUT,
        user_agent_extra=tag,
    )


def build_session(ak: Optional[str], sk: Optional[str], st: Optional[str], region: str) -> boto3.Session:
    if ak and sk:
        return boto3.Session(
            aws_access_key_id=ak,
            aws_secret_access_key=sk,
            aws_session_token=st,
            region_name=region,
        )
    return boto3.Session(region_name=region)


@dataclass(frozen=True)
class ServiceClients:
    """One boto3 client per resource kind, all bound to the same credentials/region."""

    s3: Any
    ec2: Any
    rds: Any
    lambda_: Any
    dynamodb: Any
    ecs: Any


def get_clients(creds: Credentials) -> ServiceClients:
    log.debug("initializing clients for region %s", creds.region)
    region = creds.region or config.DEFAULT_REGION
    sess = build_session(creds.access_key_id, creds.secret_access_key, creds.session_token, region)
    cfg = _boto_cfg()
    return ServiceClients(
        s3=sess.client('s3', region_name=region, config=cfg),
        ec2=sess.client('ec2', region_name=region, config=cfg),
        rds=sess.client('rds', region_name=region, config=cfg),
        lambda_=sess.client('lambda', region_name=region, config=cfg),
        dynamodb=sess.client('dynamodb', region_name=region, config=cfg),
        ecs=sess.client('ecs', region_name=region, config=cfg),
    )
