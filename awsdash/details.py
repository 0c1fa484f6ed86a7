from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Optional

from .clients import ServiceClients, get_clients
from .enumerators import dynamodb, ec2, ecs, lambda_ as enum_lambda, rds, s3
from .errors import ResourceNotFound, UnsupportedResourceKind
from .models import Credentials, NormalizedResource, ResourceKind

log = logging.getLogger(__name__)

DetailAdapter = Callable[[ServiceClients, str], Awaitable[Optional[NormalizedResource]]]

DETAIL_ADAPTERS: Dict[ResourceKind, DetailAdapter] = {
    ResourceKind.S3: s3.describe,
    ResourceKind.EC2: ec2.describe,
    ResourceKind.RDS: rds.describe,
    ResourceKind.LAMBDA: enum_lambda.describe,
    ResourceKind.DYNAMODB: dynamodb.describe,
    ResourceKind.ECS: ecs.describe,
}


async def get_details(creds: Credentials, kind: str, id_: str) -> NormalizedResource:
    """Fetch one resource of `kind` by its identifier.

    Raises UnsupportedResourceKind for an unknown kind token and
    ResourceNotFound when the lookup yields nothing (absent or failed).
    """
    rk = ResourceKind.parse(kind)
    if rk is None:
        raise UnsupportedResourceKind(kind)

    log.info("fetching %s details for %s", rk.value, id_)
    res = await DETAIL_ADAPTERS[rk](get_clients(creds), id_)
    if res is None:
        raise ResourceNotFound(rk.value, id_)
    return res
