from __future__ import annotations

import logging
from typing import Optional

from ..clients import ServiceClients
from ..errors import error_code
from ..models import Credentials, KindResult, NormalizedResource, RDSInstanceDetails, ResourceKind
from .common import call, matches, region_from_az

log = logging.getLogger(__name__)
KIND = ResourceKind.RDS


async def search(clients: ServiceClients, creds: Credentials, query: str) -> KindResult:
    log.debug("searching rds instances")
    try:
        resp = await call(clients.rds.describe_db_instances)
    except Exception as e:
        log.warning("rds describe_db_instances: %s", error_code(e))
        return KindResult(KIND, error=f"rds describe_db_instances: {error_code(e)}")

    found = []
    for db in resp.get('DBInstances', []) or []:
        ident = db.get('DBInstanceIdentifier')
        if not ident or not matches(query, ident):
            continue
        found.append(NormalizedResource(
            id=ident, kind=KIND, name=ident, region=creds.region,
            details=RDSInstanceDetails(
                engine=db.get('Engine'),
                status=db.get('DBInstanceStatus'),
                endpoint=(db.get('Endpoint') or {}).get('Address'),
            ),
        ))
    log.info("found %d matching rds instances", len(found))
    return KindResult(KIND, found)


async def describe(clients: ServiceClients, ident: str) -> Optional[NormalizedResource]:
    try:
        resp = await call(clients.rds.describe_db_instances, DBInstanceIdentifier=ident)
    except Exception as e:
        log.warning("rds describe_db_instances(%s): %s", ident, error_code(e))
        return None

    dbs = resp.get('DBInstances') or []
    if not dbs:
        return None
    db = dbs[0]
    endpoint = db.get('Endpoint') or {}
    db_id = db.get('DBInstanceIdentifier') or ident
    return NormalizedResource(
        id=db_id, kind=KIND, name=db_id,
        region=region_from_az(db.get('AvailabilityZone')),
        details=RDSInstanceDetails(
            engine=db.get('Engine'),
            status=db.get('DBInstanceStatus'),
            endpoint=endpoint.get('Address'),
            port=endpoint.get('Port'),
            size=db.get('DBInstanceClass'),
            storage=db.get('AllocatedStorage'),
            multi_az=db.get('MultiAZ'),
            tags=db.get('TagList') or [],
        ),
    )
