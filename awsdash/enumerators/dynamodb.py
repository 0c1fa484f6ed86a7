from __future__ import annotations

import logging
from typing import Optional

from ..clients import ServiceClients
from ..errors import error_code
from ..models import Credentials, DynamoDBTableDetails, KindResult, NormalizedResource, ResourceKind
from .common import call, matches, region_from_arn

log = logging.getLogger(__name__)
KIND = ResourceKind.DYNAMODB


async def search(clients: ServiceClients, creds: Credentials, query: str) -> KindResult:
    log.debug("searching dynamodb tables")
    try:
        resp = await call(clients.dynamodb.list_tables)
    except Exception as e:
        log.warning("dynamodb list_tables: %s", error_code(e))
        return KindResult(KIND, error=f"dynamodb list_tables: {error_code(e)}")

    found = [
        NormalizedResource(id=t, kind=KIND, name=t, region=creds.region, details=DynamoDBTableDetails())
        for t in resp.get('TableNames', []) or []
        if t and matches(query, t)
    ]
    log.info("found %d matching dynamodb tables", len(found))
    return KindResult(KIND, found)


async def describe(clients: ServiceClients, table_name: str) -> Optional[NormalizedResource]:
    try:
        resp = await call(clients.dynamodb.describe_table, TableName=table_name)
    except Exception as e:
        log.warning("dynamodb describe_table(%s): %s", table_name, error_code(e))
        return None

    t = resp.get('Table')
    if not t:
        return None
    name = t.get('TableName') or table_name
    return NormalizedResource(
        id=name, kind=KIND, name=name,
        region=region_from_arn(t.get('TableArn')),
        details=DynamoDBTableDetails(
            status=t.get('TableStatus'),
            creation_date=t.get('CreationDateTime'),
            item_count=t.get('ItemCount'),
            size_bytes=t.get('TableSizeBytes'),
            key_schema=t.get('KeySchema'),
            provisioned_throughput=t.get('ProvisionedThroughput'),
            tags=t.get('Tags') or [],
        ),
    )
