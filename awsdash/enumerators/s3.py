from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from .. import config
from ..clients import ServiceClients
from ..errors import error_code
from ..models import Credentials, KindResult, NormalizedResource, ResourceKind, S3BucketDetails
from .common import call, matches

log = logging.getLogger(__name__)
KIND = ResourceKind.S3


def _bucket_region(loc: Optional[str]) -> str:
    if loc in (None, ''):
        return config.S3_BASELINE_REGION
    if loc == 'EU':  # legacy alias
        return 'eu-west-1'
    return loc


async def search(clients: ServiceClients, creds: Credentials, query: str) -> KindResult:
    log.debug("searching s3 buckets")
    try:
        res = await call(clients.s3.list_buckets)
    except Exception as e:
        log.warning("s3 list_buckets: %s", error_code(e))
        return KindResult(KIND, error=f"s3 list_buckets: {error_code(e)}")

    found = []
    for b in res.get('Buckets', []) or []:
        name = b.get('Name')
        if not name or not matches(query, name):
            continue
        found.append(NormalizedResource(
            id=name, kind=KIND, name=name, region=creds.region,
            details=S3BucketDetails(creation_date=b.get('CreationDate')),
        ))
    log.info("found %d matching s3 buckets", len(found))
    return KindResult(KIND, found)


async def describe(clients: ServiceClients, bucket: str) -> Optional[NormalizedResource]:
    s3 = clients.s3

    async def _tags() -> Dict[str, Any]:
        # A bucket without tags answers NoSuchTagSet; treat any failure as no tags
        try:
            return await call(s3.get_bucket_tagging, Bucket=bucket)
        except Exception as e:
            log.debug("s3 get_bucket_tagging(%s): %s", bucket, error_code(e))
            return {'TagSet': []}

    try:
        _, tags, loc = await asyncio.gather(
            call(s3.head_bucket, Bucket=bucket),
            _tags(),
            call(s3.get_bucket_location, Bucket=bucket),
        )
    except Exception as e:
        log.warning("s3 describe(%s): %s", bucket, error_code(e))
        return None

    region = _bucket_region(loc.get('LocationConstraint'))
    return NormalizedResource(
        id=bucket, kind=KIND, name=bucket, region=region,
        details=S3BucketDetails(tags=tags.get('TagSet') or [], location=region),
    )
