from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, List, Tuple

from .clients import ServiceClients, get_clients
from .enumerators import dynamodb, ec2, ecs, lambda_ as enum_lambda, rds, s3
from .errors import error_code
from .models import Credentials, KindResult, NormalizedResource, ResourceKind, SearchReport

log = logging.getLogger(__name__)

SearchAdapter = Callable[[ServiceClients, Credentials, str], Awaitable[KindResult]]

# Result order follows this list
SEARCH_ORDER: List[Tuple[ResourceKind, SearchAdapter]] = [
    (ResourceKind.S3, s3.search),
    (ResourceKind.EC2, ec2.search),
    (ResourceKind.RDS, rds.search),
    (ResourceKind.LAMBDA, enum_lambda.search),
    (ResourceKind.DYNAMODB, dynamodb.search),
    (ResourceKind.ECS, ecs.search),
]


def _settle(kind: ResourceKind, outcome: Any) -> KindResult:
    if isinstance(outcome, KindResult):
        return outcome
    # An adapter let an exception through; keep it to that kind
    log.error("%s search raised: %r", kind.value, outcome)
    return KindResult(kind, error=f"{kind.value}: {error_code(outcome)}")


async def search_report(creds: Credentials, query: str) -> SearchReport:
    """Run every search adapter concurrently and collect one outcome per kind.

    A failing kind contributes no resources; the others are unaffected.
    """
    q = query.lower()
    log.info("searching resources in %s", creds.region)
    clients = get_clients(creds)
    t0 = time.time()

    outcomes = await asyncio.gather(
        *(adapter(clients, creds, q) for _, adapter in SEARCH_ORDER),
        return_exceptions=True,
    )
    report = SearchReport([_settle(kind, o) for (kind, _), o in zip(SEARCH_ORDER, outcomes)])

    for r in report.results:
        if not r.ok:
            log.warning("search skipped %s: %s", r.kind.value, r.error)
    log.info("search found %d resources in %.1fs", len(report.resources), time.time() - t0)
    return report


async def search(creds: Credentials, query: str) -> List[NormalizedResource]:
    return (await search_report(creds, query)).resources
