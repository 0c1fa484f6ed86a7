from __future__ import annotations

import logging
from typing import Optional

from ..clients import ServiceClients
from ..errors import error_code
from ..models import Credentials, KindResult, LambdaFunctionDetails, NormalizedResource, ResourceKind
from .common import call, matches, region_from_arn

log = logging.getLogger(__name__)
KIND = ResourceKind.LAMBDA


async def search(clients: ServiceClients, creds: Credentials, query: str) -> KindResult:
    log.debug("searching lambda functions")
    try:
        resp = await call(clients.lambda_.list_functions)
    except Exception as e:
        log.warning("lambda list_functions: %s", error_code(e))
        return KindResult(KIND, error=f"lambda list_functions: {error_code(e)}")

    found = []
    for fn in resp.get('Functions', []) or []:
        name = fn.get('FunctionName')
        if not name or not matches(query, name):
            continue
        found.append(NormalizedResource(
            id=name, kind=KIND, name=name, region=creds.region,
            details=LambdaFunctionDetails(
                runtime=fn.get('Runtime'),
                last_modified=fn.get('LastModified'),
                memory_size=fn.get('MemorySize'),
            ),
        ))
    log.info("found %d matching lambda functions", len(found))
    return KindResult(KIND, found)


async def describe(clients: ServiceClients, function_name: str) -> Optional[NormalizedResource]:
    try:
        resp = await call(clients.lambda_.get_function, FunctionName=function_name)
    except Exception as e:
        log.warning("lambda get_function(%s): %s", function_name, error_code(e))
        return None

    fn = resp.get('Configuration')
    if not fn:
        return None
    name = fn.get('FunctionName') or function_name
    return NormalizedResource(
        id=name, kind=KIND, name=name,
        region=region_from_arn(fn.get('FunctionArn')),
        details=LambdaFunctionDetails(
            runtime=fn.get('Runtime'),
            last_modified=fn.get('LastModified'),
            memory_size=fn.get('MemorySize'),
            handler=fn.get('Handler'),
            timeout=fn.get('Timeout'),
            role=fn.get('Role'),
            tags=resp.get('Tags') or {},
        ),
    )
