from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..clients import ServiceClients
from ..errors import error_code
from ..models import Credentials, ECSServiceDetails, KindResult, NormalizedResource, ResourceKind
from .common import call, matches, region_from_arn

log = logging.getLogger(__name__)
KIND = ResourceKind.ECS


def _cluster_from_arn(service_arn: str) -> Optional[str]:
    # long form: arn:aws:ecs:region:acct:service/cluster-name/service-name
    if not service_arn.startswith('arn:'):
        return None
    parts = service_arn.split(':', 5)[-1].split('/')
    if len(parts) == 3 and parts[0] == 'service':
        return parts[1]
    return None


def _details(svc: Dict[str, Any], full: bool = False) -> ECSServiceDetails:
    d = ECSServiceDetails(
        cluster=svc.get('clusterArn'),
        task_definition=svc.get('taskDefinition'),
        desired_count=svc.get('desiredCount'),
        running_count=svc.get('runningCount'),
        launch_type=svc.get('launchType'),
        status=svc.get('status'),
    )
    if full:
        d.events = svc.get('events') or []
        d.deployments = svc.get('deployments') or []
        d.tags = svc.get('tags') or []
    return d


async def search(clients: ServiceClients, creds: Credentials, query: str) -> KindResult:
    log.debug("searching ecs services")
    try:
        arns = (await call(clients.ecs.list_services)).get('serviceArns', []) or []
        if not arns:
            log.info("found 0 matching ecs services")
            return KindResult(KIND)
        services = (await call(clients.ecs.describe_services, services=arns)).get('services', []) or []
    except Exception as e:
        log.warning("ecs list/describe services: %s", error_code(e))
        return KindResult(KIND, error=f"ecs list/describe services: {error_code(e)}")

    found = []
    for svc in services:
        arn = svc.get('serviceArn')
        if not arn or not matches(query, svc.get('serviceName'), svc.get('taskDefinition')):
            continue
        found.append(NormalizedResource(
            id=arn, kind=KIND, name=svc.get('serviceName') or arn,
            region=region_from_arn(arn), details=_details(svc),
        ))
    log.info("found %d matching ecs services", len(found))
    return KindResult(KIND, found)


async def describe(clients: ServiceClients, service_arn: str) -> Optional[NormalizedResource]:
    kw: Dict[str, Any] = {'services': [service_arn], 'include': ['TAGS']}
    cluster = _cluster_from_arn(service_arn)
    if cluster:
        kw['cluster'] = cluster
    try:
        resp = await call(clients.ecs.describe_services, **kw)
    except Exception as e:
        log.warning("ecs describe_services(%s): %s", service_arn, error_code(e))
        return None

    services = resp.get('services') or []
    if not services:
        return None
    svc = services[0]
    arn = svc.get('serviceArn') or service_arn
    return NormalizedResource(
        id=arn, kind=KIND, name=svc.get('serviceName') or arn,
        region=region_from_arn(arn), details=_details(svc, full=True),
    )
