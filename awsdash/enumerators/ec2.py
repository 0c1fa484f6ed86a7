from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..clients import ServiceClients
from ..errors import error_code
from ..models import Credentials, EC2InstanceDetails, KindResult, NormalizedResource, ResourceKind
from .common import call, matches, name_from_tags, region_from_az, tag_values

log = logging.getLogger(__name__)
KIND = ResourceKind.EC2


def _instances(resp: Dict[str, Any]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for res in resp.get('Reservations', []) or []:
        out.extend(res.get('Instances', []) or [])
    return out


async def search(clients: ServiceClients, creds: Credentials, query: str) -> KindResult:
    log.debug("searching ec2 instances")
    try:
        resp = await call(clients.ec2.describe_instances)
    except Exception as e:
        log.warning("ec2 describe_instances: %s", error_code(e))
        return KindResult(KIND, error=f"ec2 describe_instances: {error_code(e)}")

    found = []
    for inst in _instances(resp):
        iid = inst.get('InstanceId')
        if not iid:
            continue
        tags = inst.get('Tags')
        if not matches(query, iid, *tag_values(tags)):
            continue
        found.append(NormalizedResource(
            id=iid, kind=KIND, name=name_from_tags(tags, iid), region=creds.region,
            details=EC2InstanceDetails(
                state=(inst.get('State') or {}).get('Name'),
                instance_type=inst.get('InstanceType'),
                launch_time=inst.get('LaunchTime'),
            ),
        ))
    log.info("found %d matching ec2 instances", len(found))
    return KindResult(KIND, found)


async def describe(clients: ServiceClients, instance_id: str) -> Optional[NormalizedResource]:
    try:
        resp = await call(clients.ec2.describe_instances, InstanceIds=[instance_id])
    except Exception as e:
        log.warning("ec2 describe_instances(%s): %s", instance_id, error_code(e))
        return None

    instances = _instances(resp)
    if not instances:
        return None
    inst = instances[0]
    iid = inst.get('InstanceId') or instance_id
    tags = inst.get('Tags') or []
    return NormalizedResource(
        id=iid, kind=KIND, name=name_from_tags(tags, iid),
        region=region_from_az((inst.get('Placement') or {}).get('AvailabilityZone')),
        details=EC2InstanceDetails(
            state=(inst.get('State') or {}).get('Name'),
            instance_type=inst.get('InstanceType'),
            launch_time=inst.get('LaunchTime'),
            tags=tags,
            vpc_id=inst.get('VpcId'),
            subnet_id=inst.get('SubnetId'),
            private_ip=inst.get('PrivateIpAddress'),
            public_ip=inst.get('PublicIpAddress'),
        ),
    )
