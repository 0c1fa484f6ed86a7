import asyncio
from datetime import datetime, timezone

import pytest

from awsdash import details as details_mod
from awsdash.enumerators import dynamodb, ec2, ecs, lambda_, rds, s3
from awsdash.errors import ResourceNotFound, UnsupportedResourceKind
from awsdash.models import ResourceKind

from conftest import ECS_API_ARN, client_error, make_clients


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def patched_clients(monkeypatch):
    clients = make_clients()
    monkeypatch.setattr(details_mod, 'get_clients', lambda creds: clients)
    return clients


def test_dispatch_table_covers_every_kind():
    assert set(details_mod.DETAIL_ADAPTERS) == set(ResourceKind)


def test_unsupported_kind_is_rejected_before_any_client_is_built(monkeypatch, creds):
    def explode(_):
        raise AssertionError('clients should not be built')

    monkeypatch.setattr(details_mod, 'get_clients', explode)
    with pytest.raises(UnsupportedResourceKind):
        run(details_mod.get_details(creds, 'unsupported-kind-token', 'anything'))


def test_absent_resource_is_not_found(patched_clients, creds):
    patched_clients.rds.describe_db_instances.return_value = {'DBInstances': []}
    with pytest.raises(ResourceNotFound):
        run(details_mod.get_details(creds, 'rds', 'missing-db'))


def test_provider_error_is_not_found_too(patched_clients, creds):
    patched_clients.rds.describe_db_instances.side_effect = client_error('DBInstanceNotFound')
    with pytest.raises(ResourceNotFound):
        run(details_mod.get_details(creds, 'rds', 'missing-db'))


def test_get_details_delegates_to_kind_adapter(patched_clients, creds):
    patched_clients.dynamodb.describe_table.return_value = {'Table': {
        'TableName': 'ProdUsers',
        'TableArn': 'arn:aws:dynamodb:ap-south-1:123456789012:table/ProdUsers',
        'TableStatus': 'ACTIVE',
        'ItemCount': 10,
        'KeySchema': [{'AttributeName': 'pk', 'KeyType': 'HASH'}],
    }}
    res = run(details_mod.get_details(creds, 'dynamodb', 'ProdUsers'))
    assert res.kind is ResourceKind.DYNAMODB
    assert res.region == 'ap-south-1'
    assert res.details.to_dict() == {
        'status': 'ACTIVE', 'itemCount': 10,
        'keySchema': [{'AttributeName': 'pk', 'KeyType': 'HASH'}],
        'tags': [],
    }
    patched_clients.dynamodb.describe_table.assert_called_once_with(TableName='ProdUsers')


def test_s3_describe_runs_three_calls(clients):
    clients.s3.head_bucket.return_value = {}
    clients.s3.get_bucket_tagging.return_value = {'TagSet': [{'Key': 'team', 'Value': 'ops'}]}
    clients.s3.get_bucket_location.return_value = {'LocationConstraint': 'eu-central-1'}

    res = run(s3.describe(clients, 'prod-data'))

    assert res.region == 'eu-central-1'
    assert res.details.to_dict() == {'tags': [{'Key': 'team', 'Value': 'ops'}], 'location': 'eu-central-1'}
    clients.s3.head_bucket.assert_called_once_with(Bucket='prod-data')


def test_s3_describe_tolerates_tag_failure_and_defaults_region(clients):
    clients.s3.head_bucket.return_value = {}
    clients.s3.get_bucket_tagging.side_effect = client_error('NoSuchTagSet')
    clients.s3.get_bucket_location.return_value = {'LocationConstraint': None}

    res = run(s3.describe(clients, 'prod-data'))

    assert res.region == 'us-east-1'
    assert res.details.tags == []


def test_s3_describe_tolerates_any_tag_error(clients):
    clients.s3.head_bucket.return_value = {}
    clients.s3.get_bucket_tagging.side_effect = RuntimeError('socket reset')
    clients.s3.get_bucket_location.return_value = {'LocationConstraint': 'eu-west-1'}

    res = run(s3.describe(clients, 'prod-data'))

    assert res is not None
    assert res.details.to_dict() == {'tags': [], 'location': 'eu-west-1'}


@pytest.mark.parametrize('failing', ['head_bucket', 'get_bucket_location'])
def test_s3_describe_fails_when_other_calls_fail(clients, failing):
    clients.s3.head_bucket.return_value = {}
    clients.s3.get_bucket_tagging.return_value = {'TagSet': []}
    clients.s3.get_bucket_location.return_value = {'LocationConstraint': 'eu-west-1'}
    getattr(clients.s3, failing).side_effect = client_error('404')

    assert run(s3.describe(clients, 'gone')) is None


def test_ec2_describe_unwraps_reservation(clients):
    clients.ec2.describe_instances.return_value = {'Reservations': [{'Instances': [{
        'InstanceId': 'i-0aaa',
        'InstanceType': 't3.micro',
        'State': {'Name': 'running'},
        'Placement': {'AvailabilityZone': 'us-east-1a'},
        'Tags': [{'Key': 'Name', 'Value': 'web-1'}],
        'VpcId': 'vpc-1', 'SubnetId': 'subnet-1', 'PrivateIpAddress': '10.0.0.5',
    }]}]}

    res = run(ec2.describe(clients, 'i-0aaa'))

    assert (res.id, res.name, res.region) == ('i-0aaa', 'web-1', 'us-east-1')
    d = res.details.to_dict()
    assert d['vpcId'] == 'vpc-1' and d['privateIp'] == '10.0.0.5'
    assert 'publicIp' not in d
    clients.ec2.describe_instances.assert_called_once_with(InstanceIds=['i-0aaa'])


def test_ec2_describe_without_instances_is_none(clients):
    clients.ec2.describe_instances.return_value = {'Reservations': []}
    assert run(ec2.describe(clients, 'i-0zzz')) is None


def test_rds_describe_region_from_az(clients):
    clients.rds.describe_db_instances.return_value = {'DBInstances': [{
        'DBInstanceIdentifier': 'prod-db', 'AvailabilityZone': 'eu-west-1b',
        'Engine': 'postgres', 'Endpoint': {'Address': 'db.example', 'Port': 5432},
        'DBInstanceClass': 'db.t3.micro', 'AllocatedStorage': 20, 'MultiAZ': False,
    }]}
    res = run(rds.describe(clients, 'prod-db'))
    assert res.region == 'eu-west-1'
    assert res.details.to_dict() == {
        'engine': 'postgres', 'endpoint': 'db.example', 'port': 5432,
        'size': 'db.t3.micro', 'storage': 20, 'multiAZ': False, 'tags': [],
    }


def test_lambda_describe_region_from_arn(clients):
    clients.lambda_.get_function.return_value = {
        'Configuration': {
            'FunctionName': 'foo',
            'FunctionArn': 'arn:aws:lambda:eu-west-1:1234:function:foo',
            'Runtime': 'python3.12', 'Handler': 'app.handler', 'Timeout': 30,
        },
        'Tags': {'team': 'ops'},
    }
    res = run(lambda_.describe(clients, 'foo'))
    assert res.region == 'eu-west-1'
    assert res.details.tags == {'team': 'ops'}
    assert res.details.handler == 'app.handler'


def test_lambda_describe_error_is_none(clients):
    clients.lambda_.get_function.side_effect = client_error('ResourceNotFoundException')
    assert run(lambda_.describe(clients, 'nope')) is None


def test_ecs_describe_passes_cluster_and_tags(clients):
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    clients.ecs.describe_services.return_value = {'services': [{
        'serviceArn': ECS_API_ARN, 'serviceName': 'api', 'status': 'ACTIVE',
        'events': [{'id': 'e1', 'createdAt': created, 'message': 'steady state'}],
        'tags': [{'key': 'team', 'value': 'ops'}],
    }]}

    res = run(ecs.describe(clients, ECS_API_ARN))

    clients.ecs.describe_services.assert_called_once_with(
        services=[ECS_API_ARN], include=['TAGS'], cluster='prod-cluster')
    assert res.name == 'api'
    assert res.region == 'eu-west-1'
    d = res.details.to_dict()
    assert d['deployments'] == []
    assert d['events'][0]['message'] == 'steady state'


def test_ecs_describe_missing_service_is_none(clients):
    clients.ecs.describe_services.return_value = {'services': [], 'failures': [{'reason': 'MISSING'}]}
    assert run(ecs.describe(clients, ECS_API_ARN)) is None


def test_dynamodb_describe_error_is_none(clients):
    clients.dynamodb.describe_table.side_effect = client_error('ResourceNotFoundException')
    assert run(dynamodb.describe(clients, 'nope')) is None
