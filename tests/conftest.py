from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from awsdash.clients import ServiceClients
from awsdash.models import Credentials

ECS_API_ARN = "arn:aws:ecs:eu-west-1:123456789012:service/prod-cluster/api"
ECS_WORKER_ARN = "arn:aws:ecs:eu-west-1:123456789012:service/prod-cluster/worker"
CREATED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def client_error(code="AccessDenied", op="Operation"):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, op)


def listing_responses():
    return {
        "s3": {"Buckets": [
            {"Name": "Prod-Logs", "CreationDate": CREATED},
            {"Name": "dev-assets", "CreationDate": CREATED},
            {"Name": "prod-data", "CreationDate": CREATED},
        ]},
        "ec2": {"Reservations": [
            {"Instances": [
                {"InstanceId": "i-0aaa", "InstanceType": "t3.micro", "State": {"Name": "running"},
                 "Tags": [{"Key": "Name", "Value": "web-1"}]},
                {"InstanceId": "i-0bbb", "InstanceType": "t3.large", "State": {"Name": "stopped"},
                 "Tags": [{"Key": "Env", "Value": "Production"}]},
            ]},
            {"Instances": [
                {"InstanceId": "i-0ccc", "InstanceType": "m5.large", "State": {"Name": "running"}},
            ]},
        ]},
        "rds": {"DBInstances": [
            {"DBInstanceIdentifier": "prod-db", "Engine": "postgres", "DBInstanceStatus": "available",
             "Endpoint": {"Address": "prod-db.abc.eu-west-1.rds.amazonaws.com", "Port": 5432}},
            {"DBInstanceIdentifier": "staging-db", "Engine": "mysql", "DBInstanceStatus": "available"},
        ]},
        "lambda": {"Functions": [
            {"FunctionName": "prod-handler", "Runtime": "python3.12", "LastModified": "2024-01-01T00:00:00.000+0000",
             "MemorySize": 256},
            {"FunctionName": "cron", "Runtime": "nodejs20.x", "MemorySize": 128},
        ]},
        "dynamodb": {"TableNames": ["ProdUsers", "sessions"]},
        "ecs_list": {"serviceArns": [ECS_API_ARN, ECS_WORKER_ARN]},
        "ecs_describe": {"services": [
            {"serviceArn": ECS_API_ARN, "serviceName": "api", "clusterArn": "arn:aws:ecs:eu-west-1:123456789012:cluster/prod-cluster",
             "taskDefinition": "arn:aws:ecs:eu-west-1:123456789012:task-definition/prod-api:3",
             "desiredCount": 2, "runningCount": 2, "launchType": "FARGATE", "status": "ACTIVE"},
            {"serviceArn": ECS_WORKER_ARN, "serviceName": "worker",
             "taskDefinition": "arn:aws:ecs:eu-west-1:123456789012:task-definition/worker:1",
             "desiredCount": 1, "runningCount": 0, "launchType": "EC2", "status": "ACTIVE"},
        ]},
    }


def make_clients(responses=None):
    r = responses or listing_responses()
    s3, ec2, rds, lam, ddb, ecs = (MagicMock() for _ in range(6))
    s3.list_buckets.return_value = r["s3"]
    ec2.describe_instances.return_value = r["ec2"]
    rds.describe_db_instances.return_value = r["rds"]
    lam.list_functions.return_value = r["lambda"]
    ddb.list_tables.return_value = r["dynamodb"]
    ecs.list_services.return_value = r["ecs_list"]
    ecs.describe_services.return_value = r["ecs_describe"]
    return ServiceClients(s3=s3, ec2=ec2, rds=rds, lambda_=lam, dynamodb=ddb, ecs=ecs)


@pytest.fixture
def creds():
    return Credentials(access_key_id="AKIATEST", secret_access_key="secret", region="eu-west-1")


@pytest.fixture
def clients():
    return make_clients()
