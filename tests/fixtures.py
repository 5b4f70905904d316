from awslambdaric.lambda_context import (
    LambdaContext,
)
from copy import (
    deepcopy,
)
from pytest import (
    fixture,
)
from time import (
    time,
)

AWSCONFIG = {
    "tags": {
        "author": "platform-team@example.com",
        "feature": "fargate-cluster",
        "team": "platform",
        "version": "0.1.0",
        "stage": "test",
    },
    "vpc": {
        "name": "test-vpc",
        "cidr-block": "172.32.0.0/16",
        "subnet-ips": [
            "172.32.32.0/20",
            "172.32.80.0/20",
        ],
        "subnet-zones": [
            "us-west-2a",
            "us-west-2b",
        ],
    },
    "eks": {
        "cluster-name": "test-cluster",
        "k8s-version": "1.29",
        "cluster-role-arn": "arn:aws:iam::012345678901:role/eks-cluster-role",
        "cluster-log-types": [
            "api",
            "audit",
        ],
    },
    "fargate": {
        "namespace": "default",
        "profile-name": "test-profile",
        "execution-role-arn": "arn:aws:iam::012345678901:role/eks-fargate-pod-execution-role",
    },
}


@fixture
def awsconfig() -> dict:
    awsconfig = deepcopy(AWSCONFIG)

    yield awsconfig


@fixture
def context() -> LambdaContext:
    context = LambdaContext(
        invoke_id="00000000-0000-0000-0000-000000000000",
        client_context=None,
        cognito_identity=None,
        epoch_deadline_time_in_ms=int(time() * 1000) + 10000,
        invoked_function_arn="arn:aws:lambda:us-east-1:012345678901:function:HelloWorldFunction",
    )

    yield context
