from aws_cdk import (
    App,
    Environment,
)
from infrastructure.cluster import (
    ClusterStack,
)
from infrastructure.function import (
    HelloWorldFunctionStack,
)
from infrastructure.table import (
    UserTableStack,
)
from os import (
    getenv,
)

app = App()
environment = Environment(
    account=getenv("CDK_DEFAULT_ACCOUNT"),
    region=getenv("CDK_DEFAULT_REGION"),
)

UserTableStack(
    app,
    "UserTable",
    description="DynamoDB table of users with a global secondary index on User",
    env=environment,
)

HelloWorldFunctionStack(
    app,
    "HelloWorldFunction",
    description="Hello world Lambda function and its IAM role",
    env=environment,
)

ClusterStack(
    app,
    "FargateCluster",
    description="VPC and EKS cluster with a Fargate profile",
    env=environment,
)

app.synth()
