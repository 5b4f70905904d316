from aws_cdk import (
    CfnOutput,
    Duration,
    Stack,
    aws_iam as iam,
    aws_lambda as lambda_,
    aws_s3 as s3,
)
from constructs import (
    Construct,
)
from infrastructure.config import (
    FunctionConfig,
    get_object,
    logger,
)
from os import (
    path,
)

HANDLER_SOURCE = path.join(path.dirname(path.dirname(path.abspath(__file__))), "hello_world")
POWERTOOLS_ACCOUNT = "017000801446"
RUNTIME = lambda_.Runtime.PYTHON_3_12


class HelloWorldFunctionStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        function_config = FunctionConfig.from_dict(get_object(self, "lambda"))

        # Only sts:AssumeRole from Lambda is needed, plus permission to write logs
        self.role = iam.Role(
            self,
            "HelloWorldIAMRole",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "service-role/AWSLambdaBasicExecutionRole"),
            ],
        )

        CfnOutput(
            self,
            "RoleArn",
            value=self.role.role_arn,
        )

        powertools = lambda_.LayerVersion.from_layer_version_arn(
            self,
            "PowertoolsLayer",
            f"arn:aws:lambda:{self.region}:{POWERTOOLS_ACCOUNT}:layer:"
            f"AWSLambdaPowertoolsPythonV3-python312-x86_64:{function_config.powertools_layer_version}",
        )

        self.function = lambda_.Function(
            self,
            "HelloWorldFunction",
            code=self.code(function_config),
            description=function_config.description,
            environment={
                "LOG_LEVEL": "INFO",
                "NAME": function_config.greeting,
            },
            function_name=function_config.name,
            handler="main.handler",
            layers=[powertools],
            memory_size=function_config.memory_size,
            role=self.role,
            runtime=RUNTIME,
            timeout=Duration.seconds(function_config.timeout),
        )

        CfnOutput(
            self,
            "FunctionArn",
            value=self.function.function_arn,
        )

    def code(self, function_config: FunctionConfig) -> lambda_.Code:
        # Archives published ahead of time with publish-artifact take precedence
        if function_config.s3_bucket:
            logger.info(
                f"Using s3://{function_config.s3_bucket}/{function_config.s3_key}")
            bucket = s3.Bucket.from_bucket_name(
                self,
                "ArtifactBucket",
                function_config.s3_bucket,
            )

            return lambda_.Code.from_bucket(bucket, function_config.s3_key)

        return lambda_.Code.from_asset(HANDLER_SOURCE)
