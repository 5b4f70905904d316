from aws_lambda_powertools import (
    Logger,
)
from aws_lambda_powertools.utilities.typing import (
    LambdaContext,
)
from os import (
    getenv,
)

logger = Logger(
    level=getenv("LOG_LEVEL", "DEBUG"),
    service="hello_world",
)


def handler(event: dict, context: LambdaContext) -> dict:
    """
    Responds to an API Gateway proxy request with a greeting for the
    name configured in the NAME environment variable:

    {
        "body": "Hello, WORLD",
        "statusCode": 200
    }
    """
    logger.debug(context)
    logger.debug(event)

    name = getenv("NAME", "")

    logger.debug(f"Greeting {name}")

    return {
        "body": f"Hello, {name}",
        "statusCode": 200,
    }
