from os import (
    environ,
)

# Module-level boto3 clients need a region before the modules under test import
environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
