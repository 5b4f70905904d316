from aws_cdk import (
    Tags as ResourceTags,
)
from aws_lambda_powertools import (
    Logger,
)
from constructs import (
    Construct,
)
from dataclasses import (
    dataclass,
    field,
)
from json import (
    JSONDecodeError,
    loads,
)
from os import (
    getenv,
)
from typing import (
    Any,
    Optional,
)

NAMESPACE = "awsconfig"
logger = Logger(
    level=getenv("LOG_LEVEL", "INFO"),
    service="infrastructure",
)


def _lookup(data: dict, key: str, default: Any = None) -> Any:
    # Keys match case-insensitively, "Name" and "name" are the same key
    for k, v in data.items():
        if k.lower() == key.lower():
            return v

    return default


def _list(data: dict, key: str) -> list:
    value = _lookup(data, key, [])

    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list, got {value!r}")

    return list(value)


def _parse(value: Any) -> Any:
    # Values given with "cdk synth -c" arrive as JSON strings
    if isinstance(value, str):
        try:
            return loads(value)
        except JSONDecodeError:
            return value

    return value


def _namespace(scope: Construct) -> dict:
    namespace = _parse(scope.node.try_get_context(NAMESPACE))

    if namespace is None:
        return dict()

    if not isinstance(namespace, dict):
        logger.error(f"{NAMESPACE} is not an object")
        raise ValueError(f"configuration namespace {NAMESPACE} must be an object")

    return namespace


def _value(scope: Construct, key: str) -> Any:
    # A flat awsconfig:<key> entry overrides the key in the namespace object
    value = scope.node.try_get_context(f"{NAMESPACE}:{key}")

    if value is None:
        value = _lookup(_namespace(scope), key)

    return _parse(value)


def get_object(scope: Construct, key: str, default: Optional[dict] = None) -> dict:
    value = _value(scope, key)

    if value is None:
        logger.debug(f"{NAMESPACE}:{key} not set, using defaults")
        return dict(default or {})

    if not isinstance(value, dict):
        logger.error(f"{NAMESPACE}:{key} is not an object")
        raise ValueError(f"configuration value {NAMESPACE}:{key} must be an object")

    return value


def require_object(scope: Construct, key: str) -> dict:
    value = _value(scope, key)

    if not isinstance(value, dict):
        logger.error(f"{NAMESPACE}:{key} is not set or is not an object")
        raise ValueError(f"missing required configuration value {NAMESPACE}:{key}")

    return value


def apply_tags(scope: Construct, tags: "Tags") -> None:
    for key, value in tags.to_dict().items():
        ResourceTags.of(scope).add(key, value)


@dataclass
class Tags:
    author: str = ""
    feature: str = ""
    team: str = ""
    version: str = ""
    stage: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Tags":
        return cls(
            author=str(_lookup(data, "author", "")),
            feature=str(_lookup(data, "feature", "")),
            team=str(_lookup(data, "team", "")),
            version=str(_lookup(data, "version", "")),
            stage=str(_lookup(data, "stage", "")),
        )

    def to_dict(self) -> dict:
        return {
            "author": self.author,
            "team": self.team,
            "version": self.version,
            "feature": self.feature,
            "stage": self.stage,
        }


@dataclass
class VpcConfig:
    cidr_block: str
    name: str
    subnet_ips: list = field(default_factory=list)
    subnet_zones: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "VpcConfig":
        vpc_config = cls(
            cidr_block=_lookup(data, "cidr-block", ""),
            name=_lookup(data, "name", ""),
            subnet_ips=_list(data, "subnet-ips"),
            subnet_zones=_list(data, "subnet-zones"),
        )
        vpc_config.validate()

        return vpc_config

    def validate(self) -> None:
        if not self.name:
            raise ValueError("vpc name must be set")

        if not self.cidr_block:
            raise ValueError(f"vpc {self.name} has no cidr-block")

        # Each subnet zone needs exactly one CIDR block
        if not self.subnet_zones or len(self.subnet_ips) != len(self.subnet_zones):
            raise ValueError(
                f"vpc {self.name} has {len(self.subnet_ips)} subnet-ips "
                f"for {len(self.subnet_zones)} subnet-zones")

    def subnets(self) -> list:
        return list(zip(self.subnet_ips, self.subnet_zones))


@dataclass
class EksConfig:
    cluster_name: str
    cluster_role_arn: str
    kubernetes_version: str
    cluster_log_types: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "EksConfig":
        eks_config = cls(
            cluster_log_types=_list(data, "cluster-log-types"),
            cluster_name=_lookup(data, "cluster-name", ""),
            cluster_role_arn=_lookup(data, "cluster-role-arn", ""),
            kubernetes_version=str(_lookup(data, "k8s-version", "")),
        )

        if not eks_config.cluster_name:
            raise ValueError("eks cluster-name must be set")

        return eks_config


@dataclass
class FargateConfig:
    execution_role_arn: str
    namespace: str
    profile_name: str

    @classmethod
    def from_dict(cls, data: dict) -> "FargateConfig":
        fargate_config = cls(
            execution_role_arn=_lookup(data, "execution-role-arn", ""),
            namespace=_lookup(data, "namespace", ""),
            profile_name=_lookup(data, "profile-name", ""),
        )

        if not fargate_config.profile_name:
            raise ValueError("fargate profile-name must be set")

        return fargate_config


@dataclass
class DynamoAttribute:
    """Attribute used by the key schema of the table or one of its indexes."""

    name: str
    type: str

    @classmethod
    def from_dict(cls, data: dict) -> "DynamoAttribute":
        return cls(
            name=_lookup(data, "name"),
            type=_lookup(data, "type"),
        )


@dataclass
class GlobalSecondaryIndex:
    name: str
    hash_key: str
    projection_type: str = "ALL"
    write_capacity: int = 10
    read_capacity: int = 10

    @classmethod
    def from_dict(cls, data: dict) -> "GlobalSecondaryIndex":
        return cls(
            hash_key=_lookup(data, "hash-key"),
            name=_lookup(data, "name"),
            projection_type=_lookup(data, "projection-type", "ALL"),
            read_capacity=int(_lookup(data, "read-capacity", 10)),
            write_capacity=int(_lookup(data, "write-capacity", 10)),
        )


def _default_attributes() -> list:
    return [
        DynamoAttribute(
            name="ID",
            type="S",
        ),
        DynamoAttribute(
            name="User",
            type="S",
        ),
    ]


def _default_indexes() -> list:
    return [
        GlobalSecondaryIndex(
            hash_key="User",
            name="User",
            projection_type="ALL",
            read_capacity=10,
            write_capacity=10,
        ),
    ]


@dataclass
class TableConfig:
    name: str = "User"
    hash_key: str = "ID"
    attributes: list = field(default_factory=_default_attributes)
    indexes: list = field(default_factory=_default_indexes)
    read_capacity: int = 10
    write_capacity: int = 10

    @classmethod
    def from_dict(cls, data: dict) -> "TableConfig":
        table_config = cls()

        if _lookup(data, "name") is not None:
            table_config.name = _lookup(data, "name")
        if _lookup(data, "hash-key") is not None:
            table_config.hash_key = _lookup(data, "hash-key")
        if _lookup(data, "attributes") is not None:
            table_config.attributes = [
                DynamoAttribute.from_dict(attribute)
                for attribute in _list(data, "attributes")
            ]
        if _lookup(data, "indexes") is not None:
            table_config.indexes = [
                GlobalSecondaryIndex.from_dict(index)
                for index in _list(data, "indexes")
            ]
        table_config.read_capacity = int(_lookup(data, "read-capacity", 10))
        table_config.write_capacity = int(_lookup(data, "write-capacity", 10))
        table_config.validate()

        return table_config

    def attribute(self, name: str) -> DynamoAttribute:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute

        raise ValueError(f"{name} is not a declared attribute of table {self.name}")

    def validate(self) -> None:
        # Key schemas can only reference declared attributes
        self.attribute(self.hash_key)

        for index in self.indexes:
            self.attribute(index.hash_key)


@dataclass
class FunctionConfig:
    name: str = "HelloWorldFunction"
    description: str = "My Lambda function"
    memory_size: int = 256
    timeout: int = 10
    greeting: str = "WORLD"
    s3_bucket: Optional[str] = None
    s3_key: str = "hello-world.zip"
    powertools_layer_version: int = 7

    @classmethod
    def from_dict(cls, data: dict) -> "FunctionConfig":
        defaults = cls()

        return cls(
            description=_lookup(data, "description", defaults.description),
            greeting=_lookup(data, "greeting", defaults.greeting),
            memory_size=int(_lookup(data, "memory-size", defaults.memory_size)),
            name=_lookup(data, "name", defaults.name),
            powertools_layer_version=int(
                _lookup(data, "powertools-layer-version", defaults.powertools_layer_version)),
            s3_bucket=_lookup(data, "s3-bucket", getenv("LAMBDA_S3_BUCKET")),
            s3_key=_lookup(data, "s3-key", defaults.s3_key),
            timeout=int(_lookup(data, "timeout", defaults.timeout)),
        )
