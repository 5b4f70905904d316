from aws_cdk import (
    CfnOutput,
    Stack,
    aws_dynamodb as dynamodb,
)
from constructs import (
    Construct,
)
from infrastructure.config import (
    DynamoAttribute,
    TableConfig,
    get_object,
    logger,
)

ATTRIBUTE_TYPES = {
    "B": dynamodb.AttributeType.BINARY,
    "N": dynamodb.AttributeType.NUMBER,
    "S": dynamodb.AttributeType.STRING,
}
PROJECTION_TYPES = {
    "ALL": dynamodb.ProjectionType.ALL,
    "KEYS_ONLY": dynamodb.ProjectionType.KEYS_ONLY,
}


def to_attribute(attribute: DynamoAttribute) -> dynamodb.Attribute:
    if attribute.type not in ATTRIBUTE_TYPES:
        raise ValueError(
            f"attribute {attribute.name} has unsupported type {attribute.type}")

    return dynamodb.Attribute(
        name=attribute.name,
        type=ATTRIBUTE_TYPES[attribute.type],
    )


class UserTableStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        table_config = TableConfig.from_dict(get_object(self, "dynamodb"))

        logger.info(f"Declaring table {table_config.name}")

        # Provisioned table keyed on the hash key
        self.table = dynamodb.Table(
            self,
            table_config.name,
            billing_mode=dynamodb.BillingMode.PROVISIONED,
            partition_key=to_attribute(
                table_config.attribute(table_config.hash_key)),
            read_capacity=table_config.read_capacity,
            write_capacity=table_config.write_capacity,
        )

        for index in table_config.indexes:
            if index.projection_type not in PROJECTION_TYPES:
                raise ValueError(
                    f"index {index.name} has unsupported projection type {index.projection_type}")

            self.table.add_global_secondary_index(
                index_name=index.name,
                partition_key=to_attribute(
                    table_config.attribute(index.hash_key)),
                projection_type=PROJECTION_TYPES[index.projection_type],
                read_capacity=index.read_capacity,
                write_capacity=index.write_capacity,
            )

        # Export the name of the table as an output of the stack
        CfnOutput(
            self,
            "TableName",
            value=self.table.table_name,
        )
