from aws_cdk import (
    CfnOutput,
    Stack,
    Tags as ResourceTags,
    aws_ec2 as ec2,
    aws_eks as eks,
)
from constructs import (
    Construct,
)
from infrastructure.config import (
    EksConfig,
    FargateConfig,
    Tags,
    VpcConfig,
    apply_tags,
    logger,
    require_object,
)


class ClusterStack(Stack):
    """
    VPC, subnets, EKS cluster and Fargate profile, all declared from the
    awsconfig context namespace:

    "awsconfig": {
        "tags": {"author": "...", "feature": "...", "team": "...", ...},
        "vpc": {"cidr-block": "...", "name": "...", "subnet-ips": [...], "subnet-zones": [...]},
        "eks": {"cluster-log-types": [...], "cluster-name": "...", "cluster-role-arn": "...", "k8s-version": "..."},
        "fargate": {"execution-role-arn": "...", "namespace": "...", "profile-name": "..."}
    }
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Tag every resource so they can be found with Resource Groups
        tags = Tags.from_dict(require_object(self, "tags"))
        apply_tags(self, tags)

        vpc_config = VpcConfig.from_dict(require_object(self, "vpc"))
        eks_config = EksConfig.from_dict(require_object(self, "eks"))
        fargate_config = FargateConfig.from_dict(require_object(self, "fargate"))

        # Construct ids are fixed, the configured names are physical names only
        self.vpc = ec2.CfnVPC(
            self,
            "Vpc",
            cidr_block=vpc_config.cidr_block,
        )
        ResourceTags.of(self.vpc).add("Name", vpc_config.name)

        CfnOutput(
            self,
            "VpcId",
            value=self.vpc.ref,
        )

        logger.info(
            f"Declaring {len(vpc_config.subnet_zones)} subnets for {vpc_config.name}")

        self.subnets = [
            ec2.CfnSubnet(
                self,
                f"{vpc_config.name}-subnet-{idx}",
                availability_zone=availability_zone,
                cidr_block=cidr_block,
                vpc_id=self.vpc.ref,
            )
            for idx, (cidr_block, availability_zone) in enumerate(vpc_config.subnets())
        ]
        subnet_ids = [subnet.ref for subnet in self.subnets]

        self.cluster = eks.CfnCluster(
            self,
            "Cluster",
            logging=self.logging(eks_config),
            name=eks_config.cluster_name,
            resources_vpc_config=eks.CfnCluster.ResourcesVpcConfigProperty(
                subnet_ids=subnet_ids,
            ),
            role_arn=eks_config.cluster_role_arn,
            version=eks_config.kubernetes_version or None,
        )

        CfnOutput(
            self,
            "ClusterId",
            value=self.cluster.ref,
        )

        # Referencing the cluster orders the profile after it
        self.fargate_profile = eks.CfnFargateProfile(
            self,
            "FargateProfile",
            cluster_name=self.cluster.ref,
            fargate_profile_name=fargate_config.profile_name,
            pod_execution_role_arn=fargate_config.execution_role_arn,
            selectors=[
                eks.CfnFargateProfile.SelectorProperty(
                    namespace=fargate_config.namespace,
                ),
            ],
            subnets=subnet_ids,
        )

        CfnOutput(
            self,
            "FargateProfileId",
            value=self.fargate_profile.ref,
        )

    @staticmethod
    def logging(eks_config: EksConfig):
        if not eks_config.cluster_log_types:
            return None

        return eks.CfnCluster.LoggingProperty(
            cluster_logging=eks.CfnCluster.ClusterLoggingProperty(
                enabled_types=[
                    eks.CfnCluster.LoggingTypeConfigProperty(
                        type=log_type,
                    )
                    for log_type in eks_config.cluster_log_types
                ],
            ),
        )
