from argparse import (
    ArgumentParser,
)
from boto3 import (
    client,
)
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
)
from infrastructure.config import (
    logger,
)
from infrastructure.function import (
    HANDLER_SOURCE,
)
from io import (
    BytesIO,
)
from os import (
    getenv,
    path,
    walk,
)
from typing import (
    Optional,
)
from zipfile import (
    ZIP_DEFLATED,
    ZipFile,
    ZipInfo,
)

s3 = client("s3")


def build_archive(source: str) -> bytes:
    if not path.isdir(source):
        raise ValueError(f"{source} is not a directory")

    buffer = BytesIO()

    with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
        for root, directories, files in walk(source):
            directories[:] = sorted(d for d in directories if d != "__pycache__")

            for name in sorted(files):
                file_path = path.join(root, name)
                # Fixed timestamps keep the archive identical between builds
                info = ZipInfo(
                    path.relpath(file_path, source).replace(path.sep, "/"),
                    date_time=(1980, 1, 1, 0, 0, 0),
                )
                info.compress_type = ZIP_DEFLATED
                info.external_attr = 0o644 << 16

                with open(file_path, "rb") as f:
                    archive.writestr(info, f.read())

    return buffer.getvalue()


def upload_archive(archive: bytes, bucket: str, key: str) -> str:
    logger.info(f"Uploading {len(archive)} bytes to s3://{bucket}/{key}")

    s3.put_object(
        Body=archive,
        Bucket=bucket,
        Key=key,
    )

    return f"s3://{bucket}/{key}"


def main(argv: Optional[list] = None) -> int:
    parser = ArgumentParser(
        description="Package the hello world handler and upload it to S3",
    )
    parser.add_argument(
        "--bucket",
        default=getenv("LAMBDA_S3_BUCKET"),
    )
    parser.add_argument(
        "--key",
        default="hello-world.zip",
    )
    parser.add_argument(
        "--source",
        default=HANDLER_SOURCE,
    )
    args = parser.parse_args(argv)

    if not args.bucket:
        logger.error("No bucket given, use --bucket or LAMBDA_S3_BUCKET")
        return 1

    try:
        archive = build_archive(args.source)
        location = upload_archive(archive, args.bucket, args.key)
    except (BotoCoreError, ClientError, ValueError) as error:
        logger.error(f"Error publishing artifact: {error}")
        return 1

    logger.info(f"Published {location}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
