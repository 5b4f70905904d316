from botocore.exceptions import (
    NoCredentialsError,
)
from botocore.stub import (
    ANY,
    Stubber,
)
from infrastructure.artifact import (
    build_archive,
    main,
    s3,
    upload_archive,
)
from io import (
    BytesIO,
)
from pytest import (
    fixture,
    raises,
)
from zipfile import (
    ZipFile,
)


@fixture
def source(tmp_path) -> str:
    (tmp_path / "main.py").write_text("def handler(event, context):\n    pass\n")
    (tmp_path / "__pycache__").mkdir()
    (tmp_path / "__pycache__" / "main.cpython-312.pyc").write_bytes(b"\x00")
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "util.py").write_text("")

    yield str(tmp_path)


@fixture
def s3_stub() -> Stubber:
    s3_stub = Stubber(s3)

    s3_stub.add_response(
        "put_object",
        expected_params={
            "Body": ANY,
            "Bucket": "lambda-apps",
            "Key": "hello-world.zip",
        },
        service_response=dict(),
    )

    yield s3_stub


def test_build_archive(source: str) -> None:
    archive = build_archive(source)

    with ZipFile(BytesIO(archive)) as zip_file:
        assert zip_file.namelist() == ["main.py", "lib/util.py"]  # nosec

    # Same sources produce the same archive
    assert build_archive(source) == archive  # nosec


def test_build_archive_missing_source(tmp_path) -> None:
    with raises(ValueError):
        build_archive(str(tmp_path / "missing"))


def test_upload_archive(s3_stub: Stubber) -> None:
    with s3_stub:
        location = upload_archive(b"archive", "lambda-apps", "hello-world.zip")

    assert location == "s3://lambda-apps/hello-world.zip"  # nosec
    s3_stub.assert_no_pending_responses()


def test_main(s3_stub: Stubber, source: str) -> None:
    with s3_stub:
        status = main([
            "--bucket",
            "lambda-apps",
            "--source",
            source,
        ])

    assert status == 0  # nosec


def test_main_client_error(source: str) -> None:
    s3_stub = Stubber(s3)
    s3_stub.add_client_error(
        "put_object",
        http_status_code=403,
        service_error_code="AccessDenied",
    )

    with s3_stub:
        status = main([
            "--bucket",
            "lambda-apps",
            "--source",
            source,
        ])

    assert status == 1  # nosec


def test_main_without_bucket(monkeypatch, source: str) -> None:
    monkeypatch.delenv("LAMBDA_S3_BUCKET", raising=False)

    assert main(["--source", source]) == 1  # nosec


def test_main_botocore_error(monkeypatch, source: str) -> None:
    def put_object(**kwargs) -> dict:
        raise NoCredentialsError()

    monkeypatch.setattr(s3, "put_object", put_object)

    status = main([
        "--bucket",
        "lambda-apps",
        "--source",
        source,
    ])

    assert status == 1  # nosec
