from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from keepsly.errors import StorageError
from keepsly.storage import S3Storage

BUCKET = "keepsly-test"


def client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def s3(s3_client: MagicMock, monkeypatch: pytest.MonkeyPatch) -> S3Storage:
    monkeypatch.delenv("S3_PUBLIC_URL", raising=False)
    monkeypatch.setenv("S3_REGION", "auto")
    return S3Storage(bucket=BUCKET, client=s3_client)


def test_missing_bucket_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("S3_BUCKET", raising=False)
    with pytest.raises(StorageError, match="S3_BUCKET not set"):
        S3Storage(client=MagicMock())


def test_put_object(s3: S3Storage, s3_client: MagicMock) -> None:
    s3.put("events/abcde/one.jpg", b"data", "image/jpeg")
    s3_client.put_object.assert_called_once_with(
        Bucket=BUCKET, Key="events/abcde/one.jpg", Body=b"data", ContentType="image/jpeg"
    )


def test_put_failure_is_storage_error(s3: S3Storage, s3_client: MagicMock) -> None:
    s3_client.put_object.side_effect = client_error("AccessDenied", "PutObject")
    with pytest.raises(StorageError, match="put_object failed"):
        s3.put("events/abcde/one.jpg", b"data", "image/jpeg")


def test_get_object(s3: S3Storage, s3_client: MagicMock) -> None:
    body = MagicMock()
    body.read.return_value = b"jpeg"
    s3_client.get_object.return_value = {"Body": body}
    assert s3.get("events/abcde/one.jpg") == b"jpeg"


@pytest.mark.parametrize("code", ["NoSuchKey", "404"])
def test_get_missing_returns_none(s3: S3Storage, s3_client: MagicMock, code: str) -> None:
    s3_client.get_object.side_effect = client_error(code)
    assert s3.get("events/abcde/meta.json") is None


def test_get_other_error_raises(s3: S3Storage, s3_client: MagicMock) -> None:
    s3_client.get_object.side_effect = client_error("AccessDenied")
    with pytest.raises(StorageError):
        s3.get("events/abcde/meta.json")


def test_list_walks_pages(s3: S3Storage, s3_client: MagicMock) -> None:
    first = datetime(2026, 1, 1, tzinfo=UTC)
    second = datetime(2026, 1, 2, tzinfo=UTC)
    paginator = MagicMock()
    paginator.paginate.return_value = [
        {"Contents": [{"Key": "events/abcde/a.jpg", "LastModified": first}]},
        {"Contents": [{"Key": "events/abcde/b.jpg", "LastModified": second}, {}]},
        {},
    ]
    s3_client.get_paginator.return_value = paginator

    objects = s3.list("events/abcde/")

    s3_client.get_paginator.assert_called_once_with("list_objects_v2")
    paginator.paginate.assert_called_once_with(Bucket=BUCKET, Prefix="events/abcde/")
    assert [(o.path, o.last_modified) for o in objects] == [
        ("events/abcde/a.jpg", first),
        ("events/abcde/b.jpg", second),
    ]


def test_list_failure_is_storage_error(s3: S3Storage, s3_client: MagicMock) -> None:
    s3_client.get_paginator.return_value.paginate.side_effect = client_error(
        "AccessDenied", "ListObjectsV2"
    )
    with pytest.raises(StorageError, match="list_objects_v2 failed"):
        s3.list("events/abcde/")


def test_delete_object(s3: S3Storage, s3_client: MagicMock) -> None:
    s3.delete("events/abcde/gone.jpg")
    s3_client.delete_object.assert_called_once_with(Bucket=BUCKET, Key="events/abcde/gone.jpg")


def test_presign_put(s3: S3Storage, s3_client: MagicMock) -> None:
    s3_client.generate_presigned_url.return_value = "https://signed.example/put"
    assert s3.presign("events/abcde/one.jpg", "put", 600) == "https://signed.example/put"
    s3_client.generate_presigned_url.assert_called_once_with(
        "put_object",
        Params={"Bucket": BUCKET, "Key": "events/abcde/one.jpg", "ContentType": "image/jpeg"},
        ExpiresIn=600,
    )


def test_presign_rejects_other_operations(s3: S3Storage) -> None:
    with pytest.raises(ValueError, match="Unsupported presign operation"):
        s3.presign("events/abcde/one.jpg", "delete", 600)


def test_public_url_uses_configured_base(
    s3_client: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("S3_PUBLIC_URL", "https://pub.r2.dev/")
    s3 = S3Storage(bucket=BUCKET, client=s3_client)
    assert s3.public_url("events/abcde/one.jpg") == "https://pub.r2.dev/events/abcde/one.jpg"


def test_public_url_falls_back_to_bucket_host(s3: S3Storage) -> None:
    assert s3.public_url("events/abcde/one.jpg") == (
        f"https://{BUCKET}.s3.amazonaws.com/events/abcde/one.jpg"
    )
