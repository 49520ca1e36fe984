import os
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from keepsly.errors import StorageError

from .object_storage import ObjectStorage, StoredObject, check_operation

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Storage(ObjectStorage):
    """
    Object storage using an S3-compatible API (AWS S3, Cloudflare R2).
    """

    def __init__(self, bucket: str | None = None, client: Any = None) -> None:
        # Configuration via env variables
        self.bucket = bucket or os.getenv("S3_BUCKET")
        if not self.bucket:
            error_message = "S3_BUCKET not set in environment"
            raise StorageError(error_message)
        self.public_base = os.getenv("S3_PUBLIC_URL", "").rstrip("/")
        self.region = os.getenv("S3_REGION", "auto")
        if client is None:
            session = boto3.session.Session(region_name=self.region)
            client = session.client(
                "s3",
                endpoint_url=os.getenv("S3_ENDPOINT_URL") or None,
                config=Config(signature_version="s3v4"),
            )
        self.client = client

    def put(self, path: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket, Key=path, Body=data, ContentType=content_type
            )
        except (BotoCoreError, ClientError) as exc:
            error_message = f"S3 put_object failed for {path}: {exc}"
            raise StorageError(error_message) from exc

    def get(self, path: str) -> bytes | None:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=path)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return None
            error_message = f"S3 get_object failed for {path}: {exc}"
            raise StorageError(error_message) from exc
        except BotoCoreError as exc:
            error_message = f"S3 get_object failed for {path}: {exc}"
            raise StorageError(error_message) from exc
        return response["Body"].read()

    def list(self, prefix: str) -> list[StoredObject]:
        objects = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for item in page.get("Contents", []):
                    key = item.get("Key")
                    if not key:
                        continue
                    objects.append(
                        StoredObject(path=key, last_modified=item["LastModified"])
                    )
        except (BotoCoreError, ClientError) as exc:
            error_message = f"S3 list_objects_v2 failed for {prefix}: {exc}"
            raise StorageError(error_message) from exc
        return objects

    def delete(self, path: str) -> None:
        # S3 reports success for keys that do not exist
        try:
            self.client.delete_object(Bucket=self.bucket, Key=path)
        except (BotoCoreError, ClientError) as exc:
            error_message = f"S3 delete_object failed for {path}: {exc}"
            raise StorageError(error_message) from exc

    def presign(self, path: str, operation: str, ttl_seconds: int) -> str:
        check_operation(operation)
        return self.client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": path, "ContentType": "image/jpeg"},
            ExpiresIn=ttl_seconds,
        )

    def public_url(self, path: str) -> str:
        if self.public_base:
            return f"{self.public_base}/{path}"
        if self.region and self.region != "auto":
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{path}"
        return f"https://{self.bucket}.s3.amazonaws.com/{path}"
