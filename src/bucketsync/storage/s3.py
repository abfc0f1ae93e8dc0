"""S3 object store client built on boto3."""

from typing import Any, BinaryIO, Dict, Optional

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import BotoCoreError, ClientError

from .base import ObjectStoreClient, ObjectInfo, ListPage
from ..config.settings import AWSSettings, get_settings
from ..exceptions import ObjectStoreError


class _CountingWriter:
    """File wrapper counting the bytes written through it."""

    def __init__(self, fileobj: BinaryIO):
        self._fileobj = fileobj
        self.written = 0

    def write(self, data: bytes) -> int:
        self._fileobj.write(data)
        self.written += len(data)
        return len(data)


class S3Client(ObjectStoreClient):
    """Object store client for S3 and S3-compatible services."""

    def __init__(self, client=None, aws_settings: Optional[AWSSettings] = None, **kwargs):
        """Initialize the S3 client.

        Args:
            client: Pre-built boto3 S3 client; built from settings when omitted
            aws_settings: Connection settings (profile, region, endpoint)
            **kwargs: Additional configuration parameters
        """
        super().__init__(**kwargs)
        if client is None:
            aws_settings = aws_settings or get_settings().aws
            session = boto3.Session(profile_name=aws_settings.profile, region_name=aws_settings.region)
            s3_config = {}
            if aws_settings.endpoint_url:
                s3_config["endpoint_url"] = aws_settings.endpoint_url
            client = session.client("s3", **s3_config)
            self.logger.info(
                "S3 client initialized",
                profile=aws_settings.profile,
                region=aws_settings.region,
                endpoint_url=aws_settings.endpoint_url
            )
        self.client = client

    def list_objects(self, bucket, prefix, continuation_token=None) -> ListPage:
        kwargs = {"Bucket": bucket, "Prefix": prefix}
        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token

        try:
            response = self.client.list_objects_v2(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(
                f"Failed to list s3://{bucket}/{prefix}: {e}",
                operation="list", bucket=bucket, key=prefix
            ) from e

        objects = [
            ObjectInfo(key=obj["Key"], size=obj["Size"], last_modified=obj["LastModified"])
            for obj in response.get("Contents", [])
        ]
        next_token = response.get("NextContinuationToken") if response.get("IsTruncated") else None
        return ListPage(objects=objects, next_token=next_token)

    def download(self, bucket, key, fileobj, options=None) -> int:
        writer = _CountingWriter(fileobj)
        try:
            self.client.download_fileobj(
                bucket, key, writer,
                Config=TransferConfig(**(options or {}))
            )
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(
                f"Failed to download s3://{bucket}/{key}: {e}",
                operation="download", bucket=bucket, key=key
            ) from e
        return writer.written

    def upload(self, bucket, key, fileobj, content_type=None, acl=None, options=None) -> None:
        extra_args: Dict[str, Any] = {}
        if content_type:
            extra_args["ContentType"] = content_type
        if acl:
            extra_args["ACL"] = acl

        try:
            self.client.upload_fileobj(
                fileobj, bucket, key,
                ExtraArgs=extra_args or None,
                Config=TransferConfig(**(options or {}))
            )
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(
                f"Failed to upload s3://{bucket}/{key}: {e}",
                operation="upload", bucket=bucket, key=key
            ) from e

    def copy(self, bucket, copy_source, key, acl=None) -> None:
        kwargs = {"Bucket": bucket, "CopySource": copy_source, "Key": key}
        if acl:
            kwargs["ACL"] = acl

        try:
            self.client.copy_object(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(
                f"Failed to copy s3://{copy_source['Bucket']}/{copy_source['Key']} "
                f"to s3://{bucket}/{key}: {e}",
                operation="copy", bucket=bucket, key=key
            ) from e

    def delete(self, bucket, key) -> None:
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(
                f"Failed to delete s3://{bucket}/{key}: {e}",
                operation="delete", bucket=bucket, key=key
            ) from e
