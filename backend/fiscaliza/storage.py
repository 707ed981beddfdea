# S3 storage service
from __future__ import annotations
import logging
from typing import Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ExternalServiceError
from .lib.datauri import parse_data_uri

logger = logging.getLogger(__name__)


class StorageService:
    """
    Thin wrapper around an S3-compatible client (AWS S3, Cloudflare R2, Backblaze B2, MinIO)
    used for inspection photos and intake attachments.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        bucket_name: str,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket_name
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.s3 = client or boto3.client(
            "s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            endpoint_url=endpoint_url or None,
        )

    # ---------- Upload helpers ----------

    def upload_bytes(self, data: bytes, key: str, content_type: str = "application/octet-stream") -> str:
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            raise ExternalServiceError(f"Failed to upload s3://{self.bucket}/{key}: {e}") from e
        logger.info("Uploaded %d bytes to s3://%s/%s", len(data), self.bucket, key)
        return self.get_public_url(key)

    def upload_data_uri(self, data_uri: str, key: str) -> str:
        mime, payload = parse_data_uri(data_uri)
        return self.upload_bytes(payload, key, mime)

    # ---------- Access helpers ----------

    def get_public_url(self, key: str) -> str:
        """
        Returns a URL that works for public buckets or S3-compatible endpoints.
        """
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        endpoint = self.s3._endpoint.host.rstrip("/")
        return f"{endpoint}/{self.bucket}/{key}"
