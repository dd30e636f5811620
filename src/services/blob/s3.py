import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from src.services.blob.base import BlobStore


class S3BlobStore(BlobStore):
    """BlobStore backed by an S3-compatible bucket (AWS S3, R2, MinIO)."""

    def __init__(
        self,
        bucket: str,
        region: str | None = None,
        endpoint_url: str | None = None,
        url_expires_in: int = 3600,
    ):
        self._bucket = bucket
        self._url_expires_in = url_expires_in
        self._client = boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4"),
        )

    def put(self, key: str, data: bytes, content_type: str | None = None) -> str:
        params = {"Bucket": self._bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        self._client.put_object(**params)
        return key

    def get(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise FileNotFoundError(f"Blob not found: {key}") from e
            raise
        return response["Body"].read()

    def exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return False
            raise
        return True

    def url_for(self, key: str) -> str:
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=self._url_expires_in,
        )
