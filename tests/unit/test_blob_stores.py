"""Unit tests for blob store implementations (S3 client mocked)."""
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from src.services.blob.local import LocalBlobStore
from src.services.blob.memory import InMemoryBlobStore
from src.services.blob.s3 import S3BlobStore


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


class TestLocalBlobStore:
    def test_put_then_get(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        key = store.put("tickets/driver-1/a.jpg", b"jpeg-bytes", content_type="image/jpeg")

        assert key == "tickets/driver-1/a.jpg"
        assert store.get(key) == b"jpeg-bytes"
        assert (tmp_path / "tickets" / "driver-1" / "a.jpg").read_bytes() == b"jpeg-bytes"

    def test_get_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalBlobStore(tmp_path).get("tickets/u/missing.jpg")

    def test_exists(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.put("a.jpg", b"x")
        assert store.exists("a.jpg") is True
        assert store.exists("b.jpg") is False

    def test_rejects_key_outside_base_dir(self, tmp_path):
        store = LocalBlobStore(tmp_path / "blobs")
        with pytest.raises(ValueError):
            store.put("../escape.jpg", b"x")

    def test_url_is_file_uri(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.put("exports/report.xlsx", b"x")
        assert store.url_for("exports/report.xlsx").startswith("file://")


class TestInMemoryBlobStore:
    def test_put_get_and_inspect(self):
        store = InMemoryBlobStore()
        store.put("b.jpg", b"2", content_type="image/jpeg")
        store.put("a.jpg", b"1")

        assert store.get("b.jpg") == b"2"
        assert store.keys == ["a.jpg", "b.jpg"]
        assert store.content_type("b.jpg") == "image/jpeg"
        assert store.url_for("a.jpg") == "memory://a.jpg"

    def test_seeded_blobs(self):
        store = InMemoryBlobStore({"t/u/a.jpg": b"seed"})
        assert store.exists("t/u/a.jpg")

    def test_get_missing_raises(self):
        with pytest.raises(FileNotFoundError):
            InMemoryBlobStore().get("nope")


@pytest.fixture
def s3_client():
    with patch("src.services.blob.s3.boto3") as mock_boto3:
        client = MagicMock()
        mock_boto3.client.return_value = client
        yield client, mock_boto3


class TestS3BlobStore:
    def test_client_configuration(self, s3_client):
        _, mock_boto3 = s3_client
        S3BlobStore("tickets", region="us-east-1", endpoint_url="http://minio:9000")

        args, kwargs = mock_boto3.client.call_args
        assert args == ("s3",)
        assert kwargs["region_name"] == "us-east-1"
        assert kwargs["endpoint_url"] == "http://minio:9000"

    def test_put_sets_content_type(self, s3_client):
        client, _ = s3_client
        store = S3BlobStore("tickets")

        store.put("exports/a.xlsx", b"data", content_type="application/xlsx")

        client.put_object.assert_called_once_with(
            Bucket="tickets", Key="exports/a.xlsx", Body=b"data", ContentType="application/xlsx",
        )

    def test_put_without_content_type(self, s3_client):
        client, _ = s3_client
        S3BlobStore("tickets").put("a", b"data")
        assert "ContentType" not in client.put_object.call_args.kwargs

    def test_get_reads_body(self, s3_client):
        client, _ = s3_client
        client.get_object.return_value = {"Body": MagicMock(read=MagicMock(return_value=b"img"))}

        assert S3BlobStore("tickets").get("t/u/a.jpg") == b"img"
        client.get_object.assert_called_once_with(Bucket="tickets", Key="t/u/a.jpg")

    def test_get_missing_raises_file_not_found(self, s3_client):
        client, _ = s3_client
        client.get_object.side_effect = _client_error("NoSuchKey")

        with pytest.raises(FileNotFoundError):
            S3BlobStore("tickets").get("missing")

    def test_get_other_errors_propagate(self, s3_client):
        client, _ = s3_client
        client.get_object.side_effect = _client_error("AccessDenied")

        with pytest.raises(ClientError):
            S3BlobStore("tickets").get("secret")

    def test_exists(self, s3_client):
        client, _ = s3_client
        store = S3BlobStore("tickets")
        assert store.exists("a") is True

        client.head_object.side_effect = _client_error("404")
        assert store.exists("a") is False

    def test_url_for_presigns(self, s3_client):
        client, _ = s3_client
        client.generate_presigned_url.return_value = "https://signed"

        url = S3BlobStore("tickets", url_expires_in=600).url_for("exports/a.xlsx")

        assert url == "https://signed"
        client.generate_presigned_url.assert_called_once_with(
            "get_object",
            Params={"Bucket": "tickets", "Key": "exports/a.xlsx"},
            ExpiresIn=600,
        )
