# ABOUTME: Tests for S3 photo storage helpers; the boto3 client is replaced with a MagicMock.
# ABOUTME: Covers key format, upload validation, upload/delete calls, presigned URLs and error wrapping.

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from core.config import MAX_UPLOAD_BYTES
from core.storage import (
    StorageError,
    delete_images,
    make_image_key,
    presigned_url,
    upload_image,
    validate_image,
)


def _client_error() -> ClientError:
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "nope"}}, "PutObject")


def test_make_image_key_keeps_lowercase_extension():
    key = make_image_key("Summit.JPG", now_ms=1700000000000)
    assert key.startswith("images/1700000000000-")
    assert key.endswith(".jpg")


def test_make_image_keys_are_unique():
    keys = {make_image_key("a.png", now_ms=1) for _ in range(20)}
    assert len(keys) > 1


def test_validate_image_accepts_images_within_limit():
    validate_image("image/png", 10)
    validate_image("image/jpeg", MAX_UPLOAD_BYTES)


@pytest.mark.parametrize("content_type", [None, "", "application/pdf", "text/plain"])
def test_validate_image_rejects_non_images(content_type):
    with pytest.raises(ValueError, match="Only image files"):
        validate_image(content_type, 10)


def test_validate_image_rejects_oversize():
    with pytest.raises(ValueError, match="at most 5MB"):
        validate_image("image/png", MAX_UPLOAD_BYTES + 1)


@patch("core.storage.S3_BUCKET_NAME", "drift-test")
@patch("core.storage.get_s3_client")
def test_upload_image_puts_object_and_returns_key(mock_get_client):
    client = MagicMock()
    mock_get_client.return_value = client

    key = upload_image(b"\x89PNG", "finish.png", "image/png")

    assert key.startswith("images/") and key.endswith(".png")
    client.put_object.assert_called_once_with(
        Bucket="drift-test", Key=key, Body=b"\x89PNG", ContentType="image/png"
    )


@patch("core.storage.get_s3_client")
def test_upload_image_wraps_client_errors(mock_get_client):
    mock_get_client.return_value.put_object.side_effect = _client_error()
    with pytest.raises(StorageError):
        upload_image(b"x", "a.png", "image/png")


@patch("core.storage.S3_BUCKET_NAME", "drift-test")
@patch("core.storage.get_s3_client")
def test_delete_images_batches_keys(mock_get_client):
    delete_images(["images/1-1.png", "images/2-2.png"])

    mock_get_client.return_value.delete_objects.assert_called_once_with(
        Bucket="drift-test",
        Delete={
            "Objects": [{"Key": "images/1-1.png"}, {"Key": "images/2-2.png"}],
            "Quiet": True,
        },
    )


@patch("core.storage.get_s3_client")
def test_delete_images_with_no_keys_does_nothing(mock_get_client):
    delete_images([])
    mock_get_client.assert_not_called()


@patch("core.storage.get_s3_client")
def test_presigned_url(mock_get_client):
    mock_get_client.return_value.generate_presigned_url.return_value = "https://signed"
    assert presigned_url("images/1-1.png") == "https://signed"
    args = mock_get_client.return_value.generate_presigned_url.call_args
    assert args.args[0] == "get_object"
    assert args.kwargs["Params"]["Key"] == "images/1-1.png"
