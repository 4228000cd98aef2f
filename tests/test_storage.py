import boto3
import pytest
from botocore.stub import Stubber

from paintperfect.core.exceptions import StorageError, ValidationError
from paintperfect.core.settings import settings
from paintperfect.services.storage import (
    LocalStorage,
    S3Storage,
    check_key,
    file_extension,
    get_storage,
    key_join,
    validate_upload,
)

from conftest import PNG_BYTES


def test_key_helpers():
    assert key_join("/user-1/", "plan.png") == "user-1/plan.png"
    assert key_join("a", None, "", "b") == "a/b"
    assert file_extension("image/jpeg") == "jpg"
    assert file_extension("IMAGE/WEBP") == "webp"
    assert file_extension("text/html") == "bin"
    assert file_extension(None) == "bin"


@pytest.mark.parametrize("key", ["", "/abs/key.png", "a/../b.png", "dir/"])
def test_check_key_rejects_unsafe_keys(key):
    with pytest.raises(ValidationError):
        check_key(key)


def test_validate_upload():
    assert validate_upload(PNG_BYTES, "IMAGE/PNG") == "image/png"
    with pytest.raises(ValidationError):
        validate_upload(PNG_BYTES, "image/gif")
    with pytest.raises(ValidationError):
        validate_upload(b"", "image/png")


def test_validate_upload_enforces_size_limit(monkeypatch):
    monkeypatch.setattr(settings, "max_upload_mb", 1)
    with pytest.raises(ValidationError):
        validate_upload(b"\x00" * (1024 * 1024 + 1), "image/png")


def test_local_storage_roundtrip(tmp_path):
    storage = LocalStorage(base_path=str(tmp_path))
    stored = storage.upload("avatars", "user-1/me.png", PNG_BYTES, "image/png")

    assert stored.url == "/files/avatars/user-1/me.png"
    assert (tmp_path / "avatars" / "user-1" / "me.png").read_bytes() == PNG_BYTES
    assert storage.delete("avatars", "user-1/me.png") is True
    assert storage.exists("avatars", "user-1/me.png") is False
    assert storage.delete("avatars", "user-1/me.png") is False


def test_upload_rejects_unknown_bucket(tmp_path):
    with pytest.raises(ValidationError):
        LocalStorage(base_path=str(tmp_path)).upload("secrets", "a.png", PNG_BYTES, "image/png")


@pytest.mark.parametrize("key", ["u/page.html", "u/photo.jpg", "u/noext"])
def test_upload_key_must_match_content_type(tmp_path, key):
    storage = LocalStorage(base_path=str(tmp_path))
    with pytest.raises(ValidationError):
        storage.upload("designs", key, PNG_BYTES, "image/png")
    assert not storage.exists("designs", key)


def test_uploaded_files_are_served(client):
    stored = get_storage().upload("designs", "served/test.png", PNG_BYTES, "image/png")
    r = client.get(stored.url)
    assert r.status_code == 200
    assert r.content == PNG_BYTES


@pytest.fixture
def s3():
    client = boto3.client(
        "s3",
        region_name="eu-west-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )
    with Stubber(client) as stubber:
        yield S3Storage(bucket_prefix="pp", region="eu-west-1", client=client), stubber


def test_s3_upload_uses_prefixed_bucket(s3):
    storage, stubber = s3
    stubber.add_response(
        "put_object",
        {},
        {"Bucket": "pp-designs", "Key": "v1/1.png", "Body": PNG_BYTES, "ContentType": "image/png"},
    )
    stored = storage.upload("designs", "v1/1.png", PNG_BYTES, "image/png")
    assert stored.url == "https://pp-designs.s3.eu-west-1.amazonaws.com/v1/1.png"
    stubber.assert_no_pending_responses()


def test_s3_errors_become_storage_errors(s3):
    storage, stubber = s3
    stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
    with pytest.raises(StorageError):
        storage.upload("dimensions", "u/1.png", PNG_BYTES, "image/png")


def test_s3_exists_and_delete(s3):
    storage, stubber = s3
    stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)
    stubber.add_response("delete_object", {}, {"Bucket": "pp-job-updates", "Key": "r/a.png"})

    assert storage.exists("job-updates", "r/a.png") is False
    assert storage.delete("job-updates", "r/a.png") is True
