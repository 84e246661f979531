import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import boto3
from botocore.exceptions import EndpointConnectionError
from botocore.response import StreamingBody
from botocore.stub import Stubber

from portfolio_api.config import Config
from portfolio_api.utils.errors import (
    StorageAccessDenied,
    StorageConfigError,
    StorageNotFound,
)
from portfolio_api.utils.storage import (
    DiskFallbackCache,
    FallbackCache,
    LocalStorage,
    S3Storage,
    build_storage,
    normalize_image_key,
    normalize_text_key,
)

MARKDOWN = "# Hello\n\nSome *markdown* with unicode: héllo ✓\n"


class KeyNormalizationTests(unittest.TestCase):
    def test_text_keys_get_one_blog_prefix(self):
        self.assertEqual(normalize_text_key("post.md"), "blog/post.md")
        self.assertEqual(normalize_text_key("blog/post.md"), "blog/post.md")
        self.assertEqual(normalize_text_key("/blog/post.md"), "blog/post.md")

    def test_image_keys(self):
        self.assertEqual(normalize_image_key("a.png"), "blog/images/a.png")
        self.assertEqual(normalize_image_key("images/a.png"), "blog/images/a.png")
        self.assertEqual(normalize_image_key("blog/images/a.png"), "blog/images/a.png")


class LocalStorageTests(unittest.TestCase):
    def setUp(self):
        self.cache = FallbackCache()
        self.storage = LocalStorage(self.cache, "http://localhost:5000")

    def test_text_round_trip(self):
        url = self.storage.upload_text("post-1.md", MARKDOWN)
        self.assertEqual(url, "http://localhost:5000/api/uploads/blog/post-1.md")
        self.assertEqual(self.storage.get_text("post-1.md"), MARKDOWN)
        self.assertEqual(self.storage.get_text("blog/post-1.md"), MARKDOWN)

    def test_upload_is_an_upsert(self):
        self.storage.upload_text("blog/post.md", "first")
        self.storage.upload_text("blog/post.md", "second")
        self.assertEqual(self.storage.get_text("blog/post.md"), "second")
        self.assertEqual(len(self.cache), 1)

    def test_missing_text_raises_not_found(self):
        with self.assertRaises(StorageNotFound):
            self.storage.get_text("blog/nope.md")

    def test_delete_missing_key_is_not_an_error(self):
        self.storage.delete_text("blog/nope.md")
        self.storage.upload_text("blog/post.md", "x")
        self.storage.delete_text("blog/post.md")
        with self.assertRaises(StorageNotFound):
            self.storage.get_text("blog/post.md")

    def test_binary_round_trip_and_url_mapping(self):
        url = self.storage.upload_binary("cover.png", b"\x89PNG\r\n", "image/png")
        key = self.storage.key_for_url(url)
        self.assertEqual(key, "blog/images/cover.png")
        self.assertEqual(self.storage.get_binary(key), (b"\x89PNG\r\n", "image/png"))
        self.assertIsNone(self.storage.key_for_url("https://elsewhere.example/x.png"))

    def test_reset_clears_cache(self):
        self.storage.upload_text("a.md", "a")
        self.cache.reset()
        self.assertEqual(len(self.cache), 0)


class DiskFallbackTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.storage = LocalStorage(DiskFallbackCache(self.tmp.name))

    def tearDown(self):
        self.tmp.cleanup()

    def test_text_round_trip_on_disk(self):
        self.storage.upload_text("post.md", MARKDOWN)
        self.assertEqual(self.storage.get_text("post.md"), MARKDOWN)
        _, content_type = self.storage.get_binary("blog/post.md")
        self.assertEqual(content_type, "text/markdown")

    def test_keys_cannot_escape_the_directory(self):
        with self.assertRaises(StorageNotFound):
            self.storage.get_binary("../../etc/passwd")

    def test_content_type_survives_the_round_trip(self):
        self.storage.upload_binary("favicon.ico", b"\x00\x00\x01\x00", "image/x-icon")
        self.assertEqual(self.storage.get_binary("blog/images/favicon.ico"), (b"\x00\x00\x01\x00", "image/x-icon"))
        self.assertEqual(len(self.storage.cache), 1)

        self.storage.delete_object("blog/images/favicon.ico")
        self.assertEqual(len(self.storage.cache), 0)
        self.assertEqual([p for p in Path(self.tmp.name).rglob("*") if p.is_file()], [])


class S3StorageTests(unittest.TestCase):
    def setUp(self):
        self.client = boto3.client(
            "s3",
            region_name="eu-west-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        self.stubber = Stubber(self.client)
        self.stubber.activate()
        self.fallback = LocalStorage(FallbackCache())
        self.storage = S3Storage(self.client, "my-blog", "eu-west-1", self.fallback)

    def tearDown(self):
        self.stubber.deactivate()

    def _body(self, data: bytes):
        return StreamingBody(io.BytesIO(data), len(data))

    def test_text_round_trip(self):
        data = MARKDOWN.encode("utf-8")
        self.stubber.add_response(
            "put_object",
            {"ETag": '"etag"'},
            {"Bucket": "my-blog", "Key": "blog/post.md", "Body": data, "ContentType": "text/markdown"},
        )
        self.stubber.add_response(
            "get_object",
            {"Body": self._body(data), "ContentType": "text/markdown"},
            {"Bucket": "my-blog", "Key": "blog/post.md"},
        )

        url = self.storage.upload_text("post.md", MARKDOWN)
        self.assertEqual(url, "https://my-blog.s3.eu-west-1.amazonaws.com/blog/post.md")
        self.assertEqual(self.storage.get_text("blog/post.md"), MARKDOWN)
        self.stubber.assert_no_pending_responses()

    def test_missing_object_maps_to_not_found(self):
        self.stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
        with self.assertRaises(StorageNotFound):
            self.storage.get_text("blog/gone.md")

    def test_access_denied_maps_to_403(self):
        self.stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
        with self.assertRaises(StorageAccessDenied) as ctx:
            self.storage.upload_text("blog/post.md", "x")
        self.assertEqual(ctx.exception.status_code, 403)

    def test_missing_bucket_maps_to_config_error(self):
        self.stubber.add_client_error("put_object", service_error_code="NoSuchBucket", http_status_code=404)
        with self.assertRaises(StorageConfigError) as ctx:
            self.storage.upload_text("blog/post.md", "x")
        self.assertEqual(ctx.exception.status_code, 500)

    def test_delete_of_missing_key_is_not_an_error(self):
        self.stubber.add_client_error("delete_object", service_error_code="NoSuchKey", http_status_code=404)
        self.storage.delete_text("blog/gone.md")

    def test_cover_url_maps_back_to_key(self):
        url = self.storage.url_for("blog/images/a.png")
        self.assertEqual(self.storage.key_for_url(url), "blog/images/a.png")

    def test_local_backend_is_the_fallback(self):
        self.assertIs(self.storage.local_backend, self.fallback)
        self.assertIs(self.fallback.local_backend, self.fallback)


class S3FallbackTests(unittest.TestCase):
    def setUp(self):
        self.client = mock.Mock()
        unreachable = EndpointConnectionError(endpoint_url="https://my-blog.s3.eu-west-1.amazonaws.com")
        self.client.put_object.side_effect = unreachable
        self.client.get_object.side_effect = unreachable
        self.client.delete_object.side_effect = unreachable
        self.fallback = LocalStorage(FallbackCache(), "http://localhost:5000")
        self.storage = S3Storage(self.client, "my-blog", "eu-west-1", self.fallback)

    def test_unreachable_remote_falls_back_for_writes_and_reads(self):
        url = self.storage.upload_text("post.md", MARKDOWN)
        self.assertEqual(url, "http://localhost:5000/api/uploads/blog/post.md")
        self.assertEqual(self.storage.get_text("post.md"), MARKDOWN)

    def test_fallback_delete_and_miss(self):
        self.storage.upload_text("post.md", MARKDOWN)
        self.storage.delete_text("post.md")
        with self.assertRaises(StorageNotFound):
            self.storage.get_text("post.md")


class BuildStorageTests(unittest.TestCase):
    def test_unconfigured_remote_uses_local_backend(self):
        config = Config(AWS_REGION=None, AWS_S3_BUCKET=None, AWS_ACCESS_KEY_ID=None, AWS_SECRET_ACCESS_KEY=None)
        storage = build_storage(config)
        self.assertEqual(storage.backend, "local")

    def test_configured_remote_uses_s3_backend(self):
        config = Config(
            AWS_REGION="eu-west-1",
            AWS_S3_BUCKET="my-blog",
            AWS_ACCESS_KEY_ID="AKIAEXAMPLE1234",
            AWS_SECRET_ACCESS_KEY="secret",
            STORAGE_FALLBACK_DIR=None,
        )
        storage = build_storage(config)
        self.assertEqual(storage.backend, "s3")
        self.assertEqual(storage.fallback.backend, "local")
