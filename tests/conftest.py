"""Shared fakes for the S3 and HTTP clients.

FakeS3Client keeps objects and multipart uploads in memory and pages
listings like the real ListObjectsV2 API. FakeHttpClient accepts PUTs to
URLs produced by FakeS3Client and stores single-part uploads as objects.
"""

from io import StringIO
from urllib.parse import parse_qs, urlparse

import pytest
from rich.console import Console

from upload_bench.measurements import MeasurementStore
from upload_bench.storage import StorageFacade


class FakeS3Client:
    """In-memory stand-in for a boto3 S3 client."""

    def __init__(self, page_size: int = 1000):
        self.page_size = page_size
        self.buckets: dict[str, dict[str, int]] = {}
        self.uploads: dict[str, str] = {}
        self.completed: list[dict] = []
        self.list_calls = 0
        self.delete_calls: list[list[str]] = []
        self._upload_counter = 0

    def create_bucket(self, Bucket):
        self.buckets[Bucket] = {}
        return {}

    def delete_bucket(self, Bucket):
        if self.buckets[Bucket]:
            raise RuntimeError("BucketNotEmpty")
        del self.buckets[Bucket]
        return {}

    def list_objects_v2(self, Bucket, ContinuationToken=None):
        self.list_calls += 1
        keys = sorted(self.buckets[Bucket])
        start = int(ContinuationToken or 0)
        page = keys[start:start + self.page_size]
        truncated = start + self.page_size < len(keys)

        response = {"IsTruncated": truncated, "KeyCount": len(page)}
        if page:
            response["Contents"] = [{"Key": key, "Size": self.buckets[Bucket][key]} for key in page]
        if truncated:
            response["NextContinuationToken"] = str(start + self.page_size)
        return response

    def delete_objects(self, Bucket, Delete):
        keys = [obj["Key"] for obj in Delete["Objects"]]
        self.delete_calls.append(keys)
        for key in keys:
            self.buckets[Bucket].pop(key, None)
        return {}

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn=3600, HttpMethod=None):
        url = f"https://s3.test/{Params['Bucket']}/{Params['Key']}?op={ClientMethod}"
        if "UploadId" in Params:
            url += f"&uploadId={Params['UploadId']}&partNumber={Params['PartNumber']}"
        return url

    def create_multipart_upload(self, Bucket, Key):
        self._upload_counter += 1
        upload_id = f"upload-{self._upload_counter}"
        self.uploads[upload_id] = Key
        return {"Bucket": Bucket, "Key": Key, "UploadId": upload_id}

    def complete_multipart_upload(self, Bucket, Key, UploadId, MultipartUpload):
        self.completed.append({
            "Key": Key,
            "UploadId": UploadId,
            "Parts": MultipartUpload["Parts"],
        })
        self.buckets[Bucket][Key] = 0
        return {"ETag": '"final"'}


class FakeResponse:
    def __init__(self, headers: dict):
        self.status_code = 200
        self.headers = headers

    def raise_for_status(self):
        return self


class FakeHttpClient:
    """Records PUTs; stores put_object uploads in the fake S3 client."""

    def __init__(self, s3: FakeS3Client, etags: bool = True):
        self.s3 = s3
        self.etags = etags
        self.puts: list[dict] = []

    def put(self, url, content=None):
        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        bucket, key = parsed.path.lstrip("/").split("/", 1)

        record = {"url": url, "size": len(content), "op": query["op"][0]}
        if "partNumber" in query:
            record["part_number"] = int(query["partNumber"][0])
            record["upload_id"] = query["uploadId"][0]
        self.puts.append(record)

        if record["op"] == "put_object":
            self.s3.buckets[bucket][key] = len(content)

        headers = {"ETag": f'"etag-{len(self.puts)}"'} if self.etags else {}
        return FakeResponse(headers)

    def close(self):
        pass


@pytest.fixture
def fake_s3():
    client = FakeS3Client()
    client.create_bucket(Bucket="bench-bucket")
    return client


@pytest.fixture
def fake_http(fake_s3):
    return FakeHttpClient(fake_s3)


@pytest.fixture
def facade(fake_s3, fake_http):
    return StorageFacade(fake_s3, fake_http, "bench-bucket")


@pytest.fixture
def store():
    return MeasurementStore()


@pytest.fixture
def output_console():
    """A console writing into a StringIO, for asserting on output."""
    return Console(file=StringIO(), width=200, legacy_windows=True)


class FakeClock:
    """Millisecond clock advancing by ``step`` on every call."""

    def __init__(self, step: int = 1, start: int = 0):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()
