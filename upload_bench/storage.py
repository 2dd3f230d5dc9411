"""Storage facade over the S3 and HTTP clients.

The only module that talks to the network. Wraps:
- Bucket lifecycle (create, empty, delete)
- Presigned URL issuance for PutObject and UploadPart
- Multipart initiate and complete
- Plain PUTs of payloads to presigned URLs

Errors from boto3 and httpx are not wrapped or retried; they propagate
to the caller unchanged.
"""

import time
from typing import Any

import httpx

from upload_bench.models import UploadSession

# DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_SIZE = 1000

# Upper bound on list/delete rounds when emptying the bucket
MAX_CLEANUP_PASSES = 100


class MissingSessionField(Exception):
    """Raised when a storage response lacks an expected identifier."""

    pass


class CleanupIncomplete(Exception):
    """Raised when the bucket still reports objects after the pass cap."""

    def __init__(self, message: str, passes: int, remaining: int):
        super().__init__(message)
        self.passes = passes
        self.remaining = remaining


class StorageFacade:
    """Thin wrapper exposing the storage capabilities the benchmark needs.

    Args:
        s3_client: boto3 S3 client
        http_client: httpx client used for presigned URL PUTs
        bucket: Name of the bucket owned by this run
        presign_expiry: Lifetime of presigned URLs in seconds
        strict_etags: Raise instead of returning "" when a part upload
            response has no ETag header
    """

    def __init__(
        self,
        s3_client: Any,
        http_client: httpx.Client,
        bucket: str,
        presign_expiry: int = 3600,
        strict_etags: bool = False,
    ):
        self.s3_client = s3_client
        self.http_client = http_client
        self.bucket = bucket
        self.presign_expiry = presign_expiry
        self.strict_etags = strict_etags

    @staticmethod
    def make_key(prefix: str) -> str:
        """Synthesize a fresh object key under ``prefix``.

        The monotonic nanosecond clock never repeats within a process,
        so successive iterations of a scenario never collide.
        """
        return f"{prefix}/{time.monotonic_ns()}"

    # Bucket lifecycle

    def create_bucket(self) -> None:
        self.s3_client.create_bucket(Bucket=self.bucket)

    def delete_bucket(self) -> None:
        self.s3_client.delete_bucket(Bucket=self.bucket)

    def list_all_objects(self) -> list[str]:
        """List every key in the bucket.

        Follows continuation tokens until the listing is no longer
        truncated.

        Returns:
            All object keys, in listing order.
        """
        keys: list[str] = []
        params = {"Bucket": self.bucket}

        while True:
            response = self.s3_client.list_objects_v2(**params)
            keys.extend(obj["Key"] for obj in response.get("Contents", []))

            if not response.get("IsTruncated"):
                break

            params["ContinuationToken"] = response["NextContinuationToken"]

        return keys

    def delete_objects(self, keys: list[str]) -> int:
        """Delete keys in batches of DELETE_BATCH_SIZE.

        Args:
            keys: Object keys to delete. May be empty.

        Returns:
            The number of keys submitted for deletion.
        """
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            self.s3_client.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
            )
        return len(keys)

    def empty_bucket(self, max_passes: int = MAX_CLEANUP_PASSES) -> int:
        """Delete objects until a listing comes back empty.

        A single delete round may not drain a listing that some backends
        report lazily, so this lists and deletes repeatedly.

        Args:
            max_passes: Maximum number of list/delete rounds.

        Returns:
            Total number of keys deleted.

        Raises:
            CleanupIncomplete: If objects remain after ``max_passes`` rounds.
        """
        deleted = 0
        for _ in range(max_passes):
            keys = self.list_all_objects()
            if not keys:
                return deleted
            deleted += self.delete_objects(keys)

        remaining = len(self.list_all_objects())
        if remaining:
            raise CleanupIncomplete(
                f"Bucket '{self.bucket}' still has {remaining} objects "
                f"after {max_passes} cleanup passes",
                passes=max_passes,
                remaining=remaining,
            )
        return deleted

    # Presigned URLs

    def presigned_put_url(self, key: str) -> str:
        """Generate a presigned URL for a single-part upload."""
        return self.s3_client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=self.presign_expiry,
            HttpMethod="PUT",
        )

    def presigned_upload_part_url(
        self,
        key: str,
        upload_id: str,
        part_number: int,
    ) -> str:
        """Generate a presigned URL for uploading one part (1-based)."""
        return self.s3_client.generate_presigned_url(
            "upload_part",
            Params={
                "Bucket": self.bucket,
                "Key": key,
                "UploadId": upload_id,
                "PartNumber": part_number,
            },
            ExpiresIn=self.presign_expiry,
            HttpMethod="PUT",
        )

    # Multipart lifecycle

    def initiate_multipart(self, key: str) -> UploadSession:
        """Start a multipart upload.

        Raises:
            MissingSessionField: If the response has no UploadId or Key.
        """
        response = self.s3_client.create_multipart_upload(
            Bucket=self.bucket,
            Key=key,
        )

        upload_id = response.get("UploadId")
        session_key = response.get("Key")
        if not upload_id or not session_key:
            raise MissingSessionField("UploadId or Key is missing from response")

        return UploadSession(upload_id=upload_id, key=session_key)

    def complete_multipart(self, session: UploadSession) -> dict:
        """Finalize a multipart upload with its ordered part tags."""
        return self.s3_client.complete_multipart_upload(
            Bucket=self.bucket,
            Key=session.key,
            UploadId=session.upload_id,
            MultipartUpload={"Parts": session.parts()},
        )

    # Transport

    def put(self, url: str, data: bytes) -> str:
        """PUT a payload to a presigned URL.

        Returns:
            The response's ETag header, or "" when it is absent or empty (unless
            ``strict_etags`` is set).

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            MissingSessionField: On a missing or empty ETag with ``strict_etags``.
        """
        response = self.http_client.put(url, content=data)
        response.raise_for_status()

        etag = response.headers.get("ETag")
        if not etag:
            if self.strict_etags:
                raise MissingSessionField(f"No ETag in upload response for {url}")
            return ""
        return etag
