"""Multipart upload driving and payload helpers.

Handles one multipart upload end to end through the storage facade:
- Initiate upload under a fresh key
- Upload parts sequentially via presigned URLs, tracking ETags
- Complete the upload with the ordered tags

Parts are always uploaded one after another; nothing here is parallel.
"""

from typing import Optional

from upload_bench.models import UploadSession
from upload_bench.storage import StorageFacade


def make_payload(size: int) -> bytes:
    """Create an in-memory payload of ``size`` bytes.

    Contents are irrelevant to the benchmark, so zero-filled buffers
    are used to keep setup cheap for gigabyte-sized payloads.
    """
    return bytes(size)


def part_sizes(total: int, chunk: int) -> list[int]:
    """Sizes of the parts a ``total``-byte upload is split into.

    Every part but the last is ``chunk`` bytes; the last carries the
    remaining bytes (a full chunk when ``total`` divides evenly).

    Args:
        total: Total object size in bytes.
        chunk: Part size in bytes.

    Returns:
        Part sizes in upload order.
    """
    if chunk <= 0:
        raise ValueError("chunk size must be positive")

    sizes = []
    remaining = total
    while remaining > chunk:
        sizes.append(chunk)
        remaining -= chunk
    if remaining > 0:
        sizes.append(remaining)
    return sizes


class MultipartUpload:
    """Drives the lifecycle of a single multipart upload.

    Example:
        >>> upload = MultipartUpload(facade, "multipart-upload-10m-5m")
        >>> upload.initiate()
        >>> upload.upload_part(chunk)
        >>> upload.complete()
    """

    def __init__(self, facade: StorageFacade, prefix: str):
        """Initialize the upload driver.

        Args:
            facade: Storage facade for the run's bucket
            prefix: Key prefix; the object key gets a unique suffix
        """
        self.facade = facade
        self.prefix = prefix
        self.session: Optional[UploadSession] = None

    def initiate(self) -> UploadSession:
        """Initiate a new multipart upload.

        Returns:
            The new upload session.

        Raises:
            MissingSessionField: If the backend omits UploadId or Key.
        """
        self.session = self.facade.initiate_multipart(self.facade.make_key(self.prefix))
        return self.session

    def upload_part(self, data: bytes) -> str:
        """Upload the next part and record its ETag.

        Returns:
            The ETag returned for the part.

        Raises:
            RuntimeError: If upload was not initiated.
        """
        if self.session is None:
            raise RuntimeError("Upload not initiated")

        part_number = len(self.session.etags) + 1
        url = self.facade.presigned_upload_part_url(
            self.session.key,
            self.session.upload_id,
            part_number,
        )
        etag = self.facade.put(url, data)
        self.session.etags.append(etag)
        return etag

    def upload_parts(self, total: int, chunk_data: bytes, last_data: bytes) -> int:
        """Upload ``total`` bytes as full chunks followed by a final part.

        Args:
            total: Total object size in bytes.
            chunk_data: Payload for every full-size part.
            last_data: Payload for the final part; must be
                ``part_sizes(total, len(chunk_data))[-1]`` bytes.

        Returns:
            The number of parts uploaded.
        """
        sizes = part_sizes(total, len(chunk_data))
        for index in range(len(sizes)):
            self.upload_part(chunk_data if index < len(sizes) - 1 else last_data)
        return len(sizes)

    def complete(self) -> dict:
        """Complete the multipart upload.

        Returns:
            The API response.

        Raises:
            RuntimeError: If upload was not initiated.
        """
        if self.session is None:
            raise RuntimeError("Upload not initiated")

        return self.facade.complete_multipart(self.session)
