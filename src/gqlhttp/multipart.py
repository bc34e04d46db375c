"""Multipart request encoding for GraphQL file uploads.

Builds the three artifacts of the GraphQL multipart request convention:

- ``operations``: the operation JSON with every file-bearing variable nulled
- ``map``: ``{"1": ["variables.file"], ...}`` linking file parts to variables
- the ``multipart/form-data`` body holding the file parts and both fields,
  framed by httpx's multipart encoder
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, BinaryIO

import httpx

from gqlhttp.encoding import dumps, operation_payload
from gqlhttp.exceptions import EncodeError, FileTransferError, MultipartFinalizeError
from gqlhttp.request import File, Request


def file_paths(files: Sequence[File]) -> list[str]:
    """Return the variable path each file fills, in attachment order.

    A field shared by several files becomes an array: the n-th file attached
    to it fills ``<field>.<n>``.
    """
    totals = Counter(file.field for file in files)
    seen: Counter[str] = Counter()
    paths: list[str] = []
    for file in files:
        if totals[file.field] > 1:
            paths.append(f"{file.field}.{seen[file.field]}")
            seen[file.field] += 1
        else:
            paths.append(file.field)
    return paths


def _set_null(container: Any, segments: list[str]) -> Any:
    # Copies only the containers along the path; the caller's variables are untouched.
    head, rest = segments[0], segments[1:]
    if isinstance(container, list) or (container is None and head.isdigit()):
        if not head.isdigit():
            raise EncodeError(f"graphql: file path segment {head!r} does not index an array")
        index = int(head)
        items = list(container or [])
        items.extend([None] * (index + 1 - len(items)))
        items[index] = _set_null(items[index], rest) if rest else None
        return items
    mapping = dict(container) if isinstance(container, dict) else {}
    mapping[head] = _set_null(mapping.get(head), rest) if rest else None
    return mapping


def operations_json(request: Request) -> str:
    """Serialize the operation with each file-bearing variable replaced by ``null``."""
    variables: Any = request.variables or {}
    for path in file_paths(request.files):
        variables = _set_null(variables, path.split("."))
    return dumps(operation_payload(request, variables))


def file_map(request: Request) -> str:
    """Serialize the ``map`` field: 1-based part index to variable path."""
    mapping = {str(index): [f"variables.{path}"] for index, path in enumerate(file_paths(request.files), start=1)}
    return dumps(mapping)


class _FileSource:
    """Forward-only reader over a caller's stream.

    Read failures of any kind surface as :class:`FileTransferError`. It has no
    ``seek``, so httpx reads from the stream's current position and never
    rewinds it.
    """

    def __init__(self, content: BinaryIO, *, part: str, filename: str) -> None:
        self._content = content
        self._part = part
        self._filename = filename

    def read(self, size: int = -1) -> bytes:
        try:
            chunk = self._content.read(size)
        except Exception as exc:
            raise FileTransferError(
                f"graphql: preparing file {self._filename!r}: {exc}", part=self._part, filename=self._filename
            ) from exc
        if not isinstance(chunk, bytes | bytearray | memoryview):
            raise FileTransferError(
                f"graphql: preparing file {self._filename!r}: content must be opened in binary mode",
                part=self._part,
                filename=self._filename,
            )
        return bytes(chunk)


@dataclass(frozen=True)
class MultipartBody:
    """A finalized multipart body and the two JSON fields written into it."""

    content: bytes
    content_type: str
    operations: str
    map: str


def multipart_files(request: Request, operations: str, mapping: str) -> list[tuple[str, tuple[Any, ...]]]:
    """Return the httpx ``files`` list: file parts ``1..N``, then ``operations`` and ``map``."""
    files: list[tuple[str, tuple[Any, ...]]] = []
    for index, file in enumerate(request.files, start=1):
        part = str(index)
        if any(char in file.content_type for char in "\r\n"):
            raise EncodeError(f"graphql: creating form: invalid content type for file {file.name!r}")
        if isinstance(file.content, bytes | bytearray | memoryview):
            content: Any = bytes(file.content)
        else:
            content = _FileSource(file.content, part=part, filename=file.name)
        files.append((part, (file.name, content, file.content_type)))
    files.append(("operations", (None, operations)))
    files.append(("map", (None, mapping)))
    return files


def encode_multipart(request: Request, url: str, *, boundary: str | None = None) -> MultipartBody:
    """Encode a file-bearing request as a finalized ``multipart/form-data`` body.

    Both JSON fields are serialized before any file is read. File content is
    then streamed part by part by httpx's multipart encoder.

    Raises:
        EncodeError: The request has no files or its variables cannot be serialized.
        FileTransferError: A file's content could not be read.
        MultipartFinalizeError: The body could not be completed.
    """
    if not request.files:
        raise EncodeError("graphql: multipart encoding requires at least one file")
    operations = operations_json(request)
    mapping = file_map(request)

    headers = {"Content-Type": f"multipart/form-data; boundary={boundary}"} if boundary else None
    http_request = httpx.Request("POST", url, files=multipart_files(request, operations, mapping), headers=headers)
    try:
        content = http_request.read()
    except FileTransferError:
        raise
    except (httpx.StreamError, TypeError, ValueError) as exc:
        raise MultipartFinalizeError(f"graphql: writing fields: {exc}") from exc
    return MultipartBody(
        content=content,
        content_type=http_request.headers["Content-Type"],
        operations=operations,
        map=mapping,
    )
