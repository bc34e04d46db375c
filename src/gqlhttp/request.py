"""In-memory representation of a single GraphQL operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO

import httpx

DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class File:
    """A file bound to a request variable.

    Attributes:
        field: Variable path the file fills, dot-separated (``"input.avatar"``,
            ``"docs.0"``).
        name: Filename reported to the server.
        content: Raw bytes or a readable binary stream. Streams are read once
            and never rewound.
        content_type: MIME type of the uploaded part.
    """

    field: str
    name: str
    content: bytes | BinaryIO
    content_type: str = DEFAULT_FILE_CONTENT_TYPE


class Request:
    """A GraphQL operation: document, variables, headers and attached files.

    The document is opaque to this layer; no syntax validation is performed.
    Attaching any file switches execution to the multipart upload path.

    Example:
        req = Request("mutation($file: Upload!) { upload(file: $file) }")
        req.add_file("file", "report.pdf", open("report.pdf", "rb"))
        req.headers["Authorization"] = "Bearer ..."
    """

    def __init__(
        self,
        document: str,
        *,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> None:
        self._document = document
        self.variables = variables
        self.operation_name = operation_name
        self.headers = httpx.Headers()
        self._files: list[File] = []

    @property
    def document(self) -> str:
        return self._document

    @property
    def files(self) -> tuple[File, ...]:
        return tuple(self._files)

    def set_variable(self, name: str, value: Any) -> None:
        """Set a variable, overwriting any earlier value for *name*."""
        if self.variables is None:
            self.variables = {}
        self.variables[name] = value

    def add_file(
        self,
        field: str,
        filename: str,
        content: bytes | BinaryIO,
        *,
        content_type: str = DEFAULT_FILE_CONTENT_TYPE,
    ) -> None:
        """Attach a file to the variable path *field*.

        The same *field* may be used several times; each file then fills its
        own index of an array under that variable.
        """
        self._files.append(File(field=field, name=filename, content=content, content_type=content_type))

    def add_header(self, name: str, value: str) -> None:
        """Append a header value, keeping values already set under *name*.

        ``headers`` is updated in place. Values are sent UTF-8 encoded.

        Raises:
            ValueError: If *name* is not ASCII.
        """
        if not name.isascii():
            raise ValueError(f"header name must be ASCII: {name!r}")
        key = name.encode("ascii")
        items = [(raw_key, raw_value) for raw_key, raw_value in self.headers.raw if raw_key.lower() == key.lower()]
        items.append((key, value.encode("utf-8")))
        self.headers.update(httpx.Headers(items))

    def __repr__(self) -> str:
        return f"Request(document={self._document!r}, files={len(self._files)})"
