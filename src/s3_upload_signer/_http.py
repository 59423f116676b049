"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from urllib.parse import quote


class Field:
    """A single HTTP header: a name and one or more values.

    Names are case insensitive; the name is preserved as given for transmission
    and lower-cased only for comparison and signing.
    """

    def __init__(self, *, name: str, values: Iterable[str] | None = None):
        self.name = name
        self.values: list[str] = list(values) if values is not None else []

    def add(self, value: str) -> None:
        """Append a value to a field."""
        self.values.append(value)

    def as_string(self, delimiter: str = ",") -> str:
        """Get the delimited string of all values.

        A field with zero values is the empty string and a field with one value is
        returned unmodified.
        """
        return delimiter.join(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return self.name == other.name and self.values == other.values

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, values={self.values!r})"


class Fields:
    def __init__(self, initial: Iterable[Field] | None = None):
        """Collection of header entries mapped by lower-cased name.

        :param initial: Initial list of ``Field`` objects. Names must be unique once
        normalized.
        """
        self.entries: OrderedDict[str, Field] = OrderedDict()
        for fld in initial or ():
            name = self._normalize_field_name(fld.name)
            if name in self.entries:
                raise ValueError(
                    "Field names of the initial list of fields must be unique. "
                    f"{name} appears more than once."
                )
            self.entries[name] = fld

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str]) -> Fields:
        return cls(Field(name=k, values=[v]) for k, v in headers.items())

    def set_field(self, field: Field) -> None:
        """Set or override the entry for ``field.name``."""
        self.entries[self._normalize_field_name(field.name)] = field

    def get(self, key: str, default: Field | None = None) -> Field | None:
        return self[key] if key in self else default

    def __getitem__(self, name: str) -> Field:
        return self.entries[self._normalize_field_name(name)]

    def __delitem__(self, name: str) -> None:
        del self.entries[self._normalize_field_name(name)]

    def _normalize_field_name(self, name: str) -> str:
        return name.lower()

    def __eq__(self, other: object) -> bool:
        """Entries must match in values and order."""
        if not isinstance(other, Fields):
            return False
        return self.entries == other.entries

    def __iter__(self) -> Iterator[Field]:
        yield from self.entries.values()

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Fields({list(self.entries.values())})"

    def __contains__(self, key: str) -> bool:
        return self._normalize_field_name(key) in self.entries


@dataclass(kw_only=True, frozen=True)
class RequestDescriptor:
    """The object PUT to be signed.

    ``canonical_uri`` must already be URI-encoded; it is signed verbatim.
    ``payload`` is the fully buffered request body. ``fields`` holds any headers,
    beyond the ones the signer always adds, that should be signed and sent.
    """

    host: str
    canonical_uri: str
    payload: bytes | None
    method: str = "PUT"
    query_string: str = ""
    fields: Fields = field(default_factory=Fields)

    @classmethod
    def for_object(
        cls,
        *,
        host: str,
        key: str,
        payload: bytes,
        fields: Fields | None = None,
    ) -> RequestDescriptor:
        """Build a descriptor for an object key, percent-encoding each path
        segment."""
        canonical_uri = "/" + quote(key.lstrip("/"), safe="/")
        return cls(
            host=host,
            canonical_uri=canonical_uri,
            payload=payload,
            fields=fields if fields is not None else Fields(),
        )

    @property
    def url(self) -> str:
        query = f"?{self.query_string}" if self.query_string else ""
        return f"https://{self.host}{self.canonical_uri}{query}"


@dataclass(kw_only=True, frozen=True)
class AuthorizedRequest:
    """A signed request, ready to be handed to an HTTP client.

    Valid for a single attempt: the embedded timestamp is only accepted by the
    endpoint for a short window.
    """

    descriptor: RequestDescriptor
    amz_date: str
    payload_hash: str
    authorization: str
    signed_fields: dict[str, str]

    @property
    def url(self) -> str:
        return self.descriptor.url

    @property
    def payload(self) -> bytes:
        return self.descriptor.payload or b""

    def headers(self, content_type: str) -> dict[str, str]:
        """The header mapping to transmit with the PUT.

        ``host`` is left to the HTTP client, which derives it from the URL. A signed
        ``content-type`` takes precedence over ``content_type``.
        """
        headers = {
            name: value for name, value in self.signed_fields.items() if name != "host"
        }
        headers["Authorization"] = self.authorization
        if "content-type" not in headers:
            headers["Content-Type"] = content_type
        return headers


@dataclass(frozen=True)
class UploadResponse:
    status_code: int
    body: bytes
