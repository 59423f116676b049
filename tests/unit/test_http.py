"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import pytest

from s3_upload_signer import AuthorizedRequest, Field, Fields, RequestDescriptor


def test_field_as_string() -> None:
    assert Field(name="X-Amz-Meta-Empty").as_string() == ""
    assert Field(name="X-Amz-Acl", values=["private"]).as_string() == "private"
    field = Field(name="X-Amz-Meta-Tags", values=["a"])
    field.add("b")
    assert field.as_string() == "a,b"


def test_fields_are_case_insensitive() -> None:
    fields = Fields([Field(name="X-Amz-ACL", values=["private"])])
    assert "x-amz-acl" in fields
    assert fields["X-AMZ-ACL"].values == ["private"]
    fields.set_field(Field(name="x-amz-acl", values=["public-read"]))
    assert len(fields) == 1
    assert fields.get("X-Amz-Acl") == Field(name="x-amz-acl", values=["public-read"])
    del fields["X-Amz-Acl"]
    assert fields.get("x-amz-acl") is None


def test_fields_reject_duplicate_names() -> None:
    with pytest.raises(ValueError):
        Fields(
            [
                Field(name="Content-Type", values=["image/png"]),
                Field(name="content-type", values=["image/jpeg"]),
            ]
        )


def test_fields_from_mapping() -> None:
    fields = Fields.from_mapping({"X-Amz-Acl": "private", "Date": "today"})
    assert [field.name for field in fields] == ["X-Amz-Acl", "Date"]


@pytest.mark.parametrize(
    "key, expected_uri",
    [
        ("images/test.jpg", "/images/test.jpg"),
        ("/images/test.jpg", "/images/test.jpg"),
        ("images/my photo.jpg", "/images/my%20photo.jpg"),
        ("test$file.text", "/test%24file.text"),
        ("a/b~c_d-e.f", "/a/b~c_d-e.f"),
        ("фото.png", "/%D1%84%D0%BE%D1%82%D0%BE.png"),
    ],
)
def test_descriptor_for_object(key: str, expected_uri: str) -> None:
    descriptor = RequestDescriptor.for_object(
        host="my-bucket.s3.us-east-1.amazonaws.com", key=key, payload=b""
    )
    assert descriptor.canonical_uri == expected_uri
    assert descriptor.method == "PUT"
    assert descriptor.query_string == ""
    assert descriptor.url == f"https://my-bucket.s3.us-east-1.amazonaws.com{expected_uri}"


def _authorized(fields: dict[str, str]) -> AuthorizedRequest:
    return AuthorizedRequest(
        descriptor=RequestDescriptor(
            host="my-bucket.s3.us-east-1.amazonaws.com",
            canonical_uri="/images/test.jpg",
            payload=b"hello",
        ),
        amz_date="20240115T103000Z",
        payload_hash="abc",
        authorization="AWS4-HMAC-SHA256 Credential=...",
        signed_fields=fields,
    )


def test_authorized_request_headers() -> None:
    authorized = _authorized(
        {
            "host": "my-bucket.s3.us-east-1.amazonaws.com",
            "x-amz-content-sha256": "abc",
            "x-amz-date": "20240115T103000Z",
        }
    )
    assert authorized.url == "https://my-bucket.s3.us-east-1.amazonaws.com/images/test.jpg"
    assert authorized.payload == b"hello"
    assert authorized.headers("image/jpeg") == {
        "x-amz-content-sha256": "abc",
        "x-amz-date": "20240115T103000Z",
        "Authorization": "AWS4-HMAC-SHA256 Credential=...",
        "Content-Type": "image/jpeg",
    }


def test_authorized_request_keeps_signed_content_type() -> None:
    authorized = _authorized({"content-type": "image/png", "host": "h"})
    headers = authorized.headers("image/jpeg")
    assert headers["content-type"] == "image/png"
    assert "Content-Type" not in headers
