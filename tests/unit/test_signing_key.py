"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import pytest

from s3_upload_signer import SigningKeyDeriver

SECRET_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"


@pytest.fixture(scope="module")
def deriver() -> SigningKeyDeriver:
    return SigningKeyDeriver()


def test_derive_matches_published_example(deriver: SigningKeyDeriver) -> None:
    signing_key = deriver.derive(
        secret_key=SECRET_KEY, date_stamp="20120215", region="us-east-1", service="iam"
    )
    assert signing_key.hex() == (
        "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"
    )


def test_derive_s3_key(deriver: SigningKeyDeriver) -> None:
    signing_key = deriver.derive(
        secret_key="secretEXAMPLE",
        date_stamp="20240115",
        region="us-east-1",
        service="s3",
    )
    assert len(signing_key) == 32
    assert signing_key.hex() == (
        "ba17c53b85494e794d0d15f8b5878328e1e41e695a0d20aad3c636adb05d9ffb"
    )


@pytest.mark.parametrize(
    "changed",
    [
        {"secret_key": "otherSECRET"},
        {"date_stamp": "20120216"},
        {"region": "us-west-2"},
        {"service": "s3"},
    ],
)
def test_every_input_scopes_the_key(deriver: SigningKeyDeriver, changed: dict) -> None:
    base = {
        "secret_key": SECRET_KEY,
        "date_stamp": "20120215",
        "region": "us-east-1",
        "service": "iam",
    }
    assert deriver.derive(**base) != deriver.derive(**{**base, **changed})
