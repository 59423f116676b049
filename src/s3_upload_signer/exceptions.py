"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""


class SignerWarning(UserWarning): ...


class BaseSignerException(Exception):
    """Top-level exception to capture signing and upload errors."""


class MissingCredentials(BaseSignerException, ValueError):
    """The access key id or the secret access key is empty."""


class MissingConfiguration(BaseSignerException, ValueError):
    """A required configuration value (bucket, region) was not supplied."""


class InvalidDescriptor(BaseSignerException, ValueError):
    """The request to sign is malformed, for example a relative canonical URI or a
    missing payload."""


class InvalidSigningScope(BaseSignerException, ValueError):
    """The credential scope does not agree with the signing timestamp."""


class UploadRejected(BaseSignerException):
    """The storage endpoint answered the PUT with a non-200 status."""

    def __init__(self, status_code: int, body: bytes):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Upload rejected with HTTP {status_code}: "
            f"{body.decode('utf-8', errors='replace')}"
        )
