"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from ._identity import Credentials
from .exceptions import MissingConfiguration, MissingCredentials
from .signers import SigningScope, TimeContext

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(kw_only=True, frozen=True)
class UploadConfig:
    """Destination and credentials for object uploads.

    Read once by the caller and passed by value; the signer never looks at the
    environment itself.
    """

    bucket: str
    region: str
    credentials: Credentials
    service: str = "s3"
    default_content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def host(self) -> str:
        """Virtual-hosted-style endpoint for the bucket."""
        return f"{self.bucket}.s3.{self.region}.amazonaws.com"

    def scope_for(self, time_context: TimeContext) -> SigningScope:
        return SigningScope.for_time(
            time_context, region=self.region, service=self.service
        )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        bucket: str | None = None,
        region: str | None = None,
    ) -> UploadConfig:
        """Resolve configuration from environment variables.

        ``AWS_ACCESS_KEY_ID`` and ``AWS_SECRET_ACCESS_KEY`` are required.
        ``bucket`` and ``region`` override ``S3_BUCKET`` and
        ``AWS_REGION``/``AWS_DEFAULT_REGION`` respectively.
        """
        if environ is None:
            environ = os.environ

        access_key_id = environ.get("AWS_ACCESS_KEY_ID")
        secret_access_key = environ.get("AWS_SECRET_ACCESS_KEY")
        if not access_key_id or not secret_access_key:
            raise MissingCredentials(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY are required"
            )

        bucket = bucket or environ.get("S3_BUCKET")
        if not bucket:
            raise MissingConfiguration("A bucket is required (S3_BUCKET)")
        region = (
            region or environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION")
        )
        if not region:
            raise MissingConfiguration(
                "A region is required (AWS_REGION or AWS_DEFAULT_REGION)"
            )

        return cls(
            bucket=bucket,
            region=region,
            credentials=Credentials(
                access_key_id=access_key_id, secret_access_key=secret_access_key
            ),
        )
