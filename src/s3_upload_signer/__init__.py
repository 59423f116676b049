"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

S3 Upload Signer computes AWS Signature Version 4 Authorization headers for
single-request object PUTs and sends them with Requests.
"""

from __future__ import annotations

from ._http import (
    AuthorizedRequest,
    Field,
    Fields,
    RequestDescriptor,
    UploadResponse,
)
from ._identity import Credentials
from .config import UploadConfig
from .exceptions import (
    BaseSignerException,
    InvalidDescriptor,
    InvalidSigningScope,
    MissingConfiguration,
    MissingCredentials,
    SignerWarning,
    UploadRejected,
)
from .signers import SigningKeyDeriver, SigningScope, SigV4Signer, TimeContext
from .upload import UploadExecutor, upload_object

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "AuthorizedRequest",
    "BaseSignerException",
    "Credentials",
    "Field",
    "Fields",
    "InvalidDescriptor",
    "InvalidSigningScope",
    "MissingConfiguration",
    "MissingCredentials",
    "RequestDescriptor",
    "SigV4Signer",
    "SignerWarning",
    "SigningKeyDeriver",
    "SigningScope",
    "TimeContext",
    "UploadConfig",
    "UploadExecutor",
    "UploadRejected",
    "UploadResponse",
    "upload_object",
)
