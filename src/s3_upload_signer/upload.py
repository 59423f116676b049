"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

import logging
import mimetypes
from datetime import UTC, datetime

import requests

from ._http import AuthorizedRequest, Fields, RequestDescriptor, UploadResponse
from .config import UploadConfig
from .exceptions import UploadRejected
from .signers import SigV4Signer, TimeContext

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 60


class UploadExecutor:
    """Sends a signed PUT over a ``requests`` session.

    Exactly one attempt is made per call. A rejected request must be signed again
    before it is retried.
    """

    def __init__(
        self, *, session: requests.Session | None = None, timeout: float = DEFAULT_TIMEOUT
    ):
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def execute(
        self, authorized: AuthorizedRequest, *, content_type: str
    ) -> UploadResponse:
        logger.debug("PUT %s (%d bytes)", authorized.url, len(authorized.payload))
        response = self._session.put(
            authorized.url,
            data=authorized.payload,
            headers=authorized.headers(content_type),
            timeout=self._timeout,
        )
        logger.debug("PUT %s returned HTTP %s", authorized.url, response.status_code)
        if response.status_code != 200:
            raise UploadRejected(response.status_code, response.content)
        return UploadResponse(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> UploadExecutor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def guess_content_type(key: str, default: str) -> str:
    content_type, _ = mimetypes.guess_type(key)
    return content_type or default


def upload_object(
    config: UploadConfig,
    key: str,
    payload: bytes,
    *,
    content_type: str | None = None,
    fields: Fields | None = None,
    now: datetime | None = None,
    signer: SigV4Signer | None = None,
    executor: UploadExecutor | None = None,
) -> UploadResponse:
    """Sign and PUT ``payload`` to ``key`` in the configured bucket.

    :param config: Destination bucket, region and credentials.
    :param key: Object key, not yet URI-encoded.
    :param payload: The complete object body.
    :param content_type: Defaults to a guess from the key's extension.
    :param fields: Additional headers to sign and send, e.g. ``x-amz-acl``.
    :param now: Signing instant, defaults to the current time.
    """
    if now is None:
        now = datetime.now(UTC)
    if content_type is None:
        content_type = guess_content_type(key, config.default_content_type)
    signer = signer or SigV4Signer()

    descriptor = RequestDescriptor.for_object(
        host=config.host, key=key, payload=payload, fields=fields
    )
    authorized = signer.sign(
        descriptor=descriptor,
        credentials=config.credentials,
        scope=config.scope_for(TimeContext.from_datetime(now)),
        now=now,
    )
    if executor is not None:
        return executor.execute(authorized, content_type=content_type)
    with UploadExecutor() as owned_executor:
        return owned_executor.execute(authorized, content_type=content_type)
