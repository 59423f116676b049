"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

import hmac
import logging
import warnings
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from hashlib import sha256

from ._http import AuthorizedRequest, RequestDescriptor
from ._identity import Credentials
from .exceptions import (
    InvalidDescriptor,
    InvalidSigningScope,
    MissingCredentials,
    SignerWarning,
)

logger = logging.getLogger(__name__)

HEADERS_EXCLUDED_FROM_SIGNING: tuple[str, ...] = (
    "authorization",
    "connection",
    "expect",
    "user-agent",
    "x-amzn-trace-id",
)
SUPPORTED_METHODS: tuple[str, ...] = ("PUT",)

SIGNING_ALGORITHM: str = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR: str = "aws4_request"
SIGV4_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"
SIGV4_DATE_FORMAT: str = "%Y%m%d"
EMPTY_SHA256_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
# Largest object S3 accepts in a single PUT.
MAX_SINGLE_PUT_SIZE: int = 5 * 1024**3


def hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key=key, msg=message.encode(), digestmod=sha256).digest()


@dataclass(frozen=True)
class TimeContext:
    """Both timestamp renderings of a single signing instant."""

    amz_date: str
    date_stamp: str

    @classmethod
    def from_datetime(cls, now: datetime) -> TimeContext:
        """Render ``now`` in UTC. Naive datetimes are taken to already be UTC."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        else:
            now = now.astimezone(UTC)
        return cls(
            amz_date=now.strftime(SIGV4_TIMESTAMP_FORMAT),
            date_stamp=now.strftime(SIGV4_DATE_FORMAT),
        )


@dataclass(kw_only=True, frozen=True)
class SigningScope:
    date_stamp: str
    region: str
    service: str = "s3"
    terminator: str = SCOPE_TERMINATOR

    @classmethod
    def for_time(
        cls, time_context: TimeContext, *, region: str, service: str = "s3"
    ) -> SigningScope:
        return cls(date_stamp=time_context.date_stamp, region=region, service=service)

    @property
    def credential_scope(self) -> str:
        # Scope format: <YYYYMMDD>/<AWS Region>/<AWS Service>/aws4_request
        return f"{self.date_stamp}/{self.region}/{self.service}/{self.terminator}"


class SigningKeyDeriver:
    """Derives the date, region and service scoped SigV4 signing key."""

    def derive(
        self, *, secret_key: str, date_stamp: str, region: str, service: str
    ) -> bytes:
        """Compute the 32 byte signing key.

        Each step's raw digest is the key of the next step:

        DateKey              = HMAC-SHA256("AWS4"+"<SecretAccessKey>", "<YYYYMMDD>")
        DateRegionKey        = HMAC-SHA256(<DateKey>, "<aws-region>")
        DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<aws-service>")
        SigningKey           = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")
        """
        k_date = hmac_sha256(f"AWS4{secret_key}".encode(), date_stamp)
        k_region = hmac_sha256(k_date, region)
        k_service = hmac_sha256(k_region, service)
        return hmac_sha256(k_service, SCOPE_TERMINATOR)


class SigV4Signer:
    """Request signer for applying the AWS Signature Version 4 algorithm to an
    object PUT."""

    def __init__(self, *, key_deriver: SigningKeyDeriver | None = None):
        self._key_deriver = key_deriver or SigningKeyDeriver()

    def sign(
        self,
        *,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        scope: SigningScope,
        now: datetime | None = None,
    ) -> AuthorizedRequest:
        """Generate a SigV4 Authorization header for the supplied request.

        :param descriptor: The buffered object PUT to sign.
        :param credentials: The access key pair to sign with.
        :param scope: Credential scope; its date stamp must match ``now``.
        :param now: The signing instant. The current UTC time is captured once
            when omitted.
        """
        # The instant is captured once so amz_date and the scope date can't drift.
        if now is None:
            now = datetime.now(UTC)
        time_context = TimeContext.from_datetime(now)

        self._validate_credentials(credentials=credentials)
        payload = self._validate_descriptor(descriptor=descriptor)
        if payload is not descriptor.payload:
            # Sign and send the same frozen copy of a mutable buffer.
            descriptor = replace(descriptor, payload=payload)
        self._validate_scope(scope=scope, time_context=time_context)

        payload_hash = self.payload_hash(payload)
        canonical_request = self.canonical_request(
            descriptor=descriptor,
            amz_date=time_context.amz_date,
            payload_hash=payload_hash,
        )
        logger.debug("CanonicalRequest:\n%s", canonical_request)
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            amz_date=time_context.amz_date,
            scope=scope,
        )
        logger.debug("StringToSign:\n%s", string_to_sign)
        signature = self.signature(
            string_to_sign=string_to_sign,
            secret_key=credentials.secret_access_key,
            scope=scope,
        )
        logger.debug("Signature:\n%s", signature)

        signing_fields = self.signing_fields(
            descriptor=descriptor,
            amz_date=time_context.amz_date,
            payload_hash=payload_hash,
        )
        authorization = self.generate_authorization_header(
            credential=f"{credentials.access_key_id}/{scope.credential_scope}",
            signed_headers=list(signing_fields.keys()),
            signature=signature,
        )
        return AuthorizedRequest(
            descriptor=descriptor,
            amz_date=time_context.amz_date,
            payload_hash=payload_hash,
            authorization=authorization,
            signed_fields=signing_fields,
        )

    def payload_hash(self, payload: bytes) -> str:
        return sha256(payload).hexdigest()

    def canonical_request(
        self, *, descriptor: RequestDescriptor, amz_date: str, payload_hash: str
    ) -> str:
        """The canonical request is a standardized string laying out the components
        used in the SigV4 signing algorithm. Comparing it against the server's
        version is the quickest way to find the cause of a signature mismatch.

        The SigV4 specification defines the canonical request to be:
            <HTTPMethod>\n
            <CanonicalURI>\n
            <CanonicalQueryString>\n
            <CanonicalHeaders>\n
            <SignedHeaders>\n
            <HashedPayload>

        <CanonicalHeaders> ends in its own newline, so a blank line separates it
        from <SignedHeaders>.
        """
        signing_fields = self.signing_fields(
            descriptor=descriptor, amz_date=amz_date, payload_hash=payload_hash
        )
        canonical_fields = "".join(
            f"{name}:{value}\n" for name, value in signing_fields.items()
        )
        return (
            f"{descriptor.method.upper()}\n"
            f"{descriptor.canonical_uri}\n"
            f"{descriptor.query_string}\n"
            f"{canonical_fields}\n"
            f"{';'.join(signing_fields)}\n"
            f"{payload_hash}"
        )

    def string_to_sign(
        self, *, canonical_request: str, amz_date: str, scope: SigningScope
    ) -> str:
        """Concatenate the algorithm identifier, the request timestamp, the
        credential scope and the hash of the canonical request.

            Algorithm \n
            RequestDateTime \n
            CredentialScope  \n
            HashedCanonicalRequest
        """
        return (
            f"{SIGNING_ALGORITHM}\n"
            f"{amz_date}\n"
            f"{scope.credential_scope}\n"
            f"{sha256(canonical_request.encode()).hexdigest()}"
        )

    def signature(
        self, *, string_to_sign: str, secret_key: str, scope: SigningScope
    ) -> str:
        signing_key = self._key_deriver.derive(
            secret_key=secret_key,
            date_stamp=scope.date_stamp,
            region=scope.region,
            service=scope.service,
        )
        return hmac_sha256(signing_key, string_to_sign).hex()

    def generate_authorization_header(
        self, *, credential: str, signed_headers: list[str], signature: str
    ) -> str:
        """Generate the `Authorization` header value.

        :param credential:
            <access_key>/<date>/<region>/<service>/aws4_request
        :param signed_headers:
            The lower-cased header names used in signing, in canonical order.
        :param signature:
            Hex encoded signature over the string to sign.
        """
        return (
            f"{SIGNING_ALGORITHM} Credential={credential}, "
            f"SignedHeaders={';'.join(signed_headers)}, Signature={signature}"
        )

    def signing_fields(
        self, *, descriptor: RequestDescriptor, amz_date: str, payload_hash: str
    ) -> dict[str, str]:
        """The headers to sign, lower-cased and sorted by name.

        ``host``, ``x-amz-content-sha256`` and ``x-amz-date`` are always present and
        always take the signer's values.
        """
        normalized_fields = {
            field.name.lower(): " ".join(field.as_string().split())
            for field in descriptor.fields
            if field.name.lower() not in HEADERS_EXCLUDED_FROM_SIGNING
        }
        normalized_fields["host"] = descriptor.host
        normalized_fields["x-amz-content-sha256"] = payload_hash
        normalized_fields["x-amz-date"] = amz_date
        return dict(sorted(normalized_fields.items()))

    def _validate_credentials(self, *, credentials: Credentials) -> None:
        if not isinstance(credentials, Credentials):
            raise MissingCredentials(
                "Received unexpected value for credentials. Expected Credentials "
                f"but received {type(credentials)}."
            )
        if not credentials.access_key_id:
            raise MissingCredentials("The access key id must not be empty.")
        if not credentials.secret_access_key:
            raise MissingCredentials("The secret access key must not be empty.")

    def _validate_descriptor(self, *, descriptor: RequestDescriptor) -> bytes:
        if descriptor.method.upper() not in SUPPORTED_METHODS:
            raise InvalidDescriptor(
                f"Unsupported method {descriptor.method!r}. Supported methods: "
                f"{', '.join(SUPPORTED_METHODS)}."
            )
        if not descriptor.host:
            raise InvalidDescriptor("The request host must not be empty.")
        if not descriptor.canonical_uri.startswith("/"):
            raise InvalidDescriptor(
                "The canonical URI must be an absolute path starting with '/'. "
                f"Received: {descriptor.canonical_uri!r}"
            )
        payload = descriptor.payload
        if payload is None:
            raise InvalidDescriptor(
                "The payload must be fully buffered before signing."
            )
        if not isinstance(payload, bytes | bytearray | memoryview):
            raise InvalidDescriptor(
                f"The payload must be bytes but received {type(payload)}."
            )
        payload = bytes(payload)
        if len(payload) > MAX_SINGLE_PUT_SIZE:
            warnings.warn(
                f"Payload of {len(payload)} bytes exceeds the {MAX_SINGLE_PUT_SIZE} "
                "byte limit of a single PUT and will be rejected by S3.",
                SignerWarning,
            )
        return payload

    def _validate_scope(self, *, scope: SigningScope, time_context: TimeContext) -> None:
        if scope.date_stamp != time_context.date_stamp:
            raise InvalidSigningScope(
                f"Scope date {scope.date_stamp} does not match the signing date "
                f"{time_context.date_stamp}."
            )
        if not scope.region or not scope.service:
            raise InvalidSigningScope("Region and service must not be empty.")
