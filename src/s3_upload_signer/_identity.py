"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from dataclasses import dataclass, field


@dataclass(kw_only=True, frozen=True)
class Credentials:
    access_key_id: str
    # Kept out of repr() so the secret never ends up in logs or tracebacks.
    secret_access_key: str = field(repr=False)

