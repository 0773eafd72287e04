# -*- coding: utf-8 -*-
# ------------------------------------------------------------------------------
#
#   Copyright 2025 Valory AG
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
# ------------------------------------------------------------------------------

"""HTTP helpers."""

import typing as t
from http import HTTPStatus

import requests

from funder.constants import HTTP_REQUEST_TIMEOUT
from funder.exceptions import CollaboratorError


def send_http_request(
    method: str,
    endpoint: str,
    timeout: float = HTTP_REQUEST_TIMEOUT,
) -> t.Any:
    """Send a JSON request to a node and return the decoded response body."""
    try:
        response = requests.request(
            method=method,
            url=endpoint,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise CollaboratorError(f"{method} {endpoint} failed: {e}") from e

    if response.status_code != HTTPStatus.OK:
        raise CollaboratorError(
            f"{method} {endpoint} failed: status code {response.status_code}"
        )

    if not response.content:
        return None

    try:
        return response.json()
    except ValueError as e:
        raise CollaboratorError(
            f"{method} {endpoint} failed: invalid JSON response"
        ) from e
