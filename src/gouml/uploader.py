"""Artifact upload.

Sends the generated model to a collection endpoint as a multipart form:

- ``file``: the JSON artifact (content type application/json)
- ``projectName``, ``systemElementId``, ``commitId``, ``branch``: optional
  metadata fields, sent only when set

A bearer token is attached when configured. In dry-run mode the request is
described in the log (token masked) and nothing is sent.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from gouml.analyzers.base import UploadError
from gouml.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_MASK = "***"
ARTIFACT_CONTENT_TYPE = "application/json"


@dataclass
class UploadRequest:
    """Everything needed to send one artifact.

    Attributes:
        url: Upload endpoint
        file_path: Artifact to send
        token: Bearer token (optional)
        project_name: projectName form field
        system_element_id: systemElementId form field
        commit_id: commitId form field
        branch: branch form field
    """

    url: str
    file_path: Path
    token: str | None = None
    project_name: str | None = None
    system_element_id: str | None = None
    commit_id: str | None = None
    branch: str | None = None

    def headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def form_fields(self) -> dict[str, str]:
        """Build the non-file form fields, omitting unset values."""
        fields = {
            "projectName": self.project_name,
            "systemElementId": self.system_element_id,
            "commitId": self.commit_id,
            "branch": self.branch,
        }
        return {k: v for k, v in fields.items() if v}

    def describe(self) -> str:
        """Render the request as a curl command with the token masked."""
        parts = ["curl -X POST", "-H 'Accept: application/json'"]
        if self.token:
            parts.append(f"-H 'Authorization: Bearer {TOKEN_MASK}'")
        parts.append(f"-F 'file=@{self.file_path};type={ARTIFACT_CONTENT_TYPE}'")
        for key, value in self.form_fields().items():
            parts.append(f"-F '{key}={value}'")
        parts.append(f"'{self.url}'")
        return " ".join(parts)


@dataclass
class UploadResult:
    """Outcome of an upload attempt.

    Attributes:
        sent: Whether a request was actually sent
        status_code: HTTP status (None when nothing was sent)
        body: Response body text
        command: Masked description of the request
    """

    sent: bool
    status_code: int | None = None
    body: str = ""
    command: str = ""


class Uploader:
    """Sends artifacts over HTTP using httpx.

    Attributes:
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self._transport = transport

    def upload(self, request: UploadRequest, dry_run: bool = False) -> UploadResult:
        """Upload an artifact.

        Args:
            request: What to send and where
            dry_run: Only log the request

        Returns:
            UploadResult describing what happened

        Raises:
            UploadError: If the artifact cannot be read, the request fails or
                the endpoint answers with a non-2xx status
        """
        command = request.describe()

        if dry_run:
            logger.info("Dry-run mode: the following request would be sent:")
            logger.info(command)
            return UploadResult(sent=False, command=command)

        try:
            content = request.file_path.read_bytes()
        except OSError as e:
            raise UploadError(f"read {request.file_path}: {e.strerror or e}") from e

        logger.info(f"Uploading {request.file_path.name} to {request.url}")
        logger.debug(command)

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    request.url,
                    headers=request.headers(),
                    data=request.form_fields(),
                    files={"file": (request.file_path.name, content, ARTIFACT_CONTENT_TYPE)},
                )
        except httpx.TimeoutException as e:
            raise UploadError(f"upload to {request.url} timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise UploadError(f"upload to {request.url} failed: {e}") from e

        if not response.is_success:
            raise UploadError(
                f"upload to {request.url} failed with HTTP {response.status_code}: "
                f"{response.text[:200]}"
            )

        logger.structured(
            logging.INFO,
            f"Upload complete (HTTP {response.status_code})",
            status_code=response.status_code,
            url=request.url,
        )
        return UploadResult(
            sent=True,
            status_code=response.status_code,
            body=response.text,
            command=command,
        )
