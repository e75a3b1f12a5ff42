"""
Bitbucket API Client
====================
Sole owner of every outbound call to the Bitbucket Code Insights API.

Hides URL construction and JSON shaping from the formatter:

    reports/{owner}/{slug}/commit/{sha}/{slug}-{uuid4}              create / replace report
    .../reports/{report_uuid}/annotations/{slug}-annotation-{uuid4} create / replace annotation
    .../reports/{report_uuid}/annotations                           bulk create

Reports and single annotations are PUT under a locally generated name, so a
rerun replaces rather than duplicates.  Once the report exists it is addressed
by the UUID Bitbucket returned, wrapped in curly braces.

FAILURE CONTRACT:
  - Non-2xx responses and connection problems raise TransportError.
  - Bodies that are not JSON or lack a valid "uuid" raise ParseError.
  - Nothing is retried.
"""
import logging
import uuid
from typing import Any, Mapping, Optional, Sequence, Union

import httpx

from code_insights.core.config import BitbucketConfig
from code_insights.core.constants import MAX_ANNOTATIONS_PER_REQUEST
from code_insights.core.exceptions import ParseError, TransportError
from code_insights.models.report import AnnotationPayload, ReportPayload
from code_insights.utils.path_utils import RelativePathHelper

logger = logging.getLogger(__name__)

AnnotationInput = Union[AnnotationPayload, Mapping[str, Any]]


class BitbucketApiClient:
    """
    Synchronous HTTP client for the reports API.

    Usage:
        with BitbucketApiClient(BitbucketConfig.from_env()) as client:
            report_uuid = client.create_report("3 issues found", 3)
            client.add_annotation(report_uuid, "Undefined variable", "/repo/src/A.php", 10)

    An httpx.Client may be injected (tests use one backed by MockTransport);
    otherwise one is created that routes every request through the proxy.
    """

    def __init__(
        self,
        config: BitbucketConfig,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config
        self._owns_http = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                base_url=config.base_url,
                proxy=config.proxy_url or None,
                timeout=httpx.Timeout(config.timeout),
            )
        self._http = http_client
        self.relative_path_helper = RelativePathHelper(config.clone_dir)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http and not self._http.is_closed:
            self._http.close()

    def __enter__(self) -> "BitbucketApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Operations
    # -----------------------------------------------------------------------
    def create_report(self, title: str, number_of_issues: int = 0) -> uuid.UUID:
        """
        Create (or replace) the report for the configured commit.

        Returns the report UUID assigned by Bitbucket; every annotation of
        this run must be addressed under it.
        """
        payload = ReportPayload.for_issue_count(title, number_of_issues)
        response = self._send("PUT", self.build_report_url(), payload.to_json())
        return self._parse_uuid(response)

    def add_annotation(
        self,
        report_uuid: uuid.UUID,
        summary: str,
        file_path: Optional[str] = None,
        line: Optional[int] = None,
    ) -> uuid.UUID:
        payload = self._build_annotation_payload(summary, file_path, line)
        response = self._send(
            "PUT", self.build_annotation_url(report_uuid), payload.to_json()
        )
        return self._parse_uuid(response)

    def add_annotations_bulk(
        self,
        report_uuid: uuid.UUID,
        annotations: Sequence[AnnotationInput],
    ) -> Any:
        """
        Submit several annotations in one POST.

        Bitbucket assigns the identifiers itself.  The decoded response is
        returned untouched: it is not reconciled with the input annotations,
        so callers needing per-item ids must read them from the raw body.
        """
        if len(annotations) > MAX_ANNOTATIONS_PER_REQUEST:
            raise ValueError(
                f"At most {MAX_ANNOTATIONS_PER_REQUEST} annotations per bulk request, "
                f"got {len(annotations)}"
            )

        payload = []
        for annotation in annotations:
            if isinstance(annotation, AnnotationPayload):
                summary, path, line = annotation.summary, annotation.path, annotation.line
            else:
                summary = annotation["summary"]
                path = annotation.get("path")
                line = annotation.get("line")
            payload.append(self._build_annotation_payload(summary, path, line).to_json())

        response = self._send("POST", self.build_annotations_bulk_url(report_uuid), payload)
        return self._decode_json(response)

    # -----------------------------------------------------------------------
    # URL construction
    # -----------------------------------------------------------------------
    def build_report_url(self, report_uuid: Optional[uuid.UUID] = None) -> str:
        segment = f"{{{report_uuid}}}" if report_uuid is not None else self.build_report_name()
        return (
            f"repositories/{self.config.repo_owner}/{self.config.repo_slug}"
            f"/commit/{self.config.commit}/reports/{segment}"
        )

    def build_annotations_bulk_url(self, report_uuid: uuid.UUID) -> str:
        return f"{self.build_report_url(report_uuid)}/annotations"

    def build_annotation_url(self, report_uuid: uuid.UUID) -> str:
        return f"{self.build_report_url(report_uuid)}/annotations/{self.build_annotation_name()}"

    def build_report_name(self) -> str:
        return f"{self.config.repo_slug}-{uuid.uuid4()}"

    def build_annotation_name(self) -> str:
        return f"{self.config.repo_slug}-annotation-{uuid.uuid4()}"

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------
    def _build_annotation_payload(
        self, summary: str, file_path: Optional[str], line: Optional[int]
    ) -> AnnotationPayload:
        path = None
        if file_path is not None:
            path = self.relative_path_helper.get_relative_path(file_path)
        return AnnotationPayload(summary=summary, path=path, line=line)

    def _send(self, method: str, url: str, payload: Any) -> httpx.Response:
        logger.info("%s %s", method, url)
        try:
            response = self._http.request(method, url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("%s %s failed with HTTP %d: %s", method, url, status, e.response.text)
            raise TransportError(f"{method} {url} returned HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e
        return response

    @staticmethod
    def _decode_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Response from {response.request.url} is not valid JSON") from e

    def _parse_uuid(self, response: httpx.Response) -> uuid.UUID:
        body = self._decode_json(response)
        raw = body.get("uuid") if isinstance(body, dict) else None
        if not isinstance(raw, str):
            raise ParseError(f"Response from {response.request.url} has no 'uuid' field")
        try:
            # Bitbucket returns the braced form; uuid.UUID accepts both.
            return uuid.UUID(raw)
        except ValueError as e:
            raise ParseError(f"Malformed uuid {raw!r} in response") from e
