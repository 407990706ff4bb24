"""Submit a pipeline to the analysis service, answering locally when it can't.

    client = AnalysisClient()
    result = client.parse_pipeline(graph)   # never fails on network errors
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from . import config
from .analysis import AnalysisResult, analyze
from .errors import RemoteAnalysisError
from .ir import Graph

logger = logging.getLogger(__name__)

PARSE_PATH = "/pipelines/parse"


class AnalysisClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            base_url: Base URL of the analysis service
            timeout: HTTP request timeout in seconds
            transport: httpx transport override, mainly for tests
        """
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.timeout = config.TIMEOUT if timeout is None else timeout
        self.transport = transport

    def fetch(self, graph: Graph) -> AnalysisResult:
        """Ask the service; raise RemoteAnalysisError on any failure."""
        url = f"{self.base_url}{PARSE_PATH}"
        payload = {
            "nodes": [n.model_dump(mode="json") for n in graph.nodes],
            "edges": [e.model_dump(mode="json") for e in graph.edges],
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(url, json=payload)
                response.raise_for_status()
                return AnalysisResult.model_validate(response.json())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteAnalysisError(f"Analysis request to {url} failed: {e}") from e
        except ValueError as e:  # bad JSON or a body that is not an AnalysisResult
            raise RemoteAnalysisError(f"Unexpected analysis response from {url}: {e}") from e

    def parse_pipeline(self, graph: Graph) -> AnalysisResult:
        """Remote analysis with a local fallback on the same checker."""
        try:
            return self.fetch(graph)
        except RemoteAnalysisError as e:
            logger.warning("%s; using local analysis", e)
            return analyze(graph)
