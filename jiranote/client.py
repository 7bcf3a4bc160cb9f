"""Jira Cloud REST v3 client."""

import logging
from typing import Any

import httpx

from jiranote.errors import JiraNotInitializedError, UnexpectedResponseError, classify_failure
from jiranote.models import Issue, IssuePickerResult, IssueTypeDetails, Project
from jiranote.settings import JiraSettings

logger = logging.getLogger(__name__)

API_PREFIX = "/rest/api/3"


class JiraClient:
    """Authenticated session against a Jira Cloud instance.

    A client built from incomplete settings is uninitialized: every call raises
    JiraNotInitializedError before touching the network. Networked failures are
    raised as classified JiraApiError.
    """

    def __init__(self, settings: JiraSettings) -> None:
        self._base_url = settings.host.strip().rstrip("/")
        self._auth: tuple[str, str] | None = None
        if settings.is_configured:
            self._auth = (settings.username, settings.api_key.get_secret_value())  # type: ignore[union-attr]

    @property
    def is_ready(self) -> bool:
        return self._auth is not None

    def require_ready(self) -> None:
        if not self.is_ready:
            raise JiraNotInitializedError()

    def _get(self, path: str, params: dict | None = None) -> Any:
        self.require_ready()
        logger.debug("GET %s%s params=%s", API_PREFIX, path, params)
        try:
            response = httpx.get(
                f"{self._base_url}{API_PREFIX}{path}",
                auth=self._auth,
                headers={"Accept": "application/json"},
                params=params or {},
                timeout=30,
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise classify_failure(exc) from exc

    def issue_picker(self, query: str = "") -> IssuePickerResult:
        """Type-ahead issue search. An empty query returns recently viewed issues."""
        params = {"query": query} if query else {}
        data = self._get("/issue/picker", params)
        return IssuePickerResult.model_validate(data or {})

    def get_issue(self, key: str) -> Issue:
        return Issue.model_validate(self._get(f"/issue/{key}"))

    def list_projects(self, query: str | None = None) -> list[Project]:
        # NOTE: fetches page 1 only (up to 50 results). Full pagination not implemented.
        params: dict[str, str] = {"maxResults": "50"}
        if query:
            params["query"] = query
        data = self._get("/project/search", params)
        if not isinstance(data, dict):
            raise classify_failure(UnexpectedResponseError(f"Expected a project page, got {type(data).__name__}"))
        return [Project.model_validate(p) for p in data.get("values", [])]

    def list_issue_types(self, project_id: int | None = None) -> list[IssueTypeDetails]:
        """Issue types visible to the user, or only those of one project."""
        if project_id is None:
            data = self._get("/issuetype")
        else:
            data = self._get("/issuetype/project", {"projectId": str(project_id)})
        if not isinstance(data, list):
            raise classify_failure(
                UnexpectedResponseError(f"Expected a list of issue types, got {type(data).__name__}")
            )
        return [IssueTypeDetails.model_validate(t) for t in data]
