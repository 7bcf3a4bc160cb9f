"""Public API of the plugin. Other integrations call these methods."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jiranote.errors import JiraApiError, JiraApiErrorReason, UnexpectedResponseError, classify_failure
from jiranote.models import Issue, IssueTypeDetails, Project

if TYPE_CHECKING:
    from jiranote.plugin import JiraNotePlugin

logger = logging.getLogger(__name__)

MSG_VERIFIED = "Connection verified successfully!"
MSG_NO_ISSUES = (
    "Connection could not be verified, no issues were returned from the API. Please check the console."
)
MSG_NOT_INITIALIZED = "Could not verify connection. Jira was not initialized."
MSG_UNAUTHORIZED = "Jira client not authorized. Please verify your configuration."
MSG_NOT_FOUND = "404 Error: Could not reach Jira instance, check your host URI."
MSG_UNKNOWN = "Could not verify connection. Unknown error, check logs."


def failure_message(err: JiraApiError) -> str:
    if err.reason is JiraApiErrorReason.NOT_INITIALIZED:
        return MSG_NOT_INITIALIZED
    if err.reason is JiraApiErrorReason.UNAUTHORIZED:
        return MSG_UNAUTHORIZED
    if err.reason is JiraApiErrorReason.OTHER and err.status == 404:
        return MSG_NOT_FOUND
    return MSG_UNKNOWN


class JiraNoteApi:
    def __init__(self, plugin: JiraNotePlugin) -> None:
        self._plugin = plugin

    @property
    def jira(self):
        # Resolved on every call: the plugin replaces its client when settings change.
        return self._plugin.jira

    def verify_connection(self) -> None:
        """Smoke-test the connection and tell the user how it went.

        Succeeds (with a warning message) when Jira answers but returns no issues,
        since an empty instance and a misconfigured one look the same from here.
        On failure, notifies once and re-raises the classified JiraApiError.
        """
        message = MSG_VERIFIED
        try:
            # Recently viewed issues
            response = self.jira.issue_picker()

            if not response.sections:
                raise UnexpectedResponseError("Jira issue picker response has no sections")

            # Only the first section is checked; later ones may legitimately be empty.
            if not response.sections[0].issues:
                message = MSG_NO_ISSUES
                logger.warning("Jira API response follows:")
                logger.warning("%s", response.model_dump(by_alias=True))
        except Exception as exc:
            err = classify_failure(exc)
            logger.error("Connection verification failed (%s): %s", err.reason.value, err)
            if err.response is not None:
                logger.error("%s", err.response.model_dump())
            self._plugin.notifier.notify(failure_message(err))
            if err is exc:
                raise
            raise err from exc

        self._plugin.notifier.notify(message)

    def get_issue(self) -> Issue | None:
        """Pick an issue and fetch its full record.

        Returns None if the user cancels. Raises JiraNotInitializedError when the
        client has not been configured.
        """
        suggestion = self._plugin.issue_suggest.pick()
        if not suggestion or not suggestion.key:
            return None
        return self.jira.get_issue(suggestion.key)

    def get_project(self) -> Project | None:
        """Pick a project. Returns None if the user cancels."""
        return self._plugin.project_suggest.pick()

    def get_issue_type(self, project_id: int | None = None) -> IssueTypeDetails | None:
        """Pick an issue type, limited to project_id when given."""
        return self._plugin.issue_type_suggest.pick(project_id)
