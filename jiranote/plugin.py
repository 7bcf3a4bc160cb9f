"""Session object that owns the settings, the Jira client and the pickers."""

import logging

from pydantic import SecretStr

from jiranote.api import JiraNoteApi
from jiranote.client import JiraClient
from jiranote.host import Chooser, ConsoleChooser, ConsoleNotifier, Notifier
from jiranote.pickers import IssueSuggest, IssueTypeSuggest, ProjectSuggest
from jiranote.settings import CONNECTION_FIELDS, JiraSettings

logger = logging.getLogger(__name__)


class JiraNotePlugin:
    def __init__(
        self,
        settings: JiraSettings,
        notifier: Notifier | None = None,
        chooser: Chooser | None = None,
        client: JiraClient | None = None,
    ) -> None:
        self.settings = settings
        self.notifier = notifier or ConsoleNotifier()
        self.chooser = chooser or ConsoleChooser()
        self.jira = client or JiraClient(settings)
        self._build_pickers()
        self.api = JiraNoteApi(self)

    def _build_pickers(self) -> None:
        self.issue_suggest = IssueSuggest(self.jira, self.chooser)
        self.project_suggest = ProjectSuggest(self.jira, self.chooser)
        self.issue_type_suggest = IssueTypeSuggest(self.jira, self.chooser)

    def update_settings(self, **changes) -> bool:
        """Apply setting changes; rebuild the client when a connection field changed.

        Returns True if the client was replaced. Outstanding references to the old
        client keep its old configuration.
        """
        if isinstance(changes.get("api_key"), str):
            changes["api_key"] = SecretStr(changes["api_key"])
        reset_client = any(
            key in CONNECTION_FIELDS and getattr(self.settings, key) != value for key, value in changes.items()
        )
        self.settings = self.settings.model_copy(update=changes)
        if reset_client:
            logger.debug("Connection settings changed, recreating Jira client")
            self.jira = JiraClient(self.settings)
            self._build_pickers()
        return reset_client
