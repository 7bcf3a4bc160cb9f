"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from jiranote.client import JiraClient
from jiranote.models import IssuePickerSuggestion, IssueTypeDetails, Project
from jiranote.plugin import JiraNotePlugin
from jiranote.settings import JiraSettings

HOST = "https://acme.atlassian.net"
API = f"{HOST}/rest/api/3"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Env vars outrank explicit JiraSettings kwargs, so keep them out of every test.
    for var in ("JIRANOTE_DEFAULT_PROFILE", "JIRANOTE_HOST", "JIRANOTE_USERNAME", "JIRANOTE_API_KEY"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings() -> JiraSettings:
    return JiraSettings(  # type: ignore[call-arg]
        host=HOST,
        username="jane@acme.com",
        api_key="atl_api_test",
    )


@pytest.fixture
def unconfigured_settings() -> JiraSettings:
    return JiraSettings(host="", username="", api_key=None)  # type: ignore[call-arg]


@pytest.fixture
def client(settings: JiraSettings) -> JiraClient:
    return JiraClient(settings)


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def chooser() -> MagicMock:
    chooser = MagicMock()
    chooser.choose.return_value = None
    return chooser


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock(spec=JiraClient)
    client.is_ready = True
    return client


@pytest.fixture
def plugin(settings: JiraSettings, notifier: MagicMock, chooser: MagicMock, mock_client: MagicMock) -> JiraNotePlugin:
    return JiraNotePlugin(settings, notifier=notifier, chooser=chooser, client=mock_client)


@pytest.fixture
def suggestion() -> IssuePickerSuggestion:
    return IssuePickerSuggestion(id=10001, key="ENG-123", summaryText="Fix null check in auth middleware")


@pytest.fixture
def sample_project() -> Project:
    return Project(id="10000", key="ENG", name="Engineering", projectTypeKey="software")


@pytest.fixture
def sample_issue_type() -> IssueTypeDetails:
    return IssueTypeDetails(id="10004", name="Bug", description="A problem.", hierarchyLevel=0)
