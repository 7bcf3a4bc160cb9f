"""Interactive pickers for issues, projects and issue types."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from functools import partial
from typing import Generic, TypeVar

from rich.markup import escape

from jiranote.client import JiraClient
from jiranote.host import Chooser
from jiranote.models import IssuePickerSuggestion, IssueTypeDetails, Project

T = TypeVar("T")


class SuggestPicker(ABC, Generic[T]):
    """Open the chooser over Jira data and return the selected item.

    pick() returns None when the user cancels and raises JiraNotInitializedError
    when the client has no credentials. Remote failures propagate as JiraApiError.
    """

    placeholder = "Search"

    def __init__(self, client: JiraClient, chooser: Chooser) -> None:
        self.client = client
        self.chooser = chooser

    @abstractmethod
    def get_suggestions(self, query: str) -> Sequence[T]: ...

    @abstractmethod
    def render_suggestion(self, item: T) -> str: ...

    def pick(self) -> T | None:
        self.client.require_ready()
        return self.chooser.choose(self.get_suggestions, self.render_suggestion, self.placeholder)


class IssueSuggest(SuggestPicker[IssuePickerSuggestion]):
    placeholder = "Search issues"

    def get_suggestions(self, query: str) -> list[IssuePickerSuggestion]:
        return self.client.issue_picker(query).suggestions()

    def render_suggestion(self, item: IssuePickerSuggestion) -> str:
        return escape(f"{item.key or '?'}: {item.summary_text or ''}")


class ProjectSuggest(SuggestPicker[Project]):
    placeholder = "Search projects"

    def get_suggestions(self, query: str) -> list[Project]:
        return self.client.list_projects(query or None)

    def render_suggestion(self, item: Project) -> str:
        return escape(f"{item.key}: {item.name}")


class IssueTypeSuggest(SuggestPicker[IssueTypeDetails]):
    """Issue types, optionally scoped to one project.

    The project filter is bound per pick() call, so two picks never share it.
    """

    placeholder = "Search issue types"

    def get_suggestions(self, query: str, project_id: int | None = None) -> list[IssueTypeDetails]:
        needle = query.lower()
        return [t for t in self.client.list_issue_types(project_id) if needle in t.name.lower()]

    def render_suggestion(self, item: IssueTypeDetails) -> str:
        if item.description:
            return f"{escape(item.name)} [dim]{escape(item.description)}[/dim]"
        return escape(item.name)

    def pick(self, project_id: int | None = None) -> IssueTypeDetails | None:  # type: ignore[override]
        self.client.require_ready()
        return self.chooser.choose(
            partial(self.get_suggestions, project_id=project_id),
            self.render_suggestion,
            self.placeholder,
        )
