"""Pydantic models for the Jira payloads that the pickers and verifier consume."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JiraModel(BaseModel):
    # Jira returns far more than we declare; keep it so include_all can show it.
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    def declared(self) -> dict:
        """Dump only the declared fields, dropping the raw extras."""
        return self.model_dump(include=set(type(self).model_fields), by_alias=True)


class IssuePickerSuggestion(JiraModel):
    id: int | None = None
    key: str | None = None
    summary_text: str | None = Field(default=None, alias="summaryText")
    summary: str | None = None  # HTML-highlighted variant of summary_text


class IssuePickerSection(JiraModel):
    id: str | None = None
    label: str | None = None
    issues: list[IssuePickerSuggestion] = []

    @field_validator("issues", mode="before")
    @classmethod
    def _null_issues(cls, value):
        # Jira sends "issues": null for a section with nothing in it.
        return [] if value is None else value


class IssuePickerResult(JiraModel):
    """Response of GET /issue/picker, grouped into sections (history, current search)."""

    sections: list[IssuePickerSection] = []

    @field_validator("sections", mode="before")
    @classmethod
    def _null_sections(cls, value):
        return [] if value is None else value

    def suggestions(self) -> list[IssuePickerSuggestion]:
        # The same issue shows up in several sections; keep the first occurrence.
        seen: set[str] = set()
        result = []
        for section in self.sections:
            for issue in section.issues:
                marker = issue.key or str(issue.id)
                if marker in seen:
                    continue
                seen.add(marker)
                result.append(issue)
        return result


class Issue(JiraModel):
    id: str
    key: str
    self_url: str | None = Field(default=None, alias="self")
    fields: dict = {}

    @property
    def summary(self) -> str | None:
        return self.fields.get("summary")


class Project(JiraModel):
    id: str
    key: str
    name: str
    project_type_key: str | None = Field(default=None, alias="projectTypeKey")
    simplified: bool | None = None


class IssueTypeDetails(JiraModel):
    id: str
    name: str
    description: str | None = None
    subtask: bool = False
    hierarchy_level: int | None = Field(default=None, alias="hierarchyLevel")
    icon_url: str | None = Field(default=None, alias="iconUrl")


class ApiResponse(BaseModel):
    """Diagnostic snapshot of a failed HTTP exchange."""

    model_config = ConfigDict(frozen=True)

    status: int
    body: str | dict | list | None = None
