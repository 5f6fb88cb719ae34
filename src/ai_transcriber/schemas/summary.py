from pydantic import BaseModel, ConfigDict, Field


class SummaryOptions(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key_points: bool = Field(default=False, alias="keyPoints")
    task_list: bool = Field(default=False, alias="taskList")
    preserve_language: bool = Field(default=False, alias="preserveLanguage")


class SummarizeRequest(BaseModel):
    transcript: str | None = None
    options: SummaryOptions | None = None

    def is_complete(self) -> bool:
        return bool(self.transcript) and self.options is not None


class SummaryResponse(BaseModel):
    summary: str
