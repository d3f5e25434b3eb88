from enum import Enum
from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    visual_elements: str = Field(description="Summary of the key visual elements of the story")
    style_options: List[str] = Field(min_length=1, description="Candidate illustration styles, in suggested order")
    suggested_title: str = Field(description="Short title suggested for the story")


class IllustrationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_bytes: bytes = Field(description="Raw image payload returned by the backend")
    mime_type: str = Field(description="MIME type of the image payload")
    title: str = Field(description="Title frozen at generation time")


class IllustrationExport(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    data: bytes
    mime_type: str = "image/png"


class Action(str, Enum):
    SUBMIT_STORY = "submit_story"
    SELECT_STYLE = "select_style"
    EDIT_TITLE = "edit_title"
    SUBMIT_ILLUSTRATION = "submit_illustration"
    DOWNLOAD = "download"
    RESET = "reset"


class _StoryState(BaseModel):
    model_config = ConfigDict(frozen=True)

    story: str = Field(default="", description="Story text as entered by the user")


class _SelectionState(_StoryState):
    analysis: AnalysisResult
    selected_style: str
    editable_title: str

    @model_validator(mode="after")
    def check_style_is_an_option(self):
        if self.selected_style not in self.analysis.style_options:
            raise ValueError(f"Style '{self.selected_style}' is not one of the analysis style options")
        return self


class Idle(_StoryState):
    stage: Literal["idle"] = "idle"


class Analyzing(_StoryState):
    stage: Literal["analyzing"] = "analyzing"


class Analyzed(_SelectionState):
    stage: Literal["analyzed"] = "analyzed"


class Generating(_SelectionState):
    stage: Literal["generating"] = "generating"


class Generated(_SelectionState):
    stage: Literal["generated"] = "generated"
    illustration: IllustrationResult


PipelineState = Union[Idle, Analyzing, Analyzed, Generating, Generated]
