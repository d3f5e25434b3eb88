import logging
from typing import FrozenSet, Optional

from story_illustrator.core.ai_client import GenAIClient
from story_illustrator.core.errors import IllustratorError, PreconditionNotMetError, RequestFailedError
from story_illustrator.core.exporter import export_illustration
from story_illustrator.core.key_store import KeyStore
from story_illustrator.core.models import (
    Action,
    Analyzed,
    Analyzing,
    Generated,
    Generating,
    IllustrationExport,
    IllustrationResult,
    Idle,
    PipelineState,
)
from story_illustrator.core.parser import extract_image, parse_analysis
from story_illustrator.core.prompts import build_analysis_prompt, build_illustration_prompt

logger = logging.getLogger(__name__)

_ACTIONS = {
    "idle": frozenset({Action.SUBMIT_STORY}),
    "analyzing": frozenset(),
    "analyzed": frozenset({Action.SELECT_STYLE, Action.EDIT_TITLE, Action.SUBMIT_ILLUSTRATION, Action.RESET}),
    "generating": frozenset(),
    "generated": frozenset({Action.DOWNLOAD, Action.RESET}),
}


class StoryPipeline:
    """
    Two-stage story illustration pipeline: analyze a story, then illustrate it
    in a chosen style.

    The whole session lives in `state`, one of Idle/Analyzing/Analyzed/
    Generating/Generated. Action methods never raise; a failed
    action leaves the last stable state in place and records the error in
    `last_error` for the UI to show.
    """

    def __init__(self, ai_client: GenAIClient, key_store: KeyStore):
        self.ai_client = ai_client
        self.key_store = key_store
        self.state: PipelineState = Idle()
        self.last_error: Optional[IllustratorError] = None

    @property
    def api_key(self) -> str:
        return self.key_store.load() or ""

    def set_api_key(self, key: str):
        self.key_store.save(key)

    @property
    def busy(self) -> bool:
        return isinstance(self.state, (Analyzing, Generating))

    @property
    def error_message(self) -> Optional[str]:
        return str(self.last_error) if self.last_error else None

    def available_actions(self) -> FrozenSet[Action]:
        return _ACTIONS[self.state.stage]

    def submit_story(self, story: str) -> PipelineState:
        if self.busy:
            logger.warning(f"Ignoring story submission while {self.state.stage}.")
            return self.state
        if not isinstance(self.state, Idle):
            return self._fail(PreconditionNotMetError("Start over before analyzing a new story."))

        api_key = self.api_key
        if not api_key.strip():
            return self._fail(PreconditionNotMetError("Please enter your Google AI API key"))
        if not story or not story.strip():
            return self._fail(PreconditionNotMetError("Please enter your story"))

        logger.info("Starting story analysis...")
        self.state = Analyzing(story=story)
        try:
            raw = self.ai_client.run_analysis(api_key, build_analysis_prompt(story))
        except IllustratorError as e:
            self.state = Idle(story=story)
            return self._fail(e)
        except Exception as e:
            self.state = Idle(story=story)
            return self._fail(RequestFailedError(None, f"Story analysis failed: {e}"))

        analysis = parse_analysis(raw)
        self.state = Analyzed(
            story=story,
            analysis=analysis,
            selected_style=analysis.style_options[0],
            editable_title=analysis.suggested_title,
        )
        self.last_error = None
        logger.info(f"Story analyzed: {len(analysis.style_options)} style options, title '{analysis.suggested_title}'")
        return self.state

    def select_style(self, style: str) -> PipelineState:
        if not isinstance(self.state, Analyzed):
            return self._fail(PreconditionNotMetError("Styles can only be chosen after an analysis."))
        if style not in self.state.analysis.style_options:
            return self._fail(PreconditionNotMetError(f"'{style}' is not one of the suggested styles."))
        self.state = self.state.model_copy(update={"selected_style": style})
        self.last_error = None
        return self.state

    def edit_title(self, title: str) -> PipelineState:
        if not isinstance(self.state, Analyzed):
            return self._fail(PreconditionNotMetError("The title can only be edited after an analysis."))
        self.state = self.state.model_copy(update={"editable_title": title})
        self.last_error = None
        return self.state

    def submit_illustration(self) -> PipelineState:
        if self.busy:
            logger.warning(f"Ignoring illustration request while {self.state.stage}.")
            return self.state
        if not isinstance(self.state, Analyzed):
            return self._fail(PreconditionNotMetError("Analyze your story before illustrating it."))

        analyzed = self.state
        if not analyzed.selected_style or not analyzed.editable_title.strip():
            return self._fail(PreconditionNotMetError("Please select a style and confirm the title"))
        api_key = self.api_key
        if not api_key.strip():
            return self._fail(PreconditionNotMetError("Please enter your Google AI API key"))

        logger.info(f"Starting illustration generation in '{analyzed.selected_style}' style...")
        self.state = Generating(**analyzed.model_dump(exclude={"stage"}))
        prompt = build_illustration_prompt(analyzed.story, analyzed.analysis.visual_elements, analyzed.selected_style)
        try:
            response = self.ai_client.run_generation(api_key, prompt)
            image_bytes, mime_type = extract_image(response)
        except IllustratorError as e:
            self.state = analyzed
            return self._fail(e)
        except Exception as e:
            self.state = analyzed
            return self._fail(RequestFailedError(None, f"Illustration failed: {e}"))

        illustration = IllustrationResult(
            image_bytes=image_bytes,
            mime_type=mime_type,
            title=analyzed.editable_title,
        )
        self.state = Generated(**analyzed.model_dump(exclude={"stage"}), illustration=illustration)
        self.last_error = None
        logger.info(f"Illustration generated ({mime_type}, {len(image_bytes)} bytes)")
        return self.state

    def download(self) -> Optional[IllustrationExport]:
        """Returns the generated image as a downloadable file; the state is untouched."""
        if not isinstance(self.state, Generated):
            self._fail(PreconditionNotMetError("There is no illustration to download yet."))
            return None
        return export_illustration(self.state.illustration)

    def reset(self, keep_story: bool = False) -> PipelineState:
        """
        Start over. Clears analysis, style, title and illustration; the story
        text is kept only when `keep_story` is set.
        """
        if self.busy:
            logger.warning(f"Ignoring reset while {self.state.stage}.")
            return self.state
        story = self.state.story if keep_story else ""
        self.state = Idle(story=story)
        self.last_error = None
        return self.state

    def _fail(self, error: IllustratorError) -> PipelineState:
        logger.error(f"{type(error).__name__}: {error}")
        self.last_error = error
        return self.state
