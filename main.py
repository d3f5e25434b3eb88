import click
import logging
from pathlib import Path
from dotenv import load_dotenv

from story_illustrator.config import Config, setup_directories
from story_illustrator.core.ai_client import GenAIClient
from story_illustrator.core.exporter import save_export
from story_illustrator.core.key_store import FileKeyStore
from story_illustrator.core.models import Analyzed, Generated, Idle
from story_illustrator.core.pipeline import StoryPipeline

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _show_error(pipeline: StoryPipeline):
    if pipeline.error_message:
        click.secho(pipeline.error_message, fg="red")


def _analyze(pipeline: StoryPipeline, story: str) -> bool:
    if not story:
        story = click.prompt("Your story", default=pipeline.state.story or None)
    click.echo("Analyzing your story...")
    pipeline.submit_story(story)
    _show_error(pipeline)
    return isinstance(pipeline.state, Analyzed)


def _choose_and_generate(pipeline: StoryPipeline) -> bool:
    analysis = pipeline.state.analysis
    click.echo(f"\nKey visual elements: {analysis.visual_elements}\n")
    for idx, style in enumerate(analysis.style_options, start=1):
        click.echo(f"  {idx}. {style}")

    choice = click.prompt("Choose illustration style", type=click.IntRange(1, len(analysis.style_options)), default=1)
    pipeline.select_style(analysis.style_options[choice - 1])
    pipeline.edit_title(click.prompt("Story title", default=pipeline.state.editable_title))

    click.echo("Creating your illustration...")
    pipeline.submit_illustration()
    _show_error(pipeline)
    return isinstance(pipeline.state, Generated)


@click.command()
@click.option('--api-key', default=None, help='Google AI API key. Saved locally for later sessions.')
@click.option('--story-file', default=None, type=click.Path(exists=True), help='Optional text file to pre-fill the story.')
@click.option('--output-dir', default=str(Config.BASE_OUTPUT_DIR), help='Directory to save illustrations.')
def main(api_key, story_file, output_dir):
    """
    Turns a short personal story into a single illustration using Gemini.
    """
    load_dotenv()
    key_store = FileKeyStore(Config.API_KEY_FILE)
    if api_key:
        key_store.save(api_key)
    elif not key_store.load() and Config.GEMINI_API_KEY:
        key_store.save(Config.GEMINI_API_KEY)

    output_path = Path(output_dir)
    setup_directories(output_path)

    story = ""
    if story_file:
        with open(story_file, 'r', encoding='utf-8') as f:
            story = f.read()
        logger.info(f"Loaded story file: {story_file} ({len(story)} chars)")

    pipeline = StoryPipeline(GenAIClient(), key_store)
    if not pipeline.api_key:
        pipeline.set_api_key(click.prompt("Google AI API key", hide_input=True))

    while True:
        if isinstance(pipeline.state, Idle):
            if not _analyze(pipeline, story):
                story = ""
                if not click.confirm("Try again?", default=True):
                    return
                continue

        if isinstance(pipeline.state, Analyzed):
            if not _choose_and_generate(pipeline):
                if click.confirm("Try again?", default=True):
                    continue
                pipeline.reset(keep_story=True)
                if not click.confirm("Analyze the story again?", default=False):
                    return
                continue

        export = pipeline.download()
        saved = save_export(export, output_path)
        click.secho(f"\n{pipeline.state.illustration.title}", bold=True)
        click.echo(f"Illustrated in {pipeline.state.selected_style} style. Saved to {saved}")

        story = ""
        if not click.confirm("Create another?", default=False):
            return
        pipeline.reset()


if __name__ == '__main__':
    main()
