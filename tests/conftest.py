import pytest
from unittest.mock import MagicMock
import sys
import os

from google.genai import types

# Add project root to sys.path so we can import story_illustrator
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from story_illustrator.core.ai_client import GenAIClient
from story_illustrator.core.key_store import MemoryKeyStore
from story_illustrator.core.pipeline import StoryPipeline

WELL_FORMED_ANALYSIS = (
    "VISUAL ELEMENTS: A grandmother's garden, a hidden clearing, wildflowers, dappled sunlight\n"
    "STYLE OPTIONS:\n"
    "- Vibrant Watercolor\n"
    "- Vintage Storybook \n"
    "- Minimalist Line Art\n"
    "TITLE: The Secret Clearing\n"
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def make_response(*parts):
    """Builds an SDK response with one candidate holding the given parts."""
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def text_part(text):
    return types.Part(text=text)


def image_part(data=PNG_BYTES, mime_type="image/png"):
    return types.Part(inline_data=types.Blob(mime_type=mime_type, data=data))


@pytest.fixture
def mock_genai_client(mocker):
    """Fixture to mock the Google GenAI Client."""
    mock_client = mocker.patch('google.genai.Client')
    return mock_client

@pytest.fixture
def gateway():
    client = MagicMock(spec=GenAIClient)
    client.run_analysis.return_value = WELL_FORMED_ANALYSIS
    client.run_generation.return_value = make_response(text_part("Here you go"), image_part())
    return client

@pytest.fixture
def pipeline(gateway):
    return StoryPipeline(gateway, MemoryKeyStore("test_key"))
