from google import genai
from google.genai import errors, types
import logging
from typing import Any, List, Optional

from story_illustrator.config import Config
from story_illustrator.core.errors import (
    BadCredentialsError,
    IllustratorError,
    MalformedResponseError,
    RequestFailedError,
)

logger = logging.getLogger(__name__)

GenerationResponse = types.GenerateContentResponse


class GenAIClient:
    """
    Single-shot access to the Gemini backend. No retries: every call makes
    exactly one request and either returns or raises an IllustratorError.
    """

    def __init__(self, text_model_name: Optional[str] = None, image_model_name: Optional[str] = None):
        self.text_model_name = text_model_name or Config.TEXT_MODEL_NAME
        self.image_model_name = image_model_name or Config.IMAGE_MODEL_NAME
        self._client = None
        self._client_key = None

    def _get_client(self, api_key: str) -> genai.Client:
        # The key can change between calls, so the client follows it.
        if self._client is None or self._client_key != api_key:
            self._client = genai.Client(api_key=api_key)
            self._client_key = api_key
        return self._client

    def run_analysis(self, api_key: str, prompt: str) -> str:
        """Returns the text of the first candidate's first part."""
        logger.info(f"Requesting story analysis from {self.text_model_name} ({len(prompt)} chars prompt)")
        response = self._generate(api_key, self.text_model_name, prompt)

        parts = self._first_candidate_parts(response)
        text = getattr(parts[0], "text", None)
        if not isinstance(text, str):
            raise MalformedResponseError("Analysis response has no text in its first part.")
        return text

    def run_generation(self, api_key: str, prompt: str) -> GenerationResponse:
        """
        Requests an illustration. Both IMAGE and TEXT modalities are enabled so
        the model may answer with an image part; picking it out is left to the caller.
        """
        logger.info(f"Generating image with model {self.image_model_name} ({len(prompt)} chars prompt)")
        config = types.GenerateContentConfig(response_modalities=['IMAGE', 'TEXT'])
        response = self._generate(api_key, self.image_model_name, prompt, config=config)

        self._first_candidate_parts(response)
        return response

    def _generate(self, api_key: str, model: str, prompt: str, config: Optional[Any] = None) -> GenerationResponse:
        try:
            client = self._get_client(api_key)
            return client.models.generate_content(
                model=model,
                contents=prompt,
                config=config
            )
        except errors.APIError as e:
            logger.error(f"Gemini request to {model} failed: {e}")
            raise self._map_api_error(e) from e
        except Exception as e:
            logger.error(f"Error calling {model}: {e}")
            raise RequestFailedError(None, f"Request failed: {e}") from e

    @staticmethod
    def _map_api_error(e: errors.APIError) -> IllustratorError:
        code = getattr(e, "code", None)
        message = str(getattr(e, "message", None) or "")
        if code in (401, 403) or (code == 400 and ("API key" in message or "API_KEY_INVALID" in message)):
            return BadCredentialsError("The API key was rejected. Please check your Google AI API key.")
        return RequestFailedError(code)

    @staticmethod
    def _first_candidate_parts(response: Any) -> List[Any]:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            raise MalformedResponseError("Response contains no candidates.")
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None)
        if not parts:
            raise MalformedResponseError("First candidate has no content parts.")
        return parts
