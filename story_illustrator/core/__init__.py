from .ai_client import GenAIClient
from .key_store import FileKeyStore, KeyStore, MemoryKeyStore
from .models import AnalysisResult, IllustrationResult, IllustrationExport, Action
from .pipeline import StoryPipeline
