from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ContentSegment(BaseModel):
    """One content block of a provider response (text, thinking, tool use...)"""
    type: str
    text: Optional[str] = None

    @property
    def has_text(self) -> bool:
        return self.type == "text" and bool(self.text and self.text.strip())


class ChatResponse(BaseModel):
    """Provider-neutral view of a generation response"""
    segments: List[ContentSegment] = Field(default_factory=list)
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    usage: Dict[str, int] = Field(default_factory=dict)

    def first_text(self) -> Optional[str]:
        """Text of the first text-bearing segment, skipping reasoning blocks"""
        for segment in self.segments:
            if segment.has_text:
                return segment.text
        return None


class BaseClient(ABC):
    """Base client class with common functionality"""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize base client with API key"""
        self.api_key = api_key

    def _get_max_tokens(self, max_tokens: Optional[int] = None) -> int:
        """Get max tokens, using default if not specified"""
        return max_tokens if max_tokens is not None else 500


class BaseChatClient(BaseClient):
    """Abstract base class for provider chat clients.

    Implementations translate provider SDK failures into ``LLMError`` so the
    retry layer never has to inspect provider exception types.
    """

    @abstractmethod
    async def create_message(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> ChatResponse:
        """Issue a single generation request"""
        pass

    @abstractmethod
    def _get_model(self, model: Optional[str] = None) -> str:
        """Get model name, using default if not specified"""
        pass
