"""Abstract interfaces for transport-agnostic bot clients."""
from abc import ABC, abstractmethod


class ChatActionIndicator(ABC):
    """Shows the user that a slow request (analysis, speech) is in progress."""

    @abstractmethod
    async def start(self, to: str) -> None: ...

    @abstractmethod
    async def stop(self, to: str) -> None: ...


class BotClient(ABC):
    @abstractmethod
    def run(self) -> None: ...

    @abstractmethod
    async def send_message(self, to: str, text: str) -> bool: ...

    @abstractmethod
    async def send_audio(self, to: str, audio: bytes, title: str) -> bool: ...
