from .completion_service import CompletionService
from .nudge_service import NudgeService


__all__ = ["CompletionService", "NudgeService"]
