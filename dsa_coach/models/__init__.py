from dsa_coach.models.chat_session import ChatSession

__all__ = ["ChatSession"]
