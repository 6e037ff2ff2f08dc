"""Pydantic models."""
from contest_api.models.auth import (
    MessageResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from contest_api.models.contests import (
    ContestCreate,
    ContestResponse,
    QuestionCreate,
    QuestionResponse,
)
from contest_api.models.submissions import (
    HistoryResponse,
    JoinResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    ProgressResponse,
    ProgressSaveRequest,
    SubmissionResponse,
    SubmitRequest,
    SubmitResponse,
)

__all__ = [
    "ContestCreate",
    "ContestResponse",
    "HistoryResponse",
    "JoinResponse",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "MessageResponse",
    "ProgressResponse",
    "ProgressSaveRequest",
    "QuestionCreate",
    "QuestionResponse",
    "SubmissionResponse",
    "SubmitRequest",
    "SubmitResponse",
    "TokenResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
]
