"""Blog schemas: users, posts, comments and the response envelopes."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Wire(BaseModel):
    """Base for payloads exchanged as camelCase JSON."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class UserOut(_Wire):
    """A user account as returned by the API (never carries the password)."""
    id: str
    name: str
    email: str
    role: str
    avatar: Optional[str] = None
    created_at: datetime


class AuthorRef(_Wire):
    """Populated reference to a user: just enough to render a byline."""
    id: str
    name: str
    avatar: Optional[str] = None


class CommentOut(_Wire):
    id: int
    user: AuthorRef
    content: str
    created_at: datetime


class PostOut(_Wire):
    """A post with its author and comments (newest first) populated."""
    id: str
    title: str
    content: str
    featured_image: str
    author: AuthorRef
    created_at: datetime
    comments: List[CommentOut] = []


class PostUpdate(_Wire):
    """Fields a post owner may override; anything else is ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    featured_image: Optional[str] = Field(default=None, min_length=1)


class CommentCreate(BaseModel):
    """Payload for adding a comment to a post."""
    content: str = Field(..., min_length=1)


class RegisterIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=72)
    avatar: Optional[str] = None


class LoginIn(BaseModel):
    email: str
    password: str


class PostEnvelope(BaseModel):
    success: bool = True
    data: PostOut


class PostListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[PostOut]


class EmptyEnvelope(BaseModel):
    success: bool = True
    data: dict = {}


class UserEnvelope(BaseModel):
    success: bool = True
    data: UserOut


class UserListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[UserOut]


class TokenEnvelope(BaseModel):
    success: bool = True
    token: str
    data: UserOut
