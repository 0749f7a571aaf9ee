"""Result types for publishing"""

from dataclasses import dataclass
from typing import Optional

from oauth.models import TokenPair


@dataclass
class PostResult:
    """Outcome of one publish attempt

    Attributes:
        success: Whether the post was created
        message: Human readable outcome or diagnostic
        post_id: Id of the created post
        new_tokens: Tokens obtained (and saved) by a refresh during the attempt
        needs_reauthorization: The refresh token was rejected; the user
            has to authorize again
    """
    success: bool
    message: str
    post_id: Optional[str] = None
    new_tokens: Optional[TokenPair] = None
    needs_reauthorization: bool = False
