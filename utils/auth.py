"""
Authentication utilities for JWT token generation and validation
Organizers and players both authenticate with short-lived bearer tokens
"""
import jwt
import os
from datetime import datetime, timedelta
from typing import Optional, Dict


# Secret key for JWT - MUST be set in environment variables for production
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", 8))


def _encode(payload: Dict[str, str]) -> str:
    now = datetime.utcnow()
    payload = {
        **payload,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_admin_token() -> str:
    """
    Create a JWT token for the organizer account

    Token includes:
        - exp: Expiration timestamp
        - iat: Issued at timestamp
        - type: Token type identifier
    """
    return _encode({"type": "admin"})


def create_player_token(player_id: str, team_id: str) -> str:
    """
    Create a JWT token for a logged in player

    Args:
        player_id: UUID of the player
        team_id: UUID of the player's team, every hunt action is credited to it

    Returns:
        Encoded JWT token string
    """
    return _encode({"type": "player", "player_id": player_id, "team_id": team_id})


def verify_admin_token(token: str) -> bool:
    """
    Verify an organizer JWT token

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid
    """
    payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    return payload.get("type") == "admin"


def verify_player_token(token: str) -> Optional[Dict[str, str]]:
    """
    Verify and decode a player JWT token

    Returns:
        Dict with player_id and team_id if valid, None if the token is not a player token

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid
    """
    payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])

    if payload.get("type") != "player":
        return None

    return {
        "player_id": payload.get("player_id"),
        "team_id": payload.get("team_id")
    }


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    # Remove "Bearer " prefix if present
    return authorization.replace("Bearer ", "").strip()
