import secrets
import time
import uuid


def generate_qr_token() -> str:
    """Unique token printed in a clue's QR code"""
    return f"QR_{uuid.uuid4().hex[:16].upper()}"


def generate_fake_token() -> str:
    return f"FAKE_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


def team_name(prefix: str, number: int) -> str:
    return f"{prefix} {number:03d}"
