import hashlib
import hmac
import secrets

def hash_token(s: str) -> str:
    return hashlib.sha256(s.encode()).hexdigest()

def tokens_match(token: str, token_hash: str) -> bool:
    """Constant-time comparison of a plaintext token against a stored hash"""
    return hmac.compare_digest(hash_token(token), token_hash)

def random_hex(nbytes: int = 32) -> str:
    return secrets.token_hex(nbytes)
