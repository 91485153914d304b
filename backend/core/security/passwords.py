from __future__ import annotations

import base64
import hashlib
import hmac
import os
from typing import Literal

import bcrypt


Algo = Literal["bcrypt", "pbkdf2_sha256"]

PBKDF2_ITERATIONS = 390000


def hash_password(plain: str, algo: Algo = "bcrypt") -> str:
    if algo == "bcrypt":
        salt = bcrypt.gensalt()
        return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", plain.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return "pbkdf2_sha256$%d$%s$%s" % (
        PBKDF2_ITERATIONS,
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(dk).decode("ascii"),
    )


def verify_password(plain: str, stored_hash: str) -> bool:
    if not stored_hash:
        return False
    if stored_hash.startswith("pbkdf2_sha256$"):
        try:
            _, it_s, salt_b64, hash_b64 = stored_hash.split("$", 3)
            salt = base64.b64decode(salt_b64)
            expected = base64.b64decode(hash_b64)
            dk = hashlib.pbkdf2_hmac("sha256", plain.encode("utf-8"), salt, int(it_s))
            return hmac.compare_digest(dk, expected)
        except (ValueError, TypeError):
            return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        return False
