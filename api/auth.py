import os
import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

basic_security = HTTPBasic(realm="sortid-admin")

ADMIN_USERNAME = os.environ.get("SORTID_ADMIN_USER", "admin")
ADMIN_PASSWORD = os.environ.get("SORTID_ADMIN_PASSWORD", "admin123")


def verify_admin(credentials: HTTPBasicCredentials = Depends(basic_security)):
    """Accept only the configured admin credentials on source-changing routes."""
    username_ok = secrets.compare_digest(credentials.username.encode(), ADMIN_USERNAME.encode())
    password_ok = secrets.compare_digest(credentials.password.encode(), ADMIN_PASSWORD.encode())
    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
