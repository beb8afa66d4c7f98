import json
import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials
from fastapi import HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import Settings

logger = logging.getLogger(__name__)

security = HTTPBearer()


def init_firebase(settings: Settings) -> Optional[firebase_admin.App]:
    """
    Initialize the Firebase Admin SDK once per process.

    Returns None when no credentials are configured so the API can start
    in development; token verification will then reject every request.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    # Option 1: Use service account file path
    if settings.GOOGLE_APPLICATION_CREDENTIALS:
        cred = credentials.Certificate(settings.GOOGLE_APPLICATION_CREDENTIALS)
    # Option 2: Use environment variable with JSON content
    elif settings.FIREBASE_SERVICE_ACCOUNT:
        cred = credentials.Certificate(json.loads(settings.FIREBASE_SERVICE_ACCOUNT))
    else:
        logger.warning(
            "Firebase credentials not configured. "
            "Set FIREBASE_SERVICE_ACCOUNT or GOOGLE_APPLICATION_CREDENTIALS"
        )
        return None

    return firebase_admin.initialize_app(cred)


class FirebaseUser:
    """Represents an authenticated Firebase user."""

    def __init__(self, uid: str, email: Optional[str], name: Optional[str]):
        self.uid = uid
        self.email = email
        self.name = name


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> FirebaseUser:
    """
    Validate Firebase ID token and return user info.

    This is used as a FastAPI dependency for protected endpoints.
    """
    token = credentials.credentials

    try:
        decoded_token = auth.verify_id_token(token)
    except auth.ExpiredIdTokenError:
        raise HTTPException(
            status_code=401,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except auth.InvalidIdTokenError:
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except Exception as e:
        raise HTTPException(
            status_code=401,
            detail=f"Authentication failed: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Some providers nest the profile under "user"
    nested = decoded_token.get("user") or {}
    return FirebaseUser(
        uid=decoded_token["uid"],
        email=decoded_token.get("email") or nested.get("email"),
        name=decoded_token.get("name") or nested.get("name"),
    )
