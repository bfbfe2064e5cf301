"""
Authentication for MiniMart Online
Validates Supabase Auth access tokens and provides identity context

Identity is delegated to Supabase Auth. The rest of the application only
sees the IdentityProvider interface (current_identity / login / logout /
subscribe), so there is exactly one verification strategy in the codebase.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel
from supabase import AuthError, Client

from .config import settings
from .database import create_auth_client, get_data_client, get_supabase
from .errors import AuthorizationRequired, RemoteDataError

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

# Supabase signs access tokens with HS256 and audience "authenticated"
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"


class Identity(BaseModel):
    """Signed-in user extracted from a Supabase access token"""
    id: str
    email: str
    name: Optional[str] = None
    role: str = "user"


class AuthSession(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    identity: Identity


IdentityListener = Callable[[str, Optional[Identity]], None]


def decode_supabase_token(token: str, secret: str) -> dict:
    """
    Decode and validate a Supabase access token.

    Supabase JWT structure (relevant claims):
    {
        "sub": "6b1c...-uuid",
        "email": "buyer@minimart.com",
        "aud": "authenticated",
        "role": "authenticated",
        "app_metadata": {"provider": "email", "role": "admin"},
        "user_metadata": {"full_name": "Juan dela Cruz"},
        "exp": 1234567890
    }

    Raises:
        AuthorizationRequired if the token is expired or invalid
    """
    if not secret:
        raise AuthorizationRequired("SUPABASE_JWT_SECRET is not configured")
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE
        )
    except ExpiredSignatureError:
        raise AuthorizationRequired("Token has expired")
    except JWTError as e:
        raise AuthorizationRequired(f"Invalid token: {str(e)}")


def identity_from_claims(payload: dict) -> Identity:
    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        raise AuthorizationRequired("Invalid token payload: missing user id or email")

    app_metadata = payload.get("app_metadata") or {}
    user_metadata = payload.get("user_metadata") or {}
    return Identity(
        id=user_id,
        email=email,
        name=user_metadata.get("full_name"),
        role=app_metadata.get("role", "user")
    )


class IdentityProvider(ABC):
    """Identity-verification capability the storefront depends on"""

    def __init__(self):
        self._listeners: List[IdentityListener] = []

    @abstractmethod
    def current_identity(self, token: Optional[str]) -> Optional[Identity]:
        """Identity for an access token, or None when there is no token"""

    @abstractmethod
    def login(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password"""

    @abstractmethod
    def logout(self, token: str) -> None:
        """Revoke the session behind an access token"""

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """
        Register a listener for identity-change events (SIGNED_IN / SIGNED_OUT)

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: str, identity: Optional[Identity]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, identity)
            except Exception:
                logger.exception(f"Identity listener failed on {event}")


class SupabaseIdentityProvider(IdentityProvider):
    """
    Supabase Auth strategy

    Access tokens are verified locally with the project's JWT secret, so
    reading the current identity needs no round trip. Sign-in and sign-out
    go to Supabase Auth.
    """

    def __init__(
        self,
        jwt_secret: str,
        auth_client_factory: Callable[[], Client] = create_auth_client,
        admin_client_factory: Callable[[], Client] = get_supabase,
        profiles=None
    ):
        super().__init__()
        self.jwt_secret = jwt_secret
        self._auth_client_factory = auth_client_factory
        self._admin_client_factory = admin_client_factory
        # ProfileRepository; optional so token checks work without a data client
        self.profiles = profiles

    def current_identity(self, token: Optional[str]) -> Optional[Identity]:
        if not token:
            return None
        payload = decode_supabase_token(token, self.jwt_secret)
        return identity_from_claims(payload)

    def login(self, email: str, password: str) -> AuthSession:
        client = self._auth_client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info(f"Login rejected for {email}: {e}")
            raise AuthorizationRequired("Invalid email or password")

        if response.session is None or response.user is None:
            raise AuthorizationRequired("Invalid email or password")

        user = response.user
        user_metadata = user.user_metadata or {}
        identity = Identity(
            id=user.id,
            email=user.email or email,
            name=user_metadata.get("full_name"),
            role=(user.app_metadata or {}).get("role", "user")
        )

        if self.profiles is not None:
            # Sign-in still succeeds when the profile write fails
            try:
                self.profiles.ensure_profile(identity, role=user_metadata.get("role"))
            except RemoteDataError as e:
                logger.warning(f"Could not ensure profile for {identity.email}: {e}")

        self._emit(SIGNED_IN, identity)
        return AuthSession(
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            expires_in=response.session.expires_in,
            identity=identity
        )

    def logout(self, token: str) -> None:
        identity = self.current_identity(token)
        client = self._admin_client_factory()
        try:
            client.auth.admin.sign_out(token)
        except AuthError as e:
            # Session already gone on the server side; the token still expires on its own
            logger.warning(f"Sign out failed for {identity.email if identity else 'unknown'}: {e}")
        self._emit(SIGNED_OUT, identity)


class LazyProfiles:
    """Defers creating the data client until a profile is actually needed"""

    def __init__(self, factory):
        self._factory = factory

    def ensure_profile(self, identity: Identity, role: Optional[str] = None) -> bool:
        return self._factory().ensure_profile(identity, role=role)


_identity_provider: Optional[IdentityProvider] = None


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency returning the process-wide identity provider"""
    global _identity_provider
    if _identity_provider is None:
        from minimart.repositories.profile_repository import ProfileRepository

        def profiles_factory():
            return ProfileRepository(get_data_client())

        _identity_provider = SupabaseIdentityProvider(
            jwt_secret=settings.SUPABASE_JWT_SECRET,
            profiles=LazyProfiles(profiles_factory)
        )
    return _identity_provider


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_current_user_optional(
    token: Optional[str] = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_identity_provider)
) -> Optional[Identity]:
    """
    Optional authentication - returns None if no valid token provided.

    Usage:
        @router.get("/public-or-private")
        def flexible_route(user: Optional[Identity] = Depends(get_current_user_optional)):
            ...
    """
    try:
        return provider.current_identity(token)
    except AuthorizationRequired:
        return None


def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_identity_provider)
) -> Identity:
    """
    Dependency that extracts and validates the current user from the bearer token.

    Usage:
        @router.get("/protected")
        def protected_route(user: Identity = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )
    try:
        identity = provider.current_identity(token)
    except AuthorizationRequired as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        )
    return identity


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/products/{product_id}")
        def delete_product(product_id: str, user: Identity = Depends(require_role("admin"))):
            ...
    """
    def role_checker(user: Identity = Depends(get_current_user)) -> Identity:
        # Role hierarchy: admin > user
        role_hierarchy = {
            "admin": 2,
            "user": 1
        }

        user_level = role_hierarchy.get(user.role, 0)
        required_level = role_hierarchy.get(required_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {required_role}, your role: {user.role}"
            )

        return user

    return role_checker


require_admin = require_role("admin")
