"""
api/routes/auth.py -- Registration and login REST endpoints.

Routes:
  POST /auth/register  -- create account; 201 {token}
  POST /auth/login     -- password login; 200 {token}

Both routes are public. Both delegate entirely to CredentialService and let
its errors (ValidationError, IdentifierTaken, InvalidCredentials, StorageError)
propagate to the exception handlers in api/main.py.

Security:
  Cache-Control: no-store on every token response so intermediaries never
  cache a credential.
  Login returns the same 400 body for an unknown identifier and a wrong
  password; CredentialService.login() guarantees it.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from api.models import LoginRequest, RegisterRequest, TokenResponse
from auth.service import CredentialService

router = APIRouter()


@router.post("/auth/register", response_model=TokenResponse, status_code=201)
def register(request: Request, response: Response, body: RegisterRequest) -> TokenResponse:
    """Create a user and return an access token for it."""
    credentials: CredentialService = request.app.state.credentials
    token = credentials.register(body.identifier, body.password)
    response.headers["Cache-Control"] = "no-store"
    return TokenResponse(token=token, expires_in=credentials.token_ttl)


@router.post("/auth/login", response_model=TokenResponse)
def login(request: Request, response: Response, body: LoginRequest) -> TokenResponse:
    """Authenticate with identifier and password; return a fresh access token."""
    credentials: CredentialService = request.app.state.credentials
    token = credentials.login(body.identifier, body.password)
    response.headers["Cache-Control"] = "no-store"
    return TokenResponse(token=token, expires_in=credentials.token_ttl)
