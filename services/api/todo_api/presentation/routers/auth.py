from fastapi import APIRouter

import todo_api.presentation.schemas as schemas
import todo_api.application.dependencies as appdeps

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    responses={
        401: {"description": "Unknown username or wrong password"},
        422: {"description": "username/password form fields are missing"},
    },
    description='Exchanges username and password (OAuth2 form) for an access/refresh token pair. '
                'Send the access token as "Authorization: Bearer <token>".',
)
async def login(auth_service: appdeps.AuthServiceDependency, form_data: appdeps.OAuthFormData) -> schemas.TokenResponse:
    tokens = await auth_service.login({"username": form_data.username, "password": form_data.password})
    return schemas.TokenResponse.model_validate(tokens.model_dump())


@router.get(
    "/refresh",
    responses={401: {"description": "Refresh token is expired, malformed, of the wrong type, or its user was deleted"}},
    description='Send the refresh token as "Authorization: Bearer <token>" to get a new token pair.',
)
async def refresh(auth_service: appdeps.AuthServiceDependency, token: appdeps.OAuthToken) -> schemas.TokenResponse:
    tokens = await auth_service.refresh(refresh_token=token)
    return schemas.TokenResponse.model_validate(tokens.model_dump())
