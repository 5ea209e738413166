from pydantic import BaseModel


class LoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "username_or_email": "jane@example.com",
                "password": "OldPass123",
            }
        }
    }

    username_or_email: str
    password: str


class TokenResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "access_token": "<jwt>",
                "token_type": "bearer",
                "trace_id": "trace-123",
            }
        }
    }

    access_token: str
    token_type: str = "bearer"
    trace_id: str


class OAuth2TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
