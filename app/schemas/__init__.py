from app.schemas.user import User, UserLogin, Token
from app.schemas.system_feature import (
    SystemFeature,
    SystemFeatureCreate,
    SystemFeatureUpdate,
    FeatureEnabledUpdate,
    FeatureAccessResponse,
)

__all__ = [
    "User", "UserLogin", "Token",
    "SystemFeature", "SystemFeatureCreate", "SystemFeatureUpdate",
    "FeatureEnabledUpdate", "FeatureAccessResponse",
]
