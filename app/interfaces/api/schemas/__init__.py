from .auth import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    GoogleSignInRequest,
    SignUpRequest,
    Token,
)
from .chat import (
    ChatMessageRequest,
    ChatMessageResponse,
    ChatModelRead,
    ChatModelUpdate,
    ChatStatus,
    ChatTurnRead,
)
from .notification import (
    NotificationCreate,
    NotificationList,
    NotificationRead,
    PushPermissionResponse,
)
from .plant import (
    CaptureStatus,
    CapturedImageRead,
    CareGuideSchema,
    FavoriteCreate,
    FavoriteRead,
    IdentificationRead,
    PlantInfoSchema,
)
from .push import (
    PushDeliveryResponse,
    PushMessageCreate,
    PushStatus,
    PushTokenRegistration,
)
from .user import UserRead
from .weather import LocationReport, LocationUpdate, WeatherRead, WeatherStatus

__all__ = [
    "CaptureStatus",
    "CapturedImageRead",
    "CareGuideSchema",
    "ChatMessageRequest",
    "ChatMessageResponse",
    "ChatModelRead",
    "ChatModelUpdate",
    "ChatStatus",
    "ChatTurnRead",
    "FavoriteCreate",
    "FavoriteRead",
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "GoogleSignInRequest",
    "IdentificationRead",
    "LocationReport",
    "LocationUpdate",
    "NotificationCreate",
    "NotificationList",
    "NotificationRead",
    "PlantInfoSchema",
    "PushDeliveryResponse",
    "PushMessageCreate",
    "PushPermissionResponse",
    "PushStatus",
    "PushTokenRegistration",
    "SignUpRequest",
    "Token",
    "UserRead",
    "WeatherRead",
    "WeatherStatus",
]
