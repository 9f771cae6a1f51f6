from groupchat.infrastructure.push.fcm_push_gateway import FcmPushGateway
from groupchat.infrastructure.push.logging_push_gateway import LoggingPushGateway

__all__ = ["FcmPushGateway", "LoggingPushGateway"]
