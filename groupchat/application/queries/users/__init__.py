from groupchat.application.queries.users.get_user import GetUserQuery, GetUserHandler
from groupchat.application.queries.users.lookup_user import (
    LookupUserByPhoneQuery,
    LookupUserByPhoneHandler,
    LookupUserByEmailQuery,
    LookupUserByEmailHandler,
)

__all__ = [
    "GetUserQuery",
    "GetUserHandler",
    "LookupUserByPhoneQuery",
    "LookupUserByPhoneHandler",
    "LookupUserByEmailQuery",
    "LookupUserByEmailHandler",
]
