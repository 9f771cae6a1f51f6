from groupchat.application.commands.users.register_user_with_email import (
    RegisterUserWithEmailCommand,
    RegisterUserWithEmailHandler,
)
from groupchat.application.commands.users.register_user_with_phone import (
    RegisterUserWithPhoneCommand,
    RegisterUserWithPhoneHandler,
)
from groupchat.application.commands.users.register_users import (
    NewUser,
    RegisterUsersCommand,
    RegisterUsersHandler,
)
from groupchat.application.commands.users.update_user import (
    UpdateUserCommand,
    UpdateUserHandler,
)
from groupchat.application.commands.users.delete_user import (
    DeleteUserCommand,
    DeleteUserHandler,
)

__all__ = [
    "RegisterUserWithEmailCommand",
    "RegisterUserWithEmailHandler",
    "RegisterUserWithPhoneCommand",
    "RegisterUserWithPhoneHandler",
    "NewUser",
    "RegisterUsersCommand",
    "RegisterUsersHandler",
    "UpdateUserCommand",
    "UpdateUserHandler",
    "DeleteUserCommand",
    "DeleteUserHandler",
]
