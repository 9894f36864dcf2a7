"""
Failures raised by the credential core and the task store.

Every class carries a short `user_message` that transports show as-is.
Messages never include hashes, file paths or store details.
"""

class TaskVaultError(Exception):
    user_message = "Something went wrong. Please re-enter your password and try again."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.user_message)
        self.detail = detail

class CredentialValidationError(TaskVaultError):
    user_message = "Password must be at least 4 characters."

    def __init__(self, min_length: int = 4):
        super().__init__(f"secret shorter than {min_length} characters")
        self.min_length = min_length
        self.user_message = f"Password must be at least {min_length} characters."

class AuthenticationMismatch(TaskVaultError):
    user_message = "Wrong password. Your tasks are locked. Re-enter it, or deactivate to use another password."

class StoreUnavailable(TaskVaultError):
    user_message = "Task storage is unavailable right now. Please try again in a moment."

class ResolveTimeout(TaskVaultError):
    user_message = "Checking your password took too long. Please try again."

class OwnerCapacityExceeded(TaskVaultError):
    user_message = "This server has reached its account limit. Please contact the operator."

class CredentialHashingError(TaskVaultError):
    user_message = "Your password could not be processed. Please choose a different one."

class NotActivated(TaskVaultError):
    user_message = "No password set on this device. Use activate_account first."

class TaskNotFound(TaskVaultError):
    user_message = "Task not found."

    def __init__(self, title: str | None = None, pending_only: bool = False):
        super().__init__(f"no task matching {title!r}" if title else "no task matching id")
        if title:
            kind = "pending task" if pending_only else "task"
            self.user_message = f'No {kind} matching "{title}".'

class CacheWriteError(TaskVaultError):
    user_message = "Could not save your password on this device. Check the cache location and try again."
