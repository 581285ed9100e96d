from diprovide.lock_mode import LockMode

DEFAULT_LOCK_MODE = LockMode.NONE
"""Lock mode used by providers created without an explicit ``lock_mode``."""
