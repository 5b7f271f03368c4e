from .security   import SessionAuthority, hash_pass
from .reply      import ReplyChannel
from .actions    import ACTIONS, parse_request
from .dispatcher import Dispatcher
from .supervisor import Supervisor

__all__ = [
    "SessionAuthority", "hash_pass", "ReplyChannel",
    "ACTIONS", "parse_request", "Dispatcher", "Supervisor",
]
