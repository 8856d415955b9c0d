"""Remote CMS clients -- schema push, remote id ledger and content fetch.

Quick usage::

    from src.cms import PushClient, PushMethod
    from src.config import Config

    client = PushClient(Config.from_env())
    result = await client.push("benefits_section", method=PushMethod.N8N)
"""

from src.cms.content import ContentClient, ContentFetchError, find_unregistered, iter_blocks
from src.cms.push import PushClient, PushMethod, PushResult, PushSummary
from src.cms.remote_ids import RemoteIdStore

__all__ = [
    "ContentClient",
    "ContentFetchError",
    "PushClient",
    "PushMethod",
    "PushResult",
    "PushSummary",
    "RemoteIdStore",
    "find_unregistered",
    "iter_blocks",
]
