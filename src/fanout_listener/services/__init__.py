from .fanout import NodeFanout
from .poller import QueuePoller

__all__ = ["NodeFanout", "QueuePoller"]
