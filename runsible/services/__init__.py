"""Services for Runsible.

The runlist executor lives in ``runsible.services.runlist`` and is not
re-exported here because it depends on ``runsible.context``.
"""

from runsible.services.alerts import AlertDispatcher
from runsible.services.banners import begin_banner, end_banner, timestamp
from runsible.services.escalation import (
    Abort,
    ContinueRun,
    Decision,
    Escalate,
    resolve,
)
from runsible.services.output import OutputSinks
from runsible.services.retry import run_with_retries
from runsible.services.session import ConnectError, SSHSession, open_session

__all__ = [
    "Abort",
    "AlertDispatcher",
    "ConnectError",
    "ContinueRun",
    "Decision",
    "Escalate",
    "OutputSinks",
    "SSHSession",
    "begin_banner",
    "end_banner",
    "open_session",
    "resolve",
    "run_with_retries",
    "timestamp",
]
