import json
import logging
from datetime import datetime, timezone


logging.basicConfig(level=logging.INFO)

logger = logging.getLogger("quietus")


def log_event(event: str, *, level: int = logging.INFO, **fields):
    """
    Emit one JSON line on the "quietus" logger: {"ts", "event", **fields}.

    Events: registry_loaded, feed_fetch_started (DEBUG), feed_fetch_failed
    (WARNING), feed_not_evaluable, organization_evaluated, sweep_finished,
    run_failed (ERROR). Datetimes and other non-JSON values are rendered
    with str().
    """
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        **fields,
    }

    logger.log(level, json.dumps(payload, default=str))
