#!/usr/bin/env python
import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

from dotenv import load_dotenv

load_dotenv()
os.environ["POWERTOOLS_TRACE_DISABLED"] = "true"

sys.path.insert(0, str(Path(__file__).parent.parent / "app"))

from handler import lambda_handler

ctx = MagicMock()
ctx.function_name = "oncall-roster-sync"
ctx.memory_limit_in_mb = 128
ctx.invoked_function_arn = "arn:aws:lambda:eu-west-1:123456789:function:oncall-roster-sync"
ctx.aws_request_id = "local-run"

# Shape of the EventBridge scheduled event the cron rule delivers.
event = {
    "source": "aws.events",
    "detail-type": "Scheduled Event",
    "detail": {},
}

result = lambda_handler(event, ctx)
print(json.dumps(result, indent=2))
