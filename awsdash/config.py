from __future__ import annotations

import os

# -----------------------------------------------------------------------------
# Config (env overridable)
# -----------------------------------------------------------------------------
DEFAULT_REGION = os.environ.get("DEFAULT_REGION", "us-east-1")

# S3 reports an unset LocationConstraint for buckets in this region
S3_BASELINE_REGION = "us-east-1"

# One attempt per provider call: a failed call is final for that request
BOTO_MAX_ATTEMPTS = int(os.environ.get("BOTO_MAX_ATTEMPTS", "1"))
BOTO_READ_TIMEOUT = int(os.environ.get("BOTO_READ_TIMEOUT", "10"))
BOTO_CONNECT_TIMEOUT = int(os.environ.get("BOTO_CONNECT_TIMEOUT", "5"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

CREDENTIALS_COOKIE = os.environ.get("CREDENTIALS_COOKIE", "awsCredentials")
COOKIE_SECURE = os.environ.get("COOKIE_SECURE", "0") not in ("0", "false", "False")
