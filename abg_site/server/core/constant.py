"""Application-wide constants."""

PROJECT_NAME = "abg-site"
API_V1_STR = "/api/v1"
VERSION = "1.0.0"
SCHEMA_VERSION = "v1"

USER_EMAIL_HEADER = "X-User-Email"
USER_NAME_HEADER = "X-User-Name"

CHECK_IN_CODE_LENGTH = 6
AUDIT_PAGE_LIMIT_MAX = 100
