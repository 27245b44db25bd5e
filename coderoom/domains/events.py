# Входящие события
JOIN_ROOM = "joinRoom"
RUN_CODE = "run-code"
SAVE_SNAPSHOT = "save-snapshot"
GET_SNAPSHOTS = "get-snapshots"
REVERT_TO_SNAPSHOT = "revert-to-snapshot"
PING = "ping"

# Исходящие события
USER_JOINED = "userJoined"
USER_LEFT = "userLeft"
CODE_OUTPUT = "code-output"
SNAPSHOT_SAVED = "snapshot-saved"
SNAPSHOT_ERROR = "snapshot-error"
SNAPSHOTS_LIST = "snapshots-list"
SNAPSHOTS_ERROR = "snapshots-error"
PONG = "pong"
ERROR = "error"

# В обе стороны
CODE_CHANGE = "code-change"
LANGUAGE_CHANGE = "language-change"
