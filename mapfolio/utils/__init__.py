from .logging import (
    setup_logging,
    get_logger,
    get_current_log_file,
    get_session_id,
    log_stage_start,
    log_stage_complete,
    log_asset_loaded,
    log_soft_miss,
    log_edit_sync,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_current_log_file",
    "get_session_id",
    "log_stage_start",
    "log_stage_complete",
    "log_asset_loaded",
    "log_soft_miss",
    "log_edit_sync",
]
