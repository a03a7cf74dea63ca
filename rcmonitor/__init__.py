"""
rcmonitor - recent changes monitor for new and anonymous users.

This package watches the recent changes feed of a MediaWiki site, picks out
the edits of newly registered and anonymous users, and reports them with a
line diff of each edit. A per-wiki watermark keeps repeated runs from
reporting the same activity twice.
"""

from rcmonitor.classifier import classify, flag_untrusted_users
from rcmonitor.config import MonitorConfig, UserPolicy
from rcmonitor.constants import DEFAULT_BATCH_SIZE, NO_MARK, RC_PROPS, REV_PROPS, USER_SPACE_PREFIX
from rcmonitor.diff import render_diff, split_lines
from rcmonitor.errors import MalformedRecordError, PersistenceWarning, RcMonitorError, TransportError
from rcmonitor.models import ChangeKind, ChangeRecord, DiffOp, RevisionContent, Watermark
from rcmonitor.pipeline import PipelineResult, compute_diffs, qualifying_edits, run_pipeline
from rcmonitor.report import format_change, format_diff_op, format_log_info, format_report
from rcmonitor.storage import JsonFileWatermarkStore, MemoryWatermarkStore, WatermarkStore
from rcmonitor.timestamp import iso8601_from_dt, to_iso8601
from rcmonitor.watermark import filter_by_watermark

__all__ = [
    # classifier
    'classify',
    'flag_untrusted_users',
    # config
    'MonitorConfig',
    'UserPolicy',
    # constants
    'DEFAULT_BATCH_SIZE',
    'NO_MARK',
    'RC_PROPS',
    'REV_PROPS',
    'USER_SPACE_PREFIX',
    # diff
    'render_diff',
    'split_lines',
    # errors
    'MalformedRecordError',
    'PersistenceWarning',
    'RcMonitorError',
    'TransportError',
    # models
    'ChangeKind',
    'ChangeRecord',
    'DiffOp',
    'RevisionContent',
    'Watermark',
    # pipeline
    'PipelineResult',
    'compute_diffs',
    'qualifying_edits',
    'run_pipeline',
    # report
    'format_change',
    'format_diff_op',
    'format_log_info',
    'format_report',
    # storage
    'JsonFileWatermarkStore',
    'MemoryWatermarkStore',
    'WatermarkStore',
    # timestamp
    'iso8601_from_dt',
    'to_iso8601',
    # watermark
    'filter_by_watermark',
]
