__version__ = "1.0.0"

from .changes import ChangeSet, collect_changes, partition_status_lines
from .commit import CommitDescriptor, resolve_latest_commit, sanitize_file_name
from .errors import (ExternalToolFailure, ExternalToolTimeout, FilesystemError,
                     GitLogError, InvalidRepository)
from .pipeline import PipelineState, ReportPipeline, generate_report
from .report import Report, build_output_path, format_report, write_report

__all__ = [
    "__version__",
    "ChangeSet", "collect_changes", "partition_status_lines",
    "CommitDescriptor", "resolve_latest_commit", "sanitize_file_name",
    "ExternalToolFailure", "ExternalToolTimeout", "FilesystemError", "GitLogError", "InvalidRepository",
    "PipelineState", "ReportPipeline", "generate_report",
    "Report", "build_output_path", "format_report", "write_report",
]
