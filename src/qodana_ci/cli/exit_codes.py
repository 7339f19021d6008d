"""Process exit codes of the qodana-ci command."""

EXIT_SUCCESS = 0
EXIT_ANALYSIS_FAILED = 1
EXIT_TOOL_ERROR = 2
EXIT_INVALID_USAGE = 3
