import sys
from pathlib import Path

import structlog

from .checker import load_schema, run_check
from .config import load_config
from .example_file import write_example
from .exceptions import EnvCheckerError
from .logging_config import setup_structlog

logger = structlog.get_logger(__name__)


def main() -> int:
    """Check the env files of the current directory; exit 1 on missing or invalid values."""
    root = Path.cwd()
    try:
        config = load_config(root)
    except EnvCheckerError as e:
        setup_structlog()
        logger.error("Could not load checker configuration", error=e.detail)
        return 2

    setup_structlog(json_logs=config.json_logs, log_level=config.log_level)

    try:
        report = run_check(root, config)
        if config.example_file is not None:
            write_example(root / config.example_file, load_schema(root, config).variables())
    except EnvCheckerError as e:
        logger.error("Env check failed", error=e.detail)
        return 2

    for missing in report.result.missing:
        logger.error(missing.message, variable=missing.variable.name)
    for issue in report.invalid:
        logger.error(
            "Invalid environment variable",
            variable=issue.field,
            reason=issue.message,
            expected_type=issue.expected_type,
        )
    for name in report.empty:
        logger.warning("Required environment variable is declared without a value", variable=name)
    for unused in report.result.unused:
        logger.info(
            unused.message,
            variable=unused.entry.name,
            file=unused.entry.file_path,
            line=unused.entry.line,
        )

    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
