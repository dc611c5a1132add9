"""
Test Suite: Utilities

Tests for the logging helpers.
"""
import logging


def test_formatter():
    """Test ComplinkFormatter output."""
    print("\nTesting log formatter...")

    from complink.utils.logging import ComplinkFormatter

    record = logging.LogRecord(
        name="complink.sync",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Backup failed for %s",
        args=("Bracket.skp",),
        exc_info=None,
    )

    plain = ComplinkFormatter(use_colors=False, include_timestamp=False).format(record)
    assert plain.startswith("WARNING")
    assert plain.split()[1] == "sync"
    assert "complink.sync" not in plain
    assert plain.endswith("Backup failed for Bracket.skp")
    print(f"  ✓ Plain format: {plain}")

    record.file_path = "/work/kaynak/Bracket.skp"
    with_path = ComplinkFormatter(use_colors=False, include_timestamp=False).format(record)
    assert with_path.endswith("Backup failed for Bracket.skp | /work/kaynak/Bracket.skp")
    print("  ✓ File path appended after the message")

    colored = ComplinkFormatter(use_colors=True).format(record)
    assert "\033[33m" in colored
    assert colored.startswith("[")
    print("  ✓ Colored format with timestamp")

    print("\n✅ Formatter tests passed!")


def test_logging_helpers(tmp_path):
    """Test setup_logging, get_logger, log_operation, log_error."""
    print("\nTesting logging helpers...")

    from complink.core.errors import BackupWriteFailedError
    from complink.utils.logging import get_logger, log_error, log_operation, setup_logging

    setup_logging(level="DEBUG", log_dir=tmp_path, console_output=False, file_output=True)
    logger = get_logger("tests")
    assert logger.name == "complink.tests"
    assert get_logger("complink.tests") is logger
    print("  ✓ Logger names prefixed under complink")

    log_operation(logger, "Exported", "/work/kaynak/Bracket.skp", name="Bracket")
    log_error(
        logger,
        "snapshot",
        BackupWriteFailedError("disk full", file_path="/work/kaynak/Bracket.skp"),
    )
    try:
        raise RuntimeError("host crashed")
    except RuntimeError as e:
        log_error(logger, "update", e, "/work/kaynak/Plate.skp")

    for handler in logging.getLogger("complink").handlers:
        handler.flush()

    text = (tmp_path / "complink.log").read_text(encoding="utf-8")
    assert "Exported (name=Bracket) | /work/kaynak/Bracket.skp" in text
    print("  ✓ Operation logged with its file path")

    assert "WARNING" in text
    assert "snapshot failed [backup_write_failed]: disk full | /work/kaynak/Bracket.skp" in text
    print("  ✓ Expected error logged with code and path")

    assert "ERROR" in text
    assert "update failed: RuntimeError: host crashed | /work/kaynak/Plate.skp" in text
    assert "Traceback" in text
    print("  ✓ Unexpected error logged with traceback")

    assert "\033[" not in text
    print("  ✓ File log written without colors")

    setup_logging(level="INFO", console_output=True, file_output=False)
    print("\n✅ Logging helper tests passed!")


def test_expected_error_has_no_traceback(tmp_path):
    """Test that ComplinkError failures skip the traceback."""
    print("\nTesting expected error records...")

    from complink.core.errors import NotLinkedError
    from complink.utils.logging import get_logger, log_error, setup_logging

    setup_logging(level="INFO", log_dir=tmp_path, console_output=False, file_output=True)
    logger = get_logger("sync")

    try:
        raise NotLinkedError("'Bracket' has not been exported yet")
    except NotLinkedError as e:
        log_error(logger, "update", e)

    for handler in logging.getLogger("complink").handlers:
        handler.flush()

    text = (tmp_path / "complink.log").read_text(encoding="utf-8")
    assert "update failed [not_linked]: 'Bracket' has not been exported yet" in text
    assert "Traceback" not in text
    assert " | " not in text
    print("  ✓ No traceback and no path for an unbound component")

    setup_logging(level="INFO", console_output=True, file_output=False)
    print("\n✅ Expected error tests passed!")
