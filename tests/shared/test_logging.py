from __future__ import annotations

from nim_cli.shared.logging import get_logger


def test_logger_info_routes_to_stderr(capfd) -> None:
    logger = get_logger()

    logger.info("structured log to stderr")

    captured = capfd.readouterr()
    assert "structured log to stderr" in captured.err
    assert "structured log to stderr" not in captured.out


def test_debug_requires_verbose(capfd) -> None:
    get_logger(verbose=False).debug("quiet detail")
    get_logger(verbose=True).debug("loud detail")

    captured = capfd.readouterr()
    assert "quiet detail" not in captured.err
    assert "loud detail" in captured.err


def test_for_tool_tags_messages_with_tool_name(capfd) -> None:
    base = get_logger()
    tagged = base.for_tool("analyze_subscriptions")

    tagged.warning("fell back to mock data")
    base.info("untagged")

    err = capfd.readouterr().err
    assert "[analyze_subscriptions] fell back to mock data" in err
    assert "[analyze_subscriptions] untagged" not in err
    assert base.scope is None
