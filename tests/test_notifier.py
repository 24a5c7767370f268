import logging

from actionpalette.services.notify.notifier import CollectingNotifier, LoggingNotifier


def test_collecting_notifier_forwards_to_any_notifier():
    downstream = CollectingNotifier()
    notifier = CollectingNotifier(forward=downstream)

    notifier.notify("skipped 1 prompt", "warn")

    assert [(n.message, n.level) for n in notifier.drain()] == [("skipped 1 prompt", "warn")]
    assert notifier.notices == []
    assert [(n.message, n.level) for n in downstream.notices] == [("skipped 1 prompt", "warn")]


def test_logging_notifier_maps_levels(caplog):
    notifier = LoggingNotifier(logger=logging.getLogger("tests.notify"))

    with caplog.at_level(logging.DEBUG, logger="tests.notify"):
        notifier.notify("careful", "warn")
        notifier.notify("broken", "error")

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.WARNING, "careful"),
        (logging.ERROR, "broken"),
    ]
