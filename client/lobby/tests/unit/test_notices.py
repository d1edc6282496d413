import logging

from lobby.session.notices import LoggingNoticeSink, Notice, NoticeCode, NoticeLevel


class TestLoggingNoticeSink:
    def test_error_notice_logged_at_error(self, caplog):
        with caplog.at_level(logging.INFO):
            LoggingNoticeSink().notify(
                Notice(level=NoticeLevel.ERROR, code=NoticeCode.UNAUTHENTICATED, message="You need to login first!"),
            )
        [record] = [r for r in caplog.records if "notice" in r.getMessage()]
        assert record.levelno == logging.ERROR

    def test_warning_notice_logged_at_warning(self, caplog):
        with caplog.at_level(logging.INFO):
            LoggingNoticeSink().notify(
                Notice(level=NoticeLevel.WARNING, code=NoticeCode.ALREADY_IN_GAME, message="already in a game"),
            )
        assert any(r.levelno == logging.WARNING for r in caplog.records)
