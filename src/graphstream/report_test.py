import threading
import unittest

from hamcrest import assert_that, contains_exactly, empty, has_length, is_

from graphstream.report import Issue, Report


class ReportTest(unittest.TestCase):

    def test_empty(self):
        sut = Report()
        assert_that(sut.messages, is_(empty()))
        assert_that(sut.issues, is_(empty()))
        assert_that(sut.event_count, is_(0))
        assert_that(sut.text, is_(""))
        assert_that(sut.has_issues(), is_(False))

    def test_log_message(self):
        sut = Report()
        sut.log_message("one")
        sut.log_message("two")
        assert_that(sut.messages, contains_exactly("one", "two"))
        assert_that(sut.text, is_("one\ntwo"))

    def test_log_issue(self):
        sut = Report()
        error = IOError("gone")
        issue = Issue("connection lost", Issue.Level.SEVERE, error)
        sut.log_issue(issue)
        assert_that(sut.issues, contains_exactly(issue))
        assert_that(sut.messages, contains_exactly("SEVERE: connection lost"))
        assert_that(issue.exception, is_(error))

    def test_has_issues_respects_level(self):
        sut = Report()
        sut.log_issue(Issue("fyi", Issue.Level.INFO))
        assert_that(sut.has_issues(), is_(False))
        assert_that(sut.has_issues(Issue.Level.INFO), is_(True))
        sut.log_issue(Issue("hmm"))
        assert_that(sut.has_issues(), is_(True))
        assert_that(sut.has_issues(Issue.Level.CRITICAL), is_(False))

    def test_event_counter_is_thread_safe(self):
        sut = Report()

        def count():
            for _ in range(1000):
                sut.increment_event_counter()

        threads = [threading.Thread(target=count) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert_that(sut.event_count, is_(4000))

    def test_snapshots_are_immutable(self):
        sut = Report()
        sut.log_message("a")
        messages = sut.messages
        sut.log_message("b")
        assert_that(messages, has_length(1))
