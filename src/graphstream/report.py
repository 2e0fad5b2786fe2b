"""
The report collects diagnostics while a stream is read. It is owned by the caller and shared
with the stream reader, which may record messages, issues and a count of the events it decoded.
"""
import threading
import time
from enum import Enum


class Issue:
    """ A problem encountered while reading a stream. """

    class Level(Enum):
        INFO = 1
        WARNING = 2
        SEVERE = 3
        CRITICAL = 4

    def __init__(self, message, level=Level.WARNING, exception=None):
        self.message = message
        self.level = level
        self.exception = exception
        self.timestamp = time.time()

    def __repr__(self):
        return "Issue(%r, %s)" % (self.message, self.level.name)


class Report:
    """
    An append-only, thread-safe sink of diagnostic messages and issues.
    """

    def __init__(self, source=None):
        self.source = source
        self._lock = threading.Lock()
        self._messages = []
        self._issues = []
        self._event_count = 0

    def log_message(self, message):
        with self._lock:
            self._messages.append(str(message))

    def log_issue(self, issue: Issue):
        with self._lock:
            self._issues.append(issue)
            self._messages.append("%s: %s" % (issue.level.name, issue.message))

    def increment_event_counter(self, count=1):
        with self._lock:
            self._event_count += count
            return self._event_count

    @property
    def event_count(self):
        return self._event_count

    @property
    def messages(self):
        with self._lock:
            return tuple(self._messages)

    @property
    def issues(self):
        with self._lock:
            return tuple(self._issues)

    def has_issues(self, level=Issue.Level.WARNING):
        """ determines if any issue at or above the given level was logged """
        return any(i.level.value >= level.value for i in self.issues)

    @property
    def text(self):
        return "\n".join(self.messages)
