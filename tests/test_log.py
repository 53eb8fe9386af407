import io
from datetime import datetime

import pytest

from gamekit import log
from gamekit.log import StreamHandler, SysLogger

FIXED = datetime(2006, 1, 2, 15, 4, 5)
STAMP = "2006-01-02 15:04:05"


class Recorder:
    def __init__(self):
        self.lines = []
        self.closed = False

    def handle(self, data):
        self.lines.append(data)

    def close(self):
        self.closed = True


def test_info_line_format():
    buffer = io.BytesIO()
    logger = SysLogger(StreamHandler(buffer), clock=lambda: FIXED)
    logger.info("Go is best language!")
    assert buffer.getvalue() == b"2006-01-02 15:04:05 [INFO] Go is best language!\n"


@pytest.mark.parametrize(
    "method, level",
    [("debug", "DEBUG"), ("info", "INFO"), ("warn", "WARN"), ("error", "ERROR")],
)
def test_levels_and_spacing(method, level):
    buffer = io.BytesIO()
    logger = SysLogger(StreamHandler(buffer), clock=lambda: FIXED)
    getattr(logger, method)("a", 1)
    assert buffer.getvalue() == f"2006-01-02 15:04:05 [{level}] a 1\n".encode()


def test_formatted_variants():
    buffer = io.BytesIO()
    logger = SysLogger(StreamHandler(buffer), clock=lambda: FIXED)
    logger.debugf("new conn %s", "127.0.0.1")
    logger.errorf("listen: %v", "closed")
    assert buffer.getvalue() == (
        b"2006-01-02 15:04:05 [DEBUG] new conn 127.0.0.1\n"
        b"2006-01-02 15:04:05 [ERROR] listen: closed\n"
    )


def test_format_mismatch_does_not_raise():
    buffer = io.BytesIO()
    logger = SysLogger(StreamHandler(buffer), clock=lambda: FIXED)
    logger.warnf("value %d", "oops")
    assert buffer.getvalue() == b"2006-01-02 15:04:05 [WARN] value %d oops\n"


def test_close_closes_handler():
    recorder = Recorder()
    with SysLogger(recorder) as logger:
        logger.info("x")
    assert recorder.closed is True


def test_stream_handler_writes_bytes():
    buffer = io.BytesIO()
    SysLogger(StreamHandler(buffer), clock=lambda: FIXED).infof("%s-%s", "a", "b")
    assert buffer.getvalue() == b"2006-01-02 15:04:05 [INFO] a-b\n"


def test_module_functions_write_stdout(capsys):
    log.warn("hello", 3)
    out = capsys.readouterr().out
    assert out.endswith(" [WARN] hello 3\n")
    assert len(out) == len(STAMP) + len(" [WARN] hello 3\n")


def test_module_formatted_function(capsys):
    log.infof("running %s", "proxy")
    assert capsys.readouterr().out.endswith(" [INFO] running proxy\n")