import re
import logging


def _getLogger(name):
    """
    Retrieve a logger instance. Checks if a handler is defined so we avoid the
    'No handlers could be found' message.
    """
    logger = logging.getLogger(name)
    # if not logging.root.handlers:
    #     logger.disabled = 1
    return logger


def extract_tag(source, tag_name, case_sensitive=True):
    """
    Return `(value, found)` for the text between the first `<tag_name>` and the
    first `</tag_name>` following it. When `case_sensitive` is False the tags
    are matched regardless of case, but the value is always sliced from the
    unmodified `source`, so the casing of the content is kept.

    Nested tags with the same name are not supported: the first open/close
    pair wins.
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    name = re.escape(tag_name)
    start = re.search("<%s>" % name, source, flags)
    if start is None:
        return "", False
    stop = re.compile("</%s>" % name, flags).search(source, start.end())
    if stop is None:
        return "", False
    return source[start.end():stop.start()], True


def take_param(source, tag_name):
    """
    Look `tag_name` up case-sensitively and, if that fails, retry once without
    regard to case. Some routers are not consistent about tag casing.
    """
    value, found = extract_tag(source, tag_name)
    if not found:
        value, found = extract_tag(source, tag_name, case_sensitive=False)
    return value, found
