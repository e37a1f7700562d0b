"""
One log line per API request: timing, status, process memory growth and, for
invoice generation, which document was produced.
"""
import json
import logging
import time

import psutil
from flask import g, request

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 5000
_LOGGED_HEADERS = ('Content-Type', 'Origin', 'User-Agent')


def _rss():
    try:
        return psutil.Process().memory_info().rss
    except psutil.Error as e:
        logger.debug(f"Could not read process memory: {e}")
        return None


class RequestLogger:
    @staticmethod
    def init_app(app):
        app.before_request(RequestLogger.before_request)
        app.after_request(RequestLogger.after_request)

    @staticmethod
    def before_request():
        g.request_started = time.perf_counter()
        g.request_rss = _rss()

    @staticmethod
    def after_request(response):
        started = g.pop('request_started', None)
        if started is None:
            return response
        duration_ms = (time.perf_counter() - started) * 1000

        entry = {
            'method': request.method,
            'path': request.path,
            'status': response.status_code,
            'duration_ms': round(duration_ms, 1),
            'remote_addr': request.remote_addr,
            'headers': {h: request.headers[h] for h in _LOGGED_HEADERS if h in request.headers},
        }

        start_rss, end_rss = g.pop('request_rss', None), _rss()
        if start_rss and end_rss and end_rss > start_rss:
            entry['memory_delta_mb'] = round((end_rss - start_rss) / (1024 * 1024), 3)

        if request.args:
            entry['query'] = request.args.to_dict()
        # invoice selectors are a handful of ids
        if request.is_json and (request.content_length or 0) < 1024:
            entry['body'] = request.get_json(silent=True)
        if 'X-Invoice-Document' in response.headers:
            entry['document'] = response.headers['X-Invoice-Document']
            entry['pages'] = response.headers.get('X-Invoice-Pages')

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400 or duration_ms > SLOW_REQUEST_MS:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, f"REQUEST {json.dumps(entry, default=str)}")
        return response
