"""AWS Lambda handler for event page extraction."""
import asyncio
import json
import logging
import os
import time
from typing import Dict, Any, Optional

from processor.engine import ExtractionEngine
from processor.models import EventRecord, ExtractionFailure
from processor.service import extract_from_snapshot, extract_from_url
from scraper.browser import BrowserSession


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def _request_method(event: Dict[str, Any]) -> Optional[str]:
    """HTTP method of an API Gateway (v1 or v2) or Function URL event."""
    if 'httpMethod' in event:
        return event['httpMethod']
    return event.get('requestContext', {}).get('http', {}).get('method')


def _parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    body = event.get('body')
    if body is None:
        return {}
    if isinstance(body, dict):
        return body
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _failure_response(failure: ExtractionFailure) -> Dict[str, Any]:
    if failure.kind.is_user_error:
        return _response(400, {
            'error': 'URL format error',
            'kind': failure.kind.value,
            'message': failure.detail
        })
    return _response(500, {
        'error': 'An error occurred while scraping',
        'kind': failure.kind.value,
        'message': failure.detail,
        'field': failure.field
    })


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for event extraction.

    Args:
        event: API Gateway / Function URL event with a JSON body
            {"url": "...", "html": "<optional rendered snapshot>"}
        context: Lambda context object

    Returns:
        Response dict with statusCode and JSON body
    """
    # Read configuration from environment variables
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_ms = int(os.environ.get('NAVIGATION_TIMEOUT_MS', '30000'))
    locale = os.environ.get('BROWSER_LOCALE', 'ms-MY')
    headless = os.environ.get('HEADLESS', 'true').lower() != 'false'
    executable_path = os.environ.get('CHROMIUM_EXECUTABLE_PATH') or None

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()

    method = _request_method(event)
    if method and method.upper() != 'POST':
        return _response(405, {'message': 'Method not allowed'})

    body = _parse_body(event)
    url = body.get('url')
    if not url or not isinstance(url, str):
        return _response(400, {'error': 'URL is required'})

    logger.info(
        f"Extraction requested",
        extra={
            'url': url,
            'timeout_ms': timeout_ms,
            'snapshot': 'html' in body
        }
    )

    try:
        engine = ExtractionEngine()
        html = body.get('html')
        if isinstance(html, str) and html:
            outcome = asyncio.run(extract_from_snapshot(url, html, engine=engine))
        else:
            session = BrowserSession(
                timeout_ms=timeout_ms,
                locale=locale,
                headless=headless,
                executable_path=executable_path
            )
            outcome = asyncio.run(extract_from_url(url, session=session, engine=engine))
    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Extraction failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _response(500, {
            'error': 'An error occurred while scraping',
            'message': str(e),
            'error_type': type(e).__name__
        })

    duration = time.time() - start_time

    if isinstance(outcome, EventRecord):
        logger.info(
            f"Extraction completed successfully",
            extra={'duration_seconds': round(duration, 2)}
        )
        return _response(200, outcome.to_dict())

    logger.warning(
        f"Extraction returned {outcome.kind.value}: {outcome.detail}",
        extra={'duration_seconds': round(duration, 2), 'field': outcome.field}
    )
    return _failure_response(outcome)
