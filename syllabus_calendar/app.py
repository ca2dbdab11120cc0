"""
Flask JSON API for the syllabus to calendar converter.

Endpoints:
- PDF upload and parsing
- Parser status
- Google Calendar OAuth and event sync
- .ics export
"""

import io
import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple

from flask import Flask, jsonify, request, send_file
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from . import __version__
from .errors import (
    CalendarSyncError, ConfigurationError, NotAuthenticatedError, PDFExtractionError
)
from .logging_setup import setup_logging
from .models import (
    CalendarEvent, deserialize_date, event_from_dict, result_to_dict, sync_result_to_dict
)
from .pdf_extractor import extract_text_from_bytes, is_likely_syllabus
from .services import ServiceContainer

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'pdf'}
ALLOWED_MIMETYPES = {'application/pdf', 'application/x-pdf', 'application/octet-stream'}


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed.

    Args:
        filename: Name of the uploaded file

    Returns:
        True if file extension is allowed, False otherwise
    """
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def error_response(message: str, status: int, **extra):
    """Build a JSON error envelope."""
    payload = {'success': False, 'error': message}
    payload.update(extra)
    return jsonify(payload), status


def parse_events(raw_events: Any) -> Tuple[Optional[List[CalendarEvent]], Optional[str]]:
    """Convert a JSON events list into CalendarEvents.

    Returns:
        (events, None) on success, or (None, error message)
    """
    if not isinstance(raw_events, list):
        return None, 'Events array is required'

    events = []
    for index, raw in enumerate(raw_events):
        if not isinstance(raw, dict):
            return None, f'Event {index} is not an object'
        try:
            events.append(event_from_dict(raw))
        except ValueError as e:
            return None, f'Invalid event {index}: {e}'
    return events, None


def _optional_form(name: str) -> Optional[str]:
    value = request.form.get(name, '').strip()
    return value or None


def create_app(container: Optional[ServiceContainer] = None) -> Flask:
    """Create the Flask application.

    Args:
        container: Services to use (defaults to one built from the environment)

    Returns:
        Configured Flask app
    """
    container = container or ServiceContainer()
    settings = container.settings
    setup_logging(settings.log_level)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_bytes
    app.extensions['syllabus_calendar'] = container

    max_mb = settings.max_upload_bytes // (1024 * 1024)

    @app.route('/')
    def index():
        """Describe the API."""
        return jsonify({
            'success': True,
            'message': 'Syllabus Calendar API',
            'version': __version__,
            'endpoints': {
                'health': '/api/health',
                'upload': '/api/upload (POST)',
                'parseStatus': '/api/parse/status',
                'googleCalendar': '/api/google-calendar',
                'exportIcs': '/api/export/ics (POST)',
            },
        })

    @app.route('/api/health')
    def health():
        return jsonify({
            'success': True,
            'status': 'ok',
            'timestamp': datetime.now().isoformat(),
        })

    @app.route('/api/upload', methods=['POST'])
    def upload():
        """Parse an uploaded syllabus PDF into calendar events.

        Form fields: ``file`` (required), ``courseName``, ``courseCode``,
        ``semester``, ``year`` and ``termStart`` (YYYY-MM-DD).
        """
        if 'file' not in request.files:
            return error_response('No file uploaded. Please choose a PDF file.', 400)

        file = request.files['file']
        if not file.filename:
            return error_response('No file selected. Please choose a PDF file.', 400)

        if not allowed_file(file.filename) or (
                file.mimetype and file.mimetype not in ALLOWED_MIMETYPES):
            return error_response('Invalid file type. Please upload a PDF file.', 400)

        year = _optional_form('year')
        if year is not None:
            if not year.isdigit():
                return error_response('Year must be a number', 400)
            year = int(year)

        term_start = _optional_form('termStart')
        if term_start is not None:
            try:
                term_start = deserialize_date(term_start)
            except ValueError:
                return error_response('termStart must be a date (YYYY-MM-DD)', 400)

        data = file.read()
        if len(data) > settings.max_upload_bytes:
            return error_response(f'File too large. Maximum size is {max_mb}MB.', 413)

        filename = secure_filename(file.filename)
        try:
            text = extract_text_from_bytes(data)
        except PDFExtractionError as e:
            logger.warning("Could not read %s: %s", filename, e)
            return error_response(str(e), 422)

        if not is_likely_syllabus(text):
            logger.info("%s does not look like a syllabus; parsing anyway", filename)

        result = container.parser.parse_syllabus(
            text,
            course_name=_optional_form('courseName'),
            course_code=_optional_form('courseCode'),
            semester=_optional_form('semester'),
            year=year,
            reference_date=term_start,
        )

        payload = result_to_dict(result)
        if result.success:
            payload['message'] = (
                f"Extracted {len(result.data.events)} events using {result.method.value} parsing"
            )
        return jsonify(payload)

    @app.route('/api/parse/status')
    def parse_status():
        """Report which parsing strategies are available."""
        status = container.llm_extractor.get_status()
        return jsonify({
            'success': True,
            'data': {
                'llm': status,
                'parsing': {
                    'pdf': True,
                    'llm': status['available'],
                    'regex': True,
                },
                'environment': {
                    'enableLLM': settings.enable_llm_parsing,
                    'model': settings.llm_model,
                    'maxTokens': settings.llm_max_tokens,
                    'temperature': settings.llm_temperature,
                },
            },
        })

    @app.route('/api/google-calendar/auth-url')
    def google_auth_url():
        try:
            auth_url = container.calendar_service.get_authorization_url()
        except ConfigurationError as e:
            return error_response(str(e), 500)
        return jsonify({'success': True, 'data': {'authUrl': auth_url}})

    @app.route('/api/google-calendar/auth-callback', methods=['POST'])
    def google_auth_callback():
        body = request.get_json(silent=True) or {}
        code = body.get('code')
        if not code:
            return error_response('Authorization code is required', 400)

        try:
            tokens = container.calendar_service.exchange_code(code)
        except ConfigurationError as e:
            return error_response(str(e), 500)
        except Exception:
            logger.exception("Error in auth callback")
            return error_response('Failed to authenticate with Google Calendar', 500)

        return jsonify({'success': True, 'data': {'tokens': tokens, 'authenticated': True}})

    @app.route('/api/google-calendar/status')
    def google_status():
        return jsonify({
            'success': True,
            'data': {
                'authenticated': container.calendar_service.has_valid_credentials(),
                'configured': settings.google_configured,
            },
        })

    @app.route('/api/google-calendar/calendars', methods=['GET', 'POST'])
    def google_calendars():
        """List calendars (GET) or create one (POST with ``name``)."""
        service = container.calendar_service
        try:
            if request.method == 'GET':
                return jsonify({'success': True, 'data': service.list_calendars()})

            body = request.get_json(silent=True) or {}
            name = body.get('name')
            if not name or not isinstance(name, str):
                return error_response('Calendar name is required', 400)
            calendar = service.create_calendar(name, body.get('description'))
            return jsonify({'success': True, 'data': calendar}), 201
        except NotAuthenticatedError as e:
            return error_response(str(e), 401)
        except CalendarSyncError as e:
            logger.error("Calendar request failed: %s", e)
            return error_response(str(e), 502)

    @app.route('/api/google-calendar/sync-events', methods=['POST'])
    def google_sync_events():
        """Insert events into a Google calendar.

        Body: ``events`` (list), optional ``calendarId`` and ``tokens``
        previously returned by the auth callback. Supplied tokens are used
        for this request only.
        """
        body = request.get_json(silent=True) or {}
        events, error = parse_events(body.get('events'))
        if error:
            return error_response(error, 400)

        tokens = body.get('tokens')
        service = None
        if isinstance(tokens, dict):
            try:
                service = container.calendar_service_for(tokens)
            except ValueError as e:
                return error_response(str(e), 400)

        try:
            result = container.sync_adapter(service).sync(
                events, body.get('calendarId') or 'primary', course=body.get('courseName')
            )
        except NotAuthenticatedError as e:
            return error_response(str(e), 401)

        if result.success:
            message = f"Successfully synced {result.synced_events} events to Google Calendar"
        else:
            message = f"Synced {result.synced_events} events, {result.failed_events} failed"
        return jsonify({
            'success': result.success,
            'data': sync_result_to_dict(result),
            'message': message,
        })

    @app.route('/api/export/ics', methods=['POST'])
    def export_ics():
        """Download events as an .ics file."""
        body = request.get_json(silent=True) or {}
        events, error = parse_events(body.get('events'))
        if error:
            return error_response(error, 400)

        course_name = body.get('courseName') or 'syllabus'
        generator = container.ics_generator()
        calendar = generator.generate_from_events(events, body.get('courseName'))
        filename = f"{secure_filename(course_name) or 'syllabus'}.ics"

        return send_file(
            io.BytesIO(generator.to_ics_bytes(calendar)),
            as_attachment=True,
            download_name=filename,
            mimetype='text/calendar',
        )

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(error):
        return error_response(f'File too large. Maximum size is {max_mb}MB.', 413)

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return error_response('Not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', 405)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return error_response('Internal server error', 500)

    return app


if __name__ == '__main__':
    # Run development server
    create_app().run(debug=True, port=5000)
