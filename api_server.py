from flask import Flask, request, jsonify, current_app
from werkzeug.exceptions import MethodNotAllowed
from flask_cors import CORS
import os
import json
from datetime import datetime
import traceback
from dotenv import load_dotenv

from utils import DRIVE_ID_PATTERN, DRIVE_ID_MIN_LENGTH
from drive_id_service import (
    InvalidRequestError,
    resolve_request_mode,
    run_batch_extraction,
    run_single_extraction,
)

load_dotenv()

ALLOWED_METHODS = ['POST', 'OPTIONS']
# Non-POST verbs reach the view and get a JSON 405
ROUTE_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': ', '.join(ALLOWED_METHODS),
    'Access-Control-Allow-Headers': 'Content-Type',
}

app = Flask(__name__)
app.config['DRIVE_ID_PATTERN'] = DRIVE_ID_PATTERN


# Registered before CORS(app) so it runs after flask-cors has set its headers
@app.after_request
def add_cors_allowances(response):
    for header, value in CORS_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


CORS(app, origins='*', send_wildcard=True, methods=ALLOWED_METHODS, allow_headers=['Content-Type'])


def reject_non_finite_constant(constant):
    raise ValueError(f"Non-finite JSON constant {constant} is not supported")


def parse_request_body():
    """Reads the raw request body once and decodes it as JSON. Empty body -> None.

    NaN and Infinity are rejected since they cannot be echoed back as valid JSON.
    """
    raw_body = request.get_data()
    if not raw_body or not raw_body.strip():
        return None
    return json.loads(raw_body.decode('utf-8'), parse_constant=reject_non_finite_constant)


def error_response(message, status_code):
    return jsonify({'status': 'error', 'message': message}), status_code


def method_not_allowed_response(method, allowed):
    print(f"[API_SERVER] Rejected {method} request to {request.path}")
    response = jsonify({
        'status': 'error',
        'message': f'Method {method} Not Allowed',
        'allowed': allowed,
    })
    response.headers['Allow'] = ', '.join(allowed)
    return response, 405


@app.errorhandler(MethodNotAllowed)
def handle_method_not_allowed(error):
    # Verbs outside ROUTE_METHODS are rejected by routing before the view runs
    if request.path.rstrip('/') == '/api':
        return method_not_allowed_response(request.method, ['POST'])
    return method_not_allowed_response(request.method, sorted(error.valid_methods or []))


@app.route('/api', methods=ROUTE_METHODS)
@app.route('/api/', methods=ROUTE_METHODS)
def extract_drive_id():
    if request.method == 'OPTIONS':
        return ('', 200)

    if request.method != 'POST':
        return method_not_allowed_response(request.method, ['POST'])

    try:
        body = parse_request_body()

        try:
            mode, payload = resolve_request_mode(body)
        except InvalidRequestError as e:
            print(f"[API_SERVER] Invalid request body: {e}")
            return error_response(str(e), 400)

        pattern = current_app.config['DRIVE_ID_PATTERN']

        if mode == 'batch':
            summary = run_batch_extraction(payload, pattern)
            return jsonify(summary.to_response()), 200

        google_drive_id = run_single_extraction(payload, pattern)
        if not google_drive_id:
            print(f"[API_SERVER] No Google Drive ID found in: {payload}")
            return error_response('Could not find a valid Google Drive ID in the provided URL.', 404)

        return jsonify({'status': 'success', 'googleDriveID': google_drive_id}), 200

    except Exception as e:
        print(f"[API_SERVER] EXCEPTION in extract_drive_id: {str(e)}")
        print(f"[API_SERVER] Traceback: {traceback.format_exc()}")
        return error_response('An internal server error occurred.', 500)


@app.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.now().isoformat(),
        'service': 'Google Drive ID Extractor API',
    })


if __name__ == '__main__':
    host = os.getenv('API_HOST', '0.0.0.0')
    port = int(os.getenv('API_PORT', '5001'))
    debug = os.getenv('API_DEBUG', '').lower() in ('1', 'true', 'yes')

    print(f"Starting Google Drive ID Extractor API server on {host}:{port} (min ID length {DRIVE_ID_MIN_LENGTH})")
    app.run(debug=debug, host=host, port=port)
