"""
Certificate and quiz-result routes, using a Flask Blueprint.
"""
from flask import Blueprint, request, jsonify, send_from_directory, current_app, url_for
import logging

from certificate import CertificateStore
from results import QuestionOutcome, summarize, share_message
from utils import json_error, parse_percent, is_number

main_bp = Blueprint('main', __name__)


def get_store() -> CertificateStore:
    return current_app.extensions['certificate_store']


@main_bp.route('/api/download', methods=['GET'])
def download_certificate():
    name = (request.args.get('name') or '').strip()
    raw_percent = (request.args.get('percent') or '').strip()
    if not name or not raw_percent:
        return json_error('Name and percent are required.', 400)
    percent = parse_percent(raw_percent)
    if percent is None:
        return json_error('Percent must be a number.', 400)

    try:
        cert = get_store().issue(name, percent)
    except Exception as e:
        logging.exception('[CERTIFICATE] Failed generating certificate for %r', name)
        return json_error(str(e) or 'Failed to generate certificate.', 500)

    file_url = url_for('main.serve_certificate', filename=cert.filename, _external=True)
    return jsonify({'fileUrl': file_url})


@main_bp.route('/certificates/<path:filename>', methods=['GET'])
def serve_certificate(filename):
    mimetype = 'application/pdf' if filename.lower().endswith('.pdf') else None
    return send_from_directory(get_store().directory, filename, mimetype=mimetype)


@main_bp.route('/api/results/summary', methods=['POST'])
def results_summary():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        payload = {}
    raw_result = payload.get('result')
    total_score = payload.get('totalScore')
    if not isinstance(raw_result, list) or not is_number(total_score):
        return json_error('A result list and a numeric totalScore are required.', 400)
    if not all(isinstance(item, dict) for item in raw_result):
        return json_error('Each result entry must be an object.', 400)

    time_spent = payload.get('timeSpent')
    if time_spent is not None and not is_number(time_spent):
        return json_error('timeSpent must be a number of seconds.', 400)

    summary = summarize(
        [QuestionOutcome.from_dict(item) for item in raw_result],
        total_score,
        total_questions=payload.get('totalQuestions'),
        time_spent_seconds=time_spent,
    )
    logging.info('[RESULTS] attempted=%d obtained=%s/%s status=%s',
                 summary.attempted, summary.obtained_score, summary.total_score, summary.status)
    return jsonify({
        'attempted': summary.attempted,
        'totalQuestions': summary.total_questions,
        'obtainedScore': summary.obtained_score,
        'totalScore': summary.total_score,
        'percent': round(summary.percent, 2),
        'status': summary.status,
        'actions': summary.actions,
        'timeSpent': summary.time_spent,
        'shareMessage': share_message(summary, current_app.config['QUIZ_TITLE']),
    })
