from flask import request, jsonify, current_app
import logging

from qbank.imports import bp
from qbank.imports.uploader import QuestionImporter, NO_QUESTIONS_MESSAGE, PARSERS
from qbank.models.question import Question
from qbank.utils.decorators import admin_required, get_current_user_data
from qbank.utils.examples import FORMAT_EXAMPLES
from qbank.utils.formatter import format_records
from qbank.utils.question_fixer import detect_and_fix_mcq_options, detect_and_fix_cq
from qbank.utils.validators import QuestionValidator

logger = logging.getLogger(__name__)


def _questions_from_body(check_shape=True):
    """Return ``(questions, error_response)`` for the edited records in the body"""
    data = request.get_json(silent=True) or {}
    questions = data.get('questions') if isinstance(data, dict) else None
    if not isinstance(questions, list) or not questions:
        return None, (jsonify({'error': 'No questions provided'}), 400)

    malformed = []
    for index, question in enumerate(questions):
        if check_shape:
            errors = QuestionValidator.shape_errors(question)
        else:
            errors = [] if isinstance(question, dict) else ['Record must be an object']
        if errors:
            malformed.append({'index': index, 'errors': errors})

    if malformed:
        return None, (jsonify({'error': 'Malformed question records', 'invalid': malformed}), 400)
    return questions, None


@bp.route('/formats', methods=['GET'])
@admin_required
def get_supported_formats():
    """Example documents for every import kind"""
    return jsonify({
        'kinds': list(PARSERS),
        'file_types': current_app.config.get('ALLOWED_UPLOAD_EXTENSIONS', []),
        'examples': FORMAT_EXAMPLES
    }), 200


@bp.route('/<kind>/parse', methods=['POST'])
@admin_required
def parse_questions(kind):
    """Parse pasted text or an uploaded file into preview records"""
    if kind not in PARSERS:
        return jsonify({'error': f'Unsupported question kind: {kind}'}), 400

    try:
        importer = QuestionImporter()
        text, language = importer.read_source(request)
        result = importer.parse(kind, text, language)
    except ValueError as e:
        # ImportSourceError or an unreadable document
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error parsing {kind} import: {str(e)}")
        return jsonify({'error': str(e)}), 500

    if result['count'] == 0:
        return jsonify({'success': False, 'error': NO_QUESTIONS_MESSAGE}), 422

    return jsonify(result), 200


@bp.route('/fix', methods=['POST'])
@admin_required
def fix_questions():
    """Repair inline MCQ options and corrupted CQ stems"""
    questions, error = _questions_from_body()
    if error:
        return error

    fixed_questions = []
    fixed_count = 0
    for question in questions:
        if question.get('type') == 'mcq':
            question, changed = detect_and_fix_mcq_options(question)
        elif question.get('type') == 'cq':
            question, changed = detect_and_fix_cq(question)
        else:
            changed = False
        fixed_questions.append(question)
        fixed_count += int(changed)

    logger.info(f"Fixed {fixed_count} of {len(questions)} question(s)")
    return jsonify({'questions': fixed_questions, 'fixed_count': fixed_count}), 200


@bp.route('/export', methods=['POST'])
@admin_required
def export_questions():
    """Render records back to the import text format"""
    questions, error = _questions_from_body()
    if error:
        return error

    try:
        text = format_records(questions)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({'text': text}), 200


@bp.route('/confirm', methods=['POST'])
@admin_required
def confirm_import():
    """Validate the previewed records and save the valid ones"""
    # option and part shape problems are reported per record by the validator
    questions, error = _questions_from_body(check_shape=False)
    if error:
        return error

    report = QuestionValidator.validate_batch(questions)
    if not report['valid']:
        return jsonify({
            'error': 'None of the questions passed validation',
            'invalid': report['invalid']
        }), 400

    created_by = get_current_user_data().get('id')
    records = [dict(question, created_by=created_by) for question in report['valid']]

    try:
        result = Question.bulk_create_questions(
            records,
            batch_size=current_app.config.get('IMPORT_BATCH_SIZE', 20)
        )
    except Exception as e:
        logger.error(f"Error saving imported questions: {str(e)}")
        return jsonify({'error': str(e)}), 500

    result['failed'] += len(report['invalid'])
    result['errors'].extend(
        f"Question {entry['index'] + 1}: {'; '.join(entry['errors'])}"
        for entry in report['invalid']
    )
    return jsonify({
        'message': f"{result['added']} question(s) added",
        **result
    }), 201 if result['added'] else 200
