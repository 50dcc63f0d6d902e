from flask import request, jsonify
from bson.errors import InvalidId
import logging

from qbank.questions import bp
from qbank.models.question import Question, FILTER_FIELDS
from qbank.utils.decorators import admin_required
from qbank.utils.serializers import serialize_document
from qbank.utils.validators import QuestionValidator

logger = logging.getLogger(__name__)


def _find_or_none(question_id):
    try:
        return Question.find_by_id(question_id)
    except InvalidId:
        return None


@bp.route('', methods=['GET'])
@admin_required
def list_questions():
    """List saved questions with filters and pagination"""
    try:
        page = max(int(request.args.get('page', 1)), 1)
        per_page = min(max(int(request.args.get('per_page', 50)), 1), 200)
    except ValueError:
        return jsonify({'error': 'page and per_page must be integers'}), 400

    filters = {field: request.args.get(field) for field in FILTER_FIELDS if request.args.get(field)}
    questions, total = Question.get_questions(filters, limit=per_page, skip=(page - 1) * per_page)

    return jsonify({
        'questions': [serialize_document(q) for q in questions],
        'pagination': {
            'page': page,
            'per_page': per_page,
            'total': total,
            'pages': (total + per_page - 1) // per_page
        }
    }), 200


@bp.route('/<question_id>', methods=['GET'])
@admin_required
def get_question(question_id):
    question = _find_or_none(question_id)
    if not question:
        return jsonify({'error': 'Question not found'}), 404
    return jsonify({'question': serialize_document(question)}), 200


@bp.route('/<question_id>', methods=['PUT'])
@admin_required
def update_question(question_id):
    """Edit a saved question; the result must still validate"""
    question = _find_or_none(question_id)
    if not question:
        return jsonify({'error': 'Question not found'}), 404

    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    data.pop('type', None)
    merged = {**question, **data}
    is_valid, errors = QuestionValidator.validate(merged)
    if not is_valid:
        return jsonify({'error': 'Validation failed', 'errors': errors}), 400

    try:
        Question.update_question(question['_id'], data)
    except Exception as e:
        logger.error(f"Error updating question {question_id}: {str(e)}")
        return jsonify({'error': str(e)}), 500

    return jsonify({
        'message': 'Question updated successfully',
        'question': serialize_document(Question.find_by_id(question['_id']))
    }), 200


@bp.route('/<question_id>', methods=['DELETE'])
@admin_required
def delete_question(question_id):
    question = _find_or_none(question_id)
    if not question:
        return jsonify({'error': 'Question not found'}), 404

    Question.delete_question(question['_id'])
    return jsonify({'message': 'Question deleted successfully'}), 200
