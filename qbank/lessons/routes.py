from flask import request, jsonify
from bson.errors import InvalidId
import logging

from qbank.lessons import bp
from qbank.models.lesson import LearnTopic, ChapterOverview
from qbank.utils.decorators import admin_required
from qbank.utils.serializers import serialize_document
from qbank.utils.lesson_parser import parse_lesson_text, parse_questions_only
from qbank.utils.overview_parser import parse_overview_text, parse_overview_chapters
from qbank.utils.validators import validate_lesson, validate_overview, validate_required_fields, sanitize_string
from qbank.imports.uploader import NO_QUESTIONS_MESSAGE

logger = logging.getLogger(__name__)


def _overview_dict(overview):
    return {'topics': [topic.to_dict() for topic in overview['topics']]}


# Lessons

@bp.route('/lessons/parse', methods=['POST'])
@admin_required
def parse_lesson():
    """Parse a lesson outline for preview"""
    data = request.get_json(silent=True) or {}
    try:
        chapters = [chapter.to_dict() for chapter in parse_lesson_text(data.get('text'))]
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    is_valid, errors = validate_lesson(chapters)
    return jsonify({
        'chapters': chapters,
        'validation': {'is_valid': is_valid, 'errors': errors}
    }), 200


@bp.route('/lessons', methods=['POST'])
@admin_required
def upload_lesson():
    """Store a lesson given as raw text or as already parsed chapters"""
    data = request.get_json(silent=True) or {}

    chapters = data.get('chapters')
    if chapters is None:
        try:
            chapters = [chapter.to_dict() for chapter in parse_lesson_text(data.get('text'))]
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

    is_valid, errors = validate_lesson(chapters)
    if not is_valid:
        return jsonify({'error': 'Lesson validation failed', 'errors': errors}), 400

    try:
        inserted_ids = LearnTopic.upload_lesson(chapters)
    except Exception as e:
        logger.error(f"Error uploading lesson: {str(e)}")
        return jsonify({'error': str(e)}), 500

    return jsonify({
        'message': f'{len(inserted_ids)} topic(s) uploaded',
        'topic_ids': [str(topic_id) for topic_id in inserted_ids]
    }), 201


@bp.route('/lessons', methods=['GET'])
@admin_required
def get_lessons():
    topics = LearnTopic.fetch_lessons(request.args.get('subject'))
    return jsonify({'topics': [serialize_document(topic) for topic in topics]}), 200


@bp.route('/lessons/topics', methods=['POST'])
@admin_required
def create_topic():
    """Insert an empty topic at a position within a chapter"""
    data = request.get_json(silent=True) or {}
    is_valid, missing = validate_required_fields(data, ['subject', 'chapter', 'title'])
    if not is_valid:
        return jsonify({'error': f"Missing required fields: {', '.join(missing)}"}), 400

    try:
        position = int(data.get('position', 0))
    except (TypeError, ValueError):
        return jsonify({'error': 'position must be an integer'}), 400
    if position < 0:
        return jsonify({'error': 'position must not be negative'}), 400

    topic = LearnTopic.create_topic_at_position(
        sanitize_string(data['subject'], 200),
        sanitize_string(data['chapter'], 200),
        sanitize_string(data['title'], 300),
        position
    )
    return jsonify({'message': 'Topic created successfully', 'topic': serialize_document(topic)}), 201


@bp.route('/lessons/subjects/rename', methods=['PUT'])
@admin_required
def rename_subject():
    data = request.get_json(silent=True) or {}
    is_valid, missing = validate_required_fields(data, ['old_name', 'new_name'])
    if not is_valid:
        return jsonify({'error': f"Missing required fields: {', '.join(missing)}"}), 400

    modified = LearnTopic.rename_subject(data['old_name'], sanitize_string(data['new_name'], 200))
    return jsonify({'message': 'Subject renamed', 'modified_count': modified}), 200


@bp.route('/lessons/chapters/rename', methods=['PUT'])
@admin_required
def rename_chapter():
    data = request.get_json(silent=True) or {}
    is_valid, missing = validate_required_fields(data, ['subject', 'old_name', 'new_name'])
    if not is_valid:
        return jsonify({'error': f"Missing required fields: {', '.join(missing)}"}), 400

    modified = LearnTopic.rename_chapter(data['subject'], data['old_name'], sanitize_string(data['new_name'], 200))
    return jsonify({'message': 'Chapter renamed', 'modified_count': modified}), 200


@bp.route('/lessons/topics/<topic_id>/questions', methods=['POST'])
@admin_required
def add_topic_questions(topic_id):
    """Parse review questions and append them to a topic"""
    data = request.get_json(silent=True) or {}
    questions = [question.to_dict() for question in parse_questions_only(data.get('text'))]
    if not questions:
        return jsonify({'error': NO_QUESTIONS_MESSAGE}), 422

    try:
        found = LearnTopic.add_questions_to_topic(topic_id, questions)
    except InvalidId:
        found = False
    if not found:
        return jsonify({'error': 'Topic not found'}), 404

    return jsonify({'message': f'{len(questions)} question(s) added', 'questions': questions}), 200


@bp.route('/lessons/topics/<topic_id>', methods=['DELETE'])
@admin_required
def delete_topic(topic_id):
    try:
        deleted = LearnTopic.delete_topic(topic_id)
    except InvalidId:
        deleted = False
    if not deleted:
        return jsonify({'error': 'Topic not found'}), 404
    return jsonify({'message': 'Topic deleted successfully'}), 200


# Chapter overviews

@bp.route('/overviews/parse', methods=['POST'])
@admin_required
def parse_overview():
    """
    Parse an overview for preview.

    With ``bulk`` set the text may hold several chapters (and both languages);
    each one comes back with its generated display name.
    """
    data = request.get_json(silent=True) or {}
    text = data.get('text')
    if not isinstance(text, str) or not text.strip():
        return jsonify({'error': 'No text provided'}), 400

    if data.get('bulk'):
        chapters = []
        for chapter in parse_overview_chapters(text, data.get('subject', '')):
            overview = _overview_dict(chapter['data'])
            is_valid, errors = validate_overview(overview)
            chapters.append({
                'name': chapter['name'],
                'data': overview,
                'validation': {'is_valid': is_valid, 'errors': errors}
            })
        if not chapters:
            return jsonify({'error': 'No chapters could be parsed. Please check your format.'}), 422
        return jsonify({'chapters': chapters}), 200

    overview = _overview_dict(parse_overview_text(text))
    is_valid, errors = validate_overview(overview)
    return jsonify({
        'data': overview,
        'validation': {'is_valid': is_valid, 'errors': errors}
    }), 200


@bp.route('/overviews', methods=['POST'])
@admin_required
def save_overview():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Overview name is required'}), 400

    is_valid, errors = validate_overview(data.get('data'))
    if not is_valid:
        return jsonify({'error': 'Overview validation failed', 'errors': errors}), 400

    overview = ChapterOverview.save_overview(name, data['data'], data.get('subject', ''))
    return jsonify({'message': 'Overview saved successfully', 'overview': serialize_document(overview)}), 201


@bp.route('/overviews', methods=['GET'])
@admin_required
def get_overviews():
    overviews = ChapterOverview.get_overviews(request.args.get('subject'))
    return jsonify({'overviews': [serialize_document(overview) for overview in overviews]}), 200


@bp.route('/overviews/<overview_id>', methods=['DELETE'])
@admin_required
def delete_overview(overview_id):
    try:
        deleted = ChapterOverview.delete_overview(overview_id)
    except InvalidId:
        deleted = False
    if not deleted:
        return jsonify({'error': 'Overview not found'}), 404
    return jsonify({'message': 'Overview deleted successfully'}), 200
