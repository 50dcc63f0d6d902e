from datetime import datetime
import logging
from bson import ObjectId
from pymongo.errors import BulkWriteError, PyMongoError
from qbank import mongo

logger = logging.getLogger(__name__)

FILTER_FIELDS = ['type', 'subject', 'chapter', 'lesson', 'board', 'language']


class Question:
    """Question bank model for MCQ, CQ and SQ records"""

    @staticmethod
    def _prepare(question_data):
        question_data = dict(question_data)
        question_data.pop('_id', None)
        question_data['created_at'] = datetime.utcnow()
        question_data['updated_at'] = datetime.utcnow()
        question_data['is_active'] = True
        return question_data

    @staticmethod
    def create_question(question_data):
        """Create a new question"""
        question_data = Question._prepare(question_data)
        result = mongo.db.questions.insert_one(question_data)
        question_data['_id'] = result.inserted_id
        return question_data

    @staticmethod
    def bulk_create_questions(questions, batch_size=20):
        """
        Insert questions in batches.
        Returns dict with added/failed counts and per-batch errors.
        A failing batch does not stop the ones after it.
        """
        added = 0
        failed = 0
        errors = []

        for start in range(0, len(questions), batch_size):
            batch = [Question._prepare(q) for q in questions[start:start + batch_size]]
            try:
                result = mongo.db.questions.insert_many(batch, ordered=False)
                added += len(result.inserted_ids)
            except BulkWriteError as e:
                inserted = e.details.get('nInserted', 0)
                added += inserted
                failed += len(batch) - inserted
                errors.append(f"Batch starting at {start}: {len(batch) - inserted} question(s) rejected")
                logger.error(f"Bulk insert failed for batch at {start}: {e.details.get('writeErrors', [])[:1]}")
            except PyMongoError as e:
                failed += len(batch)
                errors.append(f"Batch starting at {start}: {str(e)}")
                logger.error(f"Bulk insert failed for batch at {start}: {str(e)}")

        logger.info(f"Bulk insert finished: {added} added, {failed} failed")
        return {'added': added, 'failed': failed, 'errors': errors}

    @staticmethod
    def find_by_id(question_id):
        """Find question by ID"""
        if isinstance(question_id, str):
            question_id = ObjectId(question_id)
        return mongo.db.questions.find_one({'_id': question_id, 'is_active': True})

    @staticmethod
    def get_questions(filters=None, limit=50, skip=0):
        """Get questions with pagination and optional filters"""
        query = {'is_active': True}

        if filters:
            for field in FILTER_FIELDS:
                if filters.get(field):
                    query[field] = filters[field]

        total = mongo.db.questions.count_documents(query)
        questions = list(mongo.db.questions.find(query).skip(skip).limit(limit).sort('created_at', -1))

        return questions, total

    @staticmethod
    def update_question(question_id, update_data):
        """Update question data"""
        if isinstance(question_id, str):
            question_id = ObjectId(question_id)

        update_data = dict(update_data)
        for field in ['_id', 'created_at', 'is_active']:
            update_data.pop(field, None)
        update_data['updated_at'] = datetime.utcnow()

        result = mongo.db.questions.update_one(
            {'_id': question_id, 'is_active': True},
            {'$set': update_data}
        )
        return result.modified_count > 0

    @staticmethod
    def delete_question(question_id):
        """Soft delete question"""
        if isinstance(question_id, str):
            question_id = ObjectId(question_id)

        result = mongo.db.questions.update_one(
            {'_id': question_id},
            {'$set': {'is_active': False, 'updated_at': datetime.utcnow()}}
        )
        return result.modified_count > 0
