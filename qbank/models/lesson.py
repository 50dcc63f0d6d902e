from datetime import datetime
import logging
from bson import ObjectId
from qbank import mongo

logger = logging.getLogger(__name__)


class LearnTopic:
    """
    Lesson topics, stored one document per topic.

    Topics of a subject/chapter are ordered by ``order_index``; uploads append
    after the last existing topic and inserts shift later topics down.
    """

    @staticmethod
    def _next_order_index(subject, chapter):
        last = mongo.db.learn_topics.find_one(
            {'subject': subject, 'chapter': chapter},
            sort=[('order_index', -1)]
        )
        return (last.get('order_index', -1) + 1) if last else 0

    @staticmethod
    def upload_lesson(chapters):
        """Store every topic of the parsed chapters; returns inserted ids"""
        documents = []
        for chapter in chapters:
            subject = chapter.get('subject', '')
            chapter_name = chapter.get('chapter', '')
            order_index = LearnTopic._next_order_index(subject, chapter_name)

            for topic in chapter.get('topics', []):
                documents.append({
                    'subject': subject,
                    'chapter': chapter_name,
                    'title': topic.get('title', ''),
                    'description': topic.get('description', ''),
                    'subtopics': topic.get('subtopics', []),
                    'questions': [LearnTopic.to_stored_question(q) for q in topic.get('questions', [])],
                    'order_index': order_index,
                    'created_at': datetime.utcnow(),
                    'updated_at': datetime.utcnow()
                })
                order_index += 1

        if not documents:
            return []

        result = mongo.db.learn_topics.insert_many(documents)
        logger.info(f"Uploaded {len(documents)} lesson topic(s)")
        return result.inserted_ids

    @staticmethod
    def fetch_lessons(subject=None):
        """Get topics ordered by subject, chapter and position"""
        query = {}
        if subject:
            query['subject'] = subject
        return list(mongo.db.learn_topics.find(query).sort([
            ('subject', 1),
            ('chapter', 1),
            ('order_index', 1)
        ]))

    @staticmethod
    def create_topic_at_position(subject, chapter, title, position):
        """Insert an empty topic at ``position``, shifting later topics down"""
        mongo.db.learn_topics.update_many(
            {'subject': subject, 'chapter': chapter, 'order_index': {'$gte': position}},
            {'$inc': {'order_index': 1}}
        )

        topic_data = {
            'subject': subject,
            'chapter': chapter,
            'title': title,
            'description': '',
            'subtopics': [],
            'questions': [],
            'order_index': position,
            'created_at': datetime.utcnow(),
            'updated_at': datetime.utcnow()
        }
        result = mongo.db.learn_topics.insert_one(topic_data)
        topic_data['_id'] = result.inserted_id
        return topic_data

    @staticmethod
    def rename_subject(old_name, new_name):
        result = mongo.db.learn_topics.update_many(
            {'subject': old_name},
            {'$set': {'subject': new_name, 'updated_at': datetime.utcnow()}}
        )
        return result.modified_count

    @staticmethod
    def rename_chapter(subject, old_name, new_name):
        result = mongo.db.learn_topics.update_many(
            {'subject': subject, 'chapter': old_name},
            {'$set': {'chapter': new_name, 'updated_at': datetime.utcnow()}}
        )
        return result.modified_count

    @staticmethod
    def to_stored_question(question):
        """Flatten lettered options to option_a..option_d fields"""
        stored = {
            'question': question.get('question', ''),
            'correct_answer': question.get('correct_answer', ''),
            'explanation': question.get('explanation', '')
        }
        for option in question.get('options', []):
            label = option.get('label')
            if label in ('a', 'b', 'c', 'd'):
                stored[f'option_{label}'] = option.get('text', '')
        return stored

    @staticmethod
    def add_questions_to_topic(topic_id, questions):
        """Append review questions to an existing topic"""
        if isinstance(topic_id, str):
            topic_id = ObjectId(topic_id)

        stored = [LearnTopic.to_stored_question(q) for q in questions]
        result = mongo.db.learn_topics.update_one(
            {'_id': topic_id},
            {
                '$push': {'questions': {'$each': stored}},
                '$set': {'updated_at': datetime.utcnow()}
            }
        )
        return result.matched_count > 0

    @staticmethod
    def delete_topic(topic_id):
        if isinstance(topic_id, str):
            topic_id = ObjectId(topic_id)
        result = mongo.db.learn_topics.delete_one({'_id': topic_id})
        return result.deleted_count > 0


class ChapterOverview:
    """Chapter overviews keyed by display name"""

    @staticmethod
    def save_overview(name, data, subject=''):
        overview_data = {
            'name': name,
            'subject': subject,
            'data': data,
            'created_at': datetime.utcnow(),
            'updated_at': datetime.utcnow()
        }
        result = mongo.db.chapter_overviews.insert_one(overview_data)
        overview_data['_id'] = result.inserted_id
        return overview_data

    @staticmethod
    def get_overviews(subject=None):
        query = {'subject': subject} if subject else {}
        return list(mongo.db.chapter_overviews.find(query).sort('created_at', -1))

    @staticmethod
    def delete_overview(overview_id):
        if isinstance(overview_id, str):
            overview_id = ObjectId(overview_id)
        result = mongo.db.chapter_overviews.delete_one({'_id': overview_id})
        return result.deleted_count > 0
