"""Tests for the HTTP API, with the database mocked out."""

from datetime import datetime
from io import BytesIO
from unittest.mock import MagicMock

from bson import ObjectId

from qbank import bcrypt


def insert_many_result(documents, ordered=True):
    return MagicMock(inserted_ids=[ObjectId() for _ in documents])


MCQ_TEXT = 'Subject: Physics\nChapter: Motion\n1. Unit of force?\na) Newton\nb) Joule\nAnswer: a'


def valid_mcq(text='Unit of force?'):
    return {
        'type': 'mcq', 'language': 'en', 'subject': 'Physics', 'chapter': 'Motion', 'lesson': '', 'board': '',
        'question_text': text,
        'options': [{'label': 'a', 'text': 'Newton'}, {'label': 'b', 'text': 'Joule'}],
        'correct_answer': 'a', 'explanation': '',
    }


class TestHealth:
    def test_health_reports_database(self, client, db):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['database'] == 'connected'


class TestAuth:
    def test_login_success(self, client, db):
        db.users.find_one.return_value = {
            '_id': ObjectId(),
            'username': 'admin',
            'password': bcrypt.generate_password_hash('admin123').decode('utf-8'),
            'user_type': 'admin',
        }

        response = client.post('/api/auth/login', json={'username': 'admin', 'password': 'admin123'})

        assert response.status_code == 200
        body = response.get_json()
        assert body['access_token']
        assert body['user']['username'] == 'admin'

    def test_login_wrong_password(self, client, db):
        db.users.find_one.return_value = {
            '_id': ObjectId(), 'username': 'admin',
            'password': bcrypt.generate_password_hash('admin123').decode('utf-8'),
        }
        response = client.post('/api/auth/login', json={'username': 'admin', 'password': 'nope'})
        assert response.status_code == 401

    def test_login_rejects_non_admin(self, client, db):
        db.users.find_one.return_value = {
            '_id': ObjectId(), 'username': 'pupil',
            'password': bcrypt.generate_password_hash('pw').decode('utf-8'),
            'user_type': 'student',
        }
        response = client.post('/api/auth/login', json={'username': 'pupil', 'password': 'pw'})
        assert response.status_code == 403

    def test_login_requires_fields(self, client, db):
        assert client.post('/api/auth/login', json={'username': 'admin'}).status_code == 400

    def test_me(self, client, admin_headers):
        response = client.get('/api/auth/me', headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json()['user']['user_type'] == 'admin'


class TestAccessControl:
    def test_token_required(self, client):
        assert client.get('/api/import/formats').status_code == 401

    def test_admin_required(self, client, student_headers):
        assert client.get('/api/import/formats', headers=student_headers).status_code == 403


class TestImportParse:
    def test_formats(self, client, admin_headers):
        body = client.get('/api/import/formats', headers=admin_headers).get_json()
        assert body['kinds'] == ['mcq', 'cq', 'sq', 'math']
        assert 'bn' in body['examples']['mcq']

    def test_parse_json_text(self, client, admin_headers):
        response = client.post('/api/import/mcq/parse', json={'text': MCQ_TEXT}, headers=admin_headers)

        assert response.status_code == 200
        body = response.get_json()
        assert body['kind'] == 'mcq'
        assert body['count'] == 1
        assert body['questions'][0]['correct_answer'] == 'a'
        assert body['validation'] == {'valid_count': 1, 'invalid': []}

    def test_validation_problems_are_reported(self, client, admin_headers):
        text = '1. Unit of force?\na) Newton\nb) Joule\nAnswer: c'
        body = client.post('/api/import/mcq/parse', json={'text': text}, headers=admin_headers).get_json()

        assert body['validation']['valid_count'] == 0
        errors = body['validation']['invalid'][0]['errors']
        assert 'Subject is required' in errors
        assert "Correct answer 'c' does not match any option" in errors

    def test_nothing_parsed(self, client, admin_headers):
        response = client.post('/api/import/cq/parse', json={'text': 'just some prose'}, headers=admin_headers)
        assert response.status_code == 422
        assert response.get_json()['error'] == 'No questions could be parsed. Please check your format.'

    def test_bad_requests(self, client, admin_headers):
        assert client.post('/api/import/essay/parse', json={'text': 'x'}, headers=admin_headers).status_code == 400
        assert client.post('/api/import/mcq/parse', json={}, headers=admin_headers).status_code == 400
        response = client.post('/api/import/mcq/parse', json={'text': MCQ_TEXT, 'language': 'fr'}, headers=admin_headers)
        assert response.status_code == 400

    def test_file_upload(self, client, admin_headers):
        data = {'file': (BytesIO(MCQ_TEXT.encode('utf-8')), 'questions.txt'), 'language': 'en'}
        response = client.post('/api/import/mcq/parse', data=data, headers=admin_headers,
                               content_type='multipart/form-data')

        assert response.status_code == 200
        assert response.get_json()['count'] == 1

    def test_unsupported_file_type(self, client, admin_headers):
        data = {'file': (BytesIO(b'x'), 'questions.xlsx')}
        response = client.post('/api/import/sq/parse', data=data, headers=admin_headers,
                               content_type='multipart/form-data')
        assert response.status_code == 400
        assert 'Unsupported file type' in response.get_json()['error']


class TestImportFixAndConfirm:
    def test_fix(self, client, admin_headers):
        broken = valid_mcq('Pick one: a) Red b) Blue Answer: b')
        broken['options'] = []
        response = client.post('/api/import/fix', json={'questions': [broken, valid_mcq()]}, headers=admin_headers)

        body = response.get_json()
        assert body['fixed_count'] == 1
        assert body['questions'][0]['question_text'] == 'Pick one:'
        assert body['questions'][0]['correct_answer'] == 'b'

    def test_export(self, client, admin_headers):
        response = client.post('/api/import/export', json={'questions': [valid_mcq()]}, headers=admin_headers)
        assert response.get_json()['text'].startswith('[Subject: Physics]\n[Chapter: Motion]\n1. Unit of force?')

    def test_confirm_saves_valid_records_in_batches(self, client, admin_headers, db):
        db.questions.insert_many.side_effect = insert_many_result
        invalid = valid_mcq()
        invalid['correct_answer'] = ''
        questions = [valid_mcq('One?'), valid_mcq('Two?'), valid_mcq('Three?'), invalid]

        response = client.post('/api/import/confirm', json={'questions': questions}, headers=admin_headers)

        assert response.status_code == 201
        body = response.get_json()
        assert body['added'] == 3
        assert body['failed'] == 1
        assert body['errors'] == ['Question 4: Correct answer is required']
        # TestingConfig.IMPORT_BATCH_SIZE is 2
        assert db.questions.insert_many.call_count == 2
        saved = db.questions.insert_many.call_args_list[0].args[0][0]
        assert saved['created_by']

    def test_confirm_with_nothing_valid(self, client, admin_headers, db):
        invalid = valid_mcq()
        invalid['subject'] = ''
        response = client.post('/api/import/confirm', json={'questions': [invalid]}, headers=admin_headers)
        assert response.status_code == 400
        db.questions.insert_many.assert_not_called()

    def test_non_object_records_are_rejected(self, client, admin_headers, db):
        for endpoint in ('fix', 'export', 'confirm'):
            response = client.post(f'/api/import/{endpoint}', json={'questions': ['not a record']},
                                   headers=admin_headers)
            assert response.status_code == 400
            assert response.get_json()['invalid'] == [{'index': 0, 'errors': ['Record must be an object']}]
        db.questions.insert_many.assert_not_called()

    def test_malformed_options_are_rejected_by_fix_and_export(self, client, admin_headers):
        broken = valid_mcq()
        broken['options'] = ['a', 'b']
        for endpoint in ('fix', 'export'):
            response = client.post(f'/api/import/{endpoint}', json={'questions': [broken]}, headers=admin_headers)
            assert response.status_code == 400
            assert response.get_json()['invalid'][0]['errors'] == ['Options must be a list of objects']

    def test_confirm_reports_malformed_options_and_parts(self, client, admin_headers, db):
        db.questions.insert_many.side_effect = insert_many_result
        bad_options = valid_mcq()
        bad_options['options'] = ['a', 'b']
        bad_parts = {'type': 'cq', 'question_text': 'Stem', 'parts': ['a. What?']}

        response = client.post('/api/import/confirm', json={'questions': [valid_mcq(), bad_options, bad_parts]},
                               headers=admin_headers)

        assert response.status_code == 201
        body = response.get_json()
        assert body['added'] == 1
        assert body['errors'] == [
            'Question 2: Options must be a list of objects',
            'Question 3: Parts must be a list of objects',
        ]

        response = client.post('/api/import/confirm', json={'questions': [bad_options]}, headers=admin_headers)
        assert response.status_code == 400
        assert response.get_json()['invalid'][0]['errors'] == ['Options must be a list of objects']

    def test_confirm_without_questions(self, client, admin_headers, db):
        assert client.post('/api/import/confirm', json={}, headers=admin_headers).status_code == 400
        assert client.post('/api/import/confirm', json=['x'], headers=admin_headers).status_code == 400


class TestQuestionBank:
    def test_list_with_pagination(self, client, admin_headers, db):
        question_id = ObjectId()
        db.questions.count_documents.return_value = 3
        db.questions.find.return_value.skip.return_value.limit.return_value.sort.return_value = [
            dict(valid_mcq(), _id=question_id, created_at=datetime(2024, 1, 1))
        ]

        response = client.get('/api/questions?subject=Physics&page=2&per_page=2', headers=admin_headers)

        body = response.get_json()
        assert body['questions'][0]['id'] == str(question_id)
        assert body['questions'][0]['created_at'] == '2024-01-01T00:00:00'
        assert body['pagination'] == {'page': 2, 'per_page': 2, 'total': 3, 'pages': 2}
        db.questions.find.return_value.skip.assert_called_once_with(2)

    def test_unknown_ids_give_404(self, client, admin_headers, db):
        db.questions.find_one.return_value = None
        assert client.get('/api/questions/not-an-id', headers=admin_headers).status_code == 404
        assert client.get(f'/api/questions/{ObjectId()}', headers=admin_headers).status_code == 404
        assert client.delete(f'/api/questions/{ObjectId()}', headers=admin_headers).status_code == 404

    def test_update_validates_merged_record(self, client, admin_headers, db):
        question_id = ObjectId()
        db.questions.find_one.return_value = dict(valid_mcq(), _id=question_id)
        db.questions.update_one.return_value = MagicMock(modified_count=1)

        response = client.put(f'/api/questions/{question_id}', json={'correct_answer': 'z'}, headers=admin_headers)
        assert response.status_code == 400

        response = client.put(f'/api/questions/{question_id}', json={'correct_answer': 'b'}, headers=admin_headers)
        assert response.status_code == 200
        assert db.questions.update_one.call_args.args[1]['$set']['correct_answer'] == 'b'


LESSON_TEXT = (
    'Subject: Physics  Chapter: Motion\n'
    '### Topic 1: Velocity\n'
    '**Definition:** Rate of change of displacement.'
)


class TestLessons:
    def test_parse(self, client, admin_headers):
        body = client.post('/api/lessons/parse', json={'text': LESSON_TEXT}, headers=admin_headers).get_json()

        assert body['chapters'][0]['topics'][0]['title'] == 'Velocity'
        assert body['validation'] == {'is_valid': True, 'errors': []}

    def test_parse_rejects_empty_text(self, client, admin_headers):
        response = client.post('/api/lessons/parse', json={'text': ''}, headers=admin_headers)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid input: text must be a non-empty string'

    def test_upload(self, client, admin_headers, db):
        db.learn_topics.find_one.return_value = None
        db.learn_topics.insert_many.side_effect = insert_many_result

        response = client.post('/api/lessons', json={'text': LESSON_TEXT}, headers=admin_headers)

        assert response.status_code == 201
        assert len(response.get_json()['topic_ids']) == 1
        assert db.learn_topics.insert_many.call_args.args[0][0]['order_index'] == 0

    def test_upload_rejects_malformed_chapters(self, client, admin_headers, db):
        for chapters in (['Motion'], [{'subject': 'Physics', 'chapter': 'Motion', 'topics': ['Velocity']}]):
            response = client.post('/api/lessons', json={'chapters': chapters}, headers=admin_headers)
            assert response.status_code == 400
            assert response.get_json()['error'] == 'Lesson validation failed'
        db.learn_topics.insert_many.assert_not_called()

    def test_create_topic_requires_fields(self, client, admin_headers, db):
        response = client.post('/api/lessons/topics', json={'subject': 'Physics'}, headers=admin_headers)
        assert response.status_code == 400

    def test_add_topic_questions(self, client, admin_headers, db):
        db.learn_topics.update_one.return_value = MagicMock(matched_count=1)
        topic_id = str(ObjectId())

        response = client.post(
            f'/api/lessons/topics/{topic_id}/questions',
            json={'text': 'Q1: Unit of speed?\na) m/s\nb) kg\nCorrect: a'},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.get_json()['questions'][0]['correct_answer'] == 'a'

        response = client.post(f'/api/lessons/topics/{topic_id}/questions', json={'text': 'nothing'}, headers=admin_headers)
        assert response.status_code == 422

    def test_rename_subject(self, client, admin_headers, db):
        db.learn_topics.update_many.return_value = MagicMock(modified_count=4)
        response = client.put('/api/lessons/subjects/rename', json={'old_name': 'Phy', 'new_name': ' Physics '},
                              headers=admin_headers)
        assert response.get_json()['modified_count'] == 4
        assert db.learn_topics.update_many.call_args.args[1]['$set']['subject'] == 'Physics'


class TestOverviews:
    def test_parse_single(self, client, admin_headers):
        body = client.post('/api/overviews/parse', json={'text': 'T-01: Work\nForce times distance.'},
                           headers=admin_headers).get_json()
        assert body['data']['topics'] == [{'id': 'T-01', 'title': 'Work', 'content': 'Force times distance.'}]
        assert body['validation']['is_valid'] is True

    def test_parse_bulk(self, client, admin_headers):
        text = 'Chapter 1: Motion\nT-01: Rest\nAt rest.\nChapter 2: Force\nT-01: Push\nA push.'
        body = client.post('/api/overviews/parse', json={'text': text, 'bulk': True, 'subject': 'Physics'},
                           headers=admin_headers).get_json()

        assert [c['name'] for c in body['chapters']] == ['Physics: Chapter 1: Motion', 'Physics: Chapter 2: Force']
        assert body['chapters'][1]['data']['topics'][0]['title'] == 'Push'

    def test_save_validates(self, client, admin_headers, db):
        response = client.post('/api/overviews', json={'name': 'Motion', 'data': {'topics': []}}, headers=admin_headers)
        assert response.status_code == 400

        db.chapter_overviews.insert_one.return_value = MagicMock(inserted_id=ObjectId())
        data = {'topics': [{'id': 'T-01', 'title': 'Work', 'content': 'Force times distance.'}]}
        response = client.post('/api/overviews', json={'name': 'Motion', 'data': data}, headers=admin_headers)
        assert response.status_code == 201

    def test_delete_unknown(self, client, admin_headers, db):
        db.chapter_overviews.delete_one.return_value = MagicMock(deleted_count=0)
        assert client.delete(f'/api/overviews/{ObjectId()}', headers=admin_headers).status_code == 404
